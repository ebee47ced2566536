"""Core services for rtotrack."""

from rtotrack.core.config import ConfigManager
from rtotrack.core.dates import parse_date
from rtotrack.core.ledger import PaymentLedger
from rtotrack.core.records import RecordService
from rtotrack.core.refresh import StatusRefreshJob
from rtotrack.core.renewal import RenewalChain
from rtotrack.core.scheduler import DailyScheduler
from rtotrack.core.status import classify

__all__ = [
    "ConfigManager",
    "DailyScheduler",
    "PaymentLedger",
    "RecordService",
    "RenewalChain",
    "StatusRefreshJob",
    "classify",
    "parse_date",
]
