"""Data models for rtotrack."""

from rtotrack.models.config import AppConfig
from rtotrack.models.record import (
    FeeItem,
    Fees,
    RecordCreate,
    RecordUpdate,
    StatusType,
    TimeBoundedRecord,
    normalize_owner,
)
from rtotrack.models.results import RecordStatistics, RefreshSummary

__all__ = [
    # Config
    "AppConfig",
    # Records
    "FeeItem",
    "Fees",
    "RecordCreate",
    "RecordUpdate",
    "StatusType",
    "TimeBoundedRecord",
    "normalize_owner",
    # Results
    "RecordStatistics",
    "RefreshSummary",
]
