"""Persistence for time-bounded records."""

from rtotrack.storage.database import Database
from rtotrack.storage.repository import RecordRepository
from rtotrack.storage.tables import Base, RecordRow

__all__ = [
    "Base",
    "Database",
    "RecordRepository",
    "RecordRow",
]
