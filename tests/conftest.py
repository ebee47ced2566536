"""Shared test fixtures for rtotrack."""

from datetime import date
from decimal import Decimal

import pytest

from rtotrack.models import RecordCreate
from rtotrack.storage import Database


@pytest.fixture
def temp_config_dir(tmp_path):
    """Provide isolated config directory for tests."""
    config_dir = tmp_path / ".config" / "rtotrack"
    config_dir.mkdir(parents=True)
    return config_dir


@pytest.fixture
def database():
    """In-memory SQLite database with tables created."""
    db = Database("sqlite://")
    db.create_all()
    yield db
    db.dispose()


@pytest.fixture
def today():
    """Fixed reference date for status checks."""
    return date(2025, 6, 1)


@pytest.fixture
def make_fields():
    """Build RecordCreate values with sensible defaults."""

    def _make(
        valid_from: str = "01-01-2025",
        valid_to: str = "31-12-2025",
        total_fee: str = "1000",
        paid: str = "1000",
        balance: str = "0",
        **extra,
    ) -> RecordCreate:
        return RecordCreate(
            valid_from=valid_from,
            valid_to=valid_to,
            total_fee=Decimal(total_fee),
            paid=Decimal(paid),
            balance=Decimal(balance),
            **extra,
        )

    return _make
