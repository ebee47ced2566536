"""Application configuration model."""

from datetime import time
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from rtotrack.exceptions import UnknownRecordKindError
from rtotrack.kinds import KindPolicy, get_kind


class AppConfig(BaseModel):
    """Settings read from config.toml."""

    # Schema version for future migrations
    version: int = Field(default=1, description="Config schema version")

    # None means the default SQLite file in the user data dir
    database_url: Optional[str] = None

    # Retire and insert in one transaction. Disable only for stores that
    # cannot run multi-statement transactions.
    atomic_renewal: bool = True

    # Wall-clock time for the daily status refresh
    refresh_time: time = Field(default=time(0, 0))
    refresh_batch_size: int = Field(default=500, ge=1, le=10_000)

    # Per-kind window overrides, in days
    expiring_soon_days: dict[str, int] = Field(default_factory=dict)
    refresh_window_days: dict[str, int] = Field(default_factory=dict)

    @field_validator("expiring_soon_days", "refresh_window_days")
    @classmethod
    def validate_windows(cls, v: dict[str, int]) -> dict[str, int]:
        """Check override keys are known kinds and windows are non-negative."""
        normalized = {}
        for name, days in v.items():
            try:
                kind = get_kind(name).name
            except UnknownRecordKindError as e:
                raise ValueError(f"{e.message}. {e.details}") from e
            if days < 0:
                raise ValueError(f"Window for '{name}' must be zero or more days")
            normalized[kind] = days
        return normalized

    def policy_for(self, kind: str) -> KindPolicy:
        """Return the kind's policy with configured windows applied."""
        policy = get_kind(kind)
        return policy.with_overrides(
            expiring_soon_days=self.expiring_soon_days.get(policy.name),
            refresh_window_days=self.refresh_window_days.get(policy.name),
        )
