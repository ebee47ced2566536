"""Record kind policy."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class KindPolicy(BaseModel):
    """How one kind of time-bounded record ages.

    ``expiring_soon_days`` is used when a record is created or its
    valid_to is edited; ``refresh_window_days`` is used by the periodic
    status refresh. The two differ for some kinds.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    label: str
    expiring_soon_days: int = Field(..., ge=0)
    refresh_window_days: int = Field(..., ge=0)
    term_years: Optional[int] = Field(
        default=None,
        ge=1,
        description="Default validity term used to suggest valid_to",
    )

    def with_overrides(
        self,
        expiring_soon_days: Optional[int] = None,
        refresh_window_days: Optional[int] = None,
    ) -> "KindPolicy":
        """Return a copy with configured window lengths applied."""
        update = {}
        if expiring_soon_days is not None:
            update["expiring_soon_days"] = expiring_soon_days
        if refresh_window_days is not None:
            update["refresh_window_days"] = refresh_window_days
        return self.model_copy(update=update) if update else self
