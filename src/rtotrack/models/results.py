"""Result models for batch and reporting operations."""

from decimal import Decimal

from pydantic import BaseModel, Field


class RefreshSummary(BaseModel):
    """Outcome of one status refresh run."""

    total_scanned: int = 0
    updated_count: int = 0
    skipped_count: int = 0
    unparseable_count: int = 0
    duration_ms: int = 0
    by_kind: dict[str, int] = Field(
        default_factory=dict,
        description="Updated rows per record kind",
    )

    def merge(self, other: "RefreshSummary") -> "RefreshSummary":
        """Return a summary that adds ``other``'s counts to this one."""
        by_kind = dict(self.by_kind)
        for kind, count in other.by_kind.items():
            by_kind[kind] = by_kind.get(kind, 0) + count
        return RefreshSummary(
            total_scanned=self.total_scanned + other.total_scanned,
            updated_count=self.updated_count + other.updated_count,
            skipped_count=self.skipped_count + other.skipped_count,
            unparseable_count=self.unparseable_count + other.unparseable_count,
            duration_ms=self.duration_ms + other.duration_ms,
            by_kind=by_kind,
        )


class RecordStatistics(BaseModel):
    """Per-kind counts for dashboards and the ``stats`` command."""

    kind: str
    total: int = 0
    active: int = 0
    expiring_soon: int = 0
    expired: int = 0
    pending_payment_count: int = 0
    pending_payment_amount: Decimal = Decimal("0")

    @property
    def current(self) -> int:
        """Records that head a chain."""
        return self.active + self.expiring_soon + self.expired

    @property
    def pending_amount_display(self) -> str:
        return f"₹{self.pending_payment_amount:.2f}"
