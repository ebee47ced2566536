"""Tests for result models."""

from decimal import Decimal

from rtotrack.models import RecordStatistics, RefreshSummary


class TestRefreshSummary:
    def test_defaults(self):
        summary = RefreshSummary()
        assert summary.total_scanned == 0
        assert summary.by_kind == {}

    def test_merge(self):
        a = RefreshSummary(total_scanned=10, updated_count=2, skipped_count=8, by_kind={"tax": 2})
        b = RefreshSummary(
            total_scanned=5,
            updated_count=3,
            skipped_count=2,
            unparseable_count=1,
            by_kind={"tax": 1, "puc": 2},
        )
        merged = a.merge(b)
        assert merged.total_scanned == 15
        assert merged.updated_count == 5
        assert merged.skipped_count == 10
        assert merged.unparseable_count == 1
        assert merged.by_kind == {"tax": 3, "puc": 2}

    def test_merge_does_not_mutate(self):
        a = RefreshSummary(by_kind={"tax": 1})
        a.merge(RefreshSummary(by_kind={"tax": 1}))
        assert a.by_kind == {"tax": 1}


class TestRecordStatistics:
    def test_current(self):
        stats = RecordStatistics(kind="tax", total=9, active=3, expiring_soon=2, expired=1)
        assert stats.current == 6

    def test_pending_amount_display(self):
        stats = RecordStatistics(kind="tax", pending_payment_amount=Decimal("1250.5"))
        assert stats.pending_amount_display == "₹1250.50"
