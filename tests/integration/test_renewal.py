"""Integration tests for renewal chains against SQLite."""

from datetime import date, timedelta
from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError

from rtotrack.core.dates import format_date
from rtotrack.core.records import RecordService
from rtotrack.core.renewal import RenewalChain
from rtotrack.exceptions import (
    InvalidDateFormatError,
    InvalidDateRangeError,
    MissingFeeFieldsError,
    MissingOwnerIdentifierError,
    OverpaymentNotAllowedError,
    RenewalIncompleteError,
    UnknownRecordKindError,
)
from rtotrack.models import AppConfig, RecordCreate, StatusType
from rtotrack.storage import RecordRepository

OWNER = "CG04AB1234"


def _heads(database, kind="fitness", owner=OWNER):
    with database.session() as session:
        return RecordRepository(session).active_heads(kind, owner)


@pytest.fixture
def chain(database):
    return RenewalChain(database)


@pytest.fixture
def service(database):
    return RecordService(database)


class TestCreate:
    def test_first_record(self, chain, make_fields, today):
        record = chain.create("fitness", OWNER, make_fields(), reference_date=today)
        assert record.kind == "fitness"
        assert record.owner_identifier == OWNER
        assert record.status == StatusType.ACTIVE
        assert record.is_renewed is False
        assert len(record.id) == 32

    def test_owner_normalized(self, chain, make_fields, today):
        record = chain.create("fitness", "  cg04ab1234 ", make_fields(), reference_date=today)
        assert record.owner_identifier == OWNER

    def test_initial_status_uses_kind_window(self, chain, make_fields, today):
        valid_to = format_date(today + timedelta(days=20))
        fitness = chain.create("fitness", OWNER, make_fields(valid_to=valid_to), reference_date=today)
        permit = chain.create(
            "temporary_permit_other_state", OWNER, make_fields(valid_to=valid_to), reference_date=today
        )
        assert fitness.status == StatusType.EXPIRING_SOON
        assert permit.status == StatusType.ACTIVE

    def test_configured_window(self, database, make_fields, today):
        config = AppConfig(expiring_soon_days={"fitness": 5})
        valid_to = format_date(today + timedelta(days=20))
        record = RenewalChain(database, config).create(
            "fitness", OWNER, make_fields(valid_to=valid_to), reference_date=today
        )
        assert record.status == StatusType.ACTIVE

    def test_expired_on_creation(self, chain, make_fields, today):
        record = chain.create(
            "tax", OWNER, make_fields(valid_from="01-01-2024", valid_to="31-12-2024"), reference_date=today
        )
        assert record.status == StatusType.EXPIRED
        assert record.is_renewed is False

    def test_balance_recomputed(self, chain, make_fields, today):
        record = chain.create(
            "insurance", OWNER, make_fields(total_fee="1500", paid="500", balance="0"), reference_date=today
        )
        assert record.balance == Decimal("1000.00")

    def test_optional_fields_and_breakup(self, chain, make_fields, today):
        fields = make_fields(
            holder_name="R. Sahu",
            mobile_number="9876543210",
            reference_number="FC-2025-001",
            fee_breakup=[{"description": "Fitness fee", "amount": "600"}],
        )
        record = chain.create("fitness", OWNER, fields, reference_date=today)
        assert record.holder_name == "R. Sahu"
        assert record.fee_breakup[0].amount == Decimal("600")


class TestValidationBeforeWrite:
    def test_overpayment(self, chain, make_fields, database, today):
        chain.create("fitness", OWNER, make_fields(), reference_date=today)
        with pytest.raises(OverpaymentNotAllowedError):
            chain.renew("fitness", OWNER, make_fields(total_fee="1000", paid="1200", balance="-200"))
        assert len(_heads(database)) == 1

    def test_missing_fees(self, chain, database):
        fields = RecordCreate(valid_from="01-01-2025", valid_to="31-12-2025", total_fee=Decimal("10"))
        with pytest.raises(MissingFeeFieldsError):
            chain.renew("fitness", OWNER, fields)

    def test_bad_date(self, chain, make_fields):
        with pytest.raises(InvalidDateFormatError):
            chain.renew("fitness", OWNER, make_fields(valid_to="2025-12-31"))

    def test_inverted_range(self, chain, make_fields, database, today):
        chain.create("fitness", OWNER, make_fields(), reference_date=today)
        with pytest.raises(InvalidDateRangeError):
            chain.renew("fitness", OWNER, make_fields(valid_from="01-01-2026", valid_to="31-12-2025"))
        heads = _heads(database)
        assert len(heads) == 1
        assert heads[0].status == StatusType.ACTIVE.value

    def test_blank_owner(self, chain, make_fields):
        with pytest.raises(MissingOwnerIdentifierError):
            chain.renew("fitness", "   ", make_fields())

    def test_unknown_kind(self, chain, make_fields):
        with pytest.raises(UnknownRecordKindError):
            chain.renew("pollution", OWNER, make_fields())


class TestRenew:
    def test_retires_previous_head(self, chain, service, make_fields, today):
        six_months = format_date(today + timedelta(days=182))
        old = chain.create("fitness", OWNER, make_fields(valid_to=six_months), reference_date=today)
        assert old.status == StatusType.ACTIVE

        new = chain.renew(
            "fitness", OWNER, make_fields(valid_from="01-06-2025", valid_to="31-05-2026"), reference_date=today
        )

        old_now = service.get(old.id)
        assert old_now.is_renewed is True
        assert old_now.status == StatusType.EXPIRED
        history = service.history("fitness", OWNER)
        assert [r.id for r in history if not r.is_renewed] == [new.id]

    def test_leaves_historical_records_untouched(self, chain, service, make_fields, database, today):
        first = chain.create(
            "fitness", OWNER, make_fields(valid_from="01-01-2024", valid_to="31-12-2024"), reference_date=today
        )
        current = chain.renew("fitness", OWNER, make_fields(), reference_date=today)
        before = service.get(first.id)

        chain.renew("fitness", OWNER, make_fields(valid_from="01-01-2026", valid_to="31-12-2026"), reference_date=today)

        after = service.get(first.id)
        assert after.updated_at == before.updated_at
        assert after.is_renewed is True
        assert service.get(current.id).is_renewed is True

    @pytest.mark.parametrize("renewals", [1, 2, 5])
    def test_exactly_one_head(self, chain, make_fields, database, today, renewals):
        for _ in range(renewals):
            chain.renew("fitness", OWNER, make_fields(), reference_date=today)
        assert len(_heads(database)) == 1

    def test_chains_are_per_kind(self, chain, make_fields, database, today):
        chain.renew("fitness", OWNER, make_fields(), reference_date=today)
        chain.renew("tax", OWNER, make_fields(), reference_date=today)
        assert len(_heads(database, "fitness")) == 1
        assert len(_heads(database, "tax")) == 1

    def test_chains_are_per_vehicle(self, chain, make_fields, database, today):
        chain.renew("fitness", OWNER, make_fields(), reference_date=today)
        chain.renew("fitness", "CG04ZZ9999", make_fields(), reference_date=today)
        assert len(_heads(database)) == 1
        assert len(_heads(database, "fitness", "CG04ZZ9999")) == 1

    def test_renewing_unexpired_record(self, chain, service, make_fields, today):
        old = chain.create("insurance", OWNER, make_fields(valid_to="31-12-2030"), reference_date=today)
        chain.renew("insurance", OWNER, make_fields(), reference_date=today)
        assert service.get(old.id).status == StatusType.EXPIRED


class TestStorageFailure:
    """A duplicate reference number makes the insert fail after retirement."""

    def test_atomic_rolls_back(self, chain, service, make_fields, database, today):
        old = chain.create("fitness", OWNER, make_fields(reference_number="FC-1"), reference_date=today)
        with pytest.raises(IntegrityError):
            chain.renew("fitness", OWNER, make_fields(reference_number="FC-1"), reference_date=today)

        heads = _heads(database)
        assert [h.id for h in heads] == [old.id]
        assert service.get(old.id).status == StatusType.ACTIVE

    def test_non_atomic_reports_incomplete(self, database, service, make_fields, today):
        chain = RenewalChain(database, AppConfig(atomic_renewal=False))
        old = chain.create("fitness", OWNER, make_fields(reference_number="FC-1"), reference_date=today)

        with pytest.raises(RenewalIncompleteError) as exc:
            chain.renew("fitness", OWNER, make_fields(reference_number="FC-1"), reference_date=today)

        assert exc.value.kind == "fitness"
        assert exc.value.owner_identifier == OWNER
        assert exc.value.retired_count == 1
        assert isinstance(exc.value.__cause__, IntegrityError)
        assert _heads(database) == []
        assert service.get(old.id).is_renewed is True

    def test_non_atomic_success(self, database, make_fields, today):
        chain = RenewalChain(database, AppConfig(atomic_renewal=False))
        chain.create("fitness", OWNER, make_fields(), reference_date=today)
        chain.renew("fitness", OWNER, make_fields(), reference_date=today)
        assert len(_heads(database)) == 1
