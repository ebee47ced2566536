"""Record edits, payments, deletion and read views."""

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from rtotrack.core.dates import parse_range
from rtotrack.core.ledger import PaymentLedger
from rtotrack.core.status import classify
from rtotrack.exceptions import RecordNotFoundError
from rtotrack.models import (
    AppConfig,
    Fees,
    RecordStatistics,
    RecordUpdate,
    StatusType,
    TimeBoundedRecord,
    normalize_owner,
)
from rtotrack.storage import Database, RecordRepository, RecordRow

logger = logging.getLogger(__name__)

_OPTIONAL_TEXT = ("holder_name", "mobile_number", "reference_number")


def _fees_of(row: RecordRow) -> Fees:
    return Fees(total_fee=row.total_fee, paid=row.paid, balance=row.balance)


def _to_model(row: RecordRow) -> TimeBoundedRecord:
    return TimeBoundedRecord.model_validate(row)


class RecordService:
    """Operations on stored records other than creation.

    Creation goes through RenewalChain so that chains stay consistent.
    """

    def __init__(self, database: Database, config: Optional[AppConfig] = None) -> None:
        self.database = database
        self.config = config or AppConfig()

    def get(self, record_id: str) -> TimeBoundedRecord:
        """Fetch one record.

        Raises:
            RecordNotFoundError: If no record has this id
        """
        with self.database.session() as session:
            row = RecordRepository(session).get(record_id)
            if row is None:
                raise RecordNotFoundError(record_id)
            return _to_model(row)

    def update(
        self,
        record_id: str,
        changes: RecordUpdate,
        reference_date: Optional[date | datetime] = None,
    ) -> TimeBoundedRecord:
        """Edit dates, fees or descriptive fields of a record.

        The balance is recomputed from total fee and paid. Status is
        recomputed when valid_to changes, except for renewed records,
        which stay expired. Chain membership and the renewal flag are
        never changed here.

        Raises:
            RecordNotFoundError: If no record has this id
            RecordValidationError: If the edited values are invalid
        """
        with self.database.transaction() as session:
            row = RecordRepository(session).get(record_id)
            if row is None:
                raise RecordNotFoundError(record_id)

            valid_from = row.valid_from if changes.valid_from is None else changes.valid_from
            valid_to = row.valid_to if changes.valid_to is None else changes.valid_to
            if changes.valid_from is not None or changes.valid_to is not None:
                _, valid_to_date = parse_range(valid_from, valid_to)
                row.valid_from = valid_from
                if valid_to != row.valid_to:
                    row.valid_to = valid_to
                    if not row.is_renewed:
                        policy = self.config.policy_for(row.kind)
                        row.status = classify(
                            valid_to_date,
                            reference_date or datetime.now(),
                            policy.expiring_soon_days,
                        ).value

            if any(v is not None for v in (changes.total_fee, changes.paid, changes.balance)):
                fees = PaymentLedger.recompute(
                    _fees_of(row),
                    total_fee=changes.total_fee,
                    paid=changes.paid,
                    balance=changes.balance,
                )
                row.total_fee, row.paid, row.balance = fees.total_fee, fees.paid, fees.balance

            for field in _OPTIONAL_TEXT:
                if field in changes.model_fields_set:
                    value = getattr(changes, field)
                    setattr(row, field, (value or "").strip() or None)
            if changes.fee_breakup is not None:
                row.fee_breakup = [item.model_dump(mode="json") for item in changes.fee_breakup] or None

            row.updated_at = datetime.now()
            session.flush()
            logger.info("Updated %s %s (%s)", row.kind, row.id, row.status)
            return _to_model(row)

    def mark_as_paid(self, record_id: str) -> TimeBoundedRecord:
        """Settle the outstanding balance of a record.

        Raises:
            RecordNotFoundError: If no record has this id
            NoPendingPaymentError: If the balance is already zero
        """
        with self.database.transaction() as session:
            row = RecordRepository(session).get(record_id)
            if row is None:
                raise RecordNotFoundError(record_id)
            fees = PaymentLedger.settle(_fees_of(row), record_id)
            row.paid, row.balance = fees.paid, fees.balance
            row.updated_at = datetime.now()
            session.flush()
            logger.info("Marked %s %s as paid (%s)", row.kind, row.id, fees.total_fee)
            return _to_model(row)

    def delete(self, record_id: str) -> TimeBoundedRecord:
        """Remove a record. An administrative override: the chain is not repaired.

        Deleting an active head leaves its chain with no current record
        until the next renewal.

        Returns:
            The deleted record

        Raises:
            RecordNotFoundError: If no record has this id
        """
        with self.database.transaction() as session:
            repo = RecordRepository(session)
            row = repo.get(record_id)
            if row is None:
                raise RecordNotFoundError(record_id)
            deleted = _to_model(row)
            repo.delete(row)
        logger.warning("Deleted %s record %s for %s", deleted.kind, deleted.id, deleted.owner_identifier)
        return deleted

    def history(self, kind: str, owner_identifier: str) -> list[TimeBoundedRecord]:
        """Every record of a chain, oldest first."""
        policy = self.config.policy_for(kind)
        with self.database.session() as session:
            rows = RecordRepository(session).history(policy.name, normalize_owner(owner_identifier))
            return [_to_model(row) for row in rows]

    def head(self, kind: str, owner_identifier: str) -> Optional[TimeBoundedRecord]:
        """The current record of a chain, or None if it has none.

        More than one head means a partial write left the chain
        inconsistent; the newest is returned and a warning logged.
        """
        policy = self.config.policy_for(kind)
        owner = normalize_owner(owner_identifier)
        with self.database.session() as session:
            heads = RecordRepository(session).active_heads(policy.name, owner)
            if not heads:
                return None
            if len(heads) > 1:
                logger.warning("%s chain for %s has %d active records", policy.name, owner, len(heads))
            return _to_model(max(heads, key=lambda row: row.created_at))

    def current(
        self,
        kind: str,
        status: Optional[StatusType] = None,
    ) -> list[TimeBoundedRecord]:
        """Chain heads of a kind; renewed records never appear here."""
        policy = self.config.policy_for(kind)
        with self.database.session() as session:
            rows = RecordRepository(session).current(policy.name, status)
            return [_to_model(row) for row in rows]

    def pending_payments(self, kind: str) -> list[TimeBoundedRecord]:
        """Records of a kind with a balance still owed."""
        policy = self.config.policy_for(kind)
        with self.database.session() as session:
            rows = RecordRepository(session).pending_payments(policy.name)
            return [_to_model(row) for row in rows]

    def statistics(self, kind: str) -> RecordStatistics:
        """Status counts over chain heads plus pending payment totals."""
        policy = self.config.policy_for(kind)
        with self.database.session() as session:
            repo = RecordRepository(session)
            by_status = repo.count_current_by_status(policy.name)
            pending_count, pending_amount = repo.pending_totals(policy.name)
            return RecordStatistics(
                kind=policy.name,
                total=repo.count_all(policy.name),
                active=by_status.get(StatusType.ACTIVE.value, 0),
                expiring_soon=by_status.get(StatusType.EXPIRING_SOON.value, 0),
                expired=by_status.get(StatusType.EXPIRED.value, 0),
                pending_payment_count=pending_count,
                pending_payment_amount=pending_amount.quantize(Decimal("0.01")),
            )
