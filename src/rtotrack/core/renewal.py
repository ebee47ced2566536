"""Renewal chains: insert a new record and retire the one it replaces."""

import logging
from datetime import date, datetime
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from rtotrack.core.dates import parse_range
from rtotrack.core.ledger import PaymentLedger
from rtotrack.core.status import classify
from rtotrack.exceptions import MissingOwnerIdentifierError, RenewalIncompleteError
from rtotrack.models import AppConfig, RecordCreate, TimeBoundedRecord, normalize_owner
from rtotrack.storage import Database, RecordRepository, RecordRow

logger = logging.getLogger(__name__)


class RenewalChain:
    """Creates records so that each (kind, vehicle) chain has one active head.

    Renewal retires the previous head unconditionally, even if it has not
    expired yet: a vehicle holds one current record of a kind at a time.
    Retired records keep their data; query the chain with
    ``RecordService.history``.
    """

    def __init__(self, database: Database, config: Optional[AppConfig] = None) -> None:
        self.database = database
        self.config = config or AppConfig()

    def renew(
        self,
        kind: str,
        owner_identifier: str,
        fields: RecordCreate,
        reference_date: Optional[date | datetime] = None,
    ) -> TimeBoundedRecord:
        """Insert ``fields`` as the new head of the chain.

        Validation happens before any write, so a rejected record leaves
        the chain untouched.

        Args:
            kind: Record kind, e.g. "fitness"
            owner_identifier: Vehicle number (normalized here again)
            fields: New record values
            reference_date: "Today" for the initial status; defaults to now

        Returns:
            The stored record

        Raises:
            RecordValidationError: On bad dates, fees or a blank vehicle number
            RenewalIncompleteError: Non-atomic mode only, if the insert fails
                after previous records were retired
            SQLAlchemyError: Storage failures in atomic mode (nothing written)
        """
        policy = self.config.policy_for(kind)
        owner = normalize_owner(owner_identifier)
        if not owner:
            raise MissingOwnerIdentifierError()

        fees = PaymentLedger.validate(fields.total_fee, fields.paid, fields.balance)
        _, valid_to = parse_range(fields.valid_from, fields.valid_to)

        now = datetime.now()
        status = classify(valid_to, reference_date or now, policy.expiring_soon_days)

        row = RecordRow(
            kind=policy.name,
            owner_identifier=owner,
            valid_from=fields.valid_from,
            valid_to=fields.valid_to,
            total_fee=fees.total_fee,
            paid=fees.paid,
            balance=fees.balance,
            status=status.value,
            is_renewed=False,
            holder_name=fields.holder_name,
            mobile_number=fields.mobile_number,
            reference_number=fields.reference_number,
            fee_breakup=[item.model_dump(mode="json") for item in fields.fee_breakup] or None,
            created_at=now,
            updated_at=now,
        )

        if self.config.atomic_renewal:
            with self.database.transaction() as session:
                repo = RecordRepository(session)
                retired = repo.retire_active(policy.name, owner, now)
                repo.add(row)
        else:
            retired = self._renew_without_transaction(row, now)

        logger.info(
            "Renewed %s %s: new=%s status=%s retired=%d",
            policy.name,
            owner,
            row.id,
            status.value,
            retired,
        )
        return TimeBoundedRecord.model_validate(row)

    create = renew

    def _renew_without_transaction(self, row: RecordRow, now: datetime) -> int:
        """Retire, commit, then insert in a second transaction.

        A failed insert leaves the chain without a head; it is reported,
        never repaired here.
        """
        with self.database.transaction() as session:
            retired = RecordRepository(session).retire_active(row.kind, row.owner_identifier, now)

        try:
            with self.database.transaction() as session:
                RecordRepository(session).add(row)
        except SQLAlchemyError as e:
            logger.error(
                "Insert failed after retiring %d %s record(s) for %s: %s",
                retired,
                row.kind,
                row.owner_identifier,
                e,
            )
            raise RenewalIncompleteError(row.kind, row.owner_identifier, retired) from e
        return retired
