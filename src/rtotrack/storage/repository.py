"""Repository for time-bounded record data access.

All queries against the ``records`` table live here so the core services
stay free of SQL.
"""

from datetime import datetime
from decimal import Decimal
from typing import NamedTuple, Optional

from sqlalchemy import bindparam, func, select, update
from sqlalchemy.orm import Session

from rtotrack.models.record import StatusType
from rtotrack.storage.tables import RecordRow


class StatusSnapshot(NamedTuple):
    """The columns the status refresh needs from each row."""

    id: str
    valid_to: str
    status: str
    is_renewed: bool


class StatusChange(NamedTuple):
    """A status write conditioned on the row still looking as observed."""

    id: str
    old_status: str
    is_renewed: bool
    new_status: str


class RecordRepository:
    """Repository for RecordRow operations."""

    def __init__(self, session: Session) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy session
        """
        self.session = session

    # --- Single rows ---

    def get(self, record_id: str) -> Optional[RecordRow]:
        """Get a record by id, or None."""
        return self.session.get(RecordRow, record_id)

    def add(self, row: RecordRow) -> RecordRow:
        """Stage a new row and flush so constraint errors surface here."""
        self.session.add(row)
        self.session.flush()
        return row

    def delete(self, row: RecordRow) -> None:
        self.session.delete(row)
        self.session.flush()

    # --- Renewal chains ---

    def retire_active(self, kind: str, owner_identifier: str, now: datetime) -> int:
        """Mark every non-renewed record of a chain as renewed and expired.

        Returns:
            Number of rows retired
        """
        stmt = (
            update(RecordRow)
            .where(
                RecordRow.kind == kind,
                RecordRow.owner_identifier == owner_identifier,
                RecordRow.is_renewed.is_(False),
            )
            .values(
                status=StatusType.EXPIRED.value,
                is_renewed=True,
                updated_at=now,
            )
            .execution_options(synchronize_session="fetch")
        )
        result = self.session.execute(stmt)
        return result.rowcount

    def history(self, kind: str, owner_identifier: str) -> list[RecordRow]:
        """All records of a chain, oldest first."""
        stmt = (
            select(RecordRow)
            .where(
                RecordRow.kind == kind,
                RecordRow.owner_identifier == owner_identifier,
            )
            .order_by(RecordRow.created_at.asc())
        )
        return list(self.session.scalars(stmt))

    def active_heads(self, kind: str, owner_identifier: str) -> list[RecordRow]:
        """Non-renewed records of a chain (normally exactly one)."""
        stmt = select(RecordRow).where(
            RecordRow.kind == kind,
            RecordRow.owner_identifier == owner_identifier,
            RecordRow.is_renewed.is_(False),
        )
        return list(self.session.scalars(stmt))

    # --- Listings ---

    def current(self, kind: str, status: Optional[StatusType] = None) -> list[RecordRow]:
        """Chain heads of a kind, newest first, optionally by cached status."""
        stmt = select(RecordRow).where(
            RecordRow.kind == kind,
            RecordRow.is_renewed.is_(False),
        )
        if status is not None:
            stmt = stmt.where(RecordRow.status == status.value)
        stmt = stmt.order_by(RecordRow.created_at.desc())
        return list(self.session.scalars(stmt))

    def pending_payments(self, kind: str) -> list[RecordRow]:
        """Records of a kind that still owe money, renewed or not."""
        stmt = (
            select(RecordRow)
            .where(RecordRow.kind == kind, RecordRow.balance > 0)
            .order_by(RecordRow.created_at.desc())
        )
        return list(self.session.scalars(stmt))

    # --- Statistics ---

    def count_all(self, kind: str) -> int:
        stmt = select(func.count()).select_from(RecordRow).where(RecordRow.kind == kind)
        return self.session.scalar(stmt) or 0

    def count_current_by_status(self, kind: str) -> dict[str, int]:
        """Counts of chain heads grouped by cached status."""
        stmt = (
            select(RecordRow.status, func.count())
            .where(RecordRow.kind == kind, RecordRow.is_renewed.is_(False))
            .group_by(RecordRow.status)
        )
        return {status: count for status, count in self.session.execute(stmt)}

    def pending_totals(self, kind: str) -> tuple[int, Decimal]:
        """Number of records with a balance and the sum owed."""
        stmt = select(func.count(), func.coalesce(func.sum(RecordRow.balance), 0)).where(
            RecordRow.kind == kind,
            RecordRow.balance > 0,
        )
        count, total = self.session.execute(stmt).one()
        return count or 0, Decimal(str(total or 0))

    # --- Status refresh ---

    def status_snapshots(self, kind: str) -> list[StatusSnapshot]:
        """Id, valid_to, status and renewal flag of every record of a kind."""
        stmt = select(
            RecordRow.id,
            RecordRow.valid_to,
            RecordRow.status,
            RecordRow.is_renewed,
        ).where(RecordRow.kind == kind)
        return [StatusSnapshot(*row) for row in self.session.execute(stmt)]

    def apply_status_changes(self, changes: list[StatusChange]) -> int:
        """Write only the status column, as one executemany.

        Each update matches on the observed status and renewal flag, so a
        row changed in between (e.g. retired by a renewal) is left alone.

        Returns:
            Rows actually updated, or len(changes) if the driver cannot tell
        """
        if not changes:
            return 0

        table = RecordRow.__table__
        stmt = (
            update(table)
            .where(table.c.id == bindparam("b_id"))
            .where(table.c.status == bindparam("b_old"))
            .where(table.c.is_renewed == bindparam("b_renewed"))
            .values(status=bindparam("b_new"))
        )
        params = [
            {
                "b_id": change.id,
                "b_old": change.old_status,
                "b_renewed": change.is_renewed,
                "b_new": change.new_status,
            }
            for change in changes
        ]
        result = self.session.execute(stmt, params)
        return result.rowcount if result.rowcount >= 0 else len(changes)
