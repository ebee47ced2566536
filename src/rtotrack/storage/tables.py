"""ORM table for time-bounded records."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Index,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Declarative base for rtotrack tables."""


def _new_id() -> str:
    return uuid.uuid4().hex


class RecordRow(Base):
    """One fitness/tax/insurance/permit record.

    ``updated_at`` has no ``onupdate`` hook: the status refresh writes only
    the status column and must leave timestamps alone.
    """

    __tablename__ = "records"
    __table_args__ = (
        UniqueConstraint("kind", "reference_number", name="uq_records_kind_reference"),
        Index("ix_records_chain", "kind", "owner_identifier", "is_renewed"),
        Index("ix_records_kind_status", "kind", "status"),
        Index("ix_records_kind_balance", "kind", "balance"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_new_id)
    kind: Mapped[str] = mapped_column(String(40), nullable=False)
    owner_identifier: Mapped[str] = mapped_column(String(32), nullable=False)
    valid_from: Mapped[str] = mapped_column(String(10), nullable=False)
    valid_to: Mapped[str] = mapped_column(String(10), nullable=False)
    total_fee: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    paid: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    balance: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")
    is_renewed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    holder_name: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    mobile_number: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    reference_number: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    fee_breakup: Mapped[Optional[list]] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.now
    )

    def __repr__(self) -> str:
        return (
            f"<RecordRow {self.id} {self.kind} {self.owner_identifier} "
            f"{self.status} renewed={self.is_renewed}>"
        )
