"""Time-bounded record models."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def normalize_owner(value: str) -> str:
    """Uppercase and trim a vehicle number for chain lookups."""
    return value.strip().upper()


class StatusType(str, Enum):
    """Lifecycle status of a time-bounded record."""

    ACTIVE = "active"
    EXPIRING_SOON = "expiring_soon"
    EXPIRED = "expired"


class FeeItem(BaseModel):
    """Individual fee line item."""

    description: str = Field(..., min_length=1)
    amount: Decimal = Field(default=Decimal("0"))

    @property
    def amount_display(self) -> str:
        """Format amount for display."""
        return f"₹{self.amount:.2f}"


class RecordCreate(BaseModel):
    """Fields for a new record entering a renewal chain.

    Fee fields are optional here so that the payment ledger, not model
    parsing, decides how missing amounts are reported.
    """

    valid_from: str
    valid_to: str
    total_fee: Optional[Decimal] = None
    paid: Optional[Decimal] = None
    balance: Optional[Decimal] = None
    holder_name: Optional[str] = Field(default=None, max_length=120)
    mobile_number: Optional[str] = Field(default=None, max_length=20)
    reference_number: Optional[str] = Field(default=None, max_length=64)
    fee_breakup: list[FeeItem] = Field(default_factory=list)

    @field_validator("valid_from", "valid_to")
    @classmethod
    def strip_dates(cls, v: str) -> str:
        return v.strip()

    @field_validator("holder_name", "mobile_number", "reference_number")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None


class RecordUpdate(BaseModel):
    """Partial edit of an existing record. Unset fields are left alone."""

    valid_from: Optional[str] = None
    valid_to: Optional[str] = None
    total_fee: Optional[Decimal] = None
    paid: Optional[Decimal] = None
    balance: Optional[Decimal] = None
    holder_name: Optional[str] = Field(default=None, max_length=120)
    mobile_number: Optional[str] = Field(default=None, max_length=20)
    reference_number: Optional[str] = Field(default=None, max_length=64)
    fee_breakup: Optional[list[FeeItem]] = None

    @field_validator("valid_from", "valid_to")
    @classmethod
    def strip_dates(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v is not None else None

    @property
    def is_empty(self) -> bool:
        return not self.model_fields_set


class TimeBoundedRecord(BaseModel):
    """A stored record: one link of a (kind, owner) renewal chain."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    kind: str
    owner_identifier: str
    valid_from: str
    valid_to: str
    total_fee: Decimal
    paid: Decimal
    balance: Decimal
    status: StatusType
    is_renewed: bool = False
    holder_name: Optional[str] = None
    mobile_number: Optional[str] = None
    reference_number: Optional[str] = None
    fee_breakup: list[FeeItem] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    @field_validator("fee_breakup", mode="before")
    @classmethod
    def none_breakup(cls, v: object) -> object:
        return v or []

    @property
    def is_current(self) -> bool:
        """True for the active head of its chain."""
        return not self.is_renewed

    @property
    def has_pending_payment(self) -> bool:
        return self.balance > 0

    @property
    def status_display(self) -> str:
        """Return formatted status for display."""
        if self.is_renewed:
            return "Renewed"
        status_map = {
            StatusType.ACTIVE: "Active",
            StatusType.EXPIRING_SOON: "Expiring Soon",
            StatusType.EXPIRED: "Expired",
        }
        return status_map.get(self.status, str(self.status))

    def days_until_expiry(self, reference_date: Optional[date] = None) -> Optional[int]:
        """Days from ``reference_date`` (default today) to valid_to.

        Returns None when valid_to cannot be parsed.
        """
        from rtotrack.core.dates import parse_date
        from rtotrack.exceptions import InvalidDateFormatError

        try:
            valid_to = parse_date(self.valid_to)
        except InvalidDateFormatError:
            return None
        ref = reference_date or date.today()
        if isinstance(ref, datetime):
            ref = ref.date()
        return (valid_to - ref).days


class Fees(BaseModel):
    """Validated fee triple. ``balance`` always equals total_fee - paid."""

    model_config = ConfigDict(frozen=True)

    total_fee: Decimal
    paid: Decimal
    balance: Decimal
