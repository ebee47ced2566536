"""Custom exceptions for rtotrack."""

from decimal import Decimal
from typing import Optional


class RtoTrackError(Exception):
    """Base exception for all rtotrack errors."""

    def __init__(self, message: str, details: Optional[str] = None) -> None:
        self.message = message
        self.details = details
        super().__init__(message)


# ─────────────────────────────────────────────────────────────────────────────
# Config Errors
# ─────────────────────────────────────────────────────────────────────────────


class ConfigError(RtoTrackError):
    """Base class for configuration errors."""


class ConfigValidationError(ConfigError):
    """Configuration validation failed."""

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(
            f"Invalid configuration: {field}",
            reason,
        )


# ─────────────────────────────────────────────────────────────────────────────
# Record Validation Errors
# ─────────────────────────────────────────────────────────────────────────────


class RecordValidationError(RtoTrackError):
    """Base class for caller-correctable input errors.

    ``rule`` names the check that failed so callers can map it to a
    message or status code without parsing text.
    """

    rule: str = "invalid_record"


class InvalidDateFormatError(RecordValidationError):
    """Date string is not DD-MM-YYYY / DD/MM/YYYY."""

    rule = "invalid_date_format"

    def __init__(self, value: object, field: Optional[str] = None) -> None:
        self.value = value
        self.field = field
        label = f"{field} " if field else ""
        super().__init__(
            f"Invalid {label}date: {value!r}",
            "Use DD-MM-YYYY or DD/MM/YYYY with a four digit year.",
        )


class InvalidDateRangeError(RecordValidationError):
    """valid_from falls after valid_to."""

    rule = "invalid_date_range"

    def __init__(self, valid_from: str, valid_to: str) -> None:
        self.valid_from = valid_from
        self.valid_to = valid_to
        super().__init__(
            "Valid from date is after valid to date",
            f"{valid_from} > {valid_to}",
        )


class MissingFeeFieldsError(RecordValidationError):
    """One or more of total fee, paid, balance is missing."""

    rule = "missing_fee_fields"

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__(
            "Total fee, paid amount, and balance are required",
            f"Missing: {', '.join(missing)}",
        )


class OverpaymentNotAllowedError(RecordValidationError):
    """Paid amount exceeds the total fee."""

    rule = "overpayment_not_allowed"

    def __init__(self, total_fee: Decimal, paid: Decimal) -> None:
        self.total_fee = total_fee
        self.paid = paid
        super().__init__(
            "Paid amount cannot be greater than total fee",
            f"Paid {paid} exceeds total fee {total_fee}.",
        )


class NegativeBalanceNotAllowedError(RecordValidationError):
    """Balance is below zero."""

    rule = "negative_balance_not_allowed"

    def __init__(self, balance: Decimal) -> None:
        self.balance = balance
        super().__init__(
            "Balance amount cannot be negative",
            f"Balance given: {balance}",
        )


class NegativeAmountNotAllowedError(RecordValidationError):
    """Total fee or paid amount is below zero."""

    rule = "negative_amount_not_allowed"

    def __init__(self, field: str, amount: Decimal) -> None:
        self.field = field
        self.amount = amount
        super().__init__(
            f"{field.replace('_', ' ').capitalize()} cannot be negative",
            f"{field} given: {amount}",
        )


class InvalidAmountError(RecordValidationError):
    """Amount is not a usable number of rupees."""

    rule = "invalid_amount"

    def __init__(self, field: str, value: object, reason: Optional[str] = None) -> None:
        self.field = field
        self.value = value
        super().__init__(
            f"Invalid amount for {field}",
            reason or f"{value!r} is not a number.",
        )


class NoPendingPaymentError(RecordValidationError):
    """Mark-as-paid requested on a record that owes nothing."""

    rule = "no_pending_payment"

    def __init__(self, record_id: Optional[str] = None) -> None:
        self.record_id = record_id
        super().__init__(
            "No pending payment for this record",
            f"Record {record_id} has a zero balance." if record_id else None,
        )


class MissingOwnerIdentifierError(RecordValidationError):
    """Vehicle number is blank."""

    rule = "missing_owner_identifier"

    def __init__(self) -> None:
        super().__init__(
            "Vehicle number is required",
            "Pass the registration number the record belongs to.",
        )


# ─────────────────────────────────────────────────────────────────────────────
# Lookup Errors
# ─────────────────────────────────────────────────────────────────────────────


class RecordNotFoundError(RtoTrackError):
    """No record with the given id."""

    def __init__(self, record_id: str) -> None:
        self.record_id = record_id
        super().__init__(
            f"Record not found: {record_id}",
            "Check the record id with 'rtotrack history' or 'rtotrack list'.",
        )


class UnknownRecordKindError(RtoTrackError):
    """Record kind is not registered."""

    def __init__(self, kind: str, available: list[str]) -> None:
        self.kind = kind
        super().__init__(
            f"Unknown record kind: '{kind}'",
            f"Supported kinds: {', '.join(available)}",
        )


# ─────────────────────────────────────────────────────────────────────────────
# Consistency Errors
# ─────────────────────────────────────────────────────────────────────────────


class ConsistencyError(RtoTrackError):
    """Base class for partial-write errors that need manual repair."""


class RenewalIncompleteError(ConsistencyError):
    """Prior records were retired but the new record was not stored.

    The chain for ``(kind, owner_identifier)`` has no active head until an
    operator re-creates the record or reverts the retirement.
    """

    def __init__(self, kind: str, owner_identifier: str, retired_count: int) -> None:
        self.kind = kind
        self.owner_identifier = owner_identifier
        self.retired_count = retired_count
        super().__init__(
            f"Renewal incomplete for {kind} {owner_identifier}",
            f"{retired_count} record(s) were retired but the new record was not saved. "
            "The chain has no active record and needs manual reconciliation.",
        )
