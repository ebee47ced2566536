"""Fee, paid and balance validation."""

import logging
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from rtotrack.exceptions import (
    InvalidAmountError,
    MissingFeeFieldsError,
    NegativeAmountNotAllowedError,
    NegativeBalanceNotAllowedError,
    NoPendingPaymentError,
    OverpaymentNotAllowedError,
)
from rtotrack.models.record import Fees

logger = logging.getLogger(__name__)

Amount = Union[Decimal, int, float, str]

_CENTS = Decimal("0.01")
# NUMERIC(12, 2) holds ten integer digits
_MAX_AMOUNT = Decimal("9999999999.99")


def _to_decimal(field: str, value: Amount) -> Decimal:
    """Coerce an amount to a two-place Decimal without rounding.

    Raises:
        InvalidAmountError: Not a number, finer than paise, or too large
    """
    if isinstance(value, bool):
        raise InvalidAmountError(field, value)
    try:
        # str() first so floats like 0.1 don't carry binary noise
        amount = Decimal(str(value)) if not isinstance(value, Decimal) else value
        if not amount.is_finite():
            raise InvalidAmountError(field, value)
        if abs(amount) > _MAX_AMOUNT:
            raise InvalidAmountError(field, value, f"Amounts are limited to {_MAX_AMOUNT}.")
        quantized = amount.quantize(_CENTS)
    except (InvalidOperation, ValueError):
        raise InvalidAmountError(field, value)
    if quantized != amount:
        raise InvalidAmountError(field, value, "Amounts may have at most two decimal places.")
    return quantized


class PaymentLedger:
    """Validates and normalizes the fee triple of a record.

    The ledger never trusts a caller-supplied balance: it is checked for
    sign and then replaced by ``total_fee - paid``.
    """

    @staticmethod
    def validate(
        total_fee: Optional[Amount],
        paid: Optional[Amount],
        balance: Optional[Amount],
    ) -> Fees:
        """Validate a fee triple for a new record.

        Rules are checked in order: all present, no overpayment, balance
        not negative, amounts not negative.

        Returns:
            Fees with balance recomputed as total_fee - paid

        Raises:
            MissingFeeFieldsError: If any of the three is None
            OverpaymentNotAllowedError: If paid > total_fee
            NegativeBalanceNotAllowedError: If balance < 0
            NegativeAmountNotAllowedError: If total_fee or paid < 0
            InvalidAmountError: If a value is not a number
        """
        supplied = {"total_fee": total_fee, "paid": paid, "balance": balance}
        missing = [name for name, value in supplied.items() if value is None]
        if missing:
            raise MissingFeeFieldsError(missing)

        total = _to_decimal("total_fee", total_fee)
        paid_amt = _to_decimal("paid", paid)
        given_balance = _to_decimal("balance", balance)

        if paid_amt > total:
            raise OverpaymentNotAllowedError(total, paid_amt)
        if given_balance < 0:
            raise NegativeBalanceNotAllowedError(given_balance)
        if total < 0:
            raise NegativeAmountNotAllowedError("total_fee", total)
        if paid_amt < 0:
            raise NegativeAmountNotAllowedError("paid", paid_amt)

        fees = Fees(total_fee=total, paid=paid_amt, balance=total - paid_amt)
        if fees.balance != given_balance:
            logger.debug(
                "Balance %s replaced by computed %s (total=%s paid=%s)",
                given_balance,
                fees.balance,
                total,
                paid_amt,
            )
        return fees

    @classmethod
    def recompute(
        cls,
        current: Fees,
        total_fee: Optional[Amount] = None,
        paid: Optional[Amount] = None,
        balance: Optional[Amount] = None,
    ) -> Fees:
        """Apply an edit to stored fees.

        Unchanged fields keep their stored value. ``balance``, if given, is
        only sign-checked; the stored balance always becomes total - paid.
        """
        new_total = current.total_fee if total_fee is None else total_fee
        new_paid = current.paid if paid is None else paid
        new_total_dec = _to_decimal("total_fee", new_total)
        new_paid_dec = _to_decimal("paid", new_paid)
        claimed = new_total_dec - new_paid_dec if balance is None else balance
        return cls.validate(new_total_dec, new_paid_dec, claimed)

    @staticmethod
    def settle(fees: Fees, record_id: Optional[str] = None) -> Fees:
        """Mark the outstanding balance as paid in full.

        Raises:
            NoPendingPaymentError: If nothing is owed
        """
        if fees.balance <= 0:
            raise NoPendingPaymentError(record_id)
        return Fees(total_fee=fees.total_fee, paid=fees.total_fee, balance=Decimal("0.00"))
