"""Tests for exception hierarchy."""

from decimal import Decimal

from rtotrack.exceptions import (
    ConfigError,
    ConfigValidationError,
    ConsistencyError,
    InvalidAmountError,
    InvalidDateFormatError,
    InvalidDateRangeError,
    MissingFeeFieldsError,
    MissingOwnerIdentifierError,
    NegativeAmountNotAllowedError,
    NegativeBalanceNotAllowedError,
    NoPendingPaymentError,
    OverpaymentNotAllowedError,
    RecordNotFoundError,
    RecordValidationError,
    RenewalIncompleteError,
    RtoTrackError,
    UnknownRecordKindError,
)


class TestExceptionHierarchy:
    def test_base_exception(self):
        e = RtoTrackError("test", "details")
        assert e.message == "test"
        assert e.details == "details"
        assert str(e) == "test"

    def test_config_errors_inherit(self):
        assert issubclass(ConfigError, RtoTrackError)
        assert issubclass(ConfigValidationError, ConfigError)

    def test_validation_errors_inherit(self):
        for cls in (
            InvalidDateFormatError,
            InvalidDateRangeError,
            MissingFeeFieldsError,
            OverpaymentNotAllowedError,
            NegativeBalanceNotAllowedError,
            NegativeAmountNotAllowedError,
            InvalidAmountError,
            NoPendingPaymentError,
            MissingOwnerIdentifierError,
        ):
            assert issubclass(cls, RecordValidationError)
            assert issubclass(cls, RtoTrackError)

    def test_lookup_errors_are_not_validation_errors(self):
        assert not issubclass(RecordNotFoundError, RecordValidationError)
        assert not issubclass(UnknownRecordKindError, RecordValidationError)

    def test_consistency_errors_inherit(self):
        assert issubclass(ConsistencyError, RtoTrackError)
        assert issubclass(RenewalIncompleteError, ConsistencyError)
        assert not issubclass(RenewalIncompleteError, RecordValidationError)


class TestRules:
    def test_rules_are_distinct(self):
        rules = [
            InvalidDateFormatError("x").rule,
            InvalidDateRangeError("a", "b").rule,
            MissingFeeFieldsError(["paid"]).rule,
            OverpaymentNotAllowedError(Decimal("1"), Decimal("2")).rule,
            NegativeBalanceNotAllowedError(Decimal("-1")).rule,
            NegativeAmountNotAllowedError("paid", Decimal("-1")).rule,
            InvalidAmountError("paid", "x").rule,
            NoPendingPaymentError().rule,
            MissingOwnerIdentifierError().rule,
        ]
        assert len(set(rules)) == len(rules)


class TestExceptionMessages:
    def test_config_validation(self):
        e = ConfigValidationError("refresh_time", "invalid time format")
        assert "refresh_time" in e.message
        assert e.details == "invalid time format"

    def test_missing_fee_fields(self):
        e = MissingFeeFieldsError(["total_fee", "balance"])
        assert e.missing == ["total_fee", "balance"]
        assert "total_fee, balance" in e.details

    def test_overpayment(self):
        e = OverpaymentNotAllowedError(Decimal("1000"), Decimal("1200"))
        assert "greater than total fee" in e.message
        assert "1200" in e.details

    def test_negative_amount(self):
        e = NegativeAmountNotAllowedError("total_fee", Decimal("-5"))
        assert e.message == "Total fee cannot be negative"

    def test_no_pending_payment_without_id(self):
        assert NoPendingPaymentError().details is None

    def test_record_not_found(self):
        e = RecordNotFoundError("abc")
        assert e.record_id == "abc"
        assert "abc" in e.message

    def test_unknown_kind(self):
        e = UnknownRecordKindError("pollution", ["fitness", "tax"])
        assert "pollution" in e.message
        assert e.details == "Supported kinds: fitness, tax"

    def test_renewal_incomplete(self):
        e = RenewalIncompleteError("fitness", "CG04AB1234", 1)
        assert e.kind == "fitness"
        assert e.owner_identifier == "CG04AB1234"
        assert e.retired_count == 1
        assert "CG04AB1234" in e.message
        assert "manual" in e.details
