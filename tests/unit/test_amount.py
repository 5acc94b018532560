"""Unit tests for fixed-point amounts"""

import pytest
from billing_service.domain.amount import Amount, sum_amounts
from billing_service.domain.exceptions import ErrorKind, ValidationError


@pytest.mark.parametrize(
    "raw, expected_value",
    [
        (0, 0),
        (100, 10000),
        (99.99, 9999),
        (1234.567, 123457),
        (5_000_000, 500000000),
        (0.004, 0),
    ],
)
def test_from_float_scales_to_two_decimals(raw, expected_value):
    amount = Amount.from_float(raw)

    assert amount.value == expected_value
    assert amount.decimal_precision == 2
    assert amount.currency == "IDR"


@pytest.mark.parametrize("raw", [0.0, 1.0, 0.1, 12.34, 99.99, 110000.0, 5_500_000.55])
def test_to_float_reconstructs_rounded_input(raw):
    assert Amount.from_float(raw).to_float() == round(raw, 2)


def test_round_trip_at_two_decimals():
    amount = Amount(value=12345, decimal_precision=2)
    assert Amount.from_float(amount.to_float()) == amount


def test_equal_to_compares_raw_magnitude():
    assert Amount.from_float(100).equal_to(Amount.from_float(100.00))
    assert not Amount.from_float(100).equal_to(Amount.from_float(99.99))
    assert not Amount.from_float(100).equal_to(Amount.from_float(100.01))


def test_equal_to_rescales_precision():
    """1000 at precision 1 and 10000 at precision 2 are both 100.0"""
    assert Amount(value=1000, decimal_precision=1).equal_to(Amount(value=10000, decimal_precision=2))


def test_equal_to_rejects_currency_mismatch():
    with pytest.raises(ValidationError) as exc_info:
        Amount.from_float(100).equal_to(Amount(value=10000, currency="USD"))

    assert exc_info.value.kind == ErrorKind.VALIDATION_ERROR
    assert exc_info.value.status_code == 422


def test_str_renders_shortest_decimal():
    assert str(Amount.from_float(110000)) == "110000"
    assert str(Amount.from_float(100.5)) == "100.5"
    assert str(Amount.from_float(100.25)) == "100.25"
    assert str(Amount.zero()) == "0"


def test_sum_amounts_is_exact():
    """Ten 0.10 installments sum to exactly 1.00 (no float drift)"""
    total = sum_amounts([Amount.from_float(0.1)] * 10)
    assert total == Amount(value=100)


def test_sum_amounts_empty_is_zero():
    assert sum_amounts([]) == Amount.zero()


def test_dict_layout_round_trip():
    amount = Amount.from_float(110000)
    assert amount.to_dict() == {"value": 11000000, "decimal_precision": 2, "currency": "IDR"}
    assert Amount.from_dict(amount.to_dict()) == amount


@pytest.mark.parametrize("raw", [float("inf"), float("-inf"), float("nan")])
def test_from_float_rejects_non_finite(raw):
    with pytest.raises(ValidationError) as exc_info:
        Amount.from_float(raw)

    assert exc_info.value.kind == ErrorKind.VALIDATION_ERROR
    assert exc_info.value.status_code == 400
