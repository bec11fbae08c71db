from __future__ import annotations

from decimal import Decimal

import pytest

from cgfees.domain.money_policy import (
    compute_fee,
    format_amount,
    format_percentage,
    quantize_amount,
    to_decimal,
)


def test_compute_fee_basic() -> None:
    assert compute_fee(Decimal("0.0006"), Decimal("100")) == Decimal("0.06")


def test_compute_fee_zero_rate_or_value() -> None:
    assert compute_fee(0, Decimal("100")) == 0
    assert compute_fee(Decimal("0.0006"), 0) == 0


def test_compute_fee_small_values_within_tolerance() -> None:
    result = compute_fee(Decimal("0.0006"), Decimal("0.00001"))
    assert abs(result - Decimal("0.000000006")) < Decimal("1e-15")


def test_compute_fee_large_values() -> None:
    assert compute_fee(Decimal("0.001"), Decimal("1000000")) == Decimal("1000")


def test_compute_fee_on_unit_price() -> None:
    assert compute_fee(Decimal("0.0006"), Decimal("50000.00")) == Decimal("30")


def test_compute_fee_propagates_negative_inputs() -> None:
    assert compute_fee(Decimal("-0.001"), Decimal("100")) == Decimal("-0.1")


def test_compute_fee_accepts_strings_and_ints() -> None:
    assert compute_fee("0.5", 10) == Decimal("5")


def test_to_decimal_rejects_float() -> None:
    with pytest.raises(TypeError):
        to_decimal(0.1)


@pytest.mark.parametrize(
    ("value", "precision", "expected"),
    [
        (Decimal("1234567.891"), 2, "1,234,567.89"),
        (Decimal("5000"), 2, "5,000.00"),
        (Decimal("0.000000006"), 8, "0.00000001"),
        (Decimal("999.5"), 0, "1,000"),
        (Decimal("12.3"), 4, "12.3000"),
        (Decimal("-1234.5"), 1, "-1,234.5"),
    ],
)
def test_format_amount_rounds_and_groups(value: Decimal, precision: int, expected: str) -> None:
    assert format_amount(value, precision) == expected


def test_format_amount_rounds_half_to_even_at_boundary() -> None:
    assert format_amount(Decimal("0.125"), 2) == "0.12"
    assert format_amount(Decimal("0.135"), 2) == "0.14"
    assert format_amount(Decimal("2.005"), 2) == "2.00"


def test_quantize_amount_supports_wide_precision() -> None:
    quantized = quantize_amount(Decimal("50000"), 255)
    assert quantized == Decimal("50000")
    assert format_amount(Decimal("1"), 40) == "1." + "0" * 40


def test_quantize_amount_rejects_non_finite() -> None:
    with pytest.raises(ValueError):
        quantize_amount(Decimal("Infinity"), 2)


def test_format_percentage_uses_two_decimals() -> None:
    assert format_percentage(Decimal("0.6")) == "0.60"
    assert format_percentage(Decimal("12.3456")) == "12.35"
