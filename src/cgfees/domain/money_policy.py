from __future__ import annotations

from decimal import ROUND_HALF_EVEN, Decimal, localcontext

ROUNDING = ROUND_HALF_EVEN
PERCENTAGE_PRECISION = 2


def to_decimal(value: object) -> Decimal:
    """Convert supported numeric inputs to Decimal without allowing implicit float coercion."""

    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError("bool values are not accepted as money amounts")
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, str):
        return Decimal(value)
    if isinstance(value, float):
        raise TypeError("float values are not accepted; pass string/int/Decimal explicitly")
    raise TypeError(f"unsupported decimal conversion type: {type(value).__name__}")


def compute_fee(rate: Decimal | int | str, value: Decimal | int | str) -> Decimal:
    """Return ``rate * value`` unrounded; rounding belongs to presentation."""

    return to_decimal(rate) * to_decimal(value)


def _quantum(precision: int) -> Decimal:
    return Decimal("1").scaleb(-max(0, int(precision)))


def quantize_amount(value: Decimal, precision: int, rounding: str = ROUNDING) -> Decimal:
    amount = to_decimal(value)
    if not amount.is_finite():
        raise ValueError(f"cannot quantize non-finite amount: {amount}")
    with localcontext() as ctx:
        # wide precisions need more significant digits than the default context
        ctx.prec = max(ctx.prec, amount.adjusted() + int(precision) + 2)
        return amount.quantize(_quantum(precision), rounding=rounding)


def format_amount(value: Decimal, precision: int) -> str:
    """Round to ``precision`` places and group the integer part, e.g. 1,234,567.89."""

    quantized = quantize_amount(value, precision)
    return format(quantized, f",.{max(0, int(precision))}f")


def format_percentage(value: Decimal) -> str:
    return format_amount(value, PERCENTAGE_PRECISION)
