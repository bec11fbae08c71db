from __future__ import annotations

from decimal import Decimal

from cgfees.domain.currency import is_fiat
from cgfees.domain.errors import DivisionByZeroError, InvalidInputError
from cgfees.domain.models import FeeReport, PriceQuote
from cgfees.domain.money_policy import format_amount, format_percentage, to_decimal

FIAT_PREFIX = "$"


def build_fee_reports(
    quote: PriceQuote,
    withdrawal_amount: Decimal,
    fee: Decimal,
    precision: int,
) -> list[FeeReport]:
    """Build one report row per (coin, currency) pair.

    Coins are visited in lexicographic order, and currencies in lexicographic
    order within each coin, so rendered output is deterministic.
    """

    amount = to_decimal(withdrawal_amount)
    fee_value = to_decimal(fee)
    reports: list[FeeReport] = []
    for coin_id in sorted(quote):
        prices = quote[coin_id]
        for currency in sorted(prices):
            unit_price = to_decimal(prices[currency])
            try:
                converted = amount * unit_price
                fee_percentage = (
                    None if converted == 0 else fee_value / converted * Decimal("100")
                )
            except ArithmeticError as exc:
                raise InvalidInputError(
                    f"Withdrawal amount {amount} is out of range for {coin_id} in {currency}",
                    field="withdraw amount",
                    value=amount,
                ) from exc
            if fee_percentage is None:
                raise DivisionByZeroError(coin_id, currency)
            reports.append(
                FeeReport(
                    coin_id=coin_id,
                    currency=currency,
                    unit_price=unit_price,
                    withdrawal_amount=amount,
                    converted_amount=converted,
                    fee=fee_value,
                    fee_percentage=fee_percentage,
                    precision=precision,
                )
            )
    return reports


def render_block(report: FeeReport, prefix: str = "") -> str:
    prec = report.precision
    return "\n".join(
        (
            f"The current price of {report.coin_id} in {report.currency}: "
            f"{prefix}{format_amount(report.unit_price, prec)}",
            f"Withdrawal amount: {prefix}{format_amount(report.converted_amount, prec)}",
            f"Withdrawal fees: {prefix}{format_amount(report.fee, prec)}",
            "Percent of withdrawal fees over withdrawal amount: "
            f"{format_percentage(report.fee_percentage)}%",
        )
    )


def render(
    quote: PriceQuote,
    withdrawal_amount: Decimal,
    fee: Decimal,
    precision: int,
    target_currency: str,
) -> str:
    reports = build_fee_reports(quote, withdrawal_amount, fee, precision)
    prefix = FIAT_PREFIX if is_fiat(target_currency) else ""
    return "\n".join(render_block(report, prefix) for report in reports)
