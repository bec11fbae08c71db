from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from cgfees.domain.errors import UnknownCoinOrCurrencyError, UpstreamError

PriceQuote = Mapping[str, Mapping[str, Decimal]]


def parse_decimal(value: object) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError("Cannot parse decimal from bool")
    if isinstance(value, (int, float)):
        return Decimal(str(value))
    if isinstance(value, str):
        return Decimal(value.strip())
    raise TypeError(f"Cannot parse decimal from {type(value)!r}")


@dataclass(frozen=True)
class FeeReport:
    coin_id: str
    currency: str
    unit_price: Decimal
    withdrawal_amount: Decimal
    converted_amount: Decimal
    fee: Decimal
    fee_percentage: Decimal
    precision: int


def parse_price_quote(payload: object) -> dict[str, dict[str, Decimal]]:
    """Validate a decoded ``/simple/price`` payload into Decimal unit prices.

    The service answers ``{"bitcoin": {"usd": 50000.0}}``; anything else is
    treated as an upstream failure.
    """

    if not isinstance(payload, Mapping):
        raise UpstreamError("Malformed price payload: expected a JSON object")

    quote: dict[str, dict[str, Decimal]] = {}
    for coin_id, prices in payload.items():
        if not isinstance(prices, Mapping):
            raise UpstreamError(f"Malformed price payload for {coin_id}: expected a JSON object")
        parsed: dict[str, Decimal] = {}
        for currency, raw_price in prices.items():
            try:
                price = parse_decimal(raw_price)
            except (TypeError, ValueError, InvalidOperation) as exc:
                raise UpstreamError(
                    f"Malformed price for {coin_id} in {currency}: {raw_price!r}"
                ) from exc
            if not price.is_finite():
                raise UpstreamError(f"Non-finite price for {coin_id} in {currency}: {raw_price!r}")
            parsed[str(currency)] = price
        quote[str(coin_id)] = parsed
    return quote


def lookup_unit_price(quote: PriceQuote, coin_id: str, currency: str) -> Decimal:
    prices = quote.get(coin_id)
    if prices is None:
        raise UnknownCoinOrCurrencyError(
            f"Name of the coin/token: {coin_id} is incorrect or unsupported",
            coin_id=coin_id,
        )
    price = prices.get(currency)
    if price is None:
        raise UnknownCoinOrCurrencyError(
            f"Currency {currency} is not quoted for {coin_id}",
            coin_id=coin_id,
            currency=currency,
        )
    return price
