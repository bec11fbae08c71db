from __future__ import annotations

from decimal import Decimal

import pytest

from cgfees.domain.errors import UnknownCoinOrCurrencyError, UpstreamError
from cgfees.domain.models import lookup_unit_price, parse_decimal, parse_price_quote


def test_parse_price_quote_converts_prices_to_decimal() -> None:
    quote = parse_price_quote({"bitcoin": {"usd": 50000.0, "sgd": 67000}})

    assert quote == {"bitcoin": {"usd": Decimal("50000.0"), "sgd": Decimal("67000")}}


def test_parse_price_quote_accepts_empty_payload() -> None:
    assert parse_price_quote({}) == {}


@pytest.mark.parametrize(
    "payload",
    [
        [],
        "bitcoin",
        {"bitcoin": [50000]},
        {"bitcoin": {"usd": "abc"}},
        {"bitcoin": {"usd": None}},
        {"bitcoin": {"usd": True}},
        {"bitcoin": {"usd": "NaN"}},
        {"bitcoin": {"usd": float("inf")}},
    ],
)
def test_parse_price_quote_rejects_malformed_payloads(payload: object) -> None:
    with pytest.raises(UpstreamError):
        parse_price_quote(payload)


def test_parse_decimal_uses_string_form_of_floats() -> None:
    assert parse_decimal(0.1) == Decimal("0.1")
    assert parse_decimal(" 2.50 ") == Decimal("2.50")


def test_lookup_unit_price_returns_price() -> None:
    quote = {"bitcoin": {"usd": Decimal("50000")}}
    assert lookup_unit_price(quote, "bitcoin", "usd") == Decimal("50000")


def test_lookup_unit_price_missing_coin_names_coin() -> None:
    quote = {"bitcoin": {"usd": Decimal("50000")}}

    with pytest.raises(UnknownCoinOrCurrencyError) as exc_info:
        lookup_unit_price(quote, "dogecoin", "usd")

    assert exc_info.value.coin_id == "dogecoin"
    assert exc_info.value.currency is None
    assert "dogecoin" in str(exc_info.value)


def test_lookup_unit_price_missing_currency_names_currency() -> None:
    quote = {"bitcoin": {"usd": Decimal("50000")}}

    with pytest.raises(UnknownCoinOrCurrencyError) as exc_info:
        lookup_unit_price(quote, "bitcoin", "eur")

    assert exc_info.value.coin_id == "bitcoin"
    assert exc_info.value.currency == "eur"
