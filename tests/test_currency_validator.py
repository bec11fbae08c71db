from __future__ import annotations

import pytest

from cgfees.domain.errors import InvalidCurrencyError, InvalidInputError
from cgfees.ports_currencies import StaticCurrenciesProvider
from cgfees.services.currency_validator import CurrencyValidator, validate, validate_identifier

SUPPORTED = frozenset({"usd", "sgd", "eur", "btc", "eth"})


class CountingProvider:
    def __init__(self, currencies: set[str]) -> None:
        self.currencies = currencies
        self.calls = 0

    def supported_currencies(self) -> frozenset[str]:
        self.calls += 1
        return frozenset(self.currencies)


def test_validate_accepts_supported_currency() -> None:
    assert validate("usd", SUPPORTED) == "usd"


def test_validate_rejects_unsupported_currency() -> None:
    with pytest.raises(InvalidCurrencyError) as exc_info:
        validate("xyz", SUPPORTED)

    assert exc_info.value.currency == "xyz"
    assert str(exc_info.value) == "xyz is an invalid currency"


def test_validate_compares_verbatim_without_case_folding() -> None:
    with pytest.raises(InvalidCurrencyError):
        validate("USD", SUPPORTED)


def test_currency_validator_uses_injected_provider() -> None:
    validator = CurrencyValidator(StaticCurrenciesProvider(SUPPORTED))

    assert validator.validate("sgd") == "sgd"
    with pytest.raises(InvalidCurrencyError):
        validator.validate("jpy")


def test_currency_validator_fetches_supported_set_once() -> None:
    provider = CountingProvider({"usd", "eur"})
    validator = CurrencyValidator(provider)

    validator.validate("usd")
    validator.validate("eur")

    assert provider.calls == 1
    assert validator.supported == frozenset({"usd", "eur"})


@pytest.mark.parametrize("value", ["bitcoin,ethereum", "usd,", ",", "", " "])
def test_validate_identifier_rejects_lists_and_blanks(value: str) -> None:
    with pytest.raises(InvalidInputError) as exc_info:
        validate_identifier(value, "coin name")

    assert exc_info.value.field == "coin name"


def test_validate_identifier_accepts_single_id() -> None:
    assert validate_identifier("bitcoin", "coin name") == "bitcoin"
