from __future__ import annotations

from typing import Protocol


class SupportedCurrenciesProvider(Protocol):
    def supported_currencies(self) -> frozenset[str]: ...


class StaticCurrenciesProvider(SupportedCurrenciesProvider):
    """Provider backed by a fixed set, used offline and in tests."""

    def __init__(self, currencies: frozenset[str] | set[str] | list[str] | tuple[str, ...]) -> None:
        self._currencies = frozenset(currencies)

    def supported_currencies(self) -> frozenset[str]:
        return self._currencies
