from __future__ import annotations

import logging
from collections.abc import Collection

from cgfees.domain.errors import InvalidCurrencyError, InvalidInputError
from cgfees.ports_currencies import SupportedCurrenciesProvider

logger = logging.getLogger(__name__)


def validate_identifier(value: str, field: str) -> str:
    """Reject identifiers that cannot name a single coin or currency."""

    if not value or not value.strip():
        raise InvalidInputError(f"{field} must not be empty", field=field, value=value)
    if "," in value:
        raise InvalidInputError(
            f"Invalid character: ',' found in {field} argument: {value}",
            field=field,
            value=value,
        )
    return value


def validate(requested: str, supported: Collection[str]) -> str:
    """Return ``requested`` if the price service accepts it as a target currency.

    Comparison is verbatim: the supported list comes straight from the service
    and no case folding is applied here.
    """

    if requested not in supported:
        raise InvalidCurrencyError(requested)
    return requested


class CurrencyValidator:
    def __init__(self, provider: SupportedCurrenciesProvider) -> None:
        self._provider = provider
        self._supported: frozenset[str] | None = None

    @property
    def supported(self) -> frozenset[str]:
        if self._supported is None:
            self._supported = frozenset(self._provider.supported_currencies())
            logger.debug(
                "supported_currencies_loaded",
                extra={"extra": {"count": len(self._supported)}},
            )
        return self._supported

    def validate(self, requested: str) -> str:
        return validate(requested, self.supported)
