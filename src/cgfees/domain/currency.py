from __future__ import annotations

from cgfees.domain.errors import InvalidInputError

FIAT_CURRENCIES: frozenset[str] = frozenset(
    {
        "usd", "eur", "gbp", "jpy", "aud", "cad", "chf", "cny", "hkd", "nzd", "sgd",
        "krw", "inr", "rub", "brl", "zar", "mxn", "idr", "try", "sar", "aed", "pln",
        "thb", "twd", "myr", "php", "vnd", "pkr", "bdt", "ngn", "uah", "ars", "clp",
        "cop", "pen", "czk", "dkk", "huf", "ils", "nok", "sek",
    }
)  # fmt: skip

FIAT_PRECISION = 2
CRYPTO_PRECISION = 8
MAX_PRECISION = 255


def is_fiat(code: str) -> bool:
    """Return True when ``code`` names a fiat currency, ignoring case."""

    return code.lower() in FIAT_CURRENCIES


def resolve_precision(code: str, user_override: int | None = None) -> int:
    """Return the number of decimals to display for amounts in ``code``.

    An explicit override always wins, including zero. Without one, fiat
    currencies are shown to cent precision and everything else to eight places.
    """

    if user_override is not None:
        return user_override
    return FIAT_PRECISION if is_fiat(code) else CRYPTO_PRECISION


def validate_precision(value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError(
            f"precision must be an integer, got {type(value).__name__}",
            field="precision",
            value=value,
        )
    if not 0 <= value <= MAX_PRECISION:
        raise InvalidInputError(
            f"precision must be between 0 and {MAX_PRECISION}, got {value}",
            field="precision",
            value=value,
        )
    return value
