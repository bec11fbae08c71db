from __future__ import annotations


class FeesCalculatorError(RuntimeError):
    """Base class for every error that aborts a fee calculation."""


class InvalidInputError(FeesCalculatorError, ValueError):
    """Raised when a user supplied identifier or number is not acceptable."""

    def __init__(self, message: str, *, field: str | None = None, value: object = None) -> None:
        super().__init__(message)
        self.field = field
        self.value = value


class InvalidCurrencyError(FeesCalculatorError):
    """Raised when the target currency is not in the supported-currency list."""

    def __init__(self, currency: str) -> None:
        super().__init__(f"{currency} is an invalid currency")
        self.currency = currency


class UnknownCoinOrCurrencyError(FeesCalculatorError):
    def __init__(self, message: str, *, coin_id: str, currency: str | None = None) -> None:
        super().__init__(message)
        self.coin_id = coin_id
        self.currency = currency


class DivisionByZeroError(FeesCalculatorError, ZeroDivisionError):
    """Raised when the converted withdrawal amount is zero."""

    def __init__(self, coin_id: str, currency: str) -> None:
        super().__init__(
            f"Cannot compute fee percentage for {coin_id} in {currency}: "
            "converted withdrawal amount is zero"
        )
        self.coin_id = coin_id
        self.currency = currency


class UpstreamError(FeesCalculatorError):
    """Raised when the price service fails or returns a malformed payload."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        request_path: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.request_path = request_path
