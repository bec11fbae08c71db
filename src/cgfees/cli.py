from __future__ import annotations

import argparse
import logging
import sys
from decimal import Decimal, InvalidOperation
from uuid import uuid4

from pydantic import ValidationError

from cgfees.adapters.coingecko_http import CoinGeckoHttpClient
from cgfees.config import ConfigurationError, Settings
from cgfees.domain.currency import resolve_precision, validate_precision
from cgfees.domain.errors import FeesCalculatorError, UpstreamError
from cgfees.domain.models import lookup_unit_price
from cgfees.domain.money_policy import compute_fee
from cgfees.logging_context import with_logging_context
from cgfees.logging_utils import setup_logging
from cgfees.services.currency_validator import CurrencyValidator, validate_identifier
from cgfees.services.report_renderer import render

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_UPSTREAM_FAILURE = 1
EXIT_INVALID_INPUT = 2


def _decimal_arg(raw: str) -> Decimal:
    try:
        value = Decimal(raw.strip())
    except InvalidOperation as exc:
        raise argparse.ArgumentTypeError(f"invalid decimal value: {raw!r}") from exc
    if not value.is_finite():
        raise argparse.ArgumentTypeError(f"value must be finite: {raw!r}")
    return value


def _fee_rate_arg(raw: str) -> Decimal:
    value = _decimal_arg(raw)
    if value < 0:
        raise argparse.ArgumentTypeError("fee rate must be >= 0")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cgfees",
        description="CoinGecko API CLI tool for calculating withdrawal fees",
        epilog=(
            "Configuration: COINGECKO_API_URL, COINGECKO_API_KEY, DEFAULT_CURRENCY, "
            "DEFAULT_FEE_RATE, LOG_LEVEL, or a TOML file at CGFEES_CONFIG_FILE."
        ),
    )
    parser.add_argument("--env-file", default=None, help="Optional dotenv file with settings")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    subparsers = parser.add_subparsers(dest="command", required=True)

    fees_parser = subparsers.add_parser(
        "fees", help="Convert a withdrawal and report its fee in a target currency"
    )
    fees_parser.add_argument(
        "-n",
        "--coin-name",
        required=True,
        help="Name of the cryptocurrency (the CoinGecko API id, e.g. bitcoin)",
    )
    fees_parser.add_argument(
        "-c",
        "--currency",
        default=None,
        help="Target currency the withdrawal is converted into (default: DEFAULT_CURRENCY)",
    )
    fees_parser.add_argument(
        "-w",
        "--withdraw-amount",
        type=_decimal_arg,
        required=True,
        help="Cryptocurrency amount that is being withdrawn",
    )
    fees_parser.add_argument(
        "-p",
        "--precision",
        type=int,
        default=None,
        help="Decimal precision (defaults to 2 for fiat, 8 for crypto currencies)",
    )
    fees_parser.add_argument(
        "-f",
        "--fees",
        type=_fee_rate_arg,
        default=None,
        help="Withdrawal fee rate applied to the coin price (default: DEFAULT_FEE_RATE)",
    )

    subparsers.add_parser("currencies", help="List currencies supported as conversion targets")
    subparsers.add_parser("ping", help="Check that the CoinGecko API is reachable")
    return parser


def main() -> int:
    parser = build_parser()
    args = parser.parse_args()

    try:
        settings = _load_settings(args.env_file)
    except ConfigurationError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_UPSTREAM_FAILURE

    setup_logging(args.log_level or settings.log_level)

    with with_logging_context(run_id=uuid4().hex, command=args.command):
        if args.command == "fees":
            return run_fees(
                settings,
                coin_name=args.coin_name,
                currency=args.currency if args.currency is not None else settings.default_currency,
                withdraw_amount=args.withdraw_amount,
                precision=args.precision,
                fee_rate=args.fees if args.fees is not None else settings.default_fee_rate,
            )
        if args.command == "currencies":
            return run_currencies(settings)
        if args.command == "ping":
            return run_ping(settings)

    return EXIT_UPSTREAM_FAILURE


def _load_settings(env_file: str | None) -> Settings:
    resolved_env_file = None if env_file in (None, "") else env_file
    try:
        if resolved_env_file is None:
            return Settings()
        return Settings(_env_file=resolved_env_file)
    except ValidationError as exc:
        messages = "; ".join(str(error.get("msg", "")) for error in exc.errors())
        raise ConfigurationError(f"invalid configuration: {messages}") from exc


def _build_client(settings: Settings) -> CoinGeckoHttpClient:
    return CoinGeckoHttpClient(
        api_key=settings.api_key_value(),
        base_url=settings.coingecko_api_url,
        timeout=settings.http_timeout_seconds,
    )


def _report_failure(exc: FeesCalculatorError) -> int:
    exit_code = EXIT_UPSTREAM_FAILURE if isinstance(exc, UpstreamError) else EXIT_INVALID_INPUT
    logger.info(
        "command_failed",
        extra={"extra": {"error_type": type(exc).__name__, "exit_code": exit_code}},
    )
    print(f"error: {exc}", file=sys.stderr)
    return exit_code


def run_fees(
    settings: Settings,
    *,
    coin_name: str,
    currency: str,
    withdraw_amount: Decimal,
    precision: int | None,
    fee_rate: Decimal,
) -> int:
    with with_logging_context(coin_id=coin_name, currency=currency):
        try:
            validate_identifier(coin_name, "coin name")
            validate_identifier(currency, "currency")
            if precision is not None:
                validate_precision(precision)

            with _build_client(settings) as client:
                CurrencyValidator(client).validate(currency)
                resolved_precision = resolve_precision(currency, precision)
                quote = client.get_simple_price(coin_name, currency, precision=resolved_precision)

            unit_price = lookup_unit_price(quote, coin_name, currency)
            fee = compute_fee(fee_rate, unit_price)
            report = render(quote, withdraw_amount, fee, resolved_precision, currency)
        except FeesCalculatorError as exc:
            return _report_failure(exc)

        logger.info(
            "fee_report_rendered",
            extra={
                "extra": {
                    "precision": resolved_precision,
                    "fee_rate": str(fee_rate),
                    "blocks": sum(len(prices) for prices in quote.values()),
                }
            },
        )
    print(report)
    return EXIT_OK


def run_currencies(settings: Settings) -> int:
    try:
        with _build_client(settings) as client:
            currencies = client.get_supported_currencies()
    except FeesCalculatorError as exc:
        return _report_failure(exc)
    for currency in sorted(currencies):
        print(currency)
    return EXIT_OK


def run_ping(settings: Settings) -> int:
    try:
        with _build_client(settings) as client:
            ok = client.ping()
    except UpstreamError as exc:
        logger.info(
            "Ping could not reach CoinGecko API",
            extra={"extra": {"error_type": type(exc).__name__, "status": exc.status_code}},
        )
        ok = False
    print(f"CoinGecko API: {'OK' if ok else 'FAIL'}")
    return EXIT_OK if ok else EXIT_UPSTREAM_FAILURE


if __name__ == "__main__":
    raise SystemExit(main())
