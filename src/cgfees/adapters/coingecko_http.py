from __future__ import annotations

import logging
from collections.abc import Iterable
from decimal import Decimal

import httpx

from cgfees.domain.errors import UpstreamError
from cgfees.domain.models import parse_price_quote
from cgfees.security.redaction import sanitize_text

logger = logging.getLogger(__name__)

USER_AGENT = "coingecko-fees-calculator/1.0"
API_KEY_PARAM = "x_cg_demo_api_key"

_ERROR_SNIPPET_LIMIT = 240
# the price endpoint accepts 0..18 decimals or "full"
_MAX_API_PRECISION = 18


def _join_ids(values: str | Iterable[str]) -> str:
    if isinstance(values, str):
        return values
    return ",".join(values)


class CoinGeckoHttpClient:
    BASE_URL = "https://api.coingecko.com/api/v3"

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | httpx.Timeout = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.api_key = api_key or None
        resolved_timeout = (
            timeout
            if isinstance(timeout, httpx.Timeout)
            else httpx.Timeout(timeout=timeout, connect=5.0)
        )
        self.client = httpx.Client(
            base_url=base_url or self.BASE_URL,
            timeout=resolved_timeout,
            transport=transport,
            headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
        )

    def __enter__(self) -> CoinGeckoHttpClient:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        del exc_type, exc, tb
        self.close()

    def _secrets(self) -> tuple[str, ...]:
        return (self.api_key,) if self.api_key else ()

    def _response_snippet(self, response: httpx.Response) -> str:
        text = response.text.strip().replace("\n", " ")
        return sanitize_text(text[:_ERROR_SNIPPET_LIMIT], known_secrets=self._secrets())

    def _get(self, path: str, params: dict[str, str | int] | None = None) -> object:
        query: dict[str, str | int] = dict(params or {})
        if self.api_key:
            query[API_KEY_PARAM] = self.api_key

        try:
            response = self.client.get(path, params=query)
        except httpx.TimeoutException as exc:
            raise UpstreamError(
                f"CoinGecko request timed out path={path}", request_path=path
            ) from exc
        except httpx.TransportError as exc:
            message = sanitize_text(str(exc), known_secrets=self._secrets())
            raise UpstreamError(
                f"CoinGecko request failed path={path}: {message}", request_path=path
            ) from exc

        logger.debug(
            "coingecko_response",
            extra={"extra": {"path": path, "status": response.status_code}},
        )
        if not response.is_success:
            raise UpstreamError(
                f"API request failed with status {response.status_code}: "
                f"{self._response_snippet(response)}",
                status_code=response.status_code,
                request_path=path,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamError(
                f"Unable to parse response from path={path} as JSON",
                status_code=response.status_code,
                request_path=path,
            ) from exc

    def get_supported_currencies(self) -> list[str]:
        path = "/simple/supported_vs_currencies"
        payload = self._get(path)
        if not isinstance(payload, list) or not all(isinstance(item, str) for item in payload):
            raise UpstreamError(
                "Malformed supported currencies payload: expected a list of strings",
                request_path=path,
            )
        return payload

    def supported_currencies(self) -> frozenset[str]:
        return frozenset(self.get_supported_currencies())

    def get_simple_price(
        self,
        coin_ids: str | Iterable[str],
        vs_currencies: str | Iterable[str],
        precision: int | None = None,
    ) -> dict[str, dict[str, Decimal]]:
        params: dict[str, str | int] = {
            "ids": _join_ids(coin_ids),
            "vs_currencies": _join_ids(vs_currencies),
        }
        if precision is not None:
            params["precision"] = precision if precision <= _MAX_API_PRECISION else "full"
        payload = self._get("/simple/price", params)
        return parse_price_quote(payload)

    def ping(self) -> bool:
        payload = self._get("/ping")
        return isinstance(payload, dict) and "gecko_says" in payload

    def close(self) -> None:
        self.client.close()
