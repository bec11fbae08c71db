from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Any

REDACTED = "***REDACTED***"

SENSITIVE_KEYS = {
    "API_KEY",
    "SECRET",
    "AUTHORIZATION",
    "TOKEN",
    "PASSWORD",
    "COINGECKO_API_KEY",
    "X_CG_DEMO_API_KEY",
    "X_CG_PRO_API_KEY",
}

_SENSITIVE_PARTS = tuple(part.casefold() for part in SENSITIVE_KEYS)
_SENSITIVE_EXACT_COMPACT_KEYS = {"apikey", "secret", "password", "token", "authorization"}

_PLAIN_SECRET_PATTERNS = (
    re.compile(r"(?im)(authorization\s*[:=]\s*)(bearer\s+)?([^\s,;]+)"),
    re.compile(r"(?im)(x-cg-(?:demo|pro)-api-key\s*[:=]\s*)([^\s,;]+)"),
    re.compile(r"(?im)(coingecko_api_key\s*[:=]\s*)([^\s,;]+)"),
)

_QUERY_PARAM_PATTERN = re.compile(
    r"([?&]?)(x_cg_demo_api_key|x_cg_pro_api_key|api_key|apiKey|token)=([^&\s]+)",
    re.IGNORECASE,
)
_JSON_KEY_VALUE_PATTERN = re.compile(
    r'("(?:api_key|apiKey|secret|password|token|authorization)"\s*:\s*")([^"\\]*)(")',
    re.IGNORECASE,
)


def _is_sensitive_key(key: object) -> bool:
    normalized = str(key).replace("-", "_").casefold()
    compact = normalized.replace("_", "")
    return compact in _SENSITIVE_EXACT_COMPACT_KEYS or any(
        part in normalized for part in _SENSITIVE_PARTS
    )


def _mask_secret(value: str) -> str:
    if not value:
        return REDACTED
    if len(value) > 8:
        return f"{value[:4]}{'*' * (len(value) - 8)}{value[-4:]}"
    if len(value) <= 2:
        return "*" * len(value)
    return f"{'*' * (len(value) - 2)}{value[-2:]}"


def sanitize_mapping(d: Mapping[str, Any]) -> dict[str, Any]:
    sanitized: dict[str, Any] = {}
    for key, value in d.items():
        key_str = str(key)
        if _is_sensitive_key(key_str):
            sanitized[key_str] = _mask_secret(str(value)) if value is not None else REDACTED
            continue
        sanitized[key_str] = redact_data(value)
    return sanitized


def _redact_match(match: re.Match[str]) -> str:
    prefix = match.group(1)
    optional_scheme = ""
    if match.lastindex and match.lastindex >= 3:
        optional_scheme = match.group(2) or ""
    return f"{prefix}{optional_scheme}[REDACTED]"


def sanitize_text(text: str, known_secrets: Iterable[str] = ()) -> str:
    try:
        redacted = str(text)
        for secret in known_secrets:
            if secret:
                redacted = redacted.replace(secret, _mask_secret(str(secret)))

        for pattern in _PLAIN_SECRET_PATTERNS:
            redacted = pattern.sub(_redact_match, redacted)

        redacted = _QUERY_PARAM_PATTERN.sub(
            lambda m: f"{m.group(1)}{m.group(2)}={_mask_secret(m.group(3))}", redacted
        )
        return _JSON_KEY_VALUE_PATTERN.sub(
            lambda m: f"{m.group(1)}{_mask_secret(m.group(2))}{m.group(3)}", redacted
        )
    except Exception:  # noqa: BLE001
        return REDACTED


def redact_data(value: Any) -> Any:
    try:
        if isinstance(value, Mapping):
            return sanitize_mapping(value)
        if isinstance(value, list):
            return [redact_data(item) for item in value]
        if isinstance(value, tuple):
            return tuple(redact_data(item) for item in value)
        if isinstance(value, str):
            return sanitize_text(value)
        return value
    except Exception:  # noqa: BLE001
        return REDACTED
