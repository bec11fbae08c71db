from __future__ import annotations

import json
import logging
import os
from datetime import UTC, datetime
from typing import Any

from cgfees.logging_context import LOG_CONTEXT_FIELDS, get_logging_context
from cgfees.security.redaction import redact_data

DEFAULT_LOG_LEVEL = logging.WARNING

# third-party loggers that are only useful when the run itself is at DEBUG
_HTTP_LOGGERS = {"httpx": "HTTPX_LOG_LEVEL", "httpcore": "HTTPCORE_LOG_LEVEL"}


class JsonFormatter(logging.Formatter):
    """One JSON object per record, with the run context and secrets masked."""

    def format(self, record: logging.LogRecord) -> str:
        context = get_logging_context()
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **{field: context.get(field) for field in LOG_CONTEXT_FIELDS},
        }

        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            payload.update(extra)

        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            payload["error_type"] = exc_type.__name__ if exc_type else "Exception"
            payload["error_message"] = "" if exc_value is None else str(exc_value)
            payload["traceback"] = self.formatException(record.exc_info)
        elif record.exc_text:
            payload["traceback"] = record.exc_text

        return json.dumps(redact_data(payload), default=str)


def _level_from_name(raw: object, fallback: int) -> int:
    if isinstance(raw, int):
        return raw
    if raw is None or not str(raw).strip():
        return fallback
    level = logging.getLevelName(str(raw).strip().upper())
    return level if isinstance(level, int) else fallback


def setup_logging(level: str | int | None = None) -> None:
    """Send JSON log lines to stderr so stdout carries only the report.

    ``level`` falls back to ``LOG_LEVEL`` and then to WARNING. The HTTP client
    loggers stay at WARNING unless the run is at DEBUG; ``HTTPX_LOG_LEVEL`` and
    ``HTTPCORE_LOG_LEVEL`` override that.
    """

    root_level = _level_from_name(
        level if level is not None else os.getenv("LOG_LEVEL"), DEFAULT_LOG_LEVEL
    )

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(root_level)

    http_default = logging.DEBUG if root_level <= logging.DEBUG else logging.WARNING
    for logger_name, env_name in _HTTP_LOGGERS.items():
        logging.getLogger(logger_name).setLevel(_level_from_name(os.getenv(env_name), http_default))
