"""Per-run fields attached to every JSON log line.

A fee run binds ``run_id`` and ``command`` once in the CLI, then ``coin_id``
and ``currency`` once the pair is known. Nested blocks add to the outer
fields and restore them on exit.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from types import MappingProxyType

LOG_CONTEXT_FIELDS = ("run_id", "command", "coin_id", "currency")

_EMPTY: Mapping[str, str] = MappingProxyType({})
_bound_fields: ContextVar[Mapping[str, str]] = ContextVar("cgfees_log_context", default=_EMPTY)


def get_logging_context() -> dict[str, str]:
    return dict(_bound_fields.get())


@contextmanager
def with_logging_context(**fields: str | None) -> Iterator[None]:
    # unknown names and None values are dropped rather than bound
    updates = {
        name: value
        for name, value in fields.items()
        if name in LOG_CONTEXT_FIELDS and value is not None
    }
    if not updates:
        yield
        return

    token = _bound_fields.set(MappingProxyType({**_bound_fields.get(), **updates}))
    try:
        yield
    finally:
        _bound_fields.reset(token)
