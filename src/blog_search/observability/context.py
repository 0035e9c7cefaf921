"""Log context: identifiers attached to every log line of one operation.

The context lives in a ``ContextVar`` so builds running on worker threads and
concurrent queries each see their own values.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar, Token
import secrets


LOG_CONTEXT: ContextVar[Mapping[str, str] | None] = ContextVar("blog_search_log_context", default=None)


def new_trace_id() -> str:
    return secrets.token_hex(16)


def new_span_id() -> str:
    return secrets.token_hex(8)


def current_context() -> dict[str, str]:
    """Return a copy of the active fields; empty outside any operation."""
    return dict(LOG_CONTEXT.get() or {})


def bind_context(**fields: str) -> Token:
    """Merge ``fields`` into the active context; undo with ``LOG_CONTEXT.reset``."""
    return LOG_CONTEXT.set({**(LOG_CONTEXT.get() or {}), **fields})


@contextmanager
def log_context(**fields: str) -> Iterator[None]:
    """Bind ``fields`` for the duration of the block."""
    token = bind_context(**fields)
    try:
        yield
    finally:
        LOG_CONTEXT.reset(token)
