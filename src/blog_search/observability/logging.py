"""Structured logging setup.

Each record becomes one JSON object per line (serialized with orjson) that
carries the active log context, so build and query lines can be correlated
by ``trace_id``.
"""

from __future__ import annotations

from datetime import datetime, timezone
import logging
from pathlib import Path
import sys
from typing import IO, Any

import orjson

from blog_search.observability.context import LOG_CONTEXT


# Attributes every LogRecord has; anything else came in through ``extra=``.
_STANDARD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}
_HANDLER_NAME = "blog_search"
_PLAIN_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class JsonFormatter(logging.Formatter):
    """Render log records as single-line JSON documents."""

    MAX_MESSAGE_LEN = 2000
    MAX_FIELD_LEN = 500

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": _shorten(record.getMessage(), self.MAX_MESSAGE_LEN),
        }
        entry.update(LOG_CONTEXT.get() or {})
        for key, value in vars(record).items():
            if key in _STANDARD_ATTRS or key.startswith("_"):
                continue
            entry[key] = _shorten(value, self.MAX_FIELD_LEN) if isinstance(value, str) else value
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return orjson.dumps(entry, default=_fallback).decode("utf-8")


def _shorten(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[:limit] + "..."


def _fallback(value: Any) -> Any:
    if isinstance(value, (set, frozenset, tuple)):
        return sorted(value, key=str)
    if isinstance(value, (Path, BaseException)):
        return str(value)
    if isinstance(value, (bytes, bytearray)):
        return value.decode("utf-8", errors="replace")
    return repr(value)


def configure_logging(
    level: str = "info",
    json_output: bool = True,
    *,
    stream: IO[str] | None = None,
    logger_levels: dict[str, str] | None = None,
) -> logging.Handler:
    """Install the package log handler on the root logger.

    Calling it again replaces the handler installed earlier; handlers added
    by other code are left alone. Output goes to stderr unless ``stream`` is
    given, keeping stdout free for command output.
    """
    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == _HANDLER_NAME]:
        root.removeHandler(existing)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(JsonFormatter() if json_output else logging.Formatter(_PLAIN_FORMAT))
    root.addHandler(handler)
    root.setLevel(_level(level))

    for name, name_level in (logger_levels or {}).items():
        logging.getLogger(name).setLevel(_level(name_level))
    return handler


def _level(name: str) -> int:
    resolved = logging.getLevelName(name.upper())
    return resolved if isinstance(resolved, int) else logging.INFO
