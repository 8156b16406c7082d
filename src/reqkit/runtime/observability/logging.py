"""Logging setup for reqkit.

Library modules log through ``logging.getLogger("reqkit.<area>")`` and never
configure handlers on import. Applications call `configure_logging` once at
startup to attach a text (human) or JSON Lines (machine) handler to the
``reqkit`` logger.

Quick Start:
    >>> from reqkit.runtime.observability import configure_logging, get_logger
    >>>
    >>> configure_logging(format="json", level="DEBUG")
    >>> log = get_logger("client")
    >>> log.info("fetching", extra={"request_id": "req_1"})
"""

from __future__ import annotations

import logging
import sys
from datetime import UTC, datetime
from typing import TYPE_CHECKING, TextIO

import orjson

if TYPE_CHECKING:
    from reqkit.foundation.config import LoggingSettings

ROOT_LOGGER = "reqkit"

# Attributes every LogRecord has; anything else came from `extra=`
_RESERVED = frozenset(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {"message", "asctime"}


def _extras(record: logging.LogRecord) -> dict[str, object]:
    return {k: v for k, v in record.__dict__.items() if k not in _RESERVED and not k.startswith("_")}


class TextFormatter(logging.Formatter):
    """Format: HH:MM:SS.mmm [level] logger: message key=value ..."""

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created, tz=UTC).strftime("%H:%M:%S.%f")[:-3]
        parts = [ts, f"[{record.levelname.lower()}]", f"{record.name}:", record.getMessage()]
        parts += [f"{k}={v}" for k, v in sorted(_extras(record).items())]
        line = " ".join(parts)
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


class JsonFormatter(logging.Formatter):
    """JSON Lines output for log aggregation."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "event": record.getMessage(),
            **_extras(record),
        }
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return orjson.dumps(entry, default=str, option=orjson.OPT_NON_STR_KEYS).decode()


def configure_logging(
    settings: LoggingSettings | None = None,
    *,
    level: str | None = None,
    format: str | None = None,  # noqa: A002 - shadows builtin but matches stdlib
    stream: TextIO | None = None,
) -> logging.Handler:
    """Attach a single handler to the ``reqkit`` logger.

    Explicit ``level``/``format`` win over ``settings``; without either the
    environment-derived LoggingSettings are used. Calling again replaces the
    previously installed handler.
    """
    if settings is None:
        from reqkit.foundation.config import get_settings
        settings = get_settings().logging

    fmt = format or settings.format
    match fmt:
        case "text": formatter: logging.Formatter = TextFormatter()
        case "json": formatter = JsonFormatter()
        case _: raise ValueError(f"Unknown format: {fmt}. Use 'text' or 'json'")

    root = logging.getLogger(ROOT_LOGGER)
    for existing in [h for h in root.handlers if getattr(h, "_reqkit", False)]:
        root.removeHandler(existing)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(formatter)
    handler._reqkit = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel((level or settings.level).upper())
    return handler


def get_logger(name: str | None = None) -> logging.Logger:
    """Logger under the ``reqkit`` namespace."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}" if name else ROOT_LOGGER)
