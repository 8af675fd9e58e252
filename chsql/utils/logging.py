"""Logging setup for chsql.

Every logger handed out by :func:`get_logger` lives under the ``chsql``
namespace, so applications can tune the library's verbosity in one place.
Builder events carry their details in an ``extra_fields`` mapping, which
:class:`StructuredFormatter` merges into each JSON line.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

from chsql._serialization import encode_json

if TYPE_CHECKING:
    from logging import LogRecord

__all__ = ("ROOT_LOGGER_NAME", "StructuredFormatter", "configure_logging", "event_fields", "get_logger")

ROOT_LOGGER_NAME = "chsql"


def event_fields(event: str, **fields: Any) -> dict[str, Any]:
    """Build the ``extra=`` mapping for a structured builder event.

    Args:
        event: Short event name, e.g. ``"builder.failed"``.
        **fields: Event details merged into the JSON line.

    Returns:
        Mapping suitable for the ``extra`` argument of :meth:`logging.Logger.log`.
    """
    return {"extra_fields": {"event": event, **fields}}


class StructuredFormatter(logging.Formatter):
    """JSON-lines formatter that inlines ``extra_fields``."""

    def format(self, record: LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extra_fields = getattr(record, "extra_fields", None)
        if extra_fields:
            log_entry.update(extra_fields)

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return encode_json(log_entry)


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger under the ``chsql`` namespace.

    Args:
        name: Logger name. If not provided, returns the root chsql logger.

    Returns:
        Logger instance.
    """
    if name is None or name == ROOT_LOGGER_NAME:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if not name.startswith(f"{ROOT_LOGGER_NAME}."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def configure_logging(
    level: str = "INFO",
    format_style: str = "structured",
    extra_handlers: list[logging.Handler] | None = None,
) -> None:
    """Route the ``chsql`` loggers to stdout.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_style: ``"structured"`` for JSON lines, ``"simple"`` for plain text
        extra_handlers: Additional handlers to add
    """
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(getattr(logging, level.upper()))
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    if format_style == "structured":
        formatter: logging.Formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    for handler in extra_handlers or ():
        root_logger.addHandler(handler)

    root_logger.propagate = False
