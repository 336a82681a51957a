"""Structured JSON logger for noti.

Each record is emitted as one line of JSON so the CLI's stderr can be
piped straight into a log aggregator::

    {"ts": "2025-07-01T12:00:00.123456+00:00", "level": "WARNING",
     "logger": "noti.converter", "message": "Token conversion failed",
     "op": "markdown_to_blocks", "token_type": "heading"}

Usage::

    from noti.observability import get_logger

    log = get_logger("noti.importer")
    log.info("batch imported", extra={"extra_fields": {"rows": 100}})
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any


class StructuredFormatter(logging.Formatter):
    """Format log records as single-line JSON objects.

    Guaranteed keys are ``ts``, ``level``, ``logger`` and ``message``.
    Fields passed as ``extra={"extra_fields": {...}}`` are merged into
    the top-level object; ``exc_info`` and ``stack_info`` are serialised
    when present.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extra_fields: dict[str, Any] | None = getattr(
            record, "extra_fields", None
        )
        if extra_fields is not None:
            log_entry.update(extra_fields)

        if record.exc_info and record.exc_info[1] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)

        if record.stack_info:
            log_entry["stack_info"] = self.formatStack(record.stack_info)

        return json.dumps(log_entry, default=str, ensure_ascii=False)


# One handler per logger name so get_logger stays idempotent.
_configured_loggers: set[str] = set()


def get_logger(
    name: str = "noti",
    *,
    level: int | str = logging.WARNING,
    stream: Any | None = None,
) -> logging.Logger:
    """Get or create a structured JSON logger.

    Parameters
    ----------
    name:
        Logger name.  Defaults to ``"noti"``.
    level:
        Minimum log level as an ``int`` or case-insensitive name.  The
        default keeps library output quiet; see :func:`set_debug_mode`.
    stream:
        Output stream for the handler.  Defaults to ``sys.stderr``.

    Returns
    -------
    logging.Logger
        A logger with a :class:`StructuredFormatter` handler attached.
        Repeated calls with the same *name* return the same logger
        without adding handlers.
    """
    logger = logging.getLogger(name)

    if name not in _configured_loggers:
        resolved_level = (
            logging.getLevelName(level.upper())
            if isinstance(level, str)
            else level
        )
        logger.setLevel(resolved_level)

        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(StructuredFormatter())
        logger.addHandler(handler)
        logger.propagate = False

        _configured_loggers.add(name)

    return logger


def set_debug_mode(enabled: bool, prefix: str = "noti") -> None:
    """Switch every configured logger under *prefix* to ``DEBUG`` or back
    to ``WARNING``.

    This is what the CLI's ``--debug`` flag calls.  Debug level also
    unlocks the AST and payload dumps enabled in
    :class:`~noti.config.NotiConfig`.
    """
    level = logging.DEBUG if enabled else logging.WARNING
    for name in _configured_loggers:
        if name == prefix or name.startswith(prefix + "."):
            logging.getLogger(name).setLevel(level)
