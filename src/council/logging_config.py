"""Structured JSON logging to stderr.

stdout stays free for the MCP stdio transport, so every handler configured
here writes to stderr. Each record is one JSON object per line::

    {"timestamp": "...", "level": "info", "logger": "council.tools",
     "message": "Completed review_code", "model_count": 2}

Usage:
    from council.logging_config import configure_logging

    configure_logging()                     # LOG_LEVEL / DEBUG from env
    logger = logging.getLogger(__name__)
    logger.info("Running code review", extra={"model_count": 2})
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, TextIO

__all__ = ["StructuredFormatter", "configure_logging"]

# Attributes every LogRecord carries; anything else came in through ``extra``
_RESERVED_ATTRS = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    }
)


class StructuredFormatter(logging.Formatter):
    """Format log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                entry[key] = value

        if record.exc_info and record.exc_info[1] is not None:
            exc = record.exc_info[1]
            entry["error"] = {"name": type(exc).__name__, "message": str(exc)}

        return json.dumps(entry, default=str)


def _level_from_env() -> int:
    if os.environ.get("DEBUG", "").lower() == "true":
        return logging.DEBUG
    name = os.environ.get("LOG_LEVEL", "INFO").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level: int | str | None = None, stream: TextIO | None = None) -> None:
    """Install the JSON handler on the ``council`` logger.

    Args:
        level: Log level (defaults to LOG_LEVEL, or DEBUG when DEBUG=true)
        stream: Output stream (defaults to stderr)
    """
    logger = logging.getLogger("council")
    logger.setLevel(level if level is not None else _level_from_env())

    # Replace our own handler on repeated calls
    for handler in list(logger.handlers):
        if isinstance(handler.formatter, StructuredFormatter):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(StructuredFormatter())
    logger.addHandler(handler)
    logger.propagate = False
