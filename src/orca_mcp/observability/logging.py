"""Structured logging to stderr.

stdout carries the MCP stdio transport, so every record goes to stderr as a
single JSON object per line.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, TextIO

from orca_mcp.config.logging_config import LoggingConfig

_LEVELS: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "error": logging.ERROR,
}

# Attributes present on every LogRecord; anything else came from ``extra=``.
_RESERVED = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime"}


class StructuredFormatter(logging.Formatter):
    """Format records as ``{"ts", "level", "message", "logger", **extra}``."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "message": record.getMessage(),
            "logger": record.name,
        }
        for key, value in record.__dict__.items():
            if key not in _RESERVED and not key.startswith("_"):
                entry[key] = value
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_logging(
    config: LoggingConfig | None = None,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Attach a structured stderr handler to the package logger.

    Calling this again replaces the handler instead of adding a second one.

    Args:
        config: Logging configuration. Defaults to ``LoggingConfig()``.
        stream: Destination stream. Defaults to ``sys.stderr``.

    Returns:
        The configured logger.
    """
    config = config or LoggingConfig()
    logger = logging.getLogger(config.logger_name)

    for handler in list(logger.handlers):
        if getattr(handler, "_orca_structured", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(StructuredFormatter())
    handler._orca_structured = True  # type: ignore[attr-defined]

    logger.addHandler(handler)
    logger.setLevel(_LEVELS[config.level])
    logger.propagate = False
    return logger
