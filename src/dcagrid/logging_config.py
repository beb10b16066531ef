"""
Structured logging configuration for dcagrid.

Provides JSON-formatted structured logging where extra fields are always
JSON-safe:
- Non-finite floats (nan/inf from degenerate ladders) rendered as strings
- Enums rendered as their value
- Long lists collapsed to a count, nested dicts capped at depth 3

Usage:
    from dcagrid.logging_config import setup_logging, get_logger

    setup_logging()  # Call once at startup
    logger = get_logger(__name__)
    logger.info("Hedge triggered", extra={"trigger_price": 1965.7})
"""

from __future__ import annotations

import json
import logging
import math
import sys
from datetime import UTC, datetime
from enum import Enum
from typing import Any

# Standard LogRecord attributes; everything else on a record came from `extra`
_RESERVED_ATTRS: frozenset[str] = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "exc_info",
        "exc_text",
        "thread",
        "threadName",
        "message",
        "taskName",
    }
)

MAX_LIST_ITEMS = 10
MAX_DEPTH = 3


def _coerce_value(value: Any, *, _depth: int = 0) -> Any:
    """Convert one extra-field value to something json.dumps accepts."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, float):
        return value if math.isfinite(value) else str(value)
    if isinstance(value, (int, bool, str, type(None))):
        return value
    if isinstance(value, (list, tuple)):
        if len(value) > MAX_LIST_ITEMS:
            return f"[list:{len(value)} items]"
        return [_coerce_value(v, _depth=_depth) for v in value]
    if isinstance(value, dict):
        return _filter_log_record(value, _depth=_depth + 1)
    return str(value)


def _filter_log_record(record: dict[str, Any], *, _depth: int = 0) -> dict[str, Any]:
    """Make extra fields JSON-safe, recursing into nested dicts up to MAX_DEPTH."""
    if _depth > MAX_DEPTH:
        return {"_truncated": "max depth exceeded"}
    return {str(key): _coerce_value(value, _depth=_depth) for key, value in record.items()}


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Collect the `extra` fields attached to a record."""
    return {k: v for k, v in record.__dict__.items() if k not in _RESERVED_ATTRS}


class JsonFormatter(logging.Formatter):
    """JSON log formatter for structured logging.

    Output format (one object per line):
    {"ts":"2024-01-01T00:00:00.000+00:00","level":"INFO","logger":"module","msg":"...", ...}
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_dict: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(
                timespec="milliseconds"
            ),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }

        if record.levelno >= logging.WARNING:
            log_dict["file"] = record.filename
            log_dict["line"] = record.lineno

        if record.exc_info:
            log_dict["exc"] = self.formatException(record.exc_info)

        extra = _extra_fields(record)
        if extra:
            log_dict.update(_filter_log_record(extra))

        return json.dumps(log_dict, default=str, ensure_ascii=False)


class SimpleFormatter(logging.Formatter):
    """Human-readable formatter for CLI and development use."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as `LEVEL    logger: msg | k=v ...`."""
        base = f"{record.levelname:8s} {record.name}: {record.getMessage()}"

        extra = _extra_fields(record)
        if extra:
            filtered = _filter_log_record(extra)
            extra_str = " ".join(f"{k}={v}" for k, v in filtered.items())
            base = f"{base} | {extra_str}"

        if record.exc_info:
            base = f"{base}\n{self.formatException(record.exc_info)}"

        return base


def setup_logging(
    *,
    level: int | str = logging.INFO,
    json_format: bool = True,
    stream: Any = None,
) -> None:
    """Configure structured logging for the application.

    Call once at application startup.

    Args:
        level: Log level (default INFO).
        json_format: Use JSON formatter (default True).
        stream: Output stream (default stderr).
    """
    if stream is None:
        stream = sys.stderr

    handler = logging.StreamHandler(stream)
    handler.setFormatter(JsonFormatter() if json_format else SimpleFormatter())

    root = logging.getLogger()
    root.setLevel(level)

    # Remove existing handlers to avoid duplicates
    root.handlers.clear()
    root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Logger name (typically __name__).

    Returns:
        Logger instance.
    """
    return logging.getLogger(name)
