# backend/balance_tracker/utils/logging.py
"""
Logging setup for the API process.

setup_logging() installs one stdout handler on the root logger. Every
record passing through it is stamped with the correlation ID of the
request being served, so all lines of one upload can be found by the
traceId returned to the client.

Formats (LOG_FORMAT):
    text  2025-08-01 10:30:00 | INFO     | 5f0c... | balance_tracker.x | message
    json  one object per line: timestamp, level, logger, correlation_id,
          message, optional exception and extra

Level guide:
    DEBUG   - Per-row parsing detail, parser selection
    INFO    - Business events (upload processed, user logged in)
    WARNING - Rejected input, skipped accounts, failed logins
    ERROR   - Unexpected failures and collaborator faults
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from balance_tracker.config import settings
from balance_tracker.utils.context import get_correlation_id

TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(correlation_id)s | %(name)s | %(message)s"
TEXT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

NO_CORRELATION_ID = "no-correlation-id"

# Multipart parsing and bcrypt backends log every request at DEBUG
QUIET_LOGGERS = (
    "multipart",
    "python_multipart",
    "passlib",
    "httpx",
    "httpcore",
    "asyncio",
)

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# Attributes every LogRecord has; anything else came in through `extra=`
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None))
) | {"correlation_id", "message", "taskName"}


class CorrelationIdFilter(logging.Filter):
    """Adds `correlation_id` to each record (placeholder outside a request)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or NO_CORRELATION_ID
        return True


class JsonFormatter(logging.Formatter):
    """Render records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "correlation_id": getattr(record, "correlation_id", NO_CORRELATION_ID),
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        extra = {
            key: _json_safe(value)
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS
        }
        if extra:
            entry["extra"] = extra

        return json.dumps(entry)


def _json_safe(value: Any) -> Any:
    try:
        json.dumps(value)
    except (TypeError, ValueError):
        return str(value)
    return value


def _get_log_level(level_str: str) -> int:
    """
    Raises:
        ValueError: If level_str is not a known level name
    """
    name = level_str.upper().strip()
    if name not in _LEVELS:
        raise ValueError(
            f"Invalid log level: '{level_str}'. Valid levels are: {', '.join(_LEVELS)}"
        )
    return _LEVELS[name]


def setup_logging(
        level: str | None = None,
        log_format: str | None = None,
        suppress_noisy_loggers: bool = True,
) -> None:
    """
    Configure root logging. Call once, before the FastAPI app is created.

    Args:
        level: Level name; defaults to settings.log_level
        log_format: "text" or "json"; defaults to settings.log_format
        suppress_noisy_loggers: Raise QUIET_LOGGERS to WARNING
    """
    level_name = level or settings.log_level
    format_type = (log_format or settings.log_format).lower()

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(CorrelationIdFilter())
    if format_type == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(fmt=TEXT_FORMAT, datefmt=TEXT_DATE_FORMAT))

    root = logging.getLogger()
    root.setLevel(_get_log_level(level_name))
    root.handlers.clear()
    root.addHandler(handler)

    if suppress_noisy_loggers:
        for name in QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).info(f"Logging configured: level={level_name}, format={format_type}")
