"""Structured JSON logging for webhook_validator."""

import json
import logging
import os
import traceback
from datetime import UTC, datetime
from typing import IO, Any

ROOT_LOGGER_NAME = "webhook_validator"

# Attributes every LogRecord carries; anything else arrived through ``extra=``
_RECORD_ATTRS = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "taskName"}

# Extra fields that may carry key material and are never written out
REDACTED_FIELDS = frozenset({"key", "secret", "secret_key", "signature"})
REDACTED = "***"


class JsonFormatter(logging.Formatter):
    """Format log records as one JSON object per line.

    Validation context passed with ``extra=`` (``key_label``, ``delivery_id``,
    ``ip``, ``file``) is emitted as top-level fields. Fields that could hold a
    secret or a signature are masked.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as JSON.

        Args:
            record: The log record to format.

        Returns:
            JSON-formatted string.
        """
        log_entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.levelno >= logging.WARNING:
            log_entry["location"] = f"{record.module}:{record.lineno}"

        if record.exc_info:
            log_entry["exception"] = "".join(traceback.format_exception(*record.exc_info))

        log_entry.update(self._context_fields(record))
        return json.dumps(log_entry, default=str)

    @staticmethod
    def _context_fields(record: logging.LogRecord) -> dict[str, Any]:
        fields: dict[str, Any] = {}
        for key, value in record.__dict__.items():
            if key in _RECORD_ATTRS or key.startswith("_"):
                continue
            if key in REDACTED_FIELDS:
                fields[key] = REDACTED
                continue
            try:
                json.dumps(value)
                fields[key] = value
            except (TypeError, ValueError):
                fields[key] = str(value)
        return fields


def _level_from_env() -> int:
    level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    level = logging.getLevelName(level_name)
    return level if isinstance(level, int) else logging.INFO


def configure_logging(
    name: str = ROOT_LOGGER_NAME,
    stream: IO[str] | None = None,
) -> logging.Logger:
    """Configure structured JSON logging for the validator.

    The level is taken from the ``LOG_LEVEL`` environment variable and falls
    back to INFO when unset or unknown.

    Args:
        name: The root logger name.
        stream: Stream for the handler, defaults to stderr.

    Returns:
        Configured logger instance.
    """
    log_level = _level_from_env()

    logger = logging.getLogger(name)
    logger.setLevel(log_level)

    # Reconfiguring must not stack handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(stream)
    handler.setLevel(log_level)
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)

    logger.propagate = False

    return logger


def get_logger(module_name: str) -> logging.Logger:
    """Get a child logger for a specific module.

    Args:
        module_name: The module name to create a child logger for.

    Returns:
        Child logger instance.
    """
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{module_name}")
