"""
itempool - Logging Setup

Structured JSON logging for the ``itempool`` logger hierarchy.
"""

import json
import logging
from datetime import UTC, datetime
from typing import Any

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RESERVED_ATTRS = frozenset(
    {
        "args",
        "msg",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "name",
        "message",
    }
)

ROOT_LOGGER = "itempool"


class JSONFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        # Add any extra fields from record.__dict__
        for key, value in record.__dict__.items():
            if key not in log_data and not key.startswith("_") and key not in _RESERVED_ATTRS:
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def configure_logging(level: str = "INFO", fmt: str = "json") -> logging.Logger:
    """
    Install a single stream handler on the ``itempool`` logger.

    Calling it again replaces the previous handler.

    Args:
        level: Log level name
        fmt: "json" for JSONFormatter, "text" for a plain line format

    Returns:
        The configured ``itempool`` logger
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.handlers.clear()

    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level.upper())

    return logger


def configure_from_config() -> logging.Logger:
    """Configure logging from the loaded ItemPoolConfig."""
    from ..config import get_config

    config = get_config()
    return configure_logging(level=str(config.log_level), fmt=str(config.log_format))
