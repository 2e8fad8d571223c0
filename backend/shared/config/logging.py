"""
Structured logging for the POS backend.

Log calls take keyword context instead of formatted strings:

    logger.info("Order placed", order_id=order.order_id, table_no="5")

Production writes one JSON object per line; development prints a short
coloured line with the context appended. Every record carries the
X-Request-ID of the request that produced it, so the steps of one
place/settle/transfer operation can be followed through the log.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from shared.config.settings import settings

# Context keys printed first in text mode, in this order
_LEADING_KEYS = ("order_id", "table_no", "payment_id", "step")


def _context(record: logging.LogRecord) -> dict[str, Any]:
    return getattr(record, "context", None) or {}


def _request_id(record: logging.LogRecord) -> str | None:
    request_id = getattr(record, "request_id", None)
    return request_id if request_id and request_id != "-" else None


class JsonFormatter(logging.Formatter):
    """One JSON object per line for log collectors."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if request_id := _request_id(record):
            entry["request_id"] = request_id
        if context := _context(record):
            entry["context"] = context
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        if settings.debug:
            entry["where"] = f"{record.module}:{record.lineno}"
        return json.dumps(entry, default=str, ensure_ascii=False)


class TextFormatter(logging.Formatter):
    """Readable single-line output for a terminal."""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"
    DIM = "\033[2m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, self.RESET)
        clock = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        parts = [f"{color}{clock} {record.levelname:<7}{self.RESET}"]

        if request_id := _request_id(record):
            parts.append(f"{self.DIM}{request_id[:8]}{self.RESET}")
        parts.append(f"{record.name}: {record.getMessage()}")

        context = _context(record)
        if context:
            keys = [k for k in _LEADING_KEYS if k in context]
            keys += [k for k in context if k not in _LEADING_KEYS]
            parts.append(f"{self.DIM}[{' '.join(f'{k}={context[k]}' for k in keys)}]{self.RESET}")

        line = " ".join(parts)
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class StructuredLogger(logging.Logger):
    """Logger whose level methods accept arbitrary keyword context."""

    def _log(self, level, msg, args, exc_info=None, extra=None, stack_info=False, stacklevel=1, **context):
        extra = dict(extra or {})
        extra["context"] = context or None
        super()._log(level, msg, args, exc_info=exc_info, extra=extra, stack_info=stack_info, stacklevel=stacklevel + 1)


logging.setLoggerClass(StructuredLogger)


def setup_logging() -> None:
    """Install the stdout handler on the root logger. Call once at startup."""
    from shared.infrastructure.correlation import CorrelationIdFilter

    level_name = settings.log_level or ("DEBUG" if settings.debug else "INFO")
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        level = logging.INFO

    log_format = settings.log_format or ("json" if settings.environment == "production" else "text")

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(CorrelationIdFilter())
    handler.setFormatter(JsonFormatter() if log_format == "json" else TextFormatter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for noisy in ("uvicorn.access", "httpx", "httpcore", "sqlalchemy.engine"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str) -> StructuredLogger:
    """Logger for a module: `logger = get_logger(__name__)`."""
    return logging.getLogger(name)  # type: ignore[return-value]


pos_api_logger = get_logger("pos_api")
lifecycle_logger = get_logger("pos_api.lifecycle")
kitchen_logger = get_logger("pos_api.kitchen")
checkout_logger = get_logger("pos_api.checkout")
mirror_logger = get_logger("pos_api.mirror")
