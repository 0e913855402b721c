"""Structured JSON logging configuration.

Every record carries the ID of the request it was logged under, so service
logs (import sessions, batch submissions, exam changes) can be joined with
the access log lines written by ``RequestIDMiddleware``.
"""

import logging
import sys
from contextvars import ContextVar
from typing import Any

from pythonjsonlogger import jsonlogger

from school_admin.core.config import Settings

request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)


class RequestContextFilter(logging.Filter):
    """Attach the current request ID unless the call site passed one."""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "request_id", None) is None:
            record.request_id = request_id_ctx.get()
        return True


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter emitting the console's log fields."""

    def add_fields(self, log_record: dict[str, Any], record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = self.formatTime(record, self.datefmt)
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["event"] = record.getMessage()
        log_record["request_id"] = getattr(record, "request_id", None)

        log_record.pop("message", None)
        log_record.pop("asctime", None)


def _level(name: str) -> int:
    return getattr(logging, name.upper(), logging.INFO)


def setup_logging(settings: Settings) -> None:
    """Configure the root logger and per-logger levels from ``settings``."""
    root_logger = logging.getLogger()
    root_logger.setLevel(_level(settings.LOG_LEVEL))
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        CustomJsonFormatter(
            "%(timestamp)s %(level)s %(logger)s %(request_id)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )
    handler.addFilter(RequestContextFilter())
    root_logger.addHandler(handler)

    for name, level in settings.LOG_LEVEL_OVERRIDES.items():
        logging.getLogger(name).setLevel(_level(level))


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(name)
