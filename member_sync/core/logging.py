# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Structured JSON logging for the sync engine.

All loggers hang off the ``member_sync`` logger, which owns the single stdout
handler. Each record becomes one JSON line carrying:

    timestamp, level, service, logger, message
    request_id      the X-Request-ID of the HTTP request being served
    list_id, subscriber_id, mail_chimp_id, operation, status_code
                    when passed through ``extra=``
    error, error_type
                    when logged with exc_info
"""

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any

from member_sync.core.config import settings

ROOT_LOGGER = "member_sync"

# Set by RequestIDMiddleware for the duration of one request.
request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)

CONTEXT_FIELDS: tuple[str, ...] = (
    "list_id", "subscriber_id", "mail_chimp_id", "operation", "status_code",
)


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "service": settings.SERVICE_NAME,
            "logger": record.name,
            "message": record.getMessage(),
        }
        request_id = getattr(record, "request_id", None) or request_id_ctx.get()
        if request_id:
            entry["request_id"] = request_id
        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                entry[field] = value
        if record.exc_info and record.exc_info[1]:
            entry["error"] = str(record.exc_info[1])
            entry["error_type"] = type(record.exc_info[1]).__name__
        return json.dumps(entry, default=str)


def configure_logging(level: str | None = None) -> logging.Logger:
    """Attach the JSON handler to the package logger. Safe to call twice."""
    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO))
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JSONFormatter())
        root.addHandler(handler)
        root.propagate = False
    return root


def get_logger(name: str | None = None) -> logging.Logger:
    """Child of the package logger; modules outside the package are nested under it."""
    root = logging.getLogger(ROOT_LOGGER)
    if not root.handlers:
        configure_logging()
    if not name or name == ROOT_LOGGER:
        return root
    if not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
