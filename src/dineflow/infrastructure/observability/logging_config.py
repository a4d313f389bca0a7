from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

from opentelemetry import trace

from dineflow.api.middleware.request_id import get_request_id

_LOGGING_CONFIGURED = False

# Structured fields lifted from `extra=` onto the JSON line.
EXTRA_FIELDS = (
    "method",
    "path",
    "status_code",
    "duration_ms",
    "event_type",
    "table_id",
    "order_id",
    "bill_id",
    "entry_id",
    "number",
    "party_size",
    "order_count",
    "from_status",
    "to_status",
    "reason",
    "channel",
    "receivers",
    "event",
)

# Third-party loggers that are too chatty at INFO.
QUIET_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine", "alembic.runtime.migration")


class JsonFormatter(logging.Formatter):
    def __init__(self, service_name: str) -> None:
        super().__init__()
        self._service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        line: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "service": self._service_name,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": get_request_id(),
        }
        span_context = trace.get_current_span().get_span_context()
        if span_context.is_valid:
            line["trace_id"] = format(span_context.trace_id, "032x")
            line["span_id"] = format(span_context.span_id, "016x")

        line.update(
            (key, getattr(record, key))
            for key in EXTRA_FIELDS
            if getattr(record, key, None) is not None
        )
        if record.exc_info:
            line["exception"] = self.formatException(record.exc_info)
        return json.dumps(line, default=str)


def configure_logging(level: str | None = None) -> None:
    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter(os.getenv("OTEL_SERVICE_NAME", "dineflow-backend")))

    root_logger = logging.getLogger()
    root_logger.handlers[:] = [handler]
    root_logger.setLevel((level or os.getenv("LOG_LEVEL", "INFO")).upper())
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _LOGGING_CONFIGURED = True
