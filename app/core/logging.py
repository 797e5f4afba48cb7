"""JSON logging for the API process."""

from __future__ import annotations

import logging
import sys
from typing import Any, Optional

from opentelemetry import trace
from pythonjsonlogger import jsonlogger

NOISY_LOGGERS = ("pymongo", "urllib3", "cloudinary", "passlib")


class ApiJSONFormatter(jsonlogger.JsonFormatter):
    """Adds service name and, inside a span, trace and span ids to each record."""

    def __init__(self, *args: Any, service: Optional[str] = None, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.service = service

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["level"] = record.levelname
        if self.service:
            log_record.setdefault("service", self.service)

        span_ctx = trace.get_current_span().get_span_context()
        if span_ctx.is_valid:
            log_record["trace_id"] = trace.format_trace_id(span_ctx.trace_id)
            log_record["span_id"] = trace.format_span_id(span_ctx.span_id)


def setup_logging(level: str = "INFO", service: Optional[str] = None) -> None:
    """Send JSON logs to stdout, replacing handlers left by earlier calls."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        ApiJSONFormatter(
            "%(asctime)s %(name)s %(message)s",
            rename_fields={"asctime": "timestamp"},
            service=service,
        )
    )

    root = logging.getLogger()
    root.setLevel(level.upper())
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)

    # access lines come from RequestLoggingMiddleware
    logging.getLogger("uvicorn.access").disabled = True
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
