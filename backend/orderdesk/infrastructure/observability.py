"""Structured Logging: JSON and text formatters carrying order-store context.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Order context (operation, order_id, rows_dropped) and error context
      (error_code, path) surfaced when present, in a fixed order
    - JSON format in production, human-readable key=value suffix in development

Design Decisions:
    - Formatters over third-party libs: zero dependencies, full control
    - setup_logging called once on startup via lifespan
"""

import logging
import json
from datetime import datetime, timezone

ORDER_CONTEXT_FIELDS = ("operation", "order_id", "rows_dropped")
ERROR_CONTEXT_FIELDS = ("error_code", "path")


def order_context(record: logging.LogRecord) -> dict:
    """Extra fields attached by the store and error handlers, in display order."""
    context = {}
    for key in ORDER_CONTEXT_FIELDS + ERROR_CONTEXT_FIELDS:
        val = record.__dict__.get(key)
        if val is not None:
            context[key] = val
    return context


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **order_context(record),
        }
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


class OrderTextFormatter(logging.Formatter):
    """Human-readable line with order context appended as key=value pairs."""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)s %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = order_context(record)
        if not context:
            return line
        suffix = " ".join(f"{k}={v}" for k, v in context.items())
        head, sep, rest = line.partition("\n")
        return f"{head} [{suffix}]{sep}{rest}"


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Configure logging for the application."""
    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter() if fmt == "json" else OrderTextFormatter())
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
