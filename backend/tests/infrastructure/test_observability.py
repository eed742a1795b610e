"""Structured Logging: JSON formatter surfaces order fields."""

import json
import logging

from orderdesk.infrastructure.observability import (
    JSONFormatter, OrderTextFormatter, order_context,
)


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "orderdesk.test", logging.INFO, __file__, 1, "Order %s updated", (7,), None,
    )
    record.__dict__.update(extra)
    return record


def test_json_formatter_includes_base_fields():
    log = json.loads(JSONFormatter().format(_record()))
    assert log["level"] == "INFO"
    assert log["logger"] == "orderdesk.test"
    assert log["message"] == "Order 7 updated"
    assert "timestamp" in log


def test_json_formatter_surfaces_known_extras_only():
    log = json.loads(JSONFormatter().format(
        _record(order_id=7, operation="update", unrelated="x"),
    ))
    assert log["order_id"] == 7
    assert log["operation"] == "update"
    assert "unrelated" not in log


def test_json_formatter_orders_context_fields():
    log = json.loads(JSONFormatter().format(
        _record(rows_dropped=2, operation="read"),
    ))
    keys = list(log)
    assert keys.index("operation") < keys.index("rows_dropped")


def test_text_formatter_appends_order_context():
    line = OrderTextFormatter().format(_record(order_id=7, operation="update"))
    assert line.endswith("Order 7 updated [operation=update order_id=7]")


def test_text_formatter_without_context_is_plain():
    line = OrderTextFormatter().format(_record())
    assert line.endswith("orderdesk.test: Order 7 updated")


def test_order_context_skips_unset_fields():
    assert order_context(_record(path="/api/orders", error_code=None)) == {
        "path": "/api/orders",
    }
