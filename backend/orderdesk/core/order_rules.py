"""Order Rules: pure functions behind the record store.

Invariants:
    - next_id returns max(id) + 1, or 1 for an empty collection
    - apply_patch never changes id or created_at
    - decode_row returns None for any row whose id or qty is not an integer
    - encode_row / decode_row use the fixed ORDER_COLUMNS positions

Design Decisions:
    - Row codec works on already-split cell lists: quoting and line splitting
      belong to the store, keeping these functions IO-free
    - Rows shorter than the layout are padded with "" (missing trailing fields)
"""

import re
from dataclasses import replace
from typing import Iterable, Sequence

from orderdesk.core.order_types import ORDER_COLUMNS, Order, OrderPatch

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")


def next_id(orders: Iterable[Order]) -> int:
    """Allocate the id for a new order from the currently loaded collection."""
    return max((o.id for o in orders), default=0) + 1


def apply_patch(order: Order, patch: OrderPatch) -> Order:
    """Merge supplied patch fields over an existing order."""
    return replace(
        order,
        customer=order.customer if patch.customer is None else patch.customer,
        item=order.item if patch.item is None else patch.item,
        qty=order.qty if patch.qty is None else patch.qty,
        status=order.status if patch.status is None else patch.status,
    )


def filter_by_status(orders: Iterable[Order], status: str | None) -> list[Order]:
    """Keep orders with exactly this status. None or "all" keeps everything."""
    if not status or status == "all":
        return list(orders)
    return [o for o in orders if o.status == status]


def is_header_row(row: Sequence[str]) -> bool:
    return tuple(row) == ORDER_COLUMNS


def is_blank_row(row: Sequence[str]) -> bool:
    return not any(cell.strip() for cell in row)


def encode_row(order: Order) -> list[str]:
    return [
        str(order.id),
        order.customer,
        order.item,
        str(order.qty),
        order.status,
        order.created_at,
    ]


def decode_row(row: Sequence[str]) -> Order | None:
    """Build an Order from one data row, or None if id/qty are not integers."""
    cells = list(row[:len(ORDER_COLUMNS)])
    cells += [""] * (len(ORDER_COLUMNS) - len(cells))
    id_text, customer, item, qty_text, status, created_at = cells
    order_id = _parse_int(id_text)
    qty = _parse_int(qty_text)
    if order_id is None or qty is None:
        return None
    return Order(
        id=order_id, customer=customer, item=item,
        qty=qty, status=status, created_at=created_at,
    )


def _parse_int(text: str) -> int | None:
    """ASCII digits with an optional sign only (no "1_000", no non-Latin digits)."""
    text = text.strip()
    if not _INT_PATTERN.fullmatch(text):
        return None
    return int(text)
