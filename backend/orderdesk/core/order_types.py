"""Order Types: the Order record, its typed patch, and the persisted column layout.

Invariants:
    - ORDER_COLUMNS is the on-disk column order and the exact header line
    - Order.id and Order.created_at are never touched by an OrderPatch
    - OrderPatch has one optional slot per mutable field; None means "not supplied"

Design Decisions:
    - Frozen dataclasses over dicts: merges go through dataclasses.replace,
      so every mutable field is named explicitly
    - status stays free-form text; OrderStatus lists the values the UI offers
"""

from dataclasses import dataclass
from enum import Enum
from typing import NewType


OrderId = NewType("OrderId", int)

ORDER_COLUMNS: tuple[str, ...] = (
    "id", "customer", "item", "qty", "status", "createdAt",
)
HEADER_LINE = ",".join(ORDER_COLUMNS)


class OrderStatus(str, Enum):
    """Statuses offered by the UI. Stored values are not restricted to these."""
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"


DEFAULT_STATUS = OrderStatus.PROCESSING.value


@dataclass(frozen=True)
class Order:
    id: int
    customer: str
    item: str
    qty: int
    status: str
    created_at: str

    def to_dict(self) -> dict:
        """JSON shape, keyed like the CSV header."""
        return {
            "id": self.id,
            "customer": self.customer,
            "item": self.item,
            "qty": self.qty,
            "status": self.status,
            "createdAt": self.created_at,
        }


@dataclass(frozen=True)
class OrderPatch:
    customer: str | None = None
    item: str | None = None
    qty: int | None = None
    status: str | None = None

    @property
    def is_empty(self) -> bool:
        return all(
            v is None for v in (self.customer, self.item, self.qty, self.status)
        )
