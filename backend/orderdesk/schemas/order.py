"""Order Schemas: Pydantic models with field-level validation for API boundaries.

Invariants:
    - customer, item: stripped, non-empty
    - qty: positive integer; integer-valued numbers and numeric strings coerced, bools rejected
    - OrderUpdate: every field optional; "" or null qty means "not supplied"
    - OrderUpdate ignores id/createdAt (unknown keys are dropped), so they can never change

Design Decisions:
    - OrderUpdate.to_patch() produces the typed OrderPatch: the store never
      sees an open-ended dict
    - Response uses serialization_alias so JSON keeps the createdAt column name
"""

from typing import Any

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from orderdesk.core.order_types import DEFAULT_STATUS, Order, OrderPatch


def _strip_required(v: str, name: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError(f"{name} cannot be empty or whitespace")
    return v


def _reject_bool(v: Any) -> Any:
    if isinstance(v, bool):
        raise ValueError("qty must be a positive integer")
    return v


class OrderCreate(BaseModel):
    """Order creation: customer, item and a positive quantity."""
    customer: str = Field(max_length=200)
    item: str = Field(max_length=200)
    qty: int = Field(gt=0)
    status: str | None = Field(None, max_length=50, validate_default=True)

    @field_validator("customer", "item")
    @classmethod
    def strip_required(cls, v: str, info: ValidationInfo) -> str:
        return _strip_required(v, info.field_name)

    @field_validator("status")
    @classmethod
    def strip_status(cls, v: str | None) -> str:
        if v is None or not v.strip():
            return DEFAULT_STATUS
        return v.strip()

    @field_validator("qty", mode="before")
    @classmethod
    def reject_bool_qty(cls, v: Any) -> Any:
        return _reject_bool(v)


class OrderUpdate(BaseModel):
    """Partial order update: only supplied fields change."""
    customer: str | None = Field(None, max_length=200)
    item: str | None = Field(None, max_length=200)
    qty: int | None = Field(None, gt=0)
    status: str | None = Field(None, max_length=50)

    @field_validator("customer", "item", "status")
    @classmethod
    def strip_optional(cls, v: str | None, info: ValidationInfo) -> str | None:
        if v is None:
            return None
        return _strip_required(v, info.field_name)

    @field_validator("qty", mode="before")
    @classmethod
    def blank_qty_is_absent(cls, v: Any) -> Any:
        if v == "":
            return None
        return _reject_bool(v)

    def to_patch(self) -> OrderPatch:
        return OrderPatch(
            customer=self.customer, item=self.item,
            qty=self.qty, status=self.status,
        )


class OrderResponse(BaseModel):
    """Order response: public-facing order data."""
    id: int
    customer: str
    item: str
    qty: int
    status: str
    created_at: str = Field(serialization_alias="createdAt")

    @classmethod
    def from_order(cls, order: Order) -> "OrderResponse":
        return cls(
            id=order.id, customer=order.customer, item=order.item,
            qty=order.qty, status=order.status, created_at=order.created_at,
        )
