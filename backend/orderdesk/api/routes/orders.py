"""Order Routes: CRUD endpoints over the CSV order store.

Invariants:
    - Request bodies and path ids are validated by Pydantic before reaching the store
    - Store absence (None / False) becomes ResourceNotFoundError → 404
    - PUT and PATCH share one handler: both apply a partial update

Design Decisions:
    - Plain def handlers: store IO is blocking, FastAPI runs them on its threadpool
      and the store's lock serializes the read-mutate-write cycles
    - Status filter applied server-side with the same exact-match rule the page uses
"""

import logging

from fastapi import APIRouter, Depends, Path, Query, Response, status

from orderdesk.core.errors import ErrorContext, ResourceNotFoundError
from orderdesk.core.order_rules import filter_by_status
from orderdesk.infrastructure.order_store import OrderStore, get_store
from orderdesk.schemas.order import OrderCreate, OrderResponse, OrderUpdate

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/orders", tags=["orders"])


def _not_found(order_id: int) -> ResourceNotFoundError:
    return ResourceNotFoundError(
        "Order", str(order_id), ErrorContext(order_id=order_id),
    )


@router.get("", response_model=list[OrderResponse])
def list_orders(
    status_filter: str | None = Query(None, alias="status", max_length=50),
    store: OrderStore = Depends(get_store),
):
    """List orders in file order, optionally filtered by exact status."""
    orders = filter_by_status(store.read_all(), status_filter)
    return [OrderResponse.from_order(o) for o in orders]


@router.post(
    "", response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_order(body: OrderCreate, store: OrderStore = Depends(get_store)):
    """Create an order with the next free id."""
    order = store.create(
        customer=body.customer, item=body.item,
        qty=body.qty, status=body.status,
    )
    return OrderResponse.from_order(order)


@router.get("/{order_id}", response_model=OrderResponse)
def get_order(
    order_id: int = Path(gt=0), store: OrderStore = Depends(get_store),
):
    order = store.get(order_id)
    if order is None:
        raise _not_found(order_id)
    return OrderResponse.from_order(order)


@router.api_route(
    "/{order_id}", methods=["PUT", "PATCH"], response_model=OrderResponse,
)
def update_order(
    body: OrderUpdate,
    order_id: int = Path(gt=0),
    store: OrderStore = Depends(get_store),
):
    """Apply the supplied fields to an existing order."""
    updated = store.update(order_id, body.to_patch())
    if updated is None:
        raise _not_found(order_id)
    return OrderResponse.from_order(updated)


@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_order(
    order_id: int = Path(gt=0), store: OrderStore = Depends(get_store),
):
    if not store.delete(order_id):
        raise _not_found(order_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
