"""Order Routes: HTTP contract over a tmp_path CSV store.

Invariants:
    - POST → 201, PUT/PATCH → 200, DELETE → 204
    - Unknown id → 404 envelope; invalid input → 400 envelope
    - Bad header on disk → 500 SCHEMA_MISMATCH envelope
    - ?status= filters by exact status, "all" disables the filter
"""

import pytest

from orderdesk.core.order_types import HEADER_LINE


# --- list --------------------------------------------------------------------

async def test_list_on_empty_store_returns_empty_list(client):
    res = await client.get("/api/orders")
    assert res.status_code == 200
    assert res.json() == []


async def test_list_returns_orders_in_file_order(client, seed_orders):
    res = await client.get("/api/orders")
    assert [o["id"] for o in res.json()] == [1, 2, 3]
    assert res.json()[0] == {
        "id": 1, "customer": "Alice", "item": "Widget", "qty": 2,
        "status": "processing", "createdAt": "2024-01-01",
    }


async def test_list_filters_by_status(client, seed_orders):
    res = await client.get("/api/orders", params={"status": "processing"})
    assert [o["id"] for o in res.json()] == [1, 3]


async def test_list_status_all_returns_everything(client, seed_orders):
    res = await client.get("/api/orders", params={"status": "all"})
    assert len(res.json()) == 3


async def test_list_with_bad_header_returns_500_envelope(client, store):
    store.path.parent.mkdir(parents=True)
    store.path.write_text("id,name,item,qty,status,createdAt\n", encoding="utf-8")
    res = await client.get("/api/orders")
    assert res.status_code == 500
    assert res.json()["error"]["code"] == "SCHEMA_MISMATCH"


# --- create ------------------------------------------------------------------

async def test_create_on_empty_store_gets_id_one(client, store):
    res = await client.post(
        "/api/orders", json={"customer": " Alice ", "item": "Widget", "qty": 2},
    )
    assert res.status_code == 201
    body = res.json()
    assert body["id"] == 1
    assert body["customer"] == "Alice"
    assert body["status"] == "processing"
    assert body["createdAt"]
    assert [o.id for o in store.read_all()] == [1]


async def test_create_allocates_after_max_id(client, seed_orders):
    res = await client.post(
        "/api/orders", json={"customer": "Dan", "item": "Bolt", "qty": 1, "status": "shipped"},
    )
    assert res.json()["id"] == 4
    assert res.json()["status"] == "shipped"


@pytest.mark.parametrize("payload", [
    {"customer": "Alice", "item": "Widget", "qty": 0},
    {"customer": "Alice", "item": "Widget", "qty": 1.5},
    {"customer": "", "item": "Widget", "qty": 1},
    {"customer": "Alice", "qty": 1},
])
async def test_create_with_invalid_payload_returns_400(client, store, payload):
    res = await client.post("/api/orders", json=payload)
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"
    assert store.read_all() == []


# --- get ---------------------------------------------------------------------

async def test_get_existing_order(client, seed_orders):
    res = await client.get("/api/orders/2")
    assert res.status_code == 200
    assert res.json()["customer"] == "Bob"


async def test_get_unknown_order_returns_404(client, seed_orders):
    res = await client.get("/api/orders/99")
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_non_numeric_id_returns_400(client):
    res = await client.get("/api/orders/abc")
    assert res.status_code == 400


async def test_zero_id_returns_400(client):
    res = await client.delete("/api/orders/0")
    assert res.status_code == 400


# --- update ------------------------------------------------------------------

async def test_patch_changes_only_supplied_fields(client, seed_orders):
    res = await client.patch("/api/orders/2", json={"qty": 5, "id": 77})
    assert res.status_code == 200
    assert res.json() == {
        "id": 2, "customer": "Bob", "item": "Gadget", "qty": 5,
        "status": "shipped", "createdAt": "2024-01-02",
    }


async def test_put_is_accepted_as_partial_update(client, store, seed_orders):
    res = await client.put("/api/orders/1", json={"status": "delivered"})
    assert res.status_code == 200
    assert store.get(1).status == "delivered"


async def test_update_unknown_order_returns_404(client, seed_orders):
    res = await client.patch("/api/orders/99", json={"qty": 5})
    assert res.status_code == 404


async def test_update_with_invalid_qty_returns_400_and_keeps_file(client, store, seed_orders):
    before = store.path.read_bytes()
    res = await client.patch("/api/orders/1", json={"qty": -1})
    assert res.status_code == 400
    assert store.path.read_bytes() == before


async def test_update_with_blank_qty_ignores_qty(client, seed_orders):
    res = await client.patch("/api/orders/3", json={"qty": "", "customer": "Caroline"})
    assert res.status_code == 200
    assert res.json()["qty"] == 5
    assert res.json()["customer"] == "Caroline"


# --- delete ------------------------------------------------------------------

async def test_delete_returns_204_then_404(client, store, seed_orders):
    res = await client.delete("/api/orders/2")
    assert res.status_code == 204
    assert [o.id for o in store.read_all()] == [1, 3]

    res = await client.delete("/api/orders/2")
    assert res.status_code == 404


async def test_delete_on_empty_store_leaves_header_only(client, store):
    res = await client.delete("/api/orders/1")
    assert res.status_code == 404
    assert store.path.read_text(encoding="utf-8") == HEADER_LINE + "\n"


# --- storage failures --------------------------------------------------------

async def test_filesystem_error_returns_storage_envelope(client, store, monkeypatch):
    def _unreadable():
        raise PermissionError("denied")

    monkeypatch.setattr(store, "read_all", _unreadable)
    res = await client.get("/api/orders")
    assert res.status_code == 500
    assert res.json()["error"]["code"] == "STORAGE_ERROR"
