"""API test fixtures: per-test CSV store + FastAPI test client.

Invariants:
    - Every test gets a fresh orders file under tmp_path
    - get_store dependency overridden to use that store

Design Decisions:
    - httpx ASGITransport does not run the lifespan, so init_store is never
      called and the real data directory is never touched
"""

import pytest
from httpx import ASGITransport, AsyncClient

from orderdesk.infrastructure.order_store import OrderStore, get_store
from orderdesk.main import app


@pytest.fixture
def store(tmp_path):
    return OrderStore(tmp_path / "data" / "orders.csv")


@pytest.fixture
async def client(store):
    """FastAPI test client with the store dependency overridden."""
    app.dependency_overrides[get_store] = lambda: store

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def seed_orders(store):
    """Three orders with ids 1..3 and mixed statuses."""
    return [
        store.create("Alice", "Widget", 2, "processing", "2024-01-01"),
        store.create("Bob", "Gadget", 1, "shipped", "2024-01-02"),
        store.create("Carol", "Gizmo", 5, "processing", "2024-01-03"),
    ]
