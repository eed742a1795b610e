"""OrderDesk API: FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map OrderDeskError / OSError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Order store initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from orderdesk.api.error_handlers import register_error_handlers
from orderdesk.api.routes import health, orders
from orderdesk.config import get_settings
from orderdesk.infrastructure.observability import setup_logging
from orderdesk.infrastructure.order_store import init_store

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    store = init_store(settings.orders_path)
    logger.info(f"OrderDesk API started (orders file: {store.path})")
    yield
    logger.info("OrderDesk API shutting down")


app = FastAPI(
    title="OrderDesk API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(orders.router)

register_error_handlers(app)
