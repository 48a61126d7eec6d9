"""Order Service API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map OrderServiceError -> structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database and catalog client initialized on startup, released on shutdown

Design Decisions:
    - Lifespan context manager owns the process-wide resources: DB pool and
      the catalog httpx.AsyncClient pool
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from order_service.api.error_handlers import register_error_handlers
from order_service.api.request_logging import register_request_logging
from order_service.api.routes import health, orders
from order_service.config import get_settings
from order_service.infrastructure.catalog_client import HttpCatalogClient
from order_service.infrastructure.database import init_db
from order_service.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    app.state.catalog_client = HttpCatalogClient.from_url(
        settings.product_service_url, settings.catalog_timeout_seconds,
    )
    logger.info("Order service started")
    yield
    logger.info("Order service shutting down")
    await app.state.catalog_client.aclose()
    await manager.dispose()


app = FastAPI(
    title="Order Service", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_request_logging(app)

app.include_router(health.router)
app.include_router(orders.router)

register_error_handlers(app)
