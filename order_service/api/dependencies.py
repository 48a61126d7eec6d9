"""API Dependencies — per-request composition of the ordering core.

Invariants:
    - OrderService is built per request with explicit constructor arguments
    - The store is bound to the request's AsyncSession (get_db)
    - The catalog client is the process-wide instance created by the lifespan

Design Decisions:
    - get_catalog_client is its own dependency so tests can override it with a fake
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from order_service.config import get_settings
from order_service.core.build_order import OrderBuilder
from order_service.core.order_state_machine import OrderStateMachine
from order_service.core.repository_protocols import ProductCatalogClient
from order_service.infrastructure.database import get_db
from order_service.infrastructure.order_store import SqlAlchemyOrderStore
from order_service.services.order_service import OrderService


def get_catalog_client(request: Request) -> ProductCatalogClient:
    client = getattr(request.app.state, "catalog_client", None)
    if client is None:
        raise RuntimeError("Catalog client not initialized")
    return client


def get_order_service(
    db: AsyncSession = Depends(get_db),
    catalog: ProductCatalogClient = Depends(get_catalog_client),
) -> OrderService:
    return OrderService(
        store=SqlAlchemyOrderStore(db),
        catalog=catalog,
        state_machine=OrderStateMachine(),
        builder=OrderBuilder(),
        order_number_attempts=get_settings().order_number_attempts,
    )
