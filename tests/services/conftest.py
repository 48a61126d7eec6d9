"""Service test fixtures — OrderService wired to SQLite store and fake catalog.

Invariants:
    - order_service is constructed explicitly, exactly as the API dependency does
    - catalog starts with product 1 "Widget" @ 10.00 and product 2 "Gadget" @ 4.99
"""

from datetime import datetime, timezone

import pytest

from order_service.core.build_order import OrderBuilder
from order_service.core.order_state_machine import OrderStateMachine
from order_service.infrastructure.order_store import SqlAlchemyOrderStore
from order_service.services.order_service import OrderService

from tests.services.fake_catalog import FakeCatalogClient


@pytest.fixture
def catalog():
    fake = FakeCatalogClient()
    fake.add(1, "Widget", 10.00, stock=50)
    fake.add(2, "Gadget", 4.99, stock=5)
    return fake


@pytest.fixture
def store(test_db):
    return SqlAlchemyOrderStore(test_db)


@pytest.fixture
def order_service(store, catalog):
    return OrderService(
        store=store,
        catalog=catalog,
        state_machine=OrderStateMachine(),
        builder=OrderBuilder(),
        clock=lambda: datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc),
    )
