"""API test fixtures — FastAPI app over SQLite with the catalog faked.

Invariants:
    - get_db overridden to the per-test in-memory database
    - get_catalog_client overridden to FakeCatalogClient (lifespan is not run)
    - db_manager patched so /health/ready probes the test engine
"""

import pytest
from httpx import ASGITransport, AsyncClient

import order_service.infrastructure.database as db_module
from order_service.api.dependencies import get_catalog_client
from order_service.infrastructure.database import DatabaseSessionManager, get_db
from order_service.main import app

from tests.services.fake_catalog import FakeCatalogClient


@pytest.fixture
def catalog():
    fake = FakeCatalogClient()
    fake.add(1, "Widget", 10.00, stock=50)
    fake.add(2, "Gadget", 4.99, stock=5)
    return fake


@pytest.fixture
async def client(test_engine, test_session_factory, catalog):
    """HTTP client against the app, DB and catalog dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_catalog_client] = lambda: catalog

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager
