"""API test fixtures — FastAPI test client over a fresh in-memory database.

Invariants:
    - get_db dependency overridden to use the test DB session
    - get_clock overridden so every request sees the same "now"
    - db_manager patched so the readiness probe reaches the test engine
"""

import pytest
from httpx import ASGITransport, AsyncClient

import relhub.infrastructure.database as db_module
from relhub.api.dependencies import get_clock
from relhub.infrastructure.database import DatabaseSessionManager, get_db
from relhub.main import app
from tests.factories import NOW


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB and clock dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: (lambda: NOW)

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


@pytest.fixture
async def contact_id(client):
    """Id of a freshly created contact."""
    res = await client.post("/api/v1/contacts", json={"name": "Jane Doe"})
    return res.json()["selected_contact_id"]
