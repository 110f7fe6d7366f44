"""Service test fixtures — FastAPI test client over a tmp-directory store.

Invariants:
    - Every test gets a fresh data directory (tmp_path)
    - get_store dependency overridden to the per-test store
    - Lifespan is not run by ASGITransport: the real /data volume is never touched
"""

import pytest
from httpx import ASGITransport, AsyncClient

from diagram_store.infrastructure.document_store import get_store
from diagram_store.main import app
from diagram_store.services.collection_service import CollectionService
from diagram_store.services.diagram_service import DiagramService


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
def diagram_service(store):
    return DiagramService(store)


@pytest.fixture
def collection_service(diagram_service):
    return CollectionService(diagram_service)
