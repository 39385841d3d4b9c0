"""Fixtures for API unit tests: app wired to the in-memory record service, AsyncClient, actor headers."""

import pytest
from httpx import ASGITransport, AsyncClient

from herdbook.main import app


@pytest.fixture
def app_with_overrides(record_service, metrics):
    """App with the record service and metrics overridden for testing."""
    from herdbook.api import dependencies

    app.dependency_overrides[dependencies.get_record_service] = lambda: record_service
    app.dependency_overrides[dependencies.get_metrics] = lambda: metrics
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client(app_with_overrides):
    """Async HTTP client for testing; uses overridden app."""
    transport = ASGITransport(app=app_with_overrides)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def manager_headers():
    return {"X-Actor-ID": "2", "X-Actor-Role": "manager", "X-Actor-Name": "Grace Manager"}


@pytest.fixture
def vet_headers():
    return {"X-Actor-ID": "3", "X-Actor-Role": "vet"}


@pytest.fixture
def admin_headers():
    return {"X-Actor-ID": "1", "X-Actor-Role": "admin"}
