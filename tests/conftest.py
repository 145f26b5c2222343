"""Shared fixtures — in-memory QR store + FastAPI test client."""

import os

# Never sign test tokens with a real secret or reach a real database.
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("QR_STORE_BACKEND", "memory")

import pytest
from httpx import ASGITransport, AsyncClient

from auth import security
from core.config import QRCodeLimits, get_limits
from main import app
from qrcodes.store import InMemoryQRCodeStore, get_store


@pytest.fixture
def limits():
    return QRCodeLimits()


@pytest.fixture
def memory_store(limits):
    return InMemoryQRCodeStore(limits)


@pytest.fixture
def auth_headers():
    """Build Authorization headers for a given owner id."""
    def _headers(owner_id: str) -> dict:
        token = security.build_access_token(owner_id=owner_id)
        return {"Authorization": f"Bearer {token}"}
    return _headers


@pytest.fixture
async def client(memory_store, limits):
    app.dependency_overrides[get_store] = lambda: memory_store
    app.dependency_overrides[get_limits] = lambda: limits

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
