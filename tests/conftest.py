"""Shared test fixtures.

Tests run against the in-memory store with process-local locks, so no
PostgreSQL or Redis is needed. The environment is set before anything under
src/ or config/ is imported because settings are read at import time.
"""

import os

os.environ.setdefault("JWT_SECRET", "test-secret-key-not-for-production")
os.environ["STORE_BACKEND"] = "memory"
os.environ["LOCK_BACKEND"] = "local"

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from src.main import app  # noqa: E402
from src.pm_common.memory_store import reset_memory_store  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_memory_store():
    """Every test starts from an empty store."""
    return reset_memory_store()


@pytest.fixture
async def client() -> AsyncClient:
    """Async HTTP client for testing FastAPI endpoints."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
