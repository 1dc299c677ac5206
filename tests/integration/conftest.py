"""Integration-test fixtures.

All integration tests share a single event-loop so that the module-level
SQLAlchemy async engine pool (created at import time) remains valid across
the entire test session.
"""

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.main import app

# seeded by alembic/versions/004_seed_initial_data.py
_ADMIN = {"email": "admin@bakery.example", "password": "admin"}


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client() -> AsyncClient:  # type: ignore[override]
    """Session-scoped async HTTP client; keeps the engine pool alive."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def auth_client(client: AsyncClient) -> AsyncClient:
    """Authenticated client: logs in as the seeded admin and injects the Bearer token."""
    login_resp = await client.post("/api/v1/auth/login", json=_ADMIN)
    token = login_resp.json()["data"]["access_token"]
    client.headers.update({"Authorization": f"Bearer {token}"})
    return client
