"""Integration tests for the login flow (requires running PG).

Run: pytest -m integration tests/integration/test_auth_flow.py -v
Pre-condition: alembic upgrade head
"""

import pytest
from httpx import AsyncClient

pytestmark = [pytest.mark.integration, pytest.mark.asyncio(loop_scope="session")]

ADMIN_EMAIL = "admin@bakery.example"
ADMIN_PASSWORD = "admin"


class TestLogin:
    async def test_login_success(self, client: AsyncClient) -> None:
        resp = await client.post(
            "/api/v1/auth/login",
            json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD},
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["code"] == 0
        assert "access_token" in body["data"]
        assert body["data"]["user"]["role"] == "admin"

    async def test_login_email_is_case_insensitive(self, client: AsyncClient) -> None:
        resp = await client.post(
            "/api/v1/auth/login",
            json={"email": ADMIN_EMAIL.upper(), "password": ADMIN_PASSWORD},
        )
        assert resp.status_code == 200

    async def test_wrong_password(self, client: AsyncClient) -> None:
        resp = await client.post(
            "/api/v1/auth/login",
            json={"email": ADMIN_EMAIL, "password": "wrong"},
        )
        assert resp.status_code == 401
        assert resp.json()["code"] == 1003

    async def test_unknown_user(self, client: AsyncClient) -> None:
        resp = await client.post(
            "/api/v1/auth/login",
            json={"email": "nobody@bakery.example", "password": "whatever"},
        )
        assert resp.status_code == 401
        assert resp.json()["code"] == 1003


class TestProtectedEndpoints:
    async def test_no_token(self, client: AsyncClient) -> None:
        resp = await client.get("/api/v1/storefront/orders", headers={"Authorization": ""})
        assert resp.status_code == 401

    async def test_garbage_token(self, client: AsyncClient) -> None:
        resp = await client.get(
            "/api/v1/storefront/orders", headers={"Authorization": "Bearer not-a-jwt"}
        )
        assert resp.status_code == 401
