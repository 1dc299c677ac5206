"""Unit tests for password hashing, JWT handling and AuthService."""

from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import HTTPException
from jose import jwt

from src.bk_common.errors import AdminRequiredError, InvalidCredentialsError
from src.bk_gateway.application.service import AuthService
from src.bk_gateway.auth.dependencies import get_current_user, require_admin
from src.bk_gateway.auth.jwt_handler import create_access_token, decode_token
from src.bk_gateway.auth.password import hash_password, verify_password
from src.bk_user.domain.models import User


def _make_user(role: str = "barista") -> User:
    return User(
        id=5,
        email="barista@bakery.example",
        password_hash=hash_password("barista"),
        first_name="Malin",
        last_name="Castro",
        role=role,
    )


class TestPassword:
    def test_hash_is_not_plain(self) -> None:
        hashed = hash_password("secret")
        assert hashed != "secret"
        assert hashed.startswith("$2")

    def test_verify(self) -> None:
        hashed = hash_password("secret")
        assert verify_password("secret", hashed)
        assert not verify_password("wrong", hashed)

    def test_malformed_hash(self) -> None:
        assert verify_password("secret", "not-a-hash") is False


class TestJwt:
    def test_claims(self) -> None:
        payload = jwt.get_unverified_claims(create_access_token(5, "admin"))
        assert payload["sub"] == "5"
        assert payload["role"] == "admin"
        assert payload["type"] == "access"

    def test_round_trip(self) -> None:
        assert decode_token(create_access_token(5, "baker"))["sub"] == "5"

    def test_foreign_signature(self) -> None:
        token = jwt.encode({"sub": "5", "type": "access"}, "other-secret", algorithm="HS256")
        with pytest.raises(InvalidCredentialsError):
            decode_token(token)

    def test_expired_token(self) -> None:
        with patch("src.bk_gateway.auth.jwt_handler.settings") as mock_settings:
            mock_settings.JWT_EXPIRE_MINUTES = -1
            mock_settings.JWT_SECRET = "test-secret"
            mock_settings.JWT_ALGORITHM = "HS256"
            token = create_access_token(5, "baker")
            with pytest.raises(InvalidCredentialsError):
                decode_token(token)

    def test_wrong_type(self) -> None:
        from config.settings import settings

        token = jwt.encode(
            {"sub": "5", "type": "refresh"}, settings.JWT_SECRET, algorithm="HS256"
        )
        with pytest.raises(InvalidCredentialsError):
            decode_token(token)


class TestAuthService:
    async def test_login_success(self) -> None:
        repo = MagicMock()
        repo.get_by_email = AsyncMock(return_value=_make_user())
        user, token = await AuthService(repo).login(
            AsyncMock(), "barista@bakery.example", "barista"
        )
        assert user.id == 5
        assert decode_token(token)["role"] == "barista"

    async def test_unknown_email(self) -> None:
        repo = MagicMock()
        repo.get_by_email = AsyncMock(return_value=None)
        with pytest.raises(InvalidCredentialsError):
            await AuthService(repo).login(AsyncMock(), "nobody@bakery.example", "x")

    async def test_wrong_password(self) -> None:
        repo = MagicMock()
        repo.get_by_email = AsyncMock(return_value=_make_user())
        with pytest.raises(InvalidCredentialsError):
            await AuthService(repo).login(AsyncMock(), "barista@bakery.example", "wrong")


class TestDependencies:
    async def test_current_user_loaded(self) -> None:
        token = create_access_token(5, "barista")
        with patch(
            "src.bk_gateway.auth.dependencies._repo.get_by_id",
            new=AsyncMock(return_value=_make_user()),
        ):
            user = await get_current_user(token, AsyncMock())
        assert user.email == "barista@bakery.example"

    async def test_deleted_user_rejected(self) -> None:
        token = create_access_token(5, "barista")
        with patch(
            "src.bk_gateway.auth.dependencies._repo.get_by_id",
            new=AsyncMock(return_value=None),
        ):
            with pytest.raises(HTTPException) as exc_info:
                await get_current_user(token, AsyncMock())
        assert exc_info.value.status_code == 401

    async def test_garbage_token(self) -> None:
        with pytest.raises(HTTPException):
            await get_current_user("garbage", AsyncMock())

    async def test_require_admin(self) -> None:
        admin = _make_user(role="admin")
        assert await require_admin(admin) is admin
        with pytest.raises(AdminRequiredError):
            await require_admin(_make_user(role="baker"))


def test_expiry_setting_is_minutes() -> None:
    from config.settings import settings

    token = create_access_token(5, "baker")
    payload = jwt.get_unverified_claims(token)
    assert timedelta(seconds=payload["exp"] - payload["iat"]) == timedelta(
        minutes=settings.JWT_EXPIRE_MINUTES
    )
