"""AuthService: credential check and token issue."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_common.errors import InvalidCredentialsError
from src.bk_gateway.auth.jwt_handler import create_access_token
from src.bk_gateway.auth.password import verify_password
from src.bk_user.domain.models import User
from src.bk_user.domain.repository import UserRepositoryProtocol
from src.bk_user.infrastructure.persistence import UserRepository

logger = logging.getLogger("bk.auth")


class AuthService:
    """Stateless service; instantiate once, reuse across requests."""

    def __init__(self, repo: UserRepositoryProtocol | None = None) -> None:
        self._repo: UserRepositoryProtocol = repo or UserRepository()

    async def login(self, db: AsyncSession, email: str, password: str) -> tuple[User, str]:
        """Return (user, access_token).

        Unknown email and wrong password raise the same error so that
        accounts cannot be enumerated.
        """
        user = await self._repo.get_by_email(db, email)
        if user is None or not verify_password(password, user.password_hash):
            logger.info("Failed login for %s", email)
            raise InvalidCredentialsError()
        return user, create_access_token(user.id, user.role)  # type: ignore[arg-type]
