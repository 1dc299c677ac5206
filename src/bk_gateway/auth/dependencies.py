"""FastAPI dependencies resolving the acting user.

Usage in a protected router:
    from src.bk_gateway.auth.dependencies import get_current_user

    @router.get("/protected")
    async def protected(user: Annotated[User, Depends(get_current_user)]):
        ...
"""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_common.database import get_db_session
from src.bk_common.errors import AdminRequiredError, InvalidCredentialsError
from src.bk_gateway.auth.jwt_handler import decode_token
from src.bk_user.domain.models import User
from src.bk_user.infrastructure.persistence import UserRepository

# tokenUrl is what Swagger UI's "Authorize" button posts to
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")

_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)

_repo = UserRepository()


async def get_current_user(
    token: Annotated[str, Depends(oauth2_scheme)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> User:
    """Validate the bearer token and load the user it names.

    Raises HTTP 401 if the token is missing, invalid or expired, or if the
    user no longer exists.
    """
    try:
        payload = decode_token(token)
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None

    subject = payload.get("sub")
    if not subject or not subject.isdigit():
        raise _CREDENTIALS_EXCEPTION

    user = await _repo.get_by_id(db, int(subject))
    if user is None:
        raise _CREDENTIALS_EXCEPTION
    return user


async def require_admin(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Guard for the admin-only screens (products, users, locations, dashboard)."""
    if not current_user.is_admin:
        raise AdminRequiredError()
    return current_user
