"""Access token issue and verification (HS256, python-jose).

Only access tokens are issued; a session ends when its token expires and
the user signs in again.
"""

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from config.settings import settings
from src.bk_common.errors import InvalidCredentialsError

_TOKEN_TYPE = "access"


def create_access_token(user_id: int, role: str) -> str:
    now = datetime.now(UTC)
    payload = {
        "sub": str(user_id),
        "role": role,
        "type": _TOKEN_TYPE,
        "iat": now,
        "exp": now + timedelta(minutes=settings.JWT_EXPIRE_MINUTES),
    }
    return str(jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM))


def decode_token(token: str) -> dict[str, str]:
    """Decode a token and return its claims.

    Raises:
        InvalidCredentialsError: bad signature, expired, or not an access token.
    """
    try:
        payload: dict[str, str] = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],  # explicit list, no algorithm confusion
        )
    except JWTError:
        raise InvalidCredentialsError() from None

    if payload.get("type") != _TOKEN_TYPE:
        raise InvalidCredentialsError()
    return payload
