from collections.abc import AsyncGenerator, Mapping
from typing import Any, NoReturn

from sqlalchemy import Executable, Result, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from config.settings import settings
from src.bk_common.errors import (
    ConcurrentUpdateError,
    EntityNotFoundError,
    ReferenceIntegrityError,
)

engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_size=20,
    max_overflow=10,
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: yields an AsyncSession, auto-closes after request."""
    async with async_session_factory() as session:
        yield session


def integrity_error_code(exc: IntegrityError) -> str | None:
    """Return the SQLSTATE behind an IntegrityError, if the driver exposes it.

    asyncpg exposes it as ``sqlstate`` on the original exception (wrapped by
    SQLAlchemy's adapter); psycopg uses ``pgcode``.
    """
    orig = exc.orig
    for candidate in (orig, getattr(orig, "__cause__", None)):
        if candidate is None:
            continue
        code = getattr(candidate, "sqlstate", None) or getattr(candidate, "pgcode", None)
        if code:
            return str(code)
    return None


async def execute_checked(
    db: AsyncSession, statement: Executable, params: Mapping[str, Any]
) -> Result[Any]:
    """Execute a write; constraint violations become ReferenceIntegrityError."""
    try:
        return await db.execute(statement, params)
    except IntegrityError as e:
        raise ReferenceIntegrityError(
            f"Operation prevented by references (sqlstate={integrity_error_code(e)})"
        ) from e


async def raise_stale_or_missing(
    db: AsyncSession, table: str, entity_name: str, entity_id: int | None
) -> NoReturn:
    """Called when a versioned UPDATE/DELETE matched no row.

    The row still existing means another session bumped its version.
    """
    result = await db.execute(
        text(f"SELECT 1 FROM {table} WHERE id = :id"), {"id": entity_id}
    )
    if result.fetchone() is None:
        raise EntityNotFoundError(entity_name, entity_id)
    raise ConcurrentUpdateError(entity_name, entity_id)
