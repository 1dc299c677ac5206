# src/bk_user/infrastructure/persistence.py
"""UserRepository — raw SQL persistence implementation.

Updates and deletes are guarded by the version column (optimistic locking).
"""
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_common.database import execute_checked, raise_stale_or_missing
from src.bk_user.domain.models import User

# ---------------------------------------------------------------------------
# SQL statements
# ---------------------------------------------------------------------------

_COLUMNS = "id, version, email, password_hash, first_name, last_name, role, locked"

_GET_BY_ID_SQL = text(f"SELECT {_COLUMNS} FROM users WHERE id = :id")

_GET_BY_EMAIL_SQL = text(f"SELECT {_COLUMNS} FROM users WHERE LOWER(email) = LOWER(:email)")

_INSERT_SQL = text(f"""
    INSERT INTO users (email, password_hash, first_name, last_name, role, locked)
    VALUES (:email, :password_hash, :first_name, :last_name, :role, :locked)
    RETURNING {_COLUMNS}
""")

_UPDATE_SQL = text(f"""
    UPDATE users
    SET email = :email, password_hash = :password_hash,
        first_name = :first_name, last_name = :last_name,
        role = :role, locked = :locked,
        version = version + 1, updated_at = NOW()
    WHERE id = :id AND version = :version
    RETURNING {_COLUMNS}
""")

_DELETE_SQL = text("DELETE FROM users WHERE id = :id AND version = :version RETURNING id")

_FILTER = """
    CAST(:filter AS TEXT) IS NULL
    OR email ILIKE '%' || CAST(:filter AS TEXT) || '%'
    OR first_name ILIKE '%' || CAST(:filter AS TEXT) || '%'
    OR last_name ILIKE '%' || CAST(:filter AS TEXT) || '%'
    OR role ILIKE '%' || CAST(:filter AS TEXT) || '%'
"""

_FIND_MATCHING_SQL = text(f"""
    SELECT {_COLUMNS} FROM users
    WHERE {_FILTER}
    ORDER BY id
    OFFSET :offset LIMIT :limit
""")

_COUNT_MATCHING_SQL = text(f"SELECT COUNT(*) AS total FROM users WHERE {_FILTER}")


# ---------------------------------------------------------------------------
# Row mapper
# ---------------------------------------------------------------------------


def _row_to_user(row: Any) -> User:
    return User(
        id=row.id,
        version=row.version,
        email=row.email,
        password_hash=row.password_hash,
        first_name=row.first_name,
        last_name=row.last_name,
        role=row.role,
        locked=row.locked,
    )


def _params(user: User) -> dict[str, Any]:
    return {
        "id": user.id,
        "version": user.version,
        "email": user.email,
        "password_hash": user.password_hash,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "role": user.role,
        "locked": user.locked,
    }


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class UserRepository:
    async def get_by_id(self, db: AsyncSession, user_id: int) -> User | None:
        result = await db.execute(_GET_BY_ID_SQL, {"id": user_id})
        row = result.fetchone()
        return _row_to_user(row) if row else None

    async def get_by_email(self, db: AsyncSession, email: str) -> User | None:
        result = await db.execute(_GET_BY_EMAIL_SQL, {"email": email})
        row = result.fetchone()
        return _row_to_user(row) if row else None

    async def insert(self, db: AsyncSession, user: User) -> User:
        result = await execute_checked(db, _INSERT_SQL, _params(user))
        return _row_to_user(result.fetchone())

    async def update(self, db: AsyncSession, user: User) -> User:
        result = await execute_checked(db, _UPDATE_SQL, _params(user))
        row = result.fetchone()
        if row is None:
            await raise_stale_or_missing(db, "users", "User", user.id)
        return _row_to_user(row)

    async def delete(self, db: AsyncSession, user: User) -> None:
        result = await execute_checked(
            db, _DELETE_SQL, {"id": user.id, "version": user.version}
        )
        if result.fetchone() is None:
            await raise_stale_or_missing(db, "users", "User", user.id)

    async def find_matching(
        self, db: AsyncSession, filter_text: str | None, offset: int, limit: int
    ) -> list[User]:
        result = await db.execute(
            _FIND_MATCHING_SQL, {"filter": filter_text, "offset": offset, "limit": limit}
        )
        return [_row_to_user(row) for row in result.fetchall()]

    async def count_matching(self, db: AsyncSession, filter_text: str | None) -> int:
        result = await db.execute(_COUNT_MATCHING_SQL, {"filter": filter_text})
        return int(result.scalar_one())
