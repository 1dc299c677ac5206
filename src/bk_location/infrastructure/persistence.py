"""PickupLocationRepository — raw SQL persistence implementation."""
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_common.database import execute_checked, raise_stale_or_missing
from src.bk_location.domain.models import PickupLocation

_GET_BY_ID_SQL = text("SELECT id, version, name FROM pickup_locations WHERE id = :id")

_GET_FIRST_SQL = text("SELECT id, version, name FROM pickup_locations ORDER BY id LIMIT 1")

_INSERT_SQL = text("""
    INSERT INTO pickup_locations (name) VALUES (:name)
    RETURNING id, version, name
""")

_UPDATE_SQL = text("""
    UPDATE pickup_locations
    SET name = :name, version = version + 1, updated_at = NOW()
    WHERE id = :id AND version = :version
    RETURNING id, version, name
""")

_DELETE_SQL = text(
    "DELETE FROM pickup_locations WHERE id = :id AND version = :version RETURNING id"
)

_FIND_MATCHING_SQL = text("""
    SELECT id, version, name FROM pickup_locations
    WHERE CAST(:filter AS TEXT) IS NULL OR name ILIKE '%' || CAST(:filter AS TEXT) || '%'
    ORDER BY name, id
    OFFSET :offset LIMIT :limit
""")

_COUNT_MATCHING_SQL = text("""
    SELECT COUNT(*) FROM pickup_locations
    WHERE CAST(:filter AS TEXT) IS NULL OR name ILIKE '%' || CAST(:filter AS TEXT) || '%'
""")


def _row_to_location(row: Any) -> PickupLocation:
    return PickupLocation(id=row.id, version=row.version, name=row.name)


class PickupLocationRepository:
    async def get_by_id(self, db: AsyncSession, location_id: int) -> PickupLocation | None:
        result = await db.execute(_GET_BY_ID_SQL, {"id": location_id})
        row = result.fetchone()
        return _row_to_location(row) if row else None

    async def get_first(self, db: AsyncSession) -> PickupLocation | None:
        result = await db.execute(_GET_FIRST_SQL)
        row = result.fetchone()
        return _row_to_location(row) if row else None

    async def insert(self, db: AsyncSession, location: PickupLocation) -> PickupLocation:
        result = await execute_checked(db, _INSERT_SQL, {"name": location.name})
        return _row_to_location(result.fetchone())

    async def update(self, db: AsyncSession, location: PickupLocation) -> PickupLocation:
        result = await execute_checked(
            db,
            _UPDATE_SQL,
            {"id": location.id, "version": location.version, "name": location.name},
        )
        row = result.fetchone()
        if row is None:
            await raise_stale_or_missing(
                db, "pickup_locations", "PickupLocation", location.id
            )
        return _row_to_location(row)

    async def delete(self, db: AsyncSession, location: PickupLocation) -> None:
        result = await execute_checked(
            db, _DELETE_SQL, {"id": location.id, "version": location.version}
        )
        if result.fetchone() is None:
            await raise_stale_or_missing(
                db, "pickup_locations", "PickupLocation", location.id
            )

    async def find_matching(
        self, db: AsyncSession, filter_text: str | None, offset: int, limit: int
    ) -> list[PickupLocation]:
        result = await db.execute(
            _FIND_MATCHING_SQL, {"filter": filter_text, "offset": offset, "limit": limit}
        )
        return [_row_to_location(row) for row in result.fetchall()]

    async def count_matching(self, db: AsyncSession, filter_text: str | None) -> int:
        result = await db.execute(_COUNT_MATCHING_SQL, {"filter": filter_text})
        return int(result.scalar_one())
