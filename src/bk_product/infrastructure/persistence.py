# src/bk_product/infrastructure/persistence.py
"""ProductRepository — raw SQL persistence implementation."""
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_common.database import execute_checked, raise_stale_or_missing
from src.bk_product.domain.models import Product

_GET_BY_ID_SQL = text("SELECT id, version, name, price FROM products WHERE id = :id")

_INSERT_SQL = text("""
    INSERT INTO products (name, price)
    VALUES (:name, :price)
    RETURNING id, version, name, price
""")

_UPDATE_SQL = text("""
    UPDATE products
    SET name = :name, price = :price, version = version + 1, updated_at = NOW()
    WHERE id = :id AND version = :version
    RETURNING id, version, name, price
""")

_DELETE_SQL = text(
    "DELETE FROM products WHERE id = :id AND version = :version RETURNING id"
)

_FIND_MATCHING_SQL = text("""
    SELECT id, version, name, price FROM products
    WHERE CAST(:filter AS TEXT) IS NULL OR name ILIKE '%' || CAST(:filter AS TEXT) || '%'
    ORDER BY name, id
    OFFSET :offset LIMIT :limit
""")

_COUNT_MATCHING_SQL = text("""
    SELECT COUNT(*) FROM products
    WHERE CAST(:filter AS TEXT) IS NULL OR name ILIKE '%' || CAST(:filter AS TEXT) || '%'
""")


def _row_to_product(row: Any) -> Product:
    return Product(id=row.id, version=row.version, name=row.name, price=row.price)


class ProductRepository:
    async def get_by_id(self, db: AsyncSession, product_id: int) -> Product | None:
        result = await db.execute(_GET_BY_ID_SQL, {"id": product_id})
        row = result.fetchone()
        return _row_to_product(row) if row else None

    async def insert(self, db: AsyncSession, product: Product) -> Product:
        result = await execute_checked(
            db, _INSERT_SQL, {"name": product.name, "price": product.price}
        )
        return _row_to_product(result.fetchone())

    async def update(self, db: AsyncSession, product: Product) -> Product:
        result = await execute_checked(
            db,
            _UPDATE_SQL,
            {
                "id": product.id,
                "version": product.version,
                "name": product.name,
                "price": product.price,
            },
        )
        row = result.fetchone()
        if row is None:
            await raise_stale_or_missing(db, "products", "Product", product.id)
        return _row_to_product(row)

    async def delete(self, db: AsyncSession, product: Product) -> None:
        result = await execute_checked(
            db, _DELETE_SQL, {"id": product.id, "version": product.version}
        )
        if result.fetchone() is None:
            await raise_stale_or_missing(db, "products", "Product", product.id)

    async def find_matching(
        self, db: AsyncSession, filter_text: str | None, offset: int, limit: int
    ) -> list[Product]:
        result = await db.execute(
            _FIND_MATCHING_SQL, {"filter": filter_text, "offset": offset, "limit": limit}
        )
        return [_row_to_product(row) for row in result.fetchall()]

    async def count_matching(self, db: AsyncSession, filter_text: str | None) -> int:
        result = await db.execute(_COUNT_MATCHING_SQL, {"filter": filter_text})
        return int(result.scalar_one())
