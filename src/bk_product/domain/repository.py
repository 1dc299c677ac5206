# src/bk_product/domain/repository.py
"""ProductRepository Protocol — interface contract for persistence layer."""
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_product.domain.models import Product


class ProductRepositoryProtocol(Protocol):
    async def get_by_id(self, db: AsyncSession, product_id: int) -> Product | None: ...

    async def insert(self, db: AsyncSession, product: Product) -> Product: ...

    async def update(self, db: AsyncSession, product: Product) -> Product: ...

    async def delete(self, db: AsyncSession, product: Product) -> None: ...

    async def find_matching(
        self, db: AsyncSession, filter_text: str | None, offset: int, limit: int
    ) -> list[Product]: ...

    async def count_matching(self, db: AsyncSession, filter_text: str | None) -> int: ...
