"""ProductService — CRUD for the product catalogue.

Product names are unique; any constraint violation on save is reported
with the duplicate-name message.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_common.errors import (
    EntityNotFoundError,
    ReferenceIntegrityError,
    UserFriendlyDataError,
)
from src.bk_crud.service import Page
from src.bk_product.domain.models import Product
from src.bk_product.domain.repository import ProductRepositoryProtocol
from src.bk_product.infrastructure.persistence import ProductRepository
from src.bk_user.domain.models import User

DUPLICATE_NAME_MESSAGE = (
    "There is already a product with that name. Please select a unique name for the product."
)


class ProductService:
    def __init__(self, repo: ProductRepositoryProtocol | None = None) -> None:
        self._repo: ProductRepositoryProtocol = repo or ProductRepository()

    def create_new(self, actor: User) -> Product:
        return Product()

    async def load(self, db: AsyncSession, entity_id: int) -> Product:
        product = await self._repo.get_by_id(db, entity_id)
        if product is None:
            raise EntityNotFoundError("Product", entity_id)
        return product

    async def save(self, db: AsyncSession, actor: User, entity: Product) -> Product:
        try:
            if entity.id is None:
                saved = await self._repo.insert(db, entity)
            else:
                saved = await self._repo.update(db, entity)
            await db.commit()
        except ReferenceIntegrityError as e:
            await db.rollback()
            raise UserFriendlyDataError(DUPLICATE_NAME_MESSAGE) from e
        except Exception:
            await db.rollback()
            raise
        return saved

    async def delete(self, db: AsyncSession, actor: User, entity: Product) -> None:
        try:
            await self._repo.delete(db, entity)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

    async def find_any_matching(
        self, db: AsyncSession, filter_text: str | None, page: int, size: int
    ) -> Page[Product]:
        filter_text = filter_text or None
        items = await self._repo.find_matching(db, filter_text, page * size, size)
        total = await self._repo.count_matching(db, filter_text)
        return Page(items=items, total=total, page=page, size=size)

    async def count_any_matching(self, db: AsyncSession, filter_text: str | None) -> int:
        return await self._repo.count_matching(db, filter_text or None)
