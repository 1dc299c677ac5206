"""PickupLocationService — CRUD for pickup locations plus the default one."""

from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_common.errors import EntityNotFoundError
from src.bk_crud.service import Page
from src.bk_location.domain.models import PickupLocation
from src.bk_location.domain.repository import PickupLocationRepositoryProtocol
from src.bk_location.infrastructure.persistence import PickupLocationRepository
from src.bk_user.domain.models import User


class PickupLocationService:
    def __init__(self, repo: PickupLocationRepositoryProtocol | None = None) -> None:
        self._repo: PickupLocationRepositoryProtocol = repo or PickupLocationRepository()

    def create_new(self, actor: User) -> PickupLocation:
        return PickupLocation()

    async def load(self, db: AsyncSession, entity_id: int) -> PickupLocation:
        location = await self._repo.get_by_id(db, entity_id)
        if location is None:
            raise EntityNotFoundError("PickupLocation", entity_id)
        return location

    async def get_default(self, db: AsyncSession) -> PickupLocation | None:
        """The location preselected on a new order: the oldest one."""
        return await self._repo.get_first(db)

    async def save(
        self, db: AsyncSession, actor: User, entity: PickupLocation
    ) -> PickupLocation:
        try:
            if entity.id is None:
                saved = await self._repo.insert(db, entity)
            else:
                saved = await self._repo.update(db, entity)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return saved

    async def delete(self, db: AsyncSession, actor: User, entity: PickupLocation) -> None:
        try:
            await self._repo.delete(db, entity)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

    async def find_any_matching(
        self, db: AsyncSession, filter_text: str | None, page: int, size: int
    ) -> Page[PickupLocation]:
        filter_text = filter_text or None
        items = await self._repo.find_matching(db, filter_text, page * size, size)
        total = await self._repo.count_matching(db, filter_text)
        return Page(items=items, total=total, page=page, size=size)

    async def count_any_matching(self, db: AsyncSession, filter_text: str | None) -> int:
        return await self._repo.count_matching(db, filter_text or None)
