"""PickupLocationRepository Protocol."""
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_location.domain.models import PickupLocation


class PickupLocationRepositoryProtocol(Protocol):
    async def get_by_id(self, db: AsyncSession, location_id: int) -> PickupLocation | None: ...

    async def get_first(self, db: AsyncSession) -> PickupLocation | None: ...

    async def insert(self, db: AsyncSession, location: PickupLocation) -> PickupLocation: ...

    async def update(self, db: AsyncSession, location: PickupLocation) -> PickupLocation: ...

    async def delete(self, db: AsyncSession, location: PickupLocation) -> None: ...

    async def find_matching(
        self, db: AsyncSession, filter_text: str | None, offset: int, limit: int
    ) -> list[PickupLocation]: ...

    async def count_matching(self, db: AsyncSession, filter_text: str | None) -> int: ...
