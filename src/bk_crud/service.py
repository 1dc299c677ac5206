# src/bk_crud/service.py
"""CRUD service Protocols — the capabilities a presenter needs from a backend.

Each bounded context (products, users, pickup locations, orders) provides
a concrete service; presenters and routers depend only on these Protocols.
"""

from dataclasses import dataclass
from typing import Generic, Protocol, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_common.entity import AbstractEntity
from src.bk_user.domain.models import User

T = TypeVar("T", bound=AbstractEntity)


@dataclass
class Page(Generic[T]):
    items: list[T]
    total: int
    page: int
    size: int

    @property
    def has_more(self) -> bool:
        return (self.page + 1) * self.size < self.total


class CrudService(Protocol[T]):
    def create_new(self, actor: User) -> T: ...

    async def load(self, db: AsyncSession, entity_id: int) -> T: ...

    async def save(self, db: AsyncSession, actor: User, entity: T) -> T: ...

    async def delete(self, db: AsyncSession, actor: User, entity: T) -> None: ...


class FilterableCrudService(CrudService[T], Protocol[T]):
    async def find_any_matching(
        self, db: AsyncSession, filter_text: str | None, page: int, size: int
    ) -> Page[T]: ...

    async def count_any_matching(self, db: AsyncSession, filter_text: str | None) -> int: ...
