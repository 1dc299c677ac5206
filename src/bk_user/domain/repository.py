# src/bk_user/domain/repository.py
"""UserRepository Protocol — interface contract for persistence layer."""
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_user.domain.models import User


class UserRepositoryProtocol(Protocol):
    async def get_by_id(self, db: AsyncSession, user_id: int) -> User | None: ...

    async def get_by_email(self, db: AsyncSession, email: str) -> User | None: ...

    async def insert(self, db: AsyncSession, user: User) -> User: ...

    async def update(self, db: AsyncSession, user: User) -> User: ...

    async def delete(self, db: AsyncSession, user: User) -> None: ...

    async def find_matching(
        self, db: AsyncSession, filter_text: str | None, offset: int, limit: int
    ) -> list[User]: ...

    async def count_matching(self, db: AsyncSession, filter_text: str | None) -> int: ...
