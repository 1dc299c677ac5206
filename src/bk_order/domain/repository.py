# src/bk_order/domain/repository.py
"""OrderRepository Protocol — interface contract for persistence layer."""
from datetime import date
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_order.domain.models import Order


class OrderRepositoryProtocol(Protocol):
    async def get_by_id(self, db: AsyncSession, order_id: int) -> Order | None: ...

    async def insert(self, db: AsyncSession, order: Order) -> int: ...

    async def update(self, db: AsyncSession, order: Order) -> None: ...

    async def delete(self, db: AsyncSession, order: Order) -> None: ...

    async def find_after_due_date(
        self,
        db: AsyncSession,
        filter_text: str | None,
        after: date | None,
        offset: int,
        limit: int,
    ) -> list[Order]: ...

    async def count_after_due_date(
        self, db: AsyncSession, filter_text: str | None, after: date | None
    ) -> int: ...

    async def get_last(self, db: AsyncSession) -> Order | None: ...
