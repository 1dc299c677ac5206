"""OrderService — persistence workflow of the order aggregate.

Writes commit on success and roll back on any failure. After a save the
order is re-read so the caller gets the database-assigned ids and version.
"""

import logging
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_common.errors import EntityNotFoundError
from src.bk_crud.service import Page
from src.bk_order.domain.models import Order
from src.bk_order.domain.repository import OrderRepositoryProtocol
from src.bk_order.infrastructure.persistence import OrderRepository
from src.bk_user.domain.models import User

logger = logging.getLogger("bk.order")


class OrderService:
    def __init__(self, repo: OrderRepositoryProtocol | None = None) -> None:
        self._repo: OrderRepositoryProtocol = repo or OrderRepository()

    def create_new(self, actor: User) -> Order:
        """Unsaved order in state NEW, due today at 16:00, history "Order placed"."""
        return Order.create_new(actor)

    async def load(self, db: AsyncSession, entity_id: int) -> Order:
        order = await self._repo.get_by_id(db, entity_id)
        if order is None:
            raise EntityNotFoundError("Order", entity_id)
        return order

    async def save(self, db: AsyncSession, actor: User, entity: Order) -> Order:
        try:
            if entity.id is None:
                order_id = await self._repo.insert(db, entity)
            else:
                await self._repo.update(db, entity)
                order_id = entity.id
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "Order %s saved by %s (state=%s)", order_id, actor.email, entity.state.value
        )
        return await self.load(db, order_id)

    async def delete(self, db: AsyncSession, actor: User, entity: Order) -> None:
        try:
            await self._repo.delete(db, entity)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Order %s deleted by %s", entity.id, actor.email)

    async def add_comment(
        self, db: AsyncSession, actor: User, order: Order, comment: str
    ) -> Order:
        order.add_history_item(actor, comment)
        return await self.save(db, actor, order)

    async def get_last_order(self, db: AsyncSession) -> Order | None:
        return await self._repo.get_last(db)

    async def find_any_matching_after_due_date(
        self,
        db: AsyncSession,
        filter_text: str | None,
        after: date | None,
        page: int,
        size: int,
    ) -> Page[Order]:
        filter_text = filter_text or None
        items = await self._repo.find_after_due_date(db, filter_text, after, page * size, size)
        total = await self._repo.count_after_due_date(db, filter_text, after)
        return Page(items=items, total=total, page=page, size=size)

    async def find_slice_after_due_date(
        self,
        db: AsyncSession,
        filter_text: str | None,
        after: date | None,
        offset: int,
        limit: int,
    ) -> list[Order]:
        return await self._repo.find_after_due_date(db, filter_text or None, after, offset, limit)

    async def count_any_matching_after_due_date(
        self, db: AsyncSession, filter_text: str | None, after: date | None
    ) -> int:
        return await self._repo.count_after_due_date(db, filter_text or None, after)

    async def find_any_matching(
        self, db: AsyncSession, filter_text: str | None, page: int, size: int
    ) -> Page[Order]:
        return await self.find_any_matching_after_due_date(db, filter_text, None, page, size)

    async def count_any_matching(self, db: AsyncSession, filter_text: str | None) -> int:
        return await self.count_any_matching_after_due_date(db, filter_text, None)
