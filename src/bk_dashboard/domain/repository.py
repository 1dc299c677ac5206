# src/bk_dashboard/domain/repository.py
"""DashboardRepository Protocol — read-only aggregate queries."""
from datetime import date
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_dashboard.domain.models import DeliveryStats, OrderSummary, ProductDeliveries


class DashboardRepositoryProtocol(Protocol):
    async def get_delivery_stats(self, db: AsyncSession, today: date) -> DeliveryStats: ...

    async def list_scheduled_from(self, db: AsyncSession, day: date) -> list[OrderSummary]: ...

    async def count_delivered_per_day(
        self, db: AsyncSession, year: int, month: int
    ) -> dict[int, int]: ...

    async def count_delivered_per_month(self, db: AsyncSession, year: int) -> dict[int, int]: ...

    async def sum_sales_per_month(self, db: AsyncSession, year: int) -> dict[int, int]: ...

    async def sum_product_deliveries(
        self, db: AsyncSession, year: int, month: int
    ) -> list[ProductDeliveries]: ...
