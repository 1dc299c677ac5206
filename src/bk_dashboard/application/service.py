# src/bk_dashboard/application/service.py
"""DashboardService — counters and chart series for the admin dashboard."""
import calendar
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_common.datetime_utils import local_now, utc_now
from src.bk_dashboard.dashboard_utils import (
    get_new_orders_count_data,
    get_not_available_orders_count_data,
    get_todays_orders_count_data,
    get_tomorrow_orders_count_data,
)
from src.bk_dashboard.domain.models import DashboardData, OrdersCountData
from src.bk_dashboard.domain.repository import DashboardRepositoryProtocol
from src.bk_dashboard.infrastructure.persistence import DashboardRepository
from src.bk_order.application.service import OrderService

SALES_YEARS = 3


class DashboardService:
    def __init__(
        self,
        repo: DashboardRepositoryProtocol | None = None,
        order_service: OrderService | None = None,
    ) -> None:
        self._repo: DashboardRepositoryProtocol = repo or DashboardRepository()
        self._order_service = order_service or OrderService()

    async def get_counters(
        self,
        db: AsyncSession,
        now: datetime | None = None,
        utc: datetime | None = None,
    ) -> list[OrdersCountData]:
        """Remaining today, not available, new and tomorrow, in display order.

        ``now`` is the bakery's local time, compared with due dates; ``utc``
        is compared with history timestamps.
        """
        now = now or local_now()
        utc = utc or utc_now()
        today = now.date()
        stats = await self._repo.get_delivery_stats(db, today)
        scheduled = await self._repo.list_scheduled_from(db, today)
        last_order = await self._order_service.get_last_order(db)
        return [
            get_todays_orders_count_data(stats, scheduled, now),
            get_not_available_orders_count_data(stats),
            get_new_orders_count_data(stats, last_order, utc),
            get_tomorrow_orders_count_data(stats, scheduled, now),
        ]

    async def get_dashboard_data(
        self, db: AsyncSession, now: datetime | None = None
    ) -> DashboardData:
        now = now or local_now()
        year, month = now.year, now.month
        days_in_month = calendar.monthrange(year, month)[1]

        per_day = await self._repo.count_delivered_per_day(db, year, month)
        per_month = await self._repo.count_delivered_per_month(db, year)
        sales: dict[int, list[int]] = {}
        for sales_year in range(year - SALES_YEARS + 1, year + 1):
            totals = await self._repo.sum_sales_per_month(db, sales_year)
            sales[sales_year] = [totals.get(m, 0) for m in range(1, 13)]

        return DashboardData(
            delivery_stats=await self._repo.get_delivery_stats(db, now.date()),
            deliveries_this_month=[per_day.get(d, 0) for d in range(1, days_in_month + 1)],
            deliveries_this_year=[per_month.get(m, 0) for m in range(1, 13)],
            sales_per_month=sales,
            product_deliveries=await self._repo.sum_product_deliveries(db, year, month),
        )
