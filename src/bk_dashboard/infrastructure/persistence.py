# src/bk_dashboard/infrastructure/persistence.py
"""DashboardRepository — aggregate SQL over orders, items and products.

Every query is read-only; nothing here opens a transaction.
"""
from datetime import date, timedelta

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_common.enums import OrderState
from src.bk_dashboard.domain.models import DeliveryStats, OrderSummary, ProductDeliveries

_STATS_SQL = text("""
    SELECT
        COUNT(*) FILTER (WHERE state = 'DELIVERED' AND due_date = :today) AS delivered_today,
        COUNT(*) FILTER (WHERE due_date = :today)                         AS due_today,
        COUNT(*) FILTER (WHERE due_date = :tomorrow)                      AS due_tomorrow,
        COUNT(*) FILTER (WHERE state = 'PROBLEM' AND due_date = :today)   AS not_available_today,
        COUNT(*) FILTER (WHERE state = 'NEW')                             AS new_orders
    FROM orders
""")

_SCHEDULED_FROM_SQL = text("""
    SELECT id, state, due_date, due_time FROM orders
    WHERE due_date >= :day
    ORDER BY due_date, due_time, id
""")

_DELIVERED_PER_DAY_SQL = text("""
    SELECT EXTRACT(DAY FROM due_date)::int AS day, COUNT(*) AS total
    FROM orders
    WHERE state = 'DELIVERED'
      AND EXTRACT(YEAR FROM due_date) = :year AND EXTRACT(MONTH FROM due_date) = :month
    GROUP BY 1
""")

_DELIVERED_PER_MONTH_SQL = text("""
    SELECT EXTRACT(MONTH FROM due_date)::int AS month, COUNT(*) AS total
    FROM orders
    WHERE state = 'DELIVERED' AND EXTRACT(YEAR FROM due_date) = :year
    GROUP BY 1
""")

_SALES_PER_MONTH_SQL = text("""
    SELECT EXTRACT(MONTH FROM o.due_date)::int AS month, SUM(i.quantity * p.price) AS total
    FROM orders o
    JOIN order_items i ON i.order_id = o.id
    JOIN products p ON p.id = i.product_id
    WHERE o.state = 'DELIVERED' AND EXTRACT(YEAR FROM o.due_date) = :year
    GROUP BY 1
""")

_PRODUCT_DELIVERIES_SQL = text("""
    SELECT p.name AS product_name, SUM(i.quantity) AS quantity
    FROM orders o
    JOIN order_items i ON i.order_id = o.id
    JOIN products p ON p.id = i.product_id
    WHERE o.state = 'DELIVERED'
      AND EXTRACT(YEAR FROM o.due_date) = :year AND EXTRACT(MONTH FROM o.due_date) = :month
    GROUP BY p.name
    ORDER BY p.name
""")


class DashboardRepository:
    async def get_delivery_stats(self, db: AsyncSession, today: date) -> DeliveryStats:
        result = await db.execute(
            _STATS_SQL, {"today": today, "tomorrow": today + timedelta(days=1)}
        )
        row = result.fetchone()
        return DeliveryStats(
            delivered_today=row.delivered_today,
            due_today=row.due_today,
            due_tomorrow=row.due_tomorrow,
            not_available_today=row.not_available_today,
            new_orders=row.new_orders,
        )

    async def list_scheduled_from(self, db: AsyncSession, day: date) -> list[OrderSummary]:
        result = await db.execute(_SCHEDULED_FROM_SQL, {"day": day})
        return [
            OrderSummary(
                id=row.id, state=OrderState(row.state), due_date=row.due_date, due_time=row.due_time
            )
            for row in result.fetchall()
        ]

    async def count_delivered_per_day(
        self, db: AsyncSession, year: int, month: int
    ) -> dict[int, int]:
        result = await db.execute(_DELIVERED_PER_DAY_SQL, {"year": year, "month": month})
        return {row.day: int(row.total) for row in result.fetchall()}

    async def count_delivered_per_month(self, db: AsyncSession, year: int) -> dict[int, int]:
        result = await db.execute(_DELIVERED_PER_MONTH_SQL, {"year": year})
        return {row.month: int(row.total) for row in result.fetchall()}

    async def sum_sales_per_month(self, db: AsyncSession, year: int) -> dict[int, int]:
        result = await db.execute(_SALES_PER_MONTH_SQL, {"year": year})
        return {row.month: int(row.total) for row in result.fetchall()}

    async def sum_product_deliveries(
        self, db: AsyncSession, year: int, month: int
    ) -> list[ProductDeliveries]:
        result = await db.execute(_PRODUCT_DELIVERIES_SQL, {"year": year, "month": month})
        return [
            ProductDeliveries(product_name=row.product_name, quantity=int(row.quantity))
            for row in result.fetchall()
        ]
