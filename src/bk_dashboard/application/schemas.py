# src/bk_dashboard/application/schemas.py
"""Pydantic response schemas for the dashboard."""
from pydantic import BaseModel

from src.bk_common.cents import format_as_currency
from src.bk_dashboard.domain.models import (
    DashboardData,
    OrdersCountData,
    OrdersCountDataWithChart,
)


class CounterOut(BaseModel):
    title: str
    subtitle: str | None
    count: int
    overall: int | None = None

    @classmethod
    def from_domain(cls, data: OrdersCountData) -> "CounterOut":
        overall = data.overall if isinstance(data, OrdersCountDataWithChart) else None
        return cls(title=data.title, subtitle=data.subtitle, count=data.count, overall=overall)


class ProductDeliveriesOut(BaseModel):
    product_name: str
    quantity: int


class SalesYearOut(BaseModel):
    year: int
    months: list[int]
    total: int
    total_display: str


class DashboardOut(BaseModel):
    counters: list[CounterOut]
    deliveries_this_month: list[int]
    deliveries_this_year: list[int]
    sales_per_month: list[SalesYearOut]
    product_deliveries: list[ProductDeliveriesOut]

    @classmethod
    def from_domain(
        cls, counters: list[OrdersCountData], data: DashboardData
    ) -> "DashboardOut":
        return cls(
            counters=[CounterOut.from_domain(c) for c in counters],
            deliveries_this_month=data.deliveries_this_month,
            deliveries_this_year=data.deliveries_this_year,
            sales_per_month=[
                SalesYearOut(
                    year=year,
                    months=months,
                    total=sum(months),
                    total_display=format_as_currency(sum(months)),
                )
                for year, months in sorted(data.sales_per_month.items(), reverse=True)
            ],
            product_deliveries=[
                ProductDeliveriesOut(product_name=p.product_name, quantity=p.quantity)
                for p in data.product_deliveries
            ],
        )
