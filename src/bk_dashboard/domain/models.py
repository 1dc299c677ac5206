"""Dashboard value objects."""

from dataclasses import dataclass, field
from datetime import date, time

from src.bk_common.enums import OrderState


@dataclass(frozen=True)
class DeliveryStats:
    delivered_today: int = 0
    due_today: int = 0
    due_tomorrow: int = 0
    not_available_today: int = 0
    new_orders: int = 0


@dataclass(frozen=True)
class OrderSummary:
    """The fields of an order the dashboard counters look at."""

    id: int
    state: OrderState
    due_date: date
    due_time: time


@dataclass
class OrdersCountData:
    title: str
    subtitle: str | None
    count: int


@dataclass
class OrdersCountDataWithChart(OrdersCountData):
    overall: int = 0


@dataclass
class ProductDeliveries:
    product_name: str
    quantity: int


@dataclass
class DashboardData:
    delivery_stats: DeliveryStats
    deliveries_this_month: list[int] = field(default_factory=list)  # index 0 = day 1
    deliveries_this_year: list[int] = field(default_factory=list)  # index 0 = January
    sales_per_month: dict[int, list[int]] = field(default_factory=dict)  # year -> 12 cents
    product_deliveries: list[ProductDeliveries] = field(default_factory=list)
