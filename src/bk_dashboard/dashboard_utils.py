"""Counters shown at the top of the dashboard.

Pure functions: every input, including the current time, is passed in.
``orders`` must be sorted by due date and due time.
"""

from collections.abc import Iterable, Sequence
from datetime import date, datetime, time, timedelta
from typing import Protocol

from src.bk_common.enums import OrderState
from src.bk_common.formatting import iso_time
from src.bk_dashboard.domain.models import (
    DeliveryStats,
    OrdersCountData,
    OrdersCountDataWithChart,
)

NEXT_DELIVERY_PATTERN = "Next Delivery %s"
NEW_ORDERS_COUNT_SUBTITLE_PATTERN = "Last %d%s ago"
_ELAPSED_UNITS = (
    (timedelta(days=1), "d"),
    (timedelta(hours=1), "h"),
    (timedelta(minutes=1), "m"),
)


class ScheduledOrder(Protocol):
    @property
    def state(self) -> OrderState: ...

    @property
    def due_date(self) -> date: ...

    @property
    def due_time(self) -> time: ...


class StampedEntry(Protocol):
    @property
    def timestamp(self) -> datetime: ...


class PlacedOrder(Protocol):
    @property
    def history(self) -> Sequence[StampedEntry]: ...


def get_todays_orders_count_data(
    stats: DeliveryStats, orders: Iterable[ScheduledOrder], now: datetime
) -> OrdersCountDataWithChart:
    data = OrdersCountDataWithChart(
        title="Remaining Today",
        subtitle=None,
        count=stats.due_today - stats.delivered_today,
        overall=stats.due_today,
    )
    today, now_time = now.date(), now.time()
    for order in orders:
        if _is_order_next_to_deliver(order, today, now_time):
            if order.due_date == today:
                data.subtitle = NEXT_DELIVERY_PATTERN % iso_time(order.due_time)
            else:
                data.subtitle = NEXT_DELIVERY_PATTERN % (
                    f"{order.due_date.month}/{order.due_date.day}"
                )
            break
    return data


def _is_order_next_to_deliver(order: ScheduledOrder, today: date, now_time: time) -> bool:
    return order.state == OrderState.READY and (
        (order.due_date == today and order.due_time > now_time) or order.due_date > today
    )


def get_not_available_orders_count_data(stats: DeliveryStats) -> OrdersCountData:
    return OrdersCountData(
        title="Not Available", subtitle="Delivery tomorrow", count=stats.not_available_today
    )


def get_tomorrow_orders_count_data(
    stats: DeliveryStats, orders: Iterable[ScheduledOrder], now: datetime
) -> OrdersCountData:
    data = OrdersCountData(title="Tomorrow", subtitle=None, count=stats.due_tomorrow)
    tomorrow = now.date() + timedelta(days=1)
    first: time | None = None
    for order in orders:
        if order.due_date < tomorrow:
            continue
        if order.due_date > tomorrow:
            break
        if first is None or order.due_time < first:
            first = order.due_time
    if first is not None:
        data.subtitle = f"First delivery {iso_time(first)}"
    return data


def get_new_orders_count_data(
    stats: DeliveryStats, last_order: PlacedOrder | None, now: datetime
) -> OrdersCountData:
    subtitle = None
    if last_order is not None and last_order.history:
        subtitle = _elapsed_subtitle(last_order.history[0].timestamp, now)
    return OrdersCountData(title="New", subtitle=subtitle, count=stats.new_orders)


def _elapsed_subtitle(timestamp: datetime, now: datetime) -> str:
    """Largest non-zero whole unit of the time since ``timestamp``."""
    elapsed = now - timestamp
    for unit, suffix in _ELAPSED_UNITS:
        value = elapsed // unit
        if value > 0:
            return NEW_ORDERS_COUNT_SUBTITLE_PATTERN % (value, suffix)
    # future timestamps land here too
    return "Last just added"
