"""Unit tests for the dashboard counters and DashboardService."""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime, time, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.bk_common.enums import OrderState
from src.bk_dashboard.application.schemas import DashboardOut
from src.bk_dashboard.application.service import DashboardService
from src.bk_dashboard.dashboard_utils import (
    get_new_orders_count_data,
    get_not_available_orders_count_data,
    get_todays_orders_count_data,
    get_tomorrow_orders_count_data,
)
from src.bk_dashboard.domain.models import (
    DeliveryStats,
    OrdersCountDataWithChart,
    OrderSummary,
    ProductDeliveries,
)

NOW = datetime(2024, 6, 5, 10, 0)
STATS = DeliveryStats(
    delivered_today=2, due_today=9, due_tomorrow=4, not_available_today=1, new_orders=3
)


def _summary(order_id: int, state: OrderState, day: date, at: time) -> OrderSummary:
    return OrderSummary(id=order_id, state=state, due_date=day, due_time=at)


@dataclass
class _Entry:
    timestamp: datetime


@dataclass
class _Placed:
    history: list[_Entry] = field(default_factory=list)


class TestTodaysOrders:
    def test_remaining_count(self) -> None:
        data = get_todays_orders_count_data(STATS, [], NOW)
        assert data.title == "Remaining Today"
        assert data.count == 7
        assert data.overall == 9
        assert data.subtitle is None

    def test_next_ready_order_today(self) -> None:
        today = NOW.date()
        orders = [
            _summary(1, OrderState.READY, today, time(9, 0)),
            _summary(2, OrderState.CONFIRMED, today, time(11, 0)),
            _summary(3, OrderState.READY, today, time(12, 30)),
        ]
        data = get_todays_orders_count_data(STATS, orders, NOW)
        assert data.subtitle == "Next Delivery 12:30"

    def test_next_ready_order_later(self) -> None:
        orders = [_summary(1, OrderState.READY, date(2024, 6, 7), time(9, 0))]
        data = get_todays_orders_count_data(STATS, orders, NOW)
        assert data.subtitle == "Next Delivery 6/7"


class TestOtherCounters:
    def test_not_available(self) -> None:
        data = get_not_available_orders_count_data(STATS)
        assert (data.title, data.subtitle, data.count) == ("Not Available", "Delivery tomorrow", 1)

    def test_tomorrow_first_delivery(self) -> None:
        tomorrow = NOW.date() + timedelta(days=1)
        orders = [
            _summary(1, OrderState.NEW, NOW.date(), time(8, 0)),
            _summary(2, OrderState.NEW, tomorrow, time(14, 0)),
            _summary(3, OrderState.CONFIRMED, tomorrow, time(9, 30)),
            _summary(4, OrderState.NEW, tomorrow + timedelta(days=1), time(7, 0)),
        ]
        data = get_tomorrow_orders_count_data(STATS, orders, NOW)
        assert data.count == 4
        assert data.subtitle == "First delivery 09:30"

    def test_tomorrow_nothing_scheduled(self) -> None:
        assert get_tomorrow_orders_count_data(STATS, [], NOW).subtitle is None


class TestNewOrders:
    @pytest.mark.parametrize(
        ("elapsed", "subtitle"),
        [
            (timedelta(days=2, hours=3), "Last 2d ago"),
            (timedelta(hours=3, minutes=59), "Last 3h ago"),
            (timedelta(minutes=5, seconds=10), "Last 5m ago"),
            (timedelta(seconds=20), "Last just added"),
        ],
    )
    def test_elapsed_subtitle(self, elapsed: timedelta, subtitle: str) -> None:
        last = _Placed([_Entry(NOW - elapsed), _Entry(NOW)])
        data = get_new_orders_count_data(STATS, last, NOW)
        assert data.title == "New"
        assert data.count == 3
        assert data.subtitle == subtitle

    def test_no_orders(self) -> None:
        assert get_new_orders_count_data(STATS, None, NOW).subtitle is None


class TestDashboardService:
    @pytest.fixture
    def repo(self) -> MagicMock:
        r = MagicMock()
        r.get_delivery_stats = AsyncMock(return_value=STATS)
        r.list_scheduled_from = AsyncMock(return_value=[])
        r.count_delivered_per_day = AsyncMock(return_value={1: 3, 30: 2})
        r.count_delivered_per_month = AsyncMock(return_value={6: 40})
        r.sum_sales_per_month = AsyncMock(return_value={6: 125000})
        r.sum_product_deliveries = AsyncMock(
            return_value=[ProductDeliveries(product_name="Bun", quantity=12)]
        )
        return r

    async def test_counters_in_display_order(self, repo: MagicMock) -> None:
        order_service = MagicMock()
        order_service.get_last_order = AsyncMock(return_value=None)
        counters = await DashboardService(repo, order_service).get_counters(
            AsyncMock(), now=NOW, utc=NOW.replace(tzinfo=UTC)
        )
        assert [c.title for c in counters] == [
            "Remaining Today", "Not Available", "New", "Tomorrow"
        ]
        assert isinstance(counters[0], OrdersCountDataWithChart)
        assert repo.get_delivery_stats.await_args.args[1] == NOW.date()

    async def test_chart_series(self, repo: MagicMock) -> None:
        data = await DashboardService(repo, MagicMock()).get_dashboard_data(AsyncMock(), now=NOW)
        assert len(data.deliveries_this_month) == 30
        assert data.deliveries_this_month[0] == 3
        assert data.deliveries_this_month[29] == 2
        assert data.deliveries_this_year[5] == 40
        assert sorted(data.sales_per_month) == [2022, 2023, 2024]
        assert data.sales_per_month[2024][5] == 125000

    async def test_response_schema(self, repo: MagicMock) -> None:
        order_service = MagicMock()
        order_service.get_last_order = AsyncMock(return_value=None)
        service = DashboardService(repo, order_service)
        counters = await service.get_counters(AsyncMock(), now=NOW, utc=NOW)
        data = await service.get_dashboard_data(AsyncMock(), now=NOW)
        out = DashboardOut.from_domain(counters, data)
        assert out.counters[0].overall == 9
        assert out.counters[1].overall is None
        assert out.sales_per_month[0].year == 2024
        assert out.sales_per_month[0].total_display == "$1,250.00"
        assert out.product_deliveries[0].quantity == 12
