# tests/unit/test_persistence.py
"""Unit tests for the raw-SQL repositories using MagicMock AsyncSession."""
from datetime import UTC, date, datetime, time
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError

from src.bk_common.enums import OrderState
from src.bk_common.errors import (
    ConcurrentUpdateError,
    EntityNotFoundError,
    ReferenceIntegrityError,
)
from src.bk_dashboard.infrastructure.persistence import DashboardRepository
from src.bk_location.domain.models import PickupLocation
from src.bk_order.domain.models import Customer, HistoryItem, Order, OrderItem
from src.bk_order.infrastructure.persistence import OrderRepository
from src.bk_product.domain.models import Product
from src.bk_product.infrastructure.persistence import ProductRepository
from src.bk_user.domain.models import User


def _result(row=None, rows=None, scalar=None):
    result = MagicMock()
    result.fetchone.return_value = row
    result.fetchall.return_value = rows or []
    result.scalar_one.return_value = scalar
    return result


def _make_order_row(**kwargs):
    row = MagicMock()
    row.id = kwargs.get("id", 1)
    row.version = kwargs.get("version", 0)
    row.state = kwargs.get("state", "NEW")
    row.due_date = date(2024, 6, 5)
    row.due_time = time(16, 0)
    row.paid = False
    row.customer_id = 7
    row.customer_version = 0
    row.full_name = "Ann Smith"
    row.phone_number = "040 123 4567"
    row.details = None
    row.location_id = 1
    row.location_version = 0
    row.location_name = "Store"
    return row


def _make_item_row(order_id: int = 1):
    row = MagicMock()
    row.id = 3
    row.order_id = order_id
    row.quantity = 2
    row.comment = None
    row.product_id = 4
    row.product_version = 0
    row.product_name = "Bun"
    row.product_price = 350
    return row


def _make_history_row(order_id: int = 1):
    row = MagicMock()
    row.id = 8
    row.order_id = order_id
    row.message = "Order placed"
    row.new_state = "NEW"
    row.timestamp = datetime(2024, 6, 5, 9, 0, tzinfo=UTC)
    row.user_id = 2
    row.user_version = 0
    row.email = "barista@bakery.example"
    row.first_name = "Malin"
    row.last_name = "Castro"
    row.role = "barista"
    row.locked = False
    return row


def _make_order() -> Order:
    actor = User(id=2, email="barista@bakery.example")
    return Order(
        id=1,
        version=3,
        due_date=date(2024, 6, 5),
        due_time=time(16, 0),
        pickup_location=PickupLocation(id=1, name="Store"),
        customer=Customer(id=7, full_name="Ann Smith", phone_number="040 123 4567"),
        items=[OrderItem(product=Product(id=4, name="Bun", price=350), quantity=2)],
        history=[
            HistoryItem(
                id=8, message="Order placed", timestamp=datetime(2024, 6, 5, tzinfo=UTC),
                created_by=actor, new_state=OrderState.NEW,
            ),
            HistoryItem(
                message="Order Confirmed", timestamp=datetime(2024, 6, 5, 1, tzinfo=UTC),
                created_by=actor, new_state=OrderState.CONFIRMED,
            ),
        ],
    )


@pytest.fixture
def db():
    return MagicMock()


class TestProductRepository:
    @pytest.mark.asyncio
    async def test_get_by_id_maps_row(self, db):
        row = MagicMock(id=4, version=2, price=350)
        row.name = "Bun"
        db.execute = AsyncMock(return_value=_result(row=row))
        product = await ProductRepository().get_by_id(db, 4)
        assert product == Product(id=4, version=2, name="Bun", price=350)

    @pytest.mark.asyncio
    async def test_update_stale_version(self, db):
        # the versioned UPDATE matches nothing, but the row still exists
        db.execute = AsyncMock(side_effect=[_result(row=None), _result(row=MagicMock())])
        with pytest.raises(ConcurrentUpdateError):
            await ProductRepository().update(db, Product(id=4, version=1, name="Bun"))

    @pytest.mark.asyncio
    async def test_update_missing_row(self, db):
        db.execute = AsyncMock(side_effect=[_result(row=None), _result(row=None)])
        with pytest.raises(EntityNotFoundError):
            await ProductRepository().update(db, Product(id=4, version=1, name="Bun"))

    @pytest.mark.asyncio
    async def test_integrity_error_becomes_reference_error(self, db):
        db.execute = AsyncMock(side_effect=IntegrityError("INSERT", {}, Exception("dup")))
        with pytest.raises(ReferenceIntegrityError):
            await ProductRepository().insert(db, Product(name="Bun", price=350))

    @pytest.mark.asyncio
    async def test_count_matching(self, db):
        db.execute = AsyncMock(return_value=_result(scalar=5))
        assert await ProductRepository().count_matching(db, "bun") == 5


class TestOrderRepository:
    @pytest.mark.asyncio
    async def test_get_by_id_loads_children(self, db):
        db.execute = AsyncMock(side_effect=[
            _result(row=_make_order_row()),
            _result(rows=[_make_item_row()]),
            _result(rows=[_make_history_row()]),
        ])
        order = await OrderRepository().get_by_id(db, 1)
        assert order is not None
        assert order.pickup_location.name == "Store"
        assert order.customer.id == 7
        assert order.items[0].product.name == "Bun"
        assert order.items[0].total_price == 700
        assert order.history[0].created_by.full_name == "Malin Castro"
        assert order.history[0].new_state == OrderState.NEW

    @pytest.mark.asyncio
    async def test_get_by_id_missing(self, db):
        db.execute = AsyncMock(return_value=_result(row=None))
        assert await OrderRepository().get_by_id(db, 1) is None

    @pytest.mark.asyncio
    async def test_update_writes_only_new_history(self, db):
        updated = MagicMock(customer_id=7)
        db.execute = AsyncMock(return_value=_result(row=updated))
        await OrderRepository().update(db, _make_order())
        # order, customer, delete items, one item, one new history entry
        assert db.execute.await_count == 5
        history_params = db.execute.await_args_list[-1].args[1]
        assert history_params["message"] == "Order Confirmed"
        assert history_params["created_by_id"] == 2

    @pytest.mark.asyncio
    async def test_update_stale_touches_no_children(self, db):
        db.execute = AsyncMock(side_effect=[_result(row=None), _result(row=MagicMock())])
        with pytest.raises(ConcurrentUpdateError):
            await OrderRepository().update(db, _make_order())
        assert db.execute.await_count == 2

    @pytest.mark.asyncio
    async def test_insert_returns_id(self, db):
        db.execute = AsyncMock(side_effect=[
            _result(scalar=7),  # customer
            _result(scalar=42),  # order
            _result(),  # item
            _result(),  # new history entry
        ])
        order = _make_order()
        order.id = None
        assert await OrderRepository().insert(db, order) == 42

    @pytest.mark.asyncio
    async def test_delete_removes_customer(self, db):
        db.execute = AsyncMock(side_effect=[_result(row=MagicMock(customer_id=7)), _result()])
        await OrderRepository().delete(db, _make_order())
        assert db.execute.await_args_list[-1].args[1] == {"id": 7}

    @pytest.mark.asyncio
    async def test_find_passes_filter(self, db):
        db.execute = AsyncMock(return_value=_result(rows=[]))
        orders = await OrderRepository().find_after_due_date(db, "ann", date(2024, 6, 4), 0, 10)
        assert orders == []
        params = db.execute.await_args.args[1]
        assert params == {"filter": "ann", "after": date(2024, 6, 4), "offset": 0, "limit": 10}


class TestDashboardRepository:
    @pytest.mark.asyncio
    async def test_delivery_stats(self, db):
        row = MagicMock(
            delivered_today=2, due_today=9, due_tomorrow=4, not_available_today=1, new_orders=3
        )
        db.execute = AsyncMock(return_value=_result(row=row))
        stats = await DashboardRepository().get_delivery_stats(db, date(2024, 6, 5))
        assert stats.due_today == 9
        assert stats.new_orders == 3
        assert db.execute.await_args.args[1]["tomorrow"] == date(2024, 6, 6)

    @pytest.mark.asyncio
    async def test_per_day_counts(self, db):
        db.execute = AsyncMock(return_value=_result(rows=[
            MagicMock(day=1, total=3), MagicMock(day=15, total=1),
        ]))
        assert await DashboardRepository().count_delivered_per_day(db, 2024, 6) == {1: 3, 15: 1}
