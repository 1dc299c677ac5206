# src/bk_order/infrastructure/persistence.py
"""OrderRepository — raw SQL persistence for the order aggregate.

An order spans five tables: orders, customers, order_items, history_items
(plus the referenced products, pickup_locations and users). The orders row
carries the version; every aggregate write goes through a versioned UPDATE
of that row first, so a stale order never touches its children.

Items are replaced wholesale on update. History rows are insert-only: only
entries without an id are written.
"""
from datetime import date
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_common.database import execute_checked, raise_stale_or_missing
from src.bk_common.enums import OrderState
from src.bk_location.domain.models import PickupLocation
from src.bk_order.domain.models import Customer, HistoryItem, Order, OrderItem
from src.bk_product.domain.models import Product
from src.bk_user.domain.models import User

# ---------------------------------------------------------------------------
# SQL statements
# ---------------------------------------------------------------------------

_ORDER_SELECT = """
    SELECT o.id, o.version, o.state, o.due_date, o.due_time, o.paid,
           c.id AS customer_id, c.version AS customer_version,
           c.full_name, c.phone_number, c.details,
           p.id AS location_id, p.version AS location_version, p.name AS location_name
    FROM orders o
    JOIN customers c ON c.id = o.customer_id
    LEFT JOIN pickup_locations p ON p.id = o.pickup_location_id
"""

_GET_BY_ID_SQL = text(_ORDER_SELECT + " WHERE o.id = :id")

_ITEMS_SQL = text("""
    SELECT i.id, i.order_id, i.quantity, i.comment,
           p.id AS product_id, p.version AS product_version,
           p.name AS product_name, p.price AS product_price
    FROM order_items i
    JOIN products p ON p.id = i.product_id
    WHERE i.order_id = ANY(:order_ids)
    ORDER BY i.order_id, i.position
""")

_HISTORY_SQL = text("""
    SELECT h.id, h.order_id, h.message, h.new_state, h.timestamp,
           u.id AS user_id, u.version AS user_version, u.email,
           u.first_name, u.last_name, u.role, u.locked
    FROM history_items h
    JOIN users u ON u.id = h.created_by_id
    WHERE h.order_id = ANY(:order_ids)
    ORDER BY h.order_id, h.timestamp, h.id
""")

_INSERT_CUSTOMER_SQL = text("""
    INSERT INTO customers (full_name, phone_number, details)
    VALUES (:full_name, :phone_number, :details)
    RETURNING id
""")

_UPDATE_CUSTOMER_SQL = text("""
    UPDATE customers
    SET full_name = :full_name, phone_number = :phone_number, details = :details,
        version = version + 1
    WHERE id = :id
""")

_INSERT_ORDER_SQL = text("""
    INSERT INTO orders (state, due_date, due_time, paid, customer_id, pickup_location_id)
    VALUES (:state, :due_date, :due_time, :paid, :customer_id, :pickup_location_id)
    RETURNING id
""")

_UPDATE_ORDER_SQL = text("""
    UPDATE orders
    SET state = :state, due_date = :due_date, due_time = :due_time, paid = :paid,
        pickup_location_id = :pickup_location_id,
        version = version + 1, updated_at = NOW()
    WHERE id = :id AND version = :version
    RETURNING customer_id
""")

_DELETE_ITEMS_SQL = text("DELETE FROM order_items WHERE order_id = :order_id")

_INSERT_ITEM_SQL = text("""
    INSERT INTO order_items (order_id, position, product_id, quantity, comment)
    VALUES (:order_id, :position, :product_id, :quantity, :comment)
""")

_INSERT_HISTORY_SQL = text("""
    INSERT INTO history_items (order_id, message, new_state, timestamp, created_by_id)
    VALUES (:order_id, :message, :new_state, :timestamp, :created_by_id)
""")

# order_items and history_items cascade with the order row
_DELETE_ORDER_SQL = text("""
    DELETE FROM orders WHERE id = :id AND version = :version
    RETURNING customer_id
""")

_DELETE_CUSTOMER_SQL = text("DELETE FROM customers WHERE id = :id")

_GET_LAST_SQL = text(_ORDER_SELECT + " ORDER BY o.id DESC LIMIT 1")

_AFTER_DUE_DATE_FILTER = """
    WHERE (CAST(:after AS DATE) IS NULL OR o.due_date > CAST(:after AS DATE))
      AND (CAST(:filter AS TEXT) IS NULL
           OR c.full_name ILIKE '%' || CAST(:filter AS TEXT) || '%')
"""

_FIND_AFTER_DUE_DATE_SQL = text(
    _ORDER_SELECT
    + _AFTER_DUE_DATE_FILTER
    + " ORDER BY o.due_date, o.due_time, o.id OFFSET :offset LIMIT :limit"
)

_COUNT_AFTER_DUE_DATE_SQL = text(
    "SELECT COUNT(*) FROM orders o JOIN customers c ON c.id = o.customer_id"
    + _AFTER_DUE_DATE_FILTER
)


# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_order(row: Any) -> Order:
    location = None
    if row.location_id is not None:
        location = PickupLocation(
            id=row.location_id, version=row.location_version, name=row.location_name
        )
    return Order(
        id=row.id,
        version=row.version,
        state=OrderState(row.state),
        due_date=row.due_date,
        due_time=row.due_time,
        paid=row.paid,
        pickup_location=location,
        customer=Customer(
            id=row.customer_id,
            version=row.customer_version,
            full_name=row.full_name,
            phone_number=row.phone_number,
            details=row.details,
        ),
    )


def _row_to_item(row: Any) -> OrderItem:
    return OrderItem(
        id=row.id,
        quantity=row.quantity,
        comment=row.comment,
        product=Product(
            id=row.product_id,
            version=row.product_version,
            name=row.product_name,
            price=row.product_price,
        ),
    )


def _row_to_history(row: Any) -> HistoryItem:
    return HistoryItem(
        id=row.id,
        message=row.message,
        new_state=OrderState(row.new_state) if row.new_state else None,
        timestamp=row.timestamp,
        created_by=User(
            id=row.user_id,
            version=row.user_version,
            email=row.email,
            first_name=row.first_name,
            last_name=row.last_name,
            role=row.role,
            locked=row.locked,
        ),
    )


def _customer_params(customer: Customer) -> dict[str, Any]:
    return {
        "id": customer.id,
        "full_name": customer.full_name,
        "phone_number": customer.phone_number,
        "details": customer.details,
    }


def _order_params(order: Order) -> dict[str, Any]:
    return {
        "id": order.id,
        "version": order.version,
        "state": order.state.value,
        "due_date": order.due_date,
        "due_time": order.due_time,
        "paid": order.paid,
        "pickup_location_id": order.pickup_location.id if order.pickup_location else None,
    }


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class OrderRepository:
    async def get_by_id(self, db: AsyncSession, order_id: int) -> Order | None:
        result = await db.execute(_GET_BY_ID_SQL, {"id": order_id})
        row = result.fetchone()
        if row is None:
            return None
        order = _row_to_order(row)
        await self._load_children(db, [order])
        return order

    async def get_last(self, db: AsyncSession) -> Order | None:
        """The most recently placed order."""
        result = await db.execute(_GET_LAST_SQL)
        row = result.fetchone()
        if row is None:
            return None
        order = _row_to_order(row)
        await self._load_children(db, [order])
        return order

    async def insert(self, db: AsyncSession, order: Order) -> int:
        """Insert the whole aggregate; returns the new order id."""
        result = await execute_checked(db, _INSERT_CUSTOMER_SQL, _customer_params(order.customer))
        customer_id = result.scalar_one()
        params = _order_params(order) | {"customer_id": customer_id}
        result = await execute_checked(db, _INSERT_ORDER_SQL, params)
        order_id: int = result.scalar_one()
        await self._insert_items(db, order_id, order.items)
        await self._insert_new_history(db, order_id, order.history)
        return order_id

    async def update(self, db: AsyncSession, order: Order) -> None:
        result = await execute_checked(db, _UPDATE_ORDER_SQL, _order_params(order))
        row = result.fetchone()
        if row is None:
            await raise_stale_or_missing(db, "orders", "Order", order.id)
        customer = _customer_params(order.customer) | {"id": row.customer_id}
        await execute_checked(db, _UPDATE_CUSTOMER_SQL, customer)
        await execute_checked(db, _DELETE_ITEMS_SQL, {"order_id": order.id})
        await self._insert_items(db, order.id, order.items)  # type: ignore[arg-type]
        await self._insert_new_history(db, order.id, order.history)  # type: ignore[arg-type]

    async def delete(self, db: AsyncSession, order: Order) -> None:
        result = await execute_checked(
            db, _DELETE_ORDER_SQL, {"id": order.id, "version": order.version}
        )
        row = result.fetchone()
        if row is None:
            await raise_stale_or_missing(db, "orders", "Order", order.id)
        await execute_checked(db, _DELETE_CUSTOMER_SQL, {"id": row.customer_id})

    async def find_after_due_date(
        self,
        db: AsyncSession,
        filter_text: str | None,
        after: date | None,
        offset: int,
        limit: int,
    ) -> list[Order]:
        """Orders due strictly after ``after`` (all when None), by due date/time/id."""
        result = await db.execute(
            _FIND_AFTER_DUE_DATE_SQL,
            {"filter": filter_text, "after": after, "offset": offset, "limit": limit},
        )
        orders = [_row_to_order(row) for row in result.fetchall()]
        await self._load_children(db, orders)
        return orders

    async def count_after_due_date(
        self, db: AsyncSession, filter_text: str | None, after: date | None
    ) -> int:
        result = await db.execute(
            _COUNT_AFTER_DUE_DATE_SQL, {"filter": filter_text, "after": after}
        )
        return int(result.scalar_one())

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _load_children(self, db: AsyncSession, orders: list[Order]) -> None:
        if not orders:
            return
        by_id = {order.id: order for order in orders}
        ids = list(by_id)
        result = await db.execute(_ITEMS_SQL, {"order_ids": ids})
        for row in result.fetchall():
            by_id[row.order_id].items.append(_row_to_item(row))
        result = await db.execute(_HISTORY_SQL, {"order_ids": ids})
        for row in result.fetchall():
            by_id[row.order_id].history.append(_row_to_history(row))

    async def _insert_items(
        self, db: AsyncSession, order_id: int, items: list[OrderItem]
    ) -> None:
        for position, item in enumerate(items):
            await execute_checked(
                db,
                _INSERT_ITEM_SQL,
                {
                    "order_id": order_id,
                    "position": position,
                    "product_id": item.product.id if item.product else None,
                    "quantity": item.quantity,
                    "comment": item.comment,
                },
            )

    async def _insert_new_history(
        self, db: AsyncSession, order_id: int, history: list[HistoryItem]
    ) -> None:
        for entry in history:
            if entry.id is not None:
                continue
            await execute_checked(
                db,
                _INSERT_HISTORY_SQL,
                {
                    "order_id": order_id,
                    "message": entry.message,
                    "new_state": entry.new_state.value if entry.new_state else None,
                    "timestamp": entry.timestamp,
                    "created_by_id": entry.created_by.id,
                },
            )
