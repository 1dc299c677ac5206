"""Order aggregate: Order, its items, its history, and the customer.

Pure dataclasses, no SQLAlchemy dependency. The history list is an audit
trail: entries are appended, never edited or removed.
"""

import re
from dataclasses import dataclass, field
from datetime import date, datetime, time

from src.bk_common.datetime_utils import local_today, utc_now
from src.bk_common.entity import AbstractEntity
from src.bk_common.enums import OrderState
from src.bk_common.errors import (
    InvalidStateTransitionError,
    RequiredFieldsMissingError,
    UserFriendlyDataError,
)
from src.bk_location.domain.models import PickupLocation
from src.bk_order.domain.state_machine import can_transition
from src.bk_product.domain.models import Product
from src.bk_user.domain.models import User

PHONE_NUMBER_PATTERN = re.compile(r"^(\+\d+)?([ -]?\d+){4,14}$")
PHONE_NUMBER_MAX_LENGTH = 20
DEFAULT_DUE_TIME = time(16, 0)
ORDER_PLACED_MESSAGE = "Order placed"


@dataclass(kw_only=True)
class Customer(AbstractEntity):
    full_name: str = ""
    phone_number: str = ""
    details: str | None = None

    def validate(self) -> None:
        if not self.full_name.strip() or not self.phone_number.strip():
            raise RequiredFieldsMissingError("Customer name and phone number are required")
        if not is_valid_phone_number(self.phone_number):
            raise UserFriendlyDataError(f"Invalid phone number: {self.phone_number}")


def is_valid_phone_number(value: str) -> bool:
    return (
        len(value) <= PHONE_NUMBER_MAX_LENGTH
        and PHONE_NUMBER_PATTERN.match(value) is not None
    )


@dataclass(kw_only=True)
class OrderItem(AbstractEntity):
    product: Product | None = None
    quantity: int = 1
    comment: str | None = None

    @property
    def total_price(self) -> int:
        """quantity × unit price in cents; 0 while no product is chosen."""
        if self.product is None:
            return 0
        return self.quantity * self.product.price


@dataclass(frozen=True, kw_only=True)
class HistoryItem:
    message: str
    timestamp: datetime
    created_by: User
    new_state: OrderState | None = None
    id: int | None = None


@dataclass(kw_only=True)
class Order(AbstractEntity):
    state: OrderState = OrderState.NEW
    due_date: date | None = None
    due_time: time | None = None
    pickup_location: PickupLocation | None = None
    customer: Customer = field(default_factory=Customer)
    paid: bool = False
    items: list[OrderItem] = field(default_factory=list)
    history: list[HistoryItem] = field(default_factory=list)

    @classmethod
    def create_new(cls, actor: User, today: date | None = None) -> "Order":
        order = cls(
            due_date=today or local_today(),
            due_time=DEFAULT_DUE_TIME,
        )
        order.add_history_item(actor, ORDER_PLACED_MESSAGE)
        return order

    @property
    def total_price(self) -> int:
        return sum(item.total_price for item in self.items)

    def change_state(
        self, actor: User, new_state: OrderState, now: datetime | None = None
    ) -> HistoryItem:
        """Move to ``new_state`` and record it in the history.

        Raises InvalidStateTransitionError, leaving state and history
        untouched, when the transition table does not allow the move.
        """
        if not can_transition(self.state, new_state):
            raise InvalidStateTransitionError(self.state.value, new_state.value)
        self.state = new_state
        return self._append(actor, f"Order {new_state.display_name}", new_state, now)

    def add_history_item(
        self, actor: User, message: str, now: datetime | None = None
    ) -> HistoryItem:
        """Record a comment; it carries the state the order is in."""
        return self._append(actor, message, self.state, now)

    def _append(
        self,
        actor: User,
        message: str,
        new_state: OrderState | None,
        now: datetime | None,
    ) -> HistoryItem:
        timestamp = now or utc_now()
        if self.history and timestamp < self.history[-1].timestamp:
            # never earlier than the entry before it
            timestamp = self.history[-1].timestamp
        item = HistoryItem(
            message=message, timestamp=timestamp, created_by=actor, new_state=new_state
        )
        self.history.append(item)
        return item

    def validate(self) -> None:
        missing = []
        if self.due_date is None:
            missing.append("due date")
        if self.due_time is None:
            missing.append("due time")
        if self.pickup_location is None:
            missing.append("pickup location")
        if not self.items:
            missing.append("items")
        if any(item.product is None for item in self.items):
            missing.append("product")
        if missing:
            raise RequiredFieldsMissingError(f"Missing order fields: {', '.join(missing)}")
        if any(item.quantity < 1 for item in self.items):
            raise UserFriendlyDataError("Quantity must be at least 1")
        self.customer.validate()
