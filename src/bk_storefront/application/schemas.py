"""Pydantic schemas for the storefront: the order form and the order views.

The form accepts incomplete input on purpose: ``validate_fields`` reports
every invalid field in form order so the client can focus the first one,
instead of the request being rejected wholesale by FastAPI.
"""

from datetime import date, time, timedelta

from pydantic import BaseModel, Field, PrivateAttr

from src.bk_common.cents import format_as_currency
from src.bk_common.datetime_utils import local_today, start_of_week
from src.bk_common.enums import OrderState
from src.bk_common.formatting import (
    date_time,
    full_date,
    hour,
    iso_time,
    month_and_day,
    short_day,
    storefront_date,
    weekday_full_name,
)
from src.bk_location.domain.models import PickupLocation
from src.bk_order.domain.models import HistoryItem, Order, OrderItem, is_valid_phone_number
from src.bk_product.domain.models import Product
from src.bk_storefront.header_generator import OrderCardHeader
from src.bk_user.domain.models import User

# ---------------------------------------------------------------------------
# Form
# ---------------------------------------------------------------------------


class CustomerForm(BaseModel):
    full_name: str = ""
    phone_number: str = ""
    details: str | None = None


class OrderItemForm(BaseModel):
    product_id: int | None = None
    quantity: int = 1
    comment: str | None = None


class OrderForm(BaseModel):
    state: OrderState | None = None
    due_date: date | None = None
    due_time: time | None = None
    pickup_location_id: int | None = None
    customer: CustomerForm = Field(default_factory=CustomerForm)
    paid: bool = False
    items: list[OrderItemForm] = Field(default_factory=list)

    _actor: User | None = PrivateAttr(default=None)
    _pickup_location: PickupLocation | None = PrivateAttr(default=None)
    _products: dict[int, Product] = PrivateAttr(default_factory=dict)

    def bind(
        self,
        actor: User,
        pickup_location: PickupLocation | None,
        products: dict[int, Product],
    ) -> None:
        """Attach the acting user and the entities the submitted ids refer to."""
        self._actor = actor
        self._pickup_location = pickup_location
        self._products = products

    def validate_fields(self) -> list[str]:
        """Names of the invalid fields, in the order they appear on the form."""
        invalid: list[str] = []
        if self.state is None:
            invalid.append("state")
        if self.due_date is None:
            invalid.append("due_date")
        if self.due_time is None:
            invalid.append("due_time")
        if self._pickup_location is None:
            invalid.append("pickup_location")
        if not self.customer.full_name.strip() or len(self.customer.full_name) > 255:
            invalid.append("customer.full_name")
        if not is_valid_phone_number(self.customer.phone_number):
            invalid.append("customer.phone_number")
        if self.customer.details is not None and len(self.customer.details) > 255:
            invalid.append("customer.details")
        if not self.items:
            invalid.append("items")
        for index, item in enumerate(self.items):
            if item.product_id is None or item.product_id not in self._products:
                invalid.append(f"items[{index}].product")
            if item.quantity < 1:
                invalid.append(f"items[{index}].quantity")
            if item.comment is not None and len(item.comment) > 255:
                invalid.append(f"items[{index}].comment")
        return invalid

    def write_to(self, entity: Order) -> None:
        # the state goes first: an illegal transition leaves the order untouched
        if self.state is not None and self.state != entity.state:
            if self._actor is None:
                raise RuntimeError("OrderForm.bind() must be called before write_to()")
            entity.change_state(self._actor, self.state)
        entity.due_date = self.due_date
        entity.due_time = self.due_time
        entity.pickup_location = self._pickup_location
        entity.customer.full_name = self.customer.full_name
        entity.customer.phone_number = self.customer.phone_number
        entity.customer.details = self.customer.details
        entity.paid = self.paid
        entity.items = [
            OrderItem(
                product=self._products.get(item.product_id) if item.product_id else None,
                quantity=item.quantity,
                comment=item.comment,
            )
            for item in self.items
        ]


class OrderUpdateForm(OrderForm):
    version: int = Field(..., ge=0)

    def write_to(self, entity: Order) -> None:
        super().write_to(entity)
        entity.version = self.version


class CommentForm(BaseModel):
    message: str = Field(..., min_length=1, max_length=255)


# ---------------------------------------------------------------------------
# Order card (list)
# ---------------------------------------------------------------------------


class HeaderOut(BaseModel):
    main: str
    secondary: str

    @classmethod
    def from_header(cls, header: OrderCardHeader | None) -> "HeaderOut | None":
        if header is None:
            return None
        return cls(main=header.main, secondary=header.secondary)


class CardItemOut(BaseModel):
    product_name: str
    quantity: int
    comment: str | None


class OrderCardOut(BaseModel):
    """One card of the storefront list.

    Orders due today or yesterday show place and time, orders later this
    week show place, weekday and time, anything else shows the date.
    """

    id: int
    header: HeaderOut | None
    state: str
    state_display: str
    full_name: str
    place: str | None
    time: str | None
    short_day: str | None
    secondary_time: str | None
    month: str | None
    full_day: str | None
    items: list[CardItemOut]

    @classmethod
    def from_domain(
        cls, order: Order, header: OrderCardHeader | None, today: date | None = None
    ) -> "OrderCardOut":
        today = today or local_today()
        due_date = order.due_date or today
        due_time = order.due_time or time(0, 0)
        recent = due_date in (today, today - timedelta(days=1))
        in_week = not recent and start_of_week(due_date) == start_of_week(today)
        place = order.pickup_location.name if order.pickup_location else None
        return cls(
            id=order.id,  # type: ignore[arg-type]
            header=HeaderOut.from_header(header),
            state=order.state.value,
            state_display=order.state.display_name,
            full_name=order.customer.full_name,
            place=place if recent or in_week else None,
            time=hour(due_time) if recent else None,
            short_day=short_day(due_date) if in_week else None,
            secondary_time=hour(due_time) if in_week else None,
            month=None if recent or in_week else month_and_day(due_date),
            full_day=None if recent or in_week else weekday_full_name(due_date),
            items=[
                CardItemOut(
                    product_name=item.product.name if item.product else "",
                    quantity=item.quantity,
                    comment=item.comment,
                )
                for item in order.items
            ],
        )


class OrderListResponse(BaseModel):
    items: list[OrderCardOut]
    total: int
    page: int
    size: int
    has_more: bool


# ---------------------------------------------------------------------------
# Order details
# ---------------------------------------------------------------------------


class ProductRefOut(BaseModel):
    id: int
    name: str
    price: int
    price_display: str


class OrderItemOut(BaseModel):
    product: ProductRefOut | None
    quantity: int
    comment: str | None
    total_price: int
    total_price_display: str

    @classmethod
    def from_domain(cls, item: OrderItem) -> "OrderItemOut":
        product = None
        if item.product is not None:
            product = ProductRefOut(
                id=item.product.id,  # type: ignore[arg-type]
                name=item.product.name,
                price=item.product.price,
                price_display=format_as_currency(item.product.price),
            )
        return cls(
            product=product,
            quantity=item.quantity,
            comment=item.comment,
            total_price=item.total_price,
            total_price_display=format_as_currency(item.total_price),
        )


class HistoryItemOut(BaseModel):
    message: str
    new_state: str | None
    timestamp: str
    timestamp_text: str
    created_by: str

    @classmethod
    def from_domain(cls, entry: HistoryItem) -> "HistoryItemOut":
        return cls(
            message=entry.message,
            new_state=entry.new_state.value if entry.new_state else None,
            timestamp=entry.timestamp.isoformat(),
            timestamp_text=date_time(entry.timestamp),
            created_by=entry.created_by.full_name,
        )


class LocationRefOut(BaseModel):
    id: int | None
    name: str


class CustomerOut(BaseModel):
    full_name: str
    phone_number: str
    details: str | None


class OrderDetailsOut(BaseModel):
    id: int | None
    version: int
    is_new: bool
    review: bool
    state: str
    state_display: str
    due_date: str | None
    due_date_text: str | None
    storefront_date: dict[str, str] | None
    due_time: str | None
    due_time_text: str | None
    pickup_location: LocationRefOut | None
    customer: CustomerOut
    paid: bool
    items: list[OrderItemOut]
    total_price: int
    total_price_display: str
    history: list[HistoryItemOut]

    @classmethod
    def from_domain(
        cls, order: Order, is_new: bool = False, review: bool = False
    ) -> "OrderDetailsOut":
        location = None
        if order.pickup_location is not None:
            location = LocationRefOut(
                id=order.pickup_location.id, name=order.pickup_location.name
            )
        return cls(
            id=order.id,
            version=order.version,
            is_new=is_new,
            review=review,
            state=order.state.value,
            state_display=order.state.display_name,
            due_date=order.due_date.isoformat() if order.due_date else None,
            due_date_text=full_date(order.due_date) if order.due_date else None,
            storefront_date=storefront_date(order.due_date),
            due_time=iso_time(order.due_time) if order.due_time else None,
            due_time_text=hour(order.due_time) if order.due_time else None,
            pickup_location=location,
            customer=CustomerOut(
                full_name=order.customer.full_name,
                phone_number=order.customer.phone_number,
                details=order.customer.details,
            ),
            paid=order.paid,
            items=[OrderItemOut.from_domain(item) for item in order.items],
            total_price=order.total_price,
            total_price_display=format_as_currency(order.total_price),
            history=[HistoryItemOut.from_domain(h) for h in order.history],
        )
