"""Storefront view contract and its per-request implementation."""

from typing import Protocol

from src.bk_crud.view import ConfirmDialog, RequestView
from src.bk_order.domain.models import Order
from src.bk_storefront.application.schemas import OrderForm

ORDER_CREATED_MESSAGE = "Order was created"
ORDER_UPDATED_MESSAGE = "Order was updated"


class StorefrontView(Protocol):
    confirm_dialog: ConfirmDialog

    def show_error(self, message: str, persistent: bool) -> None: ...

    def write(self, entity: Order) -> None: ...

    def is_dirty(self) -> bool: ...

    def clear(self) -> None: ...

    def validate(self) -> list[str]: ...

    def focus(self, field: str) -> None: ...

    def set_opened(self, opened: bool) -> None: ...

    def set_dialog_elements_visibility(self, editing: bool) -> None: ...

    def read(self, order: Order, is_new: bool) -> None: ...

    def display(self, order: Order, review: bool) -> None: ...

    def show_created_notification(self) -> None: ...

    def show_updated_notification(self) -> None: ...

    def navigate_to_main_view(self) -> None: ...

    def navigate_to_edit(self, order_id: int) -> None: ...


class RequestStorefrontView(RequestView[Order]):
    """Records what the presenter asked the screen to do during one request."""

    def __init__(self, form: OrderForm | None = None) -> None:
        super().__init__(form)
        self.order_form = form
        self.opened = False
        self.editing = False
        self.focused: str | None = None
        self.shown: Order | None = None
        self.shown_is_new = False
        self.review = False
        self.info: list[str] = []
        self.location: str | None = None

    def validate(self) -> list[str]:
        if self.order_form is None:
            return []
        return self.order_form.validate_fields()

    def focus(self, field: str) -> None:
        self.focused = field

    def set_opened(self, opened: bool) -> None:
        self.opened = opened

    def set_dialog_elements_visibility(self, editing: bool) -> None:
        self.editing = editing

    def read(self, order: Order, is_new: bool) -> None:
        self.shown = order
        self.shown_is_new = is_new
        self.review = False

    def display(self, order: Order, review: bool) -> None:
        self.shown = order
        self.review = review

    def show_created_notification(self) -> None:
        self.info.append(ORDER_CREATED_MESSAGE)

    def show_updated_notification(self) -> None:
        self.info.append(ORDER_UPDATED_MESSAGE)

    def navigate_to_main_view(self) -> None:
        self.location = "storefront"

    def navigate_to_edit(self, order_id: int) -> None:
        self.location = f"storefront/{order_id}/edit"
