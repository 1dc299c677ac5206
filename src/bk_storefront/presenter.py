"""OrderPresenter — the storefront workflow around one order.

Open an order for viewing or editing, review the edited order (field
validation first, then the form is written into the order), save it, add
comments, or cancel. Persistence failures are classified by the wrapped
EntityPresenter and reported through the view.
"""

import logging
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_common.errors import EntityNotFoundError
from src.bk_crud.presenter import EntityPresenter
from src.bk_crud.service import Page
from src.bk_location.application.service import PickupLocationService
from src.bk_order.application.service import OrderService
from src.bk_order.domain.models import Order
from src.bk_product.application.service import ProductService
from src.bk_product.domain.models import Product
from src.bk_storefront.application.schemas import OrderForm
from src.bk_storefront.data_provider import OrderFilter, OrdersGridDataProvider
from src.bk_storefront.header_generator import OrderCardHeader, OrderCardHeaderGenerator
from src.bk_storefront.view import StorefrontView
from src.bk_user.domain.models import User

logger = logging.getLogger("bk.storefront")


class OrderPresenter:
    def __init__(
        self,
        order_service: OrderService,
        data_provider: OrdersGridDataProvider,
        entity_presenter: EntityPresenter[Order],
        current_user: User,
        db: AsyncSession,
        location_service: PickupLocationService | None = None,
        product_service: ProductService | None = None,
        today: date | None = None,
    ) -> None:
        self._order_service = order_service
        self._data_provider = data_provider
        self._entity_presenter = entity_presenter
        self._current_user = current_user
        self._db = db
        self._location_service = location_service or PickupLocationService()
        self._product_service = product_service or ProductService()
        self._today = today
        self._view: StorefrontView | None = None
        self._saved: Order | None = None

        self._headers = OrderCardHeaderGenerator()
        self._headers.reset_header_chain(False, today)
        data_provider.set_page_observer(self._headers.orders_read)

    def init(self, view: StorefrontView) -> None:
        self._entity_presenter.set_view(view)  # type: ignore[arg-type]
        self._view = view

    @property
    def view(self) -> StorefrontView:
        if self._view is None:
            raise RuntimeError("OrderPresenter has no view bound")
        return self._view

    @property
    def entity(self) -> Order | None:
        return self._entity_presenter.entity

    @property
    def is_new(self) -> bool:
        return self._entity_presenter.is_new

    @property
    def saved(self) -> Order | None:
        """The persisted order after a successful save."""
        return self._saved

    # ------------------------------------------------------------------
    # List
    # ------------------------------------------------------------------

    def get_header_by_order_id(self, order_id: int | None) -> OrderCardHeader | None:
        return self._headers.get(order_id)

    def filter_changed(self, text: str | None, include_past: bool) -> None:
        self._headers.reset_header_chain(include_past, self._today)
        self._data_provider.set_filter(OrderFilter(text or "", include_past))

    async def fetch_page(self, page: int, size: int) -> Page[Order]:
        return await self._data_provider.fetch(page, size)

    # ------------------------------------------------------------------
    # Single order
    # ------------------------------------------------------------------

    async def on_navigation(self, order_id: int, edit: bool) -> bool:
        return await self._entity_presenter.load_entity(
            order_id, lambda order: self._open(order, edit)
        )

    async def create_new_order(self) -> Order:
        order = self._entity_presenter.create_new()
        if order.pickup_location is None:
            order.pickup_location = await self._location_service.get_default(self._db)
        self._open(order, True)
        return order

    async def bind_form(self, form: OrderForm) -> None:
        """Resolve the location and product ids submitted with ``form``.

        Unknown ids stay unresolved and are reported by field validation.
        """
        location = None
        if form.pickup_location_id is not None:
            try:
                location = await self._location_service.load(self._db, form.pickup_location_id)
            except EntityNotFoundError:
                logger.debug("Unknown pickup location %s", form.pickup_location_id)
        products: dict[int, Product] = {}
        for product_id in {item.product_id for item in form.items if item.product_id}:
            try:
                products[product_id] = await self._product_service.load(self._db, product_id)
            except EntityNotFoundError:
                logger.debug("Unknown product %s", product_id)
        form.bind(self._current_user, location, products)

    def review(self) -> bool:
        """Validate the form and, when valid, show the order for confirmation."""
        fields = self.view.validate()
        if fields:
            self.view.focus(fields[0])
            return False
        if not self._entity_presenter.write_entity():
            return False
        self.view.set_dialog_elements_visibility(False)
        self.view.display(self._entity_presenter.entity, True)  # type: ignore[arg-type]
        return True

    async def save(self) -> bool:
        def _on_saved(order: Order) -> None:
            self._saved = order
            if self._entity_presenter.is_new:
                self.view.show_created_notification()
            else:
                self.view.show_updated_notification()
            self._close()

        return await self._entity_presenter.save(_on_saved)

    async def add_comment(self, comment: str) -> bool:
        async def _comment(order: Order) -> Order:
            return await self._order_service.add_comment(
                self._db, self._current_user, order, comment
            )

        if await self._entity_presenter.execute_update(_comment):
            # back to view mode on the updated order
            self._open(self._entity_presenter.entity, False)  # type: ignore[arg-type]
            return True
        return False

    async def cancel(self) -> None:
        async def _keep_open() -> None:
            self.view.set_opened(True)

        await self._entity_presenter.cancel(self._close, _keep_open)

    def close_silently(self) -> None:
        self._entity_presenter.close()
        self.view.set_opened(False)

    def edit(self) -> None:
        order = self._entity_presenter.entity
        if order is not None and order.id is not None:
            self.view.navigate_to_edit(order.id)

    def back(self) -> None:
        self.view.set_dialog_elements_visibility(True)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _open(self, order: Order, edit: bool) -> None:
        self.view.set_dialog_elements_visibility(edit)
        self.view.set_opened(True)
        if edit:
            self.view.read(order, self._entity_presenter.is_new)
        else:
            self.view.display(order, False)

    def _close(self) -> None:
        self.view.set_opened(False)
        self.view.navigate_to_main_view()
        self._entity_presenter.close()
