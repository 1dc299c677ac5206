"""Paged order source for the storefront list."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_common.datetime_utils import local_today
from src.bk_crud.service import Page
from src.bk_order.application.service import OrderService
from src.bk_order.domain.models import Order

PageObserver = Callable[[list[Order]], None]


@dataclass(frozen=True)
class OrderFilter:
    text: str = ""
    include_past: bool = False

    @classmethod
    def empty(cls) -> "OrderFilter":
        return cls()


class OrdersGridDataProvider:
    """Orders sorted by due date, due time and id.

    Without ``include_past`` only orders due today or later are listed. Every
    fetched page is handed to the page observer; for pages after the first
    the observer also receives the last order of the previous page in front,
    so bucket headers continue correctly across page boundaries.
    """

    def __init__(
        self,
        order_service: OrderService,
        db: AsyncSession,
        today: date | None = None,
    ) -> None:
        self._order_service = order_service
        self._db = db
        self._today = today
        self._filter = OrderFilter.empty()
        self._page_observer: PageObserver | None = None

    @property
    def filter(self) -> OrderFilter:
        return self._filter

    def set_filter(self, order_filter: OrderFilter) -> None:
        self._filter = order_filter

    def set_page_observer(self, observer: PageObserver | None) -> None:
        self._page_observer = observer

    def filter_date(self) -> date | None:
        """Orders due strictly after this date are listed; None lists all."""
        if self._filter.include_past:
            return None
        return (self._today or local_today()) - timedelta(days=1)

    async def fetch(self, page: int, size: int) -> Page[Order]:
        after = self.filter_date()
        text = self._filter.text or None
        if page == 0:
            result = await self._order_service.find_any_matching_after_due_date(
                self._db, text, after, page, size
            )
            observed = result.items
        else:
            # one extra row in front: the last order of the previous page
            observed = await self._order_service.find_slice_after_due_date(
                self._db, text, after, page * size - 1, size + 1
            )
            total = await self._order_service.count_any_matching_after_due_date(
                self._db, text, after
            )
            result = Page(items=observed[1:], total=total, page=page, size=size)
        if self._page_observer is not None:
            self._page_observer(observed)
        return result

    async def size(self) -> int:
        return await self._order_service.count_any_matching_after_due_date(
            self._db, self._filter.text or None, self.filter_date()
        )
