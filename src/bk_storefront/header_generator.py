"""Order card headers: groups the storefront list into date buckets.

The chain of buckets, in date order:

    Recent                       before this week's Monday      (include_past)
    This week before yesterday   [Monday, yesterday)             (include_past)
    Yesterday                    yesterday                       (include_past)
    Today                        today
    This week / This week        (today, next Monday)
        starting tomorrow
    Upcoming                     next Monday and later

Only the first order of each bucket gets a header. Orders must be fed in
ascending due-date order; pages may be fed one after another and the same
page may be fed twice without changing any assignment.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Protocol

from src.bk_common.datetime_utils import local_today, start_of_week
from src.bk_common.formatting import header_date, header_date_range


class DatedOrder(Protocol):
    @property
    def id(self) -> int | None: ...

    @property
    def due_date(self) -> date | None: ...


@dataclass(frozen=True)
class OrderCardHeader:
    main: str
    secondary: str


class _Bucket:
    def __init__(self, matcher: Callable[[date], bool], header: OrderCardHeader) -> None:
        self.matcher = matcher
        self.header = header
        self.selected: int | None = None

    def matches(self, day: date) -> bool:
        return self.matcher(day)


class OrderCardHeaderGenerator:
    def __init__(self) -> None:
        self._headers: dict[int, OrderCardHeader] = {}
        self._chain: list[_Bucket] = []
        self._cursor = 0

    def get(self, order_id: int | None) -> OrderCardHeader | None:
        if order_id is None:
            return None
        return self._headers.get(order_id)

    def reset_header_chain(self, include_past: bool, today: date | None = None) -> None:
        """Rebuild the bucket chain for ``today`` and forget every assignment."""
        self._chain = _create_chain(include_past, today or local_today())
        self._headers.clear()
        self._cursor = 0

    def orders_read(self, orders: Iterable[DatedOrder]) -> None:
        for order in orders:
            if order.id is None or order.due_date is None:
                continue
            index = self._bucket_index(order.due_date)
            if index is None or index < self._cursor:
                # past dates with include_past off, or a bucket already left behind
                continue
            bucket = self._chain[index]
            if bucket.selected is not None:
                continue
            bucket.selected = order.id
            self._headers[order.id] = bucket.header
            self._cursor = index

    @property
    def assignments(self) -> dict[int, OrderCardHeader]:
        return dict(self._headers)

    def _bucket_index(self, day: date) -> int | None:
        for index, bucket in enumerate(self._chain):
            if bucket.matches(day):
                return index
        return None


def _create_chain(include_past: bool, today: date) -> list[_Bucket]:
    week_start = start_of_week(today)
    next_week_start = week_start + timedelta(days=7)
    tomorrow = today + timedelta(days=1)
    chain: list[_Bucket] = []

    if include_past:
        yesterday = today - timedelta(days=1)
        chain.append(
            _Bucket(
                lambda d: d < week_start,
                OrderCardHeader("Recent", "Before this week"),
            )
        )
        if week_start < yesterday:
            chain.append(
                _Bucket(
                    lambda d: week_start <= d < yesterday,
                    OrderCardHeader(
                        "This week before yesterday", header_date_range(week_start, yesterday)
                    ),
                )
            )
        chain.append(
            _Bucket(lambda d: d == yesterday, OrderCardHeader("Yesterday", header_date(yesterday)))
        )

    chain.append(_Bucket(lambda d: d == today, OrderCardHeader("Today", header_date(today))))
    chain.append(
        _Bucket(
            lambda d: today < d < next_week_start,
            OrderCardHeader(
                "This week starting tomorrow" if include_past else "This week",
                # the label ends on Sunday, the last day the bucket covers
                header_date_range(tomorrow, next_week_start - timedelta(days=1)),
            ),
        )
    )
    chain.append(
        _Bucket(lambda d: d >= next_week_start, OrderCardHeader("Upcoming", "After this week"))
    )
    return chain
