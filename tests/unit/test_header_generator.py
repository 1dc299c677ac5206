"""Unit tests for OrderCardHeaderGenerator."""

from dataclasses import dataclass
from datetime import date

from src.bk_storefront.header_generator import OrderCardHeader, OrderCardHeaderGenerator

WEDNESDAY = date(2024, 6, 5)
MONDAY = date(2024, 6, 3)


@dataclass(frozen=True)
class _Dated:
    id: int | None
    due_date: date | None


def _generator(include_past: bool, today: date = WEDNESDAY) -> OrderCardHeaderGenerator:
    gen = OrderCardHeaderGenerator()
    gen.reset_header_chain(include_past, today)
    return gen


class TestCurrentOrders:
    def test_first_order_of_each_bucket_gets_header(self) -> None:
        gen = _generator(include_past=False)
        gen.orders_read([
            _Dated(1, date(2024, 6, 5)),
            _Dated(2, date(2024, 6, 5)),
            _Dated(3, date(2024, 6, 7)),
            _Dated(4, date(2024, 6, 8)),
            _Dated(5, date(2024, 6, 12)),
        ])
        assert gen.get(1) == OrderCardHeader("Today", "Wed, Jun 5")
        assert gen.get(2) is None
        assert gen.get(3) == OrderCardHeader("This week", "Thu, Jun 6 - Sun, Jun 9")
        assert gen.get(4) is None
        assert gen.get(5) == OrderCardHeader("Upcoming", "After this week")

    def test_past_orders_get_no_header(self) -> None:
        gen = _generator(include_past=False)
        gen.orders_read([_Dated(1, date(2024, 6, 1)), _Dated(2, date(2024, 6, 5))])
        assert gen.get(1) is None
        assert gen.get(2) is not None

    def test_unknown_id(self) -> None:
        gen = _generator(include_past=False)
        assert gen.get(99) is None
        assert gen.get(None) is None

    def test_unsaved_orders_are_skipped(self) -> None:
        gen = _generator(include_past=False)
        gen.orders_read([_Dated(None, date(2024, 6, 5)), _Dated(2, date(2024, 6, 5))])
        assert gen.get(2) == OrderCardHeader("Today", "Wed, Jun 5")


class TestIncludePast:
    def test_all_buckets(self) -> None:
        gen = _generator(include_past=True)
        gen.orders_read([
            _Dated(1, date(2024, 5, 20)),
            _Dated(2, date(2024, 6, 3)),
            _Dated(3, date(2024, 6, 4)),
            _Dated(4, date(2024, 6, 5)),
            _Dated(5, date(2024, 6, 6)),
            _Dated(6, date(2024, 6, 20)),
        ])
        assert gen.get(1) == OrderCardHeader("Recent", "Before this week")
        assert gen.get(2) == OrderCardHeader(
            "This week before yesterday", "Mon, Jun 3 - Tue, Jun 4"
        )
        assert gen.get(3) == OrderCardHeader("Yesterday", "Tue, Jun 4")
        assert gen.get(4) == OrderCardHeader("Today", "Wed, Jun 5")
        assert gen.get(5) == OrderCardHeader(
            "This week starting tomorrow", "Thu, Jun 6 - Sun, Jun 9"
        )
        assert gen.get(6) == OrderCardHeader("Upcoming", "After this week")

    def test_monday_yesterday_is_recent(self) -> None:
        gen = _generator(include_past=True, today=MONDAY)
        gen.orders_read([_Dated(1, date(2024, 6, 2)), _Dated(2, date(2024, 6, 3))])
        # Sunday is before the week start, so Recent claims it ahead of Yesterday
        assert gen.get(1) == OrderCardHeader("Recent", "Before this week")
        assert gen.get(2) == OrderCardHeader("Today", "Mon, Jun 3")


class TestPaging:
    def test_next_page_continues_bucket(self) -> None:
        gen = _generator(include_past=False)
        first = [_Dated(1, date(2024, 6, 5)), _Dated(2, date(2024, 6, 5))]
        gen.orders_read(first)
        # the next page arrives with the last order of the previous one in front
        gen.orders_read([_Dated(2, date(2024, 6, 5)), _Dated(3, date(2024, 6, 5)),
                         _Dated(4, date(2024, 6, 13))])
        assert gen.get(1) is not None
        assert gen.get(2) is None
        assert gen.get(3) is None
        assert gen.get(4) == OrderCardHeader("Upcoming", "After this week")

    def test_same_page_twice_changes_nothing(self) -> None:
        gen = _generator(include_past=False)
        page = [_Dated(1, date(2024, 6, 5)), _Dated(2, date(2024, 6, 7))]
        gen.orders_read(page)
        before = gen.assignments
        gen.orders_read(page)
        assert gen.assignments == before

    def test_bucket_left_behind_is_not_revisited(self) -> None:
        gen = _generator(include_past=False)
        gen.orders_read([_Dated(1, date(2024, 6, 12)), _Dated(2, date(2024, 6, 5))])
        assert gen.get(1) is not None
        assert gen.get(2) is None

    def test_reset_forgets_assignments(self) -> None:
        gen = _generator(include_past=False)
        gen.orders_read([_Dated(1, date(2024, 6, 5))])
        gen.reset_header_chain(False, WEDNESDAY)
        assert gen.assignments == {}
        gen.orders_read([_Dated(7, date(2024, 6, 5))])
        assert gen.get(7) == OrderCardHeader("Today", "Wed, Jun 5")
