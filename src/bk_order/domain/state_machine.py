"""Order state transition table.

Re-setting the current state is always legal. DELIVERED and CANCELLED are
terminal.
"""

from src.bk_common.enums import OrderState

ALLOWED_TRANSITIONS: dict[OrderState, frozenset[OrderState]] = {
    OrderState.NEW: frozenset(
        {OrderState.CONFIRMED, OrderState.PROBLEM, OrderState.CANCELLED}
    ),
    OrderState.CONFIRMED: frozenset(
        {OrderState.READY, OrderState.PROBLEM, OrderState.CANCELLED}
    ),
    OrderState.READY: frozenset(
        {OrderState.DELIVERED, OrderState.PROBLEM, OrderState.CANCELLED}
    ),
    OrderState.PROBLEM: frozenset(
        {OrderState.NEW, OrderState.CONFIRMED, OrderState.READY, OrderState.CANCELLED}
    ),
    OrderState.DELIVERED: frozenset(),
    OrderState.CANCELLED: frozenset(),
}


def can_transition(current: OrderState, requested: OrderState) -> bool:
    return requested == current or requested in ALLOWED_TRANSITIONS[current]
