# novara/domain/order_status.py
from enum import Enum

from novara.domain.errors import InvalidTransitionError


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


# forward chain plus cancellation before shipping
_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),
    OrderStatus.CANCELLED: set(),
}

REVENUE_STATUSES = frozenset(
    {
        OrderStatus.CONFIRMED,
        OrderStatus.PROCESSING,
        OrderStatus.SHIPPED,
        OrderStatus.DELIVERED,
    }
)


def parse_status(value: str) -> OrderStatus:
    try:
        return OrderStatus((value or "").strip().lower())
    except ValueError:
        raise ValueError(f"Unknown order status: {value}")


def can_transition(current: str, target: str) -> bool:
    return parse_status(target) in _TRANSITIONS[parse_status(current)]


def ensure_transition(current: str, target: str) -> OrderStatus:
    if not can_transition(current, target):
        raise InvalidTransitionError(current, target)
    return parse_status(target)


def counts_as_revenue(status: str | None) -> bool:
    try:
        return parse_status(status) in REVENUE_STATUSES
    except ValueError:
        return False


def order_status_of(order: dict) -> str:
    # backend uses orderStatus, older payloads plain status
    return order.get("orderStatus") or order.get("status") or OrderStatus.PENDING.value
