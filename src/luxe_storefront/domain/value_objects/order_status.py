"""
Order status value object

Closed set of order statuses and the table of legal status changes used by
the admin order screens.
"""

from enum import Enum
from typing import Dict, FrozenSet, Optional, Tuple


class OrderStatus(str, Enum):
    """Fulfilment status of an order (wire values match the API)"""

    PENDING = "Pending"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELED = "Canceled"

    @classmethod
    def parse(cls, value: "str | OrderStatus") -> "OrderStatus":
        """Parse a wire value, tolerating case differences"""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            normalized = value.strip().lower()
            for status in cls:
                if status.value.lower() == normalized:
                    return status
        raise ValueError(f"Unknown order status: {value!r}")

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES

    def __str__(self) -> str:
        return self.value


# Forward fulfilment chain
NEXT_IN_CHAIN: Dict[OrderStatus, Optional[OrderStatus]] = {
    OrderStatus.PENDING: OrderStatus.PROCESSING,
    OrderStatus.PROCESSING: OrderStatus.SHIPPED,
    OrderStatus.SHIPPED: OrderStatus.DELIVERED,
    OrderStatus.DELIVERED: None,
    OrderStatus.CANCELED: None,
}

TERMINAL_STATUSES: FrozenSet[OrderStatus] = frozenset(
    {OrderStatus.DELIVERED, OrderStatus.CANCELED}
)

# Legal targets per current status; the identity entry is a no-op save
ALLOWED_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset(
        {OrderStatus.PENDING, OrderStatus.PROCESSING, OrderStatus.CANCELED}
    ),
    OrderStatus.PROCESSING: frozenset(
        {OrderStatus.PROCESSING, OrderStatus.SHIPPED, OrderStatus.CANCELED}
    ),
    OrderStatus.SHIPPED: frozenset(
        {OrderStatus.SHIPPED, OrderStatus.DELIVERED, OrderStatus.CANCELED}
    ),
    OrderStatus.DELIVERED: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.CANCELED: frozenset({OrderStatus.CANCELED}),
}


def next_in_chain(current: OrderStatus) -> Optional[OrderStatus]:
    """Next forward status, or None for terminal statuses"""
    return NEXT_IN_CHAIN[current]


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    """Whether an order in `current` may be saved with status `target`"""
    return target in ALLOWED_TRANSITIONS[current]


def allowed_targets(current: OrderStatus) -> Tuple[OrderStatus, ...]:
    """Legal targets in display order (the order of the enum)"""
    return tuple(status for status in OrderStatus if can_transition(current, status))
