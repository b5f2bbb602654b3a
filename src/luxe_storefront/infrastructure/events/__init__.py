"""
In-process event infrastructure
"""

from .cart_badge_notifier import (
    EVENT_DELTA,
    EVENT_REFRESH_REQUESTED,
    EVENT_SET,
    CartBadge,
    CartBadgeNotifier,
    CartCountDelta,
    CartCountEvent,
    CartCountSet,
    CartRefreshRequested,
    get_cart_notifier,
)

__all__ = [
    "EVENT_DELTA",
    "EVENT_REFRESH_REQUESTED",
    "EVENT_SET",
    "CartBadge",
    "CartBadgeNotifier",
    "CartCountDelta",
    "CartCountEvent",
    "CartCountSet",
    "CartRefreshRequested",
    "get_cart_notifier",
]
