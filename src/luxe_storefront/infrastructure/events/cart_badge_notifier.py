"""
Cart badge notifications

In-process publish/subscribe channel that keeps every cart badge in sync
without re-fetching the cart. Three message kinds travel on it:

- delta(n): relative change, listeners accumulate onto their current value
- set(n): absolute count, listeners overwrite (idempotent)
- refreshRequested(): listeners re-read the count from the active cart

Delivery is synchronous to the listeners subscribed at publish time. There is
no buffering or replay, and listener order is not guaranteed.
"""

import asyncio
import logging
import threading
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Set, Union

logger = logging.getLogger(__name__)

EVENT_DELTA = "delta"
EVENT_SET = "set"
EVENT_REFRESH_REQUESTED = "refreshRequested"


@dataclass(frozen=True)
class CartCountDelta:
    delta: int

    name = EVENT_DELTA

    def payload(self) -> Dict[str, Any]:
        return {"delta": self.delta}


@dataclass(frozen=True)
class CartCountSet:
    count: int

    name = EVENT_SET

    def payload(self) -> Dict[str, Any]:
        return {"count": self.count}


@dataclass(frozen=True)
class CartRefreshRequested:
    name = EVENT_REFRESH_REQUESTED

    def payload(self) -> Dict[str, Any]:
        return {}


CartCountEvent = Union[CartCountDelta, CartCountSet, CartRefreshRequested]
CartEventListener = Callable[[CartCountEvent], None]
Unsubscribe = Callable[[], None]


class CartBadgeNotifier:
    """Synchronous broadcast channel for cart count events"""

    def __init__(self):
        self._listeners: Dict[int, CartEventListener] = {}
        self._next_token = 0
        self._lock = threading.Lock()
        self._logger = logging.getLogger(self.__class__.__name__)

    def subscribe(self, listener: CartEventListener) -> Unsubscribe:
        """Register a listener; the returned callable removes it again"""
        with self._lock:
            token = self._next_token
            self._next_token += 1
            self._listeners[token] = listener

        def unsubscribe() -> None:
            with self._lock:
                self._listeners.pop(token, None)

        return unsubscribe

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def publish(self, event: CartCountEvent) -> None:
        """Deliver an event to the current listeners"""
        with self._lock:
            listeners = list(self._listeners.values())

        self._logger.debug(
            "📣 CART EVENT: %s %s -> %d listeners", event.name, event.payload(), len(listeners)
        )
        for listener in listeners:
            try:
                listener(event)
            except Exception:  # pylint: disable=broad-except
                # Remaining listeners still receive the event
                self._logger.exception("💥 CART LISTENER FAILED on %s", event.name)

    def emit_delta(self, delta: int) -> None:
        self.publish(CartCountDelta(int(delta)))

    def emit_set(self, count: int) -> None:
        self.publish(CartCountSet(max(0, int(count))))

    def request_refresh(self) -> None:
        self.publish(CartRefreshRequested())


class CartBadge:
    """Badge count kept in sync with the notifier

    `count_provider` is awaited on refresh requests to re-read the count
    from the authoritative cart.
    """

    def __init__(
        self,
        notifier: CartBadgeNotifier,
        count_provider: Optional[Callable[[], Awaitable[int]]] = None,
        initial_count: int = 0,
    ):
        self._count = max(0, int(initial_count))
        self._count_provider = count_provider
        self._pending: Set[asyncio.Task] = set()
        self.needs_refresh = False
        self._unsubscribe: Optional[Unsubscribe] = notifier.subscribe(self.handle)

    @property
    def count(self) -> int:
        return self._count

    def handle(self, event: CartCountEvent) -> None:
        if isinstance(event, CartCountSet):
            self._count = max(0, event.count)
        elif isinstance(event, CartCountDelta):
            self._count = max(0, self._count + event.delta)
        elif isinstance(event, CartRefreshRequested):
            self._schedule_refresh()

    def _schedule_refresh(self) -> None:
        if self._count_provider is None:
            self.needs_refresh = True
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self.needs_refresh = True
            return
        task = loop.create_task(self._refresh_in_background())
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _refresh_in_background(self) -> None:
        try:
            await self.refresh()
        except Exception as e:  # pylint: disable=broad-except
            logger.error("💥 CART BADGE REFRESH FAILED: %s", e, exc_info=True)

    async def refresh(self) -> int:
        """Re-read the count from the provider and overwrite the badge"""
        if self._count_provider is None:
            return self._count
        self._count = max(0, int(await self._count_provider()))
        self.needs_refresh = False
        return self._count

    async def wait_for_refresh(self) -> None:
        """Wait for background refreshes started by refresh requests"""
        if self._pending:
            await asyncio.gather(*list(self._pending))

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None


_cart_notifier: Optional[CartBadgeNotifier] = None
_cart_notifier_lock = threading.Lock()


def get_cart_notifier() -> CartBadgeNotifier:
    """Get the process-wide notifier, ensuring thread safety."""
    global _cart_notifier
    if _cart_notifier is None:
        with _cart_notifier_lock:
            if _cart_notifier is None:
                _cart_notifier = CartBadgeNotifier()
    return _cart_notifier
