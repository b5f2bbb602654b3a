"""
Order Admin Use Case

Status changes and payment marking for the admin order screens. Updates are
applied optimistically to the cached order list and rolled back to the exact
previous list when the API rejects them.
"""

import logging
from typing import Dict, List, Optional

from luxe_storefront.application.dtos.order_dtos import OrderStats
from luxe_storefront.domain.entities.order_entity import Order
from luxe_storefront.domain.repositories.order_repository import OrderRepository
from luxe_storefront.domain.value_objects.order_status import OrderStatus
from luxe_storefront.infrastructure.cache.query_cache import ORDERS_QUERY_KEY, QueryCache
from luxe_storefront.infrastructure.utilities.exceptions import ValidationError


class OrderAdminUseCase:
    """Use case for managing order status and payment from the back-office"""

    def __init__(
        self,
        order_repository: OrderRepository,
        query_cache: QueryCache,
        cache_ttl: Optional[int] = None,
    ):
        self._order_repository = order_repository
        self._cache = query_cache
        self._cache_ttl = cache_ttl
        # order id -> token of the update currently in flight for it
        self._in_flight: Dict[str, object] = {}
        self._logger = logging.getLogger(self.__class__.__name__)

    async def load_orders(self, force: bool = False) -> List[Order]:
        """Orders from the cache, refetched when missing, stale or forced"""
        if not force and self._cache.is_fresh(ORDERS_QUERY_KEY):
            return self.get_cached_orders()

        orders = await self._order_repository.get_all_orders()
        if self._in_flight:
            # Keep optimistic state until pending updates settle
            self._logger.info(
                "⏳ ORDERS REFETCH NOT APPLIED: %d updates in flight", len(self._in_flight)
            )
            return self.get_cached_orders()

        self._cache.set_query_data(ORDERS_QUERY_KEY, orders, self._cache_ttl)
        return list(orders)

    def get_cached_orders(self) -> List[Order]:
        return list(self._cache.get_query_data(ORDERS_QUERY_KEY) or [])

    def get_orders(self, status: Optional[OrderStatus] = None) -> List[Order]:
        """Cached orders, optionally filtered by status"""
        orders = self.get_cached_orders()
        if status is None:
            return orders
        try:
            status = OrderStatus.parse(status)
        except ValueError as e:
            raise ValidationError(str(e), "status") from e
        return [order for order in orders if order.status == status]

    def get_order_stats(self) -> OrderStats:
        return OrderStats.from_orders(self.get_cached_orders())

    def is_in_flight(self, order_id: str) -> bool:
        return order_id in self._in_flight

    async def _get_order(self, order_id: str) -> Order:
        for order in self.get_cached_orders():
            if order.id == order_id:
                return order

        # Not in the list yet; fetch it and keep it with the others
        order = await self._order_repository.get_order_by_id(order_id)
        self._cache.update_query_data(
            ORDERS_QUERY_KEY, lambda old: [*(old or []), order]
        )
        return order

    def _replace_cached(self, updated: Order) -> None:
        self._cache.update_query_data(
            ORDERS_QUERY_KEY,
            lambda old: [updated if order.id == updated.id else order for order in old or []],
        )

    async def update_status(self, order_id: str, new_status: OrderStatus) -> Optional[Order]:
        """Change an order's status

        Returns the updated order, or None when an update for the same order
        is still in flight and this request was ignored. Illegal transitions
        raise IllegalStatusTransitionError before any API call.
        """
        try:
            target = OrderStatus.parse(new_status)
        except ValueError as e:
            raise ValidationError(str(e), "status") from e

        if self.is_in_flight(order_id):
            self._logger.info("⏳ STATUS UPDATE IGNORED: Order %s already updating", order_id)
            return None

        token = object()
        self._in_flight[order_id] = token
        try:
            order = await self._get_order(order_id)
            updated = order.with_status(target)
            if updated is order:
                self._logger.info("💾 STATUS UNCHANGED: Order %s is %s", order_id, target.value)
                return order

            self._logger.info(
                "📝 STATUS UPDATE: Order %s %s → %s", order_id, order.status.value, target.value
            )
            return await self._apply_optimistically(
                order_id,
                token,
                updated,
                lambda: self._order_repository.update_order_status(order_id, target),
            )
        finally:
            if self._in_flight.get(order_id) is token:
                del self._in_flight[order_id]

    async def mark_paid(self, order_id: str) -> Optional[Order]:
        """Mark an order as paid; already-paid orders are left untouched

        Returns None when an update for the same order is still in flight.
        """
        if self.is_in_flight(order_id):
            self._logger.info("⏳ PAYMENT UPDATE IGNORED: Order %s already updating", order_id)
            return None

        token = object()
        self._in_flight[order_id] = token
        try:
            order = await self._get_order(order_id)
            if order.is_paid:
                self._logger.info("💳 ALREADY PAID: Order %s", order_id)
                return order

            self._logger.info("💳 MARK PAID: Order %s", order_id)
            return await self._apply_optimistically(
                order_id,
                token,
                order.as_paid(),
                lambda: self._order_repository.mark_order_paid(order_id),
            )
        finally:
            if self._in_flight.get(order_id) is token:
                del self._in_flight[order_id]

    async def _apply_optimistically(self, order_id, token, updated: Order, call) -> Optional[Order]:
        snapshot = self._cache.snapshot(ORDERS_QUERY_KEY)
        self._replace_cached(updated)

        try:
            await call()
        except Exception as e:
            if self._in_flight.get(order_id) is token:
                self._cache.restore(ORDERS_QUERY_KEY, snapshot)
            # The snapshot predates other settled updates; refetch on next read
            self._cache.invalidate(ORDERS_QUERY_KEY)
            self._logger.error(
                "💥 ORDER UPDATE FAILED, rolled back: Order %s: %s", order_id, e, exc_info=True
            )
            raise

        if self._in_flight.get(order_id) is not token:
            self._logger.warning("⌛ STALE ORDER UPDATE RESULT IGNORED: Order %s", order_id)
            return None

        # Keep the optimistic state; the next read refetches in the background
        self._cache.invalidate(ORDERS_QUERY_KEY)
        self._logger.info("✅ ORDER UPDATED: Order %s", order_id)
        return updated

    def reset(self) -> None:
        """Forget cached orders and pending updates (e.g. on logout)"""
        self._in_flight.clear()
        self._cache.remove(ORDERS_QUERY_KEY)
