"""
HTTP Order Repository

Concrete implementation of OrderRepository against the REST `/orders` resource.
"""

import logging
from typing import Any, Dict, List, Optional

from luxe_storefront.domain.entities.order_entity import Order
from luxe_storefront.domain.repositories.order_repository import OrderRepository
from luxe_storefront.domain.value_objects.order_status import OrderStatus
from luxe_storefront.infrastructure.http.api_client import ApiClient
from luxe_storefront.infrastructure.utilities.exceptions import (
    ApiError,
    OrderNotFoundError,
)


def _order_payload(body: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    body = body or {}
    return body.get("data") or body.get("order")


class HttpOrderRepository(OrderRepository):
    """REST implementation of order access for the admin screens"""

    def __init__(self, api_client: ApiClient):
        self._api = api_client
        self._logger = logging.getLogger(self.__class__.__name__)

    async def get_all_orders(self) -> List[Order]:
        body = await self._api.get(
            "/orders",
            operation="get_all_orders",
            default_error="Failed to fetch orders",
            allow_not_found=True,
        )
        orders = [Order.from_dict(raw) for raw in (body or {}).get("data") or []]
        self._logger.info("📋 ORDERS LOADED: %d", len(orders))
        return orders

    async def get_order_by_id(self, order_id: str) -> Order:
        body = await self._api.get(
            f"/orders/{order_id}",
            operation="get_order_by_id",
            default_error="Failed to fetch order",
            allow_not_found=True,
        )
        payload = _order_payload(body)
        if not payload:
            raise OrderNotFoundError(order_id)
        return Order.from_dict(payload)

    async def update_order_status(self, order_id: str, status: OrderStatus) -> Order:
        self._logger.info("📝 STATUS UPDATE: Order %s → %s", order_id, status.value)
        body = await self._api.put(
            f"/orders/{order_id}/status",
            json={"status": status.value},
            operation="update_order_status",
            default_error="Failed to update order status",
        )
        return self._require_order(body, "update_order_status")

    async def mark_order_paid(self, order_id: str) -> Order:
        self._logger.info("💳 MARK PAID: Order %s", order_id)
        body = await self._api.put(
            f"/orders/{order_id}/paid",
            operation="mark_order_paid",
            default_error="Failed to mark order as paid",
        )
        return self._require_order(body, "mark_order_paid")

    @staticmethod
    def _require_order(body: Optional[Dict[str, Any]], operation: str) -> Order:
        payload = _order_payload(body)
        if not payload:
            raise ApiError("Order response did not contain an order", operation=operation)
        return Order.from_dict(payload)
