"""
Order repository interface

Defines the contract for order data access operations.
"""

from abc import ABC, abstractmethod
from typing import List

from luxe_storefront.domain.entities.order_entity import Order
from luxe_storefront.domain.value_objects.order_status import OrderStatus


class OrderRepository(ABC):
    """Repository interface for order operations"""

    @abstractmethod
    async def get_all_orders(self) -> List[Order]:
        """Get every order (admin)"""

    @abstractmethod
    async def get_order_by_id(self, order_id: str) -> Order:
        """Get order by ID"""

    @abstractmethod
    async def update_order_status(self, order_id: str, status: OrderStatus) -> Order:
        """Update order status"""

    @abstractmethod
    async def mark_order_paid(self, order_id: str) -> Order:
        """Mark an order as paid"""
