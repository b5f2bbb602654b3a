"""
Order DTOs

Data Transfer Objects for order administration.
"""

from dataclasses import dataclass
from typing import Iterable

from luxe_storefront.domain.entities.order_entity import Order
from luxe_storefront.domain.value_objects.order_status import OrderStatus


@dataclass
class OrderStats:
    """Dashboard counters for the admin order screen"""

    total_orders: int = 0
    pending: int = 0
    processing: int = 0
    shipped: int = 0
    delivered: int = 0
    canceled: int = 0
    paid_orders: int = 0
    total_revenue: float = 0.0
    average_order_value: float = 0.0

    @classmethod
    def from_orders(cls, orders: Iterable[Order]) -> "OrderStats":
        """Revenue counts paid orders only"""
        stats = cls()
        by_status = {
            OrderStatus.PENDING: "pending",
            OrderStatus.PROCESSING: "processing",
            OrderStatus.SHIPPED: "shipped",
            OrderStatus.DELIVERED: "delivered",
            OrderStatus.CANCELED: "canceled",
        }
        for order in orders:
            stats.total_orders += 1
            field_name = by_status[order.status]
            setattr(stats, field_name, getattr(stats, field_name) + 1)
            if order.is_paid:
                stats.paid_orders += 1
                stats.total_revenue += order.total_price

        if stats.paid_orders:
            stats.average_order_value = round(stats.total_revenue / stats.paid_orders, 2)
        stats.total_revenue = round(stats.total_revenue, 2)
        return stats
