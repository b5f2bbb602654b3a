"""
Domain entities package
"""

from .cart_entities import LocalCartItem, RemoteCart, RemoteCartItem, variant_key
from .order_entity import Order, OrderItem

__all__ = [
    "LocalCartItem",
    "RemoteCart",
    "RemoteCartItem",
    "variant_key",
    "Order",
    "OrderItem",
]
