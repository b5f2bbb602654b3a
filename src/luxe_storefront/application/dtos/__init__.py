"""
Application DTOs
"""

from .cart_dtos import CartProduct, MigrationReport
from .order_dtos import OrderStats

__all__ = ["CartProduct", "MigrationReport", "OrderStats"]
