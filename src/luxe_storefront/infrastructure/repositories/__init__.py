"""
REST repository implementations
"""

from .http_auth_repository import HttpAuthRepository
from .http_cart_repository import HttpCartRepository
from .http_order_repository import HttpOrderRepository

__all__ = [
    "HttpAuthRepository",
    "HttpCartRepository",
    "HttpOrderRepository",
]
