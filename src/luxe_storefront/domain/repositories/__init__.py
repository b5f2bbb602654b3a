"""
Domain repository interfaces

Contains abstract repository interfaces that define contracts for data access.
These follow the Repository pattern and Dependency Inversion principle.
"""

from .auth_repository import AuthRepository, LoginResult
from .cart_repository import CartRepository
from .order_repository import OrderRepository

__all__ = [
    'AuthRepository',
    'CartRepository',
    'LoginResult',
    'OrderRepository',
]
