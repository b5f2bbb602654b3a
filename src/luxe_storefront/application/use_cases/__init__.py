"""
Use Cases

Contains the business use cases of the application.
Each use case represents a single business operation.
"""

from .authentication_use_case import AuthenticationUseCase, LoginResponse
from .cart_reconciliation_use_case import CartReconciliationUseCase
from .order_admin_use_case import OrderAdminUseCase

__all__ = [
    'AuthenticationUseCase',
    'CartReconciliationUseCase',
    'LoginResponse',
    'OrderAdminUseCase',
]
