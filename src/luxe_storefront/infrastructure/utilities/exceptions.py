"""
Custom exceptions for the storefront client
"""

from typing import Optional


class StorefrontError(Exception):
    """Base exception for the storefront client"""

    def __init__(self, message: str, user_message: str = None, error_code: str = None):
        super().__init__(message)
        self.user_message = user_message or "An error occurred. Please try again."
        self.error_code = error_code or "GENERAL_ERROR"


class ValidationError(StorefrontError):
    """Input validation errors"""

    def __init__(self, message: str, field: str = None):
        super().__init__(
            message, message, "VALIDATION_ERROR"  # Validation errors are user-friendly
        )
        self.field = field


class BusinessLogicError(StorefrontError):
    """Business rule violations"""

    def __init__(self, message: str, user_message: str = None, error_code: str = None):
        super().__init__(message, user_message or message, error_code or "BUSINESS_ERROR")


class ApiError(StorefrontError):
    """The REST API answered with a failure status"""

    def __init__(self, message: str, status_code: Optional[int] = None, operation: str = None):
        super().__init__(message, message, "API_ERROR")
        self.status_code = status_code
        self.operation = operation


class NetworkError(ApiError):
    """The REST API could not be reached"""

    def __init__(self, message: str, operation: str = None):
        super().__init__(message, None, operation)
        self.user_message = "Could not reach the store. Please check your connection."
        self.error_code = "NETWORK_ERROR"


class UnauthorizedError(ApiError):
    """Missing, rejected or expired session"""

    def __init__(self, message: str = "Not authenticated", status_code: Optional[int] = 401):
        super().__init__(message, status_code)
        self.user_message = "Your session has expired. Please sign in again."
        self.error_code = "UNAUTHORIZED"


class IllegalStatusTransitionError(BusinessLogicError):
    """Requested order status change is not allowed from the current status"""

    def __init__(self, current_status: str, target_status: str, allowed: str = ""):
        super().__init__(
            f"Invalid status transition: {current_status} → {target_status}. "
            f"Valid transitions from {current_status}: {allowed or 'none'}",
            f"An order that is {current_status} cannot be changed to {target_status}.",
            "ILLEGAL_TRANSITION",
        )
        self.current_status = current_status
        self.target_status = target_status


class OrderNotFoundError(BusinessLogicError):
    """Order not found"""

    def __init__(self, order_id: str):
        super().__init__(
            f"Order not found: {order_id}", f"Order #{order_id} not found.", "ORDER_NOT_FOUND"
        )
        self.order_id = order_id


class OutOfStockError(BusinessLogicError):
    """Cart already holds every available unit of a product"""

    def __init__(self, product_id: str, stock: int):
        super().__init__(
            f"Stock limit reached for product {product_id} (stock={stock})",
            "You already have the maximum available quantity "
            f"({stock}) of this product in your cart.",
            "OUT_OF_STOCK",
        )
        self.product_id = product_id
        self.stock = stock
