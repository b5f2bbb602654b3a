"""
Cache infrastructure module
"""

from .query_cache import ORDERS_QUERY_KEY, QueryCache

__all__ = [
    "ORDERS_QUERY_KEY",
    "QueryCache",
]
