"""
Client storage infrastructure
"""

from .key_value_storage import InMemoryStorage, JsonFileStorage, KeyValueStorage
from .local_cart_store import LocalCartStore

__all__ = [
    "InMemoryStorage",
    "JsonFileStorage",
    "KeyValueStorage",
    "LocalCartStore",
]
