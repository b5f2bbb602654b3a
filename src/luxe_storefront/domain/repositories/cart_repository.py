"""
Cart repository interface

Defines the contract for the server-side cart resource.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from luxe_storefront.domain.entities.cart_entities import RemoteCart, RemoteCartItem


class CartRepository(ABC):
    """Repository interface for server-side cart operations"""

    @abstractmethod
    async def fetch_cart(self, user_id: str) -> Optional[RemoteCart]:
        """Get the user's cart; None when the user has no cart yet"""

    @abstractmethod
    async def upsert_items(self, user_id: str, items: List[RemoteCartItem]) -> RemoteCart:
        """Merge items into the user's cart (server merges by variant)"""

    @abstractmethod
    async def delete_cart(self, cart_id: str) -> None:
        """Delete a cart by its id"""
