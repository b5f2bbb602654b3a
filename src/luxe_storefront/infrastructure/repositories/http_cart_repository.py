"""
HTTP Cart Repository

Concrete implementation of CartRepository against the REST `/carts` resource.
"""

import logging
from typing import List, Optional

from luxe_storefront.domain.entities.cart_entities import RemoteCart, RemoteCartItem
from luxe_storefront.domain.repositories.cart_repository import CartRepository
from luxe_storefront.infrastructure.http.api_client import ApiClient
from luxe_storefront.infrastructure.utilities.exceptions import ApiError, ValidationError


class HttpCartRepository(CartRepository):
    """REST implementation of the server-side cart"""

    def __init__(self, api_client: ApiClient):
        self._api = api_client
        self._logger = logging.getLogger(self.__class__.__name__)

    async def fetch_cart(self, user_id: str) -> Optional[RemoteCart]:
        """Get the user's cart; a missing cart is an empty state, not an error"""
        self._logger.info("🔍 GET CART: Fetching cart for user %s", user_id)
        body = await self._api.get(
            f"/carts/{user_id}",
            operation="fetch_cart",
            default_error="Failed to fetch cart",
            allow_not_found=True,
        )
        if not body:
            self._logger.info("📭 NO CART: User %s has no cart", user_id)
            return None

        data = body.get("data")
        if isinstance(data, list):
            data = data[0] if data else None
        if not data:
            self._logger.info("📭 NO CART: User %s has no cart", user_id)
            return None

        cart = RemoteCart.from_dict(data)
        self._logger.info(
            "📦 CART FOUND: User %s has %d items", user_id, len(cart.items)
        )
        return cart

    async def upsert_items(self, user_id: str, items: List[RemoteCartItem]) -> RemoteCart:
        """Merge items into the user's cart"""
        if not items:
            raise ValidationError("At least one cart item is required", "items")
        for item in items:
            if not item.product_id:
                raise ValidationError("Cart item must reference a product", "product")
            if item.quantity == 0:
                raise ValidationError("Quantity 0 must not be sent to the cart", "quantity")

        self._logger.info(
            "➕ UPSERT CART: user %s, %s",
            user_id,
            [(i.product_id, i.quantity, i.size, i.color) for i in items],
        )
        body = await self._api.post(
            "/carts",
            json={
                "user": user_id,
                "items": [
                    {
                        "product": item.product_id,
                        "quantity": item.quantity,
                        "size": item.size,
                        "color": item.color,
                    }
                    for item in items
                ],
            },
            operation="upsert_cart_items",
            default_error="Failed to add item to cart",
        )
        data = (body or {}).get("data")
        if isinstance(data, list):
            data = data[0] if data else None
        if not isinstance(data, dict):
            raise ApiError("Cart response did not contain a cart", operation="upsert_cart_items")
        return RemoteCart.from_dict(data)

    async def delete_cart(self, cart_id: str) -> None:
        self._logger.info("🗑️ DELETE CART: %s", cart_id)
        await self._api.delete(
            f"/carts/{cart_id}",
            operation="delete_cart",
            default_error="Failed to clear cart",
        )
