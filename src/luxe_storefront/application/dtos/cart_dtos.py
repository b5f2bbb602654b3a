"""
Cart DTOs

Data Transfer Objects for cart-related operations.
"""

from dataclasses import dataclass
from typing import Optional

from luxe_storefront.domain.entities.cart_entities import LocalCartItem, RemoteCartItem
from luxe_storefront.domain.value_objects.entity_ref import Reference


@dataclass
class CartProduct:
    """Product being added to the cart, as shown on the product page"""

    product_id: str
    name: str
    unit_price: float
    image_url: str = ""
    size: Optional[str] = None
    color: Optional[str] = None
    stock: Optional[int] = None

    def to_local_item(self, quantity: int) -> LocalCartItem:
        return LocalCartItem(
            product_id=self.product_id,
            name=self.name,
            unit_price=self.unit_price,
            quantity=quantity,
            image_url=self.image_url,
            size=self.size,
            color=self.color,
        )

    def to_remote_item(self, quantity: int) -> RemoteCartItem:
        return RemoteCartItem(
            product=Reference(self.product_id),
            quantity=quantity,
            size=self.size or None,
            color=self.color or None,
        )


@dataclass
class MigrationReport:
    """Outcome of moving the guest cart to the server"""

    completed: bool
    migrated_lines: int = 0
    pending_lines: int = 0
    error_message: Optional[str] = None
