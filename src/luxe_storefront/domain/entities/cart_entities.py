"""
Cart entities

Guest cart lines kept in local storage and the server-side cart owned by an
authenticated user.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from luxe_storefront.domain.value_objects.entity_ref import (
    EntityRef,
    entity_ref_id,
    entity_ref_to_wire,
    parse_entity_ref,
)

VariantKey = Tuple[str, Optional[str], Optional[str]]


def variant_key(product_id: str, size: Optional[str] = None, color: Optional[str] = None) -> VariantKey:
    """Identity of a cart line: product plus its size/color variant"""
    return (product_id, size or None, color or None)


@dataclass
class LocalCartItem:
    """Guest cart line"""

    product_id: str
    name: str
    unit_price: float
    quantity: int
    image_url: str = ""
    size: Optional[str] = None
    color: Optional[str] = None

    def __post_init__(self):
        if not self.product_id:
            raise ValueError("Cart item must reference a product")
        # Empty strings from forms mean "no variant"
        self.size = self.size or None
        self.color = self.color or None

    @property
    def key(self) -> VariantKey:
        return variant_key(self.product_id, self.size, self.color)

    @property
    def line_total(self) -> float:
        return self.unit_price * self.quantity

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LocalCartItem":
        """Create a line from its stored JSON form"""
        return cls(
            product_id=str(data["id"]),
            name=data.get("name", ""),
            unit_price=float(data.get("price", 0) or 0),
            quantity=int(data.get("quantity", 0) or 0),
            image_url=data.get("image", "") or "",
            size=data.get("size"),
            color=data.get("color"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.product_id,
            "name": self.name,
            "price": self.unit_price,
            "quantity": self.quantity,
            "image": self.image_url,
            "size": self.size,
            "color": self.color,
        }


@dataclass
class RemoteCartItem:
    """Line of a server-side cart"""

    product: Optional[EntityRef]
    quantity: int
    size: Optional[str] = None
    color: Optional[str] = None

    @property
    def product_id(self) -> Optional[str]:
        return entity_ref_id(self.product)

    @property
    def is_resolved(self) -> bool:
        """False when the product was deleted or could not be populated"""
        return self.product is not None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RemoteCartItem":
        return cls(
            product=parse_entity_ref(data.get("product")),
            quantity=int(data.get("quantity", 0) or 0),
            size=data.get("size") or None,
            color=data.get("color") or None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "product": entity_ref_to_wire(self.product),
            "quantity": self.quantity,
            "size": self.size,
            "color": self.color,
        }


@dataclass
class RemoteCart:
    """Server-side cart; the server owns total_price"""

    id: Optional[str]
    owner_user_id: Optional[str]
    items: List[RemoteCartItem] = field(default_factory=list)
    total_price: float = 0.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RemoteCart":
        """Create a cart from the API representation"""
        cart_id = data.get("id") or data.get("_id")
        return cls(
            id=str(cart_id) if cart_id else None,
            owner_user_id=entity_ref_id(parse_entity_ref(data.get("user"))),
            items=[RemoteCartItem.from_dict(item) for item in data.get("items") or []],
            total_price=float(data.get("totalPrice", 0) or 0),
        )
