# pylint: disable=too-many-instance-attributes
"""
Order Entity - status and payment rules for admin order handling
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from luxe_storefront.domain.value_objects.entity_ref import (
    EntityRef,
    entity_ref_id,
    parse_entity_ref,
)
from luxe_storefront.domain.value_objects.order_status import (
    OrderStatus,
    allowed_targets,
    can_transition,
)
from luxe_storefront.infrastructure.utilities.exceptions import (
    IllegalStatusTransitionError,
)


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


@dataclass(frozen=True)
class OrderItem:
    """Ordered product line"""

    product: Optional[EntityRef]
    quantity: int
    price: float
    size: Optional[str] = None
    color: Optional[str] = None

    @property
    def product_id(self) -> Optional[str]:
        return entity_ref_id(self.product)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OrderItem":
        return cls(
            product=parse_entity_ref(data.get("product")),
            quantity=int(data.get("quantity", 0) or 0),
            price=float(data.get("price", 0) or 0),
            size=data.get("size") or None,
            color=data.get("color") or None,
        )


@dataclass(frozen=True)
class Order:
    """Order domain entity

    Status and payment are independent: an order may be Processing and
    unpaid (pay on delivery), or Pending and already paid.
    """

    id: str
    status: OrderStatus
    is_paid: bool
    payment_method: str
    total_price: float
    items: List[OrderItem] = field(default_factory=list)
    user: Optional[EntityRef] = None
    paid_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @property
    def user_id(self) -> Optional[str]:
        return entity_ref_id(self.user)

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    def can_change_status(self, target: OrderStatus) -> bool:
        return can_transition(self.status, target)

    def with_status(self, target: OrderStatus) -> "Order":
        """Copy of the order in the target status

        Raises IllegalStatusTransitionError when the change is not allowed.
        """
        target = OrderStatus.parse(target)
        if not can_transition(self.status, target):
            raise IllegalStatusTransitionError(
                self.status.value,
                target.value,
                ", ".join(
                    status.value
                    for status in allowed_targets(self.status)
                    if status != self.status
                ),
            )
        if target == self.status:
            return self
        return replace(self, status=target)

    def as_paid(self, paid_at: Optional[datetime] = None) -> "Order":
        """Copy of the order marked paid; already-paid orders are returned unchanged"""
        if self.is_paid:
            return self
        return replace(
            self, is_paid=True, paid_at=paid_at or datetime.now(timezone.utc)
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Order":
        """Create an order from the API representation"""
        order_id = data.get("_id") or data.get("id")
        if not order_id:
            raise ValueError("Order payload is missing its id")
        return cls(
            id=str(order_id),
            status=OrderStatus.parse(data.get("status", OrderStatus.PENDING.value)),
            is_paid=bool(data.get("isPaid", False)),
            payment_method=data.get("paymentMethod", "") or "",
            total_price=float(data.get("totalPrice", 0) or 0),
            items=[
                OrderItem.from_dict(item) for item in data.get("orderedItems") or []
            ],
            user=parse_entity_ref(data.get("user")),
            paid_at=_parse_timestamp(data.get("paidAt")),
            created_at=_parse_timestamp(data.get("createdAt")),
        )
