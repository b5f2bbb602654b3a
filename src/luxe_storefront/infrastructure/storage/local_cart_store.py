"""
Local (guest) cart store

Keeps the cart of an unauthenticated visitor in persistent client storage.
Every mutation is written through immediately and announces its quantity
change on the cart badge notifier.
"""

import json
import logging
from dataclasses import replace
from typing import List, Optional

from luxe_storefront.domain.entities.cart_entities import LocalCartItem, variant_key
from luxe_storefront.infrastructure.events.cart_badge_notifier import CartBadgeNotifier
from luxe_storefront.infrastructure.storage.key_value_storage import KeyValueStorage

DEFAULT_CART_KEY = "cart"


def _badge_units(quantity: int) -> int:
    """Units a line contributes to the badge count"""
    return max(0, quantity)


class LocalCartStore:
    """Guest cart persisted under a single storage key"""

    def __init__(
        self,
        storage: KeyValueStorage,
        notifier: CartBadgeNotifier,
        storage_key: str = DEFAULT_CART_KEY,
    ):
        self._storage = storage
        self._notifier = notifier
        self._storage_key = storage_key
        self._logger = logging.getLogger(self.__class__.__name__)

    @property
    def storage_key(self) -> str:
        return self._storage_key

    def list(self) -> List[LocalCartItem]:
        """All cart lines in insertion order"""
        raw = self._storage.get_item(self._storage_key)
        if not raw:
            return []
        try:
            data = json.loads(raw)
            return [LocalCartItem.from_dict(entry) for entry in data]
        except (ValueError, TypeError, KeyError) as e:
            self._logger.warning("⚠️ LOCAL CART UNREADABLE, treating as empty: %s", e)
            return []

    def _save(self, items: List[LocalCartItem]) -> None:
        self._storage.set_item(
            self._storage_key, json.dumps([item.to_dict() for item in items])
        )

    def add(self, item: LocalCartItem, quantity: int = 1) -> None:
        """Merge `quantity` units of the item's variant into the cart

        Quantity is not clamped here; callers pass a positive amount. The
        badge moves by the change in the line's non-negative quantity.
        """
        items = self.list()
        existing = next((line for line in items if line.key == item.key), None)

        if existing:
            previous = existing.quantity
            existing.quantity += quantity
            current = existing.quantity
        else:
            previous = 0
            current = quantity
            items.append(replace(item, quantity=quantity))

        self._save(items)
        self._logger.info(
            "🛒 LOCAL CART ADD: %s (size=%s, color=%s) x%s",
            item.product_id,
            item.size,
            item.color,
            quantity,
        )

        delta = _badge_units(current) - _badge_units(previous)
        if delta:
            self._notifier.emit_delta(delta)

    def set_quantity(
        self,
        product_id: str,
        quantity: int,
        size: Optional[str] = None,
        color: Optional[str] = None,
    ) -> int:
        """Set the absolute quantity of one line; returns the badge delta

        A quantity of zero or less deletes the line. Unknown lines are left
        alone and produce a zero delta.
        """
        key = variant_key(product_id, size, color)
        items = self.list()
        existing = next((line for line in items if line.key == key), None)
        if existing is None:
            self._logger.debug("LOCAL CART SET: no line for %s", key)
            return 0

        previous = existing.quantity
        if quantity <= 0:
            items = [line for line in items if line.key != key]
            changed = True
        else:
            existing.quantity = quantity
            changed = quantity != previous
        delta = _badge_units(quantity) - _badge_units(previous)

        if changed:
            self._save(items)
        self._logger.info("✏️ LOCAL CART SET: %s %s -> %s", key, previous, quantity)
        self._notifier.emit_delta(delta)
        return delta

    def remove(
        self, product_id: str, size: Optional[str] = None, color: Optional[str] = None
    ) -> int:
        """Delete a line unconditionally; returns the badge units removed"""
        key = variant_key(product_id, size, color)
        items = self.list()
        removed = sum(_badge_units(line.quantity) for line in items if line.key == key)
        self._save([line for line in items if line.key != key])
        self._logger.info("🗑️ LOCAL CART REMOVE: %s (%s units)", key, removed)

        if removed:
            self._notifier.emit_delta(-removed)
        return removed

    def clear(self, silent: bool = False) -> None:
        """Empty the cart

        Silent clears emit nothing; they are used after migration, when the
        server cart becomes authoritative and a badge `set` follows.
        """
        total_quantity = self.item_count()
        self._storage.remove_item(self._storage_key)
        self._logger.info("🧹 LOCAL CART CLEARED (silent=%s, %s units)", silent, total_quantity)

        if not silent and total_quantity:
            self._notifier.emit_delta(-total_quantity)

    def total(self) -> float:
        """Sum of unit price times quantity"""
        return sum(item.unit_price * item.quantity for item in self.list())

    def item_count(self) -> int:
        """Badge count: non-negative quantities only"""
        return sum(_badge_units(item.quantity) for item in self.list())

    def quantity_for_product(self, product_id: str) -> int:
        """Units of a product across all of its variants"""
        return sum(
            max(0, item.quantity)
            for item in self.list()
            if item.product_id == product_id and item.quantity > 0
        )

    def is_empty(self) -> bool:
        return not self.list()
