"""
Cart reconciliation use case

Single entry point for cart operations whatever the authentication state:
guests use the local cart, authenticated users the server cart. At login the
guest cart is migrated into the server cart.
"""

import logging
from typing import List, Optional

from luxe_storefront.application.dtos.cart_dtos import CartProduct, MigrationReport
from luxe_storefront.domain.entities.cart_entities import RemoteCart, RemoteCartItem
from luxe_storefront.domain.repositories.auth_repository import AuthRepository
from luxe_storefront.domain.repositories.cart_repository import CartRepository
from luxe_storefront.domain.value_objects.entity_ref import Reference
from luxe_storefront.infrastructure.events.cart_badge_notifier import CartBadgeNotifier
from luxe_storefront.infrastructure.session.session_store import SessionStore
from luxe_storefront.infrastructure.storage.local_cart_store import LocalCartStore
from luxe_storefront.infrastructure.utilities.exceptions import (
    OutOfStockError,
    StorefrontError,
    ValidationError,
)


def _count_remote_items(items: List[RemoteCartItem], product_id: Optional[str] = None) -> int:
    """Sum of positive quantities over resolved items, optionally for one product"""
    return sum(
        max(0, item.quantity)
        for item in items
        if item.is_resolved
        and item.quantity > 0
        and (product_id is None or item.product_id == product_id)
    )


class CartReconciliationUseCase:
    """
    Use case for cart operations across guest and authenticated sessions

    Handles:
    1. Adding items (stock-aware) to whichever cart is authoritative
    2. Badge counts and per-product totals
    3. Migrating the guest cart to the server at login
    4. Clearing the active cart
    """

    def __init__(
        self,
        local_store: LocalCartStore,
        cart_repository: CartRepository,
        session: SessionStore,
        auth_repository: AuthRepository,
        notifier: CartBadgeNotifier,
    ):
        self._local_store = local_store
        self._cart_repository = cart_repository
        self._session = session
        self._auth_repository = auth_repository
        self._notifier = notifier
        self._logger = logging.getLogger(self.__class__.__name__)

    @property
    def local_store(self) -> LocalCartStore:
        return self._local_store

    def is_authenticated(self) -> bool:
        return self._session.is_authenticated()

    async def _user_id(self) -> str:
        return await self._session.resolve_user_id(self._auth_repository)

    async def fetch_remote_cart(self) -> Optional[RemoteCart]:
        """Server cart of the authenticated user (None when there is none)"""
        return await self._cart_repository.fetch_cart(await self._user_id())

    async def add_to_cart(self, product: CartProduct, quantity: int = 1) -> int:
        """Add a product to the active cart; returns the quantity actually added

        When the product's stock is known the addition is capped at what is
        left once every variant already in the cart is counted, and refused
        with OutOfStockError when nothing is left.
        """
        self._logger.info(
            "🛒 ADD TO CART: product %s x%s (size=%s, color=%s, authenticated=%s)",
            product.product_id,
            quantity,
            product.size,
            product.color,
            self.is_authenticated(),
        )

        if quantity < 0:
            raise ValidationError("Quantity must not be negative", "quantity")

        if quantity == 0:
            # Zero is never sent to the server; re-read the cart instead
            if self.is_authenticated():
                await self.fetch_remote_cart()
            self._logger.info("  -> Skipping zero quantity request")
            return 0

        if product.stock is not None:
            in_cart = await self.get_total_quantity_for_product(product.product_id)
            remaining = max(0, product.stock - in_cart)
            if remaining <= 0:
                self._logger.info(
                    "🚫 STOCK LIMIT: product %s has %s in cart, stock %s",
                    product.product_id,
                    in_cart,
                    product.stock,
                )
                raise OutOfStockError(product.product_id, product.stock)
            quantity = min(quantity, remaining)

        if self.is_authenticated():
            user_id = await self._user_id()
            await self._cart_repository.upsert_items(
                user_id, [product.to_remote_item(quantity)]
            )
            self._notifier.request_refresh()
        else:
            self._local_store.add(product.to_local_item(quantity), quantity)

        return quantity

    async def get_item_count(self) -> int:
        """Badge count of the active cart

        Remote items whose product did not resolve are not counted.
        """
        if self.is_authenticated():
            cart = await self.fetch_remote_cart()
            return _count_remote_items(cart.items) if cart else 0
        return self._local_store.item_count()

    async def get_total_quantity_for_product(self, product_id: str) -> int:
        """Units of one product across all of its variants in the active cart"""
        if self.is_authenticated():
            cart = await self.fetch_remote_cart()
            if not cart or not cart.items:
                return 0
            return _count_remote_items(cart.items, product_id)
        return self._local_store.quantity_for_product(product_id)

    def get_local_cart_total(self) -> float:
        return self._local_store.total()

    async def clear_cart(self) -> None:
        """Empty the active cart"""
        if not self.is_authenticated():
            self._local_store.clear(silent=False)
            return

        cart = await self.fetch_remote_cart()
        if not cart or not cart.id:
            self._logger.info("📭 CLEAR CART: nothing to clear")
            return
        await self._cart_repository.delete_cart(cart.id)
        self._logger.info("🧹 REMOTE CART CLEARED: %s", cart.id)
        self._notifier.request_refresh()

    async def migrate_local_cart_to_backend(self) -> MigrationReport:
        """Move every guest cart line into the server cart

        Lines are sent one at a time, each awaited before the next, because
        the server merges by variant. The guest cart is cleared only after
        every line was accepted. Any failure keeps the guest cart intact for
        the next login and is reported, not retried.
        """
        local_items = self._local_store.list()
        if not local_items:
            return MigrationReport(completed=True)

        self._logger.info("🔀 CART MIGRATION: %d local lines", len(local_items))
        migrated = 0
        try:
            user_id = await self._user_id()
            for item in local_items:
                if item.quantity <= 0:
                    continue
                await self._cart_repository.upsert_items(
                    user_id,
                    [
                        RemoteCartItem(
                            product=Reference(item.product_id),
                            quantity=item.quantity,
                            size=item.size,
                            color=item.color,
                        )
                    ],
                )
                migrated += 1
        except StorefrontError as e:
            self._logger.error(
                "💥 CART MIGRATION FAILED after %d of %d lines: %s",
                migrated,
                len(local_items),
                e,
                exc_info=True,
            )
            return MigrationReport(
                completed=False,
                migrated_lines=migrated,
                pending_lines=len(local_items),
                error_message=str(e),
            )

        self._local_store.clear(silent=True)
        self._logger.info("✅ CART MIGRATED: %d lines", migrated)

        try:
            self._notifier.emit_set(await self.get_item_count())
        except StorefrontError as e:
            self._logger.warning("⚠️ BADGE COUNT AFTER MIGRATION UNAVAILABLE: %s", e)
            self._notifier.request_refresh()

        return MigrationReport(completed=True, migrated_lines=migrated)
