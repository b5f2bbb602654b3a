"""
Test configuration and fixtures for the storefront client
"""

import os
from typing import Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from luxe_storefront.domain.entities.cart_entities import RemoteCart, RemoteCartItem
from luxe_storefront.domain.repositories.cart_repository import CartRepository
from luxe_storefront.infrastructure.configuration.config import reset_config
from luxe_storefront.infrastructure.events.cart_badge_notifier import CartBadgeNotifier
from luxe_storefront.infrastructure.session.session_store import SessionStore
from luxe_storefront.infrastructure.storage.key_value_storage import InMemoryStorage
from luxe_storefront.infrastructure.storage.local_cart_store import LocalCartStore


@pytest.fixture(autouse=True)
def mock_env():
    """Isolate tests from the developer's environment"""
    test_env = {
        "STOREFRONT_ENVIRONMENT": "test",
        "STOREFRONT_LOG_LEVEL": "DEBUG",
        "STOREFRONT_API_BASE_URL": "https://api.test.local/api/v1",
    }

    with patch.dict(os.environ, test_env, clear=True):
        reset_config()
        yield test_env
    reset_config()


class FakeCartRepository(CartRepository):
    """Server cart held in memory; merges upserts by variant like the API"""

    def __init__(self):
        self.carts: Dict[str, RemoteCart] = {}
        self.upsert_calls: List[List[RemoteCartItem]] = []
        self.deleted: List[str] = []
        self.fail_on_call: Optional[int] = None
        self.error: Exception = None

    async def fetch_cart(self, user_id: str) -> Optional[RemoteCart]:
        return self.carts.get(user_id)

    async def upsert_items(self, user_id: str, items: List[RemoteCartItem]) -> RemoteCart:
        self.upsert_calls.append(list(items))
        if self.fail_on_call is not None and len(self.upsert_calls) == self.fail_on_call:
            raise self.error

        cart = self.carts.setdefault(
            user_id, RemoteCart(id=f"cart-{user_id}", owner_user_id=user_id)
        )
        for item in items:
            existing = next(
                (
                    line
                    for line in cart.items
                    if (line.product_id, line.size, line.color)
                    == (item.product_id, item.size, item.color)
                ),
                None,
            )
            if existing:
                existing.quantity += item.quantity
            else:
                cart.items.append(
                    RemoteCartItem(item.product, item.quantity, item.size, item.color)
                )
        return cart

    async def delete_cart(self, cart_id: str) -> None:
        self.deleted.append(cart_id)
        for user_id, cart in list(self.carts.items()):
            if cart.id == cart_id:
                del self.carts[user_id]


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def notifier():
    return CartBadgeNotifier()


@pytest.fixture
def events(notifier):
    """Every event published on the notifier, in order"""
    received = []
    notifier.subscribe(received.append)
    return received


@pytest.fixture
def local_store(storage, notifier):
    return LocalCartStore(storage, notifier)


@pytest.fixture
def session(storage):
    return SessionStore(storage)


@pytest.fixture
def cart_repository():
    return FakeCartRepository()


@pytest.fixture
def auth_repository():
    repo = MagicMock()
    repo.get_current_user_id = AsyncMock(return_value="user-1")
    repo.logout = AsyncMock(return_value=None)
    repo.login = AsyncMock()
    return repo
