"""
Dependency Injection Container

Manages the instantiation and lifecycle of dependencies for Clean Architecture.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from ...application.use_cases.authentication_use_case import AuthenticationUseCase
from ...application.use_cases.cart_reconciliation_use_case import (
    CartReconciliationUseCase,
)
from ...application.use_cases.order_admin_use_case import OrderAdminUseCase
from ..cache.query_cache import QueryCache
from ..configuration.config import Settings, get_config
from ..events.cart_badge_notifier import CartBadge, CartBadgeNotifier, get_cart_notifier
from ..http.api_client import ApiClient
from ..repositories.http_auth_repository import HttpAuthRepository
from ..repositories.http_cart_repository import HttpCartRepository
from ..repositories.http_order_repository import HttpOrderRepository
from ..session.session_store import SessionStore
from ..storage.key_value_storage import JsonFileStorage, KeyValueStorage
from ..storage.local_cart_store import LocalCartStore


class DependencyContainer:
    """
    Dependency injection container for Clean Architecture

    Manages the instantiation and lifecycle of:
    - Storage, session and HTTP client (Infrastructure layer)
    - Repositories (Infrastructure layer)
    - Use Cases (Application layer)
    """

    def __init__(
        self,
        config: Optional[Settings] = None,
        storage: Optional[KeyValueStorage] = None,
        notifier: Optional[CartBadgeNotifier] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._config = config or get_config()
        self._instances: Dict[str, Any] = {}
        self._logger = logging.getLogger(self.__class__.__name__)
        self._storage = storage
        self._notifier = notifier
        self._transport = transport
        self._setup_dependencies()

    def _setup_dependencies(self):
        """Setup all dependencies and their relationships"""
        self._logger.info("Setting up dependency injection container...")

        self._register_infrastructure()
        self._register_repositories()
        self._register_use_cases()

        self._logger.info("Dependency injection container setup complete")

    def _register_infrastructure(self):
        config = self._config
        storage = self._storage or JsonFileStorage(config.storage_path)
        self._instances["storage"] = storage
        self._instances["notifier"] = self._notifier or get_cart_notifier()
        self._instances["session_store"] = SessionStore(
            storage,
            token_key=config.token_storage_key,
            user_id_key=config.user_id_storage_key,
            temp_token_key=config.temp_token_storage_key,
        )
        self._instances["api_client"] = ApiClient(
            config.api_base_url,
            token_provider=self._instances["session_store"].get_token,
            timeout=config.request_timeout,
            transport=self._transport,
        )
        self._instances["local_cart_store"] = LocalCartStore(
            storage, self._instances["notifier"], storage_key=config.cart_storage_key
        )
        self._instances["query_cache"] = QueryCache(default_ttl=config.orders_cache_ttl)

        self._logger.debug("Infrastructure registered successfully")

    def _register_repositories(self):
        """Register repository implementations"""
        api_client = self._instances["api_client"]
        self._instances["auth_repository"] = HttpAuthRepository(api_client)
        self._instances["cart_repository"] = HttpCartRepository(api_client)
        self._instances["order_repository"] = HttpOrderRepository(api_client)

        self._logger.debug("Repositories registered successfully")

    def _register_use_cases(self):
        """Register use case implementations with their dependencies"""
        self._instances["cart_reconciliation_use_case"] = CartReconciliationUseCase(
            local_store=self._instances["local_cart_store"],
            cart_repository=self._instances["cart_repository"],
            session=self._instances["session_store"],
            auth_repository=self._instances["auth_repository"],
            notifier=self._instances["notifier"],
        )

        self._instances["order_admin_use_case"] = OrderAdminUseCase(
            order_repository=self._instances["order_repository"],
            query_cache=self._instances["query_cache"],
            cache_ttl=self._config.orders_cache_ttl,
        )

        self._instances["authentication_use_case"] = AuthenticationUseCase(
            auth_repository=self._instances["auth_repository"],
            session=self._instances["session_store"],
            cart_reconciliation=self._instances["cart_reconciliation_use_case"],
            notifier=self._instances["notifier"],
            order_admin=self._instances["order_admin_use_case"],
        )

        self._logger.debug("Use cases registered successfully")

    # Infrastructure getters
    def get_storage(self) -> KeyValueStorage:
        return self._instances["storage"]

    def get_notifier(self) -> CartBadgeNotifier:
        return self._instances["notifier"]

    def get_session_store(self) -> SessionStore:
        return self._instances["session_store"]

    def get_local_cart_store(self) -> LocalCartStore:
        return self._instances["local_cart_store"]

    def get_query_cache(self) -> QueryCache:
        return self._instances["query_cache"]

    # Use case getters
    def get_cart_reconciliation_use_case(self) -> CartReconciliationUseCase:
        return self._instances["cart_reconciliation_use_case"]

    def get_order_admin_use_case(self) -> OrderAdminUseCase:
        return self._instances["order_admin_use_case"]

    def get_authentication_use_case(self) -> AuthenticationUseCase:
        return self._instances["authentication_use_case"]

    def create_cart_badge(self) -> CartBadge:
        """Badge subscribed to the notifier that refreshes from the active cart"""
        return CartBadge(
            self.get_notifier(),
            count_provider=self.get_cart_reconciliation_use_case().get_item_count,
            initial_count=self.get_local_cart_store().item_count(),
        )

    async def aclose(self) -> None:
        """Release the HTTP connection pool"""
        await self._instances["api_client"].aclose()
