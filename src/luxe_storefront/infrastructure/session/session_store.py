"""
Session store

Owns the session keys in client storage: the bearer token, the temporary
two-factor token and the cached user id that saves an identity look-up
before every cart call.
"""

import logging
from typing import Optional

from luxe_storefront.domain.repositories.auth_repository import AuthRepository
from luxe_storefront.infrastructure.storage.key_value_storage import KeyValueStorage
from luxe_storefront.infrastructure.utilities.exceptions import UnauthorizedError


class SessionStore:
    """Authentication state kept in client storage"""

    def __init__(
        self,
        storage: KeyValueStorage,
        token_key: str = "token",
        user_id_key: str = "userId",
        temp_token_key: str = "tempToken",
    ):
        self._storage = storage
        self._token_key = token_key
        self._user_id_key = user_id_key
        self._temp_token_key = temp_token_key
        self._cached_user_id: Optional[str] = None
        self._logger = logging.getLogger(self.__class__.__name__)

    def get_token(self) -> Optional[str]:
        return self._storage.get_item(self._token_key)

    def set_token(self, token: str) -> None:
        self._storage.set_item(self._token_key, token)
        # A new token may belong to a different user
        self._forget_user_id()

    def get_temp_token(self) -> Optional[str]:
        return self._storage.get_item(self._temp_token_key)

    def set_temp_token(self, temp_token: str) -> None:
        self._storage.set_item(self._temp_token_key, temp_token)

    def clear_temp_token(self) -> None:
        self._storage.remove_item(self._temp_token_key)

    def is_authenticated(self) -> bool:
        return bool(self.get_token())

    def get_cached_user_id(self) -> Optional[str]:
        if self._cached_user_id:
            return self._cached_user_id
        stored = self._storage.get_item(self._user_id_key)
        if stored:
            self._cached_user_id = stored
        return stored

    def cache_user_id(self, user_id: str) -> None:
        self._cached_user_id = user_id
        self._storage.set_item(self._user_id_key, user_id)

    async def resolve_user_id(self, auth_repository: AuthRepository) -> str:
        """Cached user id, falling back to an identity look-up"""
        if not self.is_authenticated():
            raise UnauthorizedError("Not authenticated")

        cached = self.get_cached_user_id()
        if cached:
            return cached

        self._logger.info("🔎 USER ID NOT CACHED: asking the API")
        user_id = await auth_repository.get_current_user_id()
        self.cache_user_id(user_id)
        return user_id

    def _forget_user_id(self) -> None:
        self._cached_user_id = None
        self._storage.remove_item(self._user_id_key)

    def clear(self) -> None:
        """Drop every session key"""
        self._storage.remove_item(self._token_key)
        self._storage.remove_item(self._temp_token_key)
        self._forget_user_id()
        self._logger.info("🚪 SESSION CLEARED")
