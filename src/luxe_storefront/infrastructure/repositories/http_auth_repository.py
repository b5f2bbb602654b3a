"""
HTTP Auth Repository

Identity calls against the REST `/auth` resource.
"""

import logging
from typing import Optional

from luxe_storefront.domain.repositories.auth_repository import AuthRepository, LoginResult
from luxe_storefront.infrastructure.http.api_client import ApiClient
from luxe_storefront.infrastructure.utilities.exceptions import ApiError


class HttpAuthRepository(AuthRepository):
    """REST implementation of login, logout and identity look-up"""

    def __init__(self, api_client: ApiClient):
        self._api = api_client
        self._logger = logging.getLogger(self.__class__.__name__)

    async def login(self, email: str, password: str, otp: Optional[str] = None) -> LoginResult:
        payload = {"email": email, "password": password}
        if otp:
            payload["token"] = otp

        body = await self._api.post(
            "/auth/login",
            json=payload,
            operation="login",
            default_error="Login failed",
            authenticated=False,
        )
        body = body or {}
        return LoginResult(
            success=bool(body.get("success", True)),
            token=body.get("token"),
            temp_token=body.get("tempToken"),
            user=body.get("data"),
            message=body.get("message"),
        )

    async def logout(self) -> None:
        await self._api.get("/auth/logout", operation="logout", default_error="Logout failed")

    async def get_current_user_id(self) -> str:
        body = await self._api.get(
            "/auth/me", operation="get_current_user", default_error="Failed to load user"
        )
        data = (body or {}).get("data") or {}
        user_id = data.get("id") or data.get("_id")
        if not user_id:
            raise ApiError("Unable to get user ID from response", operation="get_current_user")
        self._logger.debug("👤 CURRENT USER: %s", user_id)
        return str(user_id)
