"""
REST API client

Thin async wrapper around httpx that attaches the bearer token, unwraps the
API's JSON envelope and turns failures into storefront exceptions. Callers
decide whether a 404 is an empty result or an error.
"""

import logging
from typing import Any, Callable, Dict, Optional

import httpx

from luxe_storefront.infrastructure.logging.logging_config import PerformanceLogger
from luxe_storefront.infrastructure.utilities.exceptions import (
    ApiError,
    NetworkError,
    UnauthorizedError,
)

TokenProvider = Callable[[], Optional[str]]


def _error_message(response: httpx.Response, default: str) -> str:
    try:
        body = response.json()
    except ValueError:
        return default
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return default


class ApiClient:
    """Async JSON client for the storefront REST API"""

    def __init__(
        self,
        base_url: str,
        token_provider: Optional[TokenProvider] = None,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._token_provider = token_provider or (lambda: None)
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json", "Cache-Control": "no-cache"},
        )
        self._logger = logging.getLogger(self.__class__.__name__)

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def _headers(self, authenticated: bool) -> Dict[str, str]:
        if not authenticated:
            return {}
        token = self._token_provider()
        return {"Authorization": f"Bearer {token}"} if token else {}

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        operation: str = "",
        default_error: str = "Request failed",
        allow_not_found: bool = False,
        authenticated: bool = True,
    ) -> Optional[Dict[str, Any]]:
        """Send a request and return the decoded JSON body

        Returns None for 404 when allow_not_found is set. Raises
        UnauthorizedError for 401/403, ApiError for other failure statuses
        and NetworkError when the server cannot be reached.
        """
        operation = operation or f"{method} {path}"
        try:
            with PerformanceLogger(operation, self._logger, {"path": path}):
                response = await self._client.request(
                    method, path, json=json, headers=self._headers(authenticated)
                )
        except httpx.TransportError as e:
            self._logger.error("🌐 NETWORK ERROR: %s: %s", operation, e)
            raise NetworkError(f"{default_error}: {e}", operation) from e

        if response.status_code == 404 and allow_not_found:
            self._logger.debug("📭 NOT FOUND: %s", operation)
            return None

        if response.status_code in (401, 403):
            message = _error_message(response, "Not authorized")
            self._logger.warning("🔒 UNAUTHORIZED: %s -> %s", operation, response.status_code)
            raise UnauthorizedError(message, response.status_code)

        if response.is_error:
            message = _error_message(response, default_error)
            self._logger.error(
                "💥 API ERROR: %s -> %s %s", operation, response.status_code, message
            )
            raise ApiError(message, response.status_code, operation)

        if not response.content:
            return {}
        try:
            body = response.json()
        except ValueError as e:
            raise ApiError(
                f"{default_error}: invalid JSON response", response.status_code, operation
            ) from e
        return body if isinstance(body, dict) else {"data": body}

    async def get(self, path: str, **kwargs) -> Optional[Dict[str, Any]]:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, json: Any = None, **kwargs) -> Optional[Dict[str, Any]]:
        return await self.request("POST", path, json=json, **kwargs)

    async def put(self, path: str, json: Any = None, **kwargs) -> Optional[Dict[str, Any]]:
        return await self.request("PUT", path, json=json, **kwargs)

    async def delete(self, path: str, **kwargs) -> Optional[Dict[str, Any]]:
        return await self.request("DELETE", path, **kwargs)
