"""
Thin client for the Meta Graph API.

The Graph API reports many failures as an ``error`` object inside an
HTTP 200 body, so every response is inspected for it explicitly.
"""

from typing import Any

import httpx
import structlog

from ..domain.exceptions import PlatformApiError

logger = structlog.get_logger()


class GraphApiClient:
    """Graph API calls for one platform label, over a shared httpx client."""

    def __init__(self, http_client: httpx.AsyncClient, platform: str, base_url: str) -> None:
        """
        Args:
            http_client: Shared async client (carries timeouts and transport)
            platform: Label used in error messages ("Facebook", "Instagram")
            base_url: Versioned Graph root, e.g. https://graph.facebook.com/v21.0
        """
        self._http = http_client
        self._platform = platform
        self._base_url = base_url.rstrip("/")

    @property
    def platform(self) -> str:
        return self._platform

    async def post(self, path: str, data: dict[str, Any]) -> dict[str, Any]:
        """POST form data to ``{base_url}/{path}``."""
        return await self._request("POST", path, raise_on_error=True, data=data)

    async def get(
        self,
        path: str,
        params: dict[str, Any],
        raise_on_error: bool = True,
    ) -> dict[str, Any]:
        """GET ``{base_url}/{path}`` with query parameters."""
        return await self._request("GET", path, raise_on_error=raise_on_error, params=params)

    async def _request(
        self,
        method: str,
        path: str,
        raise_on_error: bool,
        **kwargs: Any,
    ) -> dict[str, Any]:
        url = f"{self._base_url}/{path}"
        try:
            response = await self._http.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error(
                "Graph API request failed",
                platform=self._platform,
                method=method,
                path=path,
                error=str(e),
            )
            raise PlatformApiError(self._platform, str(e) or type(e).__name__) from e

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if not isinstance(payload, dict):
            raise PlatformApiError(
                self._platform,
                f"Unexpected response (HTTP {response.status_code})",
            )

        if not raise_on_error:
            return payload

        error = payload.get("error")
        if error:
            message = error.get("message") if isinstance(error, dict) else str(error)
            logger.warning(
                "Graph API returned error",
                platform=self._platform,
                path=path,
                status_code=response.status_code,
                error=message,
            )
            raise PlatformApiError(self._platform, message or "Unknown error")

        if response.is_error:
            raise PlatformApiError(self._platform, f"HTTP {response.status_code}")

        return payload
