"""
Provider Base Service

Shared HTTP plumbing for the external route-planning providers. The request
helper raises ``ProviderError`` subclasses; public adapter methods catch them
and return ``None`` or an empty list so one failing provider never aborts a
route search.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from app.core.config import settings
from app.schemas.health import ServiceHealth

logger = logging.getLogger(__name__)


class ProviderError(Exception):
    """Base exception for provider errors."""


class ProviderAPIError(ProviderError):
    """Raised when a provider returns a non-success status."""


class ProviderNetworkError(ProviderError):
    """Raised when network communication fails."""


class ProviderDataError(ProviderError):
    """Raised when response data cannot be parsed."""


class ProviderService:
    """
    Lazily-created ``httpx.AsyncClient`` plus JSON request handling.
    """

    provider_name = "provider"

    def __init__(self, base_url: str, api_key: str, timeout: Optional[float] = None):
        self._api_url = base_url
        self._api_key = api_key
        self._timeout = timeout if timeout is not None else settings.PROVIDER_TIMEOUT_SECONDS
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        """
        Get or create the HTTP client for this provider.
        """
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._api_url,
                headers=self._auth_headers(),
                timeout=self._timeout,
            )
        return self._client

    def _auth_headers(self) -> Dict[str, str]:
        return {}

    async def _request_json(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Send a request and decode the JSON body.

        Raises:
            ProviderAPIError: non-200 status
            ProviderNetworkError: timeout or transport failure
            ProviderDataError: body is not JSON
        """
        try:
            client = self._get_client()
            response = await client.request(method, path, params=params, json=json)
        except httpx.TimeoutException as e:
            raise ProviderNetworkError(f"{self.provider_name} request timed out") from e
        except httpx.HTTPError as e:
            raise ProviderNetworkError(f"Network error: {str(e)}") from e

        if response.status_code != 200:
            raise ProviderAPIError(
                f"{self.provider_name} returned status {response.status_code}: "
                f"{response.text[:200]}"
            )

        try:
            return response.json()
        except ValueError as e:
            raise ProviderDataError(f"Invalid JSON from {self.provider_name}") from e

    async def health_check(self) -> ServiceHealth:
        """
        Report whether the provider is usable.

        Provider calls are metered, so this only checks that credentials are
        configured instead of spending a request.
        """
        if not self._api_key:
            return ServiceHealth(
                healthy=False,
                message=f"{self.provider_name} API key is not configured",
            )
        return ServiceHealth(healthy=True, message=f"{self.provider_name} API key is configured")

    async def close(self):
        """
        Close the HTTP client and cleanup resources.
        """
        if self._client is not None:
            await self._client.aclose()
            self._client = None
