"""
Azure Cost Management API client.

Thin async transport over the management REST endpoint: it owns the bearer
token and HTTP connection, posts query payloads and returns the decoded JSON.
Retries and timeouts below this layer are left to httpx.
"""

import asyncio
import logging
from typing import Any

import httpx
from azure.core.exceptions import ClientAuthenticationError

from .base import CredentialError, TransportError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://management.azure.com"
DEFAULT_API_VERSION = "2021-10-01"
DEFAULT_TOP = 5000
DEFAULT_TIMEOUT = 60
MANAGEMENT_SCOPE = "https://management.azure.com/.default"


class AzureCostClient:
    """Authenticated client for the Cost Management query and forecast endpoints."""

    def __init__(
        self,
        credential: Any,
        base_url: str = DEFAULT_BASE_URL,
        api_version: str = DEFAULT_API_VERSION,
        top: int = DEFAULT_TOP,
        timeout: float = DEFAULT_TIMEOUT,
        scope: str = MANAGEMENT_SCOPE,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the client.

        Args:
            credential: azure.identity token credential (anything with get_token)
            base_url: Management API endpoint
            api_version: Cost Management API version
            top: Maximum number of rows per query
            timeout: HTTP timeout in seconds
            scope: Token scope requested from the credential
            transport: Optional httpx transport, mainly for tests
        """
        self.credential = credential
        self.base_url = base_url.rstrip("/")
        self.api_version = api_version
        self.top = top
        self.scope = scope
        self._token: str | None = None
        self._token_lock = asyncio.Lock()
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept-Encoding": "gzip, deflate", "Content-Type": "application/json"},
        )

    @classmethod
    def from_config(cls, credential: Any, azure_config: dict[str, Any]) -> "AzureCostClient":
        """Create a client from the ``azure`` configuration section."""
        return cls(
            credential,
            base_url=azure_config.get("api_base_url") or DEFAULT_BASE_URL,
            api_version=azure_config.get("api_version") or DEFAULT_API_VERSION,
            top=int(azure_config.get("top") or DEFAULT_TOP),
            timeout=float(azure_config.get("timeout") or DEFAULT_TIMEOUT),
            scope=azure_config.get("token_scope") or MANAGEMENT_SCOPE,
        )

    async def __aenter__(self) -> "AzureCostClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        await self._client.aclose()

    async def acquire_token(self) -> str:
        """
        Acquire the bearer token once and cache it for the client's lifetime.

        azure.identity credentials are synchronous (the Azure CLI credential runs
        a subprocess), so the call is made in a worker thread.

        Raises:
            CredentialError: If the credential cannot produce a token
        """
        async with self._token_lock:
            if self._token is None:
                try:
                    access_token = await asyncio.to_thread(self.credential.get_token, self.scope)
                except ClientAuthenticationError as e:
                    raise CredentialError(f"Could not acquire a management API token: {e}") from e
                self._token = access_token.token
        return self._token

    async def send(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        """
        POST a query payload and return the decoded response.

        Args:
            path: Resource path relative to the management endpoint
            payload: Query body

        Returns:
            Parsed JSON response body

        Raises:
            TransportError: On network failure or a non-success status
        """
        params = {"api-version": self.api_version, "$top": str(self.top)}
        headers = {"Authorization": f"Bearer {await self.acquire_token()}"}

        logger.debug(f"POST {path}")
        try:
            response = await self._client.post(
                path, params=params, json=payload, headers=headers
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise TransportError(
                f"Cost Management API returned {status} for {path}: {_error_message(e.response)}",
                status_code=status,
                path=path,
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(f"Cost Management API request to {path} failed: {e}", path=path) from e

        try:
            return response.json()
        except ValueError as e:
            raise TransportError(
                f"Cost Management API returned invalid JSON for {path}",
                status_code=response.status_code,
                path=path,
            ) from e


def _error_message(response: httpx.Response) -> str:
    """Best-effort extraction of the API's error message."""
    try:
        error = response.json().get("error", {})
        return error.get("message") or response.reason_phrase
    except (ValueError, AttributeError):
        return response.reason_phrase
