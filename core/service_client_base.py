"""
Base Service Client for backend REST collaborators

Base class for the Firebase REST clients (auth, storage, firestore).
"""

import httpx
import logging
from typing import Optional, Dict, Any
from abc import ABC

logger = logging.getLogger(__name__)


class BaseServiceClient(ABC):
    """
    REST client base class

    Handles:
    1. Base URL resolution
    2. Per-request auth headers
    3. HTTP client lifecycle
    4. Optional timeout override

    Example:
        class FirestoreClient(BaseServiceClient):
            service_name = "firestore"

            async def get_document(self, path: str):
                response = await self.get(f"/{path}")
                return response.json()
    """

    # Subclasses define this
    service_name: str = None

    def __init__(
        self,
        base_url: str,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client

        Args:
            base_url: Service base URL
            timeout: Request timeout in seconds (None keeps httpx's default)
            transport: Optional transport (tests pass httpx.MockTransport)
        """
        if not self.service_name:
            raise ValueError(f"{self.__class__.__name__} must define 'service_name'")

        self.base_url = base_url.rstrip('/')

        client_kwargs: Dict[str, Any] = {
            "headers": {"User-Agent": f"coral-tracker/{self.service_name}"},
        }
        if timeout is not None:
            client_kwargs["timeout"] = timeout
        if transport is not None:
            client_kwargs["transport"] = transport

        self.client = httpx.AsyncClient(**client_kwargs)

        logger.debug(f"Initialized {self.service_name} client: {self.base_url}")

    def _auth_headers(self) -> Dict[str, str]:
        """Headers identifying the caller; overridden by clients that need a bearer token"""
        return {}

    def _merge_headers(self, headers: Optional[Dict[str, str]]) -> Dict[str, str]:
        merged = self._auth_headers()
        if headers:
            merged.update(headers)
        return merged

    async def close(self):
        """Close the HTTP client"""
        await self.client.aclose()
        logger.debug(f"Closed {self.service_name} client")

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    # ========================================
    # HTTP method wrappers
    # ========================================

    async def get(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> httpx.Response:
        """GET request"""
        url = f"{self.base_url}{path}"
        return await self.client.get(url, params=params, headers=self._merge_headers(headers))

    async def post(
        self,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        content: Optional[bytes] = None,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> httpx.Response:
        """POST request"""
        url = f"{self.base_url}{path}"
        return await self.client.post(
            url, json=json, content=content, params=params, headers=self._merge_headers(headers)
        )

    async def patch(
        self,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> httpx.Response:
        """PATCH request"""
        url = f"{self.base_url}{path}"
        return await self.client.patch(url, json=json, params=params, headers=self._merge_headers(headers))

    async def delete(
        self,
        path: str,
        headers: Optional[Dict[str, str]] = None
    ) -> httpx.Response:
        """DELETE request"""
        url = f"{self.base_url}{path}"
        return await self.client.delete(url, headers=self._merge_headers(headers))


__all__ = ["BaseServiceClient"]
