"""
Storage Client for Album Service

Binary photo storage on Cloud Storage for Firebase (REST v0 API).
Objects live under ``users/{uid}/albums/{album}/...``.
"""

import logging
from typing import List, Optional
from urllib.parse import quote, unquote, urlparse

import httpx

from core.config import BackendConfig
from core.service_client_base import BaseServiceClient

from ..models import StoredObject
from ..protocols import PersistenceError, UploadError
from ..session import BackendSession

logger = logging.getLogger(__name__)


class StorageClient(BaseServiceClient):
    """Client for the Firebase Storage objects API"""

    service_name = "firebasestorage"

    def __init__(
        self,
        config: BackendConfig,
        session: BackendSession,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(config.storage_url, timeout=config.http_timeout, transport=transport)
        self.bucket = config.storage_bucket
        self.session = session

    def _auth_headers(self):
        return self.session.auth_headers()

    def _object_path(self, path: str) -> str:
        return f"/b/{self.bucket}/o/{quote(path, safe='')}"

    def download_url(self, path: str, token: Optional[str] = None) -> str:
        """Public download URL for an object"""
        url = f"{self.base_url}{self._object_path(path)}?alt=media"
        if token:
            url += f"&token={token}"
        return url

    def path_from_url(self, url: str) -> Optional[str]:
        """
        Object path referenced by a download URL or ``gs://`` URL

        Returns None if the URL does not point into this bucket's object API.
        """
        parsed = urlparse(url)
        if parsed.scheme == "gs":
            return parsed.path.lstrip("/") or None
        marker = "/o/"
        if marker not in parsed.path:
            return None
        return unquote(parsed.path.split(marker, 1)[1]) or None

    async def upload(self, data: bytes, path: str, content_type: str) -> StoredObject:
        """
        Upload raw bytes to ``path``

        Raises:
            UploadError: If the object could not be stored
        """
        self.session.require_user()
        try:
            response = await self.post(
                f"/b/{self.bucket}/o",
                content=data,
                params={"uploadType": "media", "name": path},
                headers={"Content-Type": content_type or "application/octet-stream"},
            )
        except httpx.HTTPError as e:
            logger.error(f"Error uploading image {path}: {e}")
            raise UploadError(f"Upload failed for {path}: {e}")

        if response.status_code != 200:
            logger.error(f"Error uploading image {path}: {response.status_code} {response.text}")
            raise UploadError(f"Upload failed for {path}: HTTP {response.status_code}")

        metadata = response.json()
        name = metadata.get("name", path)
        token = (metadata.get("downloadTokens") or "").split(",")[0] or None
        url = self.download_url(name, token)
        logger.info(f"Image uploaded successfully: {name}")
        return StoredObject(url=url, path=name)

    async def delete(self, path_or_url: str) -> None:
        """
        Delete an object by path or download URL; a missing object is not an error

        Raises:
            PersistenceError: If the backend refused the delete
        """
        path = path_or_url
        if "://" in path_or_url:
            path = self.path_from_url(path_or_url)
            if not path:
                raise PersistenceError(f"Not a storage URL: {path_or_url}")

        try:
            response = await self._delete_object(path)
        except httpx.HTTPError as e:
            logger.error(f"Error deleting image from storage {path}: {e}")
            raise PersistenceError(f"Failed to delete {path}: {e}")

        if response.status_code == 404:
            logger.warning(f"Image already absent from storage: {path}")
            return
        if response.status_code not in (200, 204):
            logger.error(f"Error deleting image from storage {path}: {response.status_code}")
            raise PersistenceError(f"Failed to delete {path}: HTTP {response.status_code}")

        logger.info(f"Image deleted from storage: {path}")

    async def _delete_object(self, path: str) -> httpx.Response:
        return await super().delete(self._object_path(path))

    async def exists(self, path: str) -> bool:
        """Whether an object exists at ``path``"""
        try:
            response = await self.get(self._object_path(path))
        except httpx.HTTPError as e:
            raise PersistenceError(f"Failed to check {path}: {e}")

        if response.status_code == 200:
            return True
        if response.status_code == 404:
            return False
        raise PersistenceError(f"Failed to check {path}: HTTP {response.status_code}")

    async def list_objects(self, prefix: str) -> List[str]:
        """All object paths under ``prefix``"""
        names: List[str] = []
        page_token = None

        while True:
            params = {"prefix": prefix}
            if page_token:
                params["pageToken"] = page_token

            try:
                response = await self.get(f"/b/{self.bucket}/o", params=params)
            except httpx.HTTPError as e:
                raise PersistenceError(f"Failed to list {prefix}: {e}")
            if response.status_code != 200:
                raise PersistenceError(f"Failed to list {prefix}: HTTP {response.status_code}")

            data = response.json()
            names.extend(item["name"] for item in data.get("items", []))

            page_token = data.get("nextPageToken")
            if not page_token:
                break

        return names
