"""
Firestore Client for Album Service

Document reads and writes against the Cloud Firestore REST v1 API.
Documents cross the wire as typed ``Value`` objects; ``encode_value`` and
``decode_value`` translate them to plain Python values.
"""

import base64
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from core.config import BackendConfig
from core.service_client_base import BaseServiceClient

from ..date_normalizer import parse_date, to_iso_string
from ..protocols import PersistenceError
from ..session import BackendSession

logger = logging.getLogger(__name__)

DOCUMENT_ID_KEY = "__id__"
LIST_PAGE_SIZE = 300


# ==================== Value Codec ====================

def encode_value(value: Any) -> Dict[str, Any]:
    """Python value -> Firestore ``Value``"""
    if value is None:
        return {"nullValue": None}
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, int):
        return {"integerValue": str(value)}
    if isinstance(value, float):
        return {"doubleValue": value}
    if isinstance(value, str):
        return {"stringValue": value}
    if isinstance(value, datetime):
        return {"timestampValue": to_iso_string(value)}
    if isinstance(value, bytes):
        return {"bytesValue": base64.b64encode(value).decode("ascii")}
    if isinstance(value, dict):
        return {"mapValue": {"fields": encode_fields(value)}}
    if isinstance(value, (list, tuple)):
        return {"arrayValue": {"values": [encode_value(v) for v in value]}}
    raise TypeError(f"Cannot store value of type {type(value).__name__} in Firestore")


def encode_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    return {key: encode_value(value) for key, value in data.items()}


def decode_value(value: Dict[str, Any]) -> Any:
    """Firestore ``Value`` -> Python value; timestamps become aware datetimes"""
    if "nullValue" in value:
        return None
    if "booleanValue" in value:
        return value["booleanValue"]
    if "integerValue" in value:
        return int(value["integerValue"])
    if "doubleValue" in value:
        return float(value["doubleValue"])
    if "stringValue" in value:
        return value["stringValue"]
    if "timestampValue" in value:
        return parse_date(value["timestampValue"])
    if "bytesValue" in value:
        return base64.b64decode(value["bytesValue"])
    if "referenceValue" in value:
        return value["referenceValue"]
    if "geoPointValue" in value:
        return dict(value["geoPointValue"])
    if "mapValue" in value:
        return decode_fields(value["mapValue"].get("fields", {}))
    if "arrayValue" in value:
        return [decode_value(v) for v in value["arrayValue"].get("values", [])]
    raise ValueError(f"Unknown Firestore value: {value}")


def decode_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {key: decode_value(value) for key, value in fields.items()}


# ==================== Client ====================

class FirestoreClient(BaseServiceClient):
    """Client for the Firestore documents API"""

    service_name = "firestore"

    def __init__(
        self,
        config: BackendConfig,
        session: BackendSession,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(config.firestore_url, timeout=config.http_timeout, transport=transport)
        self.documents_root = config.documents_root
        self.session = session

    def _auth_headers(self):
        return self.session.auth_headers()

    def _url_path(self, path: str) -> str:
        return f"/{self.documents_root}/{quote(path.strip('/'), safe='/')}"

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            return response.json().get("error", {}).get("message") or f"HTTP {response.status_code}"
        except ValueError:
            return f"HTTP {response.status_code}"

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            if method == "GET":
                return await self.get(self._url_path(path), **kwargs)
            if method == "PATCH":
                return await self.patch(self._url_path(path), **kwargs)
            return await self.delete(self._url_path(path))
        except httpx.HTTPError as e:
            logger.error(f"Firestore {method} {path} failed: {e}")
            raise PersistenceError(f"Firestore {method} {path} failed: {e}")

    async def get_document(self, path: str) -> Optional[Dict[str, Any]]:
        """Decoded fields of a document, or None if it does not exist"""
        response = await self._request("GET", path)
        if response.status_code == 404:
            return None
        if response.status_code != 200:
            message = self._error_message(response)
            logger.error(f"Error loading document {path}: {message}")
            raise PersistenceError(f"Error loading {path}: {message}")
        return decode_fields(response.json().get("fields", {}))

    async def set_document(self, path: str, data: Dict[str, Any]) -> None:
        """Create or fully overwrite a document"""
        response = await self._request("PATCH", path, json={"fields": encode_fields(data)})
        if response.status_code != 200:
            message = self._error_message(response)
            logger.error(f"Error saving document {path}: {message}")
            raise PersistenceError(f"Error saving {path}: {message}")

    async def delete_document(self, path: str) -> None:
        """Delete a document; deleting a missing document succeeds"""
        response = await self._request("DELETE", path)
        if response.status_code not in (200, 204, 404):
            message = self._error_message(response)
            logger.error(f"Error deleting document {path}: {message}")
            raise PersistenceError(f"Error deleting {path}: {message}")

    async def list_documents(self, collection_path: str) -> List[Dict[str, Any]]:
        """
        All documents of a collection

        Each decoded document carries its id under ``"__id__"``.
        """
        documents: List[Dict[str, Any]] = []
        page_token = None

        while True:
            params = {"pageSize": LIST_PAGE_SIZE}
            if page_token:
                params["pageToken"] = page_token

            response = await self._request("GET", collection_path, params=params)
            if response.status_code != 200:
                message = self._error_message(response)
                logger.error(f"Error listing {collection_path}: {message}")
                raise PersistenceError(f"Error listing {collection_path}: {message}")

            data = response.json()
            for doc in data.get("documents", []):
                decoded = decode_fields(doc.get("fields", {}))
                decoded[DOCUMENT_ID_KEY] = doc["name"].rsplit("/", 1)[-1]
                documents.append(decoded)

            page_token = data.get("nextPageToken")
            if not page_token:
                break

        return documents
