"""
Album Service Protocols (Interfaces)

These interfaces define contracts for dependency injection.
NO import-time I/O dependencies - safe to import anywhere.
"""
from typing import Any, Callable, Dict, List, Optional, Protocol, runtime_checkable

# Import only models (no I/O dependencies)
from .models import AlbumsMap, AuthUser, Photo, ReconciliationReport, StoredObject, UserProfile


# Custom exceptions - defined here to avoid importing clients
class AlbumServiceError(Exception):
    """Base exception for album service errors"""
    pass


class AuthError(AlbumServiceError):
    """Bad credentials or failed sign-up"""
    pass


class PersistenceError(AlbumServiceError):
    """Store/load/delete failure on albums, photos or profiles"""
    pass


class PhotoDeletionInterruptedError(PersistenceError):
    """Binary object removed but its photo document could not be deleted"""

    def __init__(self, message: str, document_path: str):
        super().__init__(message)
        self.document_path = document_path


class UploadError(AlbumServiceError):
    """Per-file upload failure"""
    pass


class AlbumValidationError(AlbumServiceError):
    """Album validation error"""
    pass


class DuplicateAlbumError(AlbumValidationError):
    """Album name already used by this user"""
    pass


AuthStateListener = Callable[[Optional[AuthUser]], Any]


@runtime_checkable
class AuthClientProtocol(Protocol):
    """Interface for the auth collaborator"""

    async def sign_in(self, email: str, password: str) -> AuthUser:
        ...

    async def sign_up(self, email: str, password: str) -> AuthUser:
        ...

    async def sign_out(self) -> None:
        ...

    def on_auth_state_changed(self, callback: AuthStateListener) -> Callable[[], None]:
        """Register a listener; returns an unsubscribe function"""
        ...


@runtime_checkable
class StorageClientProtocol(Protocol):
    """Interface for the binary storage collaborator"""

    async def upload(self, data: bytes, path: str, content_type: str) -> StoredObject:
        ...

    async def delete(self, path_or_url: str) -> None:
        ...

    async def exists(self, path: str) -> bool:
        ...

    async def list_objects(self, prefix: str) -> List[str]:
        ...

    def path_from_url(self, url: str) -> Optional[str]:
        ...


@runtime_checkable
class DocumentStoreProtocol(Protocol):
    """Interface for the document store collaborator"""

    async def get_document(self, path: str) -> Optional[Dict[str, Any]]:
        ...

    async def set_document(self, path: str, data: Dict[str, Any]) -> None:
        ...

    async def delete_document(self, path: str) -> None:
        ...

    async def list_documents(self, collection_path: str) -> List[Dict[str, Any]]:
        """Each item carries its document id under ``"__id__"``"""
        ...


@runtime_checkable
class AlbumRepositoryProtocol(Protocol):
    """
    Interface for the Album Store Adapter.

    Used for dependency injection to enable testing.
    """

    async def load_albums(self, user_id: str) -> AlbumsMap:
        ...

    async def save_albums(self, user_id: str, albums: Dict[str, List[Any]]) -> AlbumsMap:
        ...

    async def delete_album(self, user_id: str, album_name: str) -> AlbumsMap:
        ...

    async def delete_photo(self, user_id: str, album_name: str, photo: Photo) -> None:
        ...

    async def get_profile(self, user_id: str) -> Optional[UserProfile]:
        ...

    async def save_profile(self, user_id: str, profile: UserProfile) -> UserProfile:
        ...

    async def reconcile(self, user_id: str) -> ReconciliationReport:
        ...
