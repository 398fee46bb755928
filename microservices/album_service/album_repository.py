"""
Album Repository - Album Store Adapter

Maps the in-memory album map (name -> photos) to and from Firestore.

Persisted layout (the only schema read or written at runtime):

    users/{uid}                                   {lastUpdated}
    users/{uid}/albums/{albumKey}                 {name, createdAt, lastUpdated}
    users/{uid}/albums/{albumKey}/photos/{id}     photo record
    userProfiles/{uid}                            {firstName, email, createdAt}

The legacy flat ``albums/{uid}`` document is handled by ``migration.py`` only.
"""

import hashlib
import logging
import uuid
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from .date_normalizer import to_iso_string
from .models import AlbumsMap, Photo, ReconciliationReport, UserProfile
from .protocols import (
    AlbumServiceError,
    DocumentStoreProtocol,
    PersistenceError,
    PhotoDeletionInterruptedError,
    StorageClientProtocol,
)
from .timeline import sort_photos_by_date

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"
ALBUMS_COLLECTION = "albums"
PHOTOS_COLLECTION = "photos"
PROFILES_COLLECTION = "userProfiles"
DOCUMENT_ID_KEY = "__id__"


# ==================== Validation & Serialization ====================

def album_key(album_name: str) -> str:
    """Path-safe document id for an album name"""
    return hashlib.sha1(album_name.encode("utf-8")).hexdigest()


def new_photo_id() -> str:
    return uuid.uuid4().hex


def serialize_value(value: Any) -> Any:
    """Date-like values (including provider timestamp objects) -> ISO-8601 strings"""
    if isinstance(value, datetime):
        return to_iso_string(value)
    if isinstance(value, date):
        return value.isoformat()
    to_datetime = getattr(value, "to_datetime", None)
    if callable(to_datetime):
        return to_iso_string(to_datetime())
    isoformat = getattr(value, "isoformat", None)
    if callable(isoformat):
        return isoformat()
    return value


def clean_photo(raw: Any) -> Optional[Photo]:
    """
    Validated photo, or None if it has to be dropped

    Drops None-valued attributes, serializes dates, and rejects records
    without both ``url`` and ``date``.
    """
    if isinstance(raw, Photo):
        data = raw.to_record()
    elif isinstance(raw, dict):
        data = raw
    else:
        return None

    data = {key: serialize_value(value) for key, value in data.items() if value is not None}
    if not data.get("url") or not data.get("date"):
        return None

    try:
        return Photo.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Dropping invalid photo record: {e}")
        return None


def clean_photos(photos: Optional[Iterable[Any]]) -> List[Photo]:
    cleaned = [clean_photo(photo) for photo in photos or []]
    return sort_photos_by_date([photo for photo in cleaned if photo is not None])


def clean_albums(albums: Dict[str, Any]) -> AlbumsMap:
    """Cleaned copy of an album map; every album sorted by date"""
    return {name: clean_photos(photos) for name, photos in albums.items()}


# ==================== Repository ====================

class AlbumRepository:
    """Album repository - data access layer for albums, photos and profiles"""

    def __init__(self, store: DocumentStoreProtocol, storage: StorageClientProtocol):
        self.store = store
        self.storage = storage

    # ==================== Paths ====================

    @staticmethod
    def _user_doc(user_id: str) -> str:
        return f"{USERS_COLLECTION}/{user_id}"

    def _albums_col(self, user_id: str) -> str:
        return f"{self._user_doc(user_id)}/{ALBUMS_COLLECTION}"

    def _album_doc(self, user_id: str, key: str) -> str:
        return f"{self._albums_col(user_id)}/{key}"

    def _photos_col(self, user_id: str, key: str) -> str:
        return f"{self._album_doc(user_id, key)}/{PHOTOS_COLLECTION}"

    def _photo_doc(self, user_id: str, key: str, photo_id: str) -> str:
        return f"{self._photos_col(user_id, key)}/{photo_id}"

    @staticmethod
    def _profile_doc(user_id: str) -> str:
        return f"{PROFILES_COLLECTION}/{user_id}"

    async def _list_photo_documents(self, user_id: str, key: str) -> Dict[str, Photo]:
        """Stored photos of one album keyed by document id (invalid documents are skipped)"""
        photos = {}
        for doc in await self.store.list_documents(self._photos_col(user_id, key)):
            data = dict(doc)
            photo_id = data.pop(DOCUMENT_ID_KEY)
            data["photoId"] = photo_id
            photo = clean_photo(data)
            if photo is not None:
                photos[photo_id] = photo
        return photos

    # ==================== Album Operations ====================

    async def load_albums(self, user_id: str) -> AlbumsMap:
        """Full album map of a user; empty if the user has none"""
        try:
            albums: AlbumsMap = {}
            for album_doc in await self.store.list_documents(self._albums_col(user_id)):
                name = album_doc.get("name")
                if not name:
                    logger.warning(f"Album document {album_doc[DOCUMENT_ID_KEY]} has no name, skipping")
                    continue
                photos = await self._list_photo_documents(user_id, album_doc[DOCUMENT_ID_KEY])
                albums[name] = sort_photos_by_date(photos.values())

            logger.debug(f"Loaded {len(albums)} albums for user {user_id}")
            return albums

        except PersistenceError:
            raise
        except Exception as e:
            logger.error(f"Error loading albums for user {user_id}: {e}")
            raise PersistenceError("Error loading albums")

    async def save_albums(self, user_id: str, albums: Dict[str, Any]) -> AlbumsMap:
        """
        Persist the cleaned album map, replacing what is stored

        Returns:
            AlbumsMap: Exactly what was stored (cleaned, with photo ids assigned)
        """
        cleaned = clean_albums(albums)
        now = to_iso_string(datetime.now(timezone.utc))

        try:
            existing = {
                doc[DOCUMENT_ID_KEY]: doc
                for doc in await self.store.list_documents(self._albums_col(user_id))
            }

            stored_albums: AlbumsMap = {}
            for name, photos in cleaned.items():
                key = album_key(name)
                previous = existing.get(key)
                created_at = serialize_value(previous.get("createdAt")) if previous else None

                await self.store.set_document(
                    self._album_doc(user_id, key),
                    {"name": name, "createdAt": created_at or now, "lastUpdated": now},
                )

                stored_photos = await self._list_photo_documents(user_id, key) if previous else {}
                kept = []
                for photo in photos:
                    if not photo.photo_id:
                        photo = photo.model_copy(update={"photo_id": new_photo_id()})
                    if stored_photos.get(photo.photo_id) != photo:
                        record = photo.to_record()
                        record.pop("photoId", None)
                        await self.store.set_document(
                            self._photo_doc(user_id, key, photo.photo_id), record
                        )
                    kept.append(photo)

                kept_ids = {photo.photo_id for photo in kept}
                for stale_id in set(stored_photos) - kept_ids:
                    await self.store.delete_document(self._photo_doc(user_id, key, stale_id))

                stored_albums[name] = sort_photos_by_date(kept)

            wanted_keys = {album_key(name) for name in cleaned}
            for key in set(existing) - wanted_keys:
                await self._delete_album_documents(user_id, key)

            await self.store.set_document(self._user_doc(user_id), {"lastUpdated": now})

            logger.info(f"Albums saved for user {user_id} ({len(stored_albums)} albums)")
            return stored_albums

        except PersistenceError:
            raise
        except Exception as e:
            logger.error(f"Error saving albums for user {user_id}: {e}")
            raise PersistenceError("Error saving albums")

    async def create_album(self, user_id: str, album_name: str) -> None:
        """Create an empty album document (no-op on the photos of an existing one)"""
        now = to_iso_string(datetime.now(timezone.utc))
        await self.store.set_document(
            self._album_doc(user_id, album_key(album_name)),
            {"name": album_name, "createdAt": now, "lastUpdated": now},
        )

    async def add_photos(self, user_id: str, album_name: str, photos: Iterable[Any]) -> List[Photo]:
        """Write photo documents into an album without touching the others"""
        key = album_key(album_name)
        added = []
        for photo in clean_photos(photos):
            if not photo.photo_id:
                photo = photo.model_copy(update={"photo_id": new_photo_id()})
            record = photo.to_record()
            record.pop("photoId", None)
            await self.store.set_document(self._photo_doc(user_id, key, photo.photo_id), record)
            added.append(photo)
        return added

    async def _delete_album_documents(self, user_id: str, key: str) -> None:
        for doc in await self.store.list_documents(self._photos_col(user_id, key)):
            await self.store.delete_document(self._photo_doc(user_id, key, doc[DOCUMENT_ID_KEY]))
        await self.store.delete_document(self._album_doc(user_id, key))

    async def delete_album(self, user_id: str, album_name: str) -> AlbumsMap:
        """
        Remove an album and re-persist the remaining map

        Photo binaries of the removed album stay in storage until the next
        reconciliation sweep.
        """
        try:
            albums = await self.load_albums(user_id)
            albums.pop(album_name, None)
            remaining = await self.save_albums(user_id, albums)
            logger.info(f"Album deleted: {album_name} for user {user_id}")
            return remaining
        except Exception as e:
            logger.error(f"Error deleting album: {e}")
            raise PersistenceError("Failed to delete album")

    # ==================== Photo Operations ====================

    def _object_path(self, photo: Photo) -> Optional[str]:
        return photo.storage_path or self.storage.path_from_url(photo.url)

    async def delete_photo(self, user_id: str, album_name: str, photo: Photo) -> None:
        """
        Two-phase delete: binary object first, then the photo document

        If the object cannot be deleted the document is left in place.
        If the document cannot be deleted after the object is gone,
        PhotoDeletionInterruptedError names the dangling document; ``reconcile``
        removes it later.
        """
        target = self._object_path(photo) or photo.url
        try:
            await self.storage.delete(target)
        except AlbumServiceError as e:
            logger.error(f"Error deleting image from storage: {e}")
            raise PersistenceError(f"Failed to delete photo: {e}")

        if not photo.photo_id:
            return

        document_path = self._photo_doc(user_id, album_key(album_name), photo.photo_id)
        try:
            await self.store.delete_document(document_path)
        except PersistenceError as e:
            logger.error(f"Photo object deleted but document remains at {document_path}: {e}")
            raise PhotoDeletionInterruptedError(
                f"Photo deleted from storage but its record could not be removed: {e}",
                document_path,
            )

        logger.info(f"Photo {photo.photo_id} deleted from album {album_name}")

    # ==================== Reconciliation ====================

    async def reconcile(self, user_id: str) -> ReconciliationReport:
        """
        Repair interrupted deletes for one user

        - photo documents whose storage object is gone are removed
        - storage objects under the user's prefix that no document references are deleted
        """
        report = ReconciliationReport(user_id=user_id)
        referenced = set()

        for album_doc in await self.store.list_documents(self._albums_col(user_id)):
            key = album_doc[DOCUMENT_ID_KEY]
            photos = await self._list_photo_documents(user_id, key)
            for photo_id, photo in photos.items():
                path = self._object_path(photo)
                if not path:
                    continue
                if await self.storage.exists(path):
                    referenced.add(path)
                    continue
                document_path = self._photo_doc(user_id, key, photo_id)
                await self.store.delete_document(document_path)
                report.removed_documents.append(document_path)

        prefix = f"{USERS_COLLECTION}/{user_id}/{ALBUMS_COLLECTION}/"
        for object_path in await self.storage.list_objects(prefix):
            if object_path not in referenced:
                await self.storage.delete(object_path)
                report.removed_objects.append(object_path)

        logger.info(
            f"Reconciled user {user_id}: {len(report.removed_documents)} documents, "
            f"{len(report.removed_objects)} objects removed"
        )
        return report

    # ==================== Profile Operations ====================

    async def get_profile(self, user_id: str) -> Optional[UserProfile]:
        """Profile of a user, or None if none is stored"""
        data = await self.store.get_document(self._profile_doc(user_id))
        if data is None:
            return None
        try:
            return UserProfile.model_validate({k: serialize_value(v) for k, v in data.items()})
        except ValidationError as e:
            logger.error(f"Error loading user profile {user_id}: {e}")
            raise PersistenceError("Error loading user profile")

    async def save_profile(self, user_id: str, profile: UserProfile) -> UserProfile:
        await self.store.set_document(self._profile_doc(user_id), profile.to_record())
        logger.info(f"Profile saved for user {user_id}")
        return profile
