"""
Legacy album migration

Older clients kept every album of a user inside one flat document:

    albums/{uid}    {albums: {name: [photo, ...]}, lastUpdated}

``migrate_flat_albums`` moves that map into the normalized layout and removes
the flat document. Running it again after a successful migration is a no-op.
"""

import logging
from typing import Optional

from .album_repository import AlbumRepository, clean_albums
from .models import AlbumsMap
from .protocols import DocumentStoreProtocol, PersistenceError

logger = logging.getLogger(__name__)

LEGACY_ALBUMS_COLLECTION = "albums"


def legacy_document_path(user_id: str) -> str:
    return f"{LEGACY_ALBUMS_COLLECTION}/{user_id}"


async def migrate_flat_albums(
    store: DocumentStoreProtocol,
    repository: AlbumRepository,
    user_id: str,
) -> Optional[AlbumsMap]:
    """
    Convert a user's flat album document into the normalized schema

    Albums already stored in the normalized layout are kept; a legacy album
    with the same name replaces the stored one.

    Returns:
        Optional[AlbumsMap]: The migrated map, or None if there was nothing to migrate

    Raises:
        PersistenceError: If the legacy document is malformed or a write fails
    """
    path = legacy_document_path(user_id)
    legacy = await store.get_document(path)
    if legacy is None:
        logger.debug(f"No legacy albums for user {user_id}")
        return None

    albums = legacy.get("albums") or {}
    if not isinstance(albums, dict):
        logger.error(f"Legacy album document {path} is malformed")
        raise PersistenceError(f"Malformed legacy album document {path}")

    current = await repository.load_albums(user_id)
    merged = {**current, **clean_albums(albums)}
    migrated = await repository.save_albums(user_id, merged)

    # Only dropped once the normalized copy is written
    await store.delete_document(path)

    photo_count = sum(len(photos) for photos in migrated.values())
    logger.info(f"Migrated {len(albums)} legacy albums ({photo_count} photos) for user {user_id}")
    return migrated
