"""
Photo Record Builder

Builds the canonical photo record for a file that has been stored.
"""

from datetime import datetime, timezone
from typing import Optional

from .date_normalizer import to_iso_string
from .models import Photo, PhotoUpload


def build_storage_path(user_id: str, album_name: str, filename: str, timestamp_ms: Optional[int] = None) -> str:
    """Storage location ``users/{uid}/albums/{album}/{timestamp}-{filename}``"""
    if timestamp_ms is None:
        timestamp_ms = int(datetime.now(timezone.utc).timestamp() * 1000)
    return f"users/{user_id}/albums/{album_name}/{timestamp_ms}-{filename}"


def build_photo_record(
    url: str,
    date: str,
    upload: PhotoUpload,
    user_id: Optional[str] = None,
    storage_path: Optional[str] = None,
) -> Photo:
    """
    Photo record for a stored file

    ``uploadedAt`` is the time the record is built, not when the upload finished.
    """
    return Photo(
        url=url,
        date=date,
        filename=upload.filename,
        content_type=upload.content_type,
        uploaded_at=to_iso_string(datetime.now(timezone.utc)),
        uploaded_by=user_id,
        storage_path=storage_path,
    )
