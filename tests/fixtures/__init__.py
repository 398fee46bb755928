"""
Shared Test Fixtures

Centralized factories used across all test layers.

Structure:
    - common.py: Base ID generators, timestamps
    - album_fixtures.py: Album service factories
"""

# Common utilities
from .common import (
    make_user_id,
    make_email,
    make_timestamp,
    make_id_token,
)

# Album service fixtures
from .album_fixtures import (
    make_photo_id,
    make_photo_url,
    make_photo_record,
    make_photo,
    make_albums,
    make_jpeg,
    make_upload,
    make_auth_user,
)

__all__ = [
    # Common
    "make_user_id",
    "make_email",
    "make_timestamp",
    "make_id_token",
    # Album
    "make_photo_id",
    "make_photo_url",
    "make_photo_record",
    "make_photo",
    "make_albums",
    "make_jpeg",
    "make_upload",
    "make_auth_user",
]
