"""
Date Normalizer

Capture date of an uploaded photo as an ISO-8601 string.

Priority: EXIF DateTimeOriginal -> file last-modified time -> now.
Absence of metadata is never an error, only a fallback trigger.
"""

import io
import logging
import re
from datetime import datetime, timezone
from typing import Any, Optional

from PIL import Image

from .models import PhotoUpload

logger = logging.getLogger(__name__)

EXIF_IFD_POINTER = 0x8769
DATE_TIME_ORIGINAL = 36867

_EXIF_DATETIME = re.compile(r"^(\d{4}):(\d{2}):(\d{2}) (\d{2}:\d{2}:\d{2})$")


def normalize_exif_datetime(value: Any) -> Optional[str]:
    """
    Reformat an EXIF timestamp ``YYYY:MM:DD HH:MM:SS`` as ``YYYY-MM-DDTHH:MM:SS``.

    Returns None for anything that is not in EXIF form.
    """
    if isinstance(value, bytes):
        value = value.decode("ascii", errors="ignore")
    if not isinstance(value, str):
        return None

    match = _EXIF_DATETIME.match(value.strip().rstrip("\x00"))
    if not match:
        return None

    year, month, day, time = match.groups()
    return f"{year}-{month}-{day}T{time}"


def to_iso_string(dt: datetime) -> str:
    """UTC ISO-8601 with millisecond precision and a ``Z`` suffix"""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def parse_date(value: Any) -> Optional[datetime]:
    """
    Parse an ISO-8601 date or datetime into an aware UTC datetime.

    Naive values are taken as UTC. Returns None when the value cannot be parsed.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str) and value:
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def read_exif_capture_time(data: bytes) -> Optional[str]:
    """DateTimeOriginal from the Exif sub-IFD (or IFD0), normalized; None if absent"""
    if not data:
        return None

    with Image.open(io.BytesIO(data)) as img:
        exif = img.getexif()

    value = exif.get_ifd(EXIF_IFD_POINTER).get(DATE_TIME_ORIGINAL)
    if value is None:
        value = exif.get(DATE_TIME_ORIGINAL)
    return normalize_exif_datetime(value)


def extract_capture_date(upload: PhotoUpload) -> str:
    """
    Capture date for an uploaded file

    Args:
        upload: Selected file (bytes plus browser-reported metadata)

    Returns:
        str: ISO-8601 date; EXIF dates keep their local wall-clock form
    """
    try:
        exif_date = read_exif_capture_time(upload.data)
        if exif_date:
            return exif_date
    except Exception as e:
        logger.debug(f"No readable EXIF in {upload.filename}: {e}")

    if upload.last_modified is not None:
        try:
            modified = datetime.fromtimestamp(upload.last_modified / 1000, tz=timezone.utc)
            return to_iso_string(modified)
        except (ValueError, OverflowError, OSError) as e:
            logger.warning(f"Unusable modification time {upload.last_modified} for {upload.filename}: {e}")

    logger.warning(f"No capture or modification time for {upload.filename}, using current time")
    return to_iso_string(datetime.now(timezone.utc))
