"""
Timeline helpers

Date ordering of album photos and the day gaps shown between them.
"""

import math
from datetime import datetime, timezone
from typing import Any, List, Sequence, Tuple

from .date_normalizer import parse_date
from .models import Photo, TimelineEntry

SECONDS_PER_DAY = 24 * 60 * 60

# Unparseable dates sort after every real date
_UNDATED = datetime.max.replace(tzinfo=timezone.utc)


def photo_sort_key(photo: Photo) -> Tuple[datetime, str, str]:
    # Upload time then id break ties between photos taken at the same moment
    return (
        parse_date(photo.date) or _UNDATED,
        photo.uploaded_at or "",
        photo.photo_id or "",
    )


def sort_photos_by_date(photos: Sequence[Photo]) -> List[Photo]:
    """New list ordered by date ascending; sorting twice changes nothing"""
    return sorted(photos, key=photo_sort_key)


def calculate_days_between(date1: Any, date2: Any) -> int:
    """Whole days between two dates, rounded up; order does not matter"""
    d1 = parse_date(date1)
    d2 = parse_date(date2)
    if d1 is None or d2 is None:
        raise ValueError(f"Cannot compare dates {date1!r} and {date2!r}")

    seconds = abs((d2 - d1).total_seconds())
    return math.ceil(seconds / SECONDS_PER_DAY)


def build_timeline(photos: Sequence[Photo]) -> List[TimelineEntry]:
    """Date-ordered entries, each with the gap in days to the following photo"""
    ordered = sort_photos_by_date(photos)
    entries = []
    for index, photo in enumerate(ordered):
        days_to_next = None
        if index < len(ordered) - 1:
            try:
                days_to_next = calculate_days_between(photo.date, ordered[index + 1].date)
            except ValueError:
                days_to_next = None
        entries.append(TimelineEntry(index=index, photo=photo, days_to_next=days_to_next))
    return entries
