"""
Date Normalizer Unit Golden Tests

EXIF reformatting, ISO-8601 rendering and capture date fallbacks.
"""
from datetime import datetime, timedelta, timezone

import pytest

from microservices.album_service.date_normalizer import (
    extract_capture_date,
    normalize_exif_datetime,
    parse_date,
    read_exif_capture_time,
    to_iso_string,
)

from tests.fixtures import make_jpeg, make_upload

pytestmark = [pytest.mark.unit, pytest.mark.golden]


class TestNormalizeExifDatetime:
    """GOLDEN: EXIF timestamp reformatting"""

    def test_reformats_exif_timestamp(self):
        assert normalize_exif_datetime("2024:01:15 10:30:00") == "2024-01-15T10:30:00"

    def test_accepts_bytes_and_trailing_nul(self):
        assert normalize_exif_datetime(b"2024:01:15 10:30:00\x00") == "2024-01-15T10:30:00"

    @pytest.mark.parametrize("value", [
        "2024-01-15T10:30:00",
        "2024:01:15",
        "15/01/2024 10:30:00",
        "",
        None,
        20240115,
    ])
    def test_rejects_other_forms(self, value):
        assert normalize_exif_datetime(value) is None


class TestIsoStrings:
    """GOLDEN: ISO-8601 rendering and parsing"""

    def test_to_iso_string_millisecond_utc(self):
        dt = datetime(2024, 1, 15, 10, 30, 0, 123456, tzinfo=timezone.utc)
        assert to_iso_string(dt) == "2024-01-15T10:30:00.123Z"

    def test_to_iso_string_converts_offsets(self):
        dt = datetime(2024, 1, 15, 12, 30, tzinfo=timezone(timedelta(hours=2)))
        assert to_iso_string(dt) == "2024-01-15T10:30:00.000Z"

    def test_to_iso_string_naive_is_utc(self):
        assert to_iso_string(datetime(2024, 1, 15, 10, 30)) == "2024-01-15T10:30:00.000Z"

    @pytest.mark.parametrize("value,expected", [
        ("2024-01-15T10:30:00.000Z", datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)),
        ("2024-01-15T10:30:00", datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)),
        ("2024-01-15", datetime(2024, 1, 15, tzinfo=timezone.utc)),
        ("2024-01-15T12:30:00+02:00", datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)),
    ])
    def test_parse_date(self, value, expected):
        assert parse_date(value) == expected

    @pytest.mark.parametrize("value", ["not a date", "", None, 42])
    def test_parse_date_invalid(self, value):
        assert parse_date(value) is None

    def test_parse_date_datetime_passthrough(self):
        assert parse_date(datetime(2024, 1, 15)) == datetime(2024, 1, 15, tzinfo=timezone.utc)


class TestExtractCaptureDate:
    """GOLDEN: EXIF -> last modified -> now"""

    def test_exif_date_first(self):
        upload = make_upload(exif_datetime="2024:01:15 10:30:00", last_modified=0)
        assert extract_capture_date(upload) == "2024-01-15T10:30:00"

    def test_read_exif_capture_time(self):
        assert read_exif_capture_time(make_jpeg("2023:06:01 12:00:00")) == "2023-06-01T12:00:00"
        assert read_exif_capture_time(make_jpeg()) is None

    def test_falls_back_to_last_modified(self):
        upload = make_upload(last_modified=1705314600000)
        assert extract_capture_date(upload) == "2024-01-15T10:30:00.000Z"

    def test_unreadable_image_falls_back(self):
        upload = make_upload(data=b"definitely not an image", last_modified=1705314600000)
        assert extract_capture_date(upload) == "2024-01-15T10:30:00.000Z"

    def test_falls_back_to_now(self):
        upload = make_upload(data=b"", last_modified=None)
        before = datetime.now(timezone.utc) - timedelta(seconds=1)

        result = parse_date(extract_capture_date(upload))

        assert before <= result <= datetime.now(timezone.utc) + timedelta(seconds=1)

    @pytest.mark.parametrize("last_modified", [10**16, -(10**16)])
    def test_out_of_range_last_modified_falls_back_to_now(self, last_modified):
        upload = make_upload(data=b"junk", last_modified=last_modified)
        before = datetime.now(timezone.utc) - timedelta(seconds=1)

        result = parse_date(extract_capture_date(upload))

        assert before <= result <= datetime.now(timezone.utc) + timedelta(seconds=1)
