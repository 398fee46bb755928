"""
Album Models Unit Golden Tests

Tests for album model validation and serialization logic.
Unit tests verify model-level behavior without dependencies.

Usage:
    pytest tests/unit/golden/album_service/test_album_models_golden.py -v
"""
import pytest
from pydantic import ValidationError

from microservices.album_service.models import (
    AuthUser,
    Photo,
    PhotoUpload,
    ReconciliationReport,
    SessionStatus,
    TimelineEntry,
    UserProfile,
)

pytestmark = [pytest.mark.unit, pytest.mark.golden]


# ============================================================================
# Photo Model Tests
# ============================================================================

class TestPhotoModel:
    """GOLDEN: Photo record tests"""

    def test_accepts_persisted_camel_case_fields(self):
        """GOLDEN: Photo reads the stored camelCase names"""
        photo = Photo.model_validate({
            "url": "https://example.com/a.jpg",
            "date": "2024-01-15T10:30:00",
            "contentType": "image/jpeg",
            "uploadedAt": "2024-01-16T08:00:00.000Z",
            "uploadedBy": "usr_1",
            "storagePath": "users/usr_1/albums/Reef/1-a.jpg",
            "photoId": "p1",
        })

        assert photo.content_type == "image/jpeg"
        assert photo.uploaded_at == "2024-01-16T08:00:00.000Z"
        assert photo.uploaded_by == "usr_1"
        assert photo.storage_path == "users/usr_1/albums/Reef/1-a.jpg"
        assert photo.photo_id == "p1"

    def test_accepts_snake_case_fields(self):
        """GOLDEN: Python code may use attribute names"""
        photo = Photo(url="https://example.com/a.jpg", date="2024-01-15", content_type="image/png")
        assert photo.content_type == "image/png"

    def test_to_record_uses_aliases_and_drops_none(self):
        """GOLDEN: Persisted form has camelCase keys and no None values"""
        photo = Photo(url="https://example.com/a.jpg", date="2024-01-15", filename="a.jpg")

        assert photo.to_record() == {
            "url": "https://example.com/a.jpg",
            "date": "2024-01-15",
            "filename": "a.jpg",
        }

    @pytest.mark.parametrize("missing", ["url", "date"])
    def test_requires_url_and_date(self, missing):
        """GOLDEN: url and date are mandatory"""
        data = {"url": "https://example.com/a.jpg", "date": "2024-01-15"}
        del data[missing]

        with pytest.raises(ValidationError):
            Photo.model_validate(data)

    def test_rejects_blank_url(self):
        with pytest.raises(ValidationError):
            Photo(url="  ", date="2024-01-15")

    def test_ignores_unknown_fields(self):
        photo = Photo.model_validate({"url": "u", "date": "2024-01-15", "legacyFlag": True})
        assert "legacyFlag" not in photo.to_record()


# ============================================================================
# Other Models
# ============================================================================

class TestUserProfile:
    """GOLDEN: Profile document"""

    def test_round_trip_through_record(self):
        profile = UserProfile(first_name="Ada", email="ada@example.com", created_at="2024-01-01T00:00:00.000Z")

        record = profile.to_record()

        assert record == {"firstName": "Ada", "email": "ada@example.com", "createdAt": "2024-01-01T00:00:00.000Z"}
        assert UserProfile.model_validate(record) == profile

    def test_requires_first_name(self):
        with pytest.raises(ValidationError):
            UserProfile.model_validate({"email": "ada@example.com"})


class TestSessionStatus:
    """GOLDEN: Session status values"""

    def test_values(self):
        assert SessionStatus.SIGNED_OUT.value == "signed_out"
        assert SessionStatus.SIGNING_IN.value == "signing_in"
        assert SessionStatus.SIGNING_UP.value == "signing_up"
        assert SessionStatus.SIGNED_IN.value == "signed_in"
        assert SessionStatus.SIGNING_OUT.value == "signing_out"

    def test_is_string_enum(self):
        assert SessionStatus("signed_in") is SessionStatus.SIGNED_IN


class TestMiscModels:
    """GOLDEN: Small value models"""

    def test_upload_defaults(self):
        upload = PhotoUpload(filename="a.bin")
        assert upload.content_type == "application/octet-stream"
        assert upload.data == b""
        assert upload.last_modified is None

    def test_auth_user_optional_tokens(self):
        user = AuthUser(user_id="u1")
        assert user.id_token is None

    def test_timeline_entry_defaults(self):
        entry = TimelineEntry(index=0, photo=Photo(url="u", date="2024-01-01"))
        assert entry.days_to_next is None

    def test_reconciliation_report_clean(self):
        assert ReconciliationReport(user_id="u1").clean
        assert not ReconciliationReport(user_id="u1", removed_objects=["x"]).clean
