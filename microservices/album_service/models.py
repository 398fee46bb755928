"""
Album Service Models

Models for the coral tracker album/photo synchronization layer.
Persisted photo and profile fields keep the camelCase names stored in
Firestore; Python code uses the snake_case attribute names.
"""

from typing import Optional, Dict, List
from pydantic import BaseModel, ConfigDict, Field, field_validator
from enum import Enum


# ==================== Enumerations ====================

class SessionStatus(str, Enum):
    """Session status of the sync orchestrator"""
    SIGNED_OUT = "signed_out"
    SIGNING_IN = "signing_in"
    SIGNING_UP = "signing_up"
    SIGNED_IN = "signed_in"
    SIGNING_OUT = "signing_out"


# ==================== Core Models ====================

class Photo(BaseModel):
    """Photo record stored inside an album"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    url: str
    date: str
    filename: Optional[str] = None
    content_type: Optional[str] = Field(None, alias="contentType")
    uploaded_at: Optional[str] = Field(None, alias="uploadedAt")
    uploaded_by: Optional[str] = Field(None, alias="uploadedBy")
    storage_path: Optional[str] = Field(None, alias="storagePath")
    photo_id: Optional[str] = Field(None, alias="photoId")

    @field_validator("url", "date")
    @classmethod
    def validate_required(cls, v):
        if not v or not v.strip():
            raise ValueError("must not be empty")
        return v

    def to_record(self) -> Dict[str, str]:
        """Persisted form: camelCase keys, unset attributes dropped"""
        return self.model_dump(by_alias=True, exclude_none=True)


# Album name -> photos ordered by date
AlbumsMap = Dict[str, List[Photo]]


class UserProfile(BaseModel):
    """Per-user profile document"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    first_name: str = Field(..., alias="firstName")
    email: Optional[str] = None
    created_at: Optional[str] = Field(None, alias="createdAt")

    def to_record(self) -> Dict[str, str]:
        return self.model_dump(by_alias=True, exclude_none=True)


class AuthUser(BaseModel):
    """Signed-in user as issued by the auth collaborator"""
    user_id: str
    email: Optional[str] = None
    id_token: Optional[str] = None
    refresh_token: Optional[str] = None


class PhotoUpload(BaseModel):
    """A file selected for upload"""
    filename: str
    content_type: str = "application/octet-stream"
    data: bytes = b""
    # Epoch milliseconds, as reported by browsers
    last_modified: Optional[int] = None


class StoredObject(BaseModel):
    """Result of a binary upload"""
    url: str
    path: str


# ==================== Presentation Models ====================

class TimelineEntry(BaseModel):
    """One photo in the timeline with the gap to the next photo"""
    index: int
    photo: Photo
    days_to_next: Optional[int] = None


class ReconciliationReport(BaseModel):
    """Outcome of a reconciliation sweep"""
    user_id: str
    removed_documents: List[str] = Field(default_factory=list)
    removed_objects: List[str] = Field(default_factory=list)

    @property
    def clean(self) -> bool:
        return not self.removed_documents and not self.removed_objects


# ==================== Export Models ====================

__all__ = [
    # Enums
    'SessionStatus',
    # Core Models
    'Photo', 'AlbumsMap', 'UserProfile', 'AuthUser', 'PhotoUpload', 'StoredObject',
    # Presentation Models
    'TimelineEntry', 'ReconciliationReport',
]
