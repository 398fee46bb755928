#!/usr/bin/env python3
"""Backend-as-a-service configuration (Firebase)

Endpoints for the three collaborators the tracker talks to:
- Identity Toolkit (email/password auth)
- Cloud Firestore (album, photo and profile documents)
- Cloud Storage for Firebase (photo binaries)

The base URLs can be pointed at the Firebase emulator suite.
"""
import os
from dataclasses import dataclass
from typing import Optional


def _float(val: Optional[str]) -> Optional[float]:
    try:
        return float(val) if val else None
    except ValueError:
        return None


@dataclass
class BackendConfig:
    """Firebase project settings and REST endpoints"""

    # ===========================================
    # Project
    # ===========================================
    api_key: str = ""
    project_id: str = ""
    storage_bucket: str = ""

    # ===========================================
    # REST endpoints
    # ===========================================
    auth_url: str = "https://identitytoolkit.googleapis.com/v1"
    firestore_url: str = "https://firestore.googleapis.com/v1"
    storage_url: str = "https://firebasestorage.googleapis.com/v0"

    # None keeps the HTTP client's own default
    http_timeout: Optional[float] = None

    @property
    def documents_root(self) -> str:
        """Resource prefix of the default Firestore database"""
        return f"projects/{self.project_id}/databases/(default)/documents"

    @classmethod
    def from_env(cls) -> 'BackendConfig':
        """Load backend configuration from environment variables"""
        project_id = os.getenv("FIREBASE_PROJECT_ID", "")
        return cls(
            api_key=os.getenv("FIREBASE_API_KEY", ""),
            project_id=project_id,
            storage_bucket=os.getenv("FIREBASE_STORAGE_BUCKET") or (
                f"{project_id}.appspot.com" if project_id else ""
            ),
            auth_url=os.getenv("FIREBASE_AUTH_URL", "https://identitytoolkit.googleapis.com/v1"),
            firestore_url=os.getenv("FIRESTORE_URL", "https://firestore.googleapis.com/v1"),
            storage_url=os.getenv("FIREBASE_STORAGE_URL", "https://firebasestorage.googleapis.com/v0"),
            http_timeout=_float(os.getenv("BACKEND_HTTP_TIMEOUT")),
        )
