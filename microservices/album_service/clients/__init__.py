"""
Clients module for album_service

HTTP clients for the backend-as-a-service collaborators
"""

from .auth_client import AuthClient
from .firestore_client import FirestoreClient
from .storage_client import StorageClient

__all__ = [
    "AuthClient",
    "FirestoreClient",
    "StorageClient",
]
