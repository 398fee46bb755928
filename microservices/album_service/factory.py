"""
Album Service Factory

Factory functions for creating service instances with real dependencies.
This is the ONLY place that builds the HTTP clients.

Usage:
    from .factory import create_album_service
    service = create_album_service()
"""
import logging
from typing import Optional

import httpx

from core.config import BackendConfig, get_settings
from core.logger import setup_service_logger

from .album_service import AlbumService

logger = logging.getLogger(__name__)


def create_album_service(
    config: Optional[BackendConfig] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> AlbumService:
    """
    Create AlbumService with real dependencies.

    Use this in production, NOT in unit tests (component tests may pass an
    ``httpx.MockTransport``).

    Args:
        config: Backend config; loaded from the environment if omitted
        transport: Optional httpx transport shared by all clients

    Returns:
        AlbumService: Configured service with Firebase-backed collaborators
    """
    # Import real clients here (not at module level)
    from .album_repository import AlbumRepository
    from .clients import AuthClient, FirestoreClient, StorageClient
    from .session import BackendSession

    settings = get_settings()
    setup_service_logger(settings.logging.service_name, settings.logging)

    config = config or settings.backend
    session = BackendSession()

    auth = AuthClient(config, transport=transport)
    storage = StorageClient(config, session, transport=transport)
    store = FirestoreClient(config, session, transport=transport)
    repository = AlbumRepository(store=store, storage=storage)

    logger.debug(f"Album service wired for project {config.project_id}")
    return AlbumService(
        auth=auth,
        storage=storage,
        repository=repository,
        session=session,
    )
