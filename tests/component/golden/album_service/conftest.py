"""
Album Service Component Fixtures

Service and repository instances wired to in-memory collaborators.
"""
import pytest
import pytest_asyncio

from microservices.album_service.album_repository import AlbumRepository
from microservices.album_service.album_service import AlbumService
from microservices.album_service.session import BackendSession

from tests.component.golden.album_service.mocks import (
    TEST_EMAIL,
    TEST_PASSWORD,
    TEST_USER_ID,
    MockAlbumRepository,
    MockAuthClient,
    MockDocumentStore,
    MockStorageClient,
)


@pytest.fixture
def mock_store() -> MockDocumentStore:
    return MockDocumentStore()


@pytest.fixture
def mock_storage() -> MockStorageClient:
    return MockStorageClient()


@pytest.fixture
def mock_auth() -> MockAuthClient:
    auth = MockAuthClient()
    auth.add_account(TEST_EMAIL, TEST_PASSWORD, user_id=TEST_USER_ID)
    return auth


@pytest.fixture
def mock_album_repository() -> MockAlbumRepository:
    """Mock Album Repository with protocol implementation"""
    return MockAlbumRepository()


@pytest.fixture
def album_repository(mock_store, mock_storage) -> AlbumRepository:
    """Real repository over the in-memory store and storage"""
    return AlbumRepository(store=mock_store, storage=mock_storage)


@pytest.fixture
def album_service(mock_auth, mock_storage, mock_album_repository) -> AlbumService:
    return AlbumService(
        auth=mock_auth,
        storage=mock_storage,
        repository=mock_album_repository,
        session=BackendSession(),
    )


@pytest_asyncio.fixture
async def signed_in_service(album_service: AlbumService) -> AlbumService:
    """Service with the test user signed in"""
    assert await album_service.sign_in(TEST_EMAIL, TEST_PASSWORD)
    return album_service
