"""
Root conftest.py - Global fixtures and configuration for all test layers.

Test Layers:
    - component/: Component tests (mocked collaborators, fake HTTP backend)
    - unit/     : Unit tests (pure functions, no I/O)
"""
import os
import sys
from typing import Any, Dict, List

import pytest

# Add project root to path
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)

# Import shared fixtures from tests/fixtures
from tests.fixtures import (
    make_user_id,
    make_email,
    make_auth_user,
)


# =============================================================================
# Test Configuration
# =============================================================================

class TestConfig:
    """Centralized test configuration"""

    FIREBASE_PROJECT_ID = "coral-test"
    FIREBASE_STORAGE_BUCKET = "coral-test.appspot.com"
    FIREBASE_API_KEY = "test-api-key"

    AUTH_URL = "https://identitytoolkit.test/v1"
    FIRESTORE_URL = "https://firestore.test/v1"
    STORAGE_URL = "https://storage.test/v0"

    @classmethod
    def backend_config(cls):
        from core.config import BackendConfig
        return BackendConfig(
            api_key=cls.FIREBASE_API_KEY,
            project_id=cls.FIREBASE_PROJECT_ID,
            storage_bucket=cls.FIREBASE_STORAGE_BUCKET,
            auth_url=cls.AUTH_URL,
            firestore_url=cls.FIRESTORE_URL,
            storage_url=cls.STORAGE_URL,
        )


@pytest.fixture(scope="session")
def test_config() -> TestConfig:
    """Provide test configuration"""
    return TestConfig()


@pytest.fixture
def backend_config(test_config: TestConfig):
    """Backend config pointing at fake hosts"""
    return test_config.backend_config()


# =============================================================================
# Sample Data Fixtures
# =============================================================================

@pytest.fixture
def sample_user():
    """Signed-in user as the auth collaborator returns it"""
    return make_auth_user(user_id=make_user_id(), email=make_email("diver"))


# =============================================================================
# Assertion Helpers
# =============================================================================

class AssertionHelpers:
    """Custom assertion helpers for tests"""

    @staticmethod
    def assert_has_fields(data: Dict, fields: List[str]):
        """Assert dict has required fields"""
        missing = [f for f in fields if f not in data]
        assert not missing, f"Missing fields: {missing}"

    @staticmethod
    def assert_sorted_by_date(photos: List[Any]):
        """Assert photos are in ascending date order"""
        from microservices.album_service.date_normalizer import parse_date
        dates = [parse_date(p.date) for p in photos]
        assert dates == sorted(dates), f"Photos not sorted by date: {[p.date for p in photos]}"


@pytest.fixture
def assertions() -> AssertionHelpers:
    """Provide assertion helpers"""
    return AssertionHelpers()


# =============================================================================
# Markers
# =============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line("markers", "component: Component tests")
    config.addinivalue_line("markers", "unit: Unit tests")
