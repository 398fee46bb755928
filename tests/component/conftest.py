"""
Component Test Layer Configuration (Layer 3)

Structure:
    tests/component/
    ├── golden/      Characterization of service behavior
    └── mocks/       Mock implementations

Usage:
    pytest tests/component -v
    pytest tests/component/golden -v
"""
import os
import sys

import pytest

# Set testing environment BEFORE any imports
os.environ["ENV"] = "testing"
os.environ["ENVIRONMENT"] = "testing"

# Add project root
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from tests.component.mocks import MockHttpTransport


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Configure custom markers"""
    config.addinivalue_line(
        "markers", "component: marks tests as component tests"
    )
    config.addinivalue_line(
        "markers", "golden: safety net tests - DO NOT MODIFY"
    )


# =============================================================================
# HTTP Mocks
# =============================================================================

@pytest.fixture
def mock_http() -> MockHttpTransport:
    """Fake Firebase REST backend"""
    return MockHttpTransport()
