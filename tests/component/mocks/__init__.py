"""
Component Test Mocks

Shared mock implementations for component testing.
These mocks replace real I/O dependencies (the Firebase REST endpoints).
"""

from .http_mock import MockHttpTransport, error_response, json_response

# Service-specific mocks should be in tests/component/golden/{service}/mocks.py

__all__ = [
    'MockHttpTransport',
    'error_response',
    'json_response',
]
