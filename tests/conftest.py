"""
Pytest configuration and shared fixtures for gateway tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Keeps INSTABOT_* environment variables from leaking into tests
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

from fastapi.testclient import TestClient  # noqa: E402

from api.app import create_app  # noqa: E402
from fixtures import RecordingDispatcher, RecordingNotifier, make_config  # noqa: E402


# =============================================================================
# Environment isolation
# =============================================================================

@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Strip INSTABOT_* variables so host settings never affect a test."""
    import os
    for name in list(os.environ):
        if name.startswith("INSTABOT_"):
            monkeypatch.delenv(name, raising=False)


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def dispatcher():
    """A dispatcher that records what would have been executed."""
    return RecordingDispatcher()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def make_client(dispatcher, notifier):
    """Factory building a TestClient for a given signing setup."""
    def _make(signing_method: str = "none", secret: str = "", **kwargs) -> TestClient:
        config = make_config(signing_method, secret, **kwargs)
        app = create_app(config, dispatcher=dispatcher, notifier=notifier)
        return TestClient(app)
    return _make


@pytest.fixture
def password_client(make_client):
    """Client for a gateway using password signing with secret 'abc123'."""
    return make_client("password", "abc123")


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
