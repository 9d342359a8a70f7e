"""Fixtures for F3 tests - Web API and CLI."""

import pytest
from fastapi.testclient import TestClient

from quotememory.web.api import create_app
from quotememory.web.sessions import (
    PracticeSessionManager,
    reset_session_manager,
    set_session_manager,
)


@pytest.fixture
def client():
    """Test client with a fresh session manager and a fast countdown."""
    set_session_manager(PracticeSessionManager(memorize_seconds=2, tick_seconds=0.01))
    with TestClient(create_app()) as test_client:
        yield test_client
    reset_session_manager()


@pytest.fixture
def slow_client():
    """Test client whose countdown never finishes during a test."""
    set_session_manager(PracticeSessionManager(memorize_seconds=10, tick_seconds=60.0))
    with TestClient(create_app()) as test_client:
        yield test_client
    reset_session_manager()
