"""
Pytest configuration and shared fixtures.

Provides a client with a mocked HTTP session and canned API responses.
"""

import json
from typing import Any
from unittest.mock import MagicMock

import pytest
import requests

from src.sweetprocess.client import SweetProcessClient


TEST_TOKEN = "test_token"
BASE_URL = "https://www.sweetprocess.com/api/v1"


def make_response(status_code: int = 200, body: Any = None) -> requests.Response:
    """Build a real requests.Response with the given status and JSON body."""
    response = requests.Response()
    response.status_code = status_code
    response._content = b"" if body is None else json.dumps(body).encode()
    response.encoding = "utf-8"
    return response


# ============================================================================
# Environment Fixtures
# ============================================================================

@pytest.fixture
def mock_env(monkeypatch, tmp_path):
    """Set a complete, valid environment and isolate from any local .env."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("SWEETPROCESS_API_TOKEN", TEST_TOKEN)
    monkeypatch.setenv("SWEETPROCESS_BASE_URL", "https://sweetprocess.test/api/v1/")
    monkeypatch.setenv("SWEETPROCESS_TIMEOUT", "10")
    monkeypatch.setenv("LOG_LEVEL", "debug")


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """
    Remove all SweetProcess variables from the environment.

    Each variable is set before deletion so monkeypatch also undoes
    anything a loaded .env file writes into os.environ.
    """
    monkeypatch.chdir(tmp_path)
    for name in (
        "SWEETPROCESS_API_TOKEN",
        "SWEETPROCESS_BASE_URL",
        "SWEETPROCESS_TIMEOUT",
        "LOG_LEVEL",
    ):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


# ============================================================================
# Client Fixtures
# ============================================================================

@pytest.fixture
def client() -> SweetProcessClient:
    """Create a client whose session.request is a MagicMock."""
    client = SweetProcessClient(api_token=TEST_TOKEN)
    client._session.request = MagicMock(return_value=make_response(200, []))
    return client


def last_call(client: SweetProcessClient) -> dict:
    """Keyword arguments of the most recent session.request call."""
    return client._session.request.call_args.kwargs


# ============================================================================
# API Response Fixtures
# ============================================================================

@pytest.fixture
def procedures_response() -> dict:
    """Sample paginated procedures response."""
    return {
        "count": 1,
        "next": None,
        "previous": None,
        "results": [
            {
                "id": 42,
                "name": "Employee onboarding",
                "tags": ["hr", "onboarding"],
            },
        ],
    }


@pytest.fixture
def user_response() -> dict:
    """Sample user response."""
    return {
        "url": f"{BASE_URL}/users/7/",
        "id": 7,
        "name": "John Doe",
        "email": "john@example.com",
        "is_super_manager": False,
        "status": "invited",
    }
