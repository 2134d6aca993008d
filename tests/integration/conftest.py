"""Pytest configuration for integration tests.

This module provides integration-test-specific fixtures that ensure
proper test isolation and mocking for API endpoint tests: the Ollama client
is a mock and tool servers are in-memory sessions.
"""

from unittest.mock import AsyncMock, patch

import pytest


@pytest.fixture
def tool_sessions(fake_session, make_tool):
    """Sessions handed to the registry at startup.

    Tests may clear or extend this list before the app starts.
    """
    return [
        fake_session(
            "filesystem",
            [
                make_tool("list_directory", "path"),
                make_tool("read_file", "path"),
            ],
            results={"list_directory": "[FILE] a.txt\n[FILE] b.txt"},
        ),
        fake_session("web", [make_tool("fetch", "url")]),
    ]


@pytest.fixture(autouse=True)
def mock_create_sessions(tool_sessions):
    """Replace stdio sessions with the in-memory tool_sessions."""
    with patch("toolrelay.app.create_sessions") as mock_create:
        mock_create.side_effect = lambda servers, init_timeout_s=30.0: list(tool_sessions)
        yield mock_create


@pytest.fixture(autouse=True)
def mock_ollama_client():
    """Mock OllamaClient for all integration tests.

    This fixture patches the OllamaClient class before the app is created,
    ensuring the lifespan uses our mock instead of creating a real client.
    """
    with patch("toolrelay.app.OllamaClient") as mock_client_class:
        mock_instance = AsyncMock()
        mock_instance.host = "http://localhost:11434"
        mock_instance.check_connection.return_value = True

        # Return the mock instance when OllamaClient is instantiated
        mock_client_class.return_value = mock_instance

        yield mock_instance
