"""Pytest configuration and shared fixtures for toolrelay tests.

This module provides common fixtures used across all test modules,
including test app creation, async client setup, and in-memory stand-ins
for tool-server sessions and model replies.
"""

import asyncio
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from toolrelay import create_app
from toolrelay.config import ToolRelaySettings
from toolrelay.errors import ServerConnectionError
from toolrelay.transport.types import (
    ParameterInfo,
    ParameterSchema,
    ToolDescriptor,
    ToolResult,
)


class FakeToolSession:
    """In-memory session standing in for a tool-server process.

    `results` maps a tool name to its outcome: a string (returned as a single
    text part), a ToolResult, or an exception to raise.
    """

    def __init__(
        self,
        name: str,
        tools: list[ToolDescriptor] | None = None,
        results: dict[str, Any] | None = None,
        fail_connect: bool = False,
        fail_close: bool = False,
        delay_s: float = 0.0,
    ) -> None:
        self.name = name
        self.tools = list(tools or [])
        self.results = results or {}
        self.fail_connect = fail_connect
        self.fail_close = fail_close
        self.delay_s = delay_s
        self.connected = False
        self.close_count = 0
        self.calls: list[tuple[str, dict[str, Any]]] = []

    async def connect(self) -> None:
        if self.fail_connect:
            raise ServerConnectionError(self.name, "connection refused")
        self.connected = True

    async def list_tools(self) -> list[ToolDescriptor]:
        return list(self.tools)

    async def call(self, tool_name: str, arguments: dict[str, Any]) -> ToolResult:
        self.calls.append((tool_name, arguments))
        if self.delay_s:
            await asyncio.sleep(self.delay_s)
        outcome = self.results.get(tool_name, f"{self.name}:{tool_name}")
        if isinstance(outcome, Exception):
            raise outcome
        if isinstance(outcome, ToolResult):
            return outcome
        return ToolResult(content=[{"type": "text", "text": outcome}])

    async def close(self) -> None:
        self.close_count += 1
        if self.fail_close:
            raise RuntimeError(f"{self.name} refused to close")


def build_tool(
    name: str, *params: str, required: list[str] | None = None, description: str = ""
) -> ToolDescriptor:
    """Build a ToolDescriptor with string parameters declared in order."""
    return ToolDescriptor(
        name=name,
        description=description or f"The {name} tool",
        parameters=ParameterSchema(
            properties={param: ParameterInfo(type="string") for param in params},
            required=tuple(required if required is not None else params),
        ),
    )


def build_reply(
    content: str = "", tool_calls: list[tuple[str, dict[str, Any]]] | None = None
) -> dict[str, Any]:
    """Build an Ollama chat response dict."""
    message: dict[str, Any] = {"role": "assistant", "content": content}
    if tool_calls:
        message["tool_calls"] = [
            {"function": {"name": name, "arguments": arguments}}
            for name, arguments in tool_calls
        ]
    return {"model": "test-model", "message": message, "done": True}


@pytest.fixture
def fake_session():
    """Return the FakeToolSession class."""
    return FakeToolSession


@pytest.fixture
def make_tool():
    """Return the build_tool helper."""
    return build_tool


@pytest.fixture
def make_reply():
    """Return the build_reply helper."""
    return build_reply


@pytest.fixture
def test_settings():
    """Create test settings with no tool servers configured.

    Returns:
        ToolRelaySettings: Settings instance configured for testing.
    """
    return ToolRelaySettings(
        host="127.0.0.1",
        port=8000,
        ollama_host="http://localhost:11434",
        model="test-model",
        mcp_servers={},
        log_level="DEBUG",
        cors_origins=["*"],
    )


@pytest.fixture
def test_app(test_settings):
    """Create a FastAPI test application instance.

    Args:
        test_settings: Test settings fixture.

    Returns:
        FastAPI: Configured test application.
    """
    return create_app(settings=test_settings)


@pytest_asyncio.fixture
async def async_client(test_app):
    """Create an async HTTP client for testing FastAPI endpoints.

    Args:
        test_app: Test application fixture.

    Yields:
        AsyncClient: Async HTTP client for making test requests.
    """
    # Trigger the lifespan startup manually for tests
    async with test_app.router.lifespan_context(test_app):
        transport = ASGITransport(app=test_app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
