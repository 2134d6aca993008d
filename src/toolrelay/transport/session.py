"""Stdio tool-server sessions.

This module provides the StdioToolSession class, one request/response channel
to one tool-server process speaking MCP over stdin/stdout. Each session owns
its process through an AsyncExitStack, so closing the session terminates the
process and any call still in flight on it.
"""

import asyncio
import logging
from contextlib import AsyncExitStack
from typing import Any, Protocol

from mcp import ClientSession
from mcp.client.stdio import StdioServerParameters, stdio_client

from toolrelay.errors import (
    ClosedSessionError,
    InvocationError,
    ServerConnectionError,
)
from toolrelay.transport.types import ServerLaunchSpec, ToolDescriptor, ToolResult

logger = logging.getLogger(__name__)


class ToolSession(Protocol):
    """Interface the registry expects from a session."""

    name: str

    async def connect(self) -> None: ...

    async def list_tools(self) -> list[ToolDescriptor]: ...

    async def call(self, tool_name: str, arguments: dict[str, Any]) -> ToolResult: ...

    async def close(self) -> None: ...


def _content_to_dict(part: Any) -> dict[str, Any]:
    if hasattr(part, "model_dump"):
        return part.model_dump()
    if isinstance(part, dict):
        return part
    return {"type": "unknown", "value": str(part)}


class StdioToolSession:
    """A live connection to one tool server over stdio.

    Attributes:
        name: Server name, unique within a registry
        launch_spec: How to start the server process
        init_timeout_s: Deadline for the protocol handshake
    """

    def __init__(
        self,
        name: str,
        launch_spec: ServerLaunchSpec,
        init_timeout_s: float = 30.0,
    ) -> None:
        self.name = name
        self.launch_spec = launch_spec
        self.init_timeout_s = init_timeout_s
        self._stack: AsyncExitStack | None = None
        self._session: ClientSession | None = None
        self._closed = False

    @property
    def is_connected(self) -> bool:
        return self._session is not None and not self._closed

    async def connect(self) -> None:
        """Start the server process and perform the protocol handshake.

        Raises:
            ServerConnectionError: If the process cannot be started or does not
                complete the handshake in time
            ClosedSessionError: If the session was already closed
        """
        if self._closed:
            raise ClosedSessionError(f"Session '{self.name}' is closed")
        if self._session is not None:
            return

        params = StdioServerParameters(
            command=self.launch_spec.command,
            args=self.launch_spec.args,
            env=self.launch_spec.env,
            cwd=self.launch_spec.cwd,
        )
        stack = AsyncExitStack()
        try:
            read_stream, write_stream = await stack.enter_async_context(
                stdio_client(params)
            )
            session = await stack.enter_async_context(
                ClientSession(read_stream, write_stream)
            )
            await asyncio.wait_for(session.initialize(), timeout=self.init_timeout_s)
        except Exception as e:
            await stack.aclose()
            raise ServerConnectionError(self.name, f"failed to connect: {e}") from e

        self._stack = stack
        self._session = session
        logger.info(f"Connected to tool server '{self.name}'")

    def _require_session(self) -> ClientSession:
        if self._closed:
            raise ClosedSessionError(f"Session '{self.name}' is closed")
        if self._session is None:
            raise ClosedSessionError(f"Session '{self.name}' is not connected")
        return self._session

    async def list_tools(self) -> list[ToolDescriptor]:
        """Fetch the server's tool listing.

        Returns:
            list[ToolDescriptor]: Tools in the order the server declared them

        Raises:
            ServerConnectionError: If the server is unreachable or the listing
                is malformed
        """
        session = self._require_session()
        try:
            response = await session.list_tools()
            tools = [ToolDescriptor.from_listing(tool) for tool in response.tools]
        except Exception as e:
            raise ServerConnectionError(self.name, f"failed to list tools: {e}") from e

        logger.debug(f"Server '{self.name}' declared {len(tools)} tools")
        return tools

    async def call(self, tool_name: str, arguments: dict[str, Any]) -> ToolResult:
        """Call a tool on this server.

        Args:
            tool_name: Name of the tool to call
            arguments: Call arguments

        Returns:
            ToolResult: The structured result content

        Raises:
            InvocationError: If the request fails or the server reports an error
        """
        session = self._require_session()
        try:
            response = await session.call_tool(tool_name, arguments)
        except Exception as e:
            raise InvocationError(tool_name, f"Error calling tool '{tool_name}': {e}") from e

        result = ToolResult(
            content=[_content_to_dict(part) for part in response.content or []],
            is_error=bool(response.isError),
        )
        if result.is_error:
            raise InvocationError(tool_name, result.text or f"Error in tool '{tool_name}'")
        return result

    async def close(self) -> None:
        """Close the session and terminate the server process. Idempotent."""
        if self._closed:
            return
        self._closed = True
        stack, self._stack = self._stack, None
        self._session = None
        if stack is not None:
            await stack.aclose()
            logger.info(f"Closed tool server '{self.name}'")


def create_sessions(
    servers: dict[str, ServerLaunchSpec],
    init_timeout_s: float = 30.0,
) -> list[StdioToolSession]:
    """Build one unconnected session per configured server, in order."""
    return [
        StdioToolSession(name, spec, init_timeout_s=init_timeout_s)
        for name, spec in servers.items()
    ]
