"""ToolRegistry: one catalog over many tool-server sessions.

This module provides the ToolRegistry class which handles:
- Connecting configured sessions, skipping the ones that fail
- Merging their tool listings into one catalog
- Routing a tool name to the session that owns it
- Calling tools under a deadline
- Closing every session on cleanup
"""

import logging
from typing import Any, Iterable, Mapping

from toolrelay.errors import NoSessionsError
from toolrelay.tools.repair import suggest_parameter_mapping
from toolrelay.transport.session import ToolSession
from toolrelay.transport.timeout import DEFAULT_TIMEOUT_MS, with_timeout
from toolrelay.transport.types import ToolDescriptor, ToolResult

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Aggregates tools from several sessions and routes calls by name.

    When two sessions declare the same tool name, the session registered
    later owns it. Each such collision is logged.
    """

    def __init__(self, default_timeout_ms: int = DEFAULT_TIMEOUT_MS) -> None:
        """Initialize an empty registry.

        Args:
            default_timeout_ms: Deadline for tool calls without an explicit one
        """
        self.default_timeout_ms = default_timeout_ms
        self._sessions: dict[str, ToolSession] = {}
        self._routes: dict[str, str] = {}
        self._catalog: dict[str, ToolDescriptor] = {}
        self.cleanup_errors: list[tuple[str, Exception]] = []

    @property
    def session_names(self) -> list[str]:
        """Names of connected sessions in registration order."""
        return list(self._sessions)

    @property
    def is_initialized(self) -> bool:
        return bool(self._sessions)

    async def initialize(self, sessions: Iterable[ToolSession]) -> list[ToolDescriptor]:
        """Connect sessions in order and build the combined catalog.

        A session that fails to connect or list its tools is logged, closed
        and skipped; the remaining sessions are still connected. Sessions are
        connected one after another because each stdio transport is bound to
        the task that opened it.

        Args:
            sessions: Unconnected sessions, in configured order

        Returns:
            list[ToolDescriptor]: The combined catalog

        Raises:
            NoSessionsError: If no session connected
        """
        for session in sessions:
            if session.name in self._sessions:
                logger.error(
                    f"Duplicate server name '{session.name}', ignoring later entry"
                )
                await self._close_quietly(session)
                continue

            try:
                await session.connect()
                tools = await session.list_tools()
            except Exception as e:
                logger.error(f"Skipping tool server '{session.name}': {e}")
                await self._close_quietly(session)
                continue

            self._register(session, tools)

        if not self._sessions:
            raise NoSessionsError("No tool server sessions could be connected")

        logger.info(
            f"Registry initialized with {len(self._sessions)} sessions "
            f"and {len(self._catalog)} tools"
        )
        return self.list_all_tools()

    def _register(self, session: ToolSession, tools: list[ToolDescriptor]) -> None:
        self._sessions[session.name] = session
        for tool in tools:
            previous = self._routes.get(tool.name)
            if previous is not None and previous != session.name:
                logger.warning(
                    f"Tool '{tool.name}' from '{session.name}' overrides "
                    f"the one from '{previous}'"
                )
            self._routes[tool.name] = session.name
            self._catalog[tool.name] = tool
        logger.debug(f"Registered {len(tools)} tools from '{session.name}'")

    def list_all_tools(self) -> list[ToolDescriptor]:
        """Return the combined catalog, one descriptor per tool name."""
        return list(self._catalog.values())

    def ollama_tools(self) -> list[dict[str, Any]]:
        """Return the catalog in Ollama's function-tool format."""
        return [tool.to_ollama_tool() for tool in self._catalog.values()]

    def route(self, tool_name: str) -> str | None:
        """Return the name of the session owning tool_name, if any."""
        return self._routes.get(tool_name)

    def get_tool(self, tool_name: str) -> ToolDescriptor | None:
        """Return the descriptor for tool_name, if registered."""
        return self._catalog.get(tool_name)

    def suggest_parameter_mapping(
        self, tool_name: str, provided_args: Mapping[str, Any]
    ) -> dict[str, str]:
        """Suggest renamings for unrecognized argument keys of a tool.

        Returns an empty mapping for unknown tools.
        """
        tool = self._catalog.get(tool_name)
        if tool is None:
            return {}
        return suggest_parameter_mapping(tool, provided_args)

    async def call_tool(
        self,
        tool_name: str,
        arguments: dict[str, Any],
        timeout_ms: int | None = None,
    ) -> ToolResult | None:
        """Call a tool by name on whichever session owns it.

        Args:
            tool_name: Tool to call
            arguments: Call arguments
            timeout_ms: Deadline; defaults to default_timeout_ms

        Returns:
            ToolResult | None: The result, or None if no session owns the tool

        Raises:
            ToolTimeoutError: If the deadline passes
            InvocationError: If the tool server reports a failure
        """
        owner = self._routes.get(tool_name)
        if owner is None:
            logger.warning(f"Tool '{tool_name}' not found among available tools")
            return None

        session = self._sessions[owner]
        deadline = self.default_timeout_ms if timeout_ms is None else timeout_ms
        logger.debug(f"Calling tool '{tool_name}' on '{owner}'")
        return await with_timeout(
            session.call(tool_name, arguments),
            deadline_ms=deadline,
            label=f"Tool '{tool_name}'",
            tool_name=tool_name,
        )

    async def call_tool_text(
        self, tool_name: str, arguments: dict[str, Any] | None = None
    ) -> str | None:
        """Call a tool and return its plain-text result, or None if absent."""
        result = await self.call_tool(tool_name, arguments or {})
        return None if result is None else result.text

    async def _close_quietly(self, session: ToolSession) -> None:
        try:
            await session.close()
        except Exception as e:
            logger.warning(f"Failed to close session '{session.name}': {e}")

    async def cleanup(self) -> None:
        """Close every owned session.

        A failing close is recorded in cleanup_errors and logged; the remaining
        sessions are still closed.
        """
        sessions, self._sessions = self._sessions, {}
        self._routes = {}
        self._catalog = {}

        for name, session in sessions.items():
            try:
                await session.close()
            except Exception as e:
                logger.error(f"Failed to close session '{name}': {e}")
                self.cleanup_errors.append((name, e))

        logger.info(f"Registry cleanup finished ({len(sessions)} sessions)")
