"""Data types for agent conversations.

This module defines the message dataclasses that make up a conversation, and
the typed forms of what the model sends back (replies and tool calls). Raw
Ollama responses are validated into these types as soon as they arrive.
"""

import json
import logging
import re
import uuid
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

INLINE_CALL_PATTERN = re.compile(r"<function=(\w+)>([\s\S]*?)</function>")


def generate_call_id() -> str:
    """Generate a tool call id."""
    return f"call_{uuid.uuid4().hex[:10]}"


def parse_tool_arguments(raw: Any) -> dict[str, Any]:
    """Validate a tool-call argument blob into a dict.

    JSON strings are decoded. A string that is not valid JSON is kept as
    {"value": raw}. Anything that is not a mapping becomes {}.
    """
    if isinstance(raw, str):
        try:
            raw = json.loads(raw) if raw.strip() else {}
        except json.JSONDecodeError:
            logger.debug(f"Tool arguments are not JSON: {raw!r}")
            return {"value": raw}
    if isinstance(raw, dict):
        return dict(raw)
    return {}


@dataclass(frozen=True)
class ToolCall:
    """A tool invocation requested by the model."""

    id: str
    tool_name: str
    arguments: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def from_ollama(raw: Any) -> "ToolCall | None":
        """Validate one raw tool call from an Ollama response.

        Returns None when the entry carries no function name.
        """

        def get_value(obj: Any, key: str, default: Any = None) -> Any:
            if isinstance(obj, dict):
                return obj.get(key, default)
            return getattr(obj, key, default)

        function = get_value(raw, "function") or {}
        name = get_value(function, "name")
        if not isinstance(name, str) or not name:
            logger.warning(f"Ignoring tool call without a name: {raw!r}")
            return None

        return ToolCall(
            id=get_value(raw, "id") or generate_call_id(),
            tool_name=name,
            arguments=parse_tool_arguments(get_value(function, "arguments")),
        )

    def to_ollama(self) -> dict[str, Any]:
        """Convert to the tool-call shape Ollama expects in history."""
        return {"function": {"name": self.tool_name, "arguments": self.arguments}}


def parse_inline_tool_call(content: str | None) -> ToolCall | None:
    """Parse a `<function=name>{json}</function>` call written in plain text.

    Some models emit calls inline instead of as structured tool calls.
    """
    if not content:
        return None
    match = INLINE_CALL_PATTERN.search(content)
    if match is None:
        return None

    name, raw_args = match.groups()
    try:
        arguments = json.loads(raw_args)
    except json.JSONDecodeError as e:
        logger.debug(f"Error parsing inline function arguments: {e}")
        return None
    if not isinstance(arguments, dict):
        return None
    return ToolCall(id=f"call_{name}", tool_name=name, arguments=arguments)


@dataclass
class ModelReply:
    """The assistant message of one chat response."""

    content: str = ""
    tool_calls: list[ToolCall] = field(default_factory=list)

    @staticmethod
    def from_response(response: Any) -> "ModelReply":
        """Validate a chat response of the form {"message": {...}}.

        Falls back to an inline tool call found in the text when the message
        carries no structured tool calls.

        Raises:
            ValueError: If the response carries no message
        """
        message = (
            response.get("message") if isinstance(response, dict) else None
        )
        if not isinstance(message, dict):
            raise ValueError("Chat response carries no message")

        content = message.get("content") or ""
        tool_calls = [
            call
            for call in (ToolCall.from_ollama(raw) for raw in message.get("tool_calls") or [])
            if call is not None
        ]
        if not tool_calls:
            inline_call = parse_inline_tool_call(content)
            if inline_call is not None:
                tool_calls.append(inline_call)

        return ModelReply(content=content, tool_calls=tool_calls)


@dataclass(frozen=True)
class UserMessage:
    """A message from the user."""

    content: str = ""
    role: str = field(default="user", init=False)


@dataclass(frozen=True)
class SystemMessage:
    """A system prompt message."""

    content: str = ""
    role: str = field(default="system", init=False)


@dataclass(frozen=True)
class AssistantMessage:
    """A response from the model, or a synthetic note from the loop."""

    content: str | None = ""
    tool_calls: tuple[ToolCall, ...] = ()
    role: str = field(default="assistant", init=False)


@dataclass(frozen=True)
class ToolMessage:
    """A tool execution result."""

    content: str = ""
    tool_name: str = ""
    tool_call_id: str = ""
    role: str = field(default="tool", init=False)


# Union type for all message types
Message = UserMessage | SystemMessage | AssistantMessage | ToolMessage
