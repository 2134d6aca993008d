"""Append-only conversation history owned by a single agent loop."""

import logging
from typing import Any

from toolrelay.conversation.types import (
    AssistantMessage,
    Message,
    ToolMessage,
)

logger = logging.getLogger(__name__)


def to_ollama_message(message: Message) -> dict[str, Any]:
    """Convert one message to Ollama's wire format."""
    ollama_msg: dict[str, Any] = {
        "role": message.role,
        "content": message.content or "",
    }

    if isinstance(message, AssistantMessage) and message.tool_calls:
        ollama_msg["tool_calls"] = [call.to_ollama() for call in message.tool_calls]

    if isinstance(message, ToolMessage) and message.tool_name:
        ollama_msg["tool_name"] = message.tool_name

    return ollama_msg


class Conversation:
    """An ordered, append-only sequence of messages.

    Messages are immutable once appended and are exposed as a tuple, so only
    the owning loop can grow the history.
    """

    def __init__(self, messages: list[Message] | None = None) -> None:
        self._messages: list[Message] = list(messages or [])

    @property
    def messages(self) -> tuple[Message, ...]:
        return tuple(self._messages)

    def append(self, message: Message) -> None:
        self._messages.append(message)
        logger.debug(f"Appended {message.role} message ({len(self._messages)} total)")

    def to_ollama(self) -> list[dict[str, Any]]:
        """Convert the whole history to Ollama's message list."""
        return [to_ollama_message(message) for message in self._messages]

    def __len__(self) -> int:
        return len(self._messages)
