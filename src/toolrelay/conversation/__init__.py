"""Conversation history and model-reply types.

This package provides the message dataclasses used by the agent loops, the
append-only Conversation container, and the boundary types that raw model
responses are validated into.
"""

from toolrelay.conversation.conversation import Conversation, to_ollama_message
from toolrelay.conversation.types import (
    AssistantMessage,
    Message,
    ModelReply,
    SystemMessage,
    ToolCall,
    ToolMessage,
    UserMessage,
    parse_inline_tool_call,
    parse_tool_arguments,
)

__all__ = [
    # Core classes
    "Conversation",
    "ModelReply",
    "ToolCall",
    # Message types
    "Message",
    "UserMessage",
    "SystemMessage",
    "AssistantMessage",
    "ToolMessage",
    # Helpers
    "parse_inline_tool_call",
    "parse_tool_arguments",
    "to_ollama_message",
]
