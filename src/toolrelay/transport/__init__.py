"""Tool-server transport layer.

This package provides stdio sessions to tool-server processes, the tool
descriptor types they produce, and the deadline wrapper used for calls.
"""

from toolrelay.transport.session import StdioToolSession, ToolSession, create_sessions
from toolrelay.transport.timeout import DEFAULT_TIMEOUT_MS, with_timeout
from toolrelay.transport.types import (
    ParameterInfo,
    ParameterSchema,
    ServerLaunchSpec,
    ToolDescriptor,
    ToolResult,
)

__all__ = [
    "DEFAULT_TIMEOUT_MS",
    "ParameterInfo",
    "ParameterSchema",
    "ServerLaunchSpec",
    "StdioToolSession",
    "ToolDescriptor",
    "ToolResult",
    "ToolSession",
    "create_sessions",
    "with_timeout",
]
