"""Deadline wrapper for tool calls."""

import asyncio
import logging
from typing import Awaitable, TypeVar

from toolrelay.errors import InvocationError, ToolRelayError, ToolTimeoutError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 30000

T = TypeVar("T")


async def with_timeout(
    call: Awaitable[T],
    deadline_ms: int = DEFAULT_TIMEOUT_MS,
    label: str = "Tool call",
    tool_name: str = "",
) -> T:
    """Race a call against a deadline.

    Whichever settles first wins. When the deadline wins, the call is
    cancelled and its eventual result discarded; releasing whatever it held
    is the session's job.

    Args:
        call: The awaitable to run (usually `session.call(...)`)
        deadline_ms: Deadline in milliseconds
        label: Prefix used in error messages
        tool_name: Tool being called, recorded on InvocationError

    Returns:
        The call's result

    Raises:
        ToolTimeoutError: If the deadline passes first
        InvocationError: If the call fails with a non-relay exception; the
            original message is embedded and chained
    """
    try:
        return await asyncio.wait_for(call, timeout=max(deadline_ms, 0) / 1000)
    except ToolRelayError:
        raise
    except asyncio.TimeoutError as e:
        logger.warning(f"{label} timed out after {deadline_ms}ms")
        raise ToolTimeoutError(
            f"{label} timed out after {deadline_ms}ms", deadline_ms
        ) from e
    except Exception as e:
        raise InvocationError(tool_name or label, f"{label} failed: {e}") from e
