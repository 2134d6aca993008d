"""Exception hierarchy for toolrelay.

Failures local to one tool call (timeouts, invocation errors) are absorbed
into the conversation by the agent loops. Task-level failures (TaskError,
MaxIterationsError) end one task and are handled at the call site.
"""


class ToolRelayError(Exception):
    """Base class for all toolrelay errors."""


class ServerConnectionError(ToolRelayError, ConnectionError):
    """A tool server could not be reached or returned a malformed listing."""

    def __init__(self, server_name: str, message: str) -> None:
        self.server_name = server_name
        super().__init__(f"Server '{server_name}': {message}")


class NoSessionsError(ToolRelayError):
    """Registry initialization ended with zero connected sessions."""


class ClosedSessionError(ToolRelayError):
    """An operation was attempted on a session that is not connected."""


class ToolTimeoutError(ToolRelayError, TimeoutError):
    """A tool call did not settle before its deadline."""

    def __init__(self, message: str, deadline_ms: int) -> None:
        self.deadline_ms = deadline_ms
        super().__init__(message)


class InvocationError(ToolRelayError):
    """A tool server reported a failure for a call."""

    def __init__(self, tool_name: str, message: str) -> None:
        self.tool_name = tool_name
        super().__init__(message)


class TaskError(ToolRelayError):
    """A task ended unrecoverably (e.g. the manager reported an error)."""


class MaxIterationsError(TaskError):
    """The manager/worker loop ran out of rounds without finishing."""

    def __init__(self, max_rounds: int) -> None:
        self.max_rounds = max_rounds
        super().__init__(
            f"Task not finished after {max_rounds} manager/worker rounds"
        )
