"""Pydantic models for task API requests and responses."""

from pydantic import BaseModel, ConfigDict, Field


class TaskRequest(BaseModel):
    """Request body for POST /api/v1/tasks."""

    prompt: str = Field(min_length=1, description="The task for the agent")
    max_iterations: int | None = Field(
        default=None,
        ge=1,
        description="Cap on tool-bearing iterations (server default if omitted)",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {"prompt": "List the files in the current directory", "max_iterations": 5}
            ]
        }
    )


class SupervisedTaskRequest(BaseModel):
    """Request body for POST /api/v1/tasks/supervised."""

    prompt: str = Field(min_length=1, description="The core task")
    max_rounds: int | None = Field(
        default=None,
        ge=1,
        description="Cap on manager/worker rounds (server default if omitted)",
    )


class ConversationMessage(BaseModel):
    """One message of the agent conversation, as returned to clients."""

    role: str = Field(description="Message role")
    content: str | None = Field(default=None, description="Message content")
    tool_name: str | None = Field(default=None, description="Tool that produced a tool message")
    tool_calls: list[dict] | None = Field(
        default=None, description="Tool calls requested by the assistant"
    )


class TaskResponse(BaseModel):
    """Response body for both task endpoints."""

    result: str = Field(description="Final answer of the task")
    model: str = Field(description="Model that ran the task")
    iterations: int = Field(description="Tool iterations (single agent) or rounds (supervised)")
    messages: list[ConversationMessage] = Field(
        default_factory=list, description="The (worker) conversation"
    )
