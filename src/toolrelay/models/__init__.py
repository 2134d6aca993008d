"""Pydantic models for API request and response schemas.

This package contains all Pydantic models used for validating and
serializing API requests and responses across all endpoints.
"""

from toolrelay.models.health import HealthResponse
from toolrelay.models.tasks import (
    ConversationMessage,
    SupervisedTaskRequest,
    TaskRequest,
    TaskResponse,
)
from toolrelay.models.tools import ParameterDetail, ToolDetail, ToolListResponse

__all__ = [
    "ConversationMessage",
    "HealthResponse",
    "ParameterDetail",
    "SupervisedTaskRequest",
    "TaskRequest",
    "TaskResponse",
    "ToolDetail",
    "ToolListResponse",
]
