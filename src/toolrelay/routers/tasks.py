"""Task execution endpoints.

This module exposes the single-agent task loop and the supervised
manager/worker loop over HTTP.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from toolrelay.agents import ManagerWorkerLoop, TaskLoop
from toolrelay.config import ToolRelaySettings
from toolrelay.conversation import AssistantMessage, Conversation, ToolMessage
from toolrelay.dependencies import get_ollama_client, get_tool_registry
from toolrelay.errors import MaxIterationsError, TaskError, ToolRelayError
from toolrelay.models.tasks import (
    ConversationMessage,
    SupervisedTaskRequest,
    TaskRequest,
    TaskResponse,
)
from toolrelay.ollama import OllamaClient
from toolrelay.tools import ToolRegistry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/tasks", tags=["tasks"])


def _conversation_to_response(conversation: Conversation) -> list[ConversationMessage]:
    """Convert a conversation to response messages.

    Args:
        conversation: The loop's conversation

    Returns:
        List of ConversationMessage in conversation order
    """
    messages = []
    for msg in conversation.messages:
        tool_calls = None
        if isinstance(msg, AssistantMessage) and msg.tool_calls:
            tool_calls = [call.to_ollama() for call in msg.tool_calls]
        messages.append(
            ConversationMessage(
                role=msg.role,
                content=msg.content,
                tool_name=msg.tool_name if isinstance(msg, ToolMessage) else None,
                tool_calls=tool_calls,
            )
        )
    return messages


def _error_detail(code: str, message: str, details: dict | None = None) -> dict:
    return {"error": {"code": code, "message": message, "details": details or {}}}


@router.post("", response_model=TaskResponse)
async def run_task(
    request_body: TaskRequest,
    request: Request,
    ollama_client: OllamaClient = Depends(get_ollama_client),
    registry: ToolRegistry = Depends(get_tool_registry),
) -> TaskResponse:
    """Run a task with the single-agent loop.

    Args:
        request_body: Task prompt and optional iteration cap
        request: FastAPI request object
        ollama_client: Injected Ollama client
        registry: Injected tool registry

    Returns:
        TaskResponse with the final answer and the conversation

    Raises:
        HTTPException: 503 if no tool servers are connected or a tool server
                       fails outside a single call, 502 if Ollama fails
    """
    settings: ToolRelaySettings = request.app.state.settings
    loop = TaskLoop(
        ollama_client,
        registry,
        settings.model,
        max_iterations=request_body.max_iterations or settings.max_iterations,
        tool_timeout_ms=settings.tool_timeout_ms,
        repair_parameters=settings.repair_parameters,
        auto_repair_arguments=settings.auto_repair_arguments,
        options={"temperature": settings.temperature},
    )
    loop.add_user_message(request_body.prompt)

    try:
        result = await loop.run()
    except ToolRelayError as e:
        logger.error(f"Tool server failure during task: {e}")
        raise HTTPException(
            status_code=503,
            detail=_error_detail("tool_server_error", str(e)),
        )
    except Exception as e:
        logger.error(f"Model request failed: {e}")
        raise HTTPException(
            status_code=502,
            detail=_error_detail("ollama_error", f"Error: {e}"),
        )

    return TaskResponse(
        result=result,
        model=settings.model,
        iterations=loop.iterations,
        messages=_conversation_to_response(loop.conversation),
    )


@router.post("/supervised", response_model=TaskResponse)
async def run_supervised_task(
    request_body: SupervisedTaskRequest,
    request: Request,
    ollama_client: OllamaClient = Depends(get_ollama_client),
    registry: ToolRegistry = Depends(get_tool_registry),
) -> TaskResponse:
    """Run a task with the manager/worker loop.

    Args:
        request_body: Core task and optional round cap
        request: FastAPI request object
        ollama_client: Injected Ollama client
        registry: Injected tool registry

    Returns:
        TaskResponse with the final answer and the worker conversation

    Raises:
        HTTPException: 422 if the task fails or runs out of rounds,
                       503 if no tool servers are connected
    """
    settings: ToolRelaySettings = request.app.state.settings
    loop = ManagerWorkerLoop(
        ollama_client,
        registry,
        settings.model,
        max_rounds=request_body.max_rounds or settings.max_manager_rounds,
        worker_max_iterations=settings.max_iterations,
        tool_timeout_ms=settings.tool_timeout_ms,
        repair_parameters=settings.repair_parameters,
        auto_repair_arguments=settings.auto_repair_arguments,
    )
    await loop.initialize()

    try:
        result = await loop.process_task(request_body.prompt)
    except MaxIterationsError as e:
        raise HTTPException(
            status_code=422,
            detail=_error_detail(
                "max_iterations_exceeded", str(e), {"max_rounds": e.max_rounds}
            ),
        )
    except TaskError as e:
        raise HTTPException(
            status_code=422,
            detail=_error_detail("task_failed", str(e)),
        )

    return TaskResponse(
        result=result,
        model=settings.model,
        iterations=loop.rounds,
        messages=_conversation_to_response(loop.worker.conversation),
    )
