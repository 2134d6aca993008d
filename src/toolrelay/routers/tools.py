"""Tool catalog router."""

import logging

from fastapi import APIRouter, Depends

from toolrelay.dependencies import get_tool_registry
from toolrelay.models.tools import ParameterDetail, ToolDetail, ToolListResponse
from toolrelay.tools import ToolRegistry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["tools"])


@router.get("/tools", response_model=ToolListResponse)
async def list_tools(
    registry: ToolRegistry = Depends(get_tool_registry),
) -> ToolListResponse:
    """List the combined tool catalog of every connected tool server.

    Args:
        registry: The tool registry (injected).

    Returns:
        ToolListResponse: Every tool with the server that owns it.
    """
    tools = [
        ToolDetail(
            name=tool.name,
            description=tool.description,
            server=registry.route(tool.name) or "",
            parameters={
                name: ParameterDetail(type=info.type, description=info.description)
                for name, info in tool.parameters.properties.items()
            },
            required=list(tool.parameters.required),
        )
        for tool in registry.list_all_tools()
    ]
    logger.debug(f"Listed {len(tools)} tools")
    return ToolListResponse(tools=tools)
