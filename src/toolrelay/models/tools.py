"""Pydantic models for the tool catalog endpoint."""

from pydantic import BaseModel, Field


class ParameterDetail(BaseModel):
    """A declared tool parameter."""

    type: str = Field(description="JSON schema type of the parameter")
    description: str | None = Field(default=None, description="Parameter description")


class ToolDetail(BaseModel):
    """A tool in the combined catalog and the server that owns it."""

    name: str = Field(description="Tool name")
    description: str = Field(description="Tool description")
    server: str = Field(description="Name of the tool server that owns the tool")
    parameters: dict[str, ParameterDetail] = Field(
        default_factory=dict, description="Declared parameters, in declaration order"
    )
    required: list[str] = Field(default_factory=list, description="Required parameters")


class ToolListResponse(BaseModel):
    """Response for GET /api/v1/tools."""

    tools: list[ToolDetail] = Field(description="Combined tool catalog")
