# API request/response models
# Pydantic models for API endpoint data validation

from typing import Any

from pydantic import BaseModel, Field, field_validator

from ..models.tool import RouteDescriptor


class ToolDefinition(BaseModel):
    """Tool definition as exposed to agents."""

    name: str
    description: str
    input_schema: dict[str, Any]
    site: str
    method: str
    endpoint: str


class ToolListResponse(BaseModel):
    tools: list[ToolDefinition]
    total_tools: int


class ExecuteToolRequest(BaseModel):
    """Request model for tool execution."""

    name: str = Field(..., min_length=1, description="Synthesized tool name")
    arguments: dict[str, Any] = Field(
        default_factory=dict,
        description="Path parameters plus 'params' (GET) or 'data' (other methods)",
    )


class ExecuteToolResponse(BaseModel):
    """Response model for tool execution."""

    result: Any


class DiscoverEndpointsRequest(BaseModel):
    site: str = Field(..., min_length=1, description="Site alias")

    @field_validator("site")
    @classmethod
    def validate_site(cls, v: str) -> str:
        """Ensure site alias is not blank."""
        if not v.strip():
            raise ValueError("Site alias cannot be empty")
        return v.strip()


class DiscoverEndpointsResponse(BaseModel):
    site: str
    routes: list[RouteDescriptor]
    tools_registered: int
