# Tool domain models
# Route descriptors from discovery and the routing records built from them

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]
SUPPORTED_METHODS: tuple[str, ...] = ("GET", "POST", "PUT", "PATCH", "DELETE")


class ParameterDescriptor(BaseModel):
    """A path parameter found in a route pattern."""

    name: str
    required: bool = True

    model_config = ConfigDict(frozen=True)


class RouteDescriptor(BaseModel):
    """One route from the remote API's self-description."""

    path: str = Field(..., description="Raw route pattern, e.g. /wp/v2/posts/(?P<id>[\\d]+)")
    methods: list[str] = Field(default_factory=list)
    namespace: str = "wp/v2"


class ToolRecord(BaseModel):
    """Routing record for one synthesized tool."""

    name: str = Field(..., max_length=64, pattern=r"^[A-Za-z0-9_]+$")
    site: str
    endpoint: str = Field(..., description="Route pattern kept verbatim")
    method: HttpMethod
    description: str
    input_schema: dict[str, Any] = Field(default_factory=lambda: {"type": "object"})

    model_config = ConfigDict(frozen=True)
