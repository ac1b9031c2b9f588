# Tool API - listing, execution and re-discovery of synthesized tools

from fastapi import APIRouter, Depends, HTTPException, Request

from ..api.models import (
    DiscoverEndpointsRequest,
    DiscoverEndpointsResponse,
    ExecuteToolRequest,
    ExecuteToolResponse,
    ToolDefinition,
    ToolListResponse,
)
from ..errors import DiscoveryFailed, UnknownSite, UnknownTool, UpstreamRequestFailed
from ..services.proxy_service import ProxyService

router = APIRouter(prefix="/api/tools", tags=["tools"])


async def get_proxy_service(request: Request) -> ProxyService:
    """Get proxy service from app state (initialized in lifespan)."""
    proxy_service = getattr(request.app.state, "proxy_service", None)
    if proxy_service is None:
        raise HTTPException(status_code=503, detail="Proxy service not initialized")
    return proxy_service


@router.get("", response_model=ToolListResponse, operation_id="list_tools")
async def list_tools(
    proxy_service: ProxyService = Depends(get_proxy_service),  # noqa: B008
) -> ToolListResponse:
    """List every tool synthesized from the configured sites."""
    tools = [
        ToolDefinition(
            name=record.name,
            description=record.description,
            input_schema=record.input_schema,
            site=record.site,
            method=record.method,
            endpoint=record.endpoint,
        )
        for record in proxy_service.list_tools()
    ]
    return ToolListResponse(tools=tools, total_tools=len(tools))


@router.post(
    "/execute",
    response_model=ExecuteToolResponse,
    operation_id="execute_tool",
)
async def execute_tool(
    request: ExecuteToolRequest,
    proxy_service: ProxyService = Depends(get_proxy_service),  # noqa: B008
) -> ExecuteToolResponse:
    """Execute a synthesized tool against its WordPress site.

    Path parameters go in ``arguments`` by name; query parameters under
    ``params`` for GET tools, the request body under ``data`` otherwise.
    """
    try:
        result = await proxy_service.execute_tool(request.name, request.arguments)
    except UnknownTool as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except UnknownSite as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except UpstreamRequestFailed as e:
        raise HTTPException(
            status_code=502,
            detail={"message": e.message, "upstream_status": e.status},
        ) from e
    return ExecuteToolResponse(result=result)


@router.post(
    "/discover",
    response_model=DiscoverEndpointsResponse,
    operation_id="discover_endpoints",
)
async def discover_endpoints(
    request: DiscoverEndpointsRequest,
    proxy_service: ProxyService = Depends(get_proxy_service),  # noqa: B008
) -> DiscoverEndpointsResponse:
    """Re-discover all REST API endpoints of a site and rebuild its tools."""
    site = request.site.lower()
    try:
        routes = await proxy_service.rebuild_site(site)
    except UnknownSite as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except DiscoveryFailed as e:
        raise HTTPException(status_code=502, detail=str(e)) from e

    return DiscoverEndpointsResponse(
        site=site,
        routes=routes,
        tools_registered=len(proxy_service.registry.list_site_tools(site)),
    )
