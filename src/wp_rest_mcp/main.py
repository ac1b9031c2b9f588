# FastAPI application entry point
# Defines the main app instance and core routes

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi_mcp import FastApiMCP
from pydantic import BaseModel

from . import __version__
from .api import tools
from .config import load_site_config, settings
from .services.proxy_service import ProxyService

# Configure logging
logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str
    sites: int
    tools: int


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application startup and shutdown."""
    logger.info("Starting WordPress MCP bridge...")

    # ConfigLoadFailed propagates and aborts startup
    sites = load_site_config(settings)
    proxy_service = ProxyService.from_sites(sites, timeout=settings.request_timeout)
    discovered_count = await proxy_service.start()
    logger.info(
        "Registered %d tools from %d site(s) during startup",
        discovered_count,
        len(sites),
    )
    app.state.proxy_service = proxy_service

    yield

    logger.info("Shutting down WordPress MCP bridge...")
    await proxy_service.shutdown()
    logger.info("Shutdown complete")


app = FastAPI(
    title="WordPress REST MCP",
    description="Dynamic MCP tools for WordPress REST API endpoints",
    version=__version__,
    lifespan=lifespan,
)

# Include API routers
app.include_router(tools.router)


@app.get("/health", response_model=HealthResponse, operation_id="health")
async def health() -> HealthResponse:
    """Health check endpoint."""
    proxy_service = getattr(app.state, "proxy_service", None)
    if proxy_service is None:
        return HealthResponse(
            status="starting", message="Proxy service not initialized", sites=0, tools=0
        )
    return HealthResponse(
        status="healthy",
        message="Service is running",
        sites=len(proxy_service.sites),
        tools=len(proxy_service.registry),
    )


# Exclude the health check from being exposed as an MCP tool
mcp_server = FastApiMCP(
    app,
    name="wp-rest-mcp",
    description=(
        "List, execute and re-discover tools generated from the REST API "
        "endpoints of configured WordPress sites."
    ),
    exclude_operations=["health"],
)

# Mount the MCP server (streamable HTTP) at the /mcp endpoint
mcp_server.mount_http()
