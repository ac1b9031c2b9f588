"""
MCP stdio server for WordPress sites

Lists one tool per discovered endpoint/method pair plus the
``wp_discover_endpoints`` tool, and routes tool calls back to the
WordPress REST API.
"""

import asyncio
import json
import logging
import sys
from typing import Any

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError

from . import __version__
from .config import Settings, load_site_config, settings
from .errors import (
    ConfigLoadFailed,
    DiscoveryFailed,
    UnknownSite,
    UnknownTool,
    UpstreamRequestFailed,
)
from .models.site import SiteConfig
from .models.tool import ToolRecord
from .services.proxy_service import ProxyService

logger = logging.getLogger(__name__)

DISCOVERY_TOOL_NAME = "wp_discover_endpoints"


def discovery_tool() -> types.Tool:
    return types.Tool(
        name=DISCOVERY_TOOL_NAME,
        description="Re-discover all available REST API endpoints on a WordPress site",
        inputSchema={
            "type": "object",
            "properties": {
                "site": {"type": "string", "description": "Site alias"},
            },
            "required": ["site"],
        },
    )


def to_mcp_tool(record: ToolRecord) -> types.Tool:
    return types.Tool(
        name=record.name,
        description=record.description,
        inputSchema=record.input_schema,
    )


def _invalid_params(message: str) -> McpError:
    return McpError(types.ErrorData(code=types.INVALID_PARAMS, message=message))


def _text_result(text: str, is_error: bool = False) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=text)],
        isError=is_error,
    )


async def handle_list_tools(service: ProxyService) -> list[types.Tool]:
    tools = [to_mcp_tool(record) for record in service.list_tools()]
    tools.append(discovery_tool())
    return tools


async def handle_call_tool(
    service: ProxyService, name: str, arguments: dict[str, Any] | None
) -> types.CallToolResult:
    """Run one tool call.

    Unknown tools and sites raise McpError; upstream and discovery failures
    come back as an error result so the calling agent can see them.
    """
    arguments = arguments or {}

    if name == DISCOVERY_TOOL_NAME:
        site = arguments.get("site")
        if not isinstance(site, str) or not site:
            raise _invalid_params("Missing required argument: site")
        try:
            routes = await service.rebuild_site(site)
        except UnknownSite as e:
            raise _invalid_params(str(e)) from e
        except DiscoveryFailed as e:
            logger.error("%s", e)
            return _text_result(str(e), is_error=True)
        return _text_result(
            json.dumps([route.model_dump() for route in routes], indent=2)
        )

    try:
        result = await service.execute_tool(name, arguments)
    except UnknownTool as e:
        raise McpError(
            types.ErrorData(code=types.METHOD_NOT_FOUND, message=str(e))
        ) from e
    except UnknownSite as e:
        raise _invalid_params(str(e)) from e
    except UpstreamRequestFailed as e:
        logger.warning("Tool %s failed: %s", name, e)
        return _text_result(str(e), is_error=True)

    return _text_result(json.dumps(result, indent=2))


def create_server(service: ProxyService) -> Server:
    server: Server = Server("wp-rest-mcp", version=__version__)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return await handle_list_tools(service)

    async def call_tool(request: types.CallToolRequest) -> types.ServerResult:
        result = await handle_call_tool(
            service, request.params.name, request.params.arguments
        )
        return types.ServerResult(result)

    # Registered directly: the call_tool() decorator would turn McpError
    # into an error result instead of a protocol error.
    server.request_handlers[types.CallToolRequest] = call_tool
    return server


async def serve(sites: dict[str, SiteConfig], config: Settings) -> None:
    service = ProxyService.from_sites(sites, timeout=config.request_timeout)
    await service.start()
    server = create_server(service)
    logger.info(
        "WordPress MCP server started with %d site(s) configured", len(sites)
    )

    try:
        async with stdio_server() as (read_stream, write_stream):
            await server.run(
                read_stream, write_stream, server.create_initialization_options()
            )
    finally:
        await service.shutdown()


def main() -> None:
    """CLI entry point for the stdio MCP server."""
    # stdout carries the protocol stream
    logging.basicConfig(level=settings.log_level.upper(), stream=sys.stderr)

    try:
        sites = load_site_config(settings)
    except ConfigLoadFailed as e:
        logger.error("Server failed to start: %s", e)
        sys.exit(1)

    asyncio.run(serve(sites, settings))


if __name__ == "__main__":
    main()
