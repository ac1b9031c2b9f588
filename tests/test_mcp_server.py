"""MCP stdio surface: tool listing, invocation and protocol errors."""

import json

import httpx
import mcp.types as types
import pytest
import pytest_asyncio
from mcp.shared.exceptions import McpError

from wp_rest_mcp.mcp_server import (
    DISCOVERY_TOOL_NAME,
    create_server,
    handle_call_tool,
    handle_list_tools,
)


@pytest_asyncio.fixture
async def started_service(make_proxy_service, site_config):
    service = make_proxy_service(site_config)
    await service.start()
    yield service
    await service.shutdown()


@pytest.mark.asyncio
async def test_list_tools_appends_discovery_tool(started_service):
    tools = await handle_list_tools(started_service)

    assert len(tools) == 12
    assert tools[-1].name == DISCOVERY_TOOL_NAME
    assert tools[-1].inputSchema["required"] == ["site"]

    by_name = {tool.name: tool for tool in tools}
    single_post = by_name["myblog_get_v2_posts_id"]
    assert single_post.description.startswith("Get a specific post by ID")
    assert single_post.inputSchema["required"] == ["id"]


@pytest.mark.asyncio
async def test_call_tool_returns_pretty_json_text(started_service):
    result = await handle_call_tool(
        started_service, "myblog_get_v2_posts_id", {"id": "42"}
    )

    assert result.isError is False
    text = result.content[0].text
    assert json.loads(text)["path"] == "/wp-json/wp/v2/posts/42"
    assert text.startswith("{\n  ")


@pytest.mark.asyncio
async def test_unknown_tool_is_method_not_found(started_service):
    with pytest.raises(McpError) as exc_info:
        await handle_call_tool(started_service, "myblog_get_missing", {})
    assert exc_info.value.error.code == types.METHOD_NOT_FOUND


@pytest.mark.asyncio
async def test_discovery_with_unknown_site_is_invalid_params(started_service):
    with pytest.raises(McpError) as exc_info:
        await handle_call_tool(started_service, DISCOVERY_TOOL_NAME, {"site": "nope"})
    assert exc_info.value.error.code == types.INVALID_PARAMS


@pytest.mark.asyncio
async def test_discovery_without_site_is_invalid_params(started_service):
    with pytest.raises(McpError) as exc_info:
        await handle_call_tool(started_service, DISCOVERY_TOOL_NAME, None)
    assert exc_info.value.error.code == types.INVALID_PARAMS


@pytest.mark.asyncio
async def test_discovery_returns_raw_routes(started_service):
    result = await handle_call_tool(
        started_service, DISCOVERY_TOOL_NAME, {"site": "MYBLOG"}
    )

    routes = json.loads(result.content[0].text)
    assert {
        "path": "/wp/v2/posts",
        "methods": ["GET", "POST"],
        "namespace": "wp/v2",
    } in routes
    assert len(started_service.list_tools()) == 11


@pytest.mark.asyncio
async def test_upstream_failure_is_error_content(started_service, fake_wordpress):
    fake_wordpress.respond(
        "DELETE",
        "/wp-json/wp/v2/posts/5",
        httpx.Response(
            403,
            json={"code": "rest_forbidden", "message": "Sorry, you are not allowed."},
        ),
    )
    result = await handle_call_tool(
        started_service, "myblog_delete_v2_posts_id", {"id": "5"}
    )

    assert result.isError is True
    assert "403" in result.content[0].text
    assert "Sorry, you are not allowed." in result.content[0].text


@pytest.mark.asyncio
async def test_failed_discovery_is_error_content(started_service, fake_wordpress):
    fake_wordpress.respond("GET", "/wp-json/", httpx.Response(502, text="Bad gateway"))
    result = await handle_call_tool(
        started_service, DISCOVERY_TOOL_NAME, {"site": "myblog"}
    )
    assert result.isError is True
    assert len(started_service.list_tools()) == 11


@pytest.mark.asyncio
async def test_server_call_handler_raises_protocol_error(started_service):
    server = create_server(started_service)
    handler = server.request_handlers[types.CallToolRequest]
    request = types.CallToolRequest(
        method="tools/call",
        params=types.CallToolRequestParams(name="nope", arguments={}),
    )
    with pytest.raises(McpError):
        await handler(request)


@pytest.mark.asyncio
async def test_server_call_handler_wraps_result(started_service):
    server = create_server(started_service)
    handler = server.request_handlers[types.CallToolRequest]
    request = types.CallToolRequest(
        method="tools/call",
        params=types.CallToolRequestParams(
            name="myblog_get_v2_posts", arguments={"params": {"per_page": "5"}}
        ),
    )
    response = await handler(request)
    assert isinstance(response.root, types.CallToolResult)
    assert json.loads(response.root.content[0].text)["query"] == {"per_page": "5"}
