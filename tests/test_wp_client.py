"""WordPress HTTP client behaviour with a mocked transport."""

import base64

import httpx
import pytest

from wp_rest_mcp.errors import DiscoveryFailed, UnknownSite, UpstreamRequestFailed
from wp_rest_mcp.services.wp_client import SiteClientManager, WordPressClient


def _client(site_config, handler) -> WordPressClient:
    return WordPressClient(site_config, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_basic_auth_strips_whitespace_from_credential(site_config, fake_wordpress):
    client = _client(site_config, fake_wordpress)
    await client.discover_endpoints()

    request = fake_wordpress.requests[0]
    expected = base64.b64encode(b"admin:abcdefghijkl").decode()
    assert request.headers["Authorization"] == f"Basic {expected}"
    assert request.headers["Accept"] == "application/json"
    assert str(request.url) == "https://blog.example.com/wp-json/"
    await client.aclose()


@pytest.mark.asyncio
async def test_discover_endpoints_maps_route_table(site_config, fake_wordpress):
    client = _client(site_config, fake_wordpress)
    routes = await client.discover_endpoints()

    by_path = {route.path: route for route in routes}
    assert by_path["/wp/v2/posts"].methods == ["GET", "POST"]
    assert by_path["/wp/v2/posts"].namespace == "wp/v2"
    assert len(routes) == 5


@pytest.mark.asyncio
async def test_discover_endpoints_defaults(site_config):
    index = {"routes": {"/custom/v1/items": {}, "/custom/v1/other": None}}
    client = _client(site_config, lambda request: httpx.Response(200, json=index))
    routes = await client.discover_endpoints()

    assert [(r.path, r.methods, r.namespace) for r in routes] == [
        ("/custom/v1/items", [], "wp/v2"),
        ("/custom/v1/other", [], "wp/v2"),
    ]


@pytest.mark.asyncio
async def test_discover_endpoints_without_routes(site_config):
    client = _client(site_config, lambda request: httpx.Response(200, json={"name": "x"}))
    assert await client.discover_endpoints() == []


@pytest.mark.asyncio
async def test_discover_endpoints_invalid_json(site_config):
    client = _client(site_config, lambda request: httpx.Response(200, text="<html>"))
    with pytest.raises(DiscoveryFailed) as exc_info:
        await client.discover_endpoints()
    assert exc_info.value.site == "myblog"


@pytest.mark.asyncio
async def test_discover_endpoints_unreachable(site_config):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(site_config, handler)
    with pytest.raises(DiscoveryFailed, match="connection refused"):
        await client.discover_endpoints()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("endpoint", "expected_path"),
    [
        ("/wp/v2/posts", "/wp-json/wp/v2/posts"),
        ("wp/v2/posts", "/wp-json/wp/v2/posts"),
        ("/wp-json/wp/v2/posts", "/wp-json/wp/v2/posts"),
    ],
)
async def test_request_normalizes_path(site_config, fake_wordpress, endpoint, expected_path):
    client = _client(site_config, fake_wordpress)
    result = await client.request(endpoint, "GET")
    assert result["path"] == expected_path


@pytest.mark.asyncio
async def test_request_unreachable_has_no_status(site_config):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    client = _client(site_config, handler)
    with pytest.raises(UpstreamRequestFailed) as exc_info:
        await client.request("/wp/v2/posts", "GET")
    assert exc_info.value.status is None


@pytest.mark.asyncio
async def test_request_error_without_json_body(site_config):
    client = _client(site_config, lambda request: httpx.Response(500, text="Fatal error"))
    with pytest.raises(UpstreamRequestFailed) as exc_info:
        await client.request("/wp/v2/posts", "POST", {"title": "x"})
    assert exc_info.value.status == 500
    assert exc_info.value.message == "Fatal error"


@pytest.mark.asyncio
async def test_request_empty_response_body(site_config):
    client = _client(site_config, lambda request: httpx.Response(204))
    assert await client.request("/wp/v2/posts/1", "DELETE") is None


@pytest.mark.asyncio
async def test_client_manager_lookup(site_config):
    manager = SiteClientManager()
    client = manager.connect_site(site_config)
    assert manager.get_client("myblog") is client
    with pytest.raises(UnknownSite):
        manager.get_client("other")
    await manager.disconnect_all()
    assert manager.clients == {}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "info",
    [
        {"namespace": 5, "methods": ["GET"]},
        {"namespace": "wp/v2", "methods": "GET"},
        {"namespace": "wp/v2", "methods": [{"GET": True}]},
    ],
)
async def test_discover_endpoints_malformed_route_info(site_config, info):
    index = {"routes": {"/wp/v2/posts": info}}
    client = _client(site_config, lambda request: httpx.Response(200, json=index))
    with pytest.raises(DiscoveryFailed) as exc_info:
        await client.discover_endpoints()
    assert exc_info.value.site == "myblog"
    assert "/wp/v2/posts" in str(exc_info.value)
