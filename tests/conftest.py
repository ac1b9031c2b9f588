# Shared test fixtures

import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from wp_rest_mcp.models.site import FilterPolicy, SiteConfig
from wp_rest_mcp.models.tool import RouteDescriptor
from wp_rest_mcp.services.proxy_service import ProxyService
from wp_rest_mcp.services.repository import InMemoryToolRegistry
from wp_rest_mcp.services.wp_client import SiteClientManager

WP_INDEX = {
    "name": "My Blog",
    "namespaces": ["wp/v2"],
    "routes": {
        "/": {"namespace": "", "methods": ["GET"]},
        "/wp/v2/posts": {"namespace": "wp/v2", "methods": ["GET", "POST"]},
        "/wp/v2/posts/(?P<id>[\\d]+)": {
            "namespace": "wp/v2",
            "methods": ["GET", "POST", "PUT", "PATCH", "DELETE"],
        },
        "/wp/v2/categories": {"namespace": "wp/v2", "methods": ["GET", "POST"]},
        "/wp/v2/users/me": {"namespace": "wp/v2", "methods": ["GET", "OPTIONS"]},
    },
}


@pytest.fixture
def site_config() -> SiteConfig:
    return SiteConfig(
        alias="myblog",
        url="https://blog.example.com/",
        username="admin",
        credential="abcd efgh ijkl",
    )


@pytest.fixture
def filtered_site_config() -> SiteConfig:
    return SiteConfig(
        alias="myblog",
        url="https://blog.example.com",
        username="admin",
        credential="secret",
        filters=FilterPolicy(exclude=["/.*_delete_.*/"]),
    )


@pytest.fixture
def sample_routes() -> list[RouteDescriptor]:
    return [
        RouteDescriptor(path=path, methods=info["methods"], namespace=info["namespace"])
        for path, info in WP_INDEX["routes"].items()
    ]


class RecordingWordPress:
    """Fake WordPress API for httpx.MockTransport that records requests."""

    def __init__(self, index: dict[str, Any] | None = None) -> None:
        self.index = index if index is not None else WP_INDEX
        self.requests: list[httpx.Request] = []
        self.responses: dict[tuple[str, str], httpx.Response] = {}

    def respond(self, method: str, path: str, response: httpx.Response) -> None:
        self.responses[(method, path)] = response

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        if key in self.responses:
            return self.responses[key]
        if key == ("GET", "/wp-json/"):
            return httpx.Response(200, json=self.index)
        body = {"path": request.url.path, "method": request.method}
        if request.url.query:
            body["query"] = dict(request.url.params)
        if request.content:
            body["body"] = json.loads(request.content)
        return httpx.Response(200, json=body)


@pytest.fixture
def fake_wordpress() -> RecordingWordPress:
    return RecordingWordPress()


@pytest.fixture
def make_proxy_service(
    fake_wordpress: RecordingWordPress,
) -> Callable[..., ProxyService]:
    def _make(*sites: SiteConfig) -> ProxyService:
        manager = SiteClientManager(transport=httpx.MockTransport(fake_wordpress))
        return ProxyService(
            manager, InMemoryToolRegistry(), {site.alias: site for site in sites}
        )

    return _make
