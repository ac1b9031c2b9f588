"""WordPress REST API clients, one per configured site."""

import logging
import re
from typing import Any

import httpx
from pydantic import ValidationError

from ..errors import DiscoveryFailed, UnknownSite, UpstreamRequestFailed
from ..models.site import SiteConfig
from ..models.tool import RouteDescriptor

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")
_API_PREFIX = re.compile(r"^/wp-json")


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.text or response.reason_phrase


class WordPressClient:
    """Authenticated client for one site's ``/wp-json`` API."""

    def __init__(
        self,
        site: SiteConfig,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.site = site
        auth = None
        if site.credential:
            auth = httpx.BasicAuth(site.username, _WHITESPACE.sub("", site.credential))
        self.client = httpx.AsyncClient(
            base_url=f"{site.url}/wp-json",
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            auth=auth,
            timeout=timeout,
            transport=transport,
        )

    async def discover_endpoints(self) -> list[RouteDescriptor]:
        """Fetch the API index and return its route table."""
        try:
            response = await self.client.get("/")
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            raise DiscoveryFailed(
                self.site.alias,
                f"status {e.response.status_code}: {_error_message(e.response)}",
            ) from e
        except httpx.HTTPError as e:
            raise DiscoveryFailed(self.site.alias, str(e) or type(e).__name__) from e
        except ValueError as e:
            raise DiscoveryFailed(self.site.alias, f"invalid JSON: {e}") from e

        routes = payload.get("routes") if isinstance(payload, dict) else None
        if not isinstance(routes, dict):
            return []

        descriptors = []
        for path, info in routes.items():
            info = info if isinstance(info, dict) else {}
            try:
                descriptor = RouteDescriptor(
                    path=path,
                    methods=info.get("methods") or [],
                    namespace=info.get("namespace") or "wp/v2",
                )
            except ValidationError as e:
                raise DiscoveryFailed(
                    self.site.alias, f"malformed route {path}: {e}"
                ) from e
            descriptors.append(descriptor)
        return descriptors

    async def request(
        self, endpoint: str, method: str = "GET", payload: Any | None = None
    ) -> Any:
        """Send an authenticated request and return the decoded JSON body."""
        path = "/" + _API_PREFIX.sub("", endpoint).lstrip("/")
        kwargs: dict[str, Any] = {}
        if payload is not None:
            if method == "GET":
                kwargs["params"] = payload
            else:
                kwargs["json"] = payload

        try:
            response = await self.client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise UpstreamRequestFailed(
                e.response.status_code, _error_message(e.response)
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamRequestFailed(None, str(e) or type(e).__name__) from e

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamRequestFailed(
                response.status_code, f"invalid JSON in response: {e}"
            ) from e

    async def aclose(self) -> None:
        await self.client.aclose()


class SiteClientManager:
    """Own the live client of every configured site."""

    def __init__(
        self,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.clients: dict[str, WordPressClient] = {}
        self._timeout = timeout
        self._transport = transport

    def connect_site(self, site: SiteConfig) -> WordPressClient:
        client = WordPressClient(site, timeout=self._timeout, transport=self._transport)
        self.clients[site.alias] = client
        return client

    def get_client(self, alias: str) -> WordPressClient:
        client = self.clients.get(alias)
        if client is None:
            raise UnknownSite(alias)
        return client

    async def disconnect_all(self) -> None:
        """Close every client."""
        for alias in list(self.clients):
            client = self.clients.pop(alias)
            try:
                await client.aclose()
            except Exception:
                logger.warning("Error closing client for %s", alias, exc_info=True)
