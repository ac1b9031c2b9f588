"""Proxy service: site lifecycle, endpoint discovery and tool dispatch."""

import logging
from typing import Any

from ..errors import DiscoveryFailed, UnknownSite, UnknownTool
from ..models.site import SiteConfig
from ..models.tool import RouteDescriptor, ToolRecord
from .repository import InMemoryToolRegistry
from .route_parser import parse_route_groups
from .wp_client import SiteClientManager

logger = logging.getLogger(__name__)


def placeholder_spellings(name: str) -> list[str]:
    """Known placeholder spellings for ``name``, in substitution priority order."""
    return [
        f"(?P<{name}>\\d+)",
        f"(?P<{name}>[\\d]+)",
        f"(?P<{name}>[^/]+)",
        f"(?P<{name}>[\\w-]+)",
        f"<{name}>",
    ]


def _find_placeholder(path: str, spelling: str) -> int:
    """Index of the first ``spelling`` in ``path`` that is not a named-group marker."""
    index = path.find(spelling)
    while index != -1 and path.endswith("(?P", 0, index):
        index = path.find(spelling, index + 1)
    return index


def build_request_path(endpoint: str, arguments: dict[str, Any]) -> str:
    """Substitute argument values for the path placeholders of ``endpoint``.

    Each parameter replaces the first occurrence of its first matching
    spelling; the exact placeholder text seen by the parser is tried last.
    A bare ``<name>`` never matches the marker inside ``(?P<name>...)``.
    Parameters missing from ``arguments`` stay in the path as written.
    """
    path = endpoint
    for group in parse_route_groups(endpoint):
        value = arguments.get(group.name)
        if value is None:
            continue
        for spelling in [*placeholder_spellings(group.name), group.text]:
            index = _find_placeholder(path, spelling)
            if index != -1:
                path = path[:index] + str(value) + path[index + len(spelling) :]
                break
    return path


def select_payload(method: str, arguments: dict[str, Any]) -> Any | None:
    """Query params for GET, request body for everything else."""
    if method == "GET":
        return arguments.get("params")
    return arguments.get("data")


class ProxyService:
    """Route tool calls to the WordPress site that owns them."""

    def __init__(
        self,
        client_manager: SiteClientManager,
        registry: InMemoryToolRegistry,
        sites: dict[str, SiteConfig],
    ) -> None:
        self.client_manager = client_manager
        self.registry = registry
        self.sites = sites

    @classmethod
    def from_sites(
        cls, sites: dict[str, SiteConfig], timeout: float = 30.0
    ) -> "ProxyService":
        return cls(SiteClientManager(timeout=timeout), InMemoryToolRegistry(), sites)

    async def start(self) -> int:
        """Connect every configured site and discover its tools."""
        for site in self.sites.values():
            self.client_manager.connect_site(site)

        logger.info("Discovering WordPress endpoints...")
        return await self.discover_all_tools()

    async def discover_all_tools(self) -> int:
        """Rebuild tools for all sites; a failing site contributes none."""
        total = 0
        for alias in self.sites:
            try:
                await self.rebuild_site(alias)
            except DiscoveryFailed as e:
                logger.error("%s", e)
                continue
            total += len(self.registry.list_site_tools(alias))
        return total

    async def rebuild_site(self, alias: str) -> list[RouteDescriptor]:
        """Re-discover ``alias`` and replace its tools.

        Returns the raw route list. On failure the previous tools stay.
        """
        alias = alias.lower()
        site = self.sites.get(alias)
        if site is None:
            raise UnknownSite(alias)
        client = self.client_manager.get_client(alias)

        routes = await client.discover_endpoints()
        admitted = self.registry.rebuild(site, routes)
        logger.info(
            "Discovered %d endpoints for site: %s (%d tools)",
            len(routes),
            alias,
            admitted,
        )
        return routes

    def list_tools(self) -> list[ToolRecord]:
        return self.registry.list_all_tools()

    async def execute_tool(self, name: str, arguments: dict[str, Any]) -> Any:
        """Execute a tool by issuing its HTTP request against the owning site."""
        record = self.registry.get_tool(name)
        if record is None:
            raise UnknownTool(name)
        client = self.client_manager.get_client(record.site)

        path = build_request_path(record.endpoint, arguments)
        payload = select_payload(record.method, arguments)
        logger.debug("Calling %s %s on %s", record.method, path, record.site)
        return await client.request(path, record.method, payload)

    async def shutdown(self) -> None:
        await self.client_manager.disconnect_all()
