# Tool registry
# In-memory table of synthesized tools, rebuilt per site

import logging

from ..models.site import SiteConfig
from ..models.tool import SUPPORTED_METHODS, RouteDescriptor, ToolRecord
from .filters import should_include_tool
from .synthesis import create_tool_record, disambiguate_tool_name, generate_tool_name

logger = logging.getLogger(__name__)


class InMemoryToolRegistry:
    """In-memory mapping of tool name to routing record."""

    def __init__(self) -> None:
        """Initialize empty registry."""
        self._tools: dict[str, ToolRecord] = {}

    def rebuild(self, site: SiteConfig, routes: list[RouteDescriptor]) -> int:
        """Replace every tool of ``site`` with tools synthesized from ``routes``.

        Returns the number of tools admitted by the site's filter policy.
        """
        self.remove_site(site.alias)

        seen: dict[str, str] = {}
        admitted = 0
        for route in routes:
            for raw_method in route.methods:
                method = raw_method.upper()
                if method not in SUPPORTED_METHODS:
                    logger.debug(
                        "Skipping unsupported method %s for %s", method, route.path
                    )
                    continue

                name = generate_tool_name(site.alias, route.path, method)
                if name in seen:
                    logger.warning(
                        "Tool name %s derived from both %s and %s %s",
                        name,
                        seen[name],
                        method,
                        route.path,
                    )
                    name = disambiguate_tool_name(site.alias, route.path, method)
                seen[name] = f"{method} {route.path}"

                if not should_include_tool(name, site.filters):
                    continue

                self.add_tool(
                    create_tool_record(site.alias, route.path, method, name=name)
                )
                admitted += 1

        return admitted

    def remove_site(self, alias: str) -> int:
        """Remove every tool belonging to ``alias``."""
        stale = [name for name, record in self._tools.items() if record.site == alias]
        for name in stale:
            del self._tools[name]
        return len(stale)

    def add_tool(self, record: ToolRecord) -> None:
        self._tools[record.name] = record

    def get_tool(self, name: str) -> ToolRecord | None:
        return self._tools.get(name)

    def list_all_tools(self) -> list[ToolRecord]:
        """Snapshot of all records in insertion order."""
        return list(self._tools.values())

    def list_site_tools(self, alias: str) -> list[ToolRecord]:
        return [record for record in self._tools.values() if record.site == alias]

    def __len__(self) -> int:
        return len(self._tools)
