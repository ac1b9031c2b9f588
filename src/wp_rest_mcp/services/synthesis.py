# Tool synthesis
# Derives tool names, input schemas and descriptions from route patterns

import hashlib
import re
from typing import Any

from ..models.tool import ToolRecord
from .route_parser import has_id_placeholder, parse_endpoint_params, split_static_segments

MAX_TOOL_NAME_LENGTH = 64
BODY_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})

_UNSAFE_RESOURCE = re.compile(r"\W", re.ASCII)
_UNSAFE_NAME = re.compile(r"[^A-Za-z0-9_]")

# room for "_delete_", a one-character resource and the "_id_" + digest suffix
MAX_SITE_PREFIX_LENGTH = MAX_TOOL_NAME_LENGTH - len("_delete_") - 1 - len("_id_abcdef")

# (keyword, phrasing) in match order; missing phrasings keep the default text
_RESOURCE_PHRASES: list[tuple[str, dict[str, str]]] = [
    (
        "/posts",
        {
            "get_one": "Get a specific post by ID",
            "list": "List posts with optional filters",
            "create": "Create a new post",
            "update": "Update an existing post",
            "delete": "Delete a post",
        },
    ),
    (
        "/pages",
        {
            "get_one": "Get a specific page by ID",
            "list": "List pages with optional filters",
            "create": "Create a new page",
            "update": "Update an existing page",
            "delete": "Delete a page",
        },
    ),
    (
        "/users",
        {
            "get_one": "Get a specific user by ID",
            "list": "List users",
            "create": "Create a new user",
            "update": "Update user details",
            "delete": "Delete a user",
        },
    ),
    (
        "/media",
        {
            "get_one": "Get specific media item details",
            "list": "List media items",
            "create": "Upload new media",
            "delete": "Delete media item",
        },
    ),
    (
        "/categories",
        {
            "get_one": "Get a specific category",
            "list": "List categories",
            "create": "Create a new category",
            "update": "Update category",
            "delete": "Delete a category",
        },
    ),
    (
        "/tags",
        {
            "get_one": "Get a specific tag",
            "list": "List tags",
            "create": "Create a new tag",
            "update": "Update tag",
            "delete": "Delete a tag",
        },
    ),
]


def derive_resource_name(endpoint: str) -> str:
    """Join the last two static path segments, e.g. ``v2_posts``."""
    parts = split_static_segments(endpoint)
    if len(parts) >= 2:
        resource = "_".join(parts[-2:])
    elif parts:
        resource = parts[0]
    else:
        resource = ""
    return _UNSAFE_RESOURCE.sub("_", resource)


def site_prefix(site: str) -> str:
    """The form a site alias takes at the front of its tool names."""
    return _UNSAFE_NAME.sub("_", site)


def _assemble(site: str, method: str, resource: str, suffix: str) -> str:
    prefix = f"{site_prefix(site)}_{method.lower()}_"
    name = f"{prefix}{resource}{suffix}"
    if len(name) > MAX_TOOL_NAME_LENGTH:
        max_resource_len = max(0, MAX_TOOL_NAME_LENGTH - len(prefix) - len(suffix))
        name = f"{prefix}{resource[:max_resource_len]}{suffix}"
    return name[:MAX_TOOL_NAME_LENGTH]


def generate_tool_name(site: str, endpoint: str, method: str) -> str:
    """Build ``{site}_{method}_{resource}[_id]``, at most 64 characters.

    Only the resource segment is truncated when the name is too long.
    """
    id_suffix = "_id" if has_id_placeholder(endpoint) else ""
    return _assemble(site, method, derive_resource_name(endpoint), id_suffix)


def disambiguate_tool_name(site: str, endpoint: str, method: str) -> str:
    """Name for an endpoint whose plain name is already taken on its site."""
    digest = hashlib.sha1(f"{method.upper()} {endpoint}".encode()).hexdigest()[:6]
    id_suffix = "_id" if has_id_placeholder(endpoint) else ""
    return _assemble(site, method, derive_resource_name(endpoint), f"{id_suffix}_{digest}")


def build_input_schema(endpoint: str, method: str) -> dict[str, Any]:
    properties: dict[str, Any] = {}
    required: list[str] = []

    for param in parse_endpoint_params(endpoint):
        properties[param.name] = {
            "type": "string",
            "description": f"Path parameter: {param.name}",
        }
        if param.required and param.name not in required:
            required.append(param.name)

    if method == "GET":
        properties["params"] = {
            "type": "object",
            "description": "Query parameters for the request",
        }
    elif method in BODY_METHODS:
        properties["data"] = {
            "type": "object",
            "description": "Request body data",
        }

    schema: dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema


def _action_for(method: str, has_id: bool) -> str | None:
    if method == "GET":
        return "get_one" if has_id else "list"
    if method == "POST":
        return "create"
    if method in ("PUT", "PATCH"):
        return "update"
    if method == "DELETE":
        return "delete"
    return None


def describe_endpoint(site: str, endpoint: str, method: str) -> str:
    description = f"{method} request to {endpoint}"

    action = _action_for(method, has_id_placeholder(endpoint))
    for keyword, phrases in _RESOURCE_PHRASES:
        if keyword in endpoint:
            if action is not None and action in phrases:
                description = phrases[action]
            break

    return f"{description} on {site} site. Endpoint: {endpoint}"


def create_tool_record(
    site: str, endpoint: str, method: str, name: str | None = None
) -> ToolRecord:
    """Synthesize the routing record for one (site, endpoint, method) triple."""
    method = method.upper()
    return ToolRecord(
        name=name or generate_tool_name(site, endpoint, method),
        site=site,
        endpoint=endpoint,
        method=method,
        description=describe_endpoint(site, endpoint, method),
        input_schema=build_input_schema(endpoint, method),
    )
