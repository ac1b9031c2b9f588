# Filter evaluation
# Applies a site's include/exclude policy to synthesized tool names

import logging
import re
from functools import lru_cache

from ..errors import InvalidFilterPattern
from ..models.site import FilterPolicy

logger = logging.getLogger(__name__)


def is_regex_pattern(pattern: str) -> bool:
    return len(pattern) >= 2 and pattern.startswith("/") and pattern.endswith("/")


def compile_filter_pattern(pattern: str) -> re.Pattern[str]:
    """Compile a ``/.../`` filter entry, raising InvalidFilterPattern if malformed."""
    try:
        return re.compile(pattern[1:-1])
    except re.error as e:
        raise InvalidFilterPattern(pattern, str(e)) from e


@lru_cache(maxsize=256)
def _cached_regex(pattern: str) -> re.Pattern[str] | None:
    try:
        return compile_filter_pattern(pattern)
    except InvalidFilterPattern as e:
        logger.error("%s", e)
        return None


def matches_pattern(tool_name: str, pattern: str) -> bool:
    """Exact match, or regex search for entries wrapped in slashes."""
    if pattern == tool_name:
        return True
    if is_regex_pattern(pattern):
        regex = _cached_regex(pattern)
        return regex is not None and regex.search(tool_name) is not None
    return False


def should_include_tool(tool_name: str, policy: FilterPolicy) -> bool:
    """Decide whether ``policy`` admits ``tool_name``.

    A non-empty include list is an allow-list and the exclude list is then
    ignored. Otherwise any matching exclude entry rejects the tool.
    """
    if policy.include:
        return any(matches_pattern(tool_name, pattern) for pattern in policy.include)

    for pattern in policy.exclude:
        if matches_pattern(tool_name, pattern):
            return False

    return True
