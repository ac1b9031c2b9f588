# Route pattern parser
# Tokenizes WordPress route regexes into path parameter groups

import re
from dataclasses import dataclass

from ..models.tool import ParameterDescriptor

_NON_WORD = re.compile(r"\W")
_NAMED_MARKER = "?P<"


@dataclass(frozen=True)
class RouteGroup:
    """A capture group found in a route pattern."""

    name: str
    text: str  # the whole group, parentheses included
    start: int
    end: int
    optional: bool


def _skip_char_class(pattern: str, index: int, end: int) -> int:
    """Return the index just past the character class opening at ``index``."""
    i = index + 1
    if i < end and pattern[i] == "^":
        i += 1
    # a leading ']' is a literal member of the class
    if i < end and pattern[i] == "]":
        i += 1
    while i < end:
        if pattern[i] == "\\":
            i += 2
            continue
        if pattern[i] == "]":
            return i + 1
        i += 1
    return end


def _find_group_close(pattern: str, index: int, end: int) -> int:
    """Return the index of the ')' closing the group opened at ``index``.

    Unbalanced groups run to ``end``.
    """
    depth = 0
    i = index
    while i < end:
        ch = pattern[i]
        if ch == "\\":
            i += 2
            continue
        if ch == "[":
            i = _skip_char_class(pattern, i, end)
            continue
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return end


def _has_optional_marker(body: str) -> bool:
    """True when ``body`` holds a top-level '?' quantifier."""
    depth = 0
    i = 0
    end = len(body)
    while i < end:
        ch = body[i]
        if ch == "\\":
            i += 2
            continue
        if ch == "[":
            i = _skip_char_class(body, i, end)
            continue
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        elif ch == "?" and depth == 0 and (i == 0 or body[i - 1] != "("):
            return True
        i += 1
    return False


def _scan(
    pattern: str, start: int, end: int, inherited_optional: bool, groups: list[RouteGroup]
) -> None:
    i = start
    while i < end:
        ch = pattern[i]
        if ch == "\\":
            i += 2
            continue
        if ch == "[":
            i = _skip_char_class(pattern, i, end)
            continue
        if ch != "(":
            i += 1
            continue

        close = _find_group_close(pattern, i, end)
        inner = pattern[i + 1 : close]
        after = close + 1
        quantified = after < len(pattern) and pattern[after] in "?*"
        optional = inherited_optional or quantified
        text = pattern[i : min(after, len(pattern))]

        if inner.startswith(_NAMED_MARKER):
            name_end = inner.find(">")
            name = inner[len(_NAMED_MARKER) : name_end] if name_end != -1 else ""
            if name:
                body = inner[name_end + 1 :]
                groups.append(
                    RouteGroup(
                        name=name,
                        text=text,
                        start=i,
                        end=min(after, len(pattern)),
                        optional=optional or _has_optional_marker(body),
                    )
                )
        elif inner.startswith("?:"):
            _scan(pattern, i + 3, close, optional, groups)
        elif inner.startswith("?"):
            # lookarounds and inline flags carry no parameters
            pass
        else:
            name = _NON_WORD.sub("", inner)
            if name:
                groups.append(
                    RouteGroup(
                        name=name,
                        text=text,
                        start=i,
                        end=min(after, len(pattern)),
                        optional=optional or _has_optional_marker(inner),
                    )
                )
        i = after


def parse_route_groups(pattern: str) -> list[RouteGroup]:
    """Scan ``pattern`` left to right and return its capture groups in order.

    Named groups (``(?P<id>[\\d]+)``) take their declared name. Unnamed
    groups are named after their body with non-word characters removed.
    A group is optional when its body holds a top-level ``?`` quantifier
    (the name marker excluded), when it is directly followed by a ``?`` or
    ``*`` quantifier, or when it sits inside an optional non-capturing
    group. Matches never overlap and scanning is a single forward pass per
    nesting level.
    """
    groups: list[RouteGroup] = []
    _scan(pattern, 0, len(pattern), False, groups)
    return groups


def parse_endpoint_params(pattern: str) -> list[ParameterDescriptor]:
    """Extract the ordered path parameters of a route pattern."""
    return [
        ParameterDescriptor(name=group.name, required=not group.optional)
        for group in parse_route_groups(pattern)
    ]


def has_id_placeholder(pattern: str) -> bool:
    return _NAMED_MARKER in pattern


def split_static_segments(pattern: str) -> list[str]:
    """Return the path segments of ``pattern`` that hold no placeholder.

    Placeholders are removed as whole groups first, so a group whose body
    contains '/' does not leak fragments into the segment list.
    """
    groups = parse_route_groups(pattern)
    pieces: list[str] = []
    cursor = 0
    for group in groups:
        pieces.append(pattern[cursor : group.start])
        pieces.append("\0")
        cursor = group.end
    pieces.append(pattern[cursor:])
    stripped = "".join(pieces)
    return [
        segment
        for segment in stripped.split("/")
        if segment and "\0" not in segment and "(" not in segment
    ]
