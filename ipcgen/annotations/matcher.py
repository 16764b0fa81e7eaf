"""Textual matching of `@backendAPI`, `class` and `@route()` annotations."""

from __future__ import annotations

import re

from ..models import (
    AnnotationMatch,
    Matched,
    MatchResult,
    MethodDeclaration,
    SkipReason,
    Skipped,
)

GROUP_PATTERN = re.compile(r'@backendAPI\(\s*"(?P<group>[^"]+)"\s*\)')
TYPE_PATTERN = re.compile(r"class\s+(?P<type_name>\w+)\s*")
# No nesting is tracked: `[^)]*` stops at the first closing parenthesis.
METHOD_PATTERN = re.compile(
    r"@route\(\s*\)\s+async\s+(?P<method>\w+)\s*\((?P<params>[^)]*)\)"
)


def find_group(text: str) -> str | None:
    """Return the first declared group name, or None."""
    match = GROUP_PATTERN.search(text)
    return match.group("group") if match else None


def find_type_name(text: str) -> str | None:
    """Return the first declared class name, or None."""
    match = TYPE_PATTERN.search(text)
    return match.group("type_name") if match else None


def find_methods(text: str) -> tuple[MethodDeclaration, ...]:
    """Return every `@route()` method in source order."""
    return tuple(
        MethodDeclaration(name=match.group("method"), raw_params=match.group("params"))
        for match in METHOD_PATTERN.finditer(text)
    )


def match_annotations(text: str) -> MatchResult:
    """Extract at most one annotation match from a file's text.

    A file without a group marker is skipped. A file with a group marker but no
    class declaration is skipped as well, methods included.
    """
    group = find_group(text)
    if group is None:
        return Skipped(SkipReason.NO_GROUP_MARKER)

    type_name = find_type_name(text)
    if type_name is None:
        return Skipped(SkipReason.NO_TYPE_DECLARATION)

    return Matched(AnnotationMatch(group=group, type_name=type_name, methods=find_methods(text)))


__all__ = [
    "GROUP_PATTERN",
    "METHOD_PATTERN",
    "TYPE_PATTERN",
    "find_group",
    "find_methods",
    "find_type_name",
    "match_annotations",
]
