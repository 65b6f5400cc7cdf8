"""Scope-based package filtering."""

from __future__ import annotations

import fnmatch
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from libalibe.workspace.package import PackageNode


def parse_scope(scope: str | list[str] | None) -> list[str]:
    """Parse a scope into individual patterns.

    Scope can be comma-separated names or glob patterns, or a list of them:
    - "core,api" -> ["core", "api"]
    - "*-lib" -> ["*-lib"]
    - ["core", "*-lib"] -> ["core", "*-lib"]

    Args:
        scope: Comma-separated scope string or list of patterns.

    Returns:
        List of individual patterns.
    """
    if not scope:
        return []

    raw = scope.split(",") if isinstance(scope, str) else scope
    patterns = [p.strip() for p in raw]
    return [p for p in patterns if p]


def match_name(name: str, patterns: list[str]) -> bool:
    """Check if a name matches any of the scope patterns.

    Args:
        name: Symbolic package name.
        patterns: List of name or glob patterns.

    Returns:
        True if the name matches any pattern (or there are no patterns).
        Matching is case-sensitive and treats `-` and `_` as different.
    """
    if not patterns:
        return True

    for pattern in patterns:
        if name == pattern or fnmatch.fnmatchcase(name, pattern):
            return True

    return False


def filter_by_scope(
    packages: list[PackageNode],
    scope: str | list[str] | None,
) -> list[PackageNode]:
    """Filter package nodes by scope pattern.

    Args:
        packages: Nodes to filter.
        scope: Comma-separated names/glob patterns or a list of them.

    Returns:
        Filtered list of nodes, order preserved.
    """
    patterns = parse_scope(scope)
    if not patterns:
        return packages

    return [p for p in packages if match_name(p.symbolic_name, patterns)]
