"""Filter chain composition."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

from libalibe.filters.ignore import filter_by_ignore, should_ignore
from libalibe.filters.scope import filter_by_scope, match_name, parse_scope

if TYPE_CHECKING:
    from libalibe.workspace.package import PackageNode


def select_locations(
    entries: Iterable[tuple[str, Path]],
    *,
    include: str | list[str] | None = None,
    exclude: list[str] | None = None,
) -> list[tuple[str, Path]]:
    """Filter ``(name, location)`` pairs before any manifest is read.

    Filters are applied in order:
    1. Include (allow-list; absent means everything)
    2. Exclude (deny-list)

    Args:
        entries: Name/location pairs in configuration order.
        include: Names or glob patterns to keep.
        exclude: Names, glob patterns or path patterns to drop.

    Returns:
        Remaining pairs, order preserved.
    """
    patterns = parse_scope(include)
    return [
        (name, location)
        for name, location in entries
        if match_name(name, patterns) and not should_ignore(name, location, exclude or [])
    ]


def apply_filters(
    packages: list[PackageNode],
    *,
    scope: str | list[str] | None = None,
    ignore: list[str] | None = None,
) -> list[PackageNode]:
    """Apply scope then ignore filters to package nodes."""
    result = filter_by_scope(packages, scope)
    return filter_by_ignore(result, ignore)
