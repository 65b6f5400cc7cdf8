"""Ignore-based package filtering."""

from __future__ import annotations

import fnmatch
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from libalibe.workspace.package import PackageNode


def should_ignore(name: str, path: Path | None, patterns: list[str]) -> bool:
    """Check if a package matches any ignore pattern.

    Args:
        name: Symbolic package name.
        path: Package location, matched as well when given.
        patterns: List of ignore patterns.

    Returns:
        True if the package should be ignored.
    """
    if not patterns:
        return False

    for pattern in patterns:
        if fnmatch.fnmatchcase(name, pattern):
            return True

        if path is not None and fnmatch.fnmatchcase(str(path), pattern):
            return True

    return False


def filter_by_ignore(
    packages: list[PackageNode],
    ignore: list[str] | None,
) -> list[PackageNode]:
    """Filter out package nodes matching ignore patterns."""
    if not ignore:
        return packages

    return [p for p in packages if not should_ignore(p.symbolic_name, p.location, ignore)]
