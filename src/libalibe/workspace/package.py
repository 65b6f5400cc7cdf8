"""Package node representation."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from libalibe.workspace.manifest import ManifestSnapshot


@dataclass
class PackageNode:
    """One participating package in a dependency graph.

    Attributes:
        symbolic_name: Name used in configuration, unique per graph.
        location: Absolute package root.
        manifest: Manifest snapshot taken when the graph was built.
        is_dependency_of_another: Some other node depends on this one.
        participates_in_cycle: The node is reachable from itself.
    """

    symbolic_name: str
    location: Path
    manifest: ManifestSnapshot
    is_dependency_of_another: bool = False
    participates_in_cycle: bool = False

    @property
    def name(self) -> str:
        """Alias for the symbolic name."""
        return self.symbolic_name

    @property
    def path(self) -> Path:
        """Alias for the location."""
        return self.location

    @property
    def version(self) -> str:
        """Declared version or an empty string."""
        return self.manifest.version or ""

    def has_script(self, script: str) -> bool:
        """Check if the manifest defines a script."""
        return self.manifest.has_script(script)

    def __hash__(self) -> int:
        return hash(self.symbolic_name)

    def __repr__(self) -> str:
        return f"PackageNode({self.symbolic_name!r}, {str(self.location)!r})"
