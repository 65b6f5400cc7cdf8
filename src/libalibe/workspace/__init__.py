"""Workspace, manifests and the dependency graph."""

from libalibe.workspace.actuality import (
    ActualityResult,
    check_actuality,
    extract_exact_version,
    is_actual,
)
from libalibe.workspace.graph import (
    DependencyGraph,
    OrderedGraph,
    build_nodes,
    build_ordered_graph,
    depends_on,
    order_nodes,
    provides_for,
)
from libalibe.workspace.manifest import ManifestSnapshot, find_manifest_dirs, read_manifest
from libalibe.workspace.package import PackageNode
from libalibe.workspace.workspace import SuitablePackages, Workspace

__all__ = [
    "ActualityResult",
    "DependencyGraph",
    "ManifestSnapshot",
    "OrderedGraph",
    "PackageNode",
    "SuitablePackages",
    "Workspace",
    "build_nodes",
    "build_ordered_graph",
    "check_actuality",
    "depends_on",
    "extract_exact_version",
    "find_manifest_dirs",
    "is_actual",
    "order_nodes",
    "provides_for",
    "read_manifest",
]
