"""Dependency graph construction, ordering and cycle detection.

Packages are ordered so that providers precede their consumers wherever the
graph allows it. Circular dependencies are legal: two local packages may
depend on each other across release cycles. They are flagged on the nodes
(``participates_in_cycle``) instead of being rejected, and ordering always
terminates.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path

from libalibe.errors import DuplicateSymbolicNameError
from libalibe.filters.chain import select_locations
from libalibe.workspace.manifest import ManifestSnapshot, read_manifest
from libalibe.workspace.package import PackageNode

ManifestReader = Callable[[Path], ManifestSnapshot]


class VisitState(Enum):
    """Traversal state of a node during cycle detection."""

    UNVISITED = auto()
    ON_STACK = auto()
    RESOLVED = auto()


def manifest_depends_on(consumer: ManifestSnapshot, provider: ManifestSnapshot) -> bool:
    """Check whether one manifest declares a dependency on another.

    Runtime, development and peer dependencies are pooled. A dependency on any
    package under ``@<provider name>/`` counts as a dependency on the provider.
    """
    provider_name = provider.name
    if not provider_name:
        return False

    names = consumer.dependency_names
    if provider_name in names:
        return True

    scope_prefix = f"@{provider_name}/"
    return any(name.startswith(scope_prefix) for name in names)


def depends_on(consumer: PackageNode, provider: PackageNode) -> bool:
    """Check whether ``consumer`` depends on ``provider``."""
    return manifest_depends_on(consumer.manifest, provider.manifest)


def provides_for(provider: PackageNode, consumer: PackageNode) -> bool:
    """Check whether ``provider`` is a dependency of ``consumer``."""
    return depends_on(consumer, provider)


def _signature(nodes: list[PackageNode]) -> tuple[str, ...]:
    return tuple(node.symbolic_name for node in nodes)


class DependencyGraph:
    """Dependency relation over a fixed set of package nodes.

    The relation is derived from the manifest snapshots and memoized per
    ordered node pair for the lifetime of the instance.
    """

    def __init__(self, nodes: list[PackageNode]) -> None:
        self.nodes = list(nodes)
        self._by_name = {node.symbolic_name: node for node in self.nodes}
        self._relation_cache: dict[tuple[str, str], bool] = {}

    def __len__(self) -> int:
        return len(self.nodes)

    def get(self, name: str) -> PackageNode | None:
        return self._by_name.get(name)

    def depends_on(self, consumer: PackageNode, provider: PackageNode) -> bool:
        """Memoized :func:`depends_on`."""
        key = (consumer.symbolic_name, provider.symbolic_name)
        cached = self._relation_cache.get(key)
        if cached is None:
            cached = depends_on(consumer, provider)
            self._relation_cache[key] = cached
        return cached

    def provides_for(self, provider: PackageNode, consumer: PackageNode) -> bool:
        return self.depends_on(consumer, provider)

    def get_dependencies(self, node: PackageNode) -> list[PackageNode]:
        """Other nodes ``node`` depends on, in graph order."""
        return [
            other
            for other in self.nodes
            if other.symbolic_name != node.symbolic_name and self.depends_on(node, other)
        ]

    def get_dependents(self, node: PackageNode) -> list[PackageNode]:
        """Other nodes depending on ``node``, in graph order."""
        return [
            other
            for other in self.nodes
            if other.symbolic_name != node.symbolic_name and self.depends_on(other, node)
        ]

    def order(self) -> list[PackageNode]:
        """Best-effort insertion ordering, providers first.

        For each position ``i`` the first later node that ``nodes[i]`` depends
        on is moved in front of it. A move producing an arrangement that was
        not seen before re-scans position ``i``; a repeated arrangement means
        the nodes involved form a cycle, so the scan moves on. Every
        re-scan needs a new arrangement, which bounds the loop.

        Returns:
            New list with every node exactly once.
        """
        ordered = list(self.nodes)
        known = {_signature(ordered)}

        i = 0
        while i < len(ordered):
            for j in range(i + 1, len(ordered)):
                if self.depends_on(ordered[i], ordered[j]):
                    ordered.insert(i, ordered.pop(j))
                    signature = _signature(ordered)
                    if signature not in known:
                        known.add(signature)
                        i -= 1
                    break
            i += 1

        return ordered

    def reaches_itself(self, root: PackageNode) -> bool:
        """Check whether ``root`` can be reached from itself.

        Iterative depth-first search over "depends on" edges. The root stays
        ``ON_STACK`` for the whole traversal, so any edge back to it closes a
        cycle through it. Self references are not edges.
        """
        state = {node.symbolic_name: VisitState.UNVISITED for node in self.nodes}
        state[root.symbolic_name] = VisitState.ON_STACK
        stack: list[tuple[PackageNode, Iterator[PackageNode]]] = [
            (root, iter(self.get_dependencies(root)))
        ]

        while stack:
            node, pending = stack[-1]
            for dep in pending:
                if dep.symbolic_name == root.symbolic_name:
                    return True
                if state[dep.symbolic_name] is VisitState.UNVISITED:
                    state[dep.symbolic_name] = VisitState.ON_STACK
                    stack.append((dep, iter(self.get_dependencies(dep))))
                    break
            else:
                state[node.symbolic_name] = VisitState.RESOLVED
                stack.pop()

        return False

    def annotate(self) -> None:
        """Set ``is_dependency_of_another`` and ``participates_in_cycle`` on every node."""
        for node in self.nodes:
            node.is_dependency_of_another = bool(self.get_dependents(node))
            node.participates_in_cycle = self.reaches_itself(node)

    def ordered(self) -> OrderedGraph:
        """Annotate and order the nodes.

        The insertion ordering is stably re-sorted so that nodes other
        packages depend on come first and, among those, nodes in cycles.
        """
        self.annotate()
        ordered = sorted(
            self.order(),
            key=lambda n: (not n.is_dependency_of_another, not n.participates_in_cycle),
        )
        return OrderedGraph(nodes=ordered, graph=self)


@dataclass
class OrderedGraph:
    """Annotated nodes in processing order."""

    nodes: list[PackageNode]
    graph: DependencyGraph

    def __iter__(self) -> Iterator[PackageNode]:
        return iter(self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)

    def __getitem__(self, index: int) -> PackageNode:
        return self.nodes[index]

    @property
    def names(self) -> list[str]:
        """Symbolic names in order."""
        return [node.symbolic_name for node in self.nodes]

    @property
    def cycle_members(self) -> set[str]:
        """Symbolic names of nodes participating in a cycle."""
        return {node.symbolic_name for node in self.nodes if node.participates_in_cycle}

    @property
    def cycle_manifest_names(self) -> set[str]:
        """Manifest names of nodes participating in a cycle."""
        return {
            node.manifest.name
            for node in self.nodes
            if node.participates_in_cycle and node.manifest.name
        }

    def get(self, name: str) -> PackageNode | None:
        """Look up a node by symbolic name."""
        return self.graph.get(name)

    def find_by_manifest_name(self, manifest_name: str) -> PackageNode | None:
        return next((n for n in self.nodes if n.manifest.name == manifest_name), None)


def build_nodes(
    name_to_location: Mapping[str, Path | str] | Iterable[tuple[str, Path | str]],
    include: str | list[str] | None = None,
    exclude: list[str] | None = None,
    *,
    reader: ManifestReader = read_manifest,
) -> list[PackageNode]:
    """Create unannotated nodes for every name passing the filters.

    Args:
        name_to_location: Mapping (or pairs) of symbolic name to package root.
        include: Names or patterns to keep (absent keeps all).
        exclude: Names or patterns to drop, applied after include.
        reader: Manifest reader.

    Returns:
        Nodes in input order.

    Raises:
        DuplicateSymbolicNameError: On a repeated symbolic or manifest name.
        ManifestUnreadableError: If a manifest cannot be read.
    """
    pairs = name_to_location.items() if isinstance(name_to_location, Mapping) else name_to_location
    entries = [(name, Path(location)) for name, location in pairs]
    selected = select_locations(entries, include=include, exclude=exclude)

    seen: set[str] = set()
    for name, _ in selected:
        if name in seen:
            raise DuplicateSymbolicNameError(name)
        seen.add(name)

    nodes: list[PackageNode] = []
    manifest_names: set[str] = set()
    for name, location in selected:
        manifest = reader(location)
        if manifest.name:
            if manifest.name in manifest_names:
                raise DuplicateSymbolicNameError(manifest.name, manifest_name=True)
            manifest_names.add(manifest.name)
        nodes.append(PackageNode(symbolic_name=name, location=location, manifest=manifest))

    return nodes


def order_nodes(nodes: list[PackageNode]) -> OrderedGraph:
    """Annotate and order already built nodes."""
    return DependencyGraph(nodes).ordered()


def build_ordered_graph(
    name_to_location: Mapping[str, Path | str] | Iterable[tuple[str, Path | str]],
    include: str | list[str] | None = None,
    exclude: list[str] | None = None,
    *,
    reader: ManifestReader = read_manifest,
) -> OrderedGraph:
    """Build, annotate and order a fresh graph.

    Args:
        name_to_location: Mapping (or pairs) of symbolic name to package root.
        include: Names or patterns to keep.
        exclude: Names or patterns to drop.
        reader: Manifest reader.

    Returns:
        Ordered graph covering every selected package exactly once.
    """
    return order_nodes(build_nodes(name_to_location, include, exclude, reader=reader))
