"""Workspace: configured packages and the operations over them."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from libalibe.config import LibalibeConfig, LoadedConfig, load_config
from libalibe.errors import PackageNotFoundError
from libalibe.filters.chain import select_locations
from libalibe.workspace.actuality import ActualityResult, check_actuality
from libalibe.workspace.graph import OrderedGraph, build_ordered_graph
from libalibe.workspace.manifest import ManifestSnapshot, read_manifest


@dataclass
class SuitablePackages:
    """Configured libraries a project actually declares.

    Attributes:
        names: Suitable names (runtime or development), in config order.
        prod_names: Suitable names declared as runtime dependencies.
        dev_names: Suitable names declared as development dependencies.
        nonsuitable_names: Configured libraries the project does not declare.
        ranges: Declared range per suitable name.
    """

    names: list[str] = field(default_factory=list)
    prod_names: list[str] = field(default_factory=list)
    dev_names: list[str] = field(default_factory=list)
    nonsuitable_names: list[str] = field(default_factory=list)
    ranges: dict[str, str] = field(default_factory=dict)

    def __bool__(self) -> bool:
        return bool(self.names)


class Workspace:
    """A set of configured local packages.

    Attributes:
        root: Directory of the nearest config file.
        config: Merged configuration.
        config_paths: Files the configuration was merged from.
    """

    def __init__(self, root: Path, config: LibalibeConfig, config_paths: list[Path]) -> None:
        self.root = root
        self.config = config
        self.config_paths = config_paths

    @classmethod
    def discover(cls, path: Path | None = None) -> Workspace:
        """Load the workspace configured for a directory.

        Args:
            path: Directory to start from (defaults to cwd).

        Raises:
            ConfigurationError: If no valid configuration exists.
        """
        loaded: LoadedConfig = load_config(path)
        return cls(root=loaded.root, config=loaded.config, config_paths=loaded.paths)

    @property
    def items(self) -> dict[str, Path]:
        """Symbolic name to package directory, in configuration order."""
        return {name: Path(location) for name, location in self.config.items.items()}

    @property
    def library_names(self) -> list[str]:
        return self.config.library_names

    def get_package_path(self, name: str) -> Path:
        """Get the directory of a configured package.

        Raises:
            PackageNotFoundError: If the name is not configured.
        """
        location = self.config.get_item_path(name)
        if location is None:
            raise PackageNotFoundError(name, list(self.config.items))
        return Path(location)

    def get_package_manifest(self, name: str) -> ManifestSnapshot:
        """Read the current manifest of a configured package."""
        return read_manifest(self.get_package_path(name))

    def resolve(
        self,
        include: str | list[str] | None = None,
        exclude: list[str] | None = None,
    ) -> dict[str, Path]:
        """Resolve symbolic names to locations after filtering."""
        return dict(select_locations(self.items.items(), include=include, exclude=exclude))

    def ordered_graph(
        self,
        include: str | list[str] | None = None,
        exclude: list[str] | None = None,
    ) -> OrderedGraph:
        """Build a fresh ordered graph over the configured packages."""
        return build_ordered_graph(self.items, include, exclude)

    def suitable_packages(self, project: ManifestSnapshot) -> SuitablePackages:
        """Split configured libraries by whether a project declares them.

        Only runtime and development dependencies make a library suitable.
        """
        prod = set(project.runtime)
        dev = set(project.development)
        result = SuitablePackages()

        for name in self.library_names:
            if name in prod or name in dev:
                result.names.append(name)
                result.ranges[name] = project.runtime[name] if name in prod else project.development[name]
                if name in prod:
                    result.prod_names.append(name)
                if name in dev:
                    result.dev_names.append(name)
            else:
                result.nonsuitable_names.append(name)

        return result

    def check_project_actuality(
        self,
        project_path: Path,
        *,
        force_exact: bool = False,
    ) -> ActualityResult:
        """Check whether a project's suitable libraries are actual.

        Manifests are read and the graph is rebuilt on every call, so a
        release chain sees versions bumped earlier in the same run.
        """
        project = read_manifest(project_path)
        suitable = self.suitable_packages(project)
        if not suitable:
            return ActualityResult()

        graph = self.ordered_graph()
        dependencies = {name: self.get_package_manifest(name) for name in suitable.names}
        return check_actuality(
            project,
            dependencies,
            cycle_members=graph.cycle_members | graph.cycle_manifest_names,
            force_exact=force_exact,
        )
