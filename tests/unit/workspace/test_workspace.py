"""Tests for Workspace."""

from __future__ import annotations

from pathlib import Path

import pytest

from libalibe.config import LibalibeConfig
from libalibe.errors import ConfigurationError, PackageNotFoundError
from libalibe.workspace import Workspace, read_manifest
from libalibe.workspace.manifest import ManifestSnapshot


class TestDiscover:
    def test_discover(self, workspace_dir: Path) -> None:
        workspace = Workspace.discover(workspace_dir)

        assert workspace.root == workspace_dir
        assert workspace.config_paths == [workspace_dir / "libalibe.yml"]
        assert list(workspace.items) == ["lib-a", "lib-b", "lib-c"]
        assert workspace.items["lib-a"] == workspace_dir / "libs" / "a"

    def test_discover_from_subdirectory(self, workspace_dir: Path) -> None:
        workspace = Workspace.discover(workspace_dir / "app")
        assert workspace.root == workspace_dir

    def test_no_config(self, temp_dir: Path) -> None:
        with pytest.raises(ConfigurationError, match="Config file not found"):
            Workspace.discover(temp_dir)


class TestPackages:
    def test_get_package_path(self, workspace_dir: Path) -> None:
        workspace = Workspace.discover(workspace_dir)
        assert workspace.get_package_path("lib-b") == workspace_dir / "libs" / "b"

    def test_unknown_package(self, workspace_dir: Path) -> None:
        workspace = Workspace.discover(workspace_dir)
        with pytest.raises(PackageNotFoundError, match='Invalid lib package name: "nope"'):
            workspace.get_package_path("nope")

    def test_get_package_manifest(self, workspace_dir: Path) -> None:
        workspace = Workspace.discover(workspace_dir)
        assert workspace.get_package_manifest("lib-c").version == "2.1.0"

    def test_resolve_filters(self, workspace_dir: Path) -> None:
        workspace = Workspace.discover(workspace_dir)
        assert list(workspace.resolve(include="lib-*", exclude=["lib-b"])) == ["lib-a", "lib-c"]

    def test_ordered_graph(self, workspace_dir: Path) -> None:
        graph = Workspace.discover(workspace_dir).ordered_graph()
        assert graph.names == ["lib-c", "lib-b", "lib-a"]

    def test_ordered_graph_with_cycle(self, cycle_workspace_dir: Path) -> None:
        graph = Workspace.discover(cycle_workspace_dir).ordered_graph()

        assert graph.names == ["lib-y", "lib-x", "lib-z"]
        assert graph.cycle_members == {"lib-x", "lib-y"}


class TestSuitablePackages:
    def test_split_by_dependency_group(self, workspace_dir: Path) -> None:
        workspace = Workspace.discover(workspace_dir)
        suitable = workspace.suitable_packages(read_manifest(workspace_dir / "app"))

        assert suitable.names == ["lib-a", "lib-c"]
        assert suitable.prod_names == ["lib-a"]
        assert suitable.dev_names == ["lib-c"]
        assert suitable.nonsuitable_names == ["lib-b"]
        assert suitable.ranges == {"lib-a": "^1.0.0", "lib-c": "2.1.0"}

    def test_exclude_removes_library(self, workspace_dir: Path) -> None:
        (workspace_dir / "libalibe.yml").write_text(
            "items:\n  lib-a: ./libs/a\n  lib-c: ./libs/c\nexclude: [lib-c]\n"
        )
        workspace = Workspace.discover(workspace_dir)
        suitable = workspace.suitable_packages(read_manifest(workspace_dir / "app"))

        assert suitable.names == ["lib-a"]

    def test_nothing_suitable(self, workspace_dir: Path) -> None:
        workspace = Workspace.discover(workspace_dir)
        assert not workspace.suitable_packages(read_manifest(workspace_dir / "libs" / "c"))

    def test_empty_runtime_range(self) -> None:
        workspace = Workspace(Path("/"), LibalibeConfig(items={"lib": "/x/lib"}), [])
        project = ManifestSnapshot(name="app", runtime={"lib": ""}, development={"lib": "^1.0.0"})

        suitable = workspace.suitable_packages(project)

        assert suitable.names == ["lib"]
        assert suitable.prod_names == ["lib"]
        assert suitable.ranges == {"lib": ""}


class TestProjectActuality:
    def test_actual_project(self, workspace_dir: Path) -> None:
        workspace = Workspace.discover(workspace_dir)
        assert workspace.check_project_actuality(workspace_dir / "app")

    def test_stale_library(self, workspace_dir: Path) -> None:
        workspace = Workspace.discover(workspace_dir)
        result = workspace.check_project_actuality(workspace_dir / "libs" / "b")

        assert not result
        assert result.stale_names == ["lib-c"]

    def test_sees_versions_changed_on_disk(self, workspace_dir: Path, make_package) -> None:
        workspace = Workspace.discover(workspace_dir)
        assert workspace.check_project_actuality(workspace_dir / "libs" / "a")

        make_package(workspace_dir / "libs" / "b", name="lib-b", version="1.2.1")

        assert not workspace.check_project_actuality(workspace_dir / "libs" / "a")

    def test_cycle_loosens_matching(self, cycle_workspace_dir: Path) -> None:
        workspace = Workspace.discover(cycle_workspace_dir)

        assert workspace.check_project_actuality(cycle_workspace_dir / "x")
        assert not workspace.check_project_actuality(cycle_workspace_dir / "x", force_exact=True)
