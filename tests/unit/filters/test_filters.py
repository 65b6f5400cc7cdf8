"""Test scope and ignore filters."""

from pathlib import Path

from libalibe.filters import (
    apply_filters,
    filter_by_ignore,
    filter_by_scope,
    match_name,
    parse_scope,
    select_locations,
    should_ignore,
)
from libalibe.workspace.manifest import ManifestSnapshot
from libalibe.workspace.package import PackageNode


def node(name: str, location: str) -> PackageNode:
    return PackageNode(name, Path(location), ManifestSnapshot(name=name))


def test_parse_scope():
    assert parse_scope(None) == []
    assert parse_scope("") == []
    assert parse_scope("core, api,,") == ["core", "api"]
    assert parse_scope(["core", " *-lib "]) == ["core", "*-lib"]


def test_match_name():
    assert match_name("anything", [])
    assert match_name("core", ["core"])
    assert match_name("ui-kit", ["ui-*"])
    assert not match_name("Core", ["core"])
    assert not match_name("ui-kit", ["ui_kit"])
    assert not match_name("api", ["core", "ui-*"])


def test_should_ignore():
    assert not should_ignore("core", Path("/libs/core"), [])
    assert should_ignore("core", Path("/libs/core"), ["core"])
    assert not should_ignore("my-lib", None, ["my_lib"])
    assert should_ignore("core", Path("/libs/core"), ["/libs/*"])
    assert not should_ignore("core", None, ["/libs/*"])


def test_filter_nodes():
    nodes = [node("core", "/libs/core"), node("ui-kit", "/libs/ui"), node("api", "/srv/api")]

    assert [n.name for n in filter_by_scope(nodes, "ui-*,api")] == ["ui-kit", "api"]
    assert [n.name for n in filter_by_ignore(nodes, ["/srv/*"])] == ["core", "ui-kit"]
    assert filter_by_ignore(nodes, None) is nodes
    assert [n.name for n in apply_filters(nodes, scope="*", ignore=["core"])] == ["ui-kit", "api"]


def test_select_locations_keeps_order():
    entries = [("b", Path("/b")), ("a", Path("/a")), ("c", Path("/c"))]

    assert select_locations(entries) == entries
    assert select_locations(entries, include=["c", "b"]) == [("b", Path("/b")), ("c", Path("/c"))]
    assert select_locations(entries, exclude=["a"]) == [("b", Path("/b")), ("c", Path("/c"))]


def test_select_locations_uses_exact_names():
    entries = [("Core", Path("/libs/Core")), ("my_lib", Path("/libs/my_lib"))]

    assert select_locations(entries, include=["core", "my-lib"]) == []
    assert select_locations(entries, exclude=["core", "my-lib"]) == entries
    assert select_locations(entries, include=["C*"]) == [("Core", Path("/libs/Core"))]
