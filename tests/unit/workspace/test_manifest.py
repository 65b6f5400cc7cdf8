"""Tests for package.json snapshots."""

from __future__ import annotations

from pathlib import Path

import pytest

from libalibe.errors import ManifestUnreadableError
from libalibe.workspace.manifest import ManifestSnapshot, find_manifest_dirs, read_manifest


class TestManifestSnapshot:
    """Tests for ManifestSnapshot.from_dict."""

    def test_reads_dependency_groups(self) -> None:
        snapshot = ManifestSnapshot.from_dict(
            {
                "name": "lib",
                "version": "1.0.0",
                "dependencies": {"a": "^1.0.0"},
                "devDependencies": {"b": "2.0.0"},
                "peerDependencies": {"c": ">=3"},
                "scripts": {"build": "tsc"},
            }
        )

        assert snapshot.name == "lib"
        assert snapshot.version == "1.0.0"
        assert snapshot.dependency_names == {"a", "b", "c"}
        assert snapshot.has_script("build")
        assert not snapshot.has_script("watch")

    def test_declared_range_prefers_runtime(self) -> None:
        snapshot = ManifestSnapshot.from_dict(
            {
                "dependencies": {"a": "^1.0.0"},
                "devDependencies": {"a": "^2.0.0", "b": "2.0.0"},
                "peerDependencies": {"a": "*", "c": ">=3"},
            }
        )

        assert snapshot.declared_range("a") == "^1.0.0"
        assert snapshot.declared_range("b") == "2.0.0"
        assert snapshot.declared_range("c") == ">=3"
        assert snapshot.declared_range("d") is None

    def test_exemptions(self) -> None:
        snapshot = ManifestSnapshot.from_dict(
            {
                "name": "lib",
                "libalibe": {
                    "selfVersionAccuracyNotMatter": True,
                    "depsVersionAccuracyNotMatter": ["react", "vue"],
                },
            }
        )

        assert snapshot.self_accuracy_exempt
        assert snapshot.accuracy_exempt_names == frozenset({"react", "vue"})

    def test_repository_url_string_or_object(self) -> None:
        as_object = ManifestSnapshot.from_dict({"repository": {"type": "git", "url": "git+https://x/y.git"}})
        as_string = ManifestSnapshot.from_dict({"repository": "https://x/y.git"})

        assert as_object.repository_url == "git+https://x/y.git"
        assert as_string.repository_url == "https://x/y.git"

    def test_missing_fields(self) -> None:
        snapshot = ManifestSnapshot.from_dict({})

        assert snapshot.name is None
        assert snapshot.version is None
        assert snapshot.dependency_names == set()
        assert not snapshot.self_accuracy_exempt

    def test_snapshot_is_immutable(self) -> None:
        snapshot = ManifestSnapshot.from_dict({"name": "lib"})
        with pytest.raises(AttributeError):
            snapshot.name = "other"  # type: ignore[misc]


class TestReadManifest:
    """Tests for reading manifests from disk."""

    def test_read(self, temp_dir: Path, make_package) -> None:
        make_package(temp_dir / "lib", name="lib", version="3.0.0")
        assert read_manifest(temp_dir / "lib").version == "3.0.0"

    def test_missing_file(self, temp_dir: Path) -> None:
        with pytest.raises(ManifestUnreadableError, match="file not found"):
            read_manifest(temp_dir)

    def test_invalid_json(self, temp_dir: Path) -> None:
        (temp_dir / "package.json").write_text("{ not json")
        with pytest.raises(ManifestUnreadableError):
            read_manifest(temp_dir)

    def test_non_object(self, temp_dir: Path) -> None:
        (temp_dir / "package.json").write_text("[1, 2]")
        with pytest.raises(ManifestUnreadableError, match="not an object"):
            read_manifest(temp_dir)


def test_find_manifest_dirs_skips_node_modules(temp_dir: Path, make_package) -> None:
    make_package(temp_dir, name="root")
    make_package(temp_dir / "packages" / "b", name="b")
    make_package(temp_dir / "packages" / "a", name="a")
    make_package(temp_dir / "node_modules" / "dep", name="dep")
    make_package(temp_dir / "packages" / "a" / "node_modules" / "x", name="x")

    assert find_manifest_dirs(temp_dir) == [
        temp_dir,
        temp_dir / "packages" / "a",
        temp_dir / "packages" / "b",
    ]
