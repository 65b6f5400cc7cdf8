"""package.json manifest snapshots."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from libalibe.errors import ManifestUnreadableError

MANIFEST_FILE = "package.json"
EXEMPTION_KEY = "libalibe"


def _string_map(data: dict[str, Any], key: str) -> dict[str, str]:
    value = data.get(key) or {}
    if not isinstance(value, dict):
        return {}
    return {str(k): str(v) for k, v in value.items()}


@dataclass(frozen=True)
class ManifestSnapshot:
    """Immutable view of a package manifest taken at read time.

    Attributes:
        name: Declared package name.
        version: Declared version.
        runtime: ``dependencies`` ranges.
        development: ``devDependencies`` ranges.
        peer: ``peerDependencies`` ranges.
        scripts: Declared scripts.
        self_accuracy_exempt: Consumers may use range matching for this package.
        accuracy_exempt_names: Dependencies this package matches by range.
        repository_url: ``repository`` (string or ``url`` field).
    """

    name: str | None = None
    version: str | None = None
    runtime: dict[str, str] = field(default_factory=dict)
    development: dict[str, str] = field(default_factory=dict)
    peer: dict[str, str] = field(default_factory=dict)
    scripts: dict[str, str] = field(default_factory=dict)
    self_accuracy_exempt: bool = False
    accuracy_exempt_names: frozenset[str] = frozenset()
    repository_url: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ManifestSnapshot:
        """Build a snapshot from parsed package.json data."""
        exemptions = data.get(EXEMPTION_KEY) or {}
        if not isinstance(exemptions, dict):
            exemptions = {}
        exempt_names = exemptions.get("depsVersionAccuracyNotMatter") or []

        repository = data.get("repository")
        if isinstance(repository, dict):
            repository = repository.get("url")

        name = data.get("name")
        version = data.get("version")
        return cls(
            name=str(name) if name else None,
            version=str(version) if version else None,
            runtime=_string_map(data, "dependencies"),
            development=_string_map(data, "devDependencies"),
            peer=_string_map(data, "peerDependencies"),
            scripts=_string_map(data, "scripts"),
            self_accuracy_exempt=bool(exemptions.get("selfVersionAccuracyNotMatter", False)),
            accuracy_exempt_names=frozenset(str(n) for n in exempt_names),
            repository_url=str(repository) if repository else None,
        )

    @property
    def dependency_names(self) -> set[str]:
        """Pooled runtime, development and peer dependency names."""
        return set(self.runtime) | set(self.development) | set(self.peer)

    def declared_range(self, name: str) -> str | None:
        """Declared range for a dependency (runtime, then development, then peer)."""
        for group in (self.runtime, self.development, self.peer):
            if name in group:
                return group[name]
        return None

    def has_script(self, script: str) -> bool:
        return bool(self.scripts.get(script))


def read_manifest(location: Path) -> ManifestSnapshot:
    """Read the manifest of a package directory.

    Args:
        location: Package root directory.

    Returns:
        Manifest snapshot.

    Raises:
        ManifestUnreadableError: If package.json is missing or invalid.
    """
    path = location / MANIFEST_FILE
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ManifestUnreadableError(location, "file not found") from e
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ManifestUnreadableError(location, str(e)) from e

    if not isinstance(data, dict):
        raise ManifestUnreadableError(location, "top-level value is not an object")

    return ManifestSnapshot.from_dict(data)


def find_manifest_dirs(root: Path) -> list[Path]:
    """Find every directory under ``root`` holding a package.json.

    ``node_modules`` trees are skipped. Results are sorted.
    """
    dirs = [
        p.parent
        for p in root.rglob(MANIFEST_FILE)
        if "node_modules" not in p.relative_to(root).parts
    ]
    return sorted(dirs)
