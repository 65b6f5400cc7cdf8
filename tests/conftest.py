"""Shared test fixtures for libalibe tests."""

from __future__ import annotations

import json
import tempfile
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest

PackageFactory = Callable[..., Path]


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's libalibe environment out of tests."""
    for var in ("LIBALIBE_CONFIG_PATH", "LIBALIBE_ENV", "EDITOR"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


def write_package(directory: Path, **manifest: Any) -> Path:
    """Create ``directory`` with a package.json holding ``manifest``."""
    directory.mkdir(parents=True, exist_ok=True)
    (directory / "package.json").write_text(json.dumps(manifest, indent=2))
    return directory


@pytest.fixture
def make_package() -> PackageFactory:
    """Factory writing a package.json into a directory."""
    return write_package


@pytest.fixture
def sample_libalibe_yaml() -> str:
    """Sample libalibe.yml content."""
    return """\
items:
  lib-a: ./libs/a
  lib-b: ./libs/b
  lib-c: ./libs/c
branch: master
remote: origin
"""


@pytest.fixture
def workspace_dir(temp_dir: Path, sample_libalibe_yaml: str) -> Path:
    """Create a sample workspace: lib-a -> lib-b -> lib-c plus a consumer app.

    lib-b records ``^2.0.0`` for lib-c while lib-c is at 2.1.0, so lib-b is
    the only stale package.
    """
    (temp_dir / "libalibe.yml").write_text(sample_libalibe_yaml)

    libs = temp_dir / "libs"
    write_package(
        libs / "a",
        name="lib-a",
        version="1.0.0",
        dependencies={"lib-b": "^1.2.0"},
        scripts={"build": "tsc", "lint": "eslint ."},
    )
    write_package(
        libs / "b",
        name="lib-b",
        version="1.2.0",
        dependencies={"lib-c": "^2.0.0"},
        scripts={"build": "tsc", "test": "vitest"},
    )
    write_package(libs / "c", name="lib-c", version="2.1.0")

    write_package(
        temp_dir / "app",
        name="app",
        version="0.0.1",
        dependencies={"lib-a": "^1.0.0", "left-pad": "^1.3.0"},
        devDependencies={"lib-c": "2.1.0"},
    )

    return temp_dir


@pytest.fixture
def cycle_workspace_dir(temp_dir: Path) -> Path:
    """Workspace where lib-x and lib-y depend on each other and lib-z uses lib-x."""
    (temp_dir / "libalibe.yml").write_text(
        """\
items:
  lib-z: ./z
  lib-x: ./x
  lib-y: ./y
"""
    )
    write_package(temp_dir / "x", name="lib-x", version="1.0.0", dependencies={"lib-y": "^1.0.0"})
    write_package(temp_dir / "y", name="lib-y", version="1.1.0", dependencies={"lib-x": "^1.0.0"})
    write_package(temp_dir / "z", name="lib-z", version="0.1.0", dependencies={"lib-x": "1.0.0"})
    return temp_dir
