"""Package manager (pnpm by default) command wrappers."""

from __future__ import annotations

import json
import subprocess
from collections.abc import Sequence
from enum import Enum
from pathlib import Path

from libalibe.errors import ExecutionError

DEFAULT_BINARY = "pnpm"


class BumpType(Enum):
    """Semantic version bump type."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"


def run_pm(
    args: Sequence[str],
    cwd: Path,
    *,
    binary: str = DEFAULT_BINARY,
    check: bool = True,
) -> subprocess.CompletedProcess[str]:
    """Run a package manager command.

    Args:
        args: Command arguments (without the binary).
        cwd: Working directory.
        binary: Package manager executable.
        check: Raise on non-zero exit code.

    Returns:
        Completed process result.

    Raises:
        ExecutionError: If the binary is missing, or the command fails and check is True.
    """
    cmd = [binary, *args]

    try:
        result = subprocess.run(
            cmd,
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
    except FileNotFoundError as e:
        raise ExecutionError(f"{binary} is not installed", command=" ".join(cmd)) from e

    if check and result.returncode != 0:
        raise ExecutionError(
            f"{cwd}: {' '.join(cmd)} exited with code {result.returncode}",
            command=" ".join(cmd),
            exit_code=result.returncode,
            stderr=result.stderr,
        )
    return result


def link_global(cwd: Path, names: Sequence[str], *, binary: str = DEFAULT_BINARY) -> None:
    """Link globally registered packages into a project."""
    run_pm(["link", "-g", *names], cwd, binary=binary)


def unlink(cwd: Path, names: Sequence[str], *, binary: str = DEFAULT_BINARY) -> None:
    run_pm(["unlink", *names], cwd, binary=binary)


def install_latest(
    cwd: Path,
    prod_names: Sequence[str],
    dev_names: Sequence[str],
    *,
    binary: str = DEFAULT_BINARY,
) -> None:
    """Install the latest published version of packages.

    Args:
        cwd: Project directory.
        prod_names: Runtime dependencies to update.
        dev_names: Development dependencies to update (installed with ``-D``).
        binary: Package manager executable.
    """
    if prod_names:
        run_pm(["install", *(f"{name}@latest" for name in prod_names)], cwd, binary=binary)
    if dev_names:
        run_pm(["install", "-D", *(f"{name}@latest" for name in dev_names)], cwd, binary=binary)


def bump_version(
    cwd: Path,
    bump: BumpType = BumpType.PATCH,
    *,
    binary: str = DEFAULT_BINARY,
) -> str:
    """Bump the package version, committing and tagging it.

    Returns:
        The new version as printed by the package manager.
    """
    output = run_pm(["version", bump.value], cwd, binary=binary).stdout.strip()
    if not output:
        return ""
    return output.splitlines()[-1].removeprefix("v")


def publish(cwd: Path, *, binary: str = DEFAULT_BINARY) -> None:
    run_pm(["publish"], cwd, binary=binary)


def view_field(
    cwd: Path,
    package_name: str,
    field: str,
    *,
    binary: str = DEFAULT_BINARY,
) -> str:
    """Read one field of a package from the registry.

    Returns:
        Field value, or an empty string when the registry has none.
    """
    result = run_pm(["view", package_name, field], cwd, binary=binary, check=False)
    if result.returncode != 0:
        return ""
    return result.stdout.strip()


def parse_dependency_path(listing: str, package_name: str) -> Path | None:
    """Extract the installed directory of a dependency from ``list --json`` output.

    Development dependencies take precedence over runtime ones.
    """
    try:
        data = json.loads(listing)
    except json.JSONDecodeError:
        return None
    if isinstance(data, list):
        data = data[0] if data else {}
    if not isinstance(data, dict):
        return None

    for section in ("devDependencies", "dependencies"):
        entry = (data.get(section) or {}).get(package_name)
        if isinstance(entry, dict) and entry.get("path"):
            return Path(entry["path"])
    return None


def list_dependency_path(
    cwd: Path,
    package_name: str,
    *,
    binary: str = DEFAULT_BINARY,
) -> Path | None:
    """Find where a dependency is installed for the project at ``cwd``."""
    result = run_pm(["list", package_name, "--json"], cwd, binary=binary, check=False)
    if result.returncode != 0:
        return None
    return parse_dependency_path(result.stdout, package_name)
