"""Git repository operations."""

from __future__ import annotations

import subprocess
from pathlib import Path

from libalibe.errors import BranchError, GitError


def run_git_command(
    args: list[str],
    cwd: Path | None = None,
    *,
    check: bool = True,
) -> subprocess.CompletedProcess[str]:
    """Run a git command synchronously.

    Args:
        args: Git command arguments (without 'git').
        cwd: Working directory.
        check: Raise on non-zero exit code.

    Returns:
        Completed process result.

    Raises:
        GitError: If command fails and check is True.
    """
    cmd = ["git"] + args

    try:
        result = subprocess.run(
            cmd,
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
    except FileNotFoundError as e:
        raise GitError("Git is not installed") from e

    if check and result.returncode != 0:
        raise GitError(
            result.stderr.strip() or f"Command failed with exit code {result.returncode}",
            command=" ".join(cmd),
        )
    return result


def is_git_repo(path: Path) -> bool:
    """Check if path is inside a git repository."""
    if not path.is_dir():
        return False
    try:
        result = run_git_command(["rev-parse", "--git-dir"], cwd=path, check=False)
    except GitError:
        return False
    return result.returncode == 0


def get_status_text(cwd: Path) -> str:
    """Porcelain status of the working tree, stripped."""
    return run_git_command(["status", "--porcelain"], cwd=cwd).stdout.strip()


def is_clean(cwd: Path) -> bool:
    """Check if the working directory has no uncommitted changes."""
    return not get_status_text(cwd)


def get_current_branch(cwd: Path) -> str:
    """Get the current git branch name."""
    return run_git_command(["branch", "--show-current"], cwd=cwd).stdout.strip()


def ensure_branch(cwd: Path, branch: str) -> None:
    """Fail unless the repository is on ``branch``.

    Raises:
        BranchError: If another branch is checked out.
    """
    current = get_current_branch(cwd)
    if current != branch:
        raise BranchError(cwd, branch, current)


def get_last_commit_message(cwd: Path) -> str:
    return run_git_command(["log", "-1", "--pretty=%B"], cwd=cwd).stdout.strip()


def get_latest_tag(cwd: Path) -> str | None:
    """Get the most recent reachable tag, or None when there is none."""
    result = run_git_command(["describe", "--tags", "--abbrev=0"], cwd=cwd, check=False)
    if result.returncode != 0:
        return None
    return result.stdout.strip() or None


def is_last_commit_release(cwd: Path) -> bool:
    """Check whether the last commit is the version commit of the latest tag.

    Version bumps commit with the bare version as message and tag ``v<version>``.
    """
    tag = get_latest_tag(cwd)
    if tag is None:
        return False
    return get_last_commit_message(cwd) == tag.removeprefix("v")


def add_all_and_commit(cwd: Path, message: str) -> None:
    """Stage everything and commit."""
    run_git_command(["add", "-A"], cwd=cwd)
    run_git_command(["commit", "-m", message], cwd=cwd)


def push(cwd: Path, remote: str, branch: str) -> None:
    run_git_command(["push", remote, branch], cwd=cwd)


def pull(cwd: Path, remote: str, branch: str) -> None:
    run_git_command(["pull", remote, branch], cwd=cwd)


def clone(url: str, target: Path) -> None:
    """Clone ``url`` into the (empty) ``target`` directory."""
    run_git_command(["clone", url, "."], cwd=target)
