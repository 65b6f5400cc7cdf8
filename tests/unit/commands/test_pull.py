"""Tests for pull command."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from libalibe.commands.pull import PullAction, normalize_repository_url, pull_packages
from libalibe.errors import LibalibeError, WorkingTreeError
from libalibe.workspace import Workspace

MODULE = "libalibe.commands.pull"


@pytest.fixture
def clone_workspace(temp_dir: Path) -> Path:
    (temp_dir / "libalibe.yml").write_text("items:\n  lib-new: ./libs/new\n")
    return temp_dir


def test_normalize_repository_url() -> None:
    assert normalize_repository_url("git+https://x/lib.git\n") == "https://x/lib.git"
    assert normalize_repository_url("git@github.com:x/lib.git") == "git@github.com:x/lib.git"


class TestPull:
    def test_pulls_checked_out_packages(self, workspace_dir: Path) -> None:
        workspace = Workspace.discover(workspace_dir)

        with (
            patch(f"{MODULE}.is_git_repo", return_value=True),
            patch(f"{MODULE}.is_clean", return_value=True),
            patch(f"{MODULE}.pull") as mock_pull,
        ):
            result = pull_packages(workspace)

        assert result.actions == {
            "lib-a": PullAction.PULLED,
            "lib-b": PullAction.PULLED,
            "lib-c": PullAction.PULLED,
        }
        mock_pull.assert_any_call(workspace_dir / "libs" / "a", "origin", "master")

    def test_dirty_tree_stops(self, workspace_dir: Path) -> None:
        workspace = Workspace.discover(workspace_dir)

        with (
            patch(f"{MODULE}.is_git_repo", return_value=True),
            patch(f"{MODULE}.is_clean", return_value=False),
            patch(f"{MODULE}.pull") as mock_pull,
        ):
            with pytest.raises(WorkingTreeError, match="uncommitted changes"):
                pull_packages(workspace)

        mock_pull.assert_not_called()

    def test_clones_missing_package(self, clone_workspace: Path) -> None:
        workspace = Workspace.discover(clone_workspace)
        target = clone_workspace / "libs" / "new"

        with (
            patch(f"{MODULE}.view_field", return_value="git+https://x/new.git") as mock_view,
            patch(f"{MODULE}.clone") as mock_clone,
        ):
            result = pull_packages(workspace)

        assert result.actions == {"lib-new": PullAction.CLONED}
        assert target.is_dir()
        mock_view.assert_called_once_with(target, "lib-new", "repository.url", binary="pnpm")
        mock_clone.assert_called_once_with("https://x/new.git", target)

    def test_refuses_non_empty_directory(self, clone_workspace: Path) -> None:
        target = clone_workspace / "libs" / "new"
        target.mkdir(parents=True)
        (target / "README.md").write_text("hi")
        workspace = Workspace.discover(clone_workspace)

        with patch(f"{MODULE}.clone") as mock_clone:
            with pytest.raises(WorkingTreeError, match="directory is not empty"):
                pull_packages(workspace)

        mock_clone.assert_not_called()

    def test_missing_repository_url(self, clone_workspace: Path) -> None:
        workspace = Workspace.discover(clone_workspace)

        with (
            patch(f"{MODULE}.view_field", return_value=""),
            patch(f"{MODULE}.clone") as mock_clone,
        ):
            with pytest.raises(LibalibeError, match="No repository.url in lib-new"):
                pull_packages(workspace)

        mock_clone.assert_not_called()
