"""Test git repo utilities."""

from pathlib import Path
from unittest.mock import MagicMock, call, patch

import pytest

from libalibe.errors import BranchError, GitError
from libalibe.git.repo import (
    add_all_and_commit,
    clone,
    ensure_branch,
    get_current_branch,
    get_latest_tag,
    get_status_text,
    is_clean,
    is_git_repo,
    is_last_commit_release,
    push,
    run_git_command,
)


def test_run_git_command_success():
    with patch("subprocess.run") as mock_run:
        mock_run.return_value = MagicMock(returncode=0, stdout="output", stderr="")

        result = run_git_command(["status"], cwd=Path("."))

        assert result.returncode == 0
        assert result.stdout == "output"
        mock_run.assert_called_once()
        assert mock_run.call_args[0][0] == ["git", "status"]
        assert mock_run.call_args[1]["check"] is False


def test_run_git_command_failure():
    with patch("subprocess.run") as mock_run:
        mock_run.return_value = MagicMock(returncode=1, stdout="", stderr="fatal: nope\n")

        with pytest.raises(GitError, match="fatal: nope") as exc_info:
            run_git_command(["status"], cwd=Path("."))

        assert exc_info.value.command == "git status"

        result = run_git_command(["status"], cwd=Path("."), check=False)
        assert result.returncode == 1


def test_run_git_command_git_missing():
    with patch("subprocess.run", side_effect=FileNotFoundError):
        with pytest.raises(GitError, match="Git is not installed"):
            run_git_command(["status"])


def test_is_git_repo(tmp_path):
    with patch("libalibe.git.repo.run_git_command") as mock_run:
        mock_run.return_value = MagicMock(returncode=0)
        assert is_git_repo(tmp_path) is True

        mock_run.return_value = MagicMock(returncode=128)
        assert is_git_repo(tmp_path) is False

    assert is_git_repo(tmp_path / "missing") is False


def test_get_current_branch():
    with patch("libalibe.git.repo.run_git_command") as mock_run:
        mock_run.return_value = MagicMock(returncode=0, stdout="master\n")
        assert get_current_branch(Path(".")) == "master"
        mock_run.assert_called_once_with(["branch", "--show-current"], cwd=Path("."))


def test_ensure_branch():
    with patch("libalibe.git.repo.get_current_branch", return_value="master"):
        ensure_branch(Path("/lib"), "master")

    with patch("libalibe.git.repo.get_current_branch", return_value="feature"):
        with pytest.raises(BranchError, match="not on master branch"):
            ensure_branch(Path("/lib"), "master")


def test_status():
    with patch("libalibe.git.repo.run_git_command") as mock_run:
        mock_run.return_value = MagicMock(returncode=0, stdout=" M src/index.ts\n")
        assert get_status_text(Path(".")) == "M src/index.ts"
        assert not is_clean(Path("."))

        mock_run.return_value = MagicMock(returncode=0, stdout="\n")
        assert is_clean(Path("."))


def test_get_latest_tag():
    with patch("libalibe.git.repo.run_git_command") as mock_run:
        mock_run.return_value = MagicMock(returncode=0, stdout="v1.2.3\n")
        assert get_latest_tag(Path(".")) == "v1.2.3"

        mock_run.return_value = MagicMock(returncode=128, stdout="")
        assert get_latest_tag(Path(".")) is None


def test_is_last_commit_release():
    with (
        patch("libalibe.git.repo.get_latest_tag", return_value="v1.2.3"),
        patch("libalibe.git.repo.get_last_commit_message", return_value="1.2.3"),
    ):
        assert is_last_commit_release(Path("."))

    with (
        patch("libalibe.git.repo.get_latest_tag", return_value="v1.2.3"),
        patch("libalibe.git.repo.get_last_commit_message", return_value="Small fix"),
    ):
        assert not is_last_commit_release(Path("."))

    with patch("libalibe.git.repo.get_latest_tag", return_value=None):
        assert not is_last_commit_release(Path("."))


def test_add_all_and_commit_push_clone():
    with patch("libalibe.git.repo.run_git_command") as mock_run:
        add_all_and_commit(Path("/lib"), "Small fix")
        push(Path("/lib"), "origin", "master")
        clone("https://example.com/lib.git", Path("/target"))

        assert mock_run.call_args_list == [
            call(["add", "-A"], cwd=Path("/lib")),
            call(["commit", "-m", "Small fix"], cwd=Path("/lib")),
            call(["push", "origin", "master"], cwd=Path("/lib")),
            call(["clone", "https://example.com/lib.git", "."], cwd=Path("/target")),
        ]
