"""Git operations."""

from libalibe.git.repo import (
    add_all_and_commit,
    clone,
    ensure_branch,
    get_current_branch,
    get_last_commit_message,
    get_latest_tag,
    get_status_text,
    is_clean,
    is_git_repo,
    is_last_commit_release,
    pull,
    push,
    run_git_command,
)

__all__ = [
    "add_all_and_commit",
    "clone",
    "ensure_branch",
    "get_current_branch",
    "get_last_commit_message",
    "get_latest_tag",
    "get_status_text",
    "is_clean",
    "is_git_repo",
    "is_last_commit_release",
    "pull",
    "push",
    "run_git_command",
]
