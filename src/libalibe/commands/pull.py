"""Pull-or-clone command implementation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

import typer
from rich.console import Console
from rich.markup import escape

from libalibe.commands.base import CommandContext, SyncCommand
from libalibe.errors import LibalibeError, NoPackagesFoundError, WorkingTreeError
from libalibe.git import clone, is_clean, is_git_repo, pull
from libalibe.pm import view_field

if TYPE_CHECKING:
    from libalibe.workspace.workspace import Workspace


class PullAction(Enum):
    PULLED = "pulled"
    CLONED = "cloned"


@dataclass
class PullResult:
    """Action taken per configured package."""

    actions: dict[str, PullAction] = field(default_factory=dict)


def normalize_repository_url(url: str) -> str:
    """Turn a registry ``repository.url`` into something git can clone."""
    return url.strip().removeprefix("git+")


class PullCommand(SyncCommand[PullResult]):
    """Pull every configured package, cloning the ones not checked out yet."""

    def pull_package(self, location: Path) -> None:
        if not is_clean(location):
            raise WorkingTreeError(location, "uncommitted changes")
        config = self.workspace.config
        pull(location, config.remote, config.branch)

    def clone_package(self, name: str, location: Path) -> None:
        if location.exists() and any(location.iterdir()):
            raise WorkingTreeError(location, "directory is not empty")
        location.mkdir(parents=True, exist_ok=True)
        url = view_field(location, name, "repository.url", binary=self.context.pm)
        if not url:
            raise LibalibeError(f"No repository.url in {name}")
        clone(normalize_repository_url(url), location)

    def execute(self) -> PullResult:
        items = self.workspace.items
        if not items:
            raise NoPackagesFoundError()

        result = PullResult()
        for name, location in items.items():
            if location.is_dir() and is_git_repo(location):
                self.pull_package(location)
                result.actions[name] = PullAction.PULLED
            else:
                self.clone_package(name, location)
                result.actions[name] = PullAction.CLONED
        return result


def pull_packages(workspace: Workspace, *, context: CommandContext | None = None) -> PullResult:
    """Convenience function to pull or clone every configured package."""
    context = context or CommandContext(workspace=workspace)
    return PullCommand(context).execute()


def handle_pull(
    context: CommandContext,
    *,
    console: Console,
    error_console: Console,
) -> None:
    try:
        result = pull_packages(context.workspace, context=context)
    except LibalibeError as e:
        error_console.print(f"[red]Error:[/red] {escape(e.message)}")
        raise typer.Exit(1) from e

    for name, action in result.actions.items():
        console.print(f"[green]{escape(name)}[/green]: {action.value}")
