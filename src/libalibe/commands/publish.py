"""Publish flows: publish, commit-publish and the recursive release."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from libalibe.commands.base import CommandContext, SyncCommand
from libalibe.commands.install import install_project
from libalibe.commands.link import link_project
from libalibe.errors import ExecutionError, GitError, LibalibeError, NoPackagesFoundError, PublishError
from libalibe.git import (
    add_all_and_commit,
    ensure_branch,
    get_status_text,
    is_last_commit_release,
    push,
)
from libalibe.pm import BumpType, bump_version, publish, run_pm
from libalibe.workspace import read_manifest

if TYPE_CHECKING:
    from libalibe.workspace.workspace import Workspace

ProgressHandler = Callable[[str], None]
MessagePrompt = Callable[[Path, str, str], str]


def build_bump_push_publish(
    context: CommandContext,
    path: Path,
    bump: BumpType = BumpType.PATCH,
    on_progress: ProgressHandler | None = None,
) -> str:
    """Build (when possible), bump, push and publish one package.

    Args:
        context: Command context.
        path: Package directory.
        bump: Version bump type.
        on_progress: Receives progress lines.

    Returns:
        The published version.

    Raises:
        BranchError: If the package is not on the release branch.
        PublishError: If any step fails.
    """
    config = context.workspace.config
    ensure_branch(path, config.branch)
    manifest = read_manifest(path)
    name = manifest.name or str(path)

    try:
        if manifest.has_script("build"):
            if on_progress:
                on_progress(f"Building {path}")
            run_pm(["run", "build"], path, binary=context.pm)
            context.memory.add(f"Built {path}")
        version = bump_version(path, bump, binary=context.pm) or read_manifest(path).version or ""
        push(path, config.remote, config.branch)
        publish(path, binary=context.pm)
    except (ExecutionError, GitError) as e:
        raise PublishError(name, e.message) from e

    context.memory.add(f"Published {name}@{version}")
    return version


@dataclass
class PublishOptions:
    """Options for publish and commit-publish commands."""

    path: Path = field(default_factory=Path.cwd)
    bump: BumpType = BumpType.PATCH
    message: str | None = None


@dataclass
class PublishResult:
    """Result of publishing one package."""

    path: Path
    version: str
    committed: bool = False


class PublishCommand(SyncCommand[PublishResult]):
    """Build, bump, push and publish the package in the working directory.

    When a message is given the working tree is committed first.
    """

    def __init__(
        self,
        context: CommandContext,
        options: PublishOptions | None = None,
        on_progress: ProgressHandler | None = None,
    ) -> None:
        super().__init__(context)
        self.options = options or PublishOptions()
        self.on_progress = on_progress

    def execute(self) -> PublishResult:
        path = self.options.path
        committed = False
        if self.options.message is not None:
            ensure_branch(path, self.workspace.config.branch)
            add_all_and_commit(path, self.options.message)
            committed = True
        version = build_bump_push_publish(self.context, path, self.options.bump, self.on_progress)
        return PublishResult(path=path, version=version, committed=committed)


@dataclass
class ReleaseOptions:
    """Options for release command.

    Attributes:
        message: Commit message used for every dirty package.
        small_fix: Commit with the configured default message without asking.
        bump: Version bump type.
    """

    message: str | None = None
    small_fix: bool = False
    bump: BumpType = BumpType.PATCH


@dataclass
class PackageRelease:
    """What the release flow did for one package."""

    name: str
    path: Path
    updated: bool = False
    committed: bool = False
    message: str | None = None
    published: bool = False
    version: str | None = None


@dataclass
class ReleaseResult:
    """Result of release command."""

    releases: list[PackageRelease] = field(default_factory=list)

    @property
    def committed_any(self) -> bool:
        return any(r.committed for r in self.releases)

    @property
    def published_any(self) -> bool:
        return any(r.published for r in self.releases)


class ReleaseCommand(SyncCommand[ReleaseResult]):
    """Bring every configured library up to date and publish it, in graph order.

    For each library: refresh stale dependencies (install latest and link),
    commit a dirty tree, then publish unless the last commit already is the
    version commit of the latest tag.
    """

    def __init__(
        self,
        context: CommandContext,
        options: ReleaseOptions | None = None,
        on_progress: ProgressHandler | None = None,
        message_prompt: MessagePrompt | None = None,
    ) -> None:
        super().__init__(context)
        self.options = options or ReleaseOptions()
        self.on_progress = on_progress
        self.message_prompt = message_prompt

    def _progress(self, line: str) -> None:
        if self.on_progress:
            self.on_progress(line)

    def _commit_message(self, path: Path, status: str) -> str:
        default = self.workspace.config.commit_message
        if self.options.message:
            return self.options.message
        if self.options.small_fix or self.message_prompt is None:
            return default
        return self.message_prompt(path, status, default) or default

    def _commit_if_needed(self, release: PackageRelease) -> None:
        status = get_status_text(release.path)
        if not status:
            return
        self._progress(f"Committing ({release.name}): {release.path}\n{status}")
        message = self._commit_message(release.path, status)
        add_all_and_commit(release.path, message)
        release.committed = True
        release.message = message

    def _publish_if_needed(self, release: PackageRelease) -> None:
        ensure_branch(release.path, self.workspace.config.branch)
        if is_last_commit_release(release.path):
            return
        self._progress(f"Publishing ({release.name}): {release.path}")
        release.version = build_bump_push_publish(
            self.context, release.path, self.options.bump, self.on_progress
        )
        release.published = True

    def execute(self) -> ReleaseResult:
        graph = self.workspace.ordered_graph()
        if not graph:
            raise NoPackagesFoundError()

        result = ReleaseResult()
        for node in graph:
            release = PackageRelease(name=node.name, path=node.location)
            result.releases.append(release)

            if not self.workspace.check_project_actuality(node.location):
                self._progress(f"Updating ({release.name}): {release.path}")
                install_project(self.context, node.location)
                link_project(self.context, node.location)
                release.updated = True

            self._commit_if_needed(release)
            self._publish_if_needed(release)

        return result


def publish_package(
    workspace: Workspace,
    path: Path | None = None,
    *,
    bump: BumpType = BumpType.PATCH,
    message: str | None = None,
    on_progress: ProgressHandler | None = None,
    context: CommandContext | None = None,
) -> PublishResult:
    """Convenience function to publish one package.

    Args:
        workspace: Workspace to use.
        path: Package directory (defaults to cwd).
        bump: Version bump type.
        message: Commit everything with this message first.
        on_progress: Receives progress lines.
        context: Existing command context to reuse.

    Returns:
        Published version and whether a commit was made.
    """
    context = context or CommandContext(workspace=workspace)
    options = PublishOptions(path=path or Path.cwd(), bump=bump, message=message)
    return PublishCommand(context, options, on_progress=on_progress).execute()


def release(
    workspace: Workspace,
    *,
    message: str | None = None,
    small_fix: bool = False,
    bump: BumpType = BumpType.PATCH,
    on_progress: ProgressHandler | None = None,
    message_prompt: MessagePrompt | None = None,
    context: CommandContext | None = None,
) -> ReleaseResult:
    """Convenience function to release every configured library."""
    context = context or CommandContext(workspace=workspace)
    options = ReleaseOptions(message=message, small_fix=small_fix, bump=bump)
    cmd = ReleaseCommand(context, options, on_progress=on_progress, message_prompt=message_prompt)
    return cmd.execute()


def _parse_bump(bump: str, error_console: Console) -> BumpType:
    try:
        return BumpType[bump.upper()]
    except KeyError as e:
        error_console.print(f"[red]Invalid bump type:[/red] {escape(bump)}")
        raise typer.Exit(1) from e


def handle_publish(
    context: CommandContext,
    *,
    console: Console,
    error_console: Console,
    path: Path | None = None,
    bump: str = "patch",
    message: str | None = None,
) -> None:
    bump_type = _parse_bump(bump, error_console)

    def on_progress(line: str) -> None:
        console.print(f"[green]{escape(line)}[/green]")

    try:
        result = publish_package(
            context.workspace,
            path,
            bump=bump_type,
            message=message,
            on_progress=on_progress,
            context=context,
        )
    except LibalibeError as e:
        error_console.print(f"[red]Error:[/red] {escape(e.message)}")
        raise typer.Exit(1) from e

    console.print(f"[green]Published {escape(result.version)}[/green]")


def handle_release(
    context: CommandContext,
    *,
    console: Console,
    error_console: Console,
    message: str | None = None,
    small_fix: bool = False,
    bump: str = "patch",
) -> None:
    bump_type = _parse_bump(bump, error_console)

    def on_progress(line: str) -> None:
        console.print(f"[green]{escape(line)}[/green]")

    def message_prompt(path: Path, status: str, default: str) -> str:
        return typer.prompt(f'Commit message (default: "{default}")', default=default)

    try:
        result = release(
            context.workspace,
            message=message,
            small_fix=small_fix,
            bump=bump_type,
            on_progress=on_progress,
            message_prompt=message_prompt,
            context=context,
        )
    except LibalibeError as e:
        error_console.print(f"[red]Error:[/red] {escape(e.message)}")
        raise typer.Exit(1) from e

    if not result.committed_any and not result.published_any:
        console.print(f"[green]Nothing to commit and publish in {escape(str(context.workspace.root))}[/green]")
        return

    table = Table(title="Release")
    table.add_column("Package", style="cyan")
    table.add_column("Updated")
    table.add_column("Commit")
    table.add_column("Published", style="green")
    for r in result.releases:
        table.add_row(
            escape(r.name),
            "yes" if r.updated else "-",
            escape(r.message) if r.message else "-",
            r.version or "-",
        )
    console.print(table)
