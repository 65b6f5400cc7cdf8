"""Link and unlink commands."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

import typer
from rich.console import Console
from rich.markup import escape

from libalibe.commands.base import CommandContext, SyncCommand
from libalibe.errors import LibalibeError, NoPackagesFoundError
from libalibe.pm import link_global, unlink
from libalibe.workspace import read_manifest

if TYPE_CHECKING:
    from libalibe.workspace.workspace import Workspace


def format_names(names: list[str]) -> str:
    return "[" + ", ".join(f'"{name}"' for name in names) + "]"


def link_project(context: CommandContext, project_path: Path) -> list[str]:
    """Link the configured libraries a project declares.

    Args:
        context: Command context.
        project_path: Directory holding the project's package.json.

    Returns:
        Linked names (empty when nothing is suitable).
    """
    project = read_manifest(project_path)
    suitable = context.workspace.suitable_packages(project)
    if not suitable:
        return []
    if not context.dry_run:
        link_global(project_path, suitable.names, binary=context.pm)
    return suitable.names


@dataclass
class LinkOptions:
    """Options for link and unlink commands."""

    path: Path = field(default_factory=Path.cwd)
    recursive: bool = False


@dataclass
class LinkResult:
    """Result of link and unlink commands.

    Attributes:
        names: Project directory to the names linked (or unlinked) there.
    """

    names: dict[Path, list[str]] = field(default_factory=dict)

    @property
    def empty(self) -> bool:
        return not any(self.names.values())


class LinkCommand(SyncCommand[LinkResult]):
    """Link configured libraries into a project, or into every library in order."""

    def __init__(self, context: CommandContext, options: LinkOptions | None = None) -> None:
        super().__init__(context)
        self.options = options or LinkOptions()

    def get_targets(self) -> list[Path]:
        if not self.options.recursive:
            return [self.options.path]
        graph = self.workspace.ordered_graph()
        if not graph:
            raise NoPackagesFoundError()
        return [node.location for node in graph]

    def execute(self) -> LinkResult:
        result = LinkResult()
        for target in self.get_targets():
            result.names[target] = link_project(self.context, target)
        return result


class UnlinkCommand(SyncCommand[LinkResult]):
    """Unlink the configured libraries a project declares."""

    def __init__(self, context: CommandContext, options: LinkOptions | None = None) -> None:
        super().__init__(context)
        self.options = options or LinkOptions()

    def execute(self) -> LinkResult:
        path = self.options.path
        suitable = self.workspace.suitable_packages(read_manifest(path))
        if suitable and not self.context.dry_run:
            unlink(path, suitable.names, binary=self.context.pm)
        return LinkResult(names={path: suitable.names})


def link_packages(
    workspace: Workspace,
    path: Path | None = None,
    *,
    recursive: bool = False,
    context: CommandContext | None = None,
) -> LinkResult:
    """Convenience function to link packages.

    Args:
        workspace: Workspace to use.
        path: Project directory (defaults to cwd).
        recursive: Link every configured library in graph order instead.
        context: Existing command context to reuse.

    Returns:
        Names linked per project directory.
    """
    context = context or CommandContext(workspace=workspace)
    options = LinkOptions(path=path or Path.cwd(), recursive=recursive)
    return LinkCommand(context, options).execute()


def unlink_packages(
    workspace: Workspace,
    path: Path | None = None,
    *,
    context: CommandContext | None = None,
) -> LinkResult:
    context = context or CommandContext(workspace=workspace)
    return UnlinkCommand(context, LinkOptions(path=path or Path.cwd())).execute()


def handle_link(
    context: CommandContext,
    *,
    console: Console,
    error_console: Console,
    path: Path | None = None,
    recursive: bool = False,
) -> None:
    try:
        result = link_packages(context.workspace, path, recursive=recursive, context=context)
    except LibalibeError as e:
        error_console.print(f"[red]Error:[/red] {escape(e.message)}")
        raise typer.Exit(1) from e

    if result.empty:
        console.print("Nothing to link")
        return
    for target, names in result.names.items():
        if names:
            prefix = f"{target}: " if recursive else ""
            console.print(f"{escape(prefix)}Linked: {escape(format_names(names))}")


def handle_unlink(
    context: CommandContext,
    *,
    console: Console,
    error_console: Console,
    path: Path | None = None,
) -> None:
    try:
        result = unlink_packages(context.workspace, path, context=context)
    except LibalibeError as e:
        error_console.print(f"[red]Error:[/red] {escape(e.message)}")
        raise typer.Exit(1) from e

    if result.empty:
        console.print("Nothing to unlink")
        return
    for names in result.names.values():
        console.print(f"Unlinked: {escape(format_names(names))}")
