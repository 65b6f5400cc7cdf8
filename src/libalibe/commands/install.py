"""Install-latest command implementation."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

import typer
from rich.console import Console
from rich.markup import escape

from libalibe.commands.base import CommandContext, SyncCommand
from libalibe.commands.link import format_names, link_project
from libalibe.errors import LibalibeError
from libalibe.pm import install_latest
from libalibe.workspace import find_manifest_dirs, read_manifest

if TYPE_CHECKING:
    from libalibe.workspace.workspace import Workspace


def install_project(context: CommandContext, project_path: Path) -> list[str]:
    """Install the latest versions of the configured libraries a project declares.

    Returns:
        Installed names (empty when nothing is suitable).
    """
    suitable = context.workspace.suitable_packages(read_manifest(project_path))
    if not suitable:
        return []
    if not context.dry_run:
        install_latest(
            project_path,
            suitable.prod_names,
            suitable.dev_names,
            binary=context.pm,
        )
    return suitable.names


@dataclass
class InstallOptions:
    """Options for install command."""

    path: Path = field(default_factory=Path.cwd)
    recursive: bool = False
    link: bool = False


@dataclass
class InstallResult:
    """Result of install command.

    Attributes:
        installed: Project directory to installed names.
        linked: Project directory to linked names (only with ``link``).
    """

    installed: dict[Path, list[str]] = field(default_factory=dict)
    linked: dict[Path, list[str]] = field(default_factory=dict)


class InstallCommand(SyncCommand[InstallResult]):
    """Install the latest published versions of configured libraries.

    With ``recursive`` every directory holding a package.json under the
    working directory is processed, skipping node_modules.
    """

    def __init__(self, context: CommandContext, options: InstallOptions | None = None) -> None:
        super().__init__(context)
        self.options = options or InstallOptions()

    def get_targets(self) -> list[Path]:
        if self.options.recursive:
            return find_manifest_dirs(self.options.path)
        return [self.options.path]

    def execute(self) -> InstallResult:
        result = InstallResult()
        for target in self.get_targets():
            names = install_project(self.context, target)
            result.installed[target] = names
            if names:
                self.context.memory.add(f"Installed {target}")
            if self.options.link:
                result.linked[target] = link_project(self.context, target)
        return result


def install_packages(
    workspace: Workspace,
    path: Path | None = None,
    *,
    recursive: bool = False,
    link: bool = False,
    context: CommandContext | None = None,
) -> InstallResult:
    """Convenience function to install latest versions.

    Args:
        workspace: Workspace to use.
        path: Project directory (defaults to cwd).
        recursive: Process every package.json under ``path``.
        link: Link the libraries afterwards.
        context: Existing command context to reuse.

    Returns:
        Installed and linked names per project directory.
    """
    context = context or CommandContext(workspace=workspace)
    options = InstallOptions(path=path or Path.cwd(), recursive=recursive, link=link)
    return InstallCommand(context, options).execute()


def handle_install(
    context: CommandContext,
    *,
    console: Console,
    error_console: Console,
    path: Path | None = None,
    recursive: bool = False,
    link: bool = False,
) -> None:
    try:
        result = install_packages(
            context.workspace,
            path,
            recursive=recursive,
            link=link,
            context=context,
        )
    except LibalibeError as e:
        error_console.print(f"[red]Error:[/red] {escape(e.message)}")
        raise typer.Exit(1) from e

    for target, names in result.installed.items():
        if names:
            console.print(f"[green]{escape(str(target))}: installed {escape(format_names(names))}[/green]")
        else:
            console.print(f"[green]{escape(str(target))}: nothing to install[/green]")
        linked = result.linked.get(target)
        if linked:
            console.print(f"Linked: {escape(format_names(linked))}")
