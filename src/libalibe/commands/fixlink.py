"""Fixlink command: share a project's peer dependencies with its linked libraries.

A linked library resolves its peer dependencies from its own node_modules,
which yields a second copy of e.g. a UI framework at runtime. Each such
directory is replaced by a symlink to the project's installed copy.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

import typer
from rich.console import Console
from rich.markup import escape

from libalibe.commands.base import CommandContext, SyncCommand
from libalibe.errors import LibalibeError
from libalibe.pm import list_dependency_path
from libalibe.workspace import find_manifest_dirs, read_manifest

if TYPE_CHECKING:
    from libalibe.workspace.workspace import Workspace


@dataclass
class FixedLink:
    """One replaced peer dependency directory."""

    library: str
    peer: str
    source: Path
    target: Path


@dataclass
class FixlinkResult:
    """Result of fixlink command.

    Attributes:
        fixed: Replaced directories.
        missing: (library path, peer name) pairs not installed on one side.
    """

    fixed: list[FixedLink] = field(default_factory=list)
    missing: list[tuple[Path, str]] = field(default_factory=list)


@dataclass
class FixlinkOptions:
    """Options for fixlink command."""

    path: Path = field(default_factory=Path.cwd)
    recursive: bool = False


def replace_with_symlink(link: Path, target: Path) -> None:
    """Replace ``link`` (a directory, file or symlink) with a symlink to ``target``."""
    if link.is_symlink() or link.is_file():
        link.unlink()
    elif link.exists():
        shutil.rmtree(link)
    link.parent.mkdir(parents=True, exist_ok=True)
    link.symlink_to(target, target_is_directory=True)


class FixlinkCommand(SyncCommand[FixlinkResult]):
    """Point linked libraries' peer dependencies at the project's copies."""

    def __init__(self, context: CommandContext, options: FixlinkOptions | None = None) -> None:
        super().__init__(context)
        self.options = options or FixlinkOptions()

    def fix_project(self, project_path: Path, result: FixlinkResult) -> None:
        suitable = self.workspace.suitable_packages(read_manifest(project_path))
        for name in suitable.names:
            library_path = self.workspace.get_package_path(name)
            for peer in read_manifest(library_path).peer:
                library_peer = list_dependency_path(library_path, peer, binary=self.context.pm)
                project_peer = list_dependency_path(project_path, peer, binary=self.context.pm)
                if library_peer is None or project_peer is None:
                    result.missing.append((library_path, peer))
                    continue
                if not self.context.dry_run:
                    replace_with_symlink(library_peer, project_peer)
                result.fixed.append(
                    FixedLink(library=name, peer=peer, source=project_peer, target=library_peer)
                )

    def execute(self) -> FixlinkResult:
        targets = (
            find_manifest_dirs(self.options.path)
            if self.options.recursive
            else [self.options.path]
        )
        result = FixlinkResult()
        for target in targets:
            self.fix_project(target, result)
        return result


def fix_links(
    workspace: Workspace,
    path: Path | None = None,
    *,
    recursive: bool = False,
    context: CommandContext | None = None,
) -> FixlinkResult:
    """Convenience function to fix peer dependency links.

    Args:
        workspace: Workspace to use.
        path: Project directory (defaults to cwd).
        recursive: Process every package.json under ``path``.
        context: Existing command context to reuse.

    Returns:
        Replaced and missing peer dependencies.
    """
    context = context or CommandContext(workspace=workspace)
    options = FixlinkOptions(path=path or Path.cwd(), recursive=recursive)
    return FixlinkCommand(context, options).execute()


def handle_fixlink(
    context: CommandContext,
    *,
    console: Console,
    error_console: Console,
    path: Path | None = None,
    recursive: bool = False,
) -> None:
    try:
        result = fix_links(context.workspace, path, recursive=recursive, context=context)
    except (LibalibeError, OSError) as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e

    for library_path, peer in result.missing:
        console.print(f"[dim]No {escape(peer)} found in {escape(str(library_path))} or project[/dim]")
    for fixed in result.fixed:
        console.print(f"[green]{escape(str(fixed.target))} -> {escape(str(fixed.source))}[/green]")
    if not result.fixed:
        console.print("Nothing to fix")
