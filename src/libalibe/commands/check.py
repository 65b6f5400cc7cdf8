"""Actuality check command."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

import typer
from rich.console import Console
from rich.markup import escape

from libalibe.commands.base import CommandContext, SyncCommand
from libalibe.commands.link import format_names
from libalibe.errors import LibalibeError, NoPackagesFoundError
from libalibe.workspace import ActualityResult

if TYPE_CHECKING:
    from libalibe.workspace.workspace import Workspace


@dataclass
class CheckOptions:
    """Options for check command."""

    path: Path = field(default_factory=Path.cwd)
    recursive: bool = False
    exact: bool = False


@dataclass
class CheckResult:
    """Actuality per project directory."""

    reports: dict[Path, ActualityResult] = field(default_factory=dict)

    @property
    def all_actual(self) -> bool:
        return all(self.reports.values())


class CheckCommand(SyncCommand[CheckResult]):
    """Check whether projects record the current versions of their libraries."""

    def __init__(self, context: CommandContext, options: CheckOptions | None = None) -> None:
        super().__init__(context)
        self.options = options or CheckOptions()

    def get_targets(self) -> list[Path]:
        if not self.options.recursive:
            return [self.options.path]
        graph = self.workspace.ordered_graph()
        if not graph:
            raise NoPackagesFoundError()
        return [node.location for node in graph]

    def execute(self) -> CheckResult:
        result = CheckResult()
        for target in self.get_targets():
            result.reports[target] = self.workspace.check_project_actuality(
                target, force_exact=self.options.exact
            )
        return result


def check_packages(
    workspace: Workspace,
    path: Path | None = None,
    *,
    recursive: bool = False,
    exact: bool = False,
) -> CheckResult:
    """Convenience function to check actuality.

    Args:
        workspace: Workspace to use.
        path: Project directory (defaults to cwd).
        recursive: Check every configured library instead.
        exact: Require exact versions even for exempt or cyclic libraries.

    Returns:
        Actuality per project directory.
    """
    context = CommandContext(workspace=workspace)
    options = CheckOptions(path=path or Path.cwd(), recursive=recursive, exact=exact)
    return CheckCommand(context, options).execute()


def handle_check(
    context: CommandContext,
    *,
    console: Console,
    error_console: Console,
    path: Path | None = None,
    recursive: bool = False,
    exact: bool = False,
) -> None:
    try:
        result = check_packages(context.workspace, path, recursive=recursive, exact=exact)
    except LibalibeError as e:
        error_console.print(f"[red]Error:[/red] {escape(e.message)}")
        raise typer.Exit(1) from e

    for target, report in result.reports.items():
        if report:
            console.print(f"[green]{escape(str(target))}: actual[/green]")
        else:
            console.print(
                f"[yellow]{escape(str(target))}: not actual "
                f"{escape(format_names(report.stale_names))}[/yellow]"
            )

    if not result.all_actual:
        raise typer.Exit(1)
