"""List command implementation."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from libalibe.commands.base import CommandContext, SyncCommand
from libalibe.errors import LibalibeError
from libalibe.filters import apply_filters

if TYPE_CHECKING:
    from libalibe.workspace.workspace import Workspace


class ListFormat(Enum):
    """Output format for list command."""

    TABLE = "table"
    JSON = "json"
    NAMES = "names"


@dataclass
class PackageInfo:
    """Information about a package for display."""

    name: str
    manifest_name: str | None
    version: str
    path: str
    dependencies: list[str]
    dependents: list[str]
    is_dependency_of_another: bool
    in_cycle: bool


@dataclass
class ListResult:
    """Result of list command."""

    packages: list[PackageInfo]


@dataclass
class ListOptions:
    """Options for list command."""

    scope: str | None = None
    ignore: list[str] | None = None
    format: ListFormat = ListFormat.TABLE


class ListCommand(SyncCommand[ListResult]):
    """List configured packages in processing order."""

    def __init__(self, context: CommandContext, options: ListOptions | None = None) -> None:
        super().__init__(context)
        self.options = options or ListOptions()

    def _display_path(self, location: Path) -> str:
        try:
            return str(location.relative_to(self.workspace.root))
        except ValueError:
            return str(location)

    def execute(self) -> ListResult:
        """Execute the list command."""
        ordered = self.workspace.ordered_graph()
        graph = ordered.graph
        packages = apply_filters(list(ordered), scope=self.options.scope, ignore=self.options.ignore)

        infos = [
            PackageInfo(
                name=pkg.symbolic_name,
                manifest_name=pkg.manifest.name,
                version=pkg.version,
                path=self._display_path(pkg.location),
                dependencies=[d.symbolic_name for d in graph.get_dependencies(pkg)],
                dependents=[d.symbolic_name for d in graph.get_dependents(pkg)],
                is_dependency_of_another=pkg.is_dependency_of_another,
                in_cycle=pkg.participates_in_cycle,
            )
            for pkg in packages
        ]
        return ListResult(packages=infos)


def list_packages(
    workspace: Workspace,
    *,
    scope: str | None = None,
    ignore: list[str] | None = None,
    format: ListFormat = ListFormat.TABLE,
) -> ListResult:
    """Convenience function to list packages.

    Args:
        workspace: Workspace to list.
        scope: Package scope filter.
        ignore: Patterns to exclude.
        format: Output format.

    Returns:
        List result with package info, in processing order.
    """
    context = CommandContext(workspace=workspace)
    options = ListOptions(scope=scope, ignore=ignore, format=format)
    return ListCommand(context, options).execute()


def _flag(value: bool) -> str:
    return "yes" if value else "-"


def handle_list_command(
    context: CommandContext,
    *,
    console: Console,
    error_console: Console,
    scope: str | None = None,
    json_output: bool = False,
    names_only: bool = False,
) -> None:
    fmt = ListFormat.TABLE
    if json_output:
        fmt = ListFormat.JSON
    elif names_only:
        fmt = ListFormat.NAMES

    try:
        result = list_packages(context.workspace, scope=scope, format=fmt)
    except LibalibeError as e:
        error_console.print(f"[red]Error:[/red] {escape(e.message)}")
        raise typer.Exit(1) from e

    if fmt is ListFormat.JSON:
        console.print_json(json.dumps([asdict(p) for p in result.packages]))
    elif fmt is ListFormat.NAMES:
        for pkg in result.packages:
            console.print(escape(pkg.name))
    else:
        table = Table(title="Packages")
        table.add_column("#", justify="right")
        table.add_column("Name", style="bold")
        table.add_column("Manifest name")
        table.add_column("Version")
        table.add_column("Path")
        table.add_column("Dependency")
        table.add_column("Cycle")

        for index, pkg in enumerate(result.packages, start=1):
            table.add_row(
                str(index),
                escape(pkg.name),
                escape(pkg.manifest_name or "-"),
                pkg.version or "-",
                escape(pkg.path),
                _flag(pkg.is_dependency_of_another),
                _flag(pkg.in_cycle),
            )

        console.print(table)
