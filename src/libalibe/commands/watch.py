"""Watch command: run every library's watch script concurrently."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

import typer
from rich.console import Console
from rich.markup import escape

from libalibe.commands.base import Command, CommandContext
from libalibe.errors import LibalibeError, NoPackagesFoundError
from libalibe.execution import BatchResult, ParallelExecutor, script_command

if TYPE_CHECKING:
    from libalibe.workspace import PackageNode
    from libalibe.workspace.workspace import Workspace

WATCH_SCRIPT = "watch"


@dataclass
class WatchOptions:
    """Options for watch command."""

    script: str = WATCH_SCRIPT


class WatchCommand(Command[BatchResult]):
    """Run the watch script of every watchable library at the same time."""

    def __init__(
        self,
        context: CommandContext,
        options: WatchOptions | None = None,
        output_handler: Callable[[str, str, bool], None] | None = None,
    ) -> None:
        super().__init__(context)
        self.options = options or WatchOptions()
        self.output_handler = output_handler

    def get_packages(self) -> list[PackageNode]:
        """Get watchable packages in graph order.

        Raises:
            NoPackagesFoundError: If nothing is configured or nothing is watchable.
        """
        graph = self.workspace.ordered_graph()
        if not graph:
            raise NoPackagesFoundError()
        packages = [node for node in graph if node.has_script(self.options.script)]
        if not packages:
            raise NoPackagesFoundError("No watchable packages found")
        return packages

    async def execute(self) -> BatchResult:
        packages = self.get_packages()
        command = script_command(self.context.pm, self.options.script)
        # Every watcher starts at once; a failing one never stops the others.
        executor = ParallelExecutor(concurrency=len(packages))
        return await executor.execute(
            packages,
            command,
            env=self.context.env,
            output_handler=self.output_handler,
        )


async def watch_packages(
    workspace: Workspace,
    *,
    output_handler: Callable[[str, str, bool], None] | None = None,
    context: CommandContext | None = None,
) -> BatchResult:
    """Convenience function to watch every watchable library."""
    context = context or CommandContext(workspace=workspace)
    return await WatchCommand(context, output_handler=output_handler).execute()


async def handle_watch(
    context: CommandContext,
    *,
    console: Console,
    error_console: Console,
) -> None:
    def output_handler(pkg_name: str, line: str, is_stderr: bool) -> None:
        if is_stderr:
            error_console.print(escape(line), style="red", highlight=False)
        else:
            console.print(escape(line), style="cyan", highlight=False)

    try:
        result = await watch_packages(context.workspace, output_handler=output_handler, context=context)
    except LibalibeError as e:
        error_console.print(f"[red]Error:[/red] {escape(e.message)}")
        raise typer.Exit(1) from e

    if result.any_failure:
        for failed in (r for r in result if r.failed):
            error_console.print(f"[red]{escape(failed.package_name)} exited with code {failed.exit_code}[/red]")
        raise typer.Exit(1)
