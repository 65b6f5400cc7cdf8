"""Scripted recursive runs (build, types, lint, test and arbitrary scripts)."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import typer
from rich.console import Console
from rich.markup import escape

from libalibe.commands.base import Command, CommandContext
from libalibe.errors import LibalibeError, NoPackagesFoundError
from libalibe.execution import BatchResult, ExecutionResult, ParallelExecutor, script_command
from libalibe.filters import apply_filters

if TYPE_CHECKING:
    from libalibe.workspace import PackageNode
    from libalibe.workspace.workspace import Workspace

SCRIPT_LABELS: dict[str, tuple[str, str]] = {
    "build": ("Building", "Built"),
    "types": ("Typechecking", "Typechecked"),
    "lint": ("Linting", "Linted"),
    "test": ("Testing", "Tested"),
    "lint --fix": ("Linting and fixing", "Linted and fixed"),
}


def script_labels(script: str, args: list[str]) -> tuple[str, str]:
    """Progress and summary verbs for a script invocation."""
    key = " ".join([script, *args])
    if key in SCRIPT_LABELS:
        return SCRIPT_LABELS[key]
    return f"Running {script} in", f"Ran {script} in"


@dataclass
class RunOptions:
    """Options for run command."""

    script: str
    args: list[str] = field(default_factory=list)
    scope: str | None = None
    ignore: list[str] | None = None


class RunCommand(Command[BatchResult]):
    """Run a package.json script in every configured library, in graph order.

    Libraries without the script are skipped. The run stops at the first
    failing library.
    """

    def __init__(
        self,
        context: CommandContext,
        options: RunOptions,
        output_handler: Callable[[str, str, bool], None] | None = None,
        on_start: Callable[[PackageNode], None] | None = None,
    ) -> None:
        super().__init__(context)
        self.options = options
        self.output_handler = output_handler
        self.on_start = on_start

    def get_packages(self) -> list[PackageNode]:
        """Get ordered packages to run the script in.

        Raises:
            NoPackagesFoundError: If no package is configured or matches the filters.
        """
        packages = apply_filters(
            list(self.workspace.ordered_graph()),
            scope=self.options.scope,
            ignore=self.options.ignore,
        )
        if not packages:
            raise NoPackagesFoundError()
        return packages

    @property
    def command(self) -> str:
        return script_command(self.context.pm, self.options.script, self.options.args)

    async def execute(self) -> BatchResult:
        packages = self.get_packages()
        runnable = [pkg for pkg in packages if pkg.has_script(self.options.script)]
        by_name = {pkg.symbolic_name: pkg for pkg in runnable}
        _, done = script_labels(self.options.script, self.options.args)

        def batch_started(batch: list[PackageNode]) -> None:
            if self.on_start:
                for pkg in batch:
                    self.on_start(pkg)

        def batch_done(batch_result: BatchResult) -> None:
            for result in batch_result:
                if result.success:
                    self.context.memory.add(f"{done} {by_name[result.package_name].location}")

        executor = ParallelExecutor(concurrency=1, fail_fast=True)
        ran = await executor.execute_batches(
            ([pkg] for pkg in runnable),
            self.command,
            env=self.context.env,
            output_handler=self.output_handler,
            on_batch_start=batch_started,
            on_batch_done=batch_done,
        )

        ran_by_name = {result.package_name: result for result in ran}
        results: list[ExecutionResult] = []
        for pkg in packages:
            if pkg.symbolic_name in ran_by_name:
                results.append(ran_by_name[pkg.symbolic_name])
            else:
                results.append(ExecutionResult.skipped_result(pkg.symbolic_name, self.command))
        return BatchResult(results=results)


async def run_script(
    workspace: Workspace,
    script: str,
    args: list[str] | None = None,
    *,
    scope: str | None = None,
    ignore: list[str] | None = None,
    output_handler: Callable[[str, str, bool], None] | None = None,
    on_start: Callable[[PackageNode], None] | None = None,
    context: CommandContext | None = None,
) -> BatchResult:
    """Convenience function to run a script recursively.

    Args:
        workspace: Workspace to run in.
        script: Script name from package.json.
        args: Extra arguments passed to the script.
        scope: Package scope filter.
        ignore: Patterns to exclude.
        output_handler: Callback for output streaming.
        on_start: Called before each package runs.
        context: Existing command context to reuse.

    Returns:
        Batch result with one entry per package, in graph order.
    """
    context = context or CommandContext(workspace=workspace)
    options = RunOptions(script=script, args=list(args or []), scope=scope, ignore=ignore)
    cmd = RunCommand(context, options, output_handler=output_handler, on_start=on_start)
    return await cmd.execute()


async def handle_run_script(
    context: CommandContext,
    script: str,
    args: list[str] | None = None,
    *,
    console: Console,
    error_console: Console,
    scope: str | None = None,
    ignore: list[str] | None = None,
) -> None:
    progress, _ = script_labels(script, list(args or []))

    def output_handler(pkg_name: str, line: str, is_stderr: bool) -> None:
        if is_stderr:
            error_console.print(escape(line), style="red", highlight=False)
        else:
            console.print(escape(line), highlight=False)

    def on_start(pkg: PackageNode) -> None:
        console.print(f"[green]{escape(progress)} {escape(str(pkg.location))}[/green]")

    try:
        result = await run_script(
            context.workspace,
            script,
            args,
            scope=scope,
            ignore=ignore,
            output_handler=output_handler,
            on_start=on_start,
            context=context,
        )
    except LibalibeError as e:
        error_console.print(f"[red]Error:[/red] {escape(e.message)}")
        raise typer.Exit(1) from e

    if not result.ran:
        console.print(f'[dim]No packages with script "{escape(script)}"[/dim]')
        return
    if result.any_failure:
        failed = next(r for r in result if r.failed)
        error_console.print(
            f"[red]Error:[/red] {escape(failed.package_name)}: "
            f"{escape(failed.command)} exited with code {failed.exit_code}"
        )
        raise typer.Exit(1)
