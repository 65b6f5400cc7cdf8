"""libalibe CLI application."""

from __future__ import annotations

import asyncio
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from libalibe.commands.base import CommandContext
from libalibe.errors import LibalibeError
from libalibe.workspace import Workspace


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from libalibe import __version__

        print(f"libalibe {__version__}")
        raise typer.Exit()


app = typer.Typer(
    name="libalibe",
    help="Local npm library workflow: link, build, check and publish in dependency order",
    no_args_is_help=True,
    add_completion=False,
)


@app.callback()
def _app_callback(
    version: Annotated[  # noqa: ARG001
        bool,
        typer.Option("--version", "-V", help="Show version and exit", callback=version_callback),
    ] = False,
) -> None:
    """Local npm library workflow."""
    pass


console = Console()
error_console = Console(stderr=True)


def parse_comma_list(value: str | None) -> list[str] | None:
    """Parse comma-separated string into list."""
    return value.split(",") if value else None


def get_workspace(path: Path | None = None) -> Workspace:
    """Load workspace from current directory or specified path."""
    try:
        return Workspace.discover(path)
    except LibalibeError as e:
        error_console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1) from e


@contextmanager
def command_context(dry_run: bool = False) -> Iterator[CommandContext]:
    """Context for one CLI command; collected summary lines are printed at the end."""
    context = CommandContext(workspace=get_workspace(), dry_run=dry_run)
    try:
        yield context
    finally:
        context.memory.flush(console)


RecursiveOption = Annotated[
    bool,
    typer.Option("--recursive", "-r", help="Process every package instead of the current one"),
]
ScopeOption = Annotated[
    str | None,
    typer.Option("--scope", "-s", help="Package scope filter"),
]
IgnoreOption = Annotated[
    str | None,
    typer.Option("--ignore", "-i", help="Patterns to ignore (comma-separated)"),
]
BumpOption = Annotated[
    str,
    typer.Option("--bump", "-b", help="Version bump (major, minor, patch)"),
]


@app.command()
def link(
    recursive: RecursiveOption = False,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show what would be linked"),
    ] = False,
) -> None:
    """Link the configured libraries this project depends on."""
    from libalibe.commands import handle_link

    with command_context(dry_run) as context:
        handle_link(context, console=console, error_console=error_console, recursive=recursive)


@app.command()
def unlink() -> None:
    """Unlink the configured libraries this project depends on."""
    from libalibe.commands import handle_unlink

    with command_context() as context:
        handle_unlink(context, console=console, error_console=error_console)


@app.command()
def install(
    link: Annotated[
        bool,
        typer.Option("--link", "-l", help="Link the libraries after installing"),
    ] = False,
    recursive: RecursiveOption = False,
) -> None:
    """Install the latest published versions of configured libraries."""
    from libalibe.commands import handle_install

    with command_context() as context:
        handle_install(
            context,
            console=console,
            error_console=error_console,
            recursive=recursive,
            link=link,
        )


def _run_script(
    script: str,
    args: list[str] | None = None,
    scope: str | None = None,
    ignore: str | None = None,
) -> None:
    from libalibe.commands import handle_run_script

    with command_context() as context:
        asyncio.run(
            handle_run_script(
                context,
                script,
                args,
                console=console,
                error_console=error_console,
                scope=scope,
                ignore=parse_comma_list(ignore),
            )
        )


@app.command()
def build(scope: ScopeOption = None, ignore: IgnoreOption = None) -> None:
    """Build every library in dependency order."""
    _run_script("build", scope=scope, ignore=ignore)


@app.command()
def types(scope: ScopeOption = None, ignore: IgnoreOption = None) -> None:
    """Typecheck every library in dependency order."""
    _run_script("types", scope=scope, ignore=ignore)


@app.command()
def lint(
    fix: Annotated[
        bool,
        typer.Option("--fix", help="Fix lint errors"),
    ] = False,
    scope: ScopeOption = None,
    ignore: IgnoreOption = None,
) -> None:
    """Lint every library in dependency order."""
    _run_script("lint", ["--fix"] if fix else None, scope=scope, ignore=ignore)


@app.command("test")
def test_cmd(scope: ScopeOption = None, ignore: IgnoreOption = None) -> None:
    """Test every library in dependency order."""
    _run_script("test", scope=scope, ignore=ignore)


@app.command("run")
def run_cmd(
    script: Annotated[str, typer.Argument(help="package.json script to run")],
    args: Annotated[
        list[str] | None,
        typer.Argument(help="Arguments passed to the script"),
    ] = None,
    scope: ScopeOption = None,
    ignore: IgnoreOption = None,
) -> None:
    """Run a script in every library that defines it, in dependency order."""
    _run_script(script, args, scope=scope, ignore=ignore)


@app.command()
def check(
    exact: Annotated[
        bool,
        typer.Option("--exact", help="Require exact versions for every library"),
    ] = False,
    recursive: RecursiveOption = False,
) -> None:
    """Check that recorded library versions are the current ones."""
    from libalibe.commands import handle_check

    with command_context() as context:
        handle_check(
            context,
            console=console,
            error_console=error_console,
            recursive=recursive,
            exact=exact,
        )


@app.command("list")
def list_cmd(
    scope: ScopeOption = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
    names: Annotated[
        bool,
        typer.Option("--names", help="Only print names"),
    ] = False,
) -> None:
    """List configured libraries in processing order."""
    from libalibe.commands import handle_list_command

    with command_context() as context:
        handle_list_command(
            context,
            console=console,
            error_console=error_console,
            scope=scope,
            json_output=json_output,
            names_only=names,
        )


@app.command()
def publish(
    bump: Annotated[
        str,
        typer.Argument(help="Version bump (major, minor, patch)"),
    ] = "patch",
) -> None:
    """Build, bump, push and publish the current package."""
    from libalibe.commands import handle_publish

    with command_context() as context:
        handle_publish(context, console=console, error_console=error_console, bump=bump)


@app.command("commit-publish")
def commit_publish(
    message: Annotated[
        str | None,
        typer.Argument(help="Commit message (defaults to the configured one)"),
    ] = None,
    bump: BumpOption = "patch",
) -> None:
    """Commit everything, then build, bump, push and publish the current package."""
    from libalibe.commands import handle_publish

    with command_context() as context:
        handle_publish(
            context,
            console=console,
            error_console=error_console,
            bump=bump,
            message=message or context.workspace.config.commit_message,
        )


@app.command()
def release(
    message: Annotated[
        str | None,
        typer.Option("--message", "-m", help="Commit message for every dirty package"),
    ] = None,
    small_fix: Annotated[
        bool,
        typer.Option("--small-fix", help="Commit with the default message without asking"),
    ] = False,
    bump: BumpOption = "patch",
) -> None:
    """Update, commit and publish every library in dependency order."""
    from libalibe.commands import handle_release

    with command_context() as context:
        handle_release(
            context,
            console=console,
            error_console=error_console,
            message=message,
            small_fix=small_fix,
            bump=bump,
        )


@app.command()
def boom() -> None:
    """Same as release --small-fix."""
    from libalibe.commands import handle_release

    with command_context() as context:
        handle_release(context, console=console, error_console=error_console, small_fix=True)


@app.command()
def pull() -> None:
    """Pull every configured package, cloning missing ones."""
    from libalibe.commands import handle_pull

    with command_context() as context:
        handle_pull(context, console=console, error_console=error_console)


@app.command()
def watch() -> None:
    """Run every library's watch script concurrently."""
    from libalibe.commands import handle_watch

    with command_context() as context:
        asyncio.run(handle_watch(context, console=console, error_console=error_console))


@app.command()
def fixlink(
    recursive: RecursiveOption = False,
) -> None:
    """Symlink linked libraries' peer dependencies to this project's copies."""
    from libalibe.commands import handle_fixlink

    with command_context() as context:
        handle_fixlink(context, console=console, error_console=error_console, recursive=recursive)


@app.command()
def edit() -> None:
    """Open the config files in $EDITOR."""
    from libalibe.commands import handle_edit

    handle_edit(console=console, error_console=error_console)


@app.command()
def ping() -> None:
    """Print pong."""
    console.print("pong")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
