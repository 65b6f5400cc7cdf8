"""Edit command: open the collected config files in an editor."""

from __future__ import annotations

import os
import shlex
import subprocess
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from libalibe.config import find_all_config_paths
from libalibe.errors import ExecutionError, LibalibeError

DEFAULT_EDITOR = "code"


def get_editor() -> list[str]:
    """Editor command from ``$EDITOR``, split into arguments."""
    return shlex.split(os.environ.get("EDITOR") or DEFAULT_EDITOR)


def edit_configs(path: Path | None = None) -> list[Path]:
    """Open every config file that applies to ``path``.

    Returns:
        Opened files, nearest first.

    Raises:
        ExecutionError: If the editor cannot be started or fails.
    """
    paths = find_all_config_paths(path)
    editor = get_editor()
    for config_path in paths:
        cmd = [*editor, str(config_path)]
        try:
            completed = subprocess.run(cmd, check=False)
        except FileNotFoundError as e:
            raise ExecutionError(f"Editor not found: {editor[0]}", command=" ".join(cmd)) from e
        if completed.returncode != 0:
            raise ExecutionError(
                f"Editor exited with code {completed.returncode}",
                command=" ".join(cmd),
                exit_code=completed.returncode,
            )
    return paths


def handle_edit(
    *,
    console: Console,
    error_console: Console,
    path: Path | None = None,
) -> None:
    try:
        paths = edit_configs(path)
    except LibalibeError as e:
        error_console.print(f"[red]Error:[/red] {escape(e.message)}")
        raise typer.Exit(1) from e

    if not paths:
        console.print("No config files found")
        return
    for config_path in paths:
        console.print(f"[dim]Opened {escape(str(config_path))}[/dim]")
