"""Package manager scripts run inside library directories.

Child output is streamed line by line. Every streamed line carries a
``[<package>] `` prefix so that concurrent watchers stay readable when their
output interleaves.
"""

from __future__ import annotations

import asyncio
import os
import shlex
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from libalibe.execution.results import ExecutionResult

if TYPE_CHECKING:
    from libalibe.workspace.package import PackageNode

LineCallback = Callable[[str], None]

NOT_STARTED_EXIT_CODE = -1


def script_command(package_manager: str, script: str, args: Sequence[str] = ()) -> str:
    """Shell command running a package.json script through the package manager.

    >>> script_command("pnpm", "lint", ["--fix"])
    'pnpm run lint --fix'
    """
    return shlex.join([package_manager, "run", script, *args])


def output_prefix(package_name: str) -> str:
    return f"[{package_name}] "


def prefix_lines(package_name: str, callback: LineCallback | None) -> LineCallback | None:
    """Wrap a line callback so every line starts with the package prefix."""
    if callback is None:
        return None
    prefix = output_prefix(package_name)

    def emit(line: str) -> None:
        callback(prefix + line)

    return emit


@dataclass
class ProcessOutput:
    """Everything a finished child process left behind.

    Attributes:
        exit_code: Exit status, or -1 if the process never started or was killed.
        stdout: Captured standard output.
        stderr: Captured standard error, or the reason the process did not finish.
        duration_ms: Wall time in milliseconds.
        timed_out: The process was killed after the timeout.
    """

    exit_code: int
    stdout: str = ""
    stderr: str = ""
    duration_ms: int = 0
    timed_out: bool = False


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


async def _collect(stream: asyncio.StreamReader, callback: LineCallback | None) -> str:
    lines: list[str] = []
    async for raw in stream:
        line = raw.decode("utf-8", errors="replace")
        lines.append(line)
        if callback is not None:
            callback(line.rstrip("\r\n"))
    return "".join(lines)


async def run_command(
    command: str,
    cwd: Path,
    *,
    env: dict[str, str] | None = None,
    timeout: float | None = None,
    on_stdout: LineCallback | None = None,
    on_stderr: LineCallback | None = None,
) -> ProcessOutput:
    """Run a shell command and stream its output.

    Args:
        command: Shell command line.
        cwd: Working directory.
        env: Variables added to the current environment.
        timeout: Seconds before the process is killed.
        on_stdout: Called with each stdout line, without its line ending.
        on_stderr: Called with each stderr line, without its line ending.
    """
    started = time.monotonic()
    try:
        process = await asyncio.create_subprocess_shell(
            command,
            cwd=str(cwd),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env={**os.environ, **(env or {})},
        )
    except OSError as e:
        return ProcessOutput(NOT_STARTED_EXIT_CODE, stderr=str(e), duration_ms=_elapsed_ms(started))

    assert process.stdout is not None and process.stderr is not None
    try:
        stdout, stderr, _ = await asyncio.wait_for(
            asyncio.gather(
                _collect(process.stdout, on_stdout),
                _collect(process.stderr, on_stderr),
                process.wait(),
            ),
            timeout=timeout,
        )
    except (asyncio.TimeoutError, TimeoutError):
        try:
            process.kill()
        except ProcessLookupError:
            pass
        await process.wait()
        return ProcessOutput(
            NOT_STARTED_EXIT_CODE,
            stderr=f"Command timed out after {timeout}s",
            duration_ms=_elapsed_ms(started),
            timed_out=True,
        )

    return ProcessOutput(
        process.returncode or 0,
        stdout=stdout,
        stderr=stderr,
        duration_ms=_elapsed_ms(started),
    )


def package_env(package: PackageNode, env: dict[str, str] | None = None) -> dict[str, str]:
    """Environment for a command run inside a package."""
    return {
        **(env or {}),
        "LIBALIBE_PACKAGE_NAME": package.symbolic_name,
        "LIBALIBE_PACKAGE_PATH": str(package.location),
        "LIBALIBE_PACKAGE_VERSION": package.version,
    }


async def run_in_package(
    package: PackageNode,
    command: str,
    *,
    env: dict[str, str] | None = None,
    timeout: float | None = None,
    on_stdout: LineCallback | None = None,
    on_stderr: LineCallback | None = None,
) -> ExecutionResult:
    """Run a command in a package directory.

    Streamed lines reach the callbacks already prefixed with the package's
    symbolic name.
    """
    output = await run_command(
        command,
        cwd=package.location,
        env=package_env(package, env),
        timeout=timeout,
        on_stdout=prefix_lines(package.symbolic_name, on_stdout),
        on_stderr=prefix_lines(package.symbolic_name, on_stderr),
    )
    return ExecutionResult.from_process(package.symbolic_name, command, output)
