"""Execution result types."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from libalibe.execution.runner import ProcessOutput


class ExecutionStatus(Enum):
    """Status of a command execution in one package."""

    SUCCESS = "success"
    FAILURE = "failure"
    SKIPPED = "skipped"
    CANCELLED = "cancelled"


@dataclass
class ExecutionResult:
    """Result of running a command in one package.

    Attributes:
        package_name: Symbolic name of the package.
        status: Execution status.
        exit_code: Process exit code (-1 when not run or killed).
        stdout: Captured standard output.
        stderr: Captured standard error.
        duration_ms: Wall time in milliseconds.
        command: Command that was run.
    """

    package_name: str
    status: ExecutionStatus
    exit_code: int
    stdout: str = ""
    stderr: str = ""
    duration_ms: int = 0
    command: str = ""

    @property
    def success(self) -> bool:
        return self.status == ExecutionStatus.SUCCESS

    @property
    def failed(self) -> bool:
        return self.status == ExecutionStatus.FAILURE

    @property
    def skipped(self) -> bool:
        return self.status == ExecutionStatus.SKIPPED

    @classmethod
    def success_result(
        cls,
        package_name: str,
        *,
        stdout: str = "",
        stderr: str = "",
        duration_ms: int = 0,
        command: str = "",
    ) -> ExecutionResult:
        return cls(
            package_name=package_name,
            status=ExecutionStatus.SUCCESS,
            exit_code=0,
            stdout=stdout,
            stderr=stderr,
            duration_ms=duration_ms,
            command=command,
        )

    @classmethod
    def failure_result(
        cls,
        package_name: str,
        *,
        exit_code: int,
        stdout: str = "",
        stderr: str = "",
        duration_ms: int = 0,
        command: str = "",
    ) -> ExecutionResult:
        return cls(
            package_name=package_name,
            status=ExecutionStatus.FAILURE,
            exit_code=exit_code,
            stdout=stdout,
            stderr=stderr,
            duration_ms=duration_ms,
            command=command,
        )

    @classmethod
    def from_process(cls, package_name: str, command: str, output: ProcessOutput) -> ExecutionResult:
        """Build a result from a finished child process."""
        return cls(
            package_name=package_name,
            status=ExecutionStatus.SUCCESS if output.exit_code == 0 else ExecutionStatus.FAILURE,
            exit_code=output.exit_code,
            stdout=output.stdout,
            stderr=output.stderr,
            duration_ms=output.duration_ms,
            command=command,
        )

    @classmethod
    def skipped_result(cls, package_name: str, command: str = "") -> ExecutionResult:
        return cls(
            package_name=package_name,
            status=ExecutionStatus.SKIPPED,
            exit_code=-1,
            command=command,
        )


@dataclass
class BatchResult:
    """Results of running a command across several packages."""

    results: list[ExecutionResult] = field(default_factory=list)

    def __iter__(self) -> Iterator[ExecutionResult]:
        return iter(self.results)

    def __len__(self) -> int:
        return len(self.results)

    @property
    def ran(self) -> list[ExecutionResult]:
        """Results of packages where the command actually ran."""
        return [r for r in self.results if r.success or r.failed]

    @property
    def all_success(self) -> bool:
        """No package failed or was cancelled."""
        return all(r.success or r.skipped for r in self.results)

    @property
    def any_failure(self) -> bool:
        return any(r.failed for r in self.results)
