"""Command execution."""

from libalibe.execution.parallel import ParallelExecutor
from libalibe.execution.results import BatchResult, ExecutionResult, ExecutionStatus
from libalibe.execution.runner import (
    ProcessOutput,
    output_prefix,
    package_env,
    run_command,
    run_in_package,
    script_command,
)

__all__ = [
    "BatchResult",
    "ExecutionResult",
    "ExecutionStatus",
    "ParallelExecutor",
    "ProcessOutput",
    "output_prefix",
    "package_env",
    "run_command",
    "run_in_package",
    "script_command",
]
