"""Parallel command execution with concurrency control."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable

from libalibe.execution.results import BatchResult, ExecutionResult, ExecutionStatus
from libalibe.execution.runner import run_in_package
from libalibe.workspace.package import PackageNode


class ParallelExecutor:
    """Execute commands across packages with controlled parallelism.

    Supports ordered batches and fail-fast behavior.

    Attributes:
        concurrency: Maximum number of concurrent executions.
        fail_fast: Stop on first failure.
    """

    def __init__(
        self,
        concurrency: int = 4,
        fail_fast: bool = False,
    ) -> None:
        self.concurrency = max(1, concurrency)
        self.fail_fast = fail_fast
        self._cancelled = False

    def _cancelled_result(self, pkg: PackageNode) -> ExecutionResult:
        return ExecutionResult(
            package_name=pkg.symbolic_name,
            status=ExecutionStatus.CANCELLED,
            exit_code=-1,
        )

    async def execute(
        self,
        packages: list[PackageNode],
        command: str,
        *,
        env: dict[str, str] | None = None,
        timeout: float | None = None,
        output_handler: Callable[[str, str, bool], None] | None = None,
    ) -> BatchResult:
        """Execute command across packages in parallel.

        Args:
            packages: Packages to run command in.
            command: Shell command to execute.
            env: Environment variables.
            timeout: Per-package timeout in seconds.
            output_handler: Callback (pkg_name, line, is_stderr) for streaming output.

        Returns:
            Batch result with all execution results, in package order.
        """
        self._cancelled = False
        semaphore = asyncio.Semaphore(self.concurrency)

        async def run_one(pkg: PackageNode) -> ExecutionResult:
            if self._cancelled:
                return self._cancelled_result(pkg)

            async with semaphore:
                if self._cancelled:
                    return self._cancelled_result(pkg)

                on_out = None
                on_err = None
                if output_handler:
                    handler = output_handler

                    def _on_out(line: str) -> None:
                        handler(pkg.symbolic_name, line, False)

                    def _on_err(line: str) -> None:
                        handler(pkg.symbolic_name, line, True)

                    on_out = _on_out
                    on_err = _on_err

                result = await run_in_package(
                    pkg,
                    command,
                    env=env,
                    timeout=timeout,
                    on_stdout=on_out,
                    on_stderr=on_err,
                )

                if self.fail_fast and result.failed:
                    self._cancelled = True

                return result

        tasks = [asyncio.create_task(run_one(pkg)) for pkg in packages]
        results = await asyncio.gather(*tasks)

        return BatchResult(results=list(results))

    async def execute_batches(
        self,
        batches: Iterable[list[PackageNode]],
        command: str,
        *,
        env: dict[str, str] | None = None,
        timeout: float | None = None,
        output_handler: Callable[[str, str, bool], None] | None = None,
        on_batch_start: Callable[[list[PackageNode]], None] | None = None,
        on_batch_done: Callable[[BatchResult], None] | None = None,
    ) -> BatchResult:
        """Execute command across package batches.

        Each batch is executed in parallel, but batches are sequential.
        Single-package batches give a strictly ordered run.

        Args:
            batches: Package batches in execution order.
            command: Shell command to execute.
            env: Environment variables.
            timeout: Per-package timeout in seconds.
            output_handler: Callback (pkg_name, line, is_stderr) for streaming output.
            on_batch_start: Called with each batch before it runs.
            on_batch_done: Called with each batch's result.

        Returns:
            Batch result with all execution results.
        """
        all_results: list[ExecutionResult] = []
        stop = False

        for batch in batches:
            if stop:
                all_results.extend(self._cancelled_result(pkg) for pkg in batch)
                continue

            if on_batch_start:
                on_batch_start(batch)
            batch_result = await self.execute(
                batch,
                command,
                env=env,
                timeout=timeout,
                output_handler=output_handler,
            )
            all_results.extend(batch_result.results)
            if on_batch_done:
                on_batch_done(batch_result)

            if self.fail_fast and batch_result.any_failure:
                stop = True

        return BatchResult(results=all_results)
