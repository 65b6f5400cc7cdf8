"""Test parallel execution."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from libalibe.execution.parallel import ParallelExecutor
from libalibe.execution.results import ExecutionResult, ExecutionStatus
from libalibe.workspace.package import PackageNode


@pytest.fixture
def mock_packages():
    packages = []
    for name in ("pkg1", "pkg2", "pkg3"):
        pkg = MagicMock(spec=PackageNode)
        pkg.symbolic_name = name
        pkg.location = Path("/libs") / name
        packages.append(pkg)
    return packages


@pytest.mark.asyncio
async def test_execute_success(mock_packages):
    executor = ParallelExecutor(concurrency=2)

    with patch("libalibe.execution.parallel.run_in_package") as mock_run:
        mock_run.side_effect = [
            ExecutionResult("pkg1", ExecutionStatus.SUCCESS, 0),
            ExecutionResult("pkg2", ExecutionStatus.SUCCESS, 0),
            ExecutionResult("pkg3", ExecutionStatus.SUCCESS, 0),
        ]

        result = await executor.execute(mock_packages, "echo hello")

        assert result.all_success
        assert [r.package_name for r in result] == ["pkg1", "pkg2", "pkg3"]
        assert mock_run.call_count == 3


@pytest.mark.asyncio
async def test_execute_fail_fast(mock_packages):
    executor = ParallelExecutor(concurrency=1, fail_fast=True)

    with patch("libalibe.execution.parallel.run_in_package") as mock_run:
        mock_run.side_effect = [ExecutionResult("pkg1", ExecutionStatus.FAILURE, 1)]

        result = await executor.execute(mock_packages, "echo hello")

        assert not result.all_success
        assert result.results[0].failed
        for r in result.results[1:]:
            assert r.status == ExecutionStatus.CANCELLED
        assert mock_run.call_count == 1


@pytest.mark.asyncio
async def test_execute_batches_in_order(mock_packages):
    executor = ParallelExecutor(concurrency=1, fail_fast=True)
    started = []
    done = []

    with patch("libalibe.execution.parallel.run_in_package") as mock_run:

        async def side_effect(pkg, cmd, **kwargs):
            return ExecutionResult(pkg.symbolic_name, ExecutionStatus.SUCCESS, 0)

        mock_run.side_effect = side_effect

        result = await executor.execute_batches(
            iter([[p] for p in mock_packages]),
            "echo hello",
            on_batch_start=lambda batch: started.append(batch[0].symbolic_name),
            on_batch_done=lambda batch: done.append(batch.results[0].package_name),
        )

        assert result.all_success
        assert started == ["pkg1", "pkg2", "pkg3"]
        assert done == ["pkg1", "pkg2", "pkg3"]


@pytest.mark.asyncio
async def test_execute_batches_stop_after_failure(mock_packages):
    executor = ParallelExecutor(concurrency=1, fail_fast=True)
    started = []

    with patch("libalibe.execution.parallel.run_in_package") as mock_run:
        mock_run.side_effect = [
            ExecutionResult("pkg1", ExecutionStatus.SUCCESS, 0),
            ExecutionResult("pkg2", ExecutionStatus.FAILURE, 2),
        ]

        result = await executor.execute_batches(
            [[p] for p in mock_packages],
            "echo hello",
            on_batch_start=lambda batch: started.append(batch[0].symbolic_name),
        )

        assert started == ["pkg1", "pkg2"]
        assert result.any_failure
        assert result.results[2].status == ExecutionStatus.CANCELLED
        assert mock_run.call_count == 2


@pytest.mark.asyncio
async def test_execute_output_handler(mock_packages):
    executor = ParallelExecutor()
    handler = MagicMock()

    with patch("libalibe.execution.parallel.run_in_package") as mock_run:

        async def side_effect(pkg, cmd, on_stdout, on_stderr, **kwargs):
            if on_stdout:
                on_stdout("stdout line")
            if on_stderr:
                on_stderr("stderr line")
            return ExecutionResult(pkg.symbolic_name, ExecutionStatus.SUCCESS, 0)

        mock_run.side_effect = side_effect

        await executor.execute([mock_packages[0]], "echo hello", output_handler=handler)

        assert handler.call_count == 2
        assert handler.call_args_list[0][0] == ("pkg1", "stdout line", False)
        assert handler.call_args_list[1][0] == ("pkg1", "stderr line", True)


def test_concurrency_is_at_least_one():
    assert ParallelExecutor(concurrency=0).concurrency == 1
