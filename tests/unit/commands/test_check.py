"""Tests for the actuality check command."""

from __future__ import annotations

from io import StringIO
from pathlib import Path

import pytest
import typer
from rich.console import Console

from libalibe.commands.base import CommandContext
from libalibe.commands.check import check_packages, handle_check
from libalibe.workspace import Workspace


class TestCheckCommand:
    def test_single_project(self, workspace_dir: Path) -> None:
        workspace = Workspace.discover(workspace_dir)
        result = check_packages(workspace, workspace_dir / "app")

        assert result.all_actual
        assert list(result.reports) == [workspace_dir / "app"]

    def test_recursive(self, workspace_dir: Path) -> None:
        workspace = Workspace.discover(workspace_dir)
        result = check_packages(workspace, recursive=True)

        libs = workspace_dir / "libs"
        assert list(result.reports) == [libs / "c", libs / "b", libs / "a"]
        assert not result.all_actual
        assert result.reports[libs / "b"].stale_names == ["lib-c"]
        assert result.reports[libs / "a"]

    def test_exact_mode(self, cycle_workspace_dir: Path) -> None:
        workspace = Workspace.discover(cycle_workspace_dir)

        assert check_packages(workspace, cycle_workspace_dir / "x").all_actual
        assert not check_packages(workspace, cycle_workspace_dir / "x", exact=True).all_actual


class TestHandleCheck:
    def test_stale_exits_with_error(self, workspace_dir: Path) -> None:
        output = StringIO()
        context = CommandContext(workspace=Workspace.discover(workspace_dir))

        with pytest.raises(typer.Exit) as exc_info:
            handle_check(
                context,
                console=Console(file=output, width=200),
                error_console=Console(file=StringIO()),
                path=workspace_dir / "libs" / "b",
            )

        assert exc_info.value.exit_code == 1
        assert 'not actual ["lib-c"]' in output.getvalue()

    def test_actual(self, workspace_dir: Path) -> None:
        output = StringIO()
        context = CommandContext(workspace=Workspace.discover(workspace_dir))

        handle_check(
            context,
            console=Console(file=output, width=200),
            error_console=Console(file=StringIO()),
            path=workspace_dir / "app",
        )

        assert ": actual" in output.getvalue()
