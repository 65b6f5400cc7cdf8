"""Base command infrastructure."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from rich.console import Console

from libalibe.workspace import Workspace

TResult = TypeVar("TResult")


@dataclass
class MemoryLog:
    """Summary lines collected during a command and printed after it."""

    lines: list[str] = field(default_factory=list)

    def add(self, line: str) -> None:
        self.lines.append(line)

    def flush(self, console: Console) -> None:
        """Print and forget the collected lines."""
        for line in self.lines:
            console.print(line)
        self.lines.clear()

    def __iter__(self) -> Iterator[str]:
        return iter(self.lines)

    def __len__(self) -> int:
        return len(self.lines)


@dataclass
class CommandContext:
    """Context passed to all commands.

    Attributes:
        workspace: The workspace instance.
        dry_run: If True, show what would happen without making changes.
        env: Extra environment for spawned commands.
        memory: Summary lines printed once the command finishes.
    """

    workspace: Workspace
    dry_run: bool = False
    env: dict[str, str] = field(default_factory=dict)
    memory: MemoryLog = field(default_factory=MemoryLog)

    @property
    def pm(self) -> str:
        """Configured package manager binary."""
        return self.workspace.config.package_manager


class Command(ABC, Generic[TResult]):
    """Base class for all libalibe commands.

    Commands encapsulate the logic for a specific operation.
    They receive a context and return a result.
    """

    def __init__(self, context: CommandContext) -> None:
        self.context = context
        self.workspace = context.workspace

    @abstractmethod
    async def execute(self) -> TResult:
        """Execute the command.

        Returns:
            Command-specific result.
        """
        ...


class SyncCommand(ABC, Generic[TResult]):
    """Base class for synchronous commands."""

    def __init__(self, context: CommandContext) -> None:
        self.context = context
        self.workspace = context.workspace

    @abstractmethod
    def execute(self) -> TResult:
        """Execute the command synchronously.

        Returns:
            Command-specific result.
        """
        ...
