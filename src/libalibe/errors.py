"""libalibe exception hierarchy."""

from __future__ import annotations

from pathlib import Path


class LibalibeError(Exception):
    """Base class for all libalibe errors.

    Attributes:
        message: Human readable description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigurationError(LibalibeError):
    """Configuration could not be found, parsed or validated."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.path = path
        if path is not None:
            message = f"{message} ({path})"
        super().__init__(message)


class PackageNotFoundError(LibalibeError):
    """A symbolic package name is not present in the configuration."""

    def __init__(self, name: str, available: list[str] | None = None) -> None:
        self.name = name
        self.available = available or []
        message = f'Invalid lib package name: "{name}"'
        if self.available:
            message += f". Available: {', '.join(self.available)}"
        super().__init__(message)


class NoPackagesFoundError(LibalibeError):
    """A recursive operation found nothing to work on."""

    def __init__(self, message: str = "No packages found") -> None:
        super().__init__(message)


class ManifestUnreadableError(LibalibeError):
    """A package manifest is missing or cannot be parsed."""

    def __init__(self, location: Path, reason: str | None = None) -> None:
        self.location = location
        message = f"No readable package.json in {location}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class DuplicateSymbolicNameError(LibalibeError):
    """Two participating packages share a symbolic or manifest name."""

    def __init__(self, name: str, *, manifest_name: bool = False) -> None:
        self.name = name
        kind = "manifest name" if manifest_name else "symbolic name"
        super().__init__(f'Duplicate {kind} "{name}"')


class RangeNotFoundError(LibalibeError):
    """A dependency expected in a consumer manifest is not declared there."""

    def __init__(self, consumer: str | None, dependency: str) -> None:
        self.consumer = consumer
        self.dependency = dependency
        super().__init__(f'{consumer or "<unnamed>"}: version not found "{dependency}"')


class ExecutionError(LibalibeError):
    """A spawned command exited with a non-zero status."""

    def __init__(
        self,
        message: str,
        *,
        command: str | None = None,
        exit_code: int | None = None,
        stderr: str | None = None,
    ) -> None:
        self.command = command
        self.exit_code = exit_code
        self.stderr = stderr
        super().__init__(message)


class GitError(LibalibeError):
    """A git command failed."""

    def __init__(self, message: str, command: str | None = None) -> None:
        self.command = command
        super().__init__(message)


class BranchError(GitError):
    """The repository is not on the release branch."""

    def __init__(self, path: Path, expected: str, current: str) -> None:
        self.path = path
        self.expected = expected
        self.current = current
        super().__init__(f"{path}: not on {expected} branch ({current})")


class WorkingTreeError(GitError):
    """The working tree is not in the state an operation requires."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"{path}: {reason}")


class PublishError(LibalibeError):
    """Building, bumping, pushing or publishing a package failed."""

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        super().__init__(f"Failed to publish {name}: {reason}")
