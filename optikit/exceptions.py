"""Custom exception hierarchy for optikit.

Exception Hierarchy:
    OptikitError (base)
    ├── CommandError - external command execution
    │   ├── CommandFailedError - non-zero exit code
    │   └── CommandNotFoundError - spawn failure or shell status 127
    ├── ProjectFileNotFoundError - a required project file is missing
    ├── VersionFormatError - malformed "X.Y.Z+B" version string
    ├── ModuleNameError - invalid name for `generate module`
    └── BackupIndexError - restore index outside the current listing

Usage:
    from optikit.exceptions import CommandFailedError

    try:
        executor.run("pod install")
    except CommandFailedError as e:
        output.error(e.stderr or e.message)
"""

from typing import Any, Optional


class OptikitError(Exception):
    """Base exception for all optikit errors.

    Attributes:
        message: Human-readable error description
        context: Additional context about the error (e.g., paths, commands)
    """

    def __init__(self, message: str, **context: Any) -> None:
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with context."""
        if self.context:
            context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


# =============================================================================
# Command Errors
# =============================================================================


class CommandError(OptikitError):
    """Base exception for external command failures."""

    def __init__(self, message: str, *, command: Optional[str] = None, **context: Any) -> None:
        self.command = command
        if command:
            context["command"] = command
        super().__init__(message, **context)


class CommandFailedError(CommandError):
    """A command ran but exited with a non-zero status."""

    def __init__(
        self,
        message: str = "Command failed",
        *,
        command: Optional[str] = None,
        exit_code: Optional[int] = None,
        stderr: Optional[str] = None,
    ) -> None:
        self.exit_code = exit_code
        self.stderr = stderr
        context: dict[str, Any] = {}
        if exit_code is not None:
            context["exit_code"] = exit_code
        super().__init__(message, command=command, **context)


class CommandNotFoundError(CommandError):
    """The command could not be started (missing binary or working directory)."""

    def __init__(
        self,
        message: str = "Command not found",
        *,
        command: Optional[str] = None,
        stderr: Optional[str] = None,
    ) -> None:
        self.stderr = stderr
        super().__init__(message, command=command)


# =============================================================================
# Project Errors
# =============================================================================


class ProjectFileNotFoundError(OptikitError):
    """A project file required by an operation does not exist."""

    def __init__(self, path: Any, message: Optional[str] = None) -> None:
        self.path = path
        super().__init__(message or f"{getattr(path, 'name', path)} not found at {path}")


class VersionFormatError(OptikitError):
    """A version string does not match X.Y.Z+B."""


class ModuleNameError(OptikitError):
    """A module name is empty or contains invalid characters."""


class BackupIndexError(OptikitError):
    """A restore index does not refer to any listed backup."""

    def __init__(self, index: int, available: int) -> None:
        self.index = index
        self.available = available
        super().__init__(f"Invalid backup index: {index}")
