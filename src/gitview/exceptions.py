"""gitview exceptions."""

import builtins
from collections.abc import Sequence
from pathlib import Path
from typing import Any


class GitViewError(Exception):
    """Base exception for gitview errors."""


class RepoNotFoundError(GitViewError):
    """Raised when the repository path does not exist.

    Attributes:
        path: The path that was given to the reader.
    """

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        """Initialize with error message and path context.

        Args:
            message: Human-readable error message.
            path: The path that was given to the reader.
        """
        super().__init__(message)
        self.path: Path | None = path


# =============================================================================
# Command Exceptions
# =============================================================================


class CommandError(GitViewError):
    """Base exception for git subprocess errors.

    Attributes:
        command: The full argument vector that was executed.
    """

    def __init__(self, message: str, *, command: Sequence[str] = ()) -> None:
        """Initialize with error message and command context."""
        super().__init__(message)
        self.command: tuple[str, ...] = tuple(command)


class CommandFailedError(CommandError):
    """Raised when git exits with a non-zero status.

    Attributes:
        command: The full argument vector that was executed.
        exit_code: The process exit status.
        stderr: Captured standard error, decoded for display.
        stdout: Captured standard output, left as raw bytes.
    """

    def __init__(
        self,
        message: str,
        *,
        command: Sequence[str] = (),
        exit_code: int,
        stderr: str = "",
        stdout: bytes = b"",
    ) -> None:
        """Initialize with error message and process outcome.

        Args:
            message: Human-readable error message.
            command: The full argument vector that was executed.
            exit_code: The process exit status.
            stderr: Captured standard error.
            stdout: Captured standard output.
        """
        super().__init__(message, command=command)
        self.exit_code: int = exit_code
        self.stderr: str = stderr
        self.stdout: bytes = stdout


class CommandStartError(CommandError):
    """Raised when the git process cannot be spawned."""

    def __init__(
        self,
        message: str,
        *,
        command: Sequence[str] = (),
        cause: Exception | None = None,
    ) -> None:
        """Initialize with error message and the underlying OS error."""
        super().__init__(message, command=command)
        self.cause: Exception | None = cause


# =============================================================================
# Content Exceptions
# =============================================================================


class NotADirectoryError(GitViewError, builtins.NotADirectoryError):  # noqa: A001
    """Raised when a path at a revision is not a tree.

    Attributes:
        path: The repository path that was listed.
        revision: The revision it was listed at.
    """

    def __init__(self, message: str, *, path: str, revision: str) -> None:
        """Initialize with error message and object context.

        Args:
            message: Human-readable error message.
            path: The repository path that was listed.
            revision: The revision it was listed at.
        """
        super().__init__(message)
        self.path: str = path
        self.revision: str = revision


class ParseError(GitViewError, ValueError):
    """Raised when git output does not match the expected grammar.

    Attributes:
        line: The offending line.
        line_number: 1-based position of the line in the output.
    """

    def __init__(self, message: str, *, line: str, line_number: int) -> None:
        """Initialize with error message and line context."""
        super().__init__(message)
        self.line: str = line
        self.line_number: int = line_number


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigError(GitViewError):
    """Base exception for configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when configuration cannot be loaded or parsed."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        """Initialize with error message and optional file context."""
        super().__init__(message)
        self.path: Path | None = path


class ConfigValidationError(ConfigError):
    """Raised when configuration fails validation."""

    def __init__(
        self,
        message: str,
        *,
        key: str,
        value: Any,  # pyright: ignore[reportAny,reportExplicitAny]
        expected: str,
    ) -> None:
        """Initialize with error message and validation context."""
        super().__init__(message)
        self.key: str = key
        self.value: Any = value  # pyright: ignore[reportExplicitAny]
        self.expected: str = expected
