# ruff: noqa: TC003  # Path needed at runtime for dataclass field
"""CLI context for global state management.

The CLIContext is set once by the meta app after global options are parsed
and made available to all commands via contextvars.
"""

import contextvars
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console

from gitview.config import ReaderConfig

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

# Context variable for CLIContext
_current_cli_context: contextvars.ContextVar["CLIContext | None"] = (
    contextvars.ContextVar("cli_context", default=None)
)


@dataclass(frozen=True, slots=True)
class CLIContext:
    """Global CLI context with configuration and options.

    Attributes:
        config: Loaded reader configuration.
        repo: Repository directory to open.
        logger: Structured logger handed to the reader.
        console: Console for regular output.
        error_console: Console for error output.
    """

    config: ReaderConfig = field(default_factory=ReaderConfig, repr=False)
    repo: Path = field(default_factory=Path.cwd)
    logger: "FilteringBoundLogger | None" = field(default=None, repr=False)  # noqa: UP037
    console: Console = field(default_factory=Console, repr=False)
    error_console: Console = field(
        default_factory=lambda: Console(stderr=True), repr=False
    )

    @classmethod
    def get_current(cls) -> "CLIContext":  # noqa: UP037
        """Get current active CLIContext, or a default if not set.

        Returns:
            The currently active CLIContext, or a default instance.
        """
        ctx = _current_cli_context.get()
        if ctx is not None:
            return ctx
        return cls()

    @classmethod
    def set_current(cls, ctx: "CLIContext") -> None:  # noqa: UP037
        """Set the current active CLIContext.

        Args:
            ctx: The CLIContext to set as current.
        """
        _ = _current_cli_context.set(ctx)

    @classmethod
    def reset(cls) -> None:
        """Reset to default context."""
        _ = _current_cli_context.set(None)
