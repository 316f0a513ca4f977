# pyright: reportExplicitAny=false
"""Shared CLI utilities for commands.

This module provides common utilities used across CLI command implementations:
- Standardized exit codes
- JSON output formatting
- Error reporting
"""

from enum import IntEnum
from typing import Any, Never

import orjson
from rich.console import Console
from rich.markup import escape

# Type alias for formattable data - uses Any to match library signatures
FormattableData = dict[str, Any]

__all__ = [
    "ExitCode",
    "FormattableData",
    "exit_with_error",
    "format_json",
]


class ExitCode(IntEnum):
    """Exit codes for gitview CLI commands."""

    SUCCESS = 0
    LOAD_ERROR = 1
    COMMAND_FAILED = 2
    NOT_A_DIRECTORY = 3
    PARSE_ERROR = 4


def format_json(data: FormattableData, *, indent: bool = True) -> str:
    """Format data as JSON.

    Args:
        data: Dictionary to format as JSON.
        indent: Whether to pretty-print with indentation.

    Returns:
        JSON-formatted string representation.
    """
    options = orjson.OPT_INDENT_2 if indent else 0
    return orjson.dumps(data, option=options).decode("utf-8")


def exit_with_error(message: str, code: ExitCode, *, console: Console) -> Never:
    """Print an error message and exit with the specified code.

    Args:
        message: The error message to display. Markup in it is escaped.
        code: The exit code to use.
        console: Rich console for output.

    Raises:
        SystemExit: Always raised with the specified exit code.
    """
    console.print(f"[red]Error:[/red] {escape(message)}")
    raise SystemExit(code)
