"""gitview CLI commands."""

from typing import TYPE_CHECKING

from ._read import cat_command, exists_command, ls_command, open_reader, tags_command
from ._shared import ExitCode, FormattableData, exit_with_error, format_json

if TYPE_CHECKING:
    from cyclopts import App

__all__ = [
    "ExitCode",
    "FormattableData",
    "exit_with_error",
    "format_json",
    "open_reader",
    "register_commands",
]


def register_commands(app: "App") -> None:  # noqa: UP037
    """Register the read commands on an app.

    Args:
        app: The cyclopts application to extend.
    """
    _ = app.command(cat_command, name="cat")
    _ = app.command(ls_command, name="ls")
    _ = app.command(tags_command, name="tags")
    _ = app.command(exists_command, name="exists")
