# pyright: reportUnusedCallResult=false
# ruff: noqa: D415, FBT002
"""Read commands: cat, ls, tags and exists."""

import sys
from collections.abc import Awaitable, Callable
from typing import Annotated, TypeVar

import anyio
from cyclopts import Parameter
from rich.markup import escape

from gitview.cli._context import CLIContext
from gitview.exceptions import (
    CommandFailedError,
    CommandStartError,
    GitViewError,
    NotADirectoryError,
    ParseError,
    RepoNotFoundError,
)
from gitview.repository import DEFAULT_REVISION, ReaderProtocol, RepositoryReader

from ._shared import ExitCode, exit_with_error, format_json


def open_reader(ctx: CLIContext) -> ReaderProtocol:
    """Open the repository named by the CLI context.

    Args:
        ctx: The active CLI context.

    Returns:
        A reader for ctx.repo.

    Raises:
        SystemExit: If the repository path does not exist.
    """
    try:
        return RepositoryReader(ctx.repo, config=ctx.config, logger=ctx.logger)
    except RepoNotFoundError as e:
        exit_with_error(str(e), ExitCode.LOAD_ERROR, console=ctx.error_console)


def _first_error(group: BaseExceptionGroup[BaseException]) -> BaseException:
    """Return the first leaf exception of a possibly nested group."""
    error: BaseException = group
    while isinstance(error, BaseExceptionGroup):
        error = error.exceptions[0]
    return error


def _exit_on_error(ctx: CLIContext, error: BaseException) -> None:
    """Exit with the code for a known reader error; return for anything else."""
    console = ctx.error_console
    if isinstance(error, NotADirectoryError):
        exit_with_error(str(error), ExitCode.NOT_A_DIRECTORY, console=console)
    if isinstance(error, CommandFailedError):
        detail = error.stderr.strip() or str(error)
        exit_with_error(detail, ExitCode.COMMAND_FAILED, console=console)
    if isinstance(error, CommandStartError):
        exit_with_error(str(error), ExitCode.COMMAND_FAILED, console=console)
    if isinstance(error, ParseError):
        exit_with_error(str(error), ExitCode.PARSE_ERROR, console=console)
    if isinstance(error, OSError):
        exit_with_error(str(error), ExitCode.LOAD_ERROR, console=console)


T = TypeVar("T")


def _run(ctx: CLIContext, func: Callable[..., Awaitable[T]], *args: object) -> T:
    """Run a reader coroutine, turning gitview errors into exit codes.

    Concurrent reads (exists) report failures as an exception group; its
    first error decides the exit code.
    """
    try:
        return anyio.run(func, *args)
    except ExceptionGroup as group:
        _exit_on_error(ctx, _first_error(group))
        raise
    except (GitViewError, OSError) as e:
        _exit_on_error(ctx, e)
        raise


def cat_command(
    path: str,
    *,
    rev: Annotated[
        str | None,
        Parameter(
            name=["--rev", "-r"],
            help="Revision to read at. Omit to read the working tree.",
        ),
    ] = None,
) -> None:
    """Write a file's contents at a revision to stdout"""
    ctx = CLIContext.get_current()
    reader = open_reader(ctx)
    content = _run(ctx, reader.read_file, path, rev)
    sys.stdout.flush()
    sys.stdout.buffer.write(content)
    sys.stdout.buffer.flush()


def ls_command(
    path: str = "",
    *,
    rev: Annotated[
        str, Parameter(name=["--rev", "-r"], help="Revision to list at")
    ] = DEFAULT_REVISION,
    as_json: Annotated[bool, Parameter(name="--json", help="Output as JSON")] = False,
) -> None:
    """List a directory at a revision (directories first)"""
    ctx = CLIContext.get_current()
    reader = open_reader(ctx)
    listing = _run(ctx, reader.read_dir, path, rev)

    if as_json:
        data = {
            "path": path,
            "revision": rev,
            "dirs": list(listing.dirs),
            "files": list(listing.files),
        }
        print(format_json(data))
        return

    for name in listing.dirs:
        ctx.console.print(f"[bold blue]{escape(name)}/[/bold blue]")
    for name in listing.files:
        ctx.console.print(escape(name))


def tags_command(
    *,
    as_json: Annotated[bool, Parameter(name="--json", help="Output as JSON")] = False,
) -> None:
    """List tags and the object ids they point at"""
    ctx = CLIContext.get_current()
    reader = open_reader(ctx)
    tags = _run(ctx, reader.get_tags)

    if as_json:
        print(format_json(tags))
        return

    if not tags:
        ctx.console.print("[dim]No tags[/dim]")
        return

    for name, object_id in tags.items():
        ctx.console.print(f"{escape(name)} [yellow]{object_id}[/yellow]")


def exists_command(
    path: str,
    *,
    as_json: Annotated[bool, Parameter(name="--json", help="Output as JSON")] = False,
) -> None:
    """Show the tags (and HEAD) at which a path exists"""
    ctx = CLIContext.get_current()
    reader = open_reader(ctx)
    found = _run(ctx, reader.exists, path)

    if as_json:
        print(format_json(found))
        return

    if not found:
        ctx.console.print(f"[dim]{escape(path)} not found at any tag or HEAD[/dim]")
        return

    for tag, object_id in found.items():
        ctx.console.print(f"{escape(tag)} [yellow]{object_id}[/yellow]")
