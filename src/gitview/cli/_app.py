"""The command-line interface for gitview."""
# ruff: noqa: TC003  # Path needed at runtime for cyclopts parameter parsing

from pathlib import Path
from typing import Annotated

from cyclopts import App, Parameter
from rich.console import Console

from gitview.config import ConfigError, load_config
from gitview.utils import create_reader_logger

from ._commands import ExitCode, exit_with_error, register_commands
from ._context import CLIContext

_HELP = "Read files, directories and tags from a git repository's history."


def create_app(
    console: Console | None = None,
    error_console: Console | None = None,
    *,
    exit_on_error: bool = True,
) -> App:
    """Build the gitview application.

    Global options are handled by the meta app, so run it with
    `app.meta(tokens)`.

    Args:
        console: Console for regular output.
        error_console: Console for errors.
        exit_on_error: Whether cyclopts exits on parse errors.

    Returns:
        The configured cyclopts App.
    """
    if console is None:
        console = Console()
    if error_console is None:
        error_console = Console(stderr=True)
    app = App(
        name="gitview",
        help=_HELP,
        help_on_error=True,
        console=console,
        error_console=error_console,
        exit_on_error=exit_on_error,
    )

    @app.meta.default
    def _default(  # pyright: ignore[reportUnusedFunction]
        *tokens: Annotated[str, Parameter(show=False, allow_leading_hyphen=True)],
        repo: Annotated[
            Path | None,
            Parameter(name=["--repo", "-C"], help="Repository directory"),
        ] = None,
        config: Annotated[
            Path | None, Parameter(name="--config", help="Path to config file")
        ] = None,
    ) -> None:
        """Launch gitview with global options.

        Args:
            tokens: Command tokens to pass to subcommands.
            repo: Working copy or bare repository to read. Defaults to the
                current directory.
            config: Explicit path to a TOML config file.
        """
        try:
            loaded_config = load_config(config)
        except ConfigError as e:
            exit_with_error(str(e), ExitCode.LOAD_ERROR, console=error_console)

        ctx = CLIContext(
            config=loaded_config,
            repo=repo if repo is not None else Path.cwd(),
            logger=create_reader_logger(loaded_config.logging),
            console=console,
            error_console=error_console,
        )
        CLIContext.set_current(ctx)

        try:
            app(tokens)
        finally:
            CLIContext.reset()

    register_commands(app)
    return app


app = create_app()


def main() -> None:
    """Default entrypoint for the `gitview` CLI."""
    create_app().meta()


if __name__ == "__main__":
    main()
