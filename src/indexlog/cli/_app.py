"""The command-line interface for indexlog."""
# ruff: noqa: TC003  # Path needed at runtime for cyclopts parameter parsing

from pathlib import Path
from typing import Annotated

from cyclopts import App, Parameter
from rich.console import Console

from indexlog.config import ConfigLoadError, load_config
from indexlog.utils import create_logger_from_config

from ._commands import register_commands
from ._context import CLIContext
from ._shared import ExitCode, exit_with_error

_HELP = "Inspect and maintain versioned index metadata logs."


def create_app(
    console: Console | None = None,
    error_console: Console | None = None,
    *,
    exit_on_error: bool = True,
) -> App:
    """Create the CLI app.

    Global options are parsed by the meta app; run the CLI with
    ``app.meta(tokens)``.

    Args:
        console: Console for regular output.
        error_console: Console for errors.
        exit_on_error: Exit on argument parsing errors.

    Returns:
        The configured app.
    """
    if console is None:
        console = Console()
    if error_console is None:
        error_console = Console(stderr=True)
    app = App(
        name="indexlog",
        help=_HELP,
        help_on_error=True,
        console=console,
        error_console=error_console,
        exit_on_error=exit_on_error,
    )

    @app.meta.default
    def _default(  # pyright: ignore[reportUnusedFunction]
        *tokens: Annotated[str, Parameter(show=False, allow_leading_hyphen=True)],
        root: Annotated[
            Path | None,
            Parameter(name="--root", help="Directory containing the indexes"),
        ] = None,
        config: Annotated[
            Path | None, Parameter(name="--config", help="Path to config file")
        ] = None,
        verbose: Annotated[
            bool, Parameter(name="--verbose", help="Enable debug logging")
        ] = False,
    ) -> None:
        """Launch indexlog CLI with global options.

        Args:
            tokens: Command tokens to pass to subcommands.
            root: Directory containing the indexes (defaults to the cwd).
            config: Explicit path to config file.
            verbose: Enable debug logging.
        """
        overrides: dict[str, object] | None = None
        if verbose:
            overrides = {"logging": {"level": "debug"}}

        try:
            loaded_config = load_config(config, overrides=overrides)
        except FileNotFoundError:
            exit_with_error(
                f"Config file not found: {config}",
                ExitCode.LOAD_ERROR,
                console=error_console,
            )
        except ConfigLoadError as e:
            exit_with_error(str(e), ExitCode.LOAD_ERROR, console=error_console)

        ctx = CLIContext(
            config=loaded_config,
            root=root if root is not None else Path.cwd(),
            logger=create_logger_from_config(loaded_config.logging, command="cli"),
        )
        CLIContext.set_current(ctx)

        try:
            app(tokens)
        finally:
            CLIContext.reset()

    register_commands(app)
    return app


def main() -> None:
    """Default entrypoint for the `indexlog` CLI."""
    app = create_app()
    app.meta()
