"""Shared CLI utilities for commands.

This module provides common utilities used across CLI command implementations:
- Standardized exit codes
- JSON output formatting
- Console utilities for error handling
"""

import contextlib
from collections.abc import Iterator
from enum import IntEnum
from typing import Any, Never

import orjson
from rich.console import Console

from indexlog.exceptions import (
    EntryDecodeError,
    LogReadError,
    StableInvariantError,
)

# Type alias for formattable data - uses Any to match library signatures
FormattableData = dict[str, Any]  # pyright: ignore[reportExplicitAny]


class ExitCode(IntEnum):
    """Standard exit codes for indexlog CLI commands."""

    SUCCESS = 0
    LOAD_ERROR = 1
    VALIDATION_ERROR = 2
    NOT_FOUND = 3
    IO_ERROR = 4
    INTERNAL_ERROR = 5
    CONFLICT = 6


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


def get_error_console() -> Console:
    """Get a Rich console configured for error output to stderr."""
    return Console(stderr=True)


def exit_with_error(
    message: str,
    code: ExitCode = ExitCode.INTERNAL_ERROR,
    *,
    console: Console | None = None,
) -> Never:
    """Print an error message and exit with the specified code.

    Args:
        message: The error message to display.
        code: The exit code to use (defaults to INTERNAL_ERROR).
        console: Optional Rich console for output. If not provided,
            a new stderr console will be created.

    Raises:
        SystemExit: Always raised with the specified exit code.
    """
    if console is None:
        console = get_error_console()

    console.print(f"[red]Error:[/red] {message}")
    raise SystemExit(code)


@contextlib.contextmanager
def handle_log_errors() -> Iterator[None]:
    """Translate log read failures into CLI exit codes."""
    try:
        yield
    except EntryDecodeError as e:
        exit_with_error(f"Corrupt log entry at '{e.path}': {e}", ExitCode.VALIDATION_ERROR)
    except StableInvariantError as e:
        exit_with_error(str(e), ExitCode.INTERNAL_ERROR)
    except LogReadError as e:
        exit_with_error(str(e), ExitCode.IO_ERROR)
