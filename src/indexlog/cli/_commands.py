# pyright: reportUnusedCallResult=false
# ruff: noqa: T201
"""Commands for inspecting and maintaining index logs."""

from typing import Annotated

import orjson
from cyclopts import App, Parameter
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from indexlog.config import dump_config
from indexlog.enums import WriteOutcome
from indexlog.log import LogEntry

from ._context import CLIContext
from ._shared import ExitCode, exit_with_error, format_json, handle_log_errors


def _print_entry(entry: LogEntry) -> None:
    print(format_json(entry.model_dump(mode="json")))


def _latest_id(index: str) -> None:
    """Print the highest entry id of an index log.

    Args:
        index: Index path relative to the root directory.
    """
    manager = CLIContext.get_current().manager(index)
    with handle_log_errors():
        latest_id = manager.get_latest_id()
    if latest_id is None:
        exit_with_error(f"No log entries for '{index}'", ExitCode.NOT_FOUND)
    print(latest_id)
    raise SystemExit(ExitCode.SUCCESS)


def _list(
    index: str,
    *,
    json: Annotated[bool, Parameter(name="--json", help="Output JSON")] = False,
) -> None:
    """List the entries of an index log

    Args:
        index: Index path relative to the root directory.
        json: Output a JSON array instead of a table.
    """
    manager = CLIContext.get_current().manager(index)
    entries: list[LogEntry] = []
    with handle_log_errors():
        for log_id in manager.get_log_ids():
            entry = manager.get_log(log_id)
            if entry is not None:
                entries.append(entry)

    if json:
        print(
            orjson.dumps(
                [entry.model_dump(mode="json") for entry in entries],
                option=orjson.OPT_INDENT_2,
            ).decode("utf-8")
        )
        raise SystemExit(ExitCode.SUCCESS)

    table = Table(title=f"Log for {manager.index_path}")
    table.add_column("id", justify="right")
    table.add_column("state")
    table.add_column("stable")
    table.add_column("enabled")
    table.add_column("timestamp", justify="right")
    for entry in entries:
        table.add_row(
            str(entry.id),
            entry.state,
            "yes" if manager.is_stable_state(entry.state) else "no",
            "yes" if entry.enabled else "no",
            str(entry.timestamp),
        )
    Console().print(table)
    raise SystemExit(ExitCode.SUCCESS)


def _show(index: str, log_id: int) -> None:
    """Print the entry stored at an id

    Args:
        index: Index path relative to the root directory.
        log_id: Entry id.
    """
    manager = CLIContext.get_current().manager(index)
    with handle_log_errors():
        entry = manager.get_log(log_id)
    if entry is None:
        exit_with_error(f"No log entry {log_id} for '{index}'", ExitCode.NOT_FOUND)
    _print_entry(entry)
    raise SystemExit(ExitCode.SUCCESS)


def _latest(index: str) -> None:
    """Print the entry with the highest id

    Args:
        index: Index path relative to the root directory.
    """
    manager = CLIContext.get_current().manager(index)
    with handle_log_errors():
        entry = manager.get_latest_log()
    if entry is None:
        exit_with_error(f"No log entries for '{index}'", ExitCode.NOT_FOUND)
    _print_entry(entry)
    raise SystemExit(ExitCode.SUCCESS)


def _stable(index: str) -> None:
    """Print the latest entry in a stable state

    Args:
        index: Index path relative to the root directory.
    """
    manager = CLIContext.get_current().manager(index)
    with handle_log_errors():
        entry = manager.get_latest_stable_log()
    if entry is None:
        exit_with_error(f"No stable log entry for '{index}'", ExitCode.NOT_FOUND)
    _print_entry(entry)
    raise SystemExit(ExitCode.SUCCESS)


def _write(
    index: str,
    log_id: int,
    *,
    state: Annotated[str, Parameter(name=["--state", "-s"], help="Entry state")],
    content: Annotated[
        str, Parameter(name=["--content", "-c"], help="Entry content as a JSON object")
    ] = "{}",
    disabled: Annotated[
        bool, Parameter(name="--disabled", help="Mark the index as disabled")
    ] = False,
) -> None:
    """Write a new entry at an id

    Fails without changing anything if an entry already exists at the id.

    Args:
        index: Index path relative to the root directory.
        log_id: Entry id.
        state: State of the index after this transition.
        content: Entry content as a JSON object.
        disabled: Mark the index as disabled in this entry.
    """
    try:
        payload = orjson.loads(content)
    except orjson.JSONDecodeError as e:
        exit_with_error(f"Invalid --content JSON: {e}", ExitCode.VALIDATION_ERROR)
    if not isinstance(payload, dict):
        exit_with_error("--content must be a JSON object", ExitCode.VALIDATION_ERROR)

    try:
        entry = LogEntry(id=log_id, state=state, enabled=not disabled, content=payload)
    except ValidationError as e:
        exit_with_error(f"Invalid entry: {e}", ExitCode.VALIDATION_ERROR)

    manager = CLIContext.get_current().manager(index)
    match manager.try_write_log(log_id, entry):
        case WriteOutcome.WRITTEN:
            print(f"Wrote log entry {log_id}")
            raise SystemExit(ExitCode.SUCCESS)
        case WriteOutcome.CONFLICT:
            exit_with_error(f"Log entry {log_id} already exists", ExitCode.CONFLICT)
        case _:
            exit_with_error(f"Failed to write log entry {log_id}", ExitCode.IO_ERROR)


def _promote(index: str, log_id: int) -> None:
    """Point the stable pointer at an entry

    Args:
        index: Index path relative to the root directory.
        log_id: Id of the entry to promote.
    """
    manager = CLIContext.get_current().manager(index)
    if not manager.create_latest_stable_log(log_id):
        exit_with_error(f"Failed to promote log entry {log_id}", ExitCode.IO_ERROR)
    print(f"Promoted log entry {log_id}")
    raise SystemExit(ExitCode.SUCCESS)


def _unpromote(index: str) -> None:
    """Remove the stable pointer

    Args:
        index: Index path relative to the root directory.
    """
    manager = CLIContext.get_current().manager(index)
    if not manager.delete_latest_stable_log():
        exit_with_error("Failed to delete the stable pointer", ExitCode.IO_ERROR)
    print("Stable pointer removed")
    raise SystemExit(ExitCode.SUCCESS)


def _config() -> None:
    """Print the effective configuration as TOML"""
    print(dump_config(CLIContext.get_current().config).rstrip())
    raise SystemExit(ExitCode.SUCCESS)


def register_commands(app: App) -> None:
    """Register all commands on an app.

    Args:
        app: The app to register commands on.
    """
    app.command(_latest_id, name="latest-id")
    app.command(_list, name="list")
    app.command(_show, name="show")
    app.command(_latest, name="latest")
    app.command(_stable, name="stable")
    app.command(_write, name="write")
    app.command(_promote, name="promote")
    app.command(_unpromote, name="unpromote")
    app.command(_config, name="config")
