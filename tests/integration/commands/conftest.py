from collections.abc import Callable, Iterator

import pytest
from rich.console import Console

from indexlog.cli import CLIContext, create_app


@pytest.fixture(autouse=True)
def reset_cli_context(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Isolate each CLI run from the environment and previous contexts."""
    monkeypatch.delenv("INDEXLOG_DEBUG", raising=False)
    monkeypatch.setenv("INDEXLOG_LOGGING__LEVEL", "error")
    yield
    CLIContext.reset()


@pytest.fixture
def indexlog_cli(console: Console) -> Callable[..., int]:
    """Create CLI app for testing that returns the exit code.

    Global options are passed through the meta app, so the returned callable
    takes the full argument list, e.g. ``("--root", path, "list", "orders")``.
    """

    app = create_app(console=console, error_console=console)

    def _run(*args: str) -> int:
        """Run CLI app and return exit code (0 if no SystemExit)."""

        try:
            app.meta(list(args))
        except SystemExit as e:
            return e.code if isinstance(e.code, int) else 1
        else:
            return 0

    return _run
