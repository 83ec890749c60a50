# ruff: noqa: TC003  # Path needed at runtime for dataclass field
"""CLI context for global state management.

The CLIContext is set once by the meta launcher from the global options and
made available to all commands via contextvars.
"""

import contextvars
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from indexlog.config import LogManagerConfiguration
from indexlog.log import IndexLogManager
from indexlog.storage import LocalStorage

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

_current_cli_context: contextvars.ContextVar["CLIContext | None"] = (
    contextvars.ContextVar("cli_context", default=None)
)


@dataclass(frozen=True, slots=True)
class CLIContext:
    """Global CLI context with configuration and options.

    Attributes:
        config: Loaded configuration.
        root: Directory that index paths are resolved against.
        logger: Structured logger handed to log managers.
    """

    config: LogManagerConfiguration = field(repr=False)
    root: Path
    logger: "FilteringBoundLogger | None" = field(default=None, repr=False)  # noqa: UP037

    @classmethod
    def get_current(cls) -> "CLIContext":
        """Get current active CLIContext, or a default rooted at the cwd."""
        ctx = _current_cli_context.get()
        if ctx is not None:
            return ctx
        return cls(config=LogManagerConfiguration(), root=Path.cwd())

    @classmethod
    def set_current(cls, ctx: "CLIContext") -> None:
        """Set the current active CLIContext."""
        _current_cli_context.set(ctx)

    @classmethod
    def reset(cls) -> None:
        """Reset to default context.

        Primarily useful for testing to ensure a clean state between tests.
        """
        _current_cli_context.set(None)

    def manager(self, index: str) -> IndexLogManager:
        """Create a log manager for an index under the root directory.

        Args:
            index: Index path relative to the root directory.

        Returns:
            A log manager over local storage.
        """
        return IndexLogManager(
            index,
            LocalStorage(self.root),
            config=self.config,
            logger=self.logger,
        )
