"""Shared test fixtures for indexlog tests."""

import logging
from collections.abc import Callable

import pytest
import structlog
from rich.console import Console
from structlog.testing import CapturingLogger
from structlog.typing import FilteringBoundLogger

from indexlog.enums import IndexState
from indexlog.log import IndexLogManager, LogEntry
from indexlog.storage import MemoryStorage

INDEX_PATH = "indexes/orders"


@pytest.fixture
def console() -> Console:
    return Console(
        width=70,
        force_terminal=True,
        highlight=False,
        color_system=None,
        legacy_windows=False,
    )


@pytest.fixture
def log_capture() -> CapturingLogger:
    """Capture structured log calls made by the code under test."""
    return CapturingLogger()


@pytest.fixture
def logger(log_capture: CapturingLogger) -> FilteringBoundLogger:
    """Create a debug-level logger that records calls in log_capture."""
    return structlog.wrap_logger(
        log_capture,
        processors=[],
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG),
        context_class=dict,
    )


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def manager(storage: MemoryStorage, logger: FilteringBoundLogger) -> IndexLogManager:
    """Create a log manager over in-memory storage."""
    return IndexLogManager(INDEX_PATH, storage, logger=logger)


@pytest.fixture
def make_entry() -> Callable[..., LogEntry]:
    """Return a factory for log entries with a fixed timestamp."""

    def _make(
        log_id: int,
        state: str = IndexState.ACTIVE,
        **content: object,
    ) -> LogEntry:
        return LogEntry(
            id=log_id,
            state=state,
            timestamp=1_700_000_000_000 + log_id,
            content=content,
        )

    return _make


@pytest.fixture
def logged_events(log_capture: CapturingLogger) -> Callable[[], list[str]]:
    """Return a function listing the event names logged so far."""

    def _events() -> list[str]:
        return [str(call.kwargs.get("event", "")) for call in log_capture.calls]

    return _events
