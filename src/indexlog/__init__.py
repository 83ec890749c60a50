"""Versioned metadata log for index lifecycle state.

indexlog records the state transitions of an index as an append-only series
of numbered, immutable log entries, and keeps a pointer to the latest entry
in a stable state for fast recovery.

Example:
    >>> from indexlog import IndexLogManager, IndexState, LogEntry
    >>> from indexlog.storage import MemoryStorage
    >>> manager = IndexLogManager("orders", MemoryStorage())
    >>> manager.write_log(0, LogEntry(id=0, state=IndexState.CREATING))
    True
    >>> manager.write_log(1, LogEntry(id=1, state=IndexState.ACTIVE))
    True
    >>> manager.get_latest_stable_log().id
    1
"""

from indexlog.enums import STABLE_STATES, IndexState, WriteOutcome
from indexlog.exceptions import (
    ConfigError,
    ConfigLoadError,
    EntryDecodeError,
    IndexLogError,
    LogReadError,
    StableInvariantError,
    StorageAlreadyExistsError,
    StorageConflictError,
    StorageError,
    StorageNotFoundError,
)
from indexlog.log import (
    BaseIndexLogManager,
    EntryCodec,
    IndexLogManager,
    JsonEntryCodec,
    LogEntry,
    StablePredicate,
)
from indexlog.storage import LocalStorage, MemoryStorage, StorageBackend

__all__ = [
    "STABLE_STATES",
    "BaseIndexLogManager",
    "ConfigError",
    "ConfigLoadError",
    "EntryCodec",
    "EntryDecodeError",
    "IndexLogError",
    "IndexLogManager",
    "IndexState",
    "JsonEntryCodec",
    "LocalStorage",
    "LogEntry",
    "LogReadError",
    "MemoryStorage",
    "StableInvariantError",
    "StablePredicate",
    "StorageAlreadyExistsError",
    "StorageBackend",
    "StorageConflictError",
    "StorageError",
    "StorageNotFoundError",
    "WriteOutcome",
]
