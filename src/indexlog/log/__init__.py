"""Index log management.

This package provides the log entry model, entry codecs and the log manager
that stores entries and maintains the stable pointer.

Classes:
    LogEntry: Immutable record of one index state transition.
    EntryCodec: Runtime-checkable protocol for entry serialization.
    JsonEntryCodec: Default orjson-based codec.
    BaseIndexLogManager: Abstract base class for log managers.
    IndexLogManager: Log manager backed by a StorageBackend.
"""

from indexlog.log._base import BaseIndexLogManager
from indexlog.log._codec import EntryCodec, JsonEntryCodec
from indexlog.log._entry import (
    LOG_ENTRY_VERSION,
    LogEntry,
    StablePredicate,
    as_stable_predicate,
)
from indexlog.log._manager import IndexLogManager, parse_log_id

__all__ = [
    "LOG_ENTRY_VERSION",
    "BaseIndexLogManager",
    "EntryCodec",
    "IndexLogManager",
    "JsonEntryCodec",
    "LogEntry",
    "StablePredicate",
    "as_stable_predicate",
    "parse_log_id",
]
