"""Storage backends for indexlog.

This package provides the StorageBackend protocol the log manager consumes,
plus two implementations.

Classes:
    StorageBackend: Runtime-checkable protocol for hierarchical byte storage.
    LocalStorage: Backend rooted at a local filesystem directory.
    MemoryStorage: Thread-safe in-memory backend for tests.

Example:
    >>> from indexlog.storage import LocalStorage
    >>> storage = LocalStorage("/data/indexes")
    >>> storage.write_new("orders/_hyperspace_log/0", b"{}")
    >>> storage.list_children("orders/_hyperspace_log")
    ['0']
"""

from indexlog.storage._local import LocalStorage
from indexlog.storage._memory import MemoryStorage
from indexlog.storage._protocol import StorageBackend

__all__ = [
    "LocalStorage",
    "MemoryStorage",
    "StorageBackend",
]
