"""In-memory storage backend for testing.

This module provides a MemoryStorage class that implements StorageBackend
without touching the filesystem. All mutations happen under a single lock,
so ``write_new`` and ``rename_no_clobber`` are atomic across threads.
"""

import posixpath
import threading
from dataclasses import dataclass, field

from indexlog.exceptions import (
    StorageAlreadyExistsError,
    StorageConflictError,
    StorageError,
    StorageNotFoundError,
)


def _normalize(path: str) -> str:
    normalized = posixpath.normpath(path.replace("\\", "/")).strip("/")
    return "" if normalized == "." else normalized


@dataclass(slots=True)
class MemoryStorage:
    """In-memory storage backend.

    Directories are implicit: a directory exists when it was created as the
    parent of a written file and has not been deleted.

    The fake exposes its state for test setup and assertions:
    - files maps normalized paths to their contents
    - fail_operations names backend methods that should raise StorageError

    Example:
        >>> storage = MemoryStorage()
        >>> storage.write_new("log/0", b"{}")
        >>> storage.list_children("log")
        ['0']
        >>> storage.fail_operations.add("rename_no_clobber")
    """

    files: dict[str, bytes] = field(default_factory=dict)
    directories: set[str] = field(default_factory=set)
    fail_operations: set[str] = field(default_factory=set)
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    def _check_failure(self, operation: str, path: str) -> None:
        if operation in self.fail_operations:
            msg = f"Injected failure in {operation} for '{path}'"
            raise StorageError(msg, path=path)

    def _add_parents(self, path: str) -> None:
        parent = posixpath.dirname(path)
        while parent:
            self.directories.add(parent)
            parent = posixpath.dirname(parent)

    def _is_directory(self, path: str) -> bool:
        return path == "" or path in self.directories

    def exists(self, path: str) -> bool:
        """Check whether a file or directory exists at path."""
        key = _normalize(path)
        with self._lock:
            self._check_failure("exists", key)
            return key in self.files or self._is_directory(key)

    def read_bytes(self, path: str) -> bytes:
        """Read the whole file at path."""
        key = _normalize(path)
        with self._lock:
            self._check_failure("read_bytes", key)
            try:
                return self.files[key]
            except KeyError:
                msg = f"No file at '{key}'"
                raise StorageNotFoundError(msg, path=key) from None

    def write_new(self, path: str, data: bytes) -> None:
        """Create a new file, refusing to overwrite."""
        key = _normalize(path)
        with self._lock:
            self._check_failure("write_new", key)
            if key in self.files or self._is_directory(key):
                msg = f"File already exists at '{key}'"
                raise StorageAlreadyExistsError(msg, path=key)
            self._add_parents(key)
            self.files[key] = bytes(data)

    def rename_no_clobber(self, source: str, destination: str) -> None:
        """Atomically rename source to destination, never overwriting."""
        source_key = _normalize(source)
        destination_key = _normalize(destination)
        with self._lock:
            self._check_failure("rename_no_clobber", destination_key)
            if source_key not in self.files:
                msg = f"No file at '{source_key}'"
                raise StorageNotFoundError(msg, path=source_key)
            if destination_key in self.files or self._is_directory(destination_key):
                msg = f"Destination '{destination_key}' already exists"
                raise StorageConflictError(
                    msg, path=destination_key, source=source_key
                )
            self._add_parents(destination_key)
            self.files[destination_key] = self.files.pop(source_key)

    def copy(self, source: str, destination: str) -> None:
        """Copy source to destination, replacing destination if present."""
        source_key = _normalize(source)
        destination_key = _normalize(destination)
        with self._lock:
            self._check_failure("copy", destination_key)
            if source_key not in self.files:
                msg = f"No file at '{source_key}'"
                raise StorageNotFoundError(msg, path=source_key)
            self._add_parents(destination_key)
            self.files[destination_key] = self.files[source_key]

    def delete(self, path: str, *, recursive: bool = False) -> bool:
        """Delete a file or directory."""
        key = _normalize(path)
        with self._lock:
            self._check_failure("delete", key)
            if key in self.files:
                del self.files[key]
                return True
            if not self._is_directory(key):
                return False

            prefix = f"{key}/" if key else ""
            nested_files = [name for name in self.files if name.startswith(prefix)]
            nested_dirs = [name for name in self.directories if name.startswith(prefix)]
            if (nested_files or nested_dirs) and not recursive:
                msg = f"Directory '{key}' is not empty"
                raise StorageError(msg, path=key)
            for name in nested_files:
                del self.files[name]
            self.directories.difference_update(nested_dirs)
            self.directories.discard(key)
            return True

    def list_children(self, path: str) -> list[str]:
        """List the names of the direct children of a directory."""
        key = _normalize(path)
        with self._lock:
            self._check_failure("list_children", key)
            if key in self.files:
                msg = f"'{key}' is not a directory"
                raise StorageError(msg, path=key)
            if not self._is_directory(key):
                msg = f"No directory at '{key}'"
                raise StorageNotFoundError(msg, path=key)
            children = {
                name
                for name in (*self.files, *self.directories)
                if posixpath.dirname(name) == key
            }
            return sorted(posixpath.basename(name) for name in children)
