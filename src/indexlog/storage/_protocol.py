"""Storage backend protocol for type-safe dependency injection.

This module defines the runtime-checkable Protocol consumed by the log
manager. Both LocalStorage and MemoryStorage satisfy it, so the manager can
be exercised against an in-memory double in tests.

Paths are POSIX-style strings relative to the backend root.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class StorageBackend(Protocol):
    """Protocol for hierarchical byte storage.

    Implementations must make ``write_new`` and ``rename_no_clobber``
    all-or-nothing: a reader either sees the complete file or nothing.

    Example:
        >>> def publish(backend: StorageBackend, staging: str, final: str) -> bool:
        ...     try:
        ...         backend.rename_no_clobber(staging, final)
        ...     except StorageConflictError:
        ...         return False
        ...     return True
    """

    def exists(self, path: str) -> bool:
        """Check whether a file or directory exists at path.

        Args:
            path: Backend-relative path.

        Returns:
            True if something exists at path.
        """
        ...

    def read_bytes(self, path: str) -> bytes:
        """Read the whole file at path.

        Args:
            path: Backend-relative path.

        Returns:
            The file contents.

        Raises:
            StorageNotFoundError: If no file exists at path.
            StorageError: On any other failure.
        """
        ...

    def write_new(self, path: str, data: bytes) -> None:
        """Durably create a new file, creating parent directories as needed.

        Args:
            path: Backend-relative path.
            data: Bytes to write.

        Raises:
            StorageAlreadyExistsError: If a file already exists at path.
            StorageError: On any other failure.
        """
        ...

    def rename_no_clobber(self, source: str, destination: str) -> None:
        """Atomically rename source to destination, never overwriting.

        Args:
            source: Existing backend-relative path.
            destination: Target backend-relative path.

        Raises:
            StorageConflictError: If destination already exists.
            StorageNotFoundError: If source does not exist.
            StorageError: On any other failure.
        """
        ...

    def copy(self, source: str, destination: str) -> None:
        """Copy source to destination, replacing destination if present.

        Args:
            source: Existing backend-relative path.
            destination: Target backend-relative path.

        Raises:
            StorageNotFoundError: If source does not exist.
            StorageError: On any other failure.
        """
        ...

    def delete(self, path: str, *, recursive: bool = False) -> bool:
        """Delete a file or directory.

        Args:
            path: Backend-relative path.
            recursive: Remove directories and their contents.

        Returns:
            True if something was deleted, False if path did not exist.

        Raises:
            StorageError: If deletion fails.
        """
        ...

    def list_children(self, path: str) -> list[str]:
        """List the names of the direct children of a directory.

        Args:
            path: Backend-relative directory path.

        Returns:
            Child names (not full paths), in no particular order.

        Raises:
            StorageNotFoundError: If the directory does not exist.
            StorageError: On any other failure.
        """
        ...
