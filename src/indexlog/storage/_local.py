# ruff: noqa: TC003  # Path needed at runtime for __init__
"""Local filesystem storage backend.

This module provides LocalStorage, a StorageBackend rooted at a directory on
the local filesystem. New files are created exclusively and fsynced, and
no-clobber renames are built on hard links so that a rename never replaces
an existing destination.
"""

import contextlib
import os
import shutil
import tempfile
from pathlib import Path

from indexlog.exceptions import (
    StorageAlreadyExistsError,
    StorageConflictError,
    StorageError,
    StorageNotFoundError,
)


def _fsync_directory(directory: Path) -> None:
    """Flush a directory entry so a new or renamed file survives a crash."""
    if os.name == "nt":
        return
    dir_fd = os.open(directory, os.O_RDONLY | os.O_DIRECTORY)
    try:
        os.fsync(dir_fd)
    finally:
        os.close(dir_fd)


class LocalStorage:
    """Storage backend for a directory on the local filesystem.

    Attributes:
        _root: Directory that all backend paths are resolved against.
    """

    __slots__ = ("_root",)

    def __init__(self, root: Path | str) -> None:
        """Initialize local storage.

        Args:
            root: Directory that backend-relative paths are resolved against.
                It does not need to exist yet.
        """
        self._root = Path(root)

    @property
    def root(self) -> Path:
        """Root directory of this backend."""
        return self._root

    def _resolve(self, path: str) -> Path:
        return self._root / path

    def exists(self, path: str) -> bool:
        """Check whether a file or directory exists at path."""
        return self._resolve(path).exists()

    def read_bytes(self, path: str) -> bytes:
        """Read the whole file at path."""
        target = self._resolve(path)
        try:
            return target.read_bytes()
        except FileNotFoundError as e:
            msg = f"No file at '{path}'"
            raise StorageNotFoundError(msg, path=path) from e
        except OSError as e:
            msg = f"Failed to read '{path}': {e}"
            raise StorageError(msg, path=path) from e

    def write_new(self, path: str, data: bytes) -> None:
        """Durably create a new file, refusing to overwrite."""
        target = self._resolve(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            file = target.open("xb")
        except FileExistsError as e:
            msg = f"File already exists at '{path}'"
            raise StorageAlreadyExistsError(msg, path=path) from e
        except OSError as e:
            msg = f"Failed to create '{path}': {e}"
            raise StorageError(msg, path=path) from e

        try:
            with file:
                _ = file.write(data)
                file.flush()
                os.fsync(file.fileno())
        except OSError as e:
            # Do not leave a truncated file behind
            with contextlib.suppress(OSError):
                target.unlink()
            msg = f"Failed to write '{path}': {e}"
            raise StorageError(msg, path=path) from e

    def rename_no_clobber(self, source: str, destination: str) -> None:
        """Atomically rename source to destination, never overwriting.

        A hard link is created at the destination first; link creation fails
        when the destination exists, which makes the publish step atomic
        and first-writer-wins.
        """
        source_path = self._resolve(source)
        destination_path = self._resolve(destination)
        try:
            destination_path.parent.mkdir(parents=True, exist_ok=True)
            os.link(source_path, destination_path)
        except FileExistsError as e:
            msg = f"Destination '{destination}' already exists"
            raise StorageConflictError(msg, path=destination, source=source) from e
        except FileNotFoundError as e:
            msg = f"No file at '{source}'"
            raise StorageNotFoundError(msg, path=source) from e
        except OSError as e:
            msg = f"Failed to rename '{source}' to '{destination}': {e}"
            raise StorageError(msg, path=destination) from e

        # The destination is published; a leftover staging name is not an id
        with contextlib.suppress(OSError):
            source_path.unlink()
        with contextlib.suppress(OSError):
            _fsync_directory(destination_path.parent)

    def copy(self, source: str, destination: str) -> None:
        """Copy source to destination, replacing destination if present."""
        data = self.read_bytes(source)
        destination_path = self._resolve(destination)
        try:
            destination_path.parent.mkdir(parents=True, exist_ok=True)
            temp_fd, temp_path_str = tempfile.mkstemp(
                dir=destination_path.parent,
                prefix=".tmp_",
            )
        except OSError as e:
            msg = f"Failed to stage copy of '{source}': {e}"
            raise StorageError(msg, path=destination) from e

        try:
            with os.fdopen(temp_fd, "wb") as file:
                _ = file.write(data)
                file.flush()
                os.fsync(file.fileno())
            os.replace(temp_path_str, destination_path)
        except OSError as e:
            with contextlib.suppress(OSError):
                os.unlink(temp_path_str)
            msg = f"Failed to copy '{source}' to '{destination}': {e}"
            raise StorageError(msg, path=destination) from e

    def delete(self, path: str, *, recursive: bool = False) -> bool:
        """Delete a file or directory."""
        target = self._resolve(path)
        try:
            if not target.exists():
                return False
            if target.is_dir():
                if recursive:
                    shutil.rmtree(target)
                else:
                    target.rmdir()
            else:
                target.unlink()
        except FileNotFoundError:
            # Removed concurrently
            return False
        except OSError as e:
            msg = f"Failed to delete '{path}': {e}"
            raise StorageError(msg, path=path) from e
        return True

    def list_children(self, path: str) -> list[str]:
        """List the names of the direct children of a directory."""
        target = self._resolve(path)
        try:
            return [child.name for child in target.iterdir()]
        except FileNotFoundError as e:
            msg = f"No directory at '{path}'"
            raise StorageNotFoundError(msg, path=path) from e
        except OSError as e:
            msg = f"Failed to list '{path}': {e}"
            raise StorageError(msg, path=path) from e
