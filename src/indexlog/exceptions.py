# ruff: noqa: TC003  # Path needed at runtime for exception signatures
"""indexlog exceptions."""

from pathlib import Path


class IndexLogError(Exception):
    """Base exception for indexlog errors."""


# =============================================================================
# Storage Exceptions
# =============================================================================


class StorageError(IndexLogError):
    """Raised when a storage backend operation fails.

    Attributes:
        path: The backend path the operation targeted.
    """

    def __init__(self, message: str, *, path: str | None = None) -> None:
        """Initialize with error message and path context."""
        super().__init__(message)
        self.path: str | None = path


class StorageNotFoundError(StorageError, FileNotFoundError):
    """Raised when a path does not exist in the backend."""


class StorageAlreadyExistsError(StorageError, FileExistsError):
    """Raised when creating a path that already exists."""


class StorageConflictError(StorageError, FileExistsError):
    """Raised when a no-clobber rename finds its destination occupied.

    Attributes:
        source: The staging path that could not be renamed.
    """

    def __init__(
        self,
        message: str,
        *,
        path: str | None = None,
        source: str | None = None,
    ) -> None:
        """Initialize with error message and rename context."""
        super().__init__(message, path=path)
        self.source: str | None = source


# =============================================================================
# Log Exceptions
# =============================================================================


class EntryDecodeError(IndexLogError, ValueError):
    """Raised when stored bytes cannot be decoded into a log entry.

    Corrupt-but-present data is distinct from a missing entry, so this is
    never reported as absence.

    Attributes:
        path: The backend path holding the undecodable bytes.
    """

    def __init__(self, message: str, *, path: str | None = None) -> None:
        """Initialize with error message and path context."""
        super().__init__(message)
        self.path: str | None = path


class StableInvariantError(IndexLogError):
    """Raised when the stable pointer holds an entry in a non-stable state.

    Attributes:
        state: The state found in the pointer.
        path: The pointer path.
    """

    def __init__(self, message: str, *, state: str, path: str | None = None) -> None:
        """Initialize with error message and offending state."""
        super().__init__(message)
        self.state: str = state
        self.path: str | None = path


class LogReadError(IndexLogError):
    """Raised when a read hits a backend failure other than absence.

    Attributes:
        path: The backend path being read.
        cause: The underlying backend exception.
    """

    def __init__(
        self,
        message: str,
        *,
        path: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize with error message and read context."""
        super().__init__(message)
        self.path: str | None = path
        self.cause: Exception | None = cause


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigError(IndexLogError):
    """Base exception for configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when configuration cannot be loaded or parsed."""

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        """Initialize with error message and optional location context."""
        super().__init__(message)
        self.path: Path | None = path
        self.line: int | None = line
        self.column: int | None = column
