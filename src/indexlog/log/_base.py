"""Base index log manager abstraction.

This module provides the abstract base class for log managers. Subclasses
supply the storage-facing primitives; derived queries such as
``get_latest_log`` are defined once here in terms of those primitives.
"""

from abc import ABC, abstractmethod

from indexlog.log._entry import LogEntry  # noqa: TC001


class BaseIndexLogManager(ABC):
    """Abstract base class for index log managers.

    A log manager reads and writes numbered, immutable log entries in one
    log namespace and maintains the stable pointer for that namespace.
    """

    __slots__ = ()

    @abstractmethod
    def get_log(self, log_id: int) -> LogEntry | None:
        """Get the entry stored at an id.

        Args:
            log_id: The entry id.

        Returns:
            The decoded entry, or None if no entry exists at the id.
        """

    @abstractmethod
    def get_latest_id(self) -> int | None:
        """Get the highest id with an entry.

        Returns:
            The maximum id present, or None if the log is empty or missing.
        """

    def get_latest_log(self) -> LogEntry | None:
        """Get the entry at the highest id.

        Returns:
            The latest entry, or None if the log is empty or missing.
        """
        latest_id = self.get_latest_id()
        if latest_id is None:
            return None
        return self.get_log(latest_id)

    @abstractmethod
    def get_latest_stable_log(self) -> LogEntry | None:
        """Get the most recent entry whose state is stable.

        Returns:
            The latest stable entry, or None if there is none.
        """

    @abstractmethod
    def create_latest_stable_log(self, log_id: int) -> bool:
        """Point the stable pointer at the entry stored at an id.

        Args:
            log_id: Id of the entry to promote.

        Returns:
            True if the pointer was written.
        """

    @abstractmethod
    def delete_latest_stable_log(self) -> bool:
        """Remove the stable pointer.

        Returns:
            True if the pointer is gone, including when it was already absent.
        """

    @abstractmethod
    def write_log(self, log_id: int, entry: LogEntry) -> bool:
        """Write an entry at an id using optimistic concurrency.

        Args:
            log_id: The id to write.
            entry: The entry to store.

        Returns:
            True if this call created the entry; False otherwise.
        """
