# ruff: noqa: BLE001  # Backend failures are converted to results at this boundary
"""Index log manager.

This module provides IndexLogManager, which stores the state transitions of
an index as numbered, immutable log entries and maintains a ``latestStable``
pointer to the most recently promoted stable entry.

Layout of one log namespace::

    <index_path>/_hyperspace_log/
        0               encoded entry with id 0
        1               encoded entry with id 1
        latestStable    copy of the bytes of a stable entry
        temp<uuid>      staging file of an in-flight write

Writes are lock-free: an entry is staged under a unique name and published
with a no-clobber rename, so for each id the first writer wins and losers
fail without disturbing the winner.

Example:
    >>> from indexlog import IndexLogManager, IndexState, LogEntry
    >>> from indexlog.storage import LocalStorage
    >>> manager = IndexLogManager("orders", LocalStorage("/data/indexes"))
    >>> manager.write_log(0, LogEntry(id=0, state=IndexState.ACTIVE))
    True
    >>> manager.create_latest_stable_log(0)
    True
    >>> manager.get_latest_stable_log().state
    'ACTIVE'
"""

import posixpath
import uuid
from collections.abc import Collection
from typing import TYPE_CHECKING

from indexlog.config import LogManagerConfiguration
from indexlog.enums import WriteOutcome
from indexlog.exceptions import (
    EntryDecodeError,
    LogReadError,
    StableInvariantError,
    StorageConflictError,
    StorageNotFoundError,
)
from indexlog.log._base import BaseIndexLogManager
from indexlog.log._codec import EntryCodec, JsonEntryCodec
from indexlog.log._entry import LogEntry, StablePredicate, as_stable_predicate
from indexlog.storage import StorageBackend
from indexlog.utils import create_logger_from_config

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger


def parse_log_id(name: str) -> int | None:
    """Parse a namespace child name as a log entry id.

    Only canonical decimal names are ids: ASCII digits without a sign and
    without leading zeros (other than "0" itself).

    Args:
        name: A child name from the log namespace.

    Returns:
        The id, or None if the name is not an entry name.
    """
    if not (name.isascii() and name.isdigit()):
        return None
    if len(name) > 1 and name.startswith("0"):
        return None
    return int(name)


class IndexLogManager(BaseIndexLogManager):
    """Log manager for one index, backed by a StorageBackend.

    The manager holds no mutable state of its own, so any number of
    instances in any number of processes may operate on the same namespace.

    Attributes:
        _index_path: Backend path of the index the log belongs to.
        _storage: Backend holding the log namespace.
        _codec: Codec used to encode and decode entries.
        _config: Manager configuration.
        _is_stable: Predicate deciding whether a state is stable.
        _logger: Logger bound to the index path.
    """

    __slots__ = (
        "_codec",
        "_config",
        "_index_path",
        "_is_stable",
        "_logger",
        "_storage",
    )

    def __init__(
        self,
        index_path: str,
        storage: StorageBackend,
        *,
        codec: EntryCodec | None = None,
        config: LogManagerConfiguration | None = None,
        stable_states: Collection[str] | StablePredicate | None = None,
        logger: "FilteringBoundLogger | None" = None,  # noqa: UP037
    ) -> None:
        """Initialize the log manager.

        Args:
            index_path: Backend path of the index. The log namespace is the
                ``log_dir_name`` directory inside it.
            storage: Backend holding the log namespace.
            codec: Entry codec (defaults to JsonEntryCodec).
            config: Manager configuration (defaults to built-in defaults).
            stable_states: Stable state names or predicate. Overrides
                ``config.stable_states`` when given.
            logger: Logger to use (defaults to one built from
                ``config.logging``).
        """
        self._index_path = index_path.strip("/")
        self._storage = storage
        self._config = config if config is not None else LogManagerConfiguration()
        self._codec = codec if codec is not None else JsonEntryCodec()
        self._is_stable = as_stable_predicate(
            stable_states if stable_states is not None else self._config.stable_states
        )
        if logger is None:
            logger = create_logger_from_config(self._config.logging)
        self._logger = logger.bind(index_path=self._index_path)

    @property
    def index_path(self) -> str:
        """Backend path of the index."""
        return self._index_path

    @property
    def log_path(self) -> str:
        """Backend path of the log namespace directory."""
        return posixpath.join(self._index_path, self._config.log_dir_name)

    @property
    def latest_stable_path(self) -> str:
        """Backend path of the stable pointer slot."""
        return posixpath.join(self.log_path, self._config.stable_pointer_name)

    @property
    def storage(self) -> StorageBackend:
        """Backend holding the log namespace."""
        return self._storage

    def path_for_id(self, log_id: int) -> str:
        """Backend path of the entry with the given id."""
        return posixpath.join(self.log_path, str(log_id))

    def is_stable_state(self, state: str) -> bool:
        """Check whether a state is stable for this manager."""
        return self._is_stable(state)

    # =========================================================================
    # Read Path
    # =========================================================================

    def _read_entry(self, path: str) -> LogEntry | None:
        try:
            data = self._storage.read_bytes(path)
        except StorageNotFoundError:
            return None
        except Exception as e:
            self._logger.exception("log_read_failed", path=path)
            msg = f"Failed to read log entry at '{path}'"
            raise LogReadError(msg, path=path, cause=e) from e

        try:
            return self._codec.decode(data)
        except EntryDecodeError as e:
            self._logger.error("log_decode_failed", path=path, error=str(e))  # noqa: TRY400
            raise EntryDecodeError(str(e), path=path) from e
        except Exception as e:
            self._logger.exception("log_decode_failed", path=path)
            msg = f"Failed to decode log entry at '{path}': {e}"
            raise EntryDecodeError(msg, path=path) from e

    def get_log(self, log_id: int) -> LogEntry | None:
        """Get the entry stored at an id.

        Args:
            log_id: The entry id.

        Returns:
            The decoded entry, or None if no entry exists at the id.

        Raises:
            EntryDecodeError: If the stored bytes are not a valid entry.
            LogReadError: If the backend fails for a reason other than absence.
        """
        return self._read_entry(self.path_for_id(log_id))

    def get_log_ids(self) -> list[int]:
        """List the ids that currently have entries, in ascending order.

        Staging files, the stable pointer and any other non-id names in the
        namespace are ignored.

        Returns:
            Sorted ids; empty if the namespace is missing or has no entries.

        Raises:
            LogReadError: If the namespace cannot be listed.
        """
        try:
            names = self._storage.list_children(self.log_path)
        except StorageNotFoundError:
            return []
        except Exception as e:
            self._logger.exception("log_list_failed", path=self.log_path)
            msg = f"Failed to list log namespace '{self.log_path}'"
            raise LogReadError(msg, path=self.log_path, cause=e) from e

        return sorted(
            log_id for log_id in map(parse_log_id, names) if log_id is not None
        )

    def get_latest_id(self) -> int | None:
        """Get the highest id with an entry.

        Returns:
            The maximum id present, or None if the log is empty or missing.

        Raises:
            LogReadError: If the namespace cannot be listed.
        """
        log_ids = self.get_log_ids()
        return log_ids[-1] if log_ids else None

    def get_latest_stable_log(self) -> LogEntry | None:
        """Get the most recent entry whose state is stable.

        The stable pointer is consulted first. Without a pointer, entries
        are scanned from the latest id down to 0 and the first stable one is
        returned; ids without an entry are skipped.

        Returns:
            The latest stable entry, or None if there is none.

        Raises:
            StableInvariantError: If the pointer holds a non-stable entry.
            EntryDecodeError: If a stored entry is not valid.
            LogReadError: If the backend fails for a reason other than absence.
        """
        pointer = self._read_entry(self.latest_stable_path)
        if pointer is not None:
            if not self._is_stable(pointer.state):
                self._logger.error(
                    "stable_pointer_invalid",
                    path=self.latest_stable_path,
                    state=pointer.state,
                )
                msg = f"Stable pointer holds entry {pointer.id} in state '{pointer.state}'"
                raise StableInvariantError(
                    msg, state=pointer.state, path=self.latest_stable_path
                )
            self._logger.debug("stable_pointer_hit", log_id=pointer.id)
            return pointer

        latest_id = self.get_latest_id()
        if latest_id is None:
            return None

        self._logger.debug("stable_scan_started", latest_id=latest_id)
        for log_id in range(latest_id, -1, -1):
            entry = self.get_log(log_id)
            if entry is not None and self._is_stable(entry.state):
                self._logger.debug("stable_scan_found", log_id=log_id)
                return entry

        self._logger.debug("stable_scan_exhausted", latest_id=latest_id)
        return None

    # =========================================================================
    # Write Path
    # =========================================================================

    def _discard_staging(self, temp_path: str) -> None:
        try:
            _ = self._storage.delete(temp_path)
        except Exception:
            self._logger.warning("staging_cleanup_failed", path=temp_path, exc_info=True)

    def try_write_log(self, log_id: int, entry: LogEntry) -> WriteOutcome:
        """Write an entry at an id, reporting why a write did not happen.

        The entry is staged under a unique temporary name in the namespace
        and published with a no-clobber rename. Nothing is ever visible at
        the entry path unless the whole write succeeded.

        Args:
            log_id: The id to write.
            entry: The entry to store. Its ``id`` must equal ``log_id``.

        Returns:
            WRITTEN if this call created the entry, CONFLICT if an entry
            already exists at the id (including one written concurrently),
            ERROR on any other failure.
        """
        path = self.path_for_id(log_id)
        if log_id < 0 or entry.id != log_id:
            self._logger.error("log_id_mismatch", log_id=log_id, entry_id=entry.id)
            return WriteOutcome.ERROR

        try:
            if self._storage.exists(path):
                self._logger.info("log_write_conflict", log_id=log_id, reason="exists")
                return WriteOutcome.CONFLICT

            temp_path = posixpath.join(
                self.log_path, f"{self._config.temp_prefix}{uuid.uuid4().hex}"
            )
            self._storage.write_new(temp_path, self._codec.encode(entry))
            try:
                self._storage.rename_no_clobber(temp_path, path)
            except Exception:
                self._discard_staging(temp_path)
                raise
        except StorageConflictError:
            self._logger.info("log_write_conflict", log_id=log_id, reason="rename")
            return WriteOutcome.CONFLICT
        except Exception:
            self._logger.exception("log_write_failed", log_id=log_id, path=path)
            return WriteOutcome.ERROR

        self._logger.debug("log_written", log_id=log_id, state=entry.state)
        return WriteOutcome.WRITTEN

    def write_log(self, log_id: int, entry: LogEntry) -> bool:
        """Write an entry at an id using optimistic concurrency.

        Conflicts are not retried; the caller decides whether to pick another
        id or give up.

        Args:
            log_id: The id to write.
            entry: The entry to store.

        Returns:
            True if this call created the entry; False otherwise.
        """
        return self.try_write_log(log_id, entry) is WriteOutcome.WRITTEN

    # =========================================================================
    # Stable Pointer
    # =========================================================================

    def create_latest_stable_log(self, log_id: int) -> bool:
        """Point the stable pointer at the entry stored at an id.

        The entry's bytes are copied to the pointer slot, replacing any
        previous pointer. With ``validate_on_promote`` enabled the entry is
        decoded first and promotion is refused unless it exists and is
        stable; otherwise stability is the caller's responsibility.

        Args:
            log_id: Id of the entry to promote.

        Returns:
            True if the pointer was written.
        """
        path = self.path_for_id(log_id)
        try:
            if self._config.validate_on_promote:
                entry = self._read_entry(path)
                if entry is None:
                    self._logger.warning(
                        "stable_promotion_rejected", log_id=log_id, reason="missing"
                    )
                    return False
                if not self._is_stable(entry.state):
                    self._logger.warning(
                        "stable_promotion_rejected",
                        log_id=log_id,
                        reason="not_stable",
                        state=entry.state,
                    )
                    return False
            self._storage.copy(path, self.latest_stable_path)
        except Exception:
            self._logger.exception("stable_pointer_create_failed", log_id=log_id)
            return False

        self._logger.info("stable_pointer_created", log_id=log_id)
        return True

    def delete_latest_stable_log(self) -> bool:
        """Remove the stable pointer.

        Returns:
            True if the pointer is gone, including when it was already absent.
        """
        try:
            if not self._storage.exists(self.latest_stable_path):
                return True
            _ = self._storage.delete(self.latest_stable_path, recursive=True)
        except Exception:
            self._logger.exception("stable_pointer_delete_failed")
            return False

        self._logger.info("stable_pointer_deleted")
        return True
