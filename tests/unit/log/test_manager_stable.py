"""Unit tests for stable pointer handling and latest-stable resolution."""

from collections.abc import Callable

import pytest
from structlog.typing import FilteringBoundLogger

from indexlog.config import LogManagerConfiguration
from indexlog.enums import IndexState
from indexlog.exceptions import StableInvariantError
from indexlog.log import IndexLogManager, JsonEntryCodec, LogEntry
from indexlog.storage import MemoryStorage

LOG_PATH = "indexes/orders/_hyperspace_log"
POINTER_PATH = f"{LOG_PATH}/latestStable"

S = IndexState.ACTIVE
U = IndexState.REFRESHING


def _write_states(
    manager: IndexLogManager,
    make_entry: Callable[..., LogEntry],
    states: list[IndexState],
) -> None:
    for log_id, state in enumerate(states):
        assert manager.write_log(log_id, make_entry(log_id, state))


class TestGetLatestStableLogScan:
    def test_empty_log(self, manager: IndexLogManager) -> None:
        assert manager.get_latest_stable_log() is None

    def test_returns_highest_stable_entry(
        self,
        manager: IndexLogManager,
        make_entry: Callable[..., LogEntry],
    ) -> None:
        _write_states(manager, make_entry, [S, S, U, S, U, U])

        entry = manager.get_latest_stable_log()

        assert entry is not None
        assert entry.id == 3

    def test_no_stable_entries(
        self,
        manager: IndexLogManager,
        make_entry: Callable[..., LogEntry],
    ) -> None:
        _write_states(manager, make_entry, [IndexState.CREATING, U, U])

        assert manager.get_latest_stable_log() is None

    def test_skips_missing_ids(
        self,
        manager: IndexLogManager,
        make_entry: Callable[..., LogEntry],
    ) -> None:
        assert manager.write_log(0, make_entry(0, S))
        assert manager.write_log(4, make_entry(4, IndexState.DELETED))

        entry = manager.get_latest_stable_log()

        assert entry is not None
        assert entry.id == 4

    def test_does_not_use_entries_above_latest_stable(
        self,
        manager: IndexLogManager,
        make_entry: Callable[..., LogEntry],
    ) -> None:
        _write_states(manager, make_entry, [S, U])

        entry = manager.get_latest_stable_log()

        assert entry is not None
        assert entry.id == 0

    def test_custom_stable_states(
        self,
        storage: MemoryStorage,
        logger: FilteringBoundLogger,
        make_entry: Callable[..., LogEntry],
    ) -> None:
        manager = IndexLogManager(
            "indexes/orders",
            storage,
            stable_states={IndexState.REFRESHING},
            logger=logger,
        )
        _write_states(manager, make_entry, [U, S, S])

        entry = manager.get_latest_stable_log()

        assert entry is not None
        assert entry.id == 0

    def test_stable_states_from_config(
        self,
        storage: MemoryStorage,
        logger: FilteringBoundLogger,
        make_entry: Callable[..., LogEntry],
    ) -> None:
        config = LogManagerConfiguration(stable_states=frozenset({"CREATING"}))
        manager = IndexLogManager(
            "indexes/orders", storage, config=config, logger=logger
        )
        _write_states(manager, make_entry, [IndexState.CREATING, S])

        entry = manager.get_latest_stable_log()

        assert entry is not None
        assert entry.id == 0


class TestStablePointer:
    def test_pointer_takes_precedence_over_scan(
        self,
        manager: IndexLogManager,
        make_entry: Callable[..., LogEntry],
        logged_events: Callable[[], list[str]],
    ) -> None:
        _write_states(manager, make_entry, [S, U, U, S])
        assert manager.create_latest_stable_log(0)

        entry = manager.get_latest_stable_log()

        assert entry is not None
        assert entry.id == 0
        assert "stable_pointer_hit" in logged_events()

    def test_repromotion_replaces_pointer(
        self,
        manager: IndexLogManager,
        make_entry: Callable[..., LogEntry],
    ) -> None:
        _write_states(manager, make_entry, [S, U, U, S])
        assert manager.create_latest_stable_log(0)
        assert manager.create_latest_stable_log(3)

        entry = manager.get_latest_stable_log()

        assert entry is not None
        assert entry.id == 3

    def test_pointer_is_byte_copy_of_entry(
        self,
        manager: IndexLogManager,
        storage: MemoryStorage,
        make_entry: Callable[..., LogEntry],
    ) -> None:
        _write_states(manager, make_entry, [S])

        assert manager.create_latest_stable_log(0)

        assert storage.files[POINTER_PATH] == storage.files[f"{LOG_PATH}/0"]

    def test_pointer_is_not_an_entry_id(
        self,
        manager: IndexLogManager,
        make_entry: Callable[..., LogEntry],
    ) -> None:
        _write_states(manager, make_entry, [S])
        assert manager.create_latest_stable_log(0)

        assert manager.get_log_ids() == [0]

    def test_non_stable_pointer_raises(
        self,
        manager: IndexLogManager,
        storage: MemoryStorage,
        make_entry: Callable[..., LogEntry],
        logged_events: Callable[[], list[str]],
    ) -> None:
        _write_states(manager, make_entry, [S])
        storage.write_new(POINTER_PATH, JsonEntryCodec().encode(make_entry(1, U)))

        with pytest.raises(StableInvariantError) as exc_info:
            _ = manager.get_latest_stable_log()

        assert exc_info.value.state == "REFRESHING"
        assert exc_info.value.path == POINTER_PATH
        assert "stable_pointer_invalid" in logged_events()

    def test_falls_back_to_scan_after_pointer_deleted(
        self,
        manager: IndexLogManager,
        make_entry: Callable[..., LogEntry],
    ) -> None:
        _write_states(manager, make_entry, [S, U, S])
        assert manager.create_latest_stable_log(0)
        assert manager.delete_latest_stable_log()

        entry = manager.get_latest_stable_log()

        assert entry is not None
        assert entry.id == 2


class TestCreateLatestStableLog:
    def test_missing_entry_is_rejected(
        self,
        manager: IndexLogManager,
        storage: MemoryStorage,
        logged_events: Callable[[], list[str]],
    ) -> None:
        assert not manager.create_latest_stable_log(0)
        assert POINTER_PATH not in storage.files
        assert "stable_promotion_rejected" in logged_events()

    def test_unstable_entry_is_rejected(
        self,
        manager: IndexLogManager,
        storage: MemoryStorage,
        make_entry: Callable[..., LogEntry],
    ) -> None:
        _write_states(manager, make_entry, [U])

        assert not manager.create_latest_stable_log(0)
        assert POINTER_PATH not in storage.files

    def test_validation_can_be_disabled(
        self,
        storage: MemoryStorage,
        logger: FilteringBoundLogger,
        make_entry: Callable[..., LogEntry],
    ) -> None:
        config = LogManagerConfiguration(validate_on_promote=False)
        manager = IndexLogManager(
            "indexes/orders", storage, config=config, logger=logger
        )
        _write_states(manager, make_entry, [U])

        assert manager.create_latest_stable_log(0)
        with pytest.raises(StableInvariantError):
            _ = manager.get_latest_stable_log()

    def test_unvalidated_missing_entry_fails_copy(
        self,
        storage: MemoryStorage,
        logger: FilteringBoundLogger,
    ) -> None:
        config = LogManagerConfiguration(validate_on_promote=False)
        manager = IndexLogManager(
            "indexes/orders", storage, config=config, logger=logger
        )

        assert not manager.create_latest_stable_log(0)

    def test_copy_failure_returns_false(
        self,
        manager: IndexLogManager,
        storage: MemoryStorage,
        make_entry: Callable[..., LogEntry],
        logged_events: Callable[[], list[str]],
    ) -> None:
        _write_states(manager, make_entry, [S])
        storage.fail_operations.add("copy")

        assert not manager.create_latest_stable_log(0)
        assert "stable_pointer_create_failed" in logged_events()

    def test_corrupt_entry_returns_false(
        self,
        manager: IndexLogManager,
        storage: MemoryStorage,
    ) -> None:
        storage.write_new(f"{LOG_PATH}/0", b"corrupt")

        assert not manager.create_latest_stable_log(0)
        assert POINTER_PATH not in storage.files


class TestDeleteLatestStableLog:
    def test_absent_pointer(self, manager: IndexLogManager) -> None:
        assert manager.delete_latest_stable_log()

    def test_deletes_pointer_and_is_idempotent(
        self,
        manager: IndexLogManager,
        storage: MemoryStorage,
        make_entry: Callable[..., LogEntry],
        logged_events: Callable[[], list[str]],
    ) -> None:
        _write_states(manager, make_entry, [S])
        assert manager.create_latest_stable_log(0)

        assert manager.delete_latest_stable_log()
        assert manager.delete_latest_stable_log()

        assert POINTER_PATH not in storage.files
        assert f"{LOG_PATH}/0" in storage.files
        assert logged_events().count("stable_pointer_deleted") == 1

    def test_delete_failure_returns_false(
        self,
        manager: IndexLogManager,
        storage: MemoryStorage,
        make_entry: Callable[..., LogEntry],
    ) -> None:
        _write_states(manager, make_entry, [S])
        assert manager.create_latest_stable_log(0)
        storage.fail_operations.add("delete")

        assert not manager.delete_latest_stable_log()
        assert POINTER_PATH in storage.files
