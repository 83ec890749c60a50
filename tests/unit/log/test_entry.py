"""Unit tests for the LogEntry model and entry codec."""

import orjson
import pytest
from pydantic import ValidationError

from indexlog.enums import IndexState
from indexlog.exceptions import EntryDecodeError
from indexlog.log import (
    LOG_ENTRY_VERSION,
    EntryCodec,
    JsonEntryCodec,
    LogEntry,
    as_stable_predicate,
)


class TestLogEntry:
    def test_defaults(self) -> None:
        entry = LogEntry(id=0, state="ACTIVE")

        assert entry.version == LOG_ENTRY_VERSION
        assert entry.enabled is True
        assert entry.content == {}
        assert entry.timestamp > 0

    def test_enum_state_is_stored_as_plain_string(self) -> None:
        entry = LogEntry(id=0, state=IndexState.REFRESHING)

        assert entry.state == "REFRESHING"
        assert type(entry.state) is str

    def test_rejects_negative_id(self) -> None:
        with pytest.raises(ValidationError):
            _ = LogEntry(id=-1, state="ACTIVE")

    def test_is_frozen(self) -> None:
        entry = LogEntry(id=0, state="ACTIVE")

        with pytest.raises(ValidationError):
            entry.state = "DELETED"  # pyright: ignore[reportAttributeAccessIssue]

    def test_ignores_unknown_fields(self) -> None:
        entry = LogEntry.model_validate(
            {"id": 2, "state": "ACTIVE", "properties": {"a": 1}}
        )

        assert entry.id == 2
        assert not hasattr(entry, "properties")

    @pytest.mark.parametrize(
        ("state", "expected"),
        [
            (IndexState.ACTIVE, True),
            (IndexState.DELETED, True),
            (IndexState.DOESNOTEXIST, True),
            (IndexState.CREATING, False),
            (IndexState.REFRESHING, False),
            ("SOMETHING_ELSE", False),
        ],
    )
    def test_is_stable_with_default_states(self, state: str, expected: bool) -> None:
        assert LogEntry(id=0, state=state).is_stable() is expected

    def test_is_stable_with_custom_states(self) -> None:
        entry = LogEntry(id=0, state="READY")

        assert entry.is_stable({"READY"})
        assert not entry.is_stable({"ACTIVE"})
        assert entry.is_stable(lambda state: state.startswith("RE"))

    def test_with_id_returns_copy(self) -> None:
        entry = LogEntry(id=0, state="ACTIVE", content={"k": "v"})

        moved = entry.with_id(5)

        assert moved.id == 5
        assert moved.content == {"k": "v"}
        assert entry.id == 0


class TestAsStablePredicate:
    def test_collection_becomes_membership_test(self) -> None:
        predicate = as_stable_predicate(["A", "B"])

        assert predicate("A")
        assert not predicate("C")

    def test_callable_passes_through(self) -> None:
        def predicate(state: str) -> bool:
            return state == "X"

        assert as_stable_predicate(predicate) is predicate


class TestJsonEntryCodec:
    def test_satisfies_protocol(self) -> None:
        assert isinstance(JsonEntryCodec(), EntryCodec)

    def test_round_trip(self) -> None:
        codec = JsonEntryCodec()
        entry = LogEntry(
            id=3,
            state="ACTIVE",
            timestamp=1_700_000_000_000,
            enabled=False,
            content={"columns": ["a", "b"], "nested": {"n": 1}},
        )

        assert codec.decode(codec.encode(entry)) == entry

    def test_encoding_is_deterministic(self) -> None:
        codec = JsonEntryCodec()
        first = LogEntry(id=1, state="ACTIVE", timestamp=1, content={"b": 1, "a": 2})
        second = LogEntry(id=1, state="ACTIVE", timestamp=1, content={"a": 2, "b": 1})

        assert codec.encode(first) == codec.encode(second)

    def test_encodes_wire_fields(self) -> None:
        data = JsonEntryCodec().encode(LogEntry(id=4, state="DELETED", timestamp=9))

        assert orjson.loads(data) == {
            "content": {},
            "enabled": True,
            "id": 4,
            "state": "DELETED",
            "timestamp": 9,
            "version": LOG_ENTRY_VERSION,
        }

    def test_indent_option(self) -> None:
        entry = LogEntry(id=0, state="ACTIVE", timestamp=1)

        assert b"\n" in JsonEntryCodec(indent=True).encode(entry)
        assert b"\n" not in JsonEntryCodec().encode(entry)

    @pytest.mark.parametrize(
        "data",
        [
            b"",
            b"not json",
            b"{",
            b"[]",
            b'{"id": 0}',
            b'{"id": "zero", "state": "ACTIVE"}',
            b'{"id": -3, "state": "ACTIVE"}',
        ],
    )
    def test_decode_rejects_invalid_data(self, data: bytes) -> None:
        with pytest.raises(EntryDecodeError):
            _ = JsonEntryCodec().decode(data)

    def test_decode_error_is_value_error(self) -> None:
        with pytest.raises(ValueError, match="Invalid JSON"):
            _ = JsonEntryCodec().decode(b"\x00\x01")
