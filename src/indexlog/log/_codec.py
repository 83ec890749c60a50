"""Entry codecs.

This module defines the EntryCodec protocol used to turn log entries into
bytes and back, and the default JSON implementation built on orjson.
"""

from typing import Protocol, runtime_checkable

import orjson
from pydantic import ValidationError

from indexlog.exceptions import EntryDecodeError
from indexlog.log._entry import LogEntry


@runtime_checkable
class EntryCodec(Protocol):
    """Protocol for log entry serialization."""

    def encode(self, entry: LogEntry) -> bytes:
        """Encode an entry to bytes.

        Args:
            entry: The entry to encode.

        Returns:
            The encoded bytes.
        """
        ...

    def decode(self, data: bytes) -> LogEntry:
        """Decode bytes into an entry.

        Args:
            data: Bytes previously produced by ``encode``.

        Returns:
            The decoded entry.

        Raises:
            EntryDecodeError: If the bytes are not a valid entry.
        """
        ...


class JsonEntryCodec:
    """JSON codec for log entries.

    Keys are sorted so that encoding the same entry always yields the same
    bytes.
    """

    __slots__ = ("_indent",)

    def __init__(self, *, indent: bool = False) -> None:
        """Initialize the codec.

        Args:
            indent: Pretty-print with two-space indentation.
        """
        self._indent = indent

    def encode(self, entry: LogEntry) -> bytes:
        """Encode an entry as JSON bytes."""
        option = orjson.OPT_SORT_KEYS
        if self._indent:
            option |= orjson.OPT_INDENT_2
        return orjson.dumps(entry.model_dump(mode="json"), option=option)

    def decode(self, data: bytes) -> LogEntry:
        """Decode JSON bytes into an entry."""
        try:
            payload = orjson.loads(data)
        except orjson.JSONDecodeError as e:
            msg = f"Invalid JSON in log entry: {e}"
            raise EntryDecodeError(msg) from e

        try:
            return LogEntry.model_validate(payload)
        except ValidationError as e:
            msg = f"Invalid log entry: {e.error_count()} validation error(s)"
            raise EntryDecodeError(msg) from e
