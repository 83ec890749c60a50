"""Enumeration types for indexlog."""

from enum import StrEnum


class IndexState(StrEnum):
    """Lifecycle states recorded in an index log.

    Values are stored verbatim in encoded entries.
    """

    CREATING = "CREATING"
    ACTIVE = "ACTIVE"
    REFRESHING = "REFRESHING"
    OPTIMIZING = "OPTIMIZING"
    DELETING = "DELETING"
    DELETED = "DELETED"
    RESTORING = "RESTORING"
    VACUUMING = "VACUUMING"
    CANCELLING = "CANCELLING"
    DOESNOTEXIST = "DOESNOTEXIST"


STABLE_STATES: frozenset[str] = frozenset(
    {IndexState.ACTIVE, IndexState.DELETED, IndexState.DOESNOTEXIST}
)
"""States an index can safely be recovered to."""


class WriteOutcome(StrEnum):
    """Result of an optimistic log write."""

    WRITTEN = "written"
    CONFLICT = "conflict"
    ERROR = "error"
