"""Log entry model.

A LogEntry records one state transition of an index. Entries are immutable
once written; the manager never updates one in place.
"""

from collections.abc import Callable, Collection
from enum import StrEnum
from typing import Any, ClassVar, TypeAlias

import pendulum
from pydantic import BaseModel, ConfigDict, Field, field_validator

from indexlog.enums import STABLE_STATES

StablePredicate: TypeAlias = Callable[[str], bool]

LOG_ENTRY_VERSION = "0.1"


def _now_ms() -> int:
    return int(pendulum.now("UTC").timestamp() * 1000)


def as_stable_predicate(
    stable_states: Collection[str] | StablePredicate,
) -> StablePredicate:
    """Normalize a collection of stable states into a membership predicate.

    Args:
        stable_states: Either a collection of state names or a predicate.

    Returns:
        A callable returning True for stable state names.
    """
    if callable(stable_states):
        return stable_states
    states = frozenset(stable_states)
    return states.__contains__


class LogEntry(BaseModel):
    """A single versioned record in an index log.

    Attributes:
        version: Schema version of the encoded entry.
        id: Position of the entry in its log. Assigned by the caller.
        state: State tag of the index after this transition.
        timestamp: Creation time in epoch milliseconds (UTC).
        enabled: Whether the index is enabled in this state.
        content: Opaque payload, meaningful only to callers.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    version: str = LOG_ENTRY_VERSION
    id: int = Field(ge=0)
    state: str
    timestamp: int = Field(default_factory=_now_ms)
    enabled: bool = True
    content: dict[str, Any] = Field(default_factory=dict)  # pyright: ignore[reportExplicitAny]

    @field_validator("state", mode="before")
    @classmethod
    def coerce_state(cls, value: object) -> object:
        if isinstance(value, StrEnum):
            return value.value
        return value

    def is_stable(
        self,
        stable_states: Collection[str] | StablePredicate = STABLE_STATES,
    ) -> bool:
        """Check whether this entry is in a stable state.

        Args:
            stable_states: Stable state names, or a membership predicate.

        Returns:
            True if the entry's state is stable.
        """
        return as_stable_predicate(stable_states)(self.state)

    def with_id(self, log_id: int) -> "LogEntry":
        """Return a copy of this entry addressed at another id."""
        return self.model_copy(update={"id": log_id})
