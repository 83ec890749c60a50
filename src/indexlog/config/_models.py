"""Configuration models.

This module provides the Pydantic models for log manager and logging
settings, plus the shared enums they use.
"""

from enum import StrEnum
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from indexlog.enums import STABLE_STATES


class LogLevel(StrEnum):
    """Log level threshold values.

    Values are ordered from most verbose (debug) to least verbose (error).
    """

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LogFormat(StrEnum):
    """Log output format values."""

    JSON = "json"
    TEXT = "text"


class LoggingConfig(BaseModel):
    """Logging configuration section.

    Attributes:
        level: Log level threshold.
        format: Log output format.
        file: Path to log file (empty logs to stderr).
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.JSON
    file: str = ""


class LogManagerConfiguration(BaseModel):
    """Index log manager configuration.

    Attributes:
        log_dir_name: Name of the log namespace directory inside an index.
        stable_pointer_name: File name of the stable pointer slot.
        temp_prefix: Prefix for staging files written before publish.
        stable_states: States treated as safe recovery points.
        validate_on_promote: Refuse to promote entries that are not stable.
        logging: Logging settings.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    log_dir_name: str = Field(
        default="_hyperspace_log",
        min_length=1,
        description="Name of the log namespace directory inside an index.",
    )
    stable_pointer_name: str = Field(
        default="latestStable",
        min_length=1,
        description="File name of the stable pointer slot.",
    )
    temp_prefix: str = Field(
        default="temp",
        min_length=1,
        description="Prefix for staging files written before publish.",
    )
    stable_states: frozenset[str] = Field(
        default=STABLE_STATES,
        description="States treated as safe recovery points.",
    )
    validate_on_promote: bool = Field(
        default=True,
        description="Refuse to promote entries that are absent or not stable.",
    )
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("log_dir_name", "stable_pointer_name", "temp_prefix")
    @classmethod
    def validate_name(cls, value: str) -> str:
        if "/" in value or "\\" in value:
            msg = f"'{value}' must be a single path component"
            raise ValueError(msg)
        return value

    @field_validator("stable_pointer_name", "temp_prefix")
    @classmethod
    def validate_not_numeric(cls, value: str) -> str:
        # Purely numeric names would be mistaken for log entry ids
        if value.isdigit():
            msg = f"'{value}' must not be purely numeric"
            raise ValueError(msg)
        return value
