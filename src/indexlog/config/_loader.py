# pyright: reportAny=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""TOML configuration file loading and merging."""

import json
import os
import tomllib
from pathlib import Path  # noqa: TC003
from typing import Any

import tomli_w
from pydantic import ValidationError

from indexlog.config._models import LogManagerConfiguration
from indexlog.exceptions import ConfigLoadError

ENV_PREFIX = "INDEXLOG_"


def read_toml_file(path: Path) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Read and parse a TOML file.

    Args:
        path: Path to the TOML file.

    Returns:
        Parsed TOML content as dictionary.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigLoadError: If the file cannot be parsed.
    """
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Failed to parse TOML file: {e}"
        raise ConfigLoadError(
            msg,
            path=path,
            line=e.lineno,
            column=e.colno,
        ) from e


def deep_merge(
    base: dict[str, Any],  # pyright: ignore[reportExplicitAny]
    override: dict[str, Any],  # pyright: ignore[reportExplicitAny]
) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Deep merge two configuration dictionaries.

    Merges `override` into `base`, returning a new dictionary. Neither input
    is modified.

    Merge rules:
        - Dictionaries are recursively merged
        - Arrays are replaced entirely (no element-wise merge)
        - Scalars are replaced with override value
        - Missing keys in override preserve base values
    """
    result: dict[str, Any] = {}  # pyright: ignore[reportExplicitAny]

    for key in set(base) | set(override):
        if key not in override:
            result[key] = copy_value(base[key])
        elif key not in base:
            result[key] = copy_value(override[key])
        elif isinstance(base[key], dict) and isinstance(override[key], dict):
            result[key] = deep_merge(base[key], override[key])
        else:
            result[key] = copy_value(override[key])

    return result


def copy_value(value: Any) -> Any:  # pyright: ignore[reportExplicitAny]
    """Create a deep copy of a configuration value."""
    if isinstance(value, dict):
        return {k: copy_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [copy_value(item) for item in value]
    return value


def parse_string_value(value: str) -> Any:  # pyright: ignore[reportExplicitAny]
    """Parse a string value with automatic type inference.

    Configuration values are booleans, strings, or lists of state names.

    Precedence:
    1. Boolean: true/false (case-insensitive)
    2. JSON array: starts with [ and ends with ]
    3. String: fallback

    Examples:
        >>> parse_string_value("true")
        True
        >>> parse_string_value("temp")
        'temp'
        >>> parse_string_value('["ACTIVE", "DELETED"]')
        ['ACTIVE', 'DELETED']
    """
    lower_value = value.lower()
    if lower_value in ("true", "false"):
        return lower_value == "true"

    if value.startswith("[") and value.endswith("]"):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            pass

    return value


def set_nested_key(
    d: dict[str, Any],  # pyright: ignore[reportExplicitAny]
    key_path: str,
    value: Any,  # pyright: ignore[reportExplicitAny]
) -> None:
    """Set a value at a dotted key path in a nested dictionary.

    Creates intermediate dictionaries as needed.

    Example:
        >>> d = {}
        >>> set_nested_key(d, "logging.level", "debug")
        >>> d
        {'logging': {'level': 'debug'}}
    """
    parts = key_path.split(".")
    current = d

    for part in parts[:-1]:
        if not isinstance(current.get(part), dict):
            current[part] = {}
        current = current[part]

    current[parts[-1]] = value


def parse_env_vars(
    prefix: str = ENV_PREFIX,
) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Parse environment variables into config dictionary.

    Environment variable naming:
        - Add prefix (INDEXLOG_)
        - Convert to uppercase
        - Replace dots with double underscores
        - Example: logging.level -> INDEXLOG_LOGGING__LEVEL

    Variables that are not configuration keys (INDEXLOG_DEBUG,
    INDEXLOG_LOG_LEVEL) are dropped later by model validation.

    Args:
        prefix: Environment variable prefix.

    Returns:
        Dictionary of parsed config values with nested structure.
    """
    result: dict[str, Any] = {}  # pyright: ignore[reportExplicitAny]

    for key, value in os.environ.items():
        if not key.startswith(prefix):
            continue

        config_key = key[len(prefix) :]
        if not config_key:
            continue

        config_path = config_key.replace("__", ".").lower()
        set_nested_key(result, config_path, parse_string_value(value))

    return result


def load_config(
    path: Path | None = None,
    *,
    include_env: bool = True,
    overrides: dict[str, Any] | None = None,  # pyright: ignore[reportExplicitAny]
) -> LogManagerConfiguration:
    """Load log manager configuration.

    Sources are merged in increasing precedence: model defaults, the TOML
    file at `path`, environment variables, then explicit overrides.

    Args:
        path: Optional TOML config file. Must exist when given.
        include_env: Merge INDEXLOG_* environment variables.
        overrides: Values that take precedence over every other source.

    Returns:
        The validated configuration.

    Raises:
        FileNotFoundError: If `path` is given but does not exist.
        ConfigLoadError: If the file cannot be parsed or values are invalid.
    """
    data: dict[str, Any] = {}  # pyright: ignore[reportExplicitAny]
    if path is not None:
        data = deep_merge(data, read_toml_file(path))
    if include_env:
        data = deep_merge(data, parse_env_vars())
    if overrides:
        data = deep_merge(data, overrides)

    try:
        return LogManagerConfiguration.model_validate(data)
    except ValidationError as e:
        msg = f"Invalid configuration: {e}"
        raise ConfigLoadError(msg, path=path) from e


def dump_config(config: LogManagerConfiguration) -> str:
    """Render a configuration as TOML.

    Args:
        config: The configuration to render.

    Returns:
        TOML text that `load_config` reads back to an equal configuration.
    """
    data = config.model_dump(mode="json")
    data["stable_states"] = sorted(data["stable_states"])
    return tomli_w.dumps(data)
