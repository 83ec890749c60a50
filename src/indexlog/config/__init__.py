"""indexlog configuration.

This module provides loading and typed access to log manager settings.

Example:
    >>> from indexlog.config import load_config
    >>> config = load_config()
    >>> config.log_dir_name
    '_hyperspace_log'
    >>> config.logging.level
    <LogLevel.INFO: 'info'>
"""

from indexlog.exceptions import ConfigError, ConfigLoadError

from ._loader import (
    ENV_PREFIX,
    deep_merge,
    dump_config,
    load_config,
    parse_env_vars,
    parse_string_value,
    read_toml_file,
    set_nested_key,
)
from ._models import LogFormat, LoggingConfig, LogLevel, LogManagerConfiguration

__all__ = [
    "ENV_PREFIX",
    "ConfigError",
    "ConfigLoadError",
    "LogFormat",
    "LogLevel",
    "LogManagerConfiguration",
    "LoggingConfig",
    "deep_merge",
    "dump_config",
    "load_config",
    "parse_env_vars",
    "parse_string_value",
    "read_toml_file",
    "set_nested_key",
]
