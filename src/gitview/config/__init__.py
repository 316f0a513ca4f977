"""gitview configuration.

This package provides the Pydantic configuration models and the loader that
combines defaults, an optional TOML file and GITVIEW_* environment variables.

Example:
    >>> from gitview.config import load_config
    >>> config = load_config()
    >>> config.git_executable
    'git'
"""

from gitview.config._load import (
    ENV_OVERRIDES,
    deep_merge,
    load_config,
    parse_env_vars,
    read_toml_file,
)
from gitview.config._models import LogFormat, LoggingConfig, LogLevel, ReaderConfig
from gitview.exceptions import ConfigError, ConfigLoadError, ConfigValidationError

__all__ = [
    "ENV_OVERRIDES",
    "ConfigError",
    "ConfigLoadError",
    "ConfigValidationError",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "ReaderConfig",
    "deep_merge",
    "load_config",
    "parse_env_vars",
    "read_toml_file",
]
