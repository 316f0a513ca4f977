# pyright: reportAny=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""Configuration loading from TOML files and the environment."""

import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import ValidationError

from gitview.config._models import ReaderConfig
from gitview.exceptions import ConfigLoadError, ConfigValidationError

# Table holding gitview settings when embedded in a larger TOML file
CONFIG_TABLE: Final = "gitview"

# Environment variable -> dotted config key
ENV_OVERRIDES: Final[Mapping[str, str]] = {
    "GITVIEW_GIT": "git_executable",
    "GITVIEW_METADATA_DIR": "metadata_dir",
    "GITVIEW_LOG_LEVEL": "logging.level",
    "GITVIEW_LOG_FORMAT": "logging.format",
    "GITVIEW_LOG_FILE": "logging.file",
}

_ENUM_KEYS: Final = frozenset({"logging.level", "logging.format"})


def read_toml_file(path: Path) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Read and parse a TOML file.

    Args:
        path: Path to the TOML file.

    Returns:
        Parsed TOML content as dictionary.

    Raises:
        ConfigLoadError: If the file is missing or cannot be parsed.
    """
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except FileNotFoundError as e:
        msg = f"Config file not found: {path}"
        raise ConfigLoadError(msg, path=path) from e
    except tomllib.TOMLDecodeError as e:
        msg = f"Failed to parse TOML file: {e}"
        raise ConfigLoadError(msg, path=path) from e


def deep_merge(
    base: dict[str, Any],  # pyright: ignore[reportExplicitAny]
    override: dict[str, Any],  # pyright: ignore[reportExplicitAny]
) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Deep merge two configuration dictionaries.

    Merges `override` into `base`, returning a new dictionary. Neither input
    is modified. Nested dictionaries are merged recursively; any other value
    in `override` replaces the one in `base`.

    Args:
        base: Base configuration (lower precedence).
        override: Override configuration (higher precedence).

    Returns:
        Merged configuration dictionary.
    """
    result: dict[str, Any] = dict(base)  # pyright: ignore[reportExplicitAny]
    for key, override_val in override.items():
        base_val = result.get(key)
        if isinstance(base_val, dict) and isinstance(override_val, dict):
            result[key] = deep_merge(base_val, override_val)
        else:
            result[key] = override_val
    return result


def parse_env_vars(
    environ: Mapping[str, str],
) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Collect recognised GITVIEW_* variables into a nested dictionary.

    Empty values are ignored.

    Args:
        environ: The environment to read.

    Returns:
        Dictionary of config values with nested structure.
    """
    result: dict[str, Any] = {}  # pyright: ignore[reportExplicitAny]
    for name, dotted in ENV_OVERRIDES.items():
        value = environ.get(name)
        if not value:
            continue
        *parents, leaf = dotted.split(".")
        target = result
        for part in parents:
            target = target.setdefault(part, {})
        # Enum values are lowercase; paths and executables are kept verbatim
        target[leaf] = value.lower() if dotted in _ENUM_KEYS else value
    return result


def _to_validation_error(error: ValidationError) -> ConfigValidationError:
    first = error.errors()[0]
    key = ".".join(str(part) for part in first["loc"])
    msg = f"Invalid configuration value for '{key}'"
    return ConfigValidationError(
        msg,
        key=key,
        value=first.get("input"),
        expected=first["msg"],
    )


def load_config(
    path: Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> ReaderConfig:
    """Load reader configuration.

    Sources are applied in increasing precedence: built-in defaults, the TOML
    file at `path` (its `[gitview]` table if present, else the whole
    document), then GITVIEW_* environment variables.

    Args:
        path: Optional TOML file. It must exist when given.
        environ: Environment mapping. Defaults to os.environ.

    Returns:
        The validated ReaderConfig.

    Raises:
        ConfigLoadError: If the file is missing or is not valid TOML.
        ConfigValidationError: If a value fails validation.
    """
    values: dict[str, Any] = {}  # pyright: ignore[reportExplicitAny]
    if path is not None:
        document = read_toml_file(path)
        table = document.get(CONFIG_TABLE, document)
        if not isinstance(table, dict):
            msg = f"'{CONFIG_TABLE}' must be a table in {path}"
            raise ConfigLoadError(msg, path=path)
        values = table

    env_values = parse_env_vars(os.environ if environ is None else environ)
    values = deep_merge(values, env_values)

    try:
        return ReaderConfig.model_validate(values)
    except ValidationError as e:
        raise _to_validation_error(e) from e
