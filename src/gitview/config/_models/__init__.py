"""Configuration models.

This module provides Pydantic models for gitview configuration sections.
"""

from gitview.config._models._common import LogFormat, LogLevel
from gitview.config._models._logging import LoggingConfig
from gitview.config._models._reader import ReaderConfig

__all__ = [
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "ReaderConfig",
]
