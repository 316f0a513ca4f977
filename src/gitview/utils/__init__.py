"""Shared utilities for gitview."""

from gitview.utils._logging import LogFormatType, create_logger, create_reader_logger

__all__ = ["LogFormatType", "create_logger", "create_reader_logger"]
