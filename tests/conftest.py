"""Shared test fixtures for gitview tests."""

from pathlib import Path

import pytest
from dulwich.repo import Repo
from rich.console import Console
from structlog.typing import FilteringBoundLogger

from gitview.utils import create_logger


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def console() -> Console:
    return Console(
        width=70,
        force_terminal=True,
        highlight=False,
        color_system=None,
        legacy_windows=False,
    )


@pytest.fixture
def log_file(tmp_path: Path) -> Path:
    """Path of a JSON-lines log file written by the `logger` fixture."""
    return tmp_path / "logs" / "gitview.log"


@pytest.fixture
def logger(log_file: Path) -> FilteringBoundLogger:
    """Debug-level JSON logger writing to `log_file`."""
    return create_logger("debug", log_file=str(log_file))


@pytest.fixture
def working_copy(tmp_path: Path) -> Path:
    """Create an empty working copy with a .git metadata directory."""
    root = tmp_path / "work"
    root.mkdir()
    Repo.init(str(root))
    return root


@pytest.fixture
def bare_repo(tmp_path: Path) -> Path:
    """Create an empty bare repository."""
    root = tmp_path / "bare.git"
    root.mkdir()
    Repo.init_bare(str(root))
    return root
