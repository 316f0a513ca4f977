"""Memoized, read-only access to git repository history."""

from gitview.exceptions import (
    CommandFailedError,
    CommandStartError,
    GitViewError,
    NotADirectoryError,
    ParseError,
    RepoNotFoundError,
)
from gitview.repository import (
    DirListing,
    FakeReader,
    ReaderProtocol,
    RepositoryReader,
)

__version__ = "0.1.0"

__all__ = [
    "CommandFailedError",
    "CommandStartError",
    "DirListing",
    "FakeReader",
    "GitViewError",
    "NotADirectoryError",
    "ParseError",
    "ReaderProtocol",
    "RepoNotFoundError",
    "RepositoryReader",
    "__version__",
]
