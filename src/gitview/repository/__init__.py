"""gitview repository access.

This package provides memoized, read-only access to a git repository's
history by running the git command-line tool.

Classes:
    RepositoryReader: Reads files, directory listings and tags at revisions.
    GitInvoker: Runs git, coalescing identical concurrent invocations.
    ReaderProtocol: Runtime-checkable protocol for dependency injection.
    FakeReader: In-memory implementation of ReaderProtocol for tests.

Models:
    RepoLayout: Metadata directory and optional working tree.
    DirListing: Files and subdirectories of a tree.
    ReaderCache: Per-reader file, directory and tag caches.

Example:
    >>> from gitview.repository import RepositoryReader
    >>> reader = RepositoryReader("/path/to/repo")
    >>> tags = await reader.get_tags()
    >>> present = await reader.exists("docs/index.md")
"""

from gitview.repository._fake import FakeReader
from gitview.repository._invoker import GitInvoker, invocation_key
from gitview.repository._models import (
    DEFAULT_REVISION,
    HEAD_PSEUDO_TAG,
    DirListing,
    ReaderCache,
    RepoLayout,
    object_key,
)
from gitview.repository._parse import (
    is_tree_listing,
    parse_show_ref,
    parse_tree_listing,
)
from gitview.repository._protocol import ReaderProtocol
from gitview.repository._reader import RepositoryReader, resolve_layout

__all__ = [
    "DEFAULT_REVISION",
    "HEAD_PSEUDO_TAG",
    "DirListing",
    "FakeReader",
    "GitInvoker",
    "ReaderCache",
    "ReaderProtocol",
    "RepoLayout",
    "RepositoryReader",
    "invocation_key",
    "is_tree_listing",
    "object_key",
    "parse_show_ref",
    "parse_tree_listing",
    "resolve_layout",
]
