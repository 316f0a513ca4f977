# ruff: noqa: TC003  # Path needed at runtime for dataclass fields
"""gitview repository models.

This module defines data structures for repository layout, directory
listings and the per-reader content cache.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

DEFAULT_REVISION: Final = "HEAD"

# Synthetic tag reported by exists() for the default revision
HEAD_PSEUDO_TAG: Final = "HEAD"


def object_key(revision: str, path: str) -> str:
    """Build the `<revision>:<path>` object name used by git and the caches.

    Args:
        revision: A commit-ish such as a tag, branch or "HEAD".
        path: Repository-relative path.

    Returns:
        The combined object name.
    """
    return f"{revision}:{path}"


@dataclass(frozen=True, slots=True)
class RepoLayout:
    """Location of a repository's metadata and optional working tree.

    Attributes:
        git_dir: The metadata directory passed as --git-dir.
        work_tree: The checked-out tree, or None for a bare repository.
    """

    git_dir: Path
    work_tree: Path | None = None

    @property
    def is_bare(self) -> bool:
        """Whether the repository has no working tree."""
        return self.work_tree is None

    @property
    def prefix_args(self) -> tuple[str, ...]:
        """Location arguments placed before every git subcommand."""
        if self.work_tree is None:
            return (f"--git-dir={self.git_dir}",)
        return (f"--git-dir={self.git_dir}", f"--work-tree={self.work_tree}")


@dataclass(frozen=True, slots=True)
class DirListing:
    """Immediate entries of a tree at a revision.

    Both tuples keep the order git listed the entries in.

    Attributes:
        files: Names of non-directory entries.
        dirs: Names of subdirectories, without the trailing slash.
    """

    files: tuple[str, ...] = ()
    dirs: tuple[str, ...] = ()


@dataclass(slots=True)
class ReaderCache:
    """Content caches owned by a single reader.

    Attributes:
        files: Raw object contents keyed by `<revision>:<path>`.
        dirs: Parsed tree listings keyed by `<revision>:<path>`.
        tags: Tag name to object id, or None when not loaded yet.
    """

    files: dict[str, bytes] = field(default_factory=dict)
    dirs: dict[str, DirListing] = field(default_factory=dict)
    tags: dict[str, str] | None = None

    def clear(self) -> None:
        """Drop every cached entry and mark tags as not loaded."""
        self.files = {}
        self.dirs = {}
        self.tags = None
