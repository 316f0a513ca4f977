"""Fake reader for testing.

This module provides a FakeReader class that implements ReaderProtocol for
use in tests without requiring git or a repository on disk.
"""

import errno
from dataclasses import dataclass, field

from gitview.exceptions import CommandFailedError
from gitview.repository._models import (
    DEFAULT_REVISION,
    HEAD_PSEUDO_TAG,
    DirListing,
    object_key,
)
from gitview.repository._parse import parse_tree_listing


@dataclass(slots=True)
class FakeReader:
    """In-memory repository history.

    Snapshots map a revision (a tag name, branch name or "HEAD") to the
    files committed at that revision. A revision may also be given as a
    tag's object id, which resolves to the snapshot stored under the tag
    name. Directories are implied by file paths.

    Attributes:
        snapshots: Revision to {path: content}.
        tags: Tag name to object id.
        working_tree: Working-tree files, or None to behave like a bare
            repository.
        requests: Every `<revision>:<path>` object read, in order.
        clear_count: Number of clear_cache() calls.

    Example:
        >>> reader = FakeReader(
        ...     snapshots={"HEAD": {"src/app.py": b"print()"}},
        ... )
        >>> listing = await reader.read_dir("src")
        >>> listing.files
        ('app.py',)
    """

    snapshots: dict[str, dict[str, bytes]] = field(default_factory=dict)
    tags: dict[str, str] = field(default_factory=dict)
    working_tree: dict[str, bytes] | None = None
    requests: list[str] = field(default_factory=list)
    clear_count: int = 0

    def _snapshot(self, revision: str) -> dict[str, bytes] | None:
        if revision in self.snapshots:
            return self.snapshots[revision]
        for name, object_id in self.tags.items():
            if object_id == revision and name in self.snapshots:
                return self.snapshots[name]
        return None

    def _missing(self, revision: str, path: str) -> CommandFailedError:
        key = object_key(revision, path)
        stderr = f"fatal: path '{path}' does not exist in '{revision}'\n"
        return CommandFailedError(
            f"git show {key}\n{stderr}",
            command=("git", "show", key),
            exit_code=128,
            stderr=stderr,
        )

    def _tree_text(
        self, files: dict[str, bytes], revision: str, path: str
    ) -> bytes | None:
        directory = path.strip("/")
        prefix = f"{directory}/" if directory else ""
        entries: set[str] = set()
        for file_path in files:
            if not file_path.startswith(prefix):
                continue
            name, sep, _ = file_path[len(prefix) :].partition("/")
            entries.add(f"{name}/" if sep else name)
        if not entries and directory:
            return None
        header = f"tree {object_key(revision, path)}\n\n"
        return (header + "".join(f"{entry}\n" for entry in sorted(entries))).encode()

    async def read_file(self, path: str, revision: str | None = None) -> bytes:
        """Read a file from the working tree or a snapshot.

        Directory paths return git's tree listing text.

        Raises:
            FileNotFoundError: If a working-tree file is missing.
            CommandFailedError: If the revision or path is unknown.
        """
        if revision is None:
            if self.working_tree is not None:
                if path not in self.working_tree:
                    raise FileNotFoundError(errno.ENOENT, "No such file", path)
                return self.working_tree[path]
            revision = DEFAULT_REVISION

        self.requests.append(object_key(revision, path))
        files = self._snapshot(revision)
        if files is None:
            raise self._missing(revision, path)
        if path in files:
            return files[path]
        tree = self._tree_text(files, revision, path)
        if tree is None:
            raise self._missing(revision, path)
        return tree

    async def read_dir(
        self, path: str = "", revision: str = DEFAULT_REVISION
    ) -> DirListing:
        """List a directory in a snapshot.

        Raises:
            NotADirectoryError: If the path is a file.
            CommandFailedError: If the revision or path is unknown.
        """
        content = await self.read_file(path, revision)
        return parse_tree_listing(content, path=path, revision=revision)

    async def get_tags(self) -> dict[str, str]:
        """Return a copy of the tag table."""
        return dict(self.tags)

    async def exists(self, path: str) -> dict[str, str]:
        """Report the tags, and HEAD, whose snapshot contains path."""
        candidates = {**self.tags, HEAD_PSEUDO_TAG: DEFAULT_REVISION}
        found: dict[str, str] = {}
        for tag, revision in candidates.items():
            try:
                _ = await self.read_file(path, revision)
            except CommandFailedError:
                continue
            found[tag] = revision
        return found

    def clear_cache(self) -> None:
        """Count the call; the fake keeps no cache."""
        self.clear_count += 1
