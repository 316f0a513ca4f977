"""Read-only access to a git repository's history.

This module provides RepositoryReader, which reads file contents and
directory listings at a revision, enumerates tags and reports which tags
contain a path. Every git call goes through a coalescing GitInvoker and
results are memoized in a ReaderCache owned by the reader.
"""

from pathlib import Path
from typing import TYPE_CHECKING, final

import anyio

from gitview.config import ReaderConfig
from gitview.exceptions import CommandFailedError, RepoNotFoundError
from gitview.repository._invoker import GitInvoker
from gitview.repository._models import (
    DEFAULT_REVISION,
    HEAD_PSEUDO_TAG,
    DirListing,
    ReaderCache,
    RepoLayout,
    object_key,
)
from gitview.repository._parse import parse_show_ref, parse_tree_listing
from gitview.utils import create_reader_logger

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger


def resolve_layout(path: Path, *, metadata_dir: str = ".git") -> RepoLayout:
    """Work out whether a directory is a working copy or a bare repository.

    Args:
        path: The repository directory.
        metadata_dir: Name of the metadata subdirectory of a working copy.

    Returns:
        RepoLayout for the directory.

    Raises:
        RepoNotFoundError: If the directory does not exist.
    """
    if not path.exists():
        msg = f"Bad repo path: {path}"
        raise RepoNotFoundError(msg, path=path)

    git_dir = path / metadata_dir
    if git_dir.exists():
        return RepoLayout(git_dir=git_dir, work_tree=path)
    return RepoLayout(git_dir=path)


@final
class RepositoryReader:
    """Memoizing, read-only view of a git repository.

    The reader owns its caches. Constructing a reader always starts from an
    empty cache, and clear_cache() empties it again. All methods must be
    awaited from the same event loop.

    Attributes:
        layout: Where the metadata and working tree live.
        config: Settings the reader was opened with.

    Example:
        >>> reader = RepositoryReader("/path/to/repo")
        >>> readme = await reader.read_file("README.md", "v1.0")
        >>> listing = await reader.read_dir("src")
        >>> print(listing.dirs, listing.files)
    """

    __slots__ = ("_cache", "_invoker", "_logger", "config", "layout")

    def __init__(
        self,
        path: Path | str,
        *,
        config: ReaderConfig | None = None,
        logger: "FilteringBoundLogger | None" = None,  # noqa: UP037
    ) -> None:
        """Open a repository.

        Args:
            path: A working copy (containing a .git directory) or a bare
                repository directory.
            config: Reader settings. Defaults to ReaderConfig().
            logger: Logger to use. Defaults to one built from config.logging.

        Raises:
            RepoNotFoundError: If path does not exist.
        """
        self.config = config if config is not None else ReaderConfig()
        self._logger = (
            logger if logger is not None else create_reader_logger(self.config.logging)
        )
        self.layout = resolve_layout(Path(path), metadata_dir=self.config.metadata_dir)
        self._cache = ReaderCache()
        self._invoker = GitInvoker(
            self.layout.prefix_args,
            executable=self.config.git_executable,
            logger=self._logger,
        )
        self._logger.debug(
            "reader.opened",
            git_dir=str(self.layout.git_dir),
            bare=self.layout.is_bare,
        )

    @property
    def root(self) -> Path:
        """The directory the reader was opened on."""
        if self.layout.work_tree is not None:
            return self.layout.work_tree
        return self.layout.git_dir

    @property
    def is_bare(self) -> bool:
        """Whether the repository has no working tree."""
        return self.layout.is_bare

    @property
    def invoker(self) -> GitInvoker:
        """The invoker every git call goes through."""
        return self._invoker

    async def read_file(self, path: str, revision: str | None = None) -> bytes:
        """Read a file's raw contents.

        When no revision is given and the repository is a working copy, the
        file is read straight from the working tree and is not cached. A
        bare repository reads it at HEAD instead.

        Args:
            path: Repository-relative path.
            revision: Commit-ish to read at.

        Returns:
            The file contents as bytes.

        Raises:
            CommandFailedError: If git cannot show the object.
            OSError: If a working-tree read fails.
        """
        if revision is None:
            if self.layout.work_tree is not None:
                # Leading slashes would otherwise replace the work tree root
                relative = path.lstrip("/")
                return await anyio.Path(self.layout.work_tree, relative).read_bytes()
            revision = DEFAULT_REVISION

        key = object_key(revision, path)
        cached = self._cache.files.get(key)
        if cached is not None:
            self._logger.debug("cache.hit", cache="files", key=key)
            return cached

        content = await self._invoker.run(["show", key])
        self._cache.files[key] = content
        return content

    async def read_dir(
        self, path: str = "", revision: str = DEFAULT_REVISION
    ) -> DirListing:
        """List the immediate entries of a directory at a revision.

        Args:
            path: Repository-relative directory path. Empty for the root.
            revision: Commit-ish to list at.

        Returns:
            DirListing with files and subdirectories in git's order.

        Raises:
            NotADirectoryError: If the path is not a tree at that revision.
            CommandFailedError: If git cannot show the object.
        """
        key = object_key(revision, path)
        cached = self._cache.dirs.get(key)
        if cached is not None:
            self._logger.debug("cache.hit", cache="dirs", key=key)
            return cached

        content = await self.read_file(path, revision)
        listing = parse_tree_listing(content, path=path, revision=revision)
        # The parsed listing replaces the raw tree text
        _ = self._cache.files.pop(key, None)
        self._cache.dirs[key] = listing
        return listing

    async def get_tags(self) -> dict[str, str]:
        """Return every tag and the object id it points at.

        The table is loaded with a single git call and cached, including
        when the repository has no tags.

        Returns:
            A new dictionary mapping tag name to hex object id.

        Raises:
            ParseError: If git prints an unexpected line.
            CommandFailedError: If git fails.
        """
        if self._cache.tags is not None:
            self._logger.debug("cache.hit", cache="tags")
            return dict(self._cache.tags)

        try:
            output = await self._invoker.run(["show-ref", "--tags"])
        except CommandFailedError as e:
            # show-ref exits 1 without a message when nothing matches
            if e.exit_code != 1 or e.stderr.strip():
                raise
            output = b""

        tags = parse_show_ref(output)
        self._cache.tags = tags
        self._logger.debug("tags.loaded", count=len(tags))
        return dict(tags)

    async def exists(self, path: str) -> dict[str, str]:
        """Report the tags, and HEAD, at which a path can be read.

        All reads run concurrently. A read that fails with CommandFailedError
        simply leaves that tag out of the result.

        Args:
            path: Repository-relative path.

        Returns:
            Mapping of tag name to object id for every tag containing the
            path, plus "HEAD": "HEAD" when HEAD contains it. Tags keep their
            listing order and HEAD comes last.

        Raises:
            ExceptionGroup: If a read fails with anything other than
                CommandFailedError.
            ParseError: If the tag table cannot be parsed.
        """
        # get_tags returns a copy, so HEAD never reaches the tag cache
        candidates = await self.get_tags()
        candidates[HEAD_PSEUDO_TAG] = DEFAULT_REVISION
        found: set[str] = set()

        async def _probe(tag: str, revision: str) -> None:
            try:
                _ = await self.read_file(path, revision)
            except CommandFailedError as e:
                self._logger.debug(
                    "exists.probe_failed", path=path, tag=tag, exit_code=e.exit_code
                )
                return
            found.add(tag)

        async with anyio.create_task_group() as tg:
            for tag, revision in candidates.items():
                tg.start_soon(_probe, tag, revision)

        return {tag: rev for tag, rev in candidates.items() if tag in found}

    def clear_cache(self) -> None:
        """Forget all cached files, listings and tags."""
        self._cache.clear()
        self._logger.debug("cache.cleared")
