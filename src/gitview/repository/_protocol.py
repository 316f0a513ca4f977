"""Reader protocol for type-safe dependency injection.

This module defines a runtime-checkable Protocol that both RepositoryReader
and FakeReader satisfy, enabling consumers to be tested without git.
"""

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from gitview.repository._models import DirListing


@runtime_checkable
class ReaderProtocol(Protocol):
    """Protocol for read-only repository access.

    Example:
        >>> async def changelog(reader: ReaderProtocol, tag: str) -> str:
        ...     return (await reader.read_file("CHANGELOG.md", tag)).decode()
    """

    async def read_file(self, path: str, revision: str | None = None) -> bytes:
        """Read a file's raw contents at a revision.

        Args:
            path: Repository-relative path.
            revision: Commit-ish, or None for the working tree (HEAD when
                there is none).

        Returns:
            The file contents.
        """
        ...

    async def read_dir(self, path: str = "", revision: str = "HEAD") -> "DirListing":
        """List a directory's immediate entries at a revision.

        Args:
            path: Repository-relative directory path.
            revision: Commit-ish to list at.

        Returns:
            The directory's files and subdirectories.
        """
        ...

    async def get_tags(self) -> dict[str, str]:
        """Return the tag table, tag name to object id."""
        ...

    async def exists(self, path: str) -> dict[str, str]:
        """Return the tags (and HEAD) at which path can be read."""
        ...

    def clear_cache(self) -> None:
        """Forget cached content."""
        ...
