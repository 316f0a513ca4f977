"""Parsers for git's plain-text output.

`git show <rev>:<dir>` prints a tree as a `tree <name>` header, a blank line,
then one entry per line with directories suffixed by `/`.
`git show-ref --tags` prints one `<hex id> refs/tags/<name>` line per tag.
"""

import re
from typing import Final

from gitview.exceptions import NotADirectoryError, ParseError
from gitview.repository._models import DirListing, object_key

_TREE_HEADER: Final = re.compile(rb"^tree .*\n\n")
_TAG_LINE: Final = re.compile(r"^([0-9a-f]+) refs/tags/(.*)$")


def is_tree_listing(content: bytes) -> bool:
    """Check whether content starts with a tree header."""
    return _TREE_HEADER.match(content) is not None


def parse_tree_listing(content: bytes, *, path: str, revision: str) -> DirListing:
    """Split a tree listing into files and subdirectories.

    Args:
        content: Output of `git show <revision>:<path>`.
        path: The listed path, for error reporting.
        revision: The listed revision, for error reporting.

    Returns:
        DirListing with entries in listing order.

    Raises:
        NotADirectoryError: If content is not a tree listing.
    """
    header = _TREE_HEADER.match(content)
    if header is None:
        msg = f"{object_key(revision, path)} is not a directory"
        raise NotADirectoryError(msg, path=path, revision=revision)

    body = content[header.end() :].rstrip().decode("utf-8", errors="surrogateescape")
    if not body:
        return DirListing()

    files: list[str] = []
    dirs: list[str] = []
    for entry in body.split("\n"):
        if entry.endswith("/"):
            dirs.append(entry[:-1])
        else:
            files.append(entry)
    return DirListing(files=tuple(files), dirs=tuple(dirs))


def parse_show_ref(output: bytes) -> dict[str, str]:
    """Parse `git show-ref --tags` output into a tag table.

    Args:
        output: Raw standard output of the command.

    Returns:
        Mapping of tag name to object id, in listing order.

    Raises:
        ParseError: If a non-empty line does not match the expected format.
    """
    tags: dict[str, str] = {}
    text = output.decode("utf-8", errors="surrogateescape")
    for line_number, line in enumerate(text.strip().split("\n"), start=1):
        if not line:
            continue
        match = _TAG_LINE.match(line)
        if match is None:
            msg = f"Unexpected tag reference line {line_number}: {line!r}"
            raise ParseError(msg, line=line, line_number=line_number)
        tags[match.group(2)] = match.group(1)
    return tags
