"""
Error kinds raised and recorded while crawling.

Every failure is local to one entry: the walker catches CrawlError, stores the
formatted message on that entry's record and moves on to the next sibling.
"""

from enum import Enum
from typing import Optional

# Rendered in place of a cause when a policy skip has none
NO_CAUSE = "<nil>"


class ErrorKind(Enum):
    """Why an entry carries no hash. The value is the label stored in the catalog."""

    WALK_ENUMERATION = "walking file"
    METADATA = "getting file info"
    SYMLINK_READ = "reading symlink"
    FOLDER_RESOLUTION = "getting folder ID"
    OPEN = "opening file"
    READ = "reading file"
    HASH = "hashing file"
    FIFO = "FIFO"  # policy skip, stored
    SPECIAL_FILE = "special file"  # policy skip, stored
    SYMLINK_LOOP = "symlink loop"  # policy skip, logged only


def format_error(kind: ErrorKind, cause: Optional[object] = None) -> str:
    """
    Render the message stored in the ``error`` column.

    Args:
        kind: Error kind
        cause: Underlying exception or text, None for policy skips

    Returns:
        "<label>: <cause>", e.g. "FIFO: <nil>"
    """
    return f"{kind.value}: {NO_CAUSE if cause is None else cause}"


class CrawlError(Exception):
    """Base class for entry-level crawl failures."""

    kind: ErrorKind = ErrorKind.METADATA

    def __init__(self, path: str, cause: Optional[BaseException] = None, kind: Optional[ErrorKind] = None):
        self.path = path
        self.cause = cause
        if kind is not None:
            self.kind = kind
        super().__init__(f"{path}: {self.message}")

    @property
    def message(self) -> str:
        """Message stored on the entry's record."""
        return format_error(self.kind, self.cause)


class WalkEnumerationError(CrawlError):
    """Listing a directory failed."""

    kind = ErrorKind.WALK_ENUMERATION


class MetadataError(CrawlError):
    """lstat/stat failed."""

    kind = ErrorKind.METADATA


class SymlinkReadError(CrawlError):
    """readlink failed."""

    kind = ErrorKind.SYMLINK_READ


class FolderResolutionError(CrawlError):
    """The folder chain could not be looked up or created in storage."""

    kind = ErrorKind.FOLDER_RESOLUTION


class HashError(CrawlError):
    """Opening or reading a file failed while hashing it."""

    kind = ErrorKind.HASH
