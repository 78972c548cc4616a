"""
FileEntry - the record written to the catalog for every visited path.
"""

import os
import stat
from dataclasses import dataclass, fields
from datetime import datetime
from enum import Enum
from typing import Optional


class EntryKind(Enum):
    """Filesystem object type as stored in the ``kind`` column."""

    FILE = "file"
    DIR = "dir"
    SYMLINK = "symlink"
    FIFO = "fifo"
    OTHER = "other"  # sockets, block and character devices

    @classmethod
    def from_mode(cls, mode: int) -> "EntryKind":
        if stat.S_ISLNK(mode):
            return cls.SYMLINK
        if stat.S_ISDIR(mode):
            return cls.DIR
        if stat.S_ISFIFO(mode):
            return cls.FIFO
        if stat.S_ISREG(mode):
            return cls.FILE
        return cls.OTHER


def format_timestamp(timestamp: float) -> str:
    """Seconds since the epoch -> ISO-8601 with local offset, second precision."""
    return datetime.fromtimestamp(timestamp).astimezone().isoformat(timespec="seconds")


def creation_timestamp(st: os.stat_result) -> float:
    """
    Best available creation time.

    Birth time where the platform reports it (macOS, BSD, Windows), otherwise
    the inode change time.
    """
    birth = getattr(st, "st_birthtime", None)
    return birth if birth is not None else st.st_ctime


@dataclass
class FileEntry:
    """One catalog row. ``path`` is the absolute path and the primary key."""

    path: str
    name: str
    extension: str
    kind: Optional[EntryKind] = None
    creation_time: Optional[str] = None
    modification_time: Optional[str] = None
    hash: Optional[str] = None
    size: int = 0
    symlink: Optional[str] = None
    exclusion_pattern: Optional[str] = None
    error: Optional[str] = None
    folder_id: Optional[int] = None

    @classmethod
    def for_path(cls, path: str) -> "FileEntry":
        """Identity fields only; metadata is filled in by apply_stat()."""
        name = os.path.basename(path) or path
        return cls(path=path, name=name, extension=os.path.splitext(name)[1])

    def apply_stat(self, st: os.stat_result) -> None:
        """Copy kind, times and size from an lstat/stat result."""
        self.kind = EntryKind.from_mode(st.st_mode)
        self.creation_time = format_timestamp(creation_timestamp(st))
        self.modification_time = format_timestamp(st.st_mtime)
        self.size = 0 if self.kind == EntryKind.DIR else st.st_size

    def to_dict(self) -> dict:
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data["kind"] = self.kind.value if self.kind else None
        return data
