"""
Directory crawling and incremental cataloguing.

- TreeWalker: depth-first crawl writing one record per entry
- FolderIndex: directory path -> folder id, with parent linkage
- ErrorMemo: skip entries that failed before unless retrying
- ProgressCounter: counters read by the status reporter
"""

from .entry import EntryKind, FileEntry
from .error_memo import ErrorMemo
from .folders import FolderIndex
from .progress import ProgressCounter, ProgressSnapshot
from .walk_stats import WalkStats
from .walker import TreeWalker

__all__ = [
    "EntryKind",
    "ErrorMemo",
    "FileEntry",
    "FolderIndex",
    "ProgressCounter",
    "ProgressSnapshot",
    "TreeWalker",
    "WalkStats",
]
