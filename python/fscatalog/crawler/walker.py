"""
TreeWalker - depth-first crawl of one or more roots into the catalog.

Handles:
- Directory enumeration in lexical order, top-down
- Exclusion patterns (excluded directories are pruned, not descended)
- Remembered errors (skipped unless retry is requested)
- Incremental indexing (unchanged modification time -> no re-hash)
- Optional symlink following with loop detection

Every failure is recorded on the affected entry and the walk continues.
"""

import logging
import os
import stat
from typing import Iterable, Optional

from ..exclude_patterns import is_excluded
from ..storage import StorageError, StorageManager
from .entry import EntryKind, FileEntry
from .error_memo import ErrorMemo
from .errors import (
    CrawlError,
    ErrorKind,
    MetadataError,
    SymlinkReadError,
    WalkEnumerationError,
    format_error,
)
from .folders import FolderIndex
from .hashing import hash_file
from .progress import ProgressCounter
from .walk_stats import WalkStats

# Get logger instance
logger = logging.getLogger("fscatalog.walker")


class TreeWalker:
    """
    Crawls directory trees and writes one record per entry.

    The walk is synchronous and single-threaded: each entry is classified,
    possibly hashed, and persisted before the next sibling is visited.
    """

    def __init__(
        self,
        storage: StorageManager,
        exclude_patterns: Optional[list[str]] = None,
        progress: Optional[ProgressCounter] = None,
        retry_errors: bool = False,
        follow_symlinks: bool = False,
        measure_hash_speed: bool = False,
    ):
        """
        Initialize the walker.

        Args:
            storage: Catalog to read previous state from and write records to
            exclude_patterns: Ordered exclusion patterns
            progress: Counter read by the status reporter (a private one if None)
            retry_errors: Re-evaluate entries that have a stored error
            follow_symlinks: Walk into directories reached through symlinks and
                             hash the targets of file symlinks
            measure_hash_speed: Log read and hash throughput for every hashed file
        """
        self.storage = storage
        self.exclude_patterns = list(exclude_patterns or [])
        self.progress = progress if progress is not None else ProgressCounter()
        self.follow_symlinks = follow_symlinks
        self.measure_hash_speed = measure_hash_speed

        self.folders = FolderIndex(storage)
        self.error_memo = ErrorMemo(storage, retry_errors)

        self.stats = WalkStats()
        # Resolved symlink targets already walked during the current walk() call
        self._visited_targets: set[str] = set()
        # Resolved paths of the directories currently being descended
        self._active_dirs: set[str] = set()

    def walk(self, roots: Iterable[str]) -> WalkStats:
        """
        Crawl every root in order.

        Args:
            roots: Directory (or file) paths; relative paths are made absolute

        Returns:
            WalkStats for this invocation
        """
        self.stats = WalkStats()
        self._visited_targets = set()

        for root in roots:
            root = os.path.abspath(root)
            real_root = os.path.realpath(root)
            logger.info(f"🔍 Crawling {root}")
            self._visit(root, real_root, is_root=True)
            # Later roots reaching this tree through a symlink skip it
            self._visited_targets.add(real_root)

        logger.info(f"✅ Crawl finished: {self.stats.to_dict()}")
        return self.stats

    # Per-entry state machine

    def _visit(self, path: str, real_path: str, is_root: bool = False) -> None:
        """
        Classify one entry and write its record.

        Args:
            path: Absolute path of the entry (the record key)
            real_path: Same entry with symlinked ancestors resolved
            is_root: True for a root argument (root symlinks are always followed)
        """
        if self.error_memo.should_skip(path):
            self.stats.skipped_errors += 1
            self._descend_remembered(path, real_path)
            return

        entry = FileEntry.for_path(path)
        try:
            entry.folder_id = self.folders.resolve(os.path.dirname(path))
            self._apply_stat(entry, self._lstat(path))
            if entry.kind == EntryKind.SYMLINK:
                entry.symlink = self._readlink(path)
        except CrawlError as e:
            self._write_error(entry, e)
            return

        if entry.kind in (EntryKind.FIFO, EntryKind.OTHER):
            kind = ErrorKind.FIFO if entry.kind == EntryKind.FIFO else ErrorKind.SPECIAL_FILE
            entry.error = format_error(kind)
            self.stats.fifos += 1
            self._write(entry)
            return

        excluded, pattern = is_excluded(path, self.exclude_patterns)
        if excluded:
            entry.exclusion_pattern = pattern
            self.stats.excluded += 1
            self._write(entry)
            return

        if entry.kind == EntryKind.DIR:
            self.stats.directories += 1
            self._write(entry)
            self._descend(entry, real_path)
        elif entry.kind == EntryKind.SYMLINK:
            self._visit_symlink(entry, follow=self.follow_symlinks or is_root)
        else:
            self._index_file(entry)

    def _descend(self, entry: FileEntry, real_path: str) -> None:
        """Visit the children of a directory whose record was already written."""
        try:
            names = self._list_dir(entry.path)
        except WalkEnumerationError as e:
            self._write_error(entry, e)
            return
        self._visit_children(entry.path, real_path, names)

    def _descend_remembered(self, path: str, real_path: str) -> None:
        """
        Walk the children of a directory skipped for a remembered error.

        Its own record stays as stored; a listing that still fails is only logged.
        """
        try:
            if not stat.S_ISDIR(os.lstat(path).st_mode):
                return
            names = self._list_dir(path)
        except (OSError, WalkEnumerationError) as e:
            logger.debug(f"Not descending into remembered {path}: {e}")
            return
        self._visit_children(path, real_path, names)

    def _visit_children(self, path: str, real_path: str, names: list[str]) -> None:
        self._active_dirs.add(real_path)
        try:
            for name in names:
                self._visit(
                    os.path.join(path, name),
                    os.path.join(real_path, name),
                )
        finally:
            self._active_dirs.discard(real_path)

    def _visit_symlink(self, entry: FileEntry, follow: bool) -> None:
        if not follow:
            self._record_symlink(entry)
            return

        try:
            target_stat = os.stat(entry.path)
        except OSError as e:
            logger.debug(f"Dangling symlink {entry.path} -> {entry.symlink}: {e}")
            self._record_symlink(entry)
            return

        if stat.S_ISDIR(target_stat.st_mode):
            target = os.path.realpath(entry.path)
            self._record_symlink(entry, count_progress=False)
            if target in self._active_dirs or target in self._visited_targets:
                self.stats.symlink_loops += 1
                logger.warning(
                    f"🔁 {format_error(ErrorKind.SYMLINK_LOOP, entry.path)} -> "
                    f"{target} already visited, not walking it again"
                )
                return
            self._visited_targets.add(target)
            self._visit(target, target)
            return

        if not stat.S_ISREG(target_stat.st_mode):
            # Never open FIFOs or devices, even through a link
            self._record_symlink(entry)
            return

        # Hash the target's content under the link's own path
        try:
            self._apply_stat(entry, target_stat)
        except CrawlError as e:
            self._write_error(entry, e)
            return
        entry.kind = EntryKind.SYMLINK
        self._index_file(entry)

    def _record_symlink(self, entry: FileEntry, count_progress: bool = True) -> None:
        if count_progress:
            self.progress.update(entry.path, entry.size)
        self.stats.symlinks += 1
        self._write(entry)

    def _index_file(self, entry: FileEntry) -> None:
        """Apply the unchanged-mtime shortcut, otherwise hash and write."""
        self.progress.update(entry.path, entry.size)

        if self._is_unchanged(entry):
            self.stats.unchanged += 1
            return

        try:
            entry.hash = hash_file(entry.path, entry.size, measure=self.measure_hash_speed)
        except CrawlError as e:
            self._write_error(entry, e)
            return

        self.stats.hashed += 1
        self._write(entry)

    def _is_unchanged(self, entry: FileEntry) -> bool:
        # Only the modification time is compared. A content change that keeps
        # the mtime is not detected.
        try:
            stored_mtime = self.storage.get_indexed_mtime(entry.path)
        except StorageError as e:
            logger.warning(f"Could not read stored mtime for {entry.path}: {e}")
            return False
        return stored_mtime is not None and stored_mtime == entry.modification_time

    # Filesystem access

    @staticmethod
    def _lstat(path: str) -> os.stat_result:
        try:
            return os.lstat(path)
        except OSError as e:
            raise MetadataError(path, e) from e

    @staticmethod
    def _readlink(path: str) -> str:
        try:
            return os.readlink(path)
        except OSError as e:
            raise SymlinkReadError(path, e) from e

    @staticmethod
    def _list_dir(path: str) -> list[str]:
        """Child names in lexical order."""
        try:
            with os.scandir(path) as it:
                return sorted(child.name for child in it)
        except OSError as e:
            raise WalkEnumerationError(path, e) from e

    @staticmethod
    def _apply_stat(entry: FileEntry, st: os.stat_result) -> None:
        # Timestamps outside what datetime can represent (years 1-9999)
        try:
            entry.apply_stat(st)
        except (ValueError, OverflowError, OSError) as e:
            raise MetadataError(entry.path, e) from e

    # Persistence

    def _write_error(self, entry: FileEntry, error: CrawlError) -> None:
        entry.error = error.message
        entry.hash = None
        entry.exclusion_pattern = None
        self.stats.errors += 1
        logger.warning(f"⚠️  {error}")
        self._write(entry)

    def _write(self, entry: FileEntry) -> None:
        try:
            self.storage.upsert_entry(entry)
        except StorageError as e:
            logger.error(f"❌ {e}")
