"""
Statistics tracking for crawl operations.

Provides:
- WalkStats class for collecting and reporting per-run outcome counts
"""


class WalkStats:
    """Outcome counts from one TreeWalker.walk() invocation."""

    def __init__(self):
        self.hashed = 0  # Files hashed and written
        self.unchanged = 0  # Files skipped by the unchanged-mtime shortcut
        self.excluded = 0  # Entries recorded with an exclusion pattern
        self.directories = 0  # Directory records written
        self.symlinks = 0  # Symlink records written
        self.fifos = 0  # FIFOs and other special files recorded
        self.errors = 0  # Entries recorded with an error
        self.skipped_errors = 0  # Entries skipped because of a remembered error
        self.symlink_loops = 0  # Followed symlinks not walked again

    def to_dict(self) -> dict[str, int]:
        """Convert to dictionary for logging and tests."""
        return {
            "hashed": self.hashed,
            "unchanged": self.unchanged,
            "excluded": self.excluded,
            "directories": self.directories,
            "symlinks": self.symlinks,
            "fifos": self.fifos,
            "errors": self.errors,
            "skipped_errors": self.skipped_errors,
            "symlink_loops": self.symlink_loops,
        }
