"""
Thread-safe progress counters shared between the walker and the reporter.

The walker is the only writer; the status reporter reads snapshots on its own
schedule. Reads never wait on anything but the short internal lock.
"""

import threading
from dataclasses import dataclass


@dataclass(frozen=True)
class ProgressSnapshot:
    """Immutable view of the counters at one instant."""

    files: int
    bytes: int
    last_path: str


class ProgressCounter:
    """Files processed, bytes processed and the most recent path."""

    def __init__(self):
        self._lock = threading.Lock()
        self._files = 0
        self._bytes = 0
        self._last_path = ""

    def update(self, path: str, size: int) -> None:
        """Count one processed entry of the given size."""
        with self._lock:
            self._files += 1
            self._bytes += size
            self._last_path = path

    def snapshot(self) -> ProgressSnapshot:
        with self._lock:
            return ProgressSnapshot(self._files, self._bytes, self._last_path)
