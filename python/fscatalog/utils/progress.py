"""
Periodic status reporting for a running crawl.

Provides two modes:
1. Visual (console): two status lines redrawn in place on stdout
2. Log-based: one DEBUG log entry per tick, used when stdout is not a TTY

The reporter only reads ProgressCounter snapshots; it never touches the walker
or the catalog.
"""

import asyncio
import contextlib
import logging
import shutil
import sys
import time
from typing import Optional, TextIO

from ..crawler.progress import ProgressCounter, ProgressSnapshot

logger = logging.getLogger("fscatalog.progress")

MB = 1e6

# Width of the "Last processed file: " prefix
LAST_FILE_PREFIX = "Last processed file: "

# ANSI: cursor up two lines / clear to end of line
CURSOR_UP_2 = "\033[2A"
CLEAR_LINE = "\033[K"


def format_elapsed(seconds: float) -> str:
    """Format seconds as HH:MM:SS."""
    seconds = int(seconds)
    return f"{seconds // 3600:02d}:{(seconds // 60) % 60:02d}:{seconds % 60:02d}"


def truncate(text: str, width: int) -> str:
    """Shorten text to width characters, marking the cut with '...'."""
    if len(text) <= width:
        return text
    if width <= 3:
        return text[:max(width, 0)]
    return text[: width - 3] + "..."


def terminal_width(default: int = 80) -> int:
    """Columns of the controlling terminal, or default when unknown."""
    return shutil.get_terminal_size((default, 24)).columns


class StatusReporter:
    """
    Renders crawl progress on a fixed interval.

    Example:
        reporter = StatusReporter(counter, interval=1.0)
        reporter.start()
        await asyncio.to_thread(walker.walk, roots)
        await reporter.stop()
    """

    def __init__(
        self,
        counter: ProgressCounter,
        interval: float = 1.0,
        stream: Optional[TextIO] = None,
        console_mode: bool = True,
        width: Optional[int] = None,
    ):
        """
        Initialize status reporter.

        Args:
            counter: Counter updated by the walker
            interval: Seconds between reports
            stream: Output for visual mode (default: stdout)
            console_mode: If True and stream is a TTY, redraw lines in place
            width: Terminal width override (detected when None)
        """
        self.counter = counter
        self.interval = interval
        self.stream = stream if stream is not None else sys.stdout
        self.visual_mode = console_mode and self.stream.isatty()
        self.width = width if width is not None else terminal_width()

        self.start_time = time.monotonic()
        self._last_time = self.start_time
        self._last_bytes = 0
        self._task: Optional[asyncio.Task] = None

    def render(self, snapshot: ProgressSnapshot, now: float) -> tuple[str, str]:
        """
        Build the two status lines.

        Args:
            snapshot: Counter snapshot
            now: Monotonic timestamp of the snapshot

        Returns:
            (statistics line, last processed file line)
        """
        elapsed = now - self.start_time
        window = now - self._last_time
        speed = (snapshot.bytes - self._last_bytes) / window / MB if window > 0 else 0.0

        stats_line = (
            f"Elapsed Time: {format_elapsed(elapsed)}, "
            f"Files processed: {snapshot.files}, "
            f"MB processed: {snapshot.bytes / MB:.2f}, "
            f"Speed: {speed:.2f} MB/s"
        )
        last_file = truncate(snapshot.last_path, self.width - len(LAST_FILE_PREFIX))
        return stats_line, f"{LAST_FILE_PREFIX}{last_file}"

    def tick(self) -> tuple[str, str]:
        """Emit one report and return the rendered lines."""
        now = time.monotonic()
        snapshot = self.counter.snapshot()
        stats_line, file_line = self.render(snapshot, now)
        self._last_time = now
        self._last_bytes = snapshot.bytes

        if self.visual_mode:
            self.stream.write(
                f"{CURSOR_UP_2}{CLEAR_LINE}{stats_line}\n{CLEAR_LINE}{file_line}\n"
            )
            self.stream.flush()
        else:
            # Kept out of the errors log unless running verbose
            logger.debug(f"{stats_line} | {file_line}")
        return stats_line, file_line

    async def run(self) -> None:
        """Report every interval seconds until cancelled."""
        if self.visual_mode:
            # Placeholder lines the first tick moves up over
            self.stream.write(
                "Elapsed Time: --:--:--, Files processed: ----, "
                "MB processed: ----, Speed: ---- MB/s\n"
                f"{LAST_FILE_PREFIX}----------------\n"
            )
            self.stream.flush()
        while True:
            await asyncio.sleep(self.interval)
            self.tick()

    def start(self) -> asyncio.Task:
        """Schedule run() on the current event loop."""
        self.start_time = time.monotonic()
        self._last_time = self.start_time
        self._task = asyncio.create_task(self.run())
        return self._task

    async def stop(self) -> None:
        """Cancel the periodic task and print a final report."""
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        self.tick()
