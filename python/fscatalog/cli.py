"""
Command-line entry point.

Usage:
    fscatalog [options] DIRECTORY [DIRECTORY ...]

Or via environment variables:
    FSCATALOG_DB=/data/catalog.sqlite FSCATALOG_EXCLUDE=excludes.txt fscatalog ~/
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional

from fscatalog.config import DEFAULT_DB, DEFAULT_LOG, CrawlerConfig
from fscatalog.crawler import ProgressCounter, TreeWalker, WalkStats
from fscatalog.exclude_patterns import load_exclude_patterns, own_output_patterns
from fscatalog.logging_config import setup_logging
from fscatalog.storage import StorageError, StorageManager
from fscatalog.utils.progress import StatusReporter

logger = logging.getLogger("fscatalog.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fscatalog",
        description=(
            "Incrementally index directory trees into a SQLite catalog: "
            "metadata for every entry and a SHA-256 hash for every regular file."
        ),
    )
    parser.add_argument("directories", nargs="+", metavar="DIRECTORY", help="Directories to crawl")
    parser.add_argument(
        "--db",
        default=None,
        help=f"Path to the SQLite database file (default: {DEFAULT_DB}, or FSCATALOG_DB env var)",
    )
    parser.add_argument(
        "--exclude",
        default=None,
        help="Path to the exclusion pattern file (or FSCATALOG_EXCLUDE env var)",
    )
    parser.add_argument(
        "--log",
        default=None,
        help=f"Path to the errors log file (default: {DEFAULT_LOG}, or FSCATALOG_LOG env var)",
    )
    parser.add_argument(
        "--print-errors",
        action="store_true",
        help="Print errors to stdout in addition to the log file",
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Seconds between status reports, <= 0 disables them (default: 1, or FSCATALOG_INTERVAL)",
    )
    parser.add_argument(
        "--retry",
        action="store_true",
        help="Retry files that previously caused errors",
    )
    parser.add_argument(
        "--follow-symlinks",
        action="store_true",
        help="Follow symbolic links (each linked directory is walked at most once)",
    )
    parser.add_argument(
        "--measure-speed",
        action="store_true",
        help="Log read and hash throughput for every hashed file",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


async def run_crawl(
    walker: TreeWalker, roots: list[str], interval: float
) -> WalkStats:
    """
    Run the (blocking) walk in a worker thread while reporting progress.

    Args:
        walker: Configured walker
        roots: Absolute root paths
        interval: Seconds between status reports, <= 0 for none

    Returns:
        WalkStats from the walk
    """
    reporter: Optional[StatusReporter] = None
    if interval > 0:
        reporter = StatusReporter(walker.progress, interval=interval)
        reporter.start()
    try:
        return await asyncio.to_thread(walker.walk, roots)
    finally:
        if reporter is not None:
            await reporter.stop()


def crawl(config: CrawlerConfig) -> WalkStats:
    """
    Open the catalog, crawl every configured root and close the catalog.

    Raises:
        StorageError: If the catalog cannot be opened
    """
    patterns = load_exclude_patterns(config.exclude_file)
    patterns.extend(own_output_patterns(config.db_path, config.log_file))

    with StorageManager(config.db_path) as storage:
        walker = TreeWalker(
            storage,
            exclude_patterns=patterns,
            progress=ProgressCounter(),
            retry_errors=config.retry_errors,
            follow_symlinks=config.follow_symlinks,
            measure_hash_speed=config.measure_speed,
        )
        stats = asyncio.run(run_crawl(walker, config.roots, config.interval))
        storage.optimize()
    return stats


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = CrawlerConfig.from_args(args)
    except ValueError as e:
        parser.error(f"invalid configuration: {e}")

    setup_logging(
        log_file=config.log_file,
        level=logging.DEBUG if config.verbose else logging.INFO,
        console=config.print_errors,
    )

    try:
        stats = crawl(config)
    except StorageError as e:
        logger.error(f"❌ {e}")
        print(f"Error opening database: {e}", file=sys.stderr)
        return 1

    print(
        f"Hashed: {stats.hashed}, unchanged: {stats.unchanged}, excluded: {stats.excluded}, "
        f"errors: {stats.errors}, skipped (previous errors): {stats.skipped_errors}"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
