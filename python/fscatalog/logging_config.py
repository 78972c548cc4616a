"""
Logging configuration for fscatalog.

Errors found while crawling are written to a log file (default: errors.log in
the working directory), appended across runs and rotated at midnight.
With print_errors, the same records also go to stdout.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional


def setup_logging(
    log_file: Optional[Path] = None,
    level: int = logging.INFO,
    backup_count: int = 30,  # Keep 30 days of logs
    console: bool = False,
) -> logging.Logger:
    """
    Set up file-based logging with daily rotation.

    Args:
        log_file: Log file path (default: ./errors.log)
        level: Logging level (default: INFO)
        backup_count: Number of daily backup files to keep (default: 30 days)
        console: If True, also log to stdout

    Returns:
        Configured logger instance
    """
    if log_file is None:
        log_file = Path.cwd() / "errors.log"
    log_file = Path(log_file)

    log_file.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger("fscatalog")
    logger.setLevel(level)

    # Check existing handlers to avoid duplicates
    has_file_handler = any(
        isinstance(h, logging.handlers.TimedRotatingFileHandler)
        for h in logger.handlers
    )
    has_console_handler = any(
        isinstance(h, logging.StreamHandler) and getattr(h, "stream", None) is sys.stdout
        for h in logger.handlers
    )

    if has_file_handler and (not console or has_console_handler):
        return logger

    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if not has_file_handler:
        # Flush after every record so errors are on disk even if the crawl is killed
        class FlushingHandler(logging.handlers.TimedRotatingFileHandler):
            """Handler that flushes after every emit for immediate visibility."""

            def emit(self, record):
                super().emit(record)
                self.flush()

        file_handler = FlushingHandler(
            log_file,
            when="midnight",
            interval=1,
            backupCount=backup_count,
            encoding="utf-8",
            errors="backslashreplace",
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

        logger.info("=" * 60)
        logger.info("fscatalog - Logging Initialized")
        logger.info(f"Log file: {log_file}")
        logger.info(f"Log level: {logging.getLevelName(level)}")
        logger.info("=" * 60)

    if console and not has_console_handler:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    return logger


def get_logger(name: str = "fscatalog") -> logging.Logger:
    """
    Get fscatalog logger instance.

    Args:
        name: Logger name (default: "fscatalog")

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
