"""
Crawler configuration.

Values come from command-line arguments first, then FSCATALOG_* environment
variables, then built-in defaults:

- FSCATALOG_DB:       catalog database path (default: index.sqlite)
- FSCATALOG_EXCLUDE:  exclusion pattern file (default: none)
- FSCATALOG_LOG:      error log path (default: errors.log)
- FSCATALOG_INTERVAL: seconds between status reports, <= 0 disables (default: 1)
"""

import argparse
import os
from dataclasses import dataclass, field
from typing import Optional

DEFAULT_DB = "index.sqlite"
DEFAULT_LOG = "errors.log"
DEFAULT_INTERVAL = 1.0


@dataclass
class CrawlerConfig:
    """Resolved settings for one crawl. All paths are absolute."""

    roots: list[str] = field(default_factory=list)
    db_path: str = DEFAULT_DB
    exclude_file: Optional[str] = None
    log_file: str = DEFAULT_LOG
    interval: float = DEFAULT_INTERVAL
    print_errors: bool = False
    retry_errors: bool = False
    follow_symlinks: bool = False
    measure_speed: bool = False
    verbose: bool = False

    @classmethod
    def from_args(cls, args: argparse.Namespace, environ: Optional[dict] = None) -> "CrawlerConfig":
        """
        Build a config from parsed arguments with environment fallbacks.

        Args:
            args: Result of build_parser().parse_args()
            environ: Environment mapping (default: os.environ)
        """
        env = os.environ if environ is None else environ

        db_path = args.db or env.get("FSCATALOG_DB", DEFAULT_DB)
        exclude_file = args.exclude or env.get("FSCATALOG_EXCLUDE") or None
        log_file = args.log or env.get("FSCATALOG_LOG", DEFAULT_LOG)
        if args.interval is not None:
            interval = args.interval
        else:
            interval = float(env.get("FSCATALOG_INTERVAL", DEFAULT_INTERVAL))

        return cls(
            roots=[os.path.abspath(root) for root in args.directories],
            db_path=db_path if db_path == ":memory:" else os.path.abspath(db_path),
            exclude_file=os.path.abspath(exclude_file) if exclude_file else None,
            log_file=os.path.abspath(log_file),
            interval=interval,
            print_errors=args.print_errors,
            retry_errors=args.retry,
            follow_symlinks=args.follow_symlinks,
            measure_speed=args.measure_speed,
            verbose=args.verbose,
        )
