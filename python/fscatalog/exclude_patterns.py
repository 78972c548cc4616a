"""
Exclusion pattern loading and path matching.

Patterns use a small gitignore-like language matched against absolute paths:

- ``*.txt``      no separator: matched against the basename only
- ``/tmp/*``     leading separator: anchored at the filesystem root
- ``logs/*.txt`` interior separator: matched at any depth, component by component
- ``.git/``      trailing separator: the directory itself and everything below it

Every component is compared with shell glob syntax (``*``, ``?``, ``[...]``).
"""

import logging
import os
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Optional

logger = logging.getLogger("fscatalog.exclude_patterns")

SEPARATOR = "/"

# SQLite writes these next to the catalog while it is open
SQLITE_SIDECAR_SUFFIXES = ("-wal", "-shm", "-journal")


def load_exclude_patterns(exclude_file: Optional[Path]) -> list[str]:
    """
    Load exclusion patterns from a file.

    Args:
        exclude_file: Path to the pattern file, or None for no patterns

    Returns:
        Patterns in file order (empty if the file is missing or unreadable)
    """
    if exclude_file is None:
        return []

    try:
        content = Path(exclude_file).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Could not read exclude file {exclude_file}: {e}")
        return []

    patterns = [
        line.strip()
        for line in content.splitlines()
        if line.strip() and not line.strip().startswith("#")
    ]

    logger.info(f"📋 Loaded {len(patterns)} exclusion patterns from {exclude_file}")
    return patterns


def own_output_patterns(db_path: Optional[str], log_path: Optional[str]) -> list[str]:
    """
    Anchored patterns that keep the crawler from indexing its own output.

    Args:
        db_path: Absolute catalog path (None or ":memory:" contributes nothing)
        log_path: Absolute log file path

    Returns:
        List of anchored patterns
    """
    patterns: list[str] = []
    if db_path and db_path != ":memory:":
        patterns.append(db_path)
        patterns.extend(f"{db_path}{suffix}" for suffix in SQLITE_SIDECAR_SUFFIXES)
    if log_path:
        patterns.append(log_path)
        # Backups from the midnight rotation: errors.log.YYYY-MM-DD
        patterns.append(f"{log_path}.*")
    return patterns


def _glob(pattern: str, name: str) -> bool:
    # Accept both [!...] and [^...] for negated character classes
    return fnmatchcase(name, pattern.replace("[^", "[!"))


def _components_match(pattern_parts: list[str], path_parts: list[str]) -> bool:
    """Positional glob match of pattern components against leading path components."""
    if len(path_parts) < len(pattern_parts):
        return False
    return all(_glob(p, c) for p, c in zip(pattern_parts, path_parts))


def path_matches(pattern: str, path: str) -> bool:
    """
    Check whether a single pattern matches a path.

    Args:
        pattern: Exclusion pattern
        path: Path to test (normally absolute, "/" separated)

    Returns:
        True if the pattern matches
    """
    # Directory marker: the directory itself or anything inside it
    if pattern.endswith(SEPARATOR) and pattern != SEPARATOR:
        bare = pattern[:-1]
        return path_matches(bare, path) or path_matches(pattern + "*", path)

    if SEPARATOR not in pattern:
        return _glob(pattern, os.path.basename(path))

    path_parts = path.split(SEPARATOR)
    if path_parts[0] == "":
        path_parts = path_parts[1:]
    pattern_parts = pattern.split(SEPARATOR)

    # Anchored at the root
    if pattern_parts[0] == "":
        return _components_match(pattern_parts[1:], path_parts)

    # Unanchored: try every window
    for start in range(len(path_parts) - len(pattern_parts) + 1):
        if _components_match(pattern_parts, path_parts[start:]):
            return True
    return False


def is_excluded(path: str, patterns: list[str]) -> tuple[bool, Optional[str]]:
    """
    Check a path against an ordered list of exclusion patterns.

    Args:
        path: Path to test
        patterns: Patterns in priority order

    Returns:
        (True, first matching pattern) or (False, None)
    """
    for pattern in patterns:
        if path_matches(pattern, path):
            return True, pattern
    return False, None
