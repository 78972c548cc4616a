"""
fscatalog Storage Mutations - Write database operations.

Handles:
- File entry upserts (insert or replace by path)
- Folder inserts
"""

import sqlite3
from typing import Any, Optional

from .encoding import to_sql_params
from .schema import StorageError


ENTRY_COLUMNS = (
    "path",
    "name",
    "extension",
    "kind",
    "creation_time",
    "modification_time",
    "hash",
    "size",
    "symlink",
    "exclusion_pattern",
    "error",
    "folder_id",
)


def upsert_entry(conn: sqlite3.Connection, entry: Any) -> None:
    """
    Insert or replace a file entry record.

    The write always fully supersedes any existing row for the same path,
    so every column is written, including NULLs.

    Args:
        conn: SQLite connection
        entry: FileEntry (or anything whose to_dict() has the ENTRY_COLUMNS keys)

    Raises:
        StorageError: If the row cannot be written
    """
    record = entry.to_dict()
    placeholders = ", ".join("?" for _ in ENTRY_COLUMNS)
    try:
        values = to_sql_params(tuple(record[column] for column in ENTRY_COLUMNS))
        conn.execute(
            f"INSERT OR REPLACE INTO files ({', '.join(ENTRY_COLUMNS)}) "
            f"VALUES ({placeholders})",
            values,
        )
        conn.commit()
    except (sqlite3.Error, UnicodeEncodeError) as e:
        raise StorageError(f"Failed to write entry {entry.path}: {e}") from e


def insert_folder(
    conn: sqlite3.Connection, path: str, parent_id: Optional[int]
) -> int:
    """
    Insert a folder row and return its surrogate id.

    Args:
        conn: SQLite connection
        path: Absolute directory path (unique)
        parent_id: Id of the parent folder, None only for the filesystem root

    Returns:
        The new folder id

    Raises:
        StorageError: If the row cannot be written (including duplicate paths)
    """
    try:
        cursor = conn.execute(
            "INSERT INTO folders (path, parent_id) VALUES (?, ?)",
            to_sql_params((path, parent_id)),
        )
        conn.commit()
    except (sqlite3.Error, UnicodeEncodeError) as e:
        raise StorageError(f"Failed to insert folder {path}: {e}") from e
    return cursor.lastrowid
