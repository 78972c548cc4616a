"""
fscatalog Storage Queries - Read-only database operations.

Handles:
- Point lookups used by the crawler (error memo, mtime shortcut, folder ids)
- Whole-table reads for reporting and tests
"""

import sqlite3
from typing import Optional

from .encoding import row_to_dict, to_sql_params
from .schema import StorageError


def _fetchone(conn: sqlite3.Connection, sql: str, params: tuple) -> Optional[sqlite3.Row]:
    try:
        return conn.execute(sql, to_sql_params(params)).fetchone()
    except (sqlite3.Error, UnicodeEncodeError) as e:
        raise StorageError(f"Query failed: {e}") from e


def get_entry(conn: sqlite3.Connection, path: str) -> Optional[dict]:
    """
    Get the stored record for a path.

    Args:
        conn: SQLite connection
        path: Absolute path

    Returns:
        Dict with all file columns, or None if the path was never indexed
    """
    row = _fetchone(conn, "SELECT * FROM files WHERE path = ?", (path,))
    return row_to_dict(row) if row else None


def get_stored_error(conn: sqlite3.Connection, path: str) -> Optional[str]:
    """
    Get the error message remembered for a path.

    Returns:
        The stored error text, or None if the path has no error row
    """
    row = _fetchone(
        conn,
        "SELECT error FROM files WHERE path = ? AND error IS NOT NULL",
        (path,),
    )
    return row_to_dict(row)["error"] if row else None


def get_indexed_mtime(conn: sqlite3.Connection, path: str) -> Optional[str]:
    """
    Get the modification time of a hash-bearing record.

    Rows without a hash (errors, exclusions, directories, unfollowed symlinks)
    are ignored: their stored modification time says nothing about a hash.

    Returns:
        ISO-8601 modification time, or None when there is no hashed row
    """
    row = _fetchone(
        conn,
        "SELECT modification_time FROM files WHERE path = ? AND hash IS NOT NULL",
        (path,),
    )
    return row["modification_time"] if row else None


def get_folder(conn: sqlite3.Connection, path: str) -> Optional[dict]:
    """Get a folder row (id, path, parent_id) by path."""
    row = _fetchone(conn, "SELECT id, path, parent_id FROM folders WHERE path = ?", (path,))
    return row_to_dict(row) if row else None


def get_folder_id(conn: sqlite3.Connection, path: str) -> Optional[int]:
    """Get the folder id for a directory path, or None if unknown."""
    row = _fetchone(conn, "SELECT id FROM folders WHERE path = ?", (path,))
    return row["id"] if row else None


def get_all_entries(conn: sqlite3.Connection) -> list[dict]:
    """
    Get all file records ordered by path.

    Returns:
        List of dicts with every file column
    """
    try:
        cursor = conn.execute("SELECT * FROM files ORDER BY path")
        return [row_to_dict(row) for row in cursor.fetchall()]
    except sqlite3.Error as e:
        raise StorageError(f"Query failed: {e}") from e


def get_all_folders(conn: sqlite3.Connection) -> list[dict]:
    """Get all folder rows ordered by id."""
    try:
        cursor = conn.execute("SELECT id, path, parent_id FROM folders ORDER BY id")
        return [row_to_dict(row) for row in cursor.fetchall()]
    except sqlite3.Error as e:
        raise StorageError(f"Query failed: {e}") from e


def count_entries(conn: sqlite3.Connection) -> dict[str, int]:
    """
    Count stored records by kind.

    Returns:
        Dict mapping kind -> row count
    """
    try:
        cursor = conn.execute("SELECT kind, COUNT(*) AS n FROM files GROUP BY kind")
        return {row["kind"]: row["n"] for row in cursor.fetchall()}
    except sqlite3.Error as e:
        raise StorageError(f"Query failed: {e}") from e
