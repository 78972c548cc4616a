"""
fscatalog Storage Manager - Main SQLite database manager.

Provides high-level interface to storage operations while delegating to
schema, queries, and mutations modules.
"""

import sqlite3
from pathlib import Path
from typing import Any, Optional

from . import mutations, queries
from .schema import StorageError, enable_wal, initialize_schema


class StorageManager:
    """
    Manages the SQLite catalog of file entries and folders.

    Features:
    - WAL mode so every per-record commit stays cheap
    - Foreign keys (files.folder_id, folders.parent_id)
    - Insert-or-replace semantics for file entries
    """

    def __init__(self, db_path: str = "index.sqlite"):
        """
        Initialize storage with WAL mode and schema.

        Args:
            db_path: Path to SQLite database (use ":memory:" for testing)

        Raises:
            StorageError: If the database cannot be opened or initialized
        """
        self.db_path = db_path
        if db_path != ":memory:":
            try:
                Path(db_path).parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise StorageError(f"Could not create directory for catalog {db_path}: {e}") from e

        try:
            # check_same_thread=False: the CLI runs the walk in a worker thread
            # via asyncio.to_thread while the connection is created on the main one
            self.conn = sqlite3.connect(db_path, check_same_thread=False)
            self.conn.row_factory = sqlite3.Row

            self.conn.execute("PRAGMA foreign_keys = ON")

            if db_path != ":memory:":
                enable_wal(self.conn)
                self.conn.execute("PRAGMA cache_size = -64000")  # 64MB cache

            initialize_schema(self.conn)
        except sqlite3.Error as e:
            raise StorageError(f"Could not open catalog {db_path}: {e}") from e

    # File entry operations

    def upsert_entry(self, entry: Any) -> None:
        """
        Insert or replace the record for entry.path.

        Args:
            entry: FileEntry (or any object with the same attributes)
        """
        mutations.upsert_entry(self.conn, entry)

    def get_entry(self, path: str) -> Optional[dict]:
        """Get the stored record for a path."""
        return queries.get_entry(self.conn, path)

    def get_stored_error(self, path: str) -> Optional[str]:
        """Get the error remembered for a path, if any."""
        return queries.get_stored_error(self.conn, path)

    def get_indexed_mtime(self, path: str) -> Optional[str]:
        """Get the modification time of a hash-bearing record."""
        return queries.get_indexed_mtime(self.conn, path)

    def get_all_entries(self) -> list[dict]:
        """Get all file records ordered by path."""
        return queries.get_all_entries(self.conn)

    def count_entries(self) -> dict[str, int]:
        """Count stored records by kind."""
        return queries.count_entries(self.conn)

    # Folder operations

    def get_folder_id(self, path: str) -> Optional[int]:
        """Get folder id by directory path."""
        return queries.get_folder_id(self.conn, path)

    def get_folder(self, path: str) -> Optional[dict]:
        """Get folder row by directory path."""
        return queries.get_folder(self.conn, path)

    def insert_folder(self, path: str, parent_id: Optional[int]) -> int:
        """Insert a folder and return its id."""
        return mutations.insert_folder(self.conn, path, parent_id)

    def get_all_folders(self) -> list[dict]:
        """Get all folder rows ordered by id."""
        return queries.get_all_folders(self.conn)

    def optimize(self) -> None:
        """
        Run database optimizations after a crawl.

        - PRAGMA optimize: Updates query planner statistics
        - wal_checkpoint(TRUNCATE): Clears WAL file for clean state
        """
        self.conn.execute("PRAGMA optimize")
        if self.db_path != ":memory:":
            self.conn.execute("PRAGMA wal_checkpoint(TRUNCATE)")

    def close(self):
        """Close database connection."""
        if self.conn:
            self.conn.close()
            self.conn = None

    def __enter__(self):
        """Context manager support."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager support."""
        self.close()
