"""
fscatalog Storage Schema - Database initialization and setup.

Handles:
- Table creation (files, folders)
- Index creation
- WAL mode configuration
- Migration of catalogs written with the older column layout
"""

import sqlite3


class StorageError(Exception):
    """Raised when storage operations fail."""

    pass


def enable_wal(conn: sqlite3.Connection) -> None:
    """
    Enable Write-Ahead Logging tuned for a single long-running writer.

    The crawler commits after every record, so commits must be cheap:
    - SYNCHRONOUS = NORMAL is safe with WAL and skips the fsync per commit
    - Larger autocheckpoint keeps the WAL from being folded back too often
    - Busy timeout lets a concurrent reader (e.g. sqlite3 shell) coexist

    Args:
        conn: SQLite connection

    Raises:
        StorageError: If WAL mode cannot be enabled
    """
    cursor = conn.cursor()
    cursor.execute("PRAGMA journal_mode = WAL")
    mode = cursor.fetchone()[0]

    if not mode.upper() == "WAL":
        raise StorageError(
            f"Failed to enable WAL mode (got '{mode}'). This filesystem may not support WAL."
        )

    conn.execute("PRAGMA synchronous = NORMAL")

    # Default is 1000 pages (~4MB); 10000 pages is ~40MB
    conn.execute("PRAGMA wal_autocheckpoint = 10000")

    conn.execute("PRAGMA busy_timeout = 10000")

    conn.execute("PRAGMA temp_store = MEMORY")


def migrate_schema(conn: sqlite3.Connection) -> None:
    """
    Apply schema migrations to existing databases.

    Catalogs written by the first crawler generation stored the extension in
    a ``type`` column and a boolean ``dir`` flag instead of ``extension`` and
    ``kind``. CREATE TABLE IF NOT EXISTS leaves such tables alone, so the new
    columns are added here and backfilled from the old ones.

    Args:
        conn: SQLite connection
    """
    cursor = conn.cursor()

    def has_column(table: str, column: str) -> bool:
        cursor.execute(f"PRAGMA table_info({table})")
        return column in {row[1] for row in cursor.fetchall()}

    def table_exists(table: str) -> bool:
        cursor.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name=?",
            (table,)
        )
        return cursor.fetchone() is not None

    if not table_exists("files"):
        return  # Fresh database, created below with the current layout

    if not has_column("files", "extension"):
        cursor.execute("ALTER TABLE files ADD COLUMN extension TEXT")
        if has_column("files", "type"):
            cursor.execute("UPDATE files SET extension = type")

    if not has_column("files", "kind"):
        cursor.execute("ALTER TABLE files ADD COLUMN kind TEXT")
        if has_column("files", "dir"):
            cursor.execute("""
                UPDATE files SET kind = CASE
                    WHEN dir THEN 'dir'
                    WHEN symlink IS NOT NULL AND symlink != '' THEN 'symlink'
                    WHEN error LIKE 'FIFO%' THEN 'fifo'
                    ELSE 'file'
                END
            """)

    conn.commit()


def create_indexes(conn: sqlite3.Connection) -> None:
    """
    Create indexes for fast queries.

    Args:
        conn: SQLite connection
    """
    indexes = [
        # Supports later duplicate detection by content hash
        "CREATE INDEX IF NOT EXISTS hash_idx ON files(hash)",
        "CREATE INDEX IF NOT EXISTS idx_files_folder ON files(folder_id)",
        "CREATE INDEX IF NOT EXISTS idx_folders_parent ON folders(parent_id)",
    ]

    for index_sql in indexes:
        conn.execute(index_sql)


def initialize_schema(conn: sqlite3.Connection) -> None:
    """
    Create all tables if they don't exist.

    Args:
        conn: SQLite connection
    """
    # Folders table
    # parent_id is NULL only for the filesystem root
    conn.execute("""
        CREATE TABLE IF NOT EXISTS folders (
            id INTEGER PRIMARY KEY,
            path TEXT UNIQUE NOT NULL,
            parent_id INTEGER DEFAULT NULL REFERENCES folders(id)
        )
    """)

    # Files table, one row per absolute path
    conn.execute("""
        CREATE TABLE IF NOT EXISTS files (
            path TEXT PRIMARY KEY,
            name TEXT,
            extension TEXT,
            kind TEXT,
            creation_time TEXT,
            modification_time TEXT,
            hash TEXT,
            size INTEGER,
            symlink TEXT DEFAULT NULL,
            exclusion_pattern TEXT DEFAULT NULL,
            error TEXT DEFAULT NULL,
            folder_id INTEGER DEFAULT NULL REFERENCES folders(id)
        )
    """)

    # Apply migrations for existing databases (adds new columns if needed)
    migrate_schema(conn)

    create_indexes(conn)

    conn.commit()
