"""
fscatalog Storage Layer - SQLite

Persists file entries and the folder hierarchy built during a crawl.

Re-exports the main StorageManager class and StorageError exception:
    from fscatalog.storage import StorageManager, StorageError
"""

from .manager import StorageManager
from .schema import StorageError

__all__ = ["StorageManager", "StorageError"]
