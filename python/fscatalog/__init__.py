"""
fscatalog - incremental filesystem catalog.

Walks directory trees and records every entry (with a SHA-256 hash for
regular files) in a SQLite database, re-hashing only what changed.
"""

__version__ = "0.1.0"
