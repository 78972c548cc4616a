"""
Text values that SQLite cannot bind as TEXT.

On POSIX, names that are not valid UTF-8 reach Python as str with surrogate
escapes. sqlite3 refuses to encode those, so they are stored as the raw
filesystem bytes (a BLOB) and decoded back with the same escapes on read.
Valid names are stored as plain TEXT.
"""

import os
import sqlite3
from typing import Any


def to_sql(value: Any) -> Any:
    """Convert one bound parameter, leaving everything but unencodable str alone."""
    if not isinstance(value, str):
        return value
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return os.fsencode(value)
    return value


def to_sql_params(params: tuple) -> tuple:
    return tuple(to_sql(value) for value in params)


def row_to_dict(row: sqlite3.Row) -> dict:
    """Row -> dict, decoding BLOB-stored names back to str."""
    return {
        key: os.fsdecode(value) if isinstance(value, bytes) else value
        for key, value in zip(row.keys(), row)
    }
