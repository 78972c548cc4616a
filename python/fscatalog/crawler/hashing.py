"""
Streaming SHA-256 content hashing.

Provides:
- hash_stream(): digest of any binary stream, read in fixed-size chunks
- hash_file(): open + hash a path, surfacing failures as HashError
- Optional read/hash throughput measurement (diagnostic only)
"""

import hashlib
import logging
import time
from typing import BinaryIO

from .errors import ErrorKind, HashError

# Get logger instance
logger = logging.getLogger("fscatalog.hashing")

CHUNK_SIZE = 1024 * 1024  # 1 MiB

MB = 1024 * 1024


def hash_stream(stream: BinaryIO, chunk_size: int = CHUNK_SIZE) -> str:
    """
    Compute SHA-256 of a stream without loading it into memory.

    Args:
        stream: Binary stream positioned at the start of the content
        chunk_size: Bytes per read

    Returns:
        Hex digest (64 characters)
    """
    digest = hashlib.sha256()
    for chunk in iter(lambda: stream.read(chunk_size), b""):
        digest.update(chunk)
    return digest.hexdigest()


def _speed(size_mb: float, seconds: float) -> float:
    return size_mb / seconds if seconds > 0 else float("inf")


def hash_file(path: str, size: int = 0, measure: bool = False) -> str:
    """
    Hash a file's content.

    Args:
        path: File to read
        size: Size in bytes (used for throughput reporting only)
        measure: If True, time a full read pass and the hash pass and log MB/s

    Returns:
        Hex digest of the content

    Raises:
        HashError: If the file cannot be opened or read
    """
    try:
        f = open(path, "rb")
    except OSError as e:
        raise HashError(path, e, kind=ErrorKind.OPEN) from e

    with f:
        size_mb = size / MB

        if measure:
            read_start = time.perf_counter()
            try:
                for _ in iter(lambda: f.read(CHUNK_SIZE), b""):
                    pass
                f.seek(0)
            except OSError as e:
                raise HashError(path, e, kind=ErrorKind.READ) from e
            read_seconds = time.perf_counter() - read_start
            logger.info(
                f"Read speed for {path} [{size_mb:.2f} MB]: "
                f"{_speed(size_mb, read_seconds):.2f} MB/s"
            )

        hash_start = time.perf_counter()
        try:
            hex_digest = hash_stream(f)
        except OSError as e:
            raise HashError(path, e) from e

        if measure:
            hash_seconds = time.perf_counter() - hash_start
            logger.info(
                f"Hash speed for {path} [{size_mb:.2f} MB]: "
                f"{_speed(size_mb, hash_seconds):.2f} MB/s"
            )

    return hex_digest
