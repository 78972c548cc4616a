"""
Test streaming SHA-256 hashing.
"""

import hashlib
import io

import pytest

from fscatalog.crawler import hashing
from fscatalog.crawler.errors import ErrorKind, HashError
from fscatalog.crawler.hashing import hash_file, hash_stream


class TestHashStream:
    def test_known_digest(self):
        assert hash_stream(io.BytesIO(b"hello")) == hashlib.sha256(b"hello").hexdigest()

    def test_empty_stream(self):
        assert hash_stream(io.BytesIO(b"")) == hashlib.sha256(b"").hexdigest()

    def test_multi_chunk_content(self):
        data = bytes(range(256)) * 1000
        assert hash_stream(io.BytesIO(data), chunk_size=4096) == hashlib.sha256(data).hexdigest()

    def test_digest_is_64_hex_chars(self):
        digest = hash_stream(io.BytesIO(b"x"))
        assert len(digest) == 64
        int(digest, 16)


class TestHashFile:
    def test_matches_hashlib(self, tmp_path):
        path = tmp_path / "b.log"
        path.write_bytes(b"hello")

        assert hash_file(str(path), 5) == hashlib.sha256(b"hello").hexdigest()

    def test_missing_file_raises_open_error(self, tmp_path):
        missing = str(tmp_path / "gone.bin")

        with pytest.raises(HashError) as exc_info:
            hash_file(missing)

        assert exc_info.value.kind == ErrorKind.OPEN
        assert exc_info.value.message.startswith("opening file: ")
        assert exc_info.value.path == missing

    def test_read_failure_raises_hash_error(self, tmp_path, monkeypatch):
        path = tmp_path / "flaky.bin"
        path.write_bytes(b"data")

        def failing_stream(stream, chunk_size=hashing.CHUNK_SIZE):
            raise OSError(5, "Input/output error")

        monkeypatch.setattr(hashing, "hash_stream", failing_stream)

        with pytest.raises(HashError) as exc_info:
            hash_file(str(path), 4)

        assert exc_info.value.kind == ErrorKind.HASH
        assert "Input/output error" in exc_info.value.message


class TestSpeedMeasurement:
    """Instrumentation logs throughput but never changes the digest."""

    def test_same_digest_with_measurement(self, tmp_path):
        path = tmp_path / "big.bin"
        data = b"0123456789" * 300_000
        path.write_bytes(data)

        plain = hash_file(str(path), len(data))
        measured = hash_file(str(path), len(data), measure=True)

        assert plain == measured == hashlib.sha256(data).hexdigest()

    def test_logs_read_and_hash_speed(self, tmp_path, caplog):
        path = tmp_path / "small.bin"
        path.write_bytes(b"abc")

        with caplog.at_level("INFO", logger="fscatalog"):
            hash_file(str(path), 3, measure=True)

        assert "Read speed for" in caplog.text
        assert "Hash speed for" in caplog.text
        assert "MB/s" in caplog.text

    def test_no_logging_without_measurement(self, tmp_path, caplog):
        path = tmp_path / "small.bin"
        path.write_bytes(b"abc")

        with caplog.at_level("INFO", logger="fscatalog"):
            hash_file(str(path), 3)

        assert "speed" not in caplog.text
