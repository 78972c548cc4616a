"""
Crawl fixtures for test_walker*.py, test_folders.py and test_cli.py tests.
"""
import hashlib
import os

import pytest


def sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


@pytest.fixture
def sample_tree(tmp_path):
    """
    Create a small tree:

        tree/
          a.txt          "alpha"
          b.log          "hello"
          docs/
            readme.md    "# docs"
            notes.txt    "notes"
          logs/
            app.log      "log line"
    """
    root = tmp_path / "tree"
    (root / "docs").mkdir(parents=True)
    (root / "logs").mkdir()
    (root / "a.txt").write_text("alpha")
    (root / "b.log").write_text("hello")
    (root / "docs" / "readme.md").write_text("# docs")
    (root / "docs" / "notes.txt").write_text("notes")
    (root / "logs" / "app.log").write_text("log line")
    return root


@pytest.fixture
def walker_factory(storage_manager):
    """Build TreeWalkers sharing the test's in-memory storage."""
    from fscatalog.crawler import TreeWalker

    def _make(**kwargs):
        return TreeWalker(storage_manager, **kwargs)

    return _make


@pytest.fixture
def hash_calls(monkeypatch):
    """Record every path the walker hashes (hashing still happens)."""
    from fscatalog.crawler import walker as walker_module

    calls = []
    real_hash_file = walker_module.hash_file

    def _counting_hash_file(path, size=0, measure=False):
        calls.append(path)
        return real_hash_file(path, size, measure=measure)

    monkeypatch.setattr(walker_module, "hash_file", _counting_hash_file)
    return calls


@pytest.fixture
def fifo_supported():
    """Skip the test on platforms without named pipes."""
    if not hasattr(os, "mkfifo"):
        pytest.skip("os.mkfifo not available on this platform")
