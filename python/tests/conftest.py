"""
Pytest configuration and fixtures for fscatalog tests.

Specialized fixtures are organized in the fixtures/ directory:
- fixtures.crawl: sample trees, storage and walker fixtures
"""

import logging

import pytest

# Load fixture modules
pytest_plugins = [
    "tests.fixtures.crawl",
]


@pytest.fixture
def storage_manager():
    """
    Provide a properly managed in-memory StorageManager for tests.

    Automatically closes the database connection after the test completes.
    """
    from fscatalog.storage import StorageManager

    storage = StorageManager(db_path=":memory:")
    yield storage
    storage.close()


@pytest.fixture
def clean_fscatalog_logger():
    """Remove handlers added to the fscatalog logger during a test."""
    logger = logging.getLogger("fscatalog")
    before = list(logger.handlers)
    level = logger.level
    yield logger
    for handler in list(logger.handlers):
        if handler not in before:
            handler.close()
            logger.removeHandler(handler)
    logger.setLevel(level)
