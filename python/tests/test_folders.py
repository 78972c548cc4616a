"""
Test folder identity resolution.
"""

from unittest.mock import MagicMock

import pytest

from fscatalog.crawler import FolderIndex
from fscatalog.crawler.errors import ErrorKind, FolderResolutionError
from fscatalog.storage import StorageError


def folder_rows(storage):
    return {f["path"]: f for f in storage.get_all_folders()}


class TestResolve:
    """Chains are created down from the filesystem root."""

    def test_creates_full_parent_chain(self, storage_manager):
        index = FolderIndex(storage_manager)

        folder_id = index.resolve("/srv/data/photos")

        rows = folder_rows(storage_manager)
        assert set(rows) == {"/", "/srv", "/srv/data", "/srv/data/photos"}
        assert rows["/"]["parent_id"] is None
        assert rows["/srv"]["parent_id"] == rows["/"]["id"]
        assert rows["/srv/data"]["parent_id"] == rows["/srv"]["id"]
        assert rows["/srv/data/photos"]["parent_id"] == rows["/srv/data"]["id"]
        assert folder_id == rows["/srv/data/photos"]["id"]

    def test_root_has_no_parent(self, storage_manager):
        index = FolderIndex(storage_manager)

        root_id = index.resolve("/")

        assert storage_manager.get_folder("/") == {"id": root_id, "path": "/", "parent_id": None}

    def test_reuses_existing_ancestors(self, storage_manager):
        index = FolderIndex(storage_manager)
        index.resolve("/srv/data")
        created_before = index.created

        index.resolve("/srv/data/music")

        assert index.created == created_before + 1
        rows = folder_rows(storage_manager)
        assert rows["/srv/data/music"]["parent_id"] == rows["/srv/data"]["id"]

    def test_parent_chain_is_acyclic_and_reaches_root(self, storage_manager):
        index = FolderIndex(storage_manager)
        index.resolve("/a/b/c/d/e")

        by_id = {f["id"]: f for f in storage_manager.get_all_folders()}
        current = storage_manager.get_folder("/a/b/c/d/e")
        seen = set()
        while current["parent_id"] is not None:
            assert current["id"] not in seen
            seen.add(current["id"])
            current = by_id[current["parent_id"]]
        assert current["path"] == "/"


class TestIdempotence:
    """Resolving the same directory twice never inserts twice."""

    def test_same_id_twice(self, storage_manager):
        index = FolderIndex(storage_manager)

        first = index.resolve("/srv/data")
        second = index.resolve("/srv/data")

        assert first == second
        assert len(storage_manager.get_all_folders()) == 3

    def test_new_instance_finds_stored_folders(self, storage_manager):
        first = FolderIndex(storage_manager).resolve("/srv/data")

        fresh = FolderIndex(storage_manager)
        second = fresh.resolve("/srv/data")

        assert first == second
        assert fresh.created == 0

    def test_cache_avoids_storage_round_trips(self, storage_manager):
        index = FolderIndex(storage_manager)
        index.resolve("/srv/data")

        index.storage = MagicMock(wraps=storage_manager)
        index.resolve("/srv/data")

        index.storage.get_folder_id.assert_not_called()
        index.storage.insert_folder.assert_not_called()


class TestFailures:
    """Storage errors surface as FolderResolutionError."""

    def test_lookup_failure(self):
        storage = MagicMock()
        storage.get_folder_id.side_effect = StorageError("disk I/O error")

        with pytest.raises(FolderResolutionError) as exc_info:
            FolderIndex(storage).resolve("/srv/data")

        assert exc_info.value.kind == ErrorKind.FOLDER_RESOLUTION
        assert exc_info.value.message == "getting folder ID: disk I/O error"

    def test_insert_failure(self):
        storage = MagicMock()
        storage.get_folder_id.return_value = None
        storage.insert_folder.side_effect = StorageError("database is locked")

        with pytest.raises(FolderResolutionError):
            FolderIndex(storage).resolve("/srv")
