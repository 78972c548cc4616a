"""
Folder identity resolution.

Every directory that contains a catalogued entry gets a row in ``folders``,
linked to its parent up to the filesystem root. Missing ancestors are created
on demand, so there are never orphaned folder rows.
"""

import logging
import os
from typing import Optional

from ..storage import StorageError, StorageManager
from .errors import FolderResolutionError

logger = logging.getLogger("fscatalog.folders")


class FolderIndex:
    """
    Resolves directory paths to folder ids.

    An in-memory cache (path -> id) sits in front of the storage lookups so a
    directory's id is fetched at most once per walk, however many children it has.
    """

    def __init__(self, storage: StorageManager):
        self.storage = storage
        self._cache: dict[str, int] = {}
        self.created = 0  # Folder rows inserted by this instance

    def _known_id(self, path: str) -> Optional[int]:
        folder_id = self._cache.get(path)
        if folder_id is None:
            folder_id = self.storage.get_folder_id(path)
            if folder_id is not None:
                self._cache[path] = folder_id
        return folder_id

    def resolve(self, directory: str) -> int:
        """
        Get the folder id for a directory, creating it and its ancestors if needed.

        Args:
            directory: Absolute directory path

        Returns:
            Folder id (the same id on every call for the same path)

        Raises:
            FolderResolutionError: If storage fails while looking up or inserting
        """
        cached = self._cache.get(directory)
        if cached is not None:
            return cached

        try:
            # Climb until a known folder (or the root) is reached.
            # The loop runs at most once per path component.
            missing: list[str] = []
            parent_id: Optional[int] = None
            current = directory
            while True:
                folder_id = self._known_id(current)
                if folder_id is not None:
                    parent_id = folder_id
                    break
                missing.append(current)
                parent = os.path.dirname(current)
                if parent == current:
                    break  # filesystem root, stored without a parent
                current = parent

            for path in reversed(missing):
                parent_id = self.storage.insert_folder(path, parent_id)
                self._cache[path] = parent_id
                self.created += 1
                logger.debug(f"📁 New folder {path} (id={parent_id})")
        except StorageError as e:
            raise FolderResolutionError(directory, e) from e

        return self._cache[directory]
