"""
Remembered failures.

An entry whose stored record carries an error is skipped on later walks until
the user asks for a retry.
"""

import logging

from ..storage import StorageError, StorageManager

logger = logging.getLogger("fscatalog.error_memo")


class ErrorMemo:
    """Answers "did this path fail before, and should it be skipped now?"."""

    def __init__(self, storage: StorageManager, retry_errors: bool = False):
        self.storage = storage
        self.retry_errors = retry_errors

    def should_skip(self, path: str) -> bool:
        """
        Args:
            path: Absolute entry path

        Returns:
            True if the path has a stored error and retry is disabled
        """
        if self.retry_errors:
            return False

        try:
            stored_error = self.storage.get_stored_error(path)
        except StorageError as e:
            # Unknown is treated as "no remembered error": the entry is re-evaluated
            logger.warning(f"Could not look up stored error for {path}: {e}")
            return False

        if stored_error is not None:
            logger.debug(f"⏭️  Skipping {path} (previous error: {stored_error})")
            return True
        return False
