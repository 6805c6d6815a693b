"""Deployment history persistence"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from ..api.exceptions import StorageError
from ..constants import DEFAULT_MAX_HISTORY_ENTRIES
from ..models.result import DeployHistoryEntry
from .json_store import JsonListStore

logger = logging.getLogger(__name__)


class HistoryStore:
    """Most-recent-first deployment history, capped at ``max_entries``"""

    def __init__(self, path: Union[str, Path],
                 max_entries: int = DEFAULT_MAX_HISTORY_ENTRIES):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")

        self.store = JsonListStore(path)
        self.max_entries = max_entries

    @property
    def path(self) -> Path:
        return self.store.path

    def list(self, limit: Optional[int] = None) -> List[DeployHistoryEntry]:
        """
        Load history entries, newest first

        Args:
            limit: Return at most this many entries

        Returns:
            Parsed entries; records that fail to parse are skipped
        """
        entries = []
        for record in self.store.load():
            try:
                entries.append(DeployHistoryEntry.from_dict(record))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping malformed history record: %s", e)

        return entries[:limit] if limit is not None else entries

    def add(self, entry: DeployHistoryEntry) -> bool:
        """
        Prepend an entry and drop the oldest beyond the cap

        Returns:
            True if history was written, False if saving failed (logged)
        """
        records = [entry.to_dict()] + self.store.load()
        try:
            self.store.save(records[:self.max_entries])
        except StorageError as e:
            logger.warning("Failed to save deploy history: %s", e)
            return False
        return True

    def clear(self) -> None:
        """Remove every entry

        Raises:
            StorageError: If the file cannot be written
        """
        self.store.save([])
