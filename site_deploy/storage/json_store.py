# site_deploy/storage/json_store.py
"""JSON array files rewritten as a whole"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

from ..api.exceptions import StorageError
from ..utils.file_utils import atomic_write

logger = logging.getLogger(__name__)


class JsonListStore:
    """A list of JSON objects kept in a single file

    Every save replaces the whole file through an atomic rename. Writers in
    different processes are not coordinated: the last one to save wins.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> List[Dict[str, Any]]:
        """
        Read all records

        A missing file is an empty list. An unreadable or malformed file is
        logged and also treated as empty.
        """
        if not self.path.exists():
            return []

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Could not read %s: %s", self.path, e)
            return []

        if not isinstance(data, list):
            logger.warning("Ignoring %s: expected a JSON array, got %s",
                           self.path, type(data).__name__)
            return []

        return [item for item in data if isinstance(item, dict)]

    def save(self, records: List[Dict[str, Any]]) -> None:
        """
        Replace all records

        Raises:
            StorageError: If the file cannot be written
        """
        try:
            atomic_write(self.path, json.dumps(records, indent=2, ensure_ascii=False))
        except (OSError, TypeError, ValueError) as e:
            raise StorageError(f"Could not write {self.path}: {e}") from e
