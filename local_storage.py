import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Union

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when the habit data file cannot be read or written."""


class LocalHabitStorage:
    """Local JSON file storage for the whole tracker document"""

    def __init__(self, storage_file: Union[str, Path] = "habits-data.json"):
        self.storage_file = Path(storage_file).expanduser()

    def exists(self) -> bool:
        return self.storage_file.exists()

    def read(self) -> Dict[str, Any]:
        """Load the document from the JSON file"""
        try:
            with open(self.storage_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            raise StorageError(f"Error loading {self.storage_file}: {e}") from e

        if not isinstance(data, dict):
            raise StorageError(
                f"Error loading {self.storage_file}: expected a JSON object, "
                f"got {type(data).__name__}"
            )
        return data

    def write(self, document: Dict[str, Any]) -> None:
        """Overwrite the JSON file with ``document``"""
        tmp_file = self.storage_file.with_name(self.storage_file.name + ".tmp")
        try:
            self.storage_file.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_file, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2, ensure_ascii=False, default=str)
            os.replace(tmp_file, self.storage_file)
        except (OSError, TypeError, ValueError) as e:
            try:
                tmp_file.unlink(missing_ok=True)
            except OSError as cleanup_error:
                logger.warning("Could not remove %s: %s", tmp_file, cleanup_error)
            raise StorageError(f"Error saving {self.storage_file}: {e}") from e
        logger.debug("Saved %d habits to %s", len(document.get("habits", [])), self.storage_file)
