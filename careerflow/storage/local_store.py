"""
Local key-value storage for CareerFlow.

Each key is stored as one JSON file under the storage directory. Reads and
writes are synchronous and best-effort: failures are logged and never raised
to the caller, so a broken disk never blocks the in-memory state.
"""

import json
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class LocalStore:
    """Durable local storage, one JSON document per key."""

    def __init__(self, root_dir: Union[str, Path] = "data/storage"):
        """Initialize the store rooted at ``root_dir`` (created lazily on write)."""
        self.root_dir = Path(root_dir)

    def _path(self, key: str) -> Path:
        return self.root_dir / f"{_UNSAFE_CHARS.sub('_', key)}.json"

    def _read(self, key: str) -> Optional[Any]:
        path = self._path(key)
        if not path.exists():
            return None
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)

    def _write(self, key: str, value: Any) -> None:
        text = json.dumps(value, ensure_ascii=False)
        self.root_dir.mkdir(parents=True, exist_ok=True)
        # Write to a sibling temp file, then swap it in
        fd, tmp_path = tempfile.mkstemp(dir=self.root_dir, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
            os.replace(tmp_path, self._path(key))
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise

    def contains(self, key: str) -> bool:
        return self._path(key).exists()

    # Collection blobs
    def load(self, key: str) -> List[Dict[str, Any]]:
        """Load the record list stored under ``key``; empty on missing or malformed data."""
        try:
            value = self._read(key)
        except (OSError, ValueError) as e:
            logger.error(f"Error reading local storage key '{key}': {e}")
            return []

        if value is None:
            return []
        if not isinstance(value, list):
            logger.error(f"Local storage key '{key}' does not hold a list, ignoring it")
            return []
        return value

    def save(self, key: str, records: List[Dict[str, Any]]) -> None:
        """Persist the full record list under ``key``; failures are logged only."""
        try:
            self._write(key, list(records))
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Local storage save failed for '{key}': {e}")

    # Plain string settings
    def get_item(self, key: str) -> Optional[str]:
        try:
            value = self._read(key)
        except (OSError, ValueError) as e:
            logger.error(f"Error reading local storage key '{key}': {e}")
            return None
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        try:
            self._write(key, value)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Local storage save failed for '{key}': {e}")

    def remove_item(self, key: str) -> None:
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as e:
            logger.error(f"Failed to remove local storage key '{key}': {e}")
