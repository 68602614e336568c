"""
JSON file persistence adapter.

All keys live in a single JSON document on disk (the same shape browser
local storage has: key -> serialized string). Each write goes to its own
temporary file that then replaces the document, so a failed write keeps
the previous file.
"""

from __future__ import annotations

from pathlib import Path
import json
import logging
import os
import tempfile
import threading
from typing import Optional

from crm.repositories.storage import KeyValueStorage

logger = logging.getLogger(__name__)


class JsonFileStorage(KeyValueStorage):
    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        # Writing one key rewrites the whole document.
        self._write_lock = threading.Lock()

    def load(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            logger.warning("Could not read %s, treating as empty: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring %s: top-level value is not an object", self.path)
            return {}
        return data

    def save(self, db: dict) -> bool:
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=self.path.name + ".", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(db, f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            logger.warning("Could not write %s: %s", self.path, exc)
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            return False
        return True

    def read(self, key: str) -> Optional[str]:
        value = self.load().get(key)
        if value is None:
            return None
        if not isinstance(value, str):
            # Tolerate hand-edited files that store the array itself.
            return json.dumps(value, ensure_ascii=False)
        return value

    def write(self, key: str, blob: str) -> bool:
        with self._write_lock:
            db = self.load()
            db[key] = blob
            return self.save(db)
