"""Key-value storage contract and the collection layer built on it."""
from __future__ import annotations

import json
import logging
import threading
from typing import Any, Optional

from crm.domain.models import CrmError

logger = logging.getLogger(__name__)

CUSTOMERS_KEY = "crm_customers"
TASKS_KEY = "crm_tasks"
ACTIVITIES_KEY = "crm_activities"


class StorageError(CrmError):
    """Raised by repositories when a mutated collection could not be persisted."""

    def __init__(self, key: str):
        super().__init__(f"Could not persist {key}")
        self.key = key


class KeyValueStorage:
    """Whole-blob key-value store, the server-side stand-in for browser local storage.

    ``read`` returns None when the key is absent or the backend is unavailable;
    ``write`` returns False instead of raising when the blob could not be stored.
    """

    def read(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def write(self, key: str, blob: str) -> bool:
        raise NotImplementedError


class MemoryStorage(KeyValueStorage):
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def read(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def write(self, key: str, blob: str) -> bool:
        self._data[key] = blob
        return True


class CollectionStore:
    """Reads and writes entity collections as JSON arrays under fixed keys.

    ``lock`` is shared by every repository built on this store; each
    load-modify-save cycle runs while holding it.
    """

    def __init__(self, storage: KeyValueStorage) -> None:
        self.storage = storage
        self.lock = threading.RLock()

    def load(self, key: str) -> list[dict[str, Any]]:
        blob = self.storage.read(key)
        if blob is None or blob == "":
            return []
        try:
            data = json.loads(blob)
        except (TypeError, ValueError) as exc:
            logger.warning("Discarding unreadable collection %s: %s", key, exc)
            return []
        if not isinstance(data, list):
            logger.warning("Discarding collection %s: expected a JSON array, got %s", key, type(data).__name__)
            return []
        records = [item for item in data if isinstance(item, dict)]
        if len(records) != len(data):
            logger.debug("Skipped %d non-object entries in %s", len(data) - len(records), key)
        return records

    def save(self, key: str, records: list[dict[str, Any]]) -> bool:
        # Serialize first so a bad record never reaches the backend half-written.
        try:
            blob = json.dumps(records, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            logger.warning("Refusing to persist %s: %s", key, exc)
            return False
        ok = self.storage.write(key, blob)
        if not ok:
            logger.warning("Storage rejected write for %s; previous data kept", key)
        return ok

    def save_or_raise(self, key: str, records: list[dict[str, Any]]) -> None:
        if not self.save(key, records):
            raise StorageError(key)


COLLECTION_KEYS = (CUSTOMERS_KEY, TASKS_KEY, ACTIVITIES_KEY)


def copy_collections(source: KeyValueStorage, target: KeyValueStorage, keys=COLLECTION_KEYS) -> list[str]:
    """Copy raw blobs key by key; returns the keys that were written."""
    copied: list[str] = []
    for key in keys:
        blob = source.read(key)
        if blob is None:
            continue
        if target.write(key, blob):
            copied.append(key)
        else:
            logger.warning("Copy of %s failed", key)
    return copied
