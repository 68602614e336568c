"""Key-value storage backed by SQLAlchemy (one row per collection key)."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from crm.db.models import KeyValueEntry
from crm.db.session import get_session
from crm.repositories.storage import KeyValueStorage

logger = logging.getLogger(__name__)


class SQLKeyValueStorage(KeyValueStorage):
    """Stores each serialized collection in ``kv_entries``; each write is its own commit."""

    def read(self, key: str) -> Optional[str]:
        try:
            with get_session() as session:
                entry = session.get(KeyValueEntry, key)
                return entry.value if entry else None
        except SQLAlchemyError as exc:
            logger.warning("SQL storage unavailable reading %s: %s", key, exc)
            return None

    def write(self, key: str, blob: str) -> bool:
        now = datetime.now(timezone.utc)
        try:
            with get_session() as session:
                entry = session.get(KeyValueEntry, key)
                if not entry:
                    session.add(KeyValueEntry(key=key, value=blob, updated_at=now))
                else:
                    entry.value = blob
                    entry.updated_at = now
                session.commit()
        except SQLAlchemyError as exc:
            logger.warning("SQL storage rejected write for %s: %s", key, exc)
            return False
        return True
