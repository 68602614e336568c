"""Bounded, newest-first activity trail written as a side effect of mutations."""
from __future__ import annotations

import logging
from typing import Optional

from crm.core.clock import Clock
from crm.domain.models import Activity
from crm.repositories.storage import ACTIVITIES_KEY, CollectionStore

logger = logging.getLogger(__name__)

DEFAULT_ACTIVITY_LIMIT = 100


class ActivityLog:
    """Ring log of Activity entries; only repositories call ``record``."""

    def __init__(self, store: CollectionStore, clock: Clock, limit: int = DEFAULT_ACTIVITY_LIMIT) -> None:
        self.store = store
        self.clock = clock
        self.limit = max(1, limit)

    def list(self) -> list[Activity]:
        activities: list[Activity] = []
        for raw in self.store.load(ACTIVITIES_KEY):
            try:
                activities.append(Activity.from_dict(raw))
            except (ValueError, TypeError) as exc:
                logger.debug("Skipping malformed activity %r: %s", raw.get("id"), exc)
        return activities

    def record(
        self,
        type: str,
        title: str,
        description: str,
        *,
        customer_id: Optional[str] = None,
        task_id: Optional[str] = None,
    ) -> Activity:
        activity = Activity(
            id=self.clock.new_id(),
            type=type,
            title=title,
            description=description,
            timestamp=self.clock.timestamp(),
            customer_id=customer_id,
            task_id=task_id,
        )
        with self.store.lock:
            # Raw entries are kept as stored so unknown fields survive the rewrite.
            entries = self.store.load(ACTIVITIES_KEY)
            entries.insert(0, activity.to_dict())
            dropped = len(entries) - self.limit
            if dropped > 0:
                del entries[self.limit:]
                logger.debug("Activity log over capacity, dropped %d oldest entries", dropped)
            # The entity write already landed; a lost audit entry is only logged.
            self.store.save(ACTIVITIES_KEY, entries)
        return activity
