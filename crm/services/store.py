"""Wires storage, clock and repositories into one handle passed to callers."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from crm.core.clock import Clock
from crm.core.config import Settings, get_settings
from crm.repositories.activity_log import DEFAULT_ACTIVITY_LIMIT, ActivityLog
from crm.repositories.customer_repository import CustomerRepository
from crm.repositories.json_storage import JsonFileStorage
from crm.repositories.storage import CollectionStore, KeyValueStorage, MemoryStorage
from crm.repositories.task_repository import TaskRepository
from crm.services import dashboard as views
from crm.services import filters

logger = logging.getLogger(__name__)


class CrmStore:
    """Customers, tasks and the activity log sharing one storage backend and clock."""

    def __init__(
        self,
        storage: KeyValueStorage,
        clock: Optional[Clock] = None,
        activity_limit: int = DEFAULT_ACTIVITY_LIMIT,
        tz: Optional[ZoneInfo] = None,
    ) -> None:
        self.storage = storage
        self.clock = clock or Clock()
        self.tz = tz
        collections = CollectionStore(storage)
        self.activities = ActivityLog(collections, self.clock, limit=activity_limit)
        self.tasks = TaskRepository(collections, self.clock, self.activities)
        self.customers = CustomerRepository(collections, self.clock, self.activities, self.tasks)
        self.tasks.customer_exists = self.customers.exists

    def now(self) -> datetime:
        current = self.clock.now()
        return current.astimezone(self.tz) if self.tz else current

    def dashboard(self) -> dict:
        now = self.now()
        customers = self.customers.list()
        tasks = self.tasks.list()
        return {
            "stats": views.dashboard_stats(customers, tasks, now),
            "upcoming_tasks": views.upcoming_tasks(tasks, now),
            "recent_activity": views.recent_activity(self.activities.list()),
        }

    def task_summary(self) -> dict[str, int]:
        return filters.task_status_counts(self.tasks.list(), self.now())


def _zone(name: str) -> Optional[ZoneInfo]:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r, falling back to UTC", name)
        return None


def build_storage(settings: Settings) -> KeyValueStorage:
    if settings.storage_backend == "memory":
        return MemoryStorage()
    if settings.storage_backend == "sql":
        # Imported lazily so the JSON backend works without a database driver configured.
        from crm.db.create_tables import create_all
        from crm.repositories.sql_repository import SQLKeyValueStorage

        create_all()
        return SQLKeyValueStorage()
    return JsonFileStorage(settings.data_file)


def build_store(settings: Optional[Settings] = None, clock: Optional[Clock] = None) -> CrmStore:
    settings = settings or get_settings()
    store = CrmStore(
        build_storage(settings),
        clock=clock,
        activity_limit=settings.activity_limit,
        tz=_zone(settings.timezone),
    )
    logger.info("CRM store ready (backend=%s)", settings.storage_backend)
    return store
