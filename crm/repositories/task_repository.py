"""Task collection CRUD, including completion tracking."""
from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional

from crm.core.clock import Clock
from crm.domain.models import (
    ACTIVITY_TASK_COMPLETED,
    ACTIVITY_TASK_CREATED,
    STATUS_DONE,
    SYSTEM_FIELDS,
    CrmError,
    Task,
    to_wire_keys,
)
from crm.repositories.activity_log import ActivityLog
from crm.repositories.storage import TASKS_KEY, CollectionStore

logger = logging.getLogger(__name__)


class UnknownCustomerError(CrmError, LookupError):
    """Raised when a new task references a customer id that does not exist."""

    def __init__(self, customer_id: str):
        super().__init__(f"Customer {customer_id!r} not found")
        self.customer_id = customer_id


class TaskRepository:
    def __init__(
        self,
        store: CollectionStore,
        clock: Clock,
        activities: ActivityLog,
        customer_exists: Optional[Callable[[str], bool]] = None,
    ) -> None:
        self.store = store
        self.clock = clock
        self.activities = activities
        self.customer_exists = customer_exists

    def _load(self) -> list[dict[str, Any]]:
        return self.store.load(TASKS_KEY)

    def list(self) -> list[Task]:
        tasks: list[Task] = []
        for raw in self._load():
            try:
                tasks.append(Task.from_dict(raw))
            except (ValueError, TypeError) as exc:
                logger.debug("Skipping malformed task %r: %s", raw.get("id"), exc)
        return tasks

    def get(self, task_id: str) -> Optional[Task]:
        for task in self.list():
            if task.id == task_id:
                return task
        return None

    def add(self, draft: Mapping[str, Any]) -> Task:
        fields = {k: v for k, v in to_wire_keys(draft).items() if k not in SYSTEM_FIELDS}
        customer_id = str(fields.get("customerId") or "")
        with self.store.lock:
            if self.customer_exists is not None and not self.customer_exists(customer_id):
                raise UnknownCustomerError(customer_id)

            records = self._load()
            taken = {str(raw.get("id")) for raw in records}
            new_id = self.clock.new_id()
            while new_id in taken:
                new_id = self.clock.new_id()
            now = self.clock.timestamp()
            task = Task.from_dict({**fields, "id": new_id, "createdAt": now, "updatedAt": now})

            records.append(task.to_dict())
            self.store.save_or_raise(TASKS_KEY, records)
            logger.info("Task %s created for customer %s", task.id, task.customer_id)
            self.activities.record(
                ACTIVITY_TASK_CREATED,
                "New Task Created",
                f'Task "{task.title}" has been created',
                task_id=task.id,
                customer_id=task.customer_id,
            )
        return task

    def update(self, task_id: str, fields: Mapping[str, Any]) -> Optional[Task]:
        changes = {k: v for k, v in to_wire_keys(fields).items() if k not in SYSTEM_FIELDS}
        with self.store.lock:
            records = self._load()
            index = next((i for i, raw in enumerate(records) if str(raw.get("id")) == task_id), None)
            if index is None:
                return None

            current = records[index]
            was_done = current.get("status") == STATUS_DONE
            task = Task.from_dict({**current, **changes, "updatedAt": self.clock.timestamp()})

            records[index] = task.to_dict()
            self.store.save_or_raise(TASKS_KEY, records)
            logger.info("Task %s updated", task.id)
            if not was_done and task.is_done:
                self.activities.record(
                    ACTIVITY_TASK_COMPLETED,
                    "Task Completed",
                    f'Task "{task.title}" has been completed',
                    task_id=task.id,
                    customer_id=task.customer_id,
                )
        return task

    def delete(self, task_id: str) -> bool:
        with self.store.lock:
            records = self._load()
            remaining = [raw for raw in records if str(raw.get("id")) != task_id]
            if len(remaining) == len(records):
                return False
            self.store.save_or_raise(TASKS_KEY, remaining)
        logger.info("Task %s deleted", task_id)
        return True

    def delete_for_customer(self, customer_id: str) -> int:
        """Remove every task owned by ``customer_id``; returns how many were removed."""
        with self.store.lock:
            records = self._load()
            remaining = [raw for raw in records if str(raw.get("customerId")) != customer_id]
            removed = len(records) - len(remaining)
            if removed:
                self.store.save_or_raise(TASKS_KEY, remaining)
        return removed
