"""Customer collection CRUD with cascade into the task collection."""
from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from crm.core.clock import Clock
from crm.domain.models import (
    ACTIVITY_CUSTOMER_CREATED,
    ACTIVITY_CUSTOMER_UPDATED,
    SYSTEM_FIELDS,
    Customer,
    to_wire_keys,
)
from crm.repositories.activity_log import ActivityLog
from crm.repositories.storage import CUSTOMERS_KEY, CollectionStore
from crm.repositories.task_repository import TaskRepository

logger = logging.getLogger(__name__)


class CustomerRepository:
    """CRUD helpers over the customer collection.

    Holds the task repository explicitly: deleting a customer removes the
    tasks that reference it. Deletions are not written to the activity log.
    """

    def __init__(
        self,
        store: CollectionStore,
        clock: Clock,
        activities: ActivityLog,
        tasks: TaskRepository,
    ) -> None:
        self.store = store
        self.clock = clock
        self.activities = activities
        self.tasks = tasks

    def _load(self) -> list[dict[str, Any]]:
        return self.store.load(CUSTOMERS_KEY)

    def list(self) -> list[Customer]:
        customers: list[Customer] = []
        for raw in self._load():
            try:
                customers.append(Customer.from_dict(raw))
            except (ValueError, TypeError) as exc:
                logger.debug("Skipping malformed customer %r: %s", raw.get("id"), exc)
        return customers

    def get(self, customer_id: str) -> Optional[Customer]:
        for customer in self.list():
            if customer.id == customer_id:
                return customer
        return None

    def exists(self, customer_id: str) -> bool:
        return any(str(raw.get("id")) == customer_id for raw in self._load())

    def add(self, draft: Mapping[str, Any]) -> Customer:
        fields = {k: v for k, v in to_wire_keys(draft).items() if k not in SYSTEM_FIELDS}
        with self.store.lock:
            records = self._load()
            taken = {str(raw.get("id")) for raw in records}
            new_id = self.clock.new_id()
            while new_id in taken:
                new_id = self.clock.new_id()
            now = self.clock.timestamp()
            customer = Customer.from_dict({**fields, "id": new_id, "createdAt": now, "updatedAt": now})

            records.append(customer.to_dict())
            self.store.save_or_raise(CUSTOMERS_KEY, records)
            logger.info("Customer %s created", customer.id)
            self.activities.record(
                ACTIVITY_CUSTOMER_CREATED,
                "New Customer Added",
                f"{customer.name} has been added to the system",
                customer_id=customer.id,
            )
        return customer

    def update(self, customer_id: str, fields: Mapping[str, Any]) -> Optional[Customer]:
        changes = {k: v for k, v in to_wire_keys(fields).items() if k not in SYSTEM_FIELDS}
        with self.store.lock:
            records = self._load()
            index = next((i for i, raw in enumerate(records) if str(raw.get("id")) == customer_id), None)
            if index is None:
                return None

            customer = Customer.from_dict({**records[index], **changes, "updatedAt": self.clock.timestamp()})

            records[index] = customer.to_dict()
            self.store.save_or_raise(CUSTOMERS_KEY, records)
            logger.info("Customer %s updated", customer.id)
            self.activities.record(
                ACTIVITY_CUSTOMER_UPDATED,
                "Customer Updated",
                f"{customer.name} information has been updated",
                customer_id=customer.id,
            )
        return customer

    def delete(self, customer_id: str) -> bool:
        with self.store.lock:
            records = self._load()
            remaining = [raw for raw in records if str(raw.get("id")) != customer_id]
            if len(remaining) == len(records):
                return False
            self.store.save_or_raise(CUSTOMERS_KEY, remaining)
            removed = self.tasks.delete_for_customer(customer_id)
        logger.info("Customer %s deleted (cascade removed %d tasks)", customer_id, removed)
        return True
