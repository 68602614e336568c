"""List projections used by the customer and task screens."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, Optional, Sequence

from crm.core.clock import parse_timestamp
from crm.domain.models import STATUS_DONE, TASK_STATUSES, Customer, Task

CUSTOMER_SEARCH_FIELDS = ("name", "email", "company")
TASK_SEARCH_FIELDS = ("title", "description")
UNKNOWN_CUSTOMER = "Unknown Customer"

# Deadlines that cannot be parsed sort after every real date.
_FAR_FUTURE = datetime.max.replace(tzinfo=timezone.utc)


def _active(value: Optional[str]) -> bool:
    """``None``, blank and ``"all"`` mean the filter is switched off."""
    return bool(value) and value.strip().lower() != "all"


def _matches(record: object, needle: str, fields: Sequence[str]) -> bool:
    for name in fields:
        value = getattr(record, name, None)
        if value and needle in str(value).lower():
            return True
    return False


def filter_customers(
    customers: Iterable[Customer],
    search: Optional[str] = None,
    status: Optional[str] = None,
    tag: Optional[str] = None,
    fields: Sequence[str] = CUSTOMER_SEARCH_FIELDS,
) -> list[Customer]:
    result = list(customers)
    if search:
        needle = search.lower()
        result = [c for c in result if _matches(c, needle, fields)]
    if _active(status):
        result = [c for c in result if c.status == status]
    if _active(tag):
        result = [c for c in result if tag in c.tags]
    return result


def is_overdue(task: Task, now: datetime) -> bool:
    deadline = parse_timestamp(task.deadline)
    return deadline is not None and deadline < now


def shows_overdue_marker(task: Task, now: datetime) -> bool:
    return task.status != STATUS_DONE and is_overdue(task, now)


def sort_tasks(tasks: Iterable[Task], now: datetime) -> list[Task]:
    """Overdue first, then by deadline ascending within each group."""
    def key(task: Task):
        deadline = parse_timestamp(task.deadline) or _FAR_FUTURE
        return (0 if deadline < now else 1, deadline)

    return sorted(tasks, key=key)


def filter_tasks(
    tasks: Iterable[Task],
    now: datetime,
    search: Optional[str] = None,
    status: Optional[str] = None,
    priority: Optional[str] = None,
    customer_id: Optional[str] = None,
    fields: Sequence[str] = TASK_SEARCH_FIELDS,
) -> list[Task]:
    result = list(tasks)
    if search:
        needle = search.lower()
        result = [t for t in result if _matches(t, needle, fields)]
    if _active(status):
        result = [t for t in result if t.status == status]
    if _active(priority):
        result = [t for t in result if t.priority == priority]
    if customer_id:
        result = [t for t in result if t.customer_id == customer_id]
    return sort_tasks(result, now)


def task_status_counts(tasks: Iterable[Task], now: datetime) -> dict[str, int]:
    counts = {status: 0 for status in TASK_STATUSES}
    overdue = 0
    for task in tasks:
        counts[task.status] = counts.get(task.status, 0) + 1
        if shows_overdue_marker(task, now):
            overdue += 1
    counts["overdue"] = overdue
    return counts


def all_tags(customers: Iterable[Customer]) -> list[str]:
    seen: dict[str, None] = {}
    for customer in customers:
        for tag in customer.tags:
            seen.setdefault(tag, None)
    return list(seen)


def customer_name(customers: Iterable[Customer], customer_id: str) -> str:
    for customer in customers:
        if customer.id == customer_id:
            return customer.name
    return UNKNOWN_CUSTOMER
