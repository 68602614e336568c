"""
Dashboard projections: headline counters, upcoming tasks and recent activity.

Everything here is a pure function of the collections passed in and of
``now``; month and week boundaries are taken in ``now``'s timezone.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from datetime import datetime, timedelta
from typing import Iterable, Sequence

from crm.core.clock import parse_timestamp
from crm.domain.models import STATUS_DONE, Activity, Customer, Task

UPCOMING_WINDOW_DAYS = 7
UPCOMING_LIMIT = 5
RECENT_ACTIVITY_LIMIT = 10


@dataclass
class DashboardStats:
    total_customers: int
    active_leads: int
    tasks_pending: int
    tasks_completed: int
    customers_this_month: int
    tasks_this_week: int

    def to_dict(self) -> dict:
        data = asdict(self)
        return {
            "totalCustomers": data["total_customers"],
            "activeLeads": data["active_leads"],
            "tasksPending": data["tasks_pending"],
            "tasksCompleted": data["tasks_completed"],
            "customersThisMonth": data["customers_this_month"],
            "tasksThisWeek": data["tasks_this_week"],
        }


def start_of_month(now: datetime) -> datetime:
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def start_of_week(now: datetime) -> datetime:
    """Midnight of the most recent Sunday (today when today is Sunday)."""
    days_since_sunday = (now.weekday() + 1) % 7
    day = now - timedelta(days=days_since_sunday)
    return day.replace(hour=0, minute=0, second=0, microsecond=0)


def _created_since(created_at: str, boundary: datetime) -> bool:
    created = parse_timestamp(created_at)
    return created is not None and created >= boundary


def dashboard_stats(customers: Sequence[Customer], tasks: Sequence[Task], now: datetime) -> DashboardStats:
    month_start = start_of_month(now)
    week_start = start_of_week(now)
    completed = sum(1 for t in tasks if t.status == STATUS_DONE)
    return DashboardStats(
        total_customers=len(customers),
        active_leads=sum(1 for c in customers if c.status == "Lead"),
        tasks_pending=len(tasks) - completed,
        tasks_completed=completed,
        customers_this_month=sum(1 for c in customers if _created_since(c.created_at, month_start)),
        tasks_this_week=sum(1 for t in tasks if _created_since(t.created_at, week_start)),
    )


def upcoming_tasks(
    tasks: Iterable[Task],
    now: datetime,
    days: int = UPCOMING_WINDOW_DAYS,
    limit: int = UPCOMING_LIMIT,
) -> list[Task]:
    """Open tasks due within ``days`` (overdue ones included), soonest first."""
    horizon = now + timedelta(days=days)
    due: list[tuple[datetime, Task]] = []
    for task in tasks:
        if task.status == STATUS_DONE:
            continue
        deadline = parse_timestamp(task.deadline)
        if deadline is None or deadline > horizon:
            continue
        due.append((deadline, task))
    due.sort(key=lambda item: item[0])
    return [task for _, task in due[:limit]]


def recent_activity(activities: Sequence[Activity], limit: int = RECENT_ACTIVITY_LIMIT) -> list[Activity]:
    return list(activities[:limit])
