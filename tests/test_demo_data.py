from __future__ import annotations

from conftest import customer_draft
from crm.services.demo_data import DEMO_CUSTOMERS, seed_demo_data


def test_seed_populates_empty_store(store):
    assert seed_demo_data(store) is True

    customers = store.customers.list()
    tasks = store.tasks.list()
    assert [c.name for c in customers] == [d["name"] for d in DEMO_CUSTOMERS]
    assert len(tasks) == 3
    assert {t.customer_id for t in tasks} == {c.id for c in customers}
    assert all(t.assignee == "John Smith" for t in tasks)
    assert all(c.avatar and c.avatar.startswith("https://") for c in customers)
    # three customers + three tasks, newest first
    assert [a.type for a in store.activities.list()][:3] == ["task_created"] * 3
    assert len(store.dashboard()["upcoming_tasks"]) == 3


def test_seed_leaves_existing_data_alone(store):
    store.customers.add(customer_draft())
    assert seed_demo_data(store) is False
    assert len(store.customers.list()) == 1
    assert store.tasks.list() == []
