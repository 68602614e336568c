from __future__ import annotations

from conftest import customer_draft
from crm.core.clock import FixedClock
from crm.domain.models import ACTIVITY_CUSTOMER_CREATED, ACTIVITY_CUSTOMER_UPDATED
from crm.repositories.activity_log import ActivityLog
from crm.repositories.storage import CollectionStore, MemoryStorage
from crm.services.store import CrmStore


def test_log_is_capped_at_one_hundred_newest_first(store, clock):
    customer = store.customers.add(customer_draft())
    for i in range(130):
        clock.advance(seconds=1)
        store.customers.update(customer.id, {"notes": f"call #{i}"})

    activities = store.activities.list()
    assert len(activities) == 100
    assert all(a.type == ACTIVITY_CUSTOMER_UPDATED for a in activities)
    assert ACTIVITY_CUSTOMER_CREATED not in {a.type for a in activities}
    stamps = [a.timestamp for a in activities]
    assert stamps == sorted(stamps, reverse=True)
    assert activities[0].timestamp == store.customers.get(customer.id).updated_at


def test_record_assigns_id_and_timestamp(clock):
    log = ActivityLog(CollectionStore(MemoryStorage()), clock)
    entry = log.record("task_created", "New Task Created", "x", task_id="t1", customer_id="c1")
    assert entry.id
    assert entry.timestamp
    assert log.list() == [entry]


def test_custom_limit(clock):
    store = CrmStore(MemoryStorage(), clock=FixedClock(clock.now()), activity_limit=3)
    for i in range(5):
        store.customers.add(customer_draft(f"Customer {i}"))
    descriptions = [a.description for a in store.activities.list()]
    assert descriptions == [
        "Customer 4 has been added to the system",
        "Customer 3 has been added to the system",
        "Customer 2 has been added to the system",
    ]
