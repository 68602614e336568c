from __future__ import annotations

import pytest

from conftest import NOW, customer_draft, task_draft
from crm.core.clock import format_timestamp
from crm.domain.models import ACTIVITY_CUSTOMER_CREATED, ACTIVITY_CUSTOMER_UPDATED, InvalidFieldError
from crm.repositories.storage import StorageError


def test_add_assigns_id_and_equal_timestamps(store):
    draft = customer_draft(tags=["b", "a", "b"], notes="met at expo")
    created = store.customers.add(draft)

    customers = store.customers.list()
    assert len(customers) == 1
    stored = customers[0]
    assert stored == created
    assert stored.id
    assert stored.created_at == stored.updated_at == format_timestamp(NOW)
    assert stored.name == draft["name"]
    assert stored.email == draft["email"]
    assert stored.tags == ["b", "a", "b"]
    assert stored.notes == "met at expo"
    assert stored.avatar is None


def test_add_ignores_caller_supplied_system_fields(store):
    created = store.customers.add(customer_draft(id="mine", createdAt="1999-01-01T00:00:00Z"))
    assert created.id != "mine"
    assert created.created_at == format_timestamp(NOW)


def test_add_records_customer_created(store):
    created = store.customers.add(customer_draft("Grace Hopper"))
    [activity] = store.activities.list()
    assert activity.type == ACTIVITY_CUSTOMER_CREATED
    assert activity.customer_id == created.id
    assert activity.description == "Grace Hopper has been added to the system"


def test_ids_are_unique_within_the_same_instant(store):
    ids = {store.customers.add(customer_draft(f"C {i}")).id for i in range(20)}
    assert len(ids) == 20


def test_update_merges_fields_and_refreshes_updated_at(store, clock):
    created = store.customers.add(customer_draft())
    clock.advance(hours=1)

    updated = store.customers.update(created.id, {"status": "Active", "id": "hijack", "createdAt": "x"})

    assert updated is not None
    assert updated.id == created.id
    assert updated.status == "Active"
    assert updated.name == created.name
    assert updated.created_at == created.created_at
    assert updated.updated_at == format_timestamp(clock.now())
    assert store.customers.get(created.id) == updated
    assert store.activities.list()[0].type == ACTIVITY_CUSTOMER_UPDATED


def test_update_unknown_id_returns_none_without_activity(store):
    assert store.customers.update("nope", {"name": "x"}) is None
    assert store.activities.list() == []


def test_update_rejects_unknown_status(store):
    created = store.customers.add(customer_draft())
    with pytest.raises(InvalidFieldError):
        store.customers.update(created.id, {"status": "Prospect"})
    assert store.customers.get(created.id).status == "Lead"


def test_delete_cascades_to_owned_tasks_only(store):
    owner = store.customers.add(customer_draft("Owner"))
    other = store.customers.add(customer_draft("Other"))
    for i in range(3):
        store.tasks.add(task_draft(owner.id, f"owned {i}"))
    kept = store.tasks.add(task_draft(other.id, "kept"))

    assert store.customers.delete(owner.id) is True

    assert [c.id for c in store.customers.list()] == [other.id]
    assert store.tasks.list() == [kept]


def test_delete_customer_without_tasks_leaves_tasks_untouched(store, storage):
    lonely = store.customers.add(customer_draft("Lonely"))
    other = store.customers.add(customer_draft("Other"))
    store.tasks.add(task_draft(other.id))
    before = storage.read("crm_tasks")

    assert store.customers.delete(lonely.id) is True
    assert storage.read("crm_tasks") == before


def test_delete_unknown_id_is_a_noop(store):
    store.customers.add(customer_draft())
    assert store.customers.delete("missing") is False
    assert len(store.customers.list()) == 1


def test_delete_records_no_activity(store):
    created = store.customers.add(customer_draft())
    before = len(store.activities.list())
    store.customers.delete(created.id)
    assert len(store.activities.list()) == before


def test_malformed_stored_customers_are_skipped(storage, store):
    storage.write("crm_customers", '[{"id": "1", "name": "ok", "status": "Active"}, {"name": "no id"}, {"id": "2", "status": "???"}]')
    assert [c.id for c in store.customers.list()] == ["1"]


def test_failed_add_raises_and_records_nothing(store, storage):
    storage.rejected.add("crm_customers")
    with pytest.raises(StorageError):
        store.customers.add(customer_draft())
    assert store.customers.list() == []
    assert store.activities.list() == []


def test_failed_update_keeps_stored_record(store, storage, clock):
    created = store.customers.add(customer_draft())
    clock.advance(minutes=5)
    storage.rejected.add("crm_customers")

    with pytest.raises(StorageError):
        store.customers.update(created.id, {"status": "Active"})

    assert store.customers.get(created.id) == created
    assert [a.type for a in store.activities.list()] == [ACTIVITY_CUSTOMER_CREATED]


def test_failed_delete_does_not_cascade(store, storage):
    customer = store.customers.add(customer_draft())
    task = store.tasks.add(task_draft(customer.id))
    storage.rejected.add("crm_customers")

    with pytest.raises(StorageError):
        store.customers.delete(customer.id)

    assert store.customers.get(customer.id) == customer
    assert store.tasks.list() == [task]
