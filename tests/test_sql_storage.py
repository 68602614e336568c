"""
SQL key-value backend against a temporary SQLite database.
"""
from __future__ import annotations

import pytest

from conftest import customer_draft, task_draft
from crm.core import config as core_config
from crm.db import models
from crm.db import session as db_session
from crm.repositories.sql_repository import SQLKeyValueStorage
from crm.services.store import build_store


@pytest.fixture()
def temp_db(tmp_path, monkeypatch):
    """Configura um SQLite temporário e reseta caches de settings/engine."""
    db_file = tmp_path / "test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_file}")
    monkeypatch.setenv("CRM_STORAGE_BACKEND", "sql")
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]

    engine = db_session.get_engine()
    models.Base.metadata.drop_all(bind=engine)
    models.Base.metadata.create_all(bind=engine)

    yield db_file

    models.Base.metadata.drop_all(bind=engine)
    engine.dispose()
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]


def test_read_write_overwrite(temp_db):
    storage = SQLKeyValueStorage()
    assert storage.read("crm_customers") is None
    assert storage.write("crm_customers", "[]") is True
    assert storage.write("crm_customers", '[{"id": "1"}]') is True
    assert storage.read("crm_customers") == '[{"id": "1"}]'
    assert SQLKeyValueStorage().read("crm_customers") == '[{"id": "1"}]'
    assert storage.read("crm_tasks") is None


def test_store_on_sql_backend(temp_db, clock):
    store = build_store(clock=clock)
    customer = store.customers.add(customer_draft())
    store.tasks.add(task_draft(customer.id))

    reopened = build_store(clock=clock)
    assert [c.id for c in reopened.customers.list()] == [customer.id]
    assert reopened.customers.delete(customer.id) is True
    assert reopened.tasks.list() == []
    assert len(reopened.activities.list()) == 2
