from __future__ import annotations

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Garante que o pacote crm seja importável durante os testes locais
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from crm.core.clock import FixedClock  # noqa: E402
from crm.repositories.storage import MemoryStorage  # noqa: E402
from crm.services.store import CrmStore  # noqa: E402


class KeyRejectingStorage(MemoryStorage):
    """Memory storage whose writes fail for the keys listed in ``rejected``."""

    def __init__(self) -> None:
        super().__init__()
        self.rejected: set[str] = set()

    def write(self, key, blob):
        if key in self.rejected:
            return False
        return super().write(key, blob)


# Wednesday; the week started on Sunday 2024-05-12.
NOW = datetime(2024, 5, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def clock():
    return FixedClock(NOW)


@pytest.fixture()
def storage():
    return KeyRejectingStorage()


@pytest.fixture()
def store(storage, clock):
    return CrmStore(storage, clock=clock)


def customer_draft(name: str = "Ada Lovelace", **overrides) -> dict:
    draft = {
        "name": name,
        "email": f"{name.split()[0].lower()}@example.com",
        "phone": "+1 (555) 000-0000",
        "company": "Analytical Engines",
        "tags": ["vip"],
        "status": "Lead",
    }
    draft.update(overrides)
    return draft


def task_draft(customer_id: str, title: str = "Call back", **overrides) -> dict:
    draft = {
        "customerId": customer_id,
        "title": title,
        "description": "Discuss the proposal",
        "deadline": "2024-05-17T12:00:00.000+00:00",
        "status": "Todo",
        "priority": "Medium",
    }
    draft.update(overrides)
    return draft
