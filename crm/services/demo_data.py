"""Sample customers and tasks for a fresh install."""
from __future__ import annotations

import logging
from datetime import timedelta

from crm.core.clock import format_timestamp
from crm.services.store import CrmStore

logger = logging.getLogger(__name__)

DEMO_CUSTOMERS = [
    {
        "name": "Sarah Johnson",
        "email": "sarah.johnson@techcorp.com",
        "phone": "+1 (555) 123-4567",
        "company": "TechCorp Solutions",
        "tags": ["enterprise", "priority"],
        "status": "Active",
        "notes": "Key decision maker for enterprise solutions",
        "avatar": "https://images.unsplash.com/photo-1494790108755-2616b612b494?w=32&h=32&fit=crop&crop=face",
    },
    {
        "name": "Michael Chen",
        "email": "michael.chen@startup.io",
        "phone": "+1 (555) 987-6543",
        "company": "Startup Innovations",
        "tags": ["startup", "tech"],
        "status": "Lead",
        "notes": "Interested in our cloud services package",
        "avatar": "https://images.unsplash.com/photo-1507003211169-0a1dd7228f2d?w=32&h=32&fit=crop&crop=face",
    },
    {
        "name": "Emily Rodriguez",
        "email": "emily.r@designstudio.com",
        "phone": "+1 (555) 456-7890",
        "company": "Creative Design Studio",
        "tags": ["design", "creative"],
        "status": "Active",
        "notes": "Regular client, excellent payment history",
        "avatar": "https://images.unsplash.com/photo-1438761681033-6461ffad8d80?w=32&h=32&fit=crop&crop=face",
    },
]

# (customer index, days until deadline, fields)
DEMO_TASKS = [
    (0, 7, {
        "title": "Schedule product demo",
        "description": "Arrange a comprehensive product demonstration for the client",
        "status": "Todo",
        "priority": "High",
    }),
    (1, 3, {
        "title": "Send pricing proposal",
        "description": "Prepare and send detailed pricing proposal based on requirements",
        "status": "In Progress",
        "priority": "Medium",
    }),
    (2, 1, {
        "title": "Follow up on contract",
        "description": "Check on contract status and address any concerns",
        "status": "Todo",
        "priority": "High",
    }),
]


def seed_demo_data(store: CrmStore, assignee: str = "John Smith") -> bool:
    """Populate empty collections; returns True when anything was added."""
    seeded = False
    if not store.customers.list():
        for draft in DEMO_CUSTOMERS:
            store.customers.add(draft)
        seeded = True

    if not store.tasks.list():
        customers = store.customers.list()
        if len(customers) >= len(DEMO_CUSTOMERS):
            now = store.clock.now()
            for index, days, fields in DEMO_TASKS:
                store.tasks.add({
                    **fields,
                    "customerId": customers[index].id,
                    "deadline": format_timestamp(now + timedelta(days=days)),
                    "assignee": assignee,
                })
            seeded = True

    if seeded:
        logger.info("Demo data seeded")
    return seeded
