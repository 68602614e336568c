"""
FastAPI routers grouped by domain (customers, tasks, dashboard).

Each module exposes an APIRouter included by ``crm.app.create_app``. Routers
read the CrmStore from ``request.app.state.store`` and only translate between
HTTP and the store's operations.
"""

from fastapi import Request

from crm.services.store import CrmStore


def get_store(request: Request) -> CrmStore:
    store = getattr(getattr(request.app, "state", None), "store", None)
    if not store:
        raise RuntimeError("CrmStore not configured")
    return store
