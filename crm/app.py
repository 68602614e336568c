"""FastAPI application exposing the CRM store to the browser UI."""
from __future__ import annotations

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from crm.core.config import Settings, get_settings
from crm.core.logging_setup import configure_logging
from crm.routers import customers as customers_router
from crm.routers import dashboard as dashboard_router
from crm.routers import tasks as tasks_router
from crm.services.demo_data import seed_demo_data
from crm.services.store import CrmStore, build_store

DEV_ORIGINS = {
    "http://localhost:8000",
    "http://127.0.0.1:8000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
}


def create_app(store: Optional[CrmStore] = None, settings: Optional[Settings] = None) -> FastAPI:
    """Factory compatible with ``uvicorn --factory crm.app:create_app``."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="Local CRM API")
    if settings.app_env != "prod":
        app.add_middleware(
            CORSMiddleware,
            allow_origins=sorted(DEV_ORIGINS),
            allow_credentials=True,
            allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
            allow_headers=["*"],
        )

    store = store or build_store(settings)
    if settings.seed_demo_data:
        seed_demo_data(store)
    app.state.store = store

    @app.get("/health")
    def health():
        return {"ok": True}

    app.include_router(customers_router.router)
    app.include_router(tasks_router.router)
    app.include_router(dashboard_router.router)
    return app
