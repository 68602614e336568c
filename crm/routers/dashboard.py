from __future__ import annotations

from fastapi import APIRouter, Request

from crm.routers import get_store

router = APIRouter(tags=["dashboard"])


@router.get("/dashboard")
def dashboard(request: Request):
    data = get_store(request).dashboard()
    return {
        "stats": data["stats"].to_dict(),
        "upcomingTasks": [t.to_dict() for t in data["upcoming_tasks"]],
        "recentActivity": [a.to_dict() for a in data["recent_activity"]],
    }


@router.get("/activities")
def activities(request: Request):
    return [a.to_dict() for a in get_store(request).activities.list()]
