from __future__ import annotations

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Body, HTTPException, Request, Response

from crm.domain.models import InvalidFieldError, Task
from crm.repositories.task_repository import UnknownCustomerError
from crm.repositories.storage import StorageError
from crm.routers import get_store
from crm.services.filters import customer_name, filter_tasks, shows_overdue_marker

router = APIRouter(prefix="/tasks", tags=["tasks"])


def _task_view(task: Task, now: datetime, customers: list) -> dict:
    data = task.to_dict()
    data["overdue"] = shows_overdue_marker(task, now)
    data["customerName"] = customer_name(customers, task.customer_id)
    return data


@router.get("")
def list_tasks(
    request: Request,
    search: Optional[str] = None,
    status: Optional[str] = None,
    priority: Optional[str] = None,
    customer_id: Optional[str] = None,
):
    store = get_store(request)
    now = store.now()
    customers = store.customers.list()
    tasks = filter_tasks(
        store.tasks.list(),
        now,
        search=search,
        status=status,
        priority=priority,
        customer_id=customer_id,
    )
    return [_task_view(t, now, customers) for t in tasks]


@router.get("/summary")
def task_summary(request: Request):
    return get_store(request).task_summary()


@router.post("", status_code=201)
def create_task(request: Request, payload: dict = Body(...)):
    try:
        task = get_store(request).tasks.add(payload)
    except UnknownCustomerError as exc:
        raise HTTPException(422, str(exc))
    except InvalidFieldError as exc:
        raise HTTPException(422, str(exc))
    except StorageError as exc:
        raise HTTPException(503, str(exc))
    return task.to_dict()


@router.patch("/{task_id}")
def update_task(task_id: str, request: Request, payload: dict = Body(...)):
    try:
        task = get_store(request).tasks.update(task_id, payload)
    except InvalidFieldError as exc:
        raise HTTPException(422, str(exc))
    except StorageError as exc:
        raise HTTPException(503, str(exc))
    if task is None:
        raise HTTPException(404, "Task not found")
    return task.to_dict()


@router.delete("/{task_id}", status_code=204)
def delete_task(task_id: str, request: Request):
    try:
        deleted = get_store(request).tasks.delete(task_id)
    except StorageError as exc:
        raise HTTPException(503, str(exc))
    if not deleted:
        raise HTTPException(404, "Task not found")
    return Response(status_code=204)
