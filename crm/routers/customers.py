from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Body, HTTPException, Request, Response

from crm.domain.models import InvalidFieldError
from crm.repositories.storage import StorageError
from crm.routers import get_store
from crm.services.filters import all_tags, filter_customers

router = APIRouter(prefix="/customers", tags=["customers"])


@router.get("")
def list_customers(
    request: Request,
    search: Optional[str] = None,
    status: Optional[str] = None,
    tag: Optional[str] = None,
):
    store = get_store(request)
    customers = filter_customers(store.customers.list(), search=search, status=status, tag=tag)
    return [c.to_dict() for c in customers]


@router.get("/tags")
def list_tags(request: Request):
    return all_tags(get_store(request).customers.list())


@router.get("/{customer_id}")
def get_customer(customer_id: str, request: Request):
    customer = get_store(request).customers.get(customer_id)
    if not customer:
        raise HTTPException(404, "Customer not found")
    return customer.to_dict()


@router.post("", status_code=201)
def create_customer(request: Request, payload: dict = Body(...)):
    try:
        customer = get_store(request).customers.add(payload)
    except InvalidFieldError as exc:
        raise HTTPException(422, str(exc))
    except StorageError as exc:
        raise HTTPException(503, str(exc))
    return customer.to_dict()


@router.patch("/{customer_id}")
def update_customer(customer_id: str, request: Request, payload: dict = Body(...)):
    try:
        customer = get_store(request).customers.update(customer_id, payload)
    except InvalidFieldError as exc:
        raise HTTPException(422, str(exc))
    except StorageError as exc:
        raise HTTPException(503, str(exc))
    if customer is None:
        raise HTTPException(404, "Customer not found")
    return customer.to_dict()


@router.delete("/{customer_id}", status_code=204)
def delete_customer(customer_id: str, request: Request):
    try:
        deleted = get_store(request).customers.delete(customer_id)
    except StorageError as exc:
        raise HTTPException(503, str(exc))
    if not deleted:
        raise HTTPException(404, "Customer not found")
    return Response(status_code=204)
