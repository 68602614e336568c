"""Customer, Task and Activity records plus their wire (JSON) mapping.

Stored objects keep the camelCase field names the browser build wrote to
local storage (customerId, createdAt, ...). Python code uses snake_case
attributes; ``to_dict``/``from_dict`` translate between the two. Drafts and
partial updates may use either spelling.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

CUSTOMER_STATUSES = ("Lead", "Active", "Inactive")
TASK_STATUSES = ("Todo", "In Progress", "Done")
TASK_PRIORITIES = ("Low", "Medium", "High")

STATUS_DONE = "Done"

ACTIVITY_CUSTOMER_CREATED = "customer_created"
ACTIVITY_CUSTOMER_UPDATED = "customer_updated"
ACTIVITY_TASK_CREATED = "task_created"
ACTIVITY_TASK_COMPLETED = "task_completed"
ACTIVITY_TYPES = (
    ACTIVITY_CUSTOMER_CREATED,
    ACTIVITY_TASK_CREATED,
    ACTIVITY_TASK_COMPLETED,
    ACTIVITY_CUSTOMER_UPDATED,
)

# Fields assigned by the repository; never taken from a draft or an update.
SYSTEM_FIELDS = frozenset({"id", "createdAt", "updatedAt", "timestamp"})

_SNAKE_TO_WIRE = {
    "customer_id": "customerId",
    "task_id": "taskId",
    "created_at": "createdAt",
    "updated_at": "updatedAt",
}


class CrmError(Exception):
    """Base class for errors raised by the CRM core."""


class InvalidFieldError(CrmError, ValueError):
    """Raised when a draft carries a value outside an enumerated field's allowed set."""

    def __init__(self, field_name: str, value: Any, allowed: tuple[str, ...]):
        super().__init__(f"{field_name}={value!r} is not one of {', '.join(allowed)}")
        self.field_name = field_name
        self.value = value
        self.allowed = allowed


def to_wire_keys(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Normalize snake_case keys to the stored camelCase spelling."""
    return {_SNAKE_TO_WIRE.get(key, key): value for key, value in fields.items()}


def _check_choice(field_name: str, value: Any, allowed: tuple[str, ...]) -> str:
    if value not in allowed:
        raise InvalidFieldError(field_name, value, allowed)
    return value


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _optional_text(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _require_id(data: Mapping[str, Any]) -> str:
    raw = data.get("id")
    if raw is None or raw == "":
        raise ValueError("record without id")
    return str(raw)


@dataclass
class Customer:
    id: str
    name: str
    email: str
    phone: str
    company: str
    tags: list[str] = field(default_factory=list)
    status: str = "Lead"
    created_at: str = ""
    updated_at: str = ""
    notes: Optional[str] = None
    avatar: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Customer":
        data = to_wire_keys(data)
        tags = data.get("tags") or []
        if isinstance(tags, str):
            tags = [tags]
        return cls(
            id=_require_id(data),
            name=_text(data.get("name")),
            email=_text(data.get("email")),
            phone=_text(data.get("phone")),
            company=_text(data.get("company")),
            tags=[str(tag) for tag in tags],
            status=_check_choice("status", data.get("status", "Lead"), CUSTOMER_STATUSES),
            created_at=_text(data.get("createdAt")),
            updated_at=_text(data.get("updatedAt")),
            notes=_optional_text(data.get("notes")),
            avatar=_optional_text(data.get("avatar")),
        )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "company": self.company,
            "tags": list(self.tags),
            "status": self.status,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
        if self.notes is not None:
            payload["notes"] = self.notes
        if self.avatar is not None:
            payload["avatar"] = self.avatar
        return payload


@dataclass
class Task:
    id: str
    customer_id: str
    title: str
    description: str
    deadline: str
    status: str = "Todo"
    priority: str = "Medium"
    created_at: str = ""
    updated_at: str = ""
    assignee: Optional[str] = None

    @property
    def is_done(self) -> bool:
        return self.status == STATUS_DONE

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Task":
        data = to_wire_keys(data)
        return cls(
            id=_require_id(data),
            customer_id=_text(data.get("customerId")),
            title=_text(data.get("title")),
            description=_text(data.get("description")),
            deadline=_text(data.get("deadline")),
            status=_check_choice("status", data.get("status", "Todo"), TASK_STATUSES),
            priority=_check_choice("priority", data.get("priority", "Medium"), TASK_PRIORITIES),
            created_at=_text(data.get("createdAt")),
            updated_at=_text(data.get("updatedAt")),
            assignee=_optional_text(data.get("assignee")),
        )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "customerId": self.customer_id,
            "title": self.title,
            "description": self.description,
            "deadline": self.deadline,
            "status": self.status,
            "priority": self.priority,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
        if self.assignee is not None:
            payload["assignee"] = self.assignee
        return payload


@dataclass
class Activity:
    id: str
    type: str
    title: str
    description: str
    timestamp: str
    customer_id: Optional[str] = None
    task_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Activity":
        data = to_wire_keys(data)
        return cls(
            id=_require_id(data),
            type=_check_choice("type", data.get("type"), ACTIVITY_TYPES),
            title=_text(data.get("title")),
            description=_text(data.get("description")),
            timestamp=_text(data.get("timestamp")),
            customer_id=_optional_text(data.get("customerId")),
            task_id=_optional_text(data.get("taskId")),
        )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "type": self.type,
            "title": self.title,
            "description": self.description,
            "timestamp": self.timestamp,
        }
        if self.customer_id is not None:
            payload["customerId"] = self.customer_id
        if self.task_id is not None:
            payload["taskId"] = self.task_id
        return payload
