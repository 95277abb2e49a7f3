# src/taskdeck/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum
from typing import Any


class TaskStatus(StrEnum):
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"


class TaskPriority(StrEnum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


def _parse_timestamp(raw: Any) -> datetime:
    if not isinstance(raw, str):
        raise ValueError(f"timestamp must be a string, got {raw!r}")
    # Accept the trailing "Z" servers like to send.
    return datetime.fromisoformat(raw.replace("Z", "+00:00"))


def _parse_due_date(raw: Any) -> date:
    if not isinstance(raw, str):
        raise ValueError(f"dueDate must be a string, got {raw!r}")
    return date.fromisoformat(raw[:10])


@dataclass(frozen=True, slots=True)
class User:
    id: str
    name: str
    email: str
    role: str
    timezone: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> User:
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            email=str(data["email"]),
            role=str(data["role"]),
            timezone=data.get("timezone"),
        )

    def to_api(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "timezone": self.timezone,
        }


@dataclass(frozen=True, slots=True)
class Task:
    """
    A task as returned by the server.

    Instances are never edited locally: every change comes back from the API
    as a replacement record.
    """

    id: str
    title: str
    description: str
    status: TaskStatus
    priority: TaskPriority
    due_date: date
    created_by: User
    created_at: datetime
    updated_at: datetime
    is_overdue: bool = False
    assigned_to: User | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Task:
        """Parse a task JSON object. Raises KeyError/ValueError/TypeError on bad shape."""
        assigned = data.get("assignedTo")
        return cls(
            id=str(data["id"]),
            title=str(data["title"]),
            description=str(data.get("description") or ""),
            status=TaskStatus(data["status"]),
            priority=TaskPriority(data["priority"]),
            due_date=_parse_due_date(data["dueDate"]),
            created_by=User.from_api(data["createdBy"]),
            assigned_to=User.from_api(assigned) if assigned else None,
            created_at=_parse_timestamp(data["createdAt"]),
            updated_at=_parse_timestamp(data["updatedAt"]),
            is_overdue=bool(data.get("isOverdue", False)),
        )


@dataclass(frozen=True, slots=True)
class TaskPatch:
    """Partial update. Only fields that are not None are sent to the server."""

    title: str | None = None
    description: str | None = None
    status: TaskStatus | None = None
    due_date: date | None = None
    priority: TaskPriority | None = None
    assigned_to: str | None = None

    def to_api(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.title is not None:
            out["title"] = self.title
        if self.description is not None:
            out["description"] = self.description
        if self.status is not None:
            out["status"] = self.status.value
        if self.due_date is not None:
            out["dueDate"] = self.due_date.isoformat()
        if self.priority is not None:
            out["priority"] = self.priority.value
        if self.assigned_to is not None:
            out["assignedTo"] = self.assigned_to
        return out

    def is_empty(self) -> bool:
        return not self.to_api()


@dataclass(frozen=True, slots=True)
class TaskStatistics:
    total: int
    overdue: int
    by_status: dict[str, int] = field(default_factory=dict)
    by_priority: dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> TaskStatistics:
        return cls(
            total=int(data.get("total") or 0),
            overdue=int(data.get("overdue") or 0),
            by_status={str(k): int(v) for k, v in (data.get("byStatus") or {}).items()},
            by_priority={str(k): int(v) for k, v in (data.get("byPriority") or {}).items()},
        )
