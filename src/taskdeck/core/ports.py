# src/taskdeck/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The controllers depend on Protocols instead of concrete implementations.
This keeps the HTTP transport and the session store swappable and makes testing easier.
"""

from datetime import date
from typing import Protocol

from ..tasks.task_models import Task, TaskPatch, TaskPriority, TaskStatistics, TaskStatus, User


class TaskGateway(Protocol):
    """
    Remote task API.

    Every method raises RemoteFailure on network errors, non-success responses
    or payloads that cannot be parsed.
    """

    async def fetch_all(
            self,
            status: TaskStatus | None = None,
            priority: TaskPriority | None = None,
            page: int = 1,
            page_size: int | None = None,
    ) -> list[Task]: ...

    async def fetch_one(self, task_id: str) -> Task: ...

    async def create(
            self,
            *,
            title: str,
            description: str,
            due_date: date,
            priority: TaskPriority,
            assigned_to: str | None = None,
    ) -> Task: ...

    async def update(self, task_id: str, patch: TaskPatch) -> Task: ...

    async def delete(self, task_id: str) -> None: ...

    async def search(self, query: str, page: int = 1, page_size: int | None = None) -> list[Task]: ...

    async def filter(
            self,
            status: TaskStatus | None = None,
            priority: TaskPriority | None = None,
    ) -> list[Task]: ...

    async def fetch_statistics(self) -> TaskStatistics: ...


class SessionReader(Protocol):
    """Persisted login session. The core never interprets the token."""

    def get_current_user(self) -> User | None: ...
    def get_token(self) -> str | None: ...
