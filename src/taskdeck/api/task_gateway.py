# src/taskdeck/api/task_gateway.py

from __future__ import annotations

"""
HTTP implementation of the TaskGateway port.

The server wraps every payload in an envelope:
    {"success": bool, "error": bool, "message": str, "data": ...}

List endpoints put tasks under data.tasks, single-task endpoints put the task
object directly under data. Every httpx error, non-2xx status, error envelope or
unparseable payload is raised as RemoteFailure.
"""

import logging
from datetime import date
from typing import Any

import httpx

from ..core.errors import ConfigurationError, RemoteFailure
from ..core.ports import SessionReader
from ..tasks.task_models import Task, TaskPatch, TaskPriority, TaskStatistics, TaskStatus

logger = logging.getLogger(__name__)

_PARSE_ERRORS = (KeyError, ValueError, TypeError, AttributeError)


def _timeout_from_settings(settings: Any) -> httpx.Timeout:
    connect_s = float(getattr(settings, "connect_timeout_seconds", 30.0))
    read_s = float(getattr(settings, "read_timeout_seconds", 30.0))
    return httpx.Timeout(connect=connect_s, read=read_s, write=read_s, pool=connect_s)


class HttpTaskGateway:
    """
    Async client for the remote task API.

    Use as an async context manager, or call aclose() when done. A pre-built
    httpx.AsyncClient can be injected (tests use httpx.MockTransport).
    """

    def __init__(
        self,
        settings: Any,
        session: SessionReader,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        base_url = str(getattr(settings, "api_base_url", "") or "").strip()
        if not base_url and client is None:
            raise ConfigurationError("API base URL is not set. Set TASKDECK_API_BASE_URL in your .env.")

        self._session = session
        self._tasks_endpoint = str(getattr(settings, "tasks_endpoint", "/tasks"))
        self._stats_endpoint = str(getattr(settings, "stats_endpoint", "/stats/tasks"))
        self._page_size = int(getattr(settings, "page_size", 10))
        self._client = client or httpx.AsyncClient(
            base_url=base_url,
            timeout=_timeout_from_settings(settings),
        )
        logger.info("HttpTaskGateway ready base_url=%s", base_url or self._client.base_url)

    async def __aenter__(self) -> HttpTaskGateway:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ---- low-level helpers ----

    def _auth_headers(self) -> dict[str, str]:
        token = self._session.get_token()
        if not token:
            logger.debug("No authentication token found; sending unauthenticated request")
            return {}
        return {"Authorization": f"Bearer {token}"}

    async def _request(
        self,
        method: str,
        path: str,
        *,
        operation: str,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        logger.debug("API %s %s params=%s body=%s", method, path, params, json)
        try:
            resp = await self._client.request(
                method,
                path,
                params=params,
                json=json,
                headers=self._auth_headers(),
            )
        except httpx.ConnectError as e:
            raise RemoteFailure(f"network error during {operation}", operation=operation) from e
        except httpx.TimeoutException as e:
            raise RemoteFailure(f"timeout during {operation}", operation=operation) from e
        except httpx.HTTPError as e:
            raise RemoteFailure(f"network error during {operation}: {e}", operation=operation) from e

        logger.debug("API %s %s -> %s", method, path, resp.status_code)
        body = self._decode(resp, operation)
        self._raise_for_envelope(resp, body, operation)
        return body

    @staticmethod
    def _decode(resp: httpx.Response, operation: str) -> Any:
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            if resp.is_success:
                raise RemoteFailure(
                    "malformed payload",
                    status_code=resp.status_code,
                    operation=operation,
                ) from e
            # Error pages are often HTML; the status code says enough.
            return None

    @staticmethod
    def _raise_for_envelope(resp: httpx.Response, body: Any, operation: str) -> None:
        message = body.get("message") if isinstance(body, dict) else None

        if isinstance(body, dict) and body.get("error") is True:
            raise RemoteFailure(
                str(message or f"Failed to {operation}"),
                status_code=resp.status_code,
                operation=operation,
            )

        if not resp.is_success:
            raise RemoteFailure(
                str(message or f"HTTP {resp.status_code}"),
                status_code=resp.status_code,
                operation=operation,
            )

    @staticmethod
    def _parse_task(data: Any, operation: str) -> Task:
        if not isinstance(data, dict):
            raise RemoteFailure("malformed payload", operation=operation)
        try:
            return Task.from_api(data)
        except _PARSE_ERRORS as e:
            raise RemoteFailure("malformed payload", operation=operation) from e

    def _parse_task_list(self, body: Any, operation: str) -> list[Task]:
        if body is None:
            return []
        if not isinstance(body, dict):
            raise RemoteFailure("malformed payload", operation=operation)

        data = body.get("data")
        if not isinstance(data, dict) or not isinstance(data.get("tasks"), list):
            logger.warning("Unexpected data structure in %s response", operation)
            return []

        return [self._parse_task(item, operation) for item in data["tasks"]]

    def _single_task(self, body: Any, operation: str) -> Task:
        if body is None:
            raise RemoteFailure("No response data received", operation=operation)
        if not isinstance(body, dict):
            raise RemoteFailure("malformed payload", operation=operation)
        return self._parse_task(body.get("data"), operation)

    def _page_params(self, page: int, page_size: int | None) -> dict[str, str]:
        return {
            "page": str(page),
            "pageSize": str(page_size if page_size is not None else self._page_size),
        }

    # ---- TaskGateway ----

    async def fetch_all(
        self,
        status: TaskStatus | None = None,
        priority: TaskPriority | None = None,
        page: int = 1,
        page_size: int | None = None,
    ) -> list[Task]:
        params = self._page_params(page, page_size)
        if status is not None:
            params["status"] = status.value
        if priority is not None:
            params["priority"] = priority.value

        body = await self._request("GET", self._tasks_endpoint, operation="fetch tasks", params=params)
        tasks = self._parse_task_list(body, "fetch tasks")
        logger.info("Fetched %d tasks (status=%s priority=%s page=%d)", len(tasks), status, priority, page)
        return tasks

    async def fetch_one(self, task_id: str) -> Task:
        body = await self._request("GET", f"{self._tasks_endpoint}/{task_id}", operation="fetch task")
        return self._single_task(body, "fetch task")

    async def create(
        self,
        *,
        title: str,
        description: str,
        due_date: date,
        priority: TaskPriority,
        assigned_to: str | None = None,
    ) -> Task:
        payload: dict[str, Any] = {
            "title": title,
            "description": description,
            "dueDate": due_date.isoformat(),
            "priority": priority.value,
        }
        if assigned_to is not None:
            payload["assignedTo"] = assigned_to

        body = await self._request("POST", self._tasks_endpoint, operation="create task", json=payload)
        task = self._single_task(body, "create task")
        logger.info("Created task id=%s", task.id)
        return task

    async def update(self, task_id: str, patch: TaskPatch) -> Task:
        body = await self._request(
            "PUT",
            f"{self._tasks_endpoint}/{task_id}",
            operation="update task",
            json=patch.to_api(),
        )
        return self._single_task(body, "update task")

    async def delete(self, task_id: str) -> None:
        await self._request("DELETE", f"{self._tasks_endpoint}/{task_id}", operation="delete task")
        logger.info("Deleted task id=%s", task_id)

    async def search(self, query: str, page: int = 1, page_size: int | None = None) -> list[Task]:
        params = {"q": query, **self._page_params(page, page_size)}
        body = await self._request(
            "GET",
            f"{self._tasks_endpoint}/search",
            operation="search tasks",
            params=params,
        )
        return self._parse_task_list(body, "search tasks")

    async def filter(
        self,
        status: TaskStatus | None = None,
        priority: TaskPriority | None = None,
    ) -> list[Task]:
        return await self.fetch_all(status=status, priority=priority)

    async def fetch_statistics(self) -> TaskStatistics:
        body = await self._request("GET", self._stats_endpoint, operation="fetch statistics")
        if body is None:
            raise RemoteFailure("No response data received", operation="fetch statistics")
        data = body.get("data") if isinstance(body, dict) else None
        if not isinstance(data, dict):
            raise RemoteFailure("malformed payload", operation="fetch statistics")
        try:
            return TaskStatistics.from_api(data)
        except _PARSE_ERRORS as e:
            raise RemoteFailure("malformed payload", operation="fetch statistics") from e
