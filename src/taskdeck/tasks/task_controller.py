# src/taskdeck/tasks/task_controller.py

from __future__ import annotations

"""
Task list controller.

Owns the session TaskCache and turns front-end intents into gateway calls:
- every intent runs under one asyncio.Lock, so two in-flight calls never race on the cache,
- the cache is only touched after the server confirmed the change,
- each intent publishes either a view, an acknowledgment followed by a view, or an error,
- filtering degrades to a local predicate when the server-side filter fails.

No retries and no timeouts live here; the gateway owns transport concerns.
"""

import asyncio
import logging
from collections.abc import Callable
from datetime import date

from ..core.ports import TaskGateway
from .task_cache import TaskCache
from .task_models import Task, TaskPatch, TaskPriority, TaskStatus
from .task_states import (
    TaskError,
    TaskInitial,
    TaskLoaded,
    TaskLoading,
    TaskOperationSuccess,
    TaskState,
    TaskView,
)

logger = logging.getLogger(__name__)

StateListener = Callable[[TaskState], None]


def filter_locally(
    tasks: list[Task],
    status: TaskStatus | None,
    priority: TaskPriority | None,
) -> list[Task]:
    """Conjunctive status/priority predicate; None means "any"."""
    return [
        t
        for t in tasks
        if (status is None or t.status == status) and (priority is None or t.priority == priority)
    ]


class TaskListController:
    def __init__(self, gateway: TaskGateway, cache: TaskCache | None = None) -> None:
        self._gateway = gateway
        self._cache = cache if cache is not None else TaskCache()
        self._lock = asyncio.Lock()
        self._listeners: list[StateListener] = []
        self._state: TaskState = TaskInitial()
        self._last_view: TaskView | None = None

    # ---- publishing ----

    @property
    def state(self) -> TaskState:
        return self._state

    @property
    def last_view(self) -> TaskView | None:
        """Most recent successful view; survives TaskError so the UI can keep showing it."""
        return self._last_view

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, state: TaskState) -> TaskState:
        self._state = state
        if isinstance(state, TaskLoaded):
            self._last_view = state.view
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("Task state listener failed (%s).", type(state).__name__)
        return state

    def _publish_fresh_view(self) -> TaskState:
        # Mutations always show the whole list again; active filter/search is dropped.
        return self._publish(TaskLoaded(TaskView.unfiltered(self._cache.all())))

    def _publish_failure(self, prefix: str, exc: Exception) -> TaskState:
        logger.info("%s: %s", prefix, exc)
        return self._publish(TaskError(f"{prefix}: {exc}"))

    # ---- load ----

    async def load(self) -> TaskState:
        logger.info("Load intent received")
        async with self._lock:
            self._publish(TaskLoading())
            return await self._fetch_and_replace()

    async def refresh(self) -> TaskState:
        """Same as load() but without the TaskLoading flicker."""
        logger.info("Refresh intent received")
        async with self._lock:
            return await self._fetch_and_replace()

    async def _fetch_and_replace(self) -> TaskState:
        try:
            tasks = await self._gateway.fetch_all()
        except Exception as e:
            return self._publish_failure("Failed to load tasks", e)

        logger.info("Received %d tasks from gateway", len(tasks))
        self._cache.replace_all(tasks)
        return self._publish_fresh_view()

    # ---- mutations ----

    async def create(
        self,
        *,
        title: str,
        description: str,
        priority: TaskPriority,
        due_date: date,
        assigned_to: str | None = None,
    ) -> TaskState:
        logger.info("Create intent received title=%r", title)
        async with self._lock:
            try:
                task = await self._gateway.create(
                    title=title,
                    description=description,
                    due_date=due_date,
                    priority=priority,
                    assigned_to=assigned_to,
                )
            except Exception as e:
                return self._publish_failure("Failed to create task", e)

            logger.info("Task created id=%s", task.id)
            self._cache.upsert(task)
            self._publish(TaskOperationSuccess("Task created successfully!"))
            return self._publish_fresh_view()

    async def update(self, task_id: str, patch: TaskPatch) -> TaskState:
        logger.info("Update intent received id=%s fields=%s", task_id, sorted(patch.to_api()))
        async with self._lock:
            return await self._apply_update(
                task_id,
                patch,
                success="Task updated successfully!",
                failure="Failed to update task",
            )

    async def update_status(self, task_id: str, status: TaskStatus) -> TaskState:
        logger.info("UpdateStatus intent received id=%s status=%s", task_id, status)
        async with self._lock:
            return await self._apply_update(
                task_id,
                TaskPatch(status=status),
                success="Task status updated successfully!",
                failure="Failed to update task status",
            )

    async def _apply_update(
        self,
        task_id: str,
        patch: TaskPatch,
        *,
        success: str,
        failure: str,
    ) -> TaskState:
        try:
            task = await self._gateway.update(task_id, patch)
        except Exception as e:
            return self._publish_failure(failure, e)

        if task.id not in self._cache:
            logger.warning("Updated task id=%s was not cached, inserting it", task.id)
        self._cache.upsert(task)
        self._publish(TaskOperationSuccess(success))
        return self._publish_fresh_view()

    async def delete(self, task_id: str) -> TaskState:
        logger.info("Delete intent received id=%s", task_id)
        async with self._lock:
            try:
                await self._gateway.delete(task_id)
            except Exception as e:
                return self._publish_failure("Failed to delete task", e)

            self._cache.remove(task_id)
            self._publish(TaskOperationSuccess("Task deleted successfully!"))
            return self._publish_fresh_view()

    # ---- narrowing ----

    async def search(self, query: str) -> TaskState:
        logger.info("Search intent received query=%r", query)
        async with self._lock:
            if self._last_view is None:
                logger.debug("Search ignored: nothing loaded yet")
                return self._state

            full = tuple(self._cache.all())
            if not query:
                return self._publish(TaskLoaded(TaskView(full=full, filtered=full)))

            try:
                found = await self._gateway.search(query)
            except Exception as e:
                return self._publish_failure("Failed to search tasks", e)

            # A search replaces any active status/priority filter; the view records
            # only the criteria that produced `filtered`.
            logger.info("Search returned %d tasks", len(found))
            return self._publish(
                TaskLoaded(TaskView(full=full, filtered=tuple(found), search_query=query))
            )

    async def filter(
        self,
        status: TaskStatus | None = None,
        priority: TaskPriority | None = None,
    ) -> TaskState:
        logger.info("Filter intent received status=%s priority=%s", status, priority)
        async with self._lock:
            if self._last_view is None:
                logger.debug("Filter ignored: nothing loaded yet")
                return self._state

            full = self._cache.all()
            try:
                matched = await self._gateway.filter(status, priority)
                logger.info("Remote filter returned %d tasks", len(matched))
            except Exception as e:
                # Any failure falls back to the cache.
                logger.warning("Remote filter failed (%s), falling back to local filtering", e)
                matched = filter_locally(full, status, priority)
                logger.info("Local filter returned %d tasks", len(matched))

            # Likewise a filter drops any previous search query.
            return self._publish(
                TaskLoaded(
                    TaskView(
                        full=tuple(full),
                        filtered=tuple(matched),
                        status_filter=status,
                        priority_filter=priority,
                    )
                )
            )

    # ---- synchronous reads ----

    def get_by_id(self, task_id: str) -> Task | None:
        task = self._cache.find(task_id)
        if task is None:
            logger.debug("Task not found id=%s", task_id)
        return task

    def get_all(self) -> list[Task]:
        return self._cache.all()

    def get_by_status(self, status: TaskStatus) -> list[Task]:
        return self._cache.by_status(status)

    # ---- session ----

    def reset(self) -> None:
        """Drop everything cached for this session (logout)."""
        logger.info("Resetting task controller (cache size=%d)", len(self._cache))
        self._cache.clear()
        self._last_view = None
        self._publish(TaskInitial())
