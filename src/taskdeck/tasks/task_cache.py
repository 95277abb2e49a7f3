# src/taskdeck/tasks/task_cache.py

from __future__ import annotations

import logging
from collections.abc import Iterable

from .task_models import Task, TaskStatus

logger = logging.getLogger(__name__)


class TaskCache:
    """
    Ordered in-memory task list for the current session.

    - order is preserved on replace_all, new ids are appended by upsert
    - ids are unique: upsert replaces in place, remove drops the single match
    - nothing here raises; lookups signal "not found" with None

    Linear scans are fine for the few hundred tasks a user has.
    """

    def __init__(self, tasks: Iterable[Task] = ()) -> None:
        self._tasks: list[Task] = []
        self.replace_all(tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, task_id: object) -> bool:
        return any(t.id == task_id for t in self._tasks)

    def _index_of(self, task_id: str) -> int:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        return -1

    def replace_all(self, tasks: Iterable[Task]) -> None:
        # Keep the first occurrence if the server ever repeats an id.
        seen: set[str] = set()
        fresh: list[Task] = []
        for t in tasks:
            if t.id in seen:
                logger.warning("Duplicate task id=%s in replace_all, keeping first", t.id)
                continue
            seen.add(t.id)
            fresh.append(t)
        self._tasks = fresh

    def upsert(self, task: Task) -> None:
        idx = self._index_of(task.id)
        if idx == -1:
            self._tasks.append(task)
            logger.debug("TaskCache: appended id=%s (size=%d)", task.id, len(self._tasks))
        else:
            self._tasks[idx] = task
            logger.debug("TaskCache: replaced id=%s at index %d", task.id, idx)

    def remove(self, task_id: str) -> None:
        before = len(self._tasks)
        self._tasks = [t for t in self._tasks if t.id != task_id]
        logger.debug("TaskCache: remove id=%s size %d -> %d", task_id, before, len(self._tasks))

    def find(self, task_id: str) -> Task | None:
        idx = self._index_of(task_id)
        return None if idx == -1 else self._tasks[idx]

    def all(self) -> list[Task]:
        return list(self._tasks)

    def by_status(self, status: TaskStatus) -> list[Task]:
        return [t for t in self._tasks if t.status == status]

    def clear(self) -> None:
        self._tasks = []
