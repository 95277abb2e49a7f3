# src/taskdeck/tasks/task_states.py

from __future__ import annotations

from dataclasses import dataclass, field

from .task_models import Task, TaskPriority, TaskStatus


@dataclass(frozen=True, slots=True)
class TaskView:
    """
    What the front-end renders.

    `filtered` reflects the criteria that were active when it was computed.
    It is not recomputed when `full` changes; only a new search/filter intent does that.
    """

    full: tuple[Task, ...] = ()
    filtered: tuple[Task, ...] = ()
    status_filter: TaskStatus | None = None
    priority_filter: TaskPriority | None = None
    search_query: str | None = None

    @classmethod
    def unfiltered(cls, tasks: list[Task]) -> TaskView:
        snapshot = tuple(tasks)
        return cls(full=snapshot, filtered=snapshot)

    @property
    def has_criteria(self) -> bool:
        return (
            self.status_filter is not None
            or self.priority_filter is not None
            or self.search_query is not None
        )


@dataclass(frozen=True, slots=True)
class TaskInitial:
    pass


@dataclass(frozen=True, slots=True)
class TaskLoading:
    pass


@dataclass(frozen=True, slots=True)
class TaskLoaded:
    view: TaskView = field(default_factory=TaskView)


@dataclass(frozen=True, slots=True)
class TaskOperationSuccess:
    message: str


@dataclass(frozen=True, slots=True)
class TaskError:
    message: str


TaskState = TaskInitial | TaskLoading | TaskLoaded | TaskOperationSuccess | TaskError
