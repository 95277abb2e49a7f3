# src/taskdeck/tasks/task_format.py

from __future__ import annotations

from datetime import date

from .task_models import Task, TaskPriority, TaskStatus

_STATUS_ALIASES = {
    "todo": TaskStatus.TODO,
    "in_progress": TaskStatus.IN_PROGRESS,
    "in-progress": TaskStatus.IN_PROGRESS,
    "progress": TaskStatus.IN_PROGRESS,
    "doing": TaskStatus.IN_PROGRESS,
    "done": TaskStatus.DONE,
}

_STATUS_MARKS = {
    TaskStatus.TODO: "[ ]",
    TaskStatus.IN_PROGRESS: "[~]",
    TaskStatus.DONE: "[x]",
}


def parse_status(raw: str) -> TaskStatus | None:
    return _STATUS_ALIASES.get(raw.strip().lower())


def parse_priority(raw: str) -> TaskPriority | None:
    try:
        return TaskPriority(raw.strip().upper())
    except ValueError:
        return None


def parse_due_date(raw: str) -> date | None:
    try:
        return date.fromisoformat(raw.strip())
    except ValueError:
        return None


def format_display_date(d: date) -> str:
    """Jan 15, 2024"""
    return d.strftime("%b %d, %Y")


def relative_date(d: date, *, today: date | None = None) -> str:
    today = today or date.today()
    diff = (d - today).days
    if diff == 0:
        return "Today"
    if diff == 1:
        return "Tomorrow"
    if diff == -1:
        return "Yesterday"
    if diff > 0:
        return f"In {diff} days"
    return f"{-diff} days ago"


def is_overdue_locally(task: Task, *, today: date | None = None) -> bool:
    """
    Client-side approximation of the server's isOverdue flag
    (due before today and not done). Only used for display hints.
    """
    today = today or date.today()
    return task.status != TaskStatus.DONE and task.due_date < today


def format_task_line(task: Task, *, today: date | None = None) -> str:
    mark = _STATUS_MARKS.get(task.status, "[?]")
    due = f"{format_display_date(task.due_date)} ({relative_date(task.due_date, today=today)})"
    overdue = " OVERDUE" if task.is_overdue else ""
    assignee = f" @{task.assigned_to.name}" if task.assigned_to else ""
    return f"{mark} {task.id} {task.title} [{task.priority.value}] due {due}{overdue}{assignee}"
