# tests/test_task_format.py

from __future__ import annotations

from dataclasses import replace
from datetime import date

import pytest

from taskdeck.tasks.task_format import (
    format_display_date,
    format_task_line,
    is_overdue_locally,
    parse_due_date,
    parse_priority,
    parse_status,
    relative_date,
)
from taskdeck.tasks.task_models import TaskPatch, TaskPriority, TaskStatus

from .fakes import make_task

TODAY = date(2024, 6, 10)


@pytest.mark.parametrize(
    ("due", "expected"),
    [
        (date(2024, 6, 10), "Today"),
        (date(2024, 6, 11), "Tomorrow"),
        (date(2024, 6, 9), "Yesterday"),
        (date(2024, 6, 15), "In 5 days"),
        (date(2024, 6, 1), "9 days ago"),
    ],
)
def test_relative_date(due: date, expected: str) -> None:
    assert relative_date(due, today=TODAY) == expected


def test_parsers() -> None:
    assert parse_status("in-progress") == TaskStatus.IN_PROGRESS
    assert parse_status("DONE") == TaskStatus.DONE
    assert parse_status("later") is None
    assert parse_priority("high") == TaskPriority.HIGH
    assert parse_priority("urgent") is None
    assert parse_due_date("2024-06-01") == date(2024, 6, 1)
    assert parse_due_date("tomorrow") is None


def test_overdue_and_line_rendering() -> None:
    task = make_task("t1", title="Fix bug", priority=TaskPriority.HIGH, due_date=date(2024, 6, 1))

    assert is_overdue_locally(task, today=TODAY)
    assert not is_overdue_locally(replace(task, status=TaskStatus.DONE), today=TODAY)

    line = format_task_line(task, today=TODAY)
    assert line.startswith("[ ] t1 Fix bug [HIGH]")
    assert format_display_date(task.due_date) in line
    assert "9 days ago" in line


def test_patch_serializes_only_supplied_fields() -> None:
    assert TaskPatch().is_empty()
    assert TaskPatch(due_date=date(2024, 6, 1), priority=TaskPriority.LOW).to_api() == {
        "dueDate": "2024-06-01",
        "priority": "LOW",
    }
