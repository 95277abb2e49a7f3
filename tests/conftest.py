# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskdeck.core.state import AppState
from taskdeck.session.session_store import SessionStore
from taskdeck.tasks.stats_controller import StatsController
from taskdeck.tasks.task_controller import TaskListController
from taskdeck.tasks.task_states import TaskState

from .fakes import FakeTaskGateway


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the HTTP gateway.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskdeck-test",
        api_base_url="http://api.test",
        tasks_endpoint="/tasks",
        stats_endpoint="/stats/tasks",
        connect_timeout_seconds=1.0,
        read_timeout_seconds=1.0,
        page_size=10,
        data_dir=tmp_path,
        session_path=tmp_path / "session.json",
    )


@pytest.fixture()
def gateway() -> FakeTaskGateway:
    return FakeTaskGateway()


@pytest.fixture()
def controller(gateway: FakeTaskGateway) -> TaskListController:
    return TaskListController(gateway)


@pytest.fixture()
def published(controller: TaskListController) -> list[TaskState]:
    """Every state the controller publishes, in order."""
    out: list[TaskState] = []
    controller.subscribe(out.append)
    return out


@pytest.fixture()
def state(settings: SimpleNamespace, gateway: FakeTaskGateway, controller: TaskListController) -> AppState:
    """AppState wired with the fake gateway and a real (tmp) session file."""
    return AppState(
        settings=settings,
        session=SessionStore(settings.session_path),
        gateway=gateway,
        tasks=controller,
        stats=StatsController(gateway),
    )
