# src/taskdeck/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..session.session_store import SessionStore
from ..tasks.stats_controller import StatsController
from ..tasks.task_controller import TaskListController
from .ports import TaskGateway


@dataclass
class AppState:
    """Everything a connector needs, wired once in cli.bootstrap."""

    # Kept as Any so tests can pass a SimpleNamespace.
    settings: Any

    session: SessionStore
    gateway: TaskGateway
    tasks: TaskListController
    stats: StatsController
