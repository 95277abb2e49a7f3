# src/taskdeck/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations (session file, HTTP gateway, controllers) into AppState.
"""

from __future__ import annotations

import logging

from ..api.task_gateway import HttpTaskGateway
from ..config import get_settings
from ..core.state import AppState
from ..session.session_store import SessionStore
from ..tasks.stats_controller import StatsController
from ..tasks.task_controller import TaskListController

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.session_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    The caller owns state.gateway and must aclose() it.
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    session = SessionStore(settings.session_path)
    if session.get_token() is None:
        logger.warning("No token in %s; requests will be unauthenticated.", settings.session_path)

    gateway = HttpTaskGateway(settings, session)

    return AppState(
        settings=settings,
        session=session,
        gateway=gateway,
        tasks=TaskListController(gateway),
        stats=StatsController(gateway),
    )
