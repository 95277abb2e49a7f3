# tests/test_stats_controller.py

from __future__ import annotations

import pytest

from taskdeck.core.errors import RemoteFailure
from taskdeck.tasks.stats_controller import StatsController, StatsError, StatsInitial, StatsLoaded
from taskdeck.tasks.task_models import TaskStatistics

from .fakes import FakeTaskGateway


@pytest.mark.asyncio
async def test_stats_load_success_and_failure() -> None:
    gateway = FakeTaskGateway()
    gateway.statistics = TaskStatistics(total=3, overdue=1, by_status={"TODO": 3})
    ctrl = StatsController(gateway)
    assert isinstance(ctrl.state, StatsInitial)

    loaded = await ctrl.load()
    assert isinstance(loaded, StatsLoaded)
    assert loaded.statistics.total == 3

    gateway.failures["fetch_statistics"] = RemoteFailure("HTTP 500")
    failed = await ctrl.load()
    assert isinstance(failed, StatsError)
    assert failed.message == "Failed to load statistics: HTTP 500"

    ctrl.reset()
    assert isinstance(ctrl.state, StatsInitial)


def test_statistics_from_api_defaults() -> None:
    stats = TaskStatistics.from_api({"total": 2})
    assert stats.total == 2
    assert stats.overdue == 0
    assert stats.by_status == {}
    assert stats.by_priority == {}
