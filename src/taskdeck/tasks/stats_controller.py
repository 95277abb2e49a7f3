# src/taskdeck/tasks/stats_controller.py

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from ..core.ports import TaskGateway
from .task_models import TaskStatistics

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class StatsInitial:
    pass


@dataclass(frozen=True, slots=True)
class StatsLoading:
    pass


@dataclass(frozen=True, slots=True)
class StatsLoaded:
    statistics: TaskStatistics


@dataclass(frozen=True, slots=True)
class StatsError:
    message: str


StatsState = StatsInitial | StatsLoading | StatsLoaded | StatsError


class StatsController:
    """Loads the server-side task statistics (totals, per-status/priority, overdue)."""

    def __init__(self, gateway: TaskGateway) -> None:
        self._gateway = gateway
        self._lock = asyncio.Lock()
        self._state: StatsState = StatsInitial()

    @property
    def state(self) -> StatsState:
        return self._state

    async def load(self) -> StatsState:
        async with self._lock:
            self._state = StatsLoading()
            try:
                stats = await self._gateway.fetch_statistics()
            except Exception as e:
                logger.info("Failed to load statistics: %s", e)
                self._state = StatsError(f"Failed to load statistics: {e}")
                return self._state

            logger.info("Statistics loaded total=%d overdue=%d", stats.total, stats.overdue)
            self._state = StatsLoaded(stats)
            return self._state

    def reset(self) -> None:
        self._state = StatsInitial()
