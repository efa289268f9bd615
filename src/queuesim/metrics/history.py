"""Bounded window of recently completed tasks."""

import logging
from typing import List

from ..workload.models import Task

logger = logging.getLogger(__name__)


class CompletedTaskHistory:
    """Keeps the most recent completed tasks for windowed statistics.

    Once more than ``limit`` tasks are held, the oldest are dropped so that only
    the newest ``trim_to`` remain.
    """

    def __init__(self, limit: int = 1000, trim_to: int = 500):
        if trim_to < 1 or trim_to >= limit:
            raise ValueError(f"trim_to must be in [1, limit), got trim_to={trim_to}, limit={limit}")
        self.limit = limit
        self.trim_to = trim_to
        self._tasks: List[Task] = []

    def append(self, task: Task) -> None:
        self._tasks.append(task)
        if len(self._tasks) > self.limit:
            dropped = len(self._tasks) - self.trim_to
            del self._tasks[:dropped]
            logger.debug(f"Trimmed {dropped} tasks from completed history")

    def extend(self, tasks: List[Task]) -> None:
        for task in tasks:
            self.append(task)

    def tasks(self) -> List[Task]:
        """Retained tasks, oldest first."""
        return list(self._tasks)

    def wait_times(self) -> List[float]:
        return [task.wait_time for task in self._tasks]

    def clear(self) -> None:
        self._tasks.clear()

    def __len__(self) -> int:
        return len(self._tasks)
