"""Per-server queueing and execution state machine."""

import logging
from collections import deque
from dataclasses import dataclass, field, replace
from typing import Any, Deque, Dict, Optional

from ..workload.models import Task

logger = logging.getLogger(__name__)


@dataclass
class ServerState:
    """A single server: a FIFO queue of pending tasks and one service slot.

    The server is Idle when the slot is empty and Busy otherwise. ``is_busy``
    is derived from the slot so the two can never disagree.
    """

    id: int
    queue: Deque[Task] = field(default_factory=deque)
    current_task: Optional[Task] = None
    total_processed: int = 0

    @property
    def is_busy(self) -> bool:
        return self.current_task is not None

    @property
    def queue_length(self) -> int:
        """Number of pending tasks, excluding the one in service."""
        return len(self.queue)

    def add_task(self, task: Task) -> None:
        """Append a task to the tail of the queue. No capacity bound."""
        self.queue.append(task)

    def step(self, current_time: float) -> Optional[Task]:
        """Advance this server by one tick.

        A finished task leaves the slot first; then, if the slot is empty and
        work is pending, the head of the queue starts service at
        ``current_time``. A task started here is never also completed in the
        same call.

        Args:
            current_time: Absolute simulated time, non-decreasing across calls

        Returns:
            The task completed during this tick, or None
        """
        completed = None

        task = self.current_task
        if task is not None and current_time >= task.start_time + task.processing_time:
            completed = replace(task, completion_time=current_time)
            self.current_task = None
            self.total_processed += 1
            logger.debug(
                f"Server {self.id} completed task {completed.id} at t={current_time:.3f}"
            )

        if self.current_task is None and self.queue:
            next_task = self.queue.popleft()
            self.current_task = replace(next_task, start_time=current_time)
            logger.debug(
                f"Server {self.id} started task {next_task.id} at t={current_time:.3f}"
            )

        return completed

    def to_dict(self) -> Dict[str, Any]:
        """Read-only view used by renderers and exporters."""
        return {
            "id": self.id,
            "queue_length": self.queue_length,
            "is_busy": self.is_busy,
            "current_task_id": self.current_task.id if self.current_task else None,
            "total_processed": self.total_processed,
        }
