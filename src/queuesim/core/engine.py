"""Simulation engine driving generation, dispatch, service and aggregation."""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..metrics.history import CompletedTaskHistory
from ..metrics.models import ProcessingResult, StatisticsSnapshot
from ..metrics.statistics import calculate_statistics
from ..servers.dispatcher import Dispatcher
from ..servers.server_state import ServerState
from ..utils.config_models import EngineConfig
from ..utils.config_validator import ConfigurationError
from ..workload.models import Task
from ..workload.sampler import DistributionSampler
from ..workload.task_generator import TaskGenerator

logger = logging.getLogger(__name__)


def process_tick(
    servers: Sequence[ServerState],
    generator: TaskGenerator,
    dispatcher: Dispatcher,
    delta_time: float,
    current_time: float,
) -> Tuple[int, List[Task]]:
    """Run one tick over a server collection.

    New arrivals are dispatched before servers step, so an idle server can pick
    up a task generated in the same tick. Servers step in index order.

    Returns:
        (number of tasks generated, tasks completed this tick)
    """
    new_tasks = generator.generate_tasks(delta_time, current_time)

    if servers:
        for task in new_tasks:
            servers[dispatcher.select(servers, task)].add_task(task)
    elif new_tasks:
        logger.warning(f"Dropping {len(new_tasks)} tasks: no servers configured")

    completed = []
    for server in servers:
        finished = server.step(current_time)
        if finished is not None:
            completed.append(finished)

    return len(new_tasks), completed


class SimulationEngine:
    """Owns the server set and completed-task history and advances them tick by tick."""

    def __init__(self, config: Optional[EngineConfig] = None, sampler: Optional[DistributionSampler] = None):
        """Initialize the engine.

        Args:
            config: Engine configuration; defaults apply when omitted
            sampler: Shared random source for arrivals and dispatch
        """
        self.config = config or EngineConfig()
        self.sampler = sampler or DistributionSampler()

        self.task_generator = TaskGenerator(
            arrival_rate=self.config.arrival_rate,
            processing_time=self.config.processing_time_mean,
            processing_variance=self.config.processing_variance,
            arrival_model=self.config.arrival_model,
            sampler=self.sampler,
        )
        self.dispatcher = Dispatcher(self.config.load_balancing_strategy, self.sampler)
        self.history = CompletedTaskHistory(
            limit=self.config.completed_history_limit,
            trim_to=self.config.completed_history_trim,
        )

        self.servers: List[ServerState] = []
        self.current_time = 0.0
        self.last_delta = 0.0
        self.last_completed: List[Task] = []
        self._create_servers(self.config.server_count)

        logger.info(
            f"SimulationEngine initialized with {len(self.servers)} servers, "
            f"dispatch: {self.config.load_balancing_strategy}"
        )

    def _create_servers(self, count: int) -> None:
        self.servers = [ServerState(i) for i in range(count)]

    def step(self, delta_time: float, current_time: float) -> ProcessingResult:
        """Advance the simulation by one tick.

        Args:
            delta_time: Simulated seconds since the previous tick (>= 0)
            current_time: Absolute simulated time (non-decreasing)

        Returns:
            Counts of generated and completed tasks for this tick
        """
        if delta_time < 0:
            raise ValueError(f"delta_time must be >= 0, got {delta_time}")
        if current_time < self.current_time:
            raise ValueError(
                f"Clock moved backwards: {current_time} < {self.current_time}"
            )

        new_count, completed = process_tick(
            self.servers, self.task_generator, self.dispatcher, delta_time, current_time
        )
        self.history.extend(completed)

        self.current_time = current_time
        self.last_delta = delta_time
        self.last_completed = completed

        return ProcessingResult(completed_tasks_count=len(completed), new_tasks_count=new_count)

    def get_statistics(self) -> StatisticsSnapshot:
        """Statistics for the latest tick.

        Throughput pairs this tick's completions with this tick's delta; wait
        time averages over the retained history.
        """
        return calculate_statistics(
            self.servers,
            self.last_completed,
            self.last_delta,
            wait_window=self.history.tasks(),
        )

    def set_server_count(self, count: int) -> None:
        """Replace the server set. Queued and in-service work is discarded."""
        if count < 1:
            raise ConfigurationError(f"server_count must be >= 1, got {count}")
        self.config.server_count = count
        discarded = sum(s.queue_length + (1 if s.is_busy else 0) for s in self.servers)
        self._create_servers(count)
        logger.info(f"Server count set to {count} ({discarded} in-flight tasks discarded)")

    def set_arrival_rate(self, rate: float) -> None:
        self.task_generator.arrival_rate = rate
        self.config.arrival_rate = rate
        logger.info(f"Arrival rate set to {rate}/s")

    def set_processing_time(self, processing_time: float) -> None:
        self.task_generator.processing_time = processing_time
        self.config.processing_time_mean = processing_time
        logger.info(f"Mean processing time set to {processing_time}s")

    def set_processing_variance(self, variance: float) -> None:
        self.task_generator.processing_variance = variance
        self.config.processing_variance = variance
        logger.info(f"Processing variance set to {variance}s")

    def reset(self) -> None:
        """Start over with fresh servers and an empty history. Task ids keep increasing."""
        self._create_servers(self.config.server_count)
        self.history.clear()
        self.current_time = 0.0
        self.last_delta = 0.0
        self.last_completed = []
        logger.info("Simulation reset")

    def server_snapshots(self) -> List[Dict[str, Any]]:
        """Read-only views of all servers."""
        return [server.to_dict() for server in self.servers]
