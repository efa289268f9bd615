"""Handle-based boundary for embedding the engine in a host process.

A host that keeps its own array of servers talks to the engine through an
explicit ``EngineContext`` instead of process-wide state. Server handles are
opaque integers resolved once per call into a validated ``ServerSpan``. Invalid
input (no context, no handles, unknown or destroyed handles) yields a zeroed
result and leaves all state untouched.
"""

import itertools
import logging
import threading
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Sequence

from ..metrics.history import CompletedTaskHistory
from ..metrics.models import ProcessingResult, StatisticsSnapshot
from ..metrics.statistics import calculate_statistics
from ..servers.dispatcher import Dispatcher
from ..servers.server_state import ServerState
from ..utils.config_models import EngineConfig
from ..utils.config_validator import ConfigurationError, load_engine_config
from ..workload.models import Task
from ..workload.sampler import DistributionSampler
from ..workload.task_generator import TaskGenerator
from .engine import process_tick

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ServerHandle:
    """Opaque reference to a server owned by an EngineContext."""

    value: int


class ServerSpan:
    """Bounds-checked view over the servers named by a sequence of handles."""

    def __init__(self, servers: List[ServerState]):
        self._servers = servers

    def __len__(self) -> int:
        return len(self._servers)

    def __getitem__(self, index: int) -> ServerState:
        return self._servers[index]

    def __iter__(self) -> Iterator[ServerState]:
        return iter(self._servers)


class EngineContext:
    """Caller-owned engine state for the handle boundary.

    Holds the task generator, the completed-task history and the server
    registry. Every boundary call takes the context lock, so calls are
    serialized even if the host issues them from several threads.
    """

    def __init__(self, config: Optional[EngineConfig] = None, sampler: Optional[DistributionSampler] = None):
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
        self.last_completed: List[Task] = []
        self.lock = threading.Lock()

        self._servers: Dict[int, ServerState] = {}
        self._handle_ids = itertools.count(1)

        logger.info("EngineContext initialized")

    def resolve(self, handles: Optional[Sequence[Optional[ServerHandle]]]) -> Optional[ServerSpan]:
        """Validate handles and return the servers they name, or None if any is invalid."""
        if handles is None:
            return None

        servers = []
        seen = set()
        for handle in handles:
            if not isinstance(handle, ServerHandle) or handle.value not in self._servers:
                return None
            # A server may appear only once so it is stepped at most once per tick
            if handle.value in seen:
                return None
            seen.add(handle.value)
            servers.append(self._servers[handle.value])
        return ServerSpan(servers)


def init_engine(
    arrival_rate: float,
    processing_time: float,
    processing_variance: float,
    sampler: Optional[DistributionSampler] = None,
) -> EngineContext:
    """Create a context for a new embedding session.

    Raises:
        ConfigurationError: If any parameter is out of range
    """
    config = load_engine_config({
        "arrival_rate": arrival_rate,
        "processing_time_mean": processing_time,
        "processing_variance": processing_variance,
    })
    return EngineContext(config, sampler)


def create_server(ctx: Optional[EngineContext], server_id: int) -> Optional[ServerHandle]:
    """Register a new idle server and return its handle."""
    if ctx is None:
        logger.warning("create_server called without a context")
        return None

    with ctx.lock:
        handle = ServerHandle(next(ctx._handle_ids))
        ctx._servers[handle.value] = ServerState(server_id)
    logger.debug(f"Created server {server_id} with handle {handle.value}")
    return handle


def destroy_server(ctx: Optional[EngineContext], handle: Optional[ServerHandle]) -> None:
    """Release a server. Unknown or repeated handles are ignored."""
    if ctx is None or not isinstance(handle, ServerHandle):
        return

    with ctx.lock:
        server = ctx._servers.pop(handle.value, None)
    if server is None:
        logger.warning(f"destroy_server: unknown handle {handle.value}")


def process_simulation_step(
    ctx: Optional[EngineContext],
    handles: Optional[Sequence[ServerHandle]],
    delta_time: float,
    current_time: float,
) -> ProcessingResult:
    """Generate, dispatch and step the servers named by ``handles``."""
    if ctx is None:
        logger.warning("process_simulation_step called without a context")
        return ProcessingResult()

    with ctx.lock:
        span = ctx.resolve(handles)
        if span is None:
            logger.warning("process_simulation_step rejected invalid server handles")
            return ProcessingResult()

        new_count, completed = process_tick(
            span, ctx.task_generator, ctx.dispatcher, delta_time, current_time
        )
        ctx.history.extend(completed)
        ctx.last_completed = completed

    return ProcessingResult(completed_tasks_count=len(completed), new_tasks_count=new_count)


def get_statistics(
    ctx: Optional[EngineContext],
    handles: Optional[Sequence[ServerHandle]],
    time_window: float,
) -> StatisticsSnapshot:
    """Statistics for the servers named by ``handles``.

    ``time_window`` should be the delta of the last step; throughput counts the
    completions of that step.
    """
    if ctx is None:
        logger.warning("get_statistics called without a context")
        return StatisticsSnapshot()

    with ctx.lock:
        span = ctx.resolve(handles)
        if span is None:
            logger.warning("get_statistics rejected invalid server handles")
            return StatisticsSnapshot()

        return calculate_statistics(
            span, ctx.last_completed, time_window, wait_window=ctx.history.tasks()
        )


def update_arrival_rate(ctx: Optional[EngineContext], new_rate: float) -> bool:
    """Change the arrival rate. Returns False when the context or rate is invalid."""
    if ctx is None:
        return False

    with ctx.lock:
        try:
            ctx.task_generator.arrival_rate = new_rate
        except ConfigurationError as e:
            logger.warning(f"update_arrival_rate rejected: {e}")
            return False
        ctx.config.arrival_rate = new_rate
    return True
