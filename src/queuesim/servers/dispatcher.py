"""Dispatch policies assigning new tasks to servers."""

import logging
from typing import Optional, Sequence

from ..utils.config_validator import ConfigurationError
from ..workload.models import Task
from ..workload.sampler import DistributionSampler
from .server_state import ServerState

logger = logging.getLogger(__name__)

DISPATCH_STRATEGIES = ("least_loaded", "round_robin", "random")


def select_least_loaded_server(servers: Sequence[ServerState]) -> int:
    """Return the index of the server with the fewest pending tasks.

    Only queued tasks count; a task in a service slot does not. Ties go to the
    lowest index.

    Callers must pass at least one server. For an empty sequence the function
    returns 0 as a sentinel, which is not a valid index into that sequence.
    """
    best_idx = 0
    best_len = None
    for idx, server in enumerate(servers):
        queue_length = server.queue_length
        if best_len is None or queue_length < best_len:
            best_idx = idx
            best_len = queue_length
    return best_idx


class Dispatcher:
    """Selects a target server for each new task under a load-balancing strategy.

    Supports:
    - least_loaded: Fewest pending tasks, lowest index on ties
    - round_robin: Task id modulo server count
    - random: Uniform random choice
    """

    def __init__(self, strategy: str = "least_loaded", sampler: Optional[DistributionSampler] = None):
        if strategy not in DISPATCH_STRATEGIES:
            raise ConfigurationError(
                f"Unknown load balancing strategy: {strategy} "
                f"(expected one of {', '.join(DISPATCH_STRATEGIES)})"
            )
        self.strategy = strategy
        self.sampler = sampler or DistributionSampler()

    def select(self, servers: Sequence[ServerState], task: Task) -> int:
        """Choose the index of the server that should receive ``task``."""
        if self.strategy == "round_robin":
            # Ids start at 1, so the first task lands on server 0
            return (task.id - 1) % len(servers) if servers else 0

        if self.strategy == "random":
            return self.sampler.choice_index(len(servers)) if servers else 0

        return select_least_loaded_server(servers)
