"""Point-in-time statistics over server state and completed work."""

from typing import Optional, Sequence

from ..servers.server_state import ServerState
from ..workload.models import Task
from .models import StatisticsSnapshot


def calculate_statistics(
    servers: Sequence[ServerState],
    completed_tasks: Sequence[Task],
    time_window: float,
    wait_window: Optional[Sequence[Task]] = None,
) -> StatisticsSnapshot:
    """Compute a statistics snapshot. Pure; holds no state between calls.

    Throughput is ``len(completed_tasks) / time_window``, so the two must
    describe the same span: pass the tasks completed during the last tick
    together with that tick's delta. Passing a long retained history with a
    single tick's delta inflates the rate.

    Args:
        servers: Current server states
        completed_tasks: Tasks completed within ``time_window``
        time_window: Length of the span in seconds; throughput is 0.0 if not positive
        wait_window: Tasks to average wait time over; defaults to ``completed_tasks``

    Returns:
        StatisticsSnapshot for this instant
    """
    total_queue_length = sum(server.queue_length for server in servers)

    busy_servers = sum(1 for server in servers if server.is_busy)
    server_utilization = busy_servers / len(servers) * 100.0 if servers else 0.0

    current_throughput = len(completed_tasks) / time_window if time_window > 0 else 0.0

    wait_tasks = completed_tasks if wait_window is None else wait_window
    if wait_tasks:
        average_wait_time = sum(task.start_time - task.arrival_time for task in wait_tasks) / len(wait_tasks)
    else:
        average_wait_time = 0.0

    completed_total = sum(server.total_processed for server in servers)

    return StatisticsSnapshot(
        current_throughput=current_throughput,
        average_wait_time=average_wait_time,
        server_utilization=server_utilization,
        total_queue_length=total_queue_length,
        completed_tasks=completed_total,
    )
