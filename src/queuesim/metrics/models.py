"""Data models for metrics collection."""

from dataclasses import dataclass


@dataclass
class StatisticsSnapshot:
    """Point-in-time statistics, recomputed from scratch every tick.

    The default instance is the zeroed snapshot returned for invalid input.
    """

    current_throughput: float = 0.0  # tasks/s over the last tick
    average_wait_time: float = 0.0  # seconds, over the retained window
    server_utilization: float = 0.0  # percent of servers busy
    total_queue_length: int = 0  # pending tasks, service slots excluded
    completed_tasks: int = 0  # lifetime total across servers


@dataclass
class ProcessingResult:
    """Counts produced by one simulation tick."""

    completed_tasks_count: int = 0
    new_tasks_count: int = 0


@dataclass
class TimePointMetric:
    """Time-series data point for a per-tick metric."""

    timestamp_sim: float
    value: float
    metric_type: str  # e.g., "THROUGHPUT", "QUEUE_LENGTH"
