"""Metrics collection and reporting implementation."""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, Dict, List, Optional

import numpy as np
import pandas as pd

from .history import CompletedTaskHistory
from .models import ProcessingResult, StatisticsSnapshot, TimePointMetric

logger = logging.getLogger(__name__)

METRIC_THROUGHPUT = "THROUGHPUT"
METRIC_WAIT_TIME = "WAIT_TIME"
METRIC_UTILIZATION = "SERVER_UTILIZATION"
METRIC_QUEUE_LENGTH = "QUEUE_LENGTH"

METRIC_TYPES = (METRIC_THROUGHPUT, METRIC_WAIT_TIME, METRIC_UTILIZATION, METRIC_QUEUE_LENGTH)


@dataclass
class RunningMetric:
    """Latest, mean and peak of a per-tick value."""

    now: float = 0.0
    total: float = 0.0
    count: int = 0
    peak: float = 0.0

    def update(self, value: float) -> None:
        self.now = value
        self.total += value
        self.count += 1
        self.peak = max(self.peak, value)

    @property
    def average(self) -> float:
        return self.total / self.count if self.count else 0.0


class MetricsCollector:
    """Central aggregator for per-tick simulation metrics."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """Initialize the metrics collector.

        Args:
            config: Metrics configuration containing:
                - percentiles_to_calculate: List of percentiles (e.g., [0.5, 0.9, 0.99])
                - warm_up_duration_s: Warm-up period excluded from averages and peaks
                - timeseries_window: Number of ticks kept in the time-series log
        """
        self.config = config or {}
        self.warm_up_duration = self.config.get("warm_up_duration_s", 0.0)
        self.percentiles = self.config.get("percentiles_to_calculate", [0.5, 0.9, 0.95, 0.99])

        window = self.config.get("timeseries_window", 1000)
        self.timeseries_log: Deque[TimePointMetric] = deque(maxlen=window * len(METRIC_TYPES))

        self.trackers: Dict[str, RunningMetric] = {}
        self.reset()

        logger.info("MetricsCollector initialized")

    def reset(self) -> None:
        """Forget all recorded ticks."""
        self.timeseries_log.clear()
        self.trackers = {metric_type: RunningMetric() for metric_type in METRIC_TYPES}
        self.ticks_recorded = 0
        self.tasks_generated = 0
        self.tasks_completed = 0
        self.last_snapshot = StatisticsSnapshot()

    def record_tick(
        self, timestamp: float, result: ProcessingResult, snapshot: StatisticsSnapshot
    ) -> None:
        """Record the outcome of one tick."""
        self.last_snapshot = snapshot

        values = {
            METRIC_THROUGHPUT: snapshot.current_throughput,
            METRIC_WAIT_TIME: snapshot.average_wait_time,
            METRIC_UTILIZATION: snapshot.server_utilization,
            METRIC_QUEUE_LENGTH: float(snapshot.total_queue_length),
        }
        for metric_type, value in values.items():
            self.timeseries_log.append(
                TimePointMetric(timestamp_sim=timestamp, value=value, metric_type=metric_type)
            )

        if timestamp < self.warm_up_duration:
            for metric_type, value in values.items():
                self.trackers[metric_type].now = value
            return

        for metric_type, value in values.items():
            self.trackers[metric_type].update(value)
        self.ticks_recorded += 1
        self.tasks_generated += result.new_tasks_count
        self.tasks_completed += result.completed_tasks_count

    def get_tracker(self, metric_type: str) -> RunningMetric:
        return self.trackers[metric_type]

    def generate_summary_report(
        self, simulation_duration_s: float, history: Optional[CompletedTaskHistory] = None
    ) -> Dict[str, Any]:
        """Generate summary statistics.

        Args:
            simulation_duration_s: Total simulation duration in seconds
            history: Retained completed tasks used for wait/sojourn distributions

        Returns:
            Dictionary containing all summary metrics
        """
        effective_duration = simulation_duration_s - self.warm_up_duration

        retained = [
            task for task in (history.tasks() if history is not None else [])
            if task.arrival_time >= self.warm_up_duration
        ]
        wait_values = [task.wait_time for task in retained]
        sojourn_values = [task.sojourn_time for task in retained]

        throughput = self.trackers[METRIC_THROUGHPUT]
        utilization = self.trackers[METRIC_UTILIZATION]
        queue_length = self.trackers[METRIC_QUEUE_LENGTH]

        summary = {
            "simulation": {
                "total_duration_s": simulation_duration_s,
                "warm_up_duration_s": self.warm_up_duration,
                "effective_duration_s": effective_duration,
                "ticks": self.ticks_recorded,
            },
            "tasks": {
                "generated": self.tasks_generated,
                "completed": self.tasks_completed,
                "completed_lifetime": self.last_snapshot.completed_tasks,
                "pending": self.last_snapshot.total_queue_length,
                "retained_window": len(retained),
            },
            "throughput": {
                "tasks_per_second": self.tasks_completed / effective_duration if effective_duration > 0 else 0.0,
                "peak_tasks_per_second": throughput.peak,
            },
            "wait_time_s": self._calculate_stats(wait_values, self.percentiles),
            "sojourn_time_s": self._calculate_stats(sojourn_values, self.percentiles),
            "server_utilization_pct": {
                "mean": utilization.average,
                "peak": utilization.peak,
            },
            "queue_length": {
                "mean": queue_length.average,
                "peak": queue_length.peak,
            },
        }

        logger.info("=" * 60)
        logger.info("SIMULATION SUMMARY")
        logger.info("=" * 60)
        logger.info(f"Duration: {simulation_duration_s:.1f}s (warm-up: {self.warm_up_duration}s)")
        logger.info(
            f"Tasks: {summary['tasks']['generated']} generated, "
            f"{summary['tasks']['completed']} completed"
        )
        logger.info(f"Throughput: {summary['throughput']['tasks_per_second']:.2f} tasks/s")
        logger.info(
            f"Wait (s): mean={summary['wait_time_s'].get('mean', 0):.3f}, "
            f"P99={summary['wait_time_s'].get('p99', 0):.3f}"
        )
        logger.info(f"Utilization: {utilization.average:.1f}% mean, {utilization.peak:.1f}% peak")
        logger.info("=" * 60)

        return summary

    def _calculate_stats(self, values: List[float], percentiles: List[float]) -> Dict[str, float]:
        """Calculate statistics for a list of values."""
        if not values:
            return {"count": 0}

        stats = {
            "count": len(values),
            "mean": float(np.mean(values)),
            "std": float(np.std(values)),
            "min": float(np.min(values)),
            "max": float(np.max(values)),
        }

        for p in percentiles:
            stats[f"p{p * 100:g}"] = float(np.percentile(values, p * 100))

        return stats

    def get_completed_tasks_df(self, history: CompletedTaskHistory) -> pd.DataFrame:
        """Get the retained completed tasks as a pandas DataFrame."""
        tasks = history.tasks()
        if not tasks:
            return pd.DataFrame()

        return pd.DataFrame([
            {
                "task_id": task.id,
                "arrival_time": task.arrival_time,
                "start_time": task.start_time,
                "completion_time": task.completion_time,
                "processing_time": task.processing_time,
                "wait_time": task.wait_time,
                "sojourn_time": task.sojourn_time,
            }
            for task in tasks
        ])

    def get_timeseries_df(self, metric_type: Optional[str] = None) -> pd.DataFrame:
        """Get the per-tick time series as a pandas DataFrame."""
        metrics_list = [
            {
                "timestamp": metric.timestamp_sim,
                "value": metric.value,
                "metric_type": metric.metric_type,
            }
            for metric in self.timeseries_log
            if metric_type is None or metric.metric_type == metric_type
        ]
        return pd.DataFrame(metrics_list)
