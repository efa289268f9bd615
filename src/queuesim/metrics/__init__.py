"""Metrics collection and reporting module."""

from .collector import MetricsCollector, RunningMetric
from .history import CompletedTaskHistory
from .models import ProcessingResult, StatisticsSnapshot, TimePointMetric
from .statistics import calculate_statistics

__all__ = [
    "MetricsCollector",
    "RunningMetric",
    "CompletedTaskHistory",
    "ProcessingResult",
    "StatisticsSnapshot",
    "TimePointMetric",
    "calculate_statistics",
]
