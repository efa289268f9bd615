"""Arrival generator producing synthetic tasks for each time slice."""

import logging
from typing import List, Optional

from ..utils.config_validator import ConfigurationError
from .models import Task
from .sampler import ARRIVAL_MODELS, DistributionSampler

logger = logging.getLogger(__name__)

MIN_PROCESSING_TIME = 0.1


class TaskGenerator:
    """Generates new tasks according to the configured arrival pattern.

    The generator owns only its id counter and its parameters. Tasks are handed
    to the caller and never retained.
    """

    def __init__(
        self,
        arrival_rate: float,
        processing_time: float,
        processing_variance: float = 0.0,
        arrival_model: str = "power",
        sampler: Optional[DistributionSampler] = None,
    ):
        """Initialize the task generator.

        Args:
            arrival_rate: Mean arrivals per simulated second (> 0)
            processing_time: Mean service duration in seconds (> 0)
            processing_variance: Half-width of the uniform service-time spread (>= 0)
            arrival_model: 'power' (u ** (1/expected) transform) or 'poisson'
            sampler: Random source; a fresh unseeded sampler when omitted
        """
        self.next_id = 1
        self.sampler = sampler or DistributionSampler()

        self.arrival_rate = arrival_rate
        self.processing_time = processing_time
        self.processing_variance = processing_variance
        self.arrival_model = arrival_model

        logger.info(
            f"TaskGenerator initialized: rate={self.arrival_rate}/s, "
            f"processing={self.processing_time}s +/- {self.processing_variance}s, "
            f"model={self.arrival_model}"
        )

    @property
    def arrival_rate(self) -> float:
        return self._arrival_rate

    @arrival_rate.setter
    def arrival_rate(self, value: float) -> None:
        if not value > 0:
            raise ConfigurationError(f"arrival_rate must be > 0, got {value}")
        self._arrival_rate = float(value)

    @property
    def processing_time(self) -> float:
        return self._processing_time

    @processing_time.setter
    def processing_time(self, value: float) -> None:
        if not value > 0:
            raise ConfigurationError(f"processing_time must be > 0, got {value}")
        self._processing_time = float(value)

    @property
    def processing_variance(self) -> float:
        return self._processing_variance

    @processing_variance.setter
    def processing_variance(self, value: float) -> None:
        if not value >= 0:
            raise ConfigurationError(f"processing_variance must be >= 0, got {value}")
        self._processing_variance = float(value)

    @property
    def arrival_model(self) -> str:
        return self._arrival_model

    @arrival_model.setter
    def arrival_model(self, value: str) -> None:
        if value not in ARRIVAL_MODELS:
            raise ConfigurationError(
                f"Unknown arrival model: {value} (expected one of {', '.join(ARRIVAL_MODELS)})"
            )
        self._arrival_model = value

    def generate_tasks(self, delta_time: float, current_time: float) -> List[Task]:
        """Create the tasks arriving during the last ``delta_time`` seconds.

        Args:
            delta_time: Elapsed simulated seconds since the previous call (>= 0)
            current_time: Absolute simulated clock, stamped as arrival time

        Returns:
            Newly created tasks in id order (possibly empty)
        """
        expected = self.arrival_rate * delta_time
        num_tasks = self.sampler.arrival_count(expected, self.arrival_model)

        tasks = []
        for _ in range(num_tasks):
            processing_time = self.sampler.processing_time(
                self.processing_time, self.processing_variance, MIN_PROCESSING_TIME
            )
            tasks.append(
                Task(
                    id=self.next_id,
                    arrival_time=current_time,
                    processing_time=processing_time,
                )
            )
            self.next_id += 1

        if tasks:
            logger.debug(
                f"Generated {len(tasks)} tasks at t={current_time:.3f} "
                f"(ids {tasks[0].id}-{tasks[-1].id})"
            )

        return tasks
