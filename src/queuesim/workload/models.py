"""Data models for task generation."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Task:
    """Represents one unit of work flowing through the facility.

    Tasks are immutable values. Starting or finishing service produces an
    updated copy (see ``dataclasses.replace``) that takes the place of the old
    one, so a task only ever lives in one container at a time.
    """

    id: int
    arrival_time: float
    processing_time: float
    start_time: float = 0.0  # Set when service begins
    completion_time: float = 0.0  # Set when service finishes

    def __post_init__(self) -> None:
        if self.processing_time <= 0:
            raise ValueError(
                f"Task {self.id}: processing_time must be > 0, got {self.processing_time}"
            )

    @property
    def wait_time(self) -> float:
        """Time spent queued before service began."""
        return self.start_time - self.arrival_time

    @property
    def sojourn_time(self) -> float:
        """Total time from arrival to completion."""
        return self.completion_time - self.arrival_time
