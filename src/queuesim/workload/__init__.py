"""Task generation module."""

from .models import Task
from .sampler import DistributionSampler
from .task_generator import TaskGenerator

__all__ = ["Task", "DistributionSampler", "TaskGenerator"]
