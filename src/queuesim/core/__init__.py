"""Core simulation engine and clock."""

from .engine import SimulationEngine, process_tick
from .simulation_environment import SimulationEnvironment, tick_process

__all__ = ["SimulationEngine", "SimulationEnvironment", "process_tick", "tick_process"]
