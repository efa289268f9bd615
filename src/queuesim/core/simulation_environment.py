"""Core simulation environment wrapper around SimPy."""

import logging
from typing import Any, Callable, Dict, Optional

import simpy
import simpy.rt

logger = logging.getLogger(__name__)


class SimulationEnvironment:
    """Wrapper around a simpy environment providing the simulation clock.

    Batch runs use a plain ``simpy.Environment`` that jumps between events.
    Interactive runs use ``simpy.rt.RealtimeEnvironment`` so simulated seconds
    track wall-clock seconds.
    """

    def __init__(self, config: Dict[str, Any]) -> None:
        """Initialize the simulation environment.

        Args:
            config: Simulation-specific configuration containing:
                - max_simulation_time: Maximum duration for the simulation in simulated seconds
                - realtime (optional): Pace the clock against wall time
                - realtime_factor (optional): Wall seconds per simulated second
        """
        self.config: Dict[str, Any] = config
        self.active_processes: list = []

        self.realtime = bool(config.get("realtime", False))
        if self.realtime:
            self.env: simpy.Environment = simpy.rt.RealtimeEnvironment(
                factor=config.get("realtime_factor", 1.0), strict=False
            )
        else:
            self.env = simpy.Environment()

        logger.info(f"SimulationEnvironment initialized (realtime={self.realtime})")

    def schedule_process(self, process_generator_func: Callable, *args, **kwargs) -> simpy.Process:
        """Schedule a main SimPy process (a generator function).

        Args:
            process_generator_func: A generator function that yields SimPy events
            *args: Positional arguments for the generator function
            **kwargs: Keyword arguments for the generator function

        Returns:
            The SimPy Process object
        """
        process = self.env.process(process_generator_func(*args, **kwargs))
        self.active_processes.append(process)
        logger.debug(f"Scheduled process: {process_generator_func.__name__}")
        return process

    def run(self) -> None:
        """Run until max_simulation_time is reached or no more events are scheduled."""
        max_simulation_time = self.config.get("max_simulation_time", float("inf"))

        logger.info(f"Starting simulation (max time: {max_simulation_time}s)")

        try:
            self.env.run(until=max_simulation_time)
            logger.info(f"Simulation completed successfully at time {self.env.now}")
        except Exception as e:
            logger.error(f"Error during simulation at time {self.env.now}: {e}")
            raise
        finally:
            logger.info(f"Simulation ended at time {self.env.now}")

    def run_for(self, duration: float) -> None:
        """Advance the clock by ``duration`` simulated seconds."""
        self.env.run(until=self.env.now + duration)

    def now(self) -> float:
        """Get the current simulation time in seconds."""
        return self.env.now

    def get_simpy_env(self) -> simpy.Environment:
        """Provide access to the raw SimPy environment."""
        return self.env


def tick_process(
    env: simpy.Environment,
    engine: Any,
    tick_interval: float,
    on_tick: Optional[Callable[[float, Any], None]] = None,
):
    """SimPy process advancing ``engine`` once every ``tick_interval`` seconds.

    Args:
        env: SimPy environment supplying the clock
        engine: SimulationEngine (or anything with ``step(delta, now)``)
        tick_interval: Simulated seconds between ticks
        on_tick: Optional callback receiving (now, ProcessingResult)
    """
    last_time = env.now
    while True:
        yield env.timeout(tick_interval)
        now = env.now
        result = engine.step(now - last_time, now)
        last_time = now
        if on_tick is not None:
            on_tick(now, result)
