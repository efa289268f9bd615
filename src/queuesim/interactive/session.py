"""Interactive real-time simulation session."""

import json
import logging
import queue
import sys
import threading
from typing import Any, Dict, Optional, TextIO

import click

from ..core import SimulationEngine, SimulationEnvironment, tick_process
from ..metrics import MetricsCollector
from ..metrics.models import ProcessingResult
from ..utils.config_models import EngineConfig
from ..workload import DistributionSampler
from .commands import QUIT, RESET, SHOW_STATS, apply_command, parse_command
from .dashboard import Dashboard

logger = logging.getLogger(__name__)


class InteractiveSession:
    """Runs the engine against the wall clock and applies typed commands between refreshes."""

    def __init__(
        self,
        engine_config: EngineConfig,
        tick_interval: float = 0.1,
        random_seed: Optional[int] = None,
        realtime: bool = True,
        input_stream: Optional[TextIO] = None,
        dashboard: Optional[Dashboard] = None,
    ):
        """Initialize the session.

        Args:
            engine_config: Initial engine parameters
            tick_interval: Simulated seconds per tick and per screen refresh
            random_seed: Seed for the engine's sampler
            realtime: Pace simulated time against wall time
            input_stream: Where commands are read from (stdin by default)
            dashboard: Renderer; a default Dashboard when omitted
        """
        self.tick_interval = tick_interval
        self.sim_env_wrapper = SimulationEnvironment({"realtime": realtime})
        self.engine = SimulationEngine(engine_config, DistributionSampler(random_seed))
        self.metrics_collector = MetricsCollector()
        self.dashboard = dashboard or Dashboard()
        self.input_stream = input_stream if input_stream is not None else sys.stdin

        self.commands: "queue.Queue[Optional[str]]" = queue.Queue()
        self.running = False
        self.reset_time = 0.0

        self.sim_env_wrapper.schedule_process(
            tick_process,
            self.sim_env_wrapper.get_simpy_env(),
            self.engine,
            self.tick_interval,
            self._on_tick,
        )

    def elapsed(self) -> float:
        """Simulated seconds since the session started or was last reset."""
        return self.sim_env_wrapper.now() - self.reset_time

    def _on_tick(self, now: float, result: ProcessingResult) -> None:
        self.metrics_collector.record_tick(now, result, self.engine.get_statistics())

    def _read_input(self) -> None:
        """Reader thread: forward input lines to the main loop. EOF means quit."""
        for line in self.input_stream:
            self.commands.put(line)
        self.commands.put(None)

    def handle_line(self, line: Optional[str]) -> Optional[str]:
        """Apply one line of input. Returns a status message, if any."""
        if line is None:
            self.running = False
            return None

        command = parse_command(line)
        if command is None:
            return None

        if command.type == QUIT:
            self.running = False
            return "Shutting down simulator..."

        if command.type == SHOW_STATS:
            summary = self.metrics_collector.generate_summary_report(
                self.elapsed(), self.engine.history
            )
            return json.dumps(summary, indent=2)

        message = apply_command(self.engine, command)
        if command.type == RESET:
            self.metrics_collector.reset()
            self.reset_time = self.sim_env_wrapper.now()
        return message

    def _drain_commands(self) -> Optional[str]:
        message = None
        while True:
            try:
                line = self.commands.get_nowait()
            except queue.Empty:
                return message
            result = self.handle_line(line)
            if result:
                message = result

    def run(self, max_refreshes: Optional[int] = None) -> Dict[str, Any]:
        """Run until quit (or ``max_refreshes`` screen updates).

        Returns:
            Summary report at exit
        """
        self.running = True
        reader = threading.Thread(target=self._read_input, daemon=True)
        reader.start()

        logger.info("Interactive session started")
        refreshes = 0
        message = None
        try:
            while self.running:
                self.sim_env_wrapper.run_for(self.tick_interval)
                message = self._drain_commands() or message
                self.dashboard.draw(self.engine, self.metrics_collector)
                if message:
                    click.echo(f"\n{message}")

                refreshes += 1
                if max_refreshes is not None and refreshes >= max_refreshes:
                    break
        except KeyboardInterrupt:
            click.echo("\nShutting down simulator...")
        finally:
            self.running = False

        logger.info(f"Interactive session ended at t={self.sim_env_wrapper.now():.1f}s")
        return self.metrics_collector.generate_summary_report(
            self.elapsed(), self.engine.history
        )
