"""Experiment orchestrator for managing simulation execution."""

import json
import logging
from pathlib import Path
from pprint import pformat
from typing import Any, Dict, Optional

import yaml

from ..core import SimulationEngine, SimulationEnvironment, tick_process
from ..metrics import MetricsCollector
from ..metrics.models import ProcessingResult
from ..utils.config_models import EngineConfig, MetricsSettings, SimulationSettings
from ..utils.config_validator import build_config
from ..workload import DistributionSampler

logger = logging.getLogger(__name__)


class ExperimentOrchestrator:
    """Main entry point to set up and run batch simulation experiments."""

    def __init__(self, config_data: Dict[str, Any]):
        """Initialize the orchestrator with experiment configuration.

        Args:
            config_data: Complete experiment configuration dictionary
        """
        self.config = config_data
        self._validate_config()

        self.simulation_settings: SimulationSettings = build_config(
            SimulationSettings, self.config["simulation"], "simulation"
        )
        self.engine_config: EngineConfig = build_config(EngineConfig, self.config["engine"], "engine")
        self.metrics_settings: MetricsSettings = build_config(
            MetricsSettings, self.config.get("metrics_config"), "metrics_config"
        )

        # Component instances (initialized in setup_simulation)
        self.sim_env_wrapper: Optional[SimulationEnvironment] = None
        self.engine: Optional[SimulationEngine] = None
        self.metrics_collector: Optional[MetricsCollector] = None

        logger.info("ExperimentOrchestrator initialized")

    def _validate_config(self) -> None:
        """Validate the experiment configuration structure."""
        required_sections = ["simulation", "engine"]

        for section in required_sections:
            if section not in self.config:
                raise ValueError(f"Missing required configuration section: {section}")

        if "max_simulation_time" not in self.config["simulation"]:
            raise ValueError("simulation.max_simulation_time is required")

        logger.info("Configuration validated successfully")

    def setup_simulation(self) -> None:
        """Initialize all simulation components."""
        logger.info("Setting up simulation components...")

        # 1. Clock
        self.sim_env_wrapper = SimulationEnvironment(self.simulation_settings.model_dump())

        # 2. Metrics
        self.metrics_collector = MetricsCollector(self.metrics_settings.model_dump())

        # 3. Engine
        sampler = DistributionSampler(self.simulation_settings.random_seed)
        self.engine = SimulationEngine(self.engine_config, sampler)

        logger.info("Simulation setup complete")

    def _on_tick(self, now: float, result: ProcessingResult) -> None:
        self.metrics_collector.record_tick(now, result, self.engine.get_statistics())

    def run(self) -> Dict[str, Any]:
        """Run the complete simulation experiment.

        Returns:
            Summary report dictionary
        """
        if self.sim_env_wrapper is None:
            self.setup_simulation()

        logger.info("=" * 60)
        logger.info("STARTING SIMULATION EXPERIMENT")
        logger.info("=" * 60)
        logger.info(f"Configuration: {pformat(self.config)}")

        self.sim_env_wrapper.schedule_process(
            tick_process,
            self.sim_env_wrapper.get_simpy_env(),
            self.engine,
            self.simulation_settings.tick_interval_s,
            self._on_tick,
        )
        logger.info("Started tick process")

        self.sim_env_wrapper.run()

        simulation_duration = self.sim_env_wrapper.now()
        summary_report = self.metrics_collector.generate_summary_report(
            simulation_duration, self.engine.history
        )

        summary_path = self.metrics_settings.output_summary_json_path
        if summary_path:
            summary_file = Path(summary_path)
            summary_file.parent.mkdir(parents=True, exist_ok=True)
            with open(summary_file, "w") as f:
                json.dump(summary_report, f, indent=2)
            logger.info(f"Saved summary report to {summary_file}")

        tasks_csv = self.metrics_settings.output_tasks_csv_path
        if tasks_csv:
            csv_file = Path(tasks_csv)
            csv_file.parent.mkdir(parents=True, exist_ok=True)
            self.metrics_collector.get_completed_tasks_df(self.engine.history).to_csv(csv_file, index=False)
            logger.info(f"Saved completed tasks to {csv_file}")

        timeseries_csv = self.metrics_settings.output_timeseries_csv_path
        if timeseries_csv:
            csv_file = Path(timeseries_csv)
            csv_file.parent.mkdir(parents=True, exist_ok=True)
            self.metrics_collector.get_timeseries_df().to_csv(csv_file, index=False)
            logger.info(f"Saved time series to {csv_file}")

        logger.info("=" * 60)
        logger.info("SIMULATION EXPERIMENT COMPLETED")
        logger.info("=" * 60)

        return summary_report

    @classmethod
    def from_yaml_file(cls, config_path: str) -> "ExperimentOrchestrator":
        """Create an orchestrator from a YAML configuration file."""
        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f)

        return cls(config_data)

    @classmethod
    def from_json_file(cls, config_path: str) -> "ExperimentOrchestrator":
        """Create an orchestrator from a JSON configuration file."""
        with open(config_path, "r") as f:
            config_data = json.load(f)

        return cls(config_data)
