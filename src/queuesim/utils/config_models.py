"""Typed configuration models for the simulator."""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

ArrivalModel = Literal["power", "poisson"]
LoadBalancingStrategy = Literal["least_loaded", "round_robin", "random"]

# Floors applied to interactive/CLI edits of positive parameters
MIN_ARRIVAL_RATE = 0.1
MIN_PROCESSING_TIME = 0.1


class EngineConfig(BaseModel):
    """Parameters of the queueing facility itself."""

    model_config = ConfigDict(validate_assignment=True)

    server_count: int = Field(3, ge=1)
    arrival_rate: float = Field(2.0, gt=0)  # tasks per second
    processing_time_mean: float = Field(1.0, gt=0)  # seconds
    processing_variance: float = Field(0.3, ge=0)  # seconds, +/- uniform spread
    arrival_model: ArrivalModel = "power"
    load_balancing_strategy: LoadBalancingStrategy = "least_loaded"
    completed_history_limit: int = Field(1000, ge=2)
    completed_history_trim: int = Field(500, ge=1)

    @model_validator(mode="after")
    def check_history_bounds(self):
        if self.completed_history_trim >= self.completed_history_limit:
            raise ValueError(
                "completed_history_trim must be smaller than completed_history_limit"
            )
        return self


class SimulationSettings(BaseModel):
    """Clock settings for a simulation run."""

    max_simulation_time: float = Field(60.0, gt=0)
    tick_interval_s: float = Field(0.1, gt=0)
    random_seed: Optional[int] = None
    realtime: bool = False
    realtime_factor: float = Field(1.0, gt=0)  # wall seconds per simulated second


class MetricsSettings(BaseModel):
    """Reporting options for the metrics collector."""

    percentiles_to_calculate: List[float] = Field(default_factory=lambda: [0.5, 0.9, 0.95, 0.99])
    warm_up_duration_s: float = Field(0.0, ge=0)
    timeseries_window: int = Field(1000, ge=1)
    output_summary_json_path: Optional[str] = None
    output_tasks_csv_path: Optional[str] = None
    output_timeseries_csv_path: Optional[str] = None

    @model_validator(mode="after")
    def check_percentiles(self):
        for p in self.percentiles_to_calculate:
            if not 0 < p < 1:
                raise ValueError(f"Percentile {p} must be within (0, 1)")
        return self
