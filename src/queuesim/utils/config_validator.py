"""
Configuration validation for simulator experiments.

This module provides validation for:
- Engine configurations (servers, arrivals, service times, dispatch)
- Simulation clock configurations
- Metrics/reporting configurations
- Complete experiment files
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar

import yaml
from pydantic import BaseModel, ValidationError

from .config_models import EngineConfig, MetricsSettings, SimulationSettings

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class ConfigurationError(Exception):
    """Raised when configuration validation fails."""
    pass


def _format_validation_errors(section: str, error: ValidationError) -> List[str]:
    """Flatten a pydantic ValidationError into readable messages."""
    messages = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ()))
        prefix = f"{section}.{location}" if location else section
        messages.append(f"{prefix}: {item.get('msg')}")
    return messages


def build_config(model_cls: Type[ModelT], data: Optional[Dict[str, Any]], section: str) -> ModelT:
    """Build a typed config model, raising ConfigurationError on invalid input.

    Args:
        model_cls: Pydantic model class to build
        data: Raw configuration mapping (None means all defaults)
        section: Section name used in error messages

    Returns:
        Validated model instance
    """
    try:
        return model_cls.model_validate(data or {})
    except ValidationError as e:
        raise ConfigurationError("; ".join(_format_validation_errors(section, e))) from e


def load_engine_config(data: Optional[Dict[str, Any]]) -> EngineConfig:
    """Build an EngineConfig from a raw mapping."""
    return build_config(EngineConfig, data, "engine")


class EngineConfigValidator:
    """Validates engine configuration."""

    REQUIRED_FIELDS = {"server_count", "arrival_rate", "processing_time_mean"}

    DEFAULTS = {
        "processing_variance": 0.3,
        "arrival_model": "power",
        "load_balancing_strategy": "least_loaded",
    }

    @classmethod
    def validate(cls, config: Dict[str, Any]) -> List[str]:
        """Validate an engine configuration section."""
        errors = []

        missing = cls.REQUIRED_FIELDS - set(config.keys())
        if missing:
            errors.append(f"Engine config missing required fields: {sorted(missing)}")

        try:
            EngineConfig.model_validate(config)
        except ValidationError as e:
            errors.extend(_format_validation_errors("engine", e))

        return errors

    @classmethod
    def fill_defaults(cls, config: Dict[str, Any]) -> None:
        """Add missing optional fields in place."""
        for key, value in cls.DEFAULTS.items():
            if key not in config:
                config[key] = value
                logger.warning(f"Engine config: added missing {key}={value!r}")


class SimulationConfigValidator:
    """Validates simulation clock configuration."""

    @classmethod
    def validate(cls, config: Dict[str, Any]) -> List[str]:
        """Validate a simulation configuration section."""
        errors = []

        if "max_simulation_time" not in config:
            errors.append("Simulation missing max_simulation_time")

        try:
            settings = SimulationSettings.model_validate(config)
        except ValidationError as e:
            errors.extend(_format_validation_errors("simulation", e))
            return errors

        if settings.tick_interval_s > settings.max_simulation_time:
            errors.append(
                f"tick_interval_s ({settings.tick_interval_s}) exceeds "
                f"max_simulation_time ({settings.max_simulation_time})"
            )

        return errors


class MetricsConfigValidator:
    """Validates metrics configuration."""

    @classmethod
    def validate(cls, config: Dict[str, Any], simulation: Dict[str, Any]) -> List[str]:
        """Validate a metrics configuration section."""
        errors = []

        try:
            settings = MetricsSettings.model_validate(config)
        except ValidationError as e:
            errors.extend(_format_validation_errors("metrics_config", e))
            return errors

        max_time = simulation.get("max_simulation_time")
        if isinstance(max_time, (int, float)) and settings.warm_up_duration_s >= max_time:
            errors.append(
                f"warm_up_duration_s ({settings.warm_up_duration_s}) must be shorter "
                f"than max_simulation_time ({max_time})"
            )

        return errors


class ExperimentConfigValidator:
    """Validates complete experiment configuration."""

    @classmethod
    def validate(cls, config: Dict[str, Any]) -> Tuple[bool, List[str]]:
        """Validate complete experiment configuration."""
        all_errors = []

        if not isinstance(config, dict):
            return False, ["Configuration must be a mapping"]

        required_top = {"simulation", "engine"}
        missing_top = required_top - set(config.keys())
        if missing_top:
            all_errors.append(f"Missing top-level fields: {sorted(missing_top)}")
            return False, all_errors

        all_errors.extend(SimulationConfigValidator.validate(config["simulation"]))
        all_errors.extend(EngineConfigValidator.validate(config["engine"]))
        all_errors.extend(
            MetricsConfigValidator.validate(config.get("metrics_config", {}), config["simulation"])
        )

        return len(all_errors) == 0, all_errors


def load_config_file(config_path: str) -> Dict[str, Any]:
    """Load a YAML or JSON configuration file based on its suffix."""
    config_file = Path(config_path)

    with open(config_file) as f:
        if config_file.suffix in [".yaml", ".yml"]:
            return yaml.safe_load(f)
        return json.load(f)


def validate_and_fix_config(config_path: str) -> Tuple[bool, List[str], Optional[Dict[str, Any]]]:
    """
    Load, validate, and attempt to fix a configuration file.

    Returns:
        (is_valid, errors, fixed_config)
    """
    config = load_config_file(config_path)

    if isinstance(config, dict) and isinstance(config.get("engine"), dict):
        EngineConfigValidator.fill_defaults(config["engine"])

    is_valid, errors = ExperimentConfigValidator.validate(config)

    if not is_valid:
        logger.warning(f"Configuration has {len(errors)} validation errors")
        for error in errors[:10]:
            logger.warning(f"  - {error}")
        if len(errors) > 10:
            logger.warning(f"  ... and {len(errors) - 10} more errors")

    return is_valid, errors, config
