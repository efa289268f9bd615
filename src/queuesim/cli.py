"""Command-line interface for queuesim."""

import json
import logging
import sys
from pathlib import Path

import click
import yaml

from queuesim import __version__
from queuesim.interactive import InteractiveSession
from queuesim.orchestration import ExperimentOrchestrator
from queuesim.servers import DISPATCH_STRATEGIES
from queuesim.utils.config_models import MIN_ARRIVAL_RATE, MIN_PROCESSING_TIME
from queuesim.utils.config_validator import load_engine_config, validate_and_fix_config
from queuesim.workload.sampler import ARRIVAL_MODELS

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


@click.group()
@click.version_option(version=__version__, prog_name="queuesim")
def cli():
    """queuesim: Multi-server queue and load-balancing simulator."""
    pass


@cli.command()
@click.argument("config_file", type=click.Path(exists=True))
@click.option(
    "--format", "-f", type=click.Choice(["yaml", "json"]), default="yaml",
    help="Configuration file format"
)
@click.option(
    "--log-level", "-l",
    type=click.Choice(LOG_LEVELS),
    default="INFO",
    help="Logging level"
)
def run(config_file: str, format: str, log_level: str):
    """Run a batch simulation experiment from a configuration file."""
    logging.getLogger().setLevel(getattr(logging, log_level))

    click.echo(f"Loading configuration from {config_file}...")

    try:
        if format == "yaml":
            orchestrator = ExperimentOrchestrator.from_yaml_file(config_file)
        else:
            orchestrator = ExperimentOrchestrator.from_json_file(config_file)

        click.echo("Starting simulation...")
        summary = orchestrator.run()

        click.echo("\nSimulation completed!")
        click.echo(f"Tasks generated: {summary['tasks']['generated']}")
        click.echo(f"Tasks completed: {summary['tasks']['completed']}")
        click.echo(f"Throughput: {summary['throughput']['tasks_per_second']:.2f} tasks/s")
        click.echo(f"Mean utilization: {summary['server_utilization_pct']['mean']:.1f}%")

    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.option("--servers", "-s", type=click.IntRange(min=1), default=3, help="Number of servers")
@click.option("--arrival-rate", "-r", type=float, default=2.0, help="Mean arrivals per second")
@click.option("--processing-time", "-p", type=float, default=1.0, help="Mean processing time in seconds")
@click.option("--variance", "-v", type=click.FloatRange(min=0), default=0.3,
              help="Processing time spread (+/- seconds)")
@click.option("--arrival-model", type=click.Choice(list(ARRIVAL_MODELS)), default="poisson",
              help="Arrival count model")
@click.option("--strategy", type=click.Choice(list(DISPATCH_STRATEGIES)), default="least_loaded",
              help="Load balancing strategy")
@click.option("--tick", type=click.FloatRange(min=0.01), default=0.1, help="Seconds per tick/refresh")
@click.option("--seed", type=int, default=None, help="Random seed")
@click.option(
    "--log-level", "-l",
    type=click.Choice(LOG_LEVELS),
    default="WARNING",
    help="Logging level"
)
def interactive(servers: int, arrival_rate: float, processing_time: float, variance: float,
                arrival_model: str, strategy: str, tick: float, seed, log_level: str):
    """Run a live simulation with a terminal dashboard."""
    logging.getLogger().setLevel(getattr(logging, log_level))

    try:
        engine_config = load_engine_config({
            "server_count": servers,
            "arrival_rate": max(arrival_rate, MIN_ARRIVAL_RATE),
            "processing_time_mean": max(processing_time, MIN_PROCESSING_TIME),
            "processing_variance": variance,
            "arrival_model": arrival_model,
            "load_balancing_strategy": strategy,
        })
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo("Starting Real-Time Queue & Server Load Simulator...")
    session = InteractiveSession(engine_config, tick_interval=tick, random_seed=seed)
    session.run()


@cli.command()
@click.option(
    "--output", "-o", default="example_config.yaml",
    help="Output file path"
)
@click.option(
    "--format", "-f", type=click.Choice(["yaml", "json"]), default="yaml",
    help="Configuration file format"
)
def generate_config(output: str, format: str):
    """Generate an example configuration file."""
    example_config = {
        "simulation": {
            "max_simulation_time": 300,
            "tick_interval_s": 0.1,
            "random_seed": 42,
            "realtime": False,
        },
        "engine": {
            "server_count": 3,
            "arrival_rate": 2.0,
            "processing_time_mean": 1.0,
            "processing_variance": 0.3,
            "arrival_model": "poisson",
            "load_balancing_strategy": "least_loaded",
            "completed_history_limit": 1000,
            "completed_history_trim": 500,
        },
        "metrics_config": {
            "percentiles_to_calculate": [0.5, 0.9, 0.95, 0.99],
            "warm_up_duration_s": 30,
            "timeseries_window": 1000,
            "output_summary_json_path": "experiments/results/summary.json",
            "output_tasks_csv_path": "experiments/results/tasks.csv",
            "output_timeseries_csv_path": "experiments/results/timeseries.csv",
        },
    }

    output_path = Path(output)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w") as f:
        if format == "yaml":
            yaml.dump(example_config, f, default_flow_style=False, sort_keys=False)
        else:
            json.dump(example_config, f, indent=2)

    click.echo(f"Generated example configuration at {output_path}")


@cli.command()
@click.argument("config_file", type=click.Path(exists=True))
def validate(config_file: str):
    """Validate a configuration file without running the simulation."""
    click.echo(f"Validating configuration: {config_file}")

    try:
        is_valid, errors, _ = validate_and_fix_config(config_file)
    except Exception as e:
        click.echo(click.style(f"Error validating configuration: {e}", fg="red"))
        sys.exit(1)

    if is_valid:
        click.echo(click.style("✓ Configuration is valid", fg="green"))
    else:
        click.echo(click.style(f"✗ Configuration has {len(errors)} errors:", fg="red"))
        for i, error in enumerate(errors[:20], 1):
            click.echo(f"  {i}. {error}")
        if len(errors) > 20:
            click.echo(f"  ... and {len(errors) - 20} more errors")

    sys.exit(0 if is_valid else 1)


if __name__ == "__main__":
    cli()
