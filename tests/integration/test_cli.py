"""Integration tests for the command-line interface."""

import yaml
from click.testing import CliRunner

from queuesim.cli import cli


def test_generate_validate_run(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    runner = CliRunner()

    result = runner.invoke(cli, ["generate-config", "-o", "config.yaml"])
    assert result.exit_code == 0
    assert (tmp_path / "config.yaml").exists()

    result = runner.invoke(cli, ["validate", "config.yaml"])
    assert result.exit_code == 0
    assert "Configuration is valid" in result.output

    # Shorten the run before executing it
    config = yaml.safe_load((tmp_path / "config.yaml").read_text())
    config["simulation"]["max_simulation_time"] = 10
    config["metrics_config"]["warm_up_duration_s"] = 1
    (tmp_path / "config.yaml").write_text(yaml.dump(config))

    result = runner.invoke(cli, ["run", "config.yaml", "-l", "WARNING"])
    assert result.exit_code == 0, result.output
    assert "Simulation completed!" in result.output
    assert (tmp_path / "experiments" / "results" / "summary.json").exists()
    assert (tmp_path / "experiments" / "results" / "tasks.csv").exists()


def test_validate_reports_errors(tmp_path):
    config_path = tmp_path / "bad.yaml"
    config_path.write_text(yaml.dump({
        "simulation": {"max_simulation_time": 10},
        "engine": {"server_count": 0, "arrival_rate": -1, "processing_time_mean": 1.0},
    }))

    result = CliRunner().invoke(cli, ["validate", str(config_path)])

    assert result.exit_code == 1
    assert "errors" in result.output
    assert "server_count" in result.output


def test_run_reports_invalid_config(tmp_path):
    config_path = tmp_path / "bad.json"
    config_path.write_text('{"simulation": {"max_simulation_time": 5}}')

    result = CliRunner().invoke(cli, ["run", str(config_path), "-f", "json"])

    assert result.exit_code == 1
    assert "Error" in result.output
