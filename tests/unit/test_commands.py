"""Unit tests for interactive command parsing and the dashboard."""

import click
import pytest

from queuesim.core import SimulationEngine
from queuesim.interactive import Command, Dashboard, apply_command, parse_command
from queuesim.interactive.commands import (
    QUIT,
    RESET,
    SET_ARRIVAL_RATE,
    SET_PROCESSING_TIME,
    SET_SERVERS,
    SHOW_STATS,
)
from queuesim.metrics import MetricsCollector, ProcessingResult, StatisticsSnapshot
from queuesim.utils.config_models import EngineConfig
from queuesim.workload import DistributionSampler


class TestParseCommand:
    """Test text command parsing."""

    @pytest.mark.parametrize("text,expected", [
        ("s 5", Command(SET_SERVERS, 5)),
        ("S 2\n", Command(SET_SERVERS, 2)),
        ("r 3.5", Command(SET_ARRIVAL_RATE, 3.5)),
        ("p 0.25", Command(SET_PROCESSING_TIME, 0.25)),
        ("q", Command(QUIT)),
        ("stats", Command(SHOW_STATS)),
        ("reset", Command(RESET)),
    ])
    def test_valid_commands(self, text, expected):
        assert parse_command(text) == expected

    @pytest.mark.parametrize("text", [
        "", "   ", None, "x", "s", "s abc", "s 2.5", "r fast", "p", "r nan", "r inf",
    ])
    def test_invalid_input_ignored(self, text):
        assert parse_command(text) is None


class TestApplyCommand:
    """Test applying commands to an engine."""

    @pytest.fixture
    def engine(self):
        return SimulationEngine(EngineConfig(), DistributionSampler(seed=3))

    def test_set_servers(self, engine):
        apply_command(engine, Command(SET_SERVERS, 5))
        assert len(engine.servers) == 5

    def test_servers_floored_at_one(self, engine):
        apply_command(engine, Command(SET_SERVERS, 0))
        assert len(engine.servers) == 1

    def test_rate_and_processing_floored(self, engine):
        apply_command(engine, Command(SET_ARRIVAL_RATE, -4.0))
        apply_command(engine, Command(SET_PROCESSING_TIME, 0.0))
        assert engine.task_generator.arrival_rate == pytest.approx(0.1)
        assert engine.task_generator.processing_time == pytest.approx(0.1)

    def test_reset(self, engine):
        message = apply_command(engine, Command(RESET))
        assert message == "Simulation reset"


class TestDashboard:
    """Test dashboard rendering."""

    def test_render_contains_servers_and_stats(self):
        engine = SimulationEngine(EngineConfig(server_count=2), DistributionSampler(seed=3))
        collector = MetricsCollector()
        collector.record_tick(
            0.1,
            ProcessingResult(0, 0),
            StatisticsSnapshot(current_throughput=2.5, server_utilization=50.0, completed_tasks=7),
        )

        screen = click.unstyle(Dashboard().render(engine, collector))

        assert "Servers: 2" in screen
        assert "Server 1: ░░░░░░░░░░ (0/10) [IDLE]" in screen
        assert "Server 2:" in screen
        assert "Completed Tasks: 7" in screen
        assert "2.5" in screen

    def test_queue_bar_saturates(self):
        lines = Dashboard().render_server_queues([
            {"id": 0, "queue_length": 25, "is_busy": True},
        ])
        assert "██████████ (25/10)" in click.unstyle(lines[1])
        assert "[BUSY]" in click.unstyle(lines[1])
