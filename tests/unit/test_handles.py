"""Unit tests for the handle-based embedding boundary."""

import threading

import pytest

from queuesim.core import handles
from queuesim.core.handles import EngineContext, ServerHandle
from queuesim.metrics import ProcessingResult, StatisticsSnapshot
from queuesim.utils.config_models import EngineConfig
from queuesim.utils.config_validator import ConfigurationError
from queuesim.workload import DistributionSampler


@pytest.fixture
def ctx():
    config = EngineConfig(
        arrival_rate=20.0,
        processing_time_mean=0.3,
        processing_variance=0.1,
        arrival_model="poisson",
    )
    return EngineContext(config, DistributionSampler(seed=9))


class TestHandleLifecycle:
    """Test create/step/statistics/destroy."""

    def test_create_and_step(self, ctx):
        server_handles = [handles.create_server(ctx, i) for i in range(3)]
        assert all(isinstance(h, ServerHandle) for h in server_handles)
        assert len({h.value for h in server_handles}) == 3

        generated = 0
        completed = 0
        t = 0.0
        for _ in range(50):
            t += 0.1
            result = handles.process_simulation_step(ctx, server_handles, 0.1, t)
            generated += result.new_tasks_count
            completed += result.completed_tasks_count

        assert generated > 0
        assert completed > 0

        stats = handles.get_statistics(ctx, server_handles, 0.1)
        assert stats.completed_tasks == completed
        assert 0.0 <= stats.server_utilization <= 100.0

    def test_destroyed_handle_rejected(self, ctx):
        h0 = handles.create_server(ctx, 0)
        h1 = handles.create_server(ctx, 1)
        handles.destroy_server(ctx, h1)

        assert handles.process_simulation_step(ctx, [h0, h1], 0.1, 0.1) == ProcessingResult()
        assert handles.get_statistics(ctx, [h0, h1], 0.1) == StatisticsSnapshot()

    def test_double_destroy_is_noop(self, ctx):
        h = handles.create_server(ctx, 0)
        handles.destroy_server(ctx, h)
        handles.destroy_server(ctx, h)
        handles.destroy_server(ctx, None)

    @pytest.mark.parametrize("raw", [1, "1", 1.0])
    def test_destroy_raw_value_is_noop(self, ctx, raw):
        h = handles.create_server(ctx, 0)
        handles.destroy_server(ctx, raw)
        assert ctx.resolve([h]) is not None


class TestBoundaryMisuse:
    """Test zeroed results for invalid input."""

    def test_missing_context(self):
        assert handles.create_server(None, 0) is None
        assert handles.process_simulation_step(None, [], 0.1, 0.1) == ProcessingResult()
        assert handles.get_statistics(None, [], 0.1) == StatisticsSnapshot()
        assert handles.update_arrival_rate(None, 1.0) is False

    def test_missing_handles(self, ctx):
        assert handles.process_simulation_step(ctx, None, 0.1, 0.1) == ProcessingResult()
        assert handles.get_statistics(ctx, None, 0.1) == StatisticsSnapshot()

    def test_foreign_handle(self, ctx):
        other = EngineContext(EngineConfig(), DistributionSampler(seed=1))
        foreign = handles.create_server(other, 0)
        handles.create_server(ctx, 0)
        unknown = ServerHandle(foreign.value + 100)
        assert handles.process_simulation_step(ctx, [unknown], 0.1, 0.1) == ProcessingResult()

    def test_non_handle_values(self, ctx):
        assert handles.get_statistics(ctx, [None], 0.1) == StatisticsSnapshot()
        assert handles.get_statistics(ctx, [1], 0.1) == StatisticsSnapshot()

    def test_duplicate_handles_rejected(self, ctx):
        h = handles.create_server(ctx, 0)
        assert handles.process_simulation_step(ctx, [h, h], 0.1, 0.1) == ProcessingResult()

    def test_rejected_step_generates_nothing(self, ctx):
        handles.process_simulation_step(ctx, None, 10.0, 10.0)
        assert ctx.task_generator.next_id == 1


class TestContext:
    """Test context-level operations."""

    def test_init_engine(self):
        ctx = handles.init_engine(2.0, 1.0, 0.3)
        assert ctx.task_generator.arrival_rate == 2.0
        assert ctx.task_generator.processing_time == 1.0
        assert ctx.task_generator.processing_variance == 0.3

    @pytest.mark.parametrize("rate,processing_time,variance", [
        (0.0, 1.0, 0.3),
        (2.0, -1.0, 0.3),
        (2.0, 1.0, -0.1),
    ])
    def test_init_engine_rejects_bad_parameters(self, rate, processing_time, variance):
        with pytest.raises(ConfigurationError):
            handles.init_engine(rate, processing_time, variance)

    def test_update_arrival_rate(self, ctx):
        assert handles.update_arrival_rate(ctx, 5.0) is True
        assert ctx.task_generator.arrival_rate == 5.0
        assert handles.update_arrival_rate(ctx, 0.0) is False
        assert ctx.task_generator.arrival_rate == 5.0

    def test_concurrent_steps_are_serialized(self, ctx):
        """Steps from several threads never lose or duplicate tasks."""
        server_handles = [handles.create_server(ctx, i) for i in range(2)]
        generated = []
        lock = threading.Lock()

        def worker():
            for _ in range(50):
                result = handles.process_simulation_step(ctx, server_handles, 0.1, 0.0)
                with lock:
                    generated.append(result.new_tasks_count)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(generated) == 200
        assert ctx.task_generator.next_id == 1 + sum(generated)
