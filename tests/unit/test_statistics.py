"""Unit tests for statistics aggregation and the completed-task window."""

import pytest

from queuesim.metrics import CompletedTaskHistory, StatisticsSnapshot, calculate_statistics
from queuesim.servers import ServerState
from queuesim.workload import Task


def completed_task(task_id, arrival, start, processing=1.0):
    return Task(
        id=task_id,
        arrival_time=arrival,
        processing_time=processing,
        start_time=start,
        completion_time=start + processing,
    )


@pytest.fixture
def servers():
    """Three servers: [busy, queue 2], [idle, queue 0], [busy, queue 1]."""
    result = [ServerState(i) for i in range(3)]
    next_id = 1
    for server, queued in zip(result, [3, 0, 2]):
        for _ in range(queued):
            server.add_task(Task(id=next_id, arrival_time=0.0, processing_time=5.0))
            next_id += 1
        server.step(0.0)
    result[0].total_processed = 4
    result[2].total_processed = 6
    return result


class TestCalculateStatistics:
    """Test the snapshot calculation."""

    def test_empty_window(self, servers):
        stats = calculate_statistics(servers, [], 1.0)
        assert stats.current_throughput == 0.0
        assert stats.average_wait_time == 0.0

    def test_queue_length_excludes_service_slots(self, servers):
        stats = calculate_statistics(servers, [], 1.0)
        assert stats.total_queue_length == sum(s.queue_length for s in servers) == 3

    def test_utilization(self, servers):
        stats = calculate_statistics(servers, [], 1.0)
        assert stats.server_utilization == pytest.approx(200.0 / 3)

    def test_no_servers(self):
        stats = calculate_statistics([], [], 1.0)
        assert stats == StatisticsSnapshot()

    def test_completed_tasks_is_lifetime_total(self, servers):
        window = [completed_task(1, 0.0, 0.5)]
        stats = calculate_statistics(servers, window, 0.1)
        assert stats.completed_tasks == 10

    def test_throughput_pairs_window_with_time(self, servers):
        """Throughput is the window size over the window length.

        Callers pass the tasks completed during the last tick with that tick's
        delta; a longer history paired with a short delta overstates the rate.
        """
        window = [completed_task(i, 0.0, 0.0) for i in range(1, 4)]
        assert calculate_statistics(servers, window, 0.5).current_throughput == pytest.approx(6.0)
        assert calculate_statistics(servers, window, 0.0).current_throughput == 0.0

    def test_average_wait(self, servers):
        window = [completed_task(1, 0.0, 1.0), completed_task(2, 1.0, 4.0)]
        stats = calculate_statistics(servers, window, 1.0)
        assert stats.average_wait_time == pytest.approx(2.0)

    def test_separate_wait_window(self, servers):
        tick_completions = [completed_task(3, 2.0, 2.0)]
        history = [completed_task(1, 0.0, 1.0), completed_task(2, 1.0, 4.0), tick_completions[0]]
        stats = calculate_statistics(servers, tick_completions, 0.1, wait_window=history)
        assert stats.current_throughput == pytest.approx(10.0)
        assert stats.average_wait_time == pytest.approx(4.0 / 3)

    def test_utilization_bounds(self):
        for busy in range(0, 5):
            servers = [ServerState(i) for i in range(4)]
            for server in servers[:busy]:
                server.add_task(Task(id=server.id + 1, arrival_time=0.0, processing_time=1.0))
                server.step(0.0)
            utilization = calculate_statistics(servers, [], 1.0).server_utilization
            assert 0.0 <= utilization <= 100.0
            assert utilization == pytest.approx(busy * 25.0)


class TestCompletedTaskHistory:
    """Test the bounded completed-task window."""

    def test_trims_to_most_recent_suffix(self):
        history = CompletedTaskHistory(limit=10, trim_to=4)
        for i in range(1, 12):
            history.append(completed_task(i, 0.0, 0.0))

        assert [t.id for t in history.tasks()] == [8, 9, 10, 11]

    def test_no_trim_at_limit(self):
        history = CompletedTaskHistory(limit=10, trim_to=4)
        history.extend([completed_task(i, 0.0, 0.0) for i in range(1, 11)])
        assert len(history) == 10

    def test_bound_holds(self):
        history = CompletedTaskHistory(limit=1000, trim_to=500)
        for i in range(1, 5001):
            history.append(completed_task(i, 0.0, 0.0))
            assert len(history) <= 1000
        assert history.tasks()[-1].id == 5000

    def test_wait_times_and_clear(self):
        history = CompletedTaskHistory(limit=10, trim_to=4)
        history.extend([completed_task(1, 0.0, 0.25), completed_task(2, 1.0, 1.5)])
        assert history.wait_times() == [0.25, 0.5]
        history.clear()
        assert len(history) == 0

    def test_invalid_bounds(self):
        with pytest.raises(ValueError):
            CompletedTaskHistory(limit=10, trim_to=10)
