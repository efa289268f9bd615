"""Terminal dashboard rendering engine state."""

from typing import Any, Dict, List, Sequence

import click

from ..metrics.collector import (
    METRIC_QUEUE_LENGTH,
    METRIC_THROUGHPUT,
    METRIC_UTILIZATION,
    METRIC_WAIT_TIME,
    MetricsCollector,
)

BAR_CELLS = 10


class Dashboard:
    """Formats the server queues and live statistics as terminal lines."""

    def render_header(self, server_count: int, arrival_rate: float, processing_time: float,
                      processing_variance: float) -> List[str]:
        style = dict(fg="cyan")
        return [
            click.style("┌─ Real-Time Server Load Simulator ─┐", **style),
            click.style(f"│ Servers: {server_count} | Arrival Rate: {arrival_rate:.1f}/s", **style),
            click.style(f"│ Processing Time: {processing_time:.1f}s ± {processing_variance:.1f}s", **style),
            click.style("└────────────────────────────────────┘", **style),
            "",
        ]

    def render_server_queues(self, servers: Sequence[Dict[str, Any]]) -> List[str]:
        lines = [click.style("Server Queues:", fg="yellow")]
        for server in servers:
            queue_length = server["queue_length"]
            filled = min(queue_length, BAR_CELLS)
            bar = "█" * filled + "░" * (BAR_CELLS - filled)
            status = (
                click.style("[BUSY]", fg="red") if server["is_busy"]
                else click.style("[IDLE]", fg="green")
            )
            lines.append(
                f"Server {server['id'] + 1}: {bar} ({queue_length}/{BAR_CELLS}) {status}"
            )
        lines.append("")
        return lines

    def render_statistics(self, collector: MetricsCollector) -> List[str]:
        throughput = collector.get_tracker(METRIC_THROUGHPUT)
        wait = collector.get_tracker(METRIC_WAIT_TIME)
        utilization = collector.get_tracker(METRIC_UTILIZATION)
        queue = collector.get_tracker(METRIC_QUEUE_LENGTH)

        return [
            click.style("Live Statistics:", fg="yellow"),
            "┌─────────────────┬────────┬────────┬────────┐",
            "│     Metric      │  Now   │  Avg   │  Peak  │",
            "├─────────────────┼────────┼────────┼────────┤",
            f"│ Tasks/sec       │ {throughput.now:6.1f} │ {throughput.average:6.1f} │ {throughput.peak:6.1f} │",
            f"│ Avg Wait (ms)   │ {wait.now * 1000:6.0f} │ {wait.average * 1000:6.0f} │ {wait.peak * 1000:6.0f} │",
            f"│ Server Util.    │ {utilization.now:5.0f}% │ {utilization.average:5.0f}% │ {utilization.peak:5.0f}% │",
            f"│ Queue Length    │ {queue.now:6.0f} │ {queue.average:6.1f} │ {queue.peak:6.0f} │",
            "└─────────────────┴────────┴────────┴────────┘",
            f"Completed Tasks: {collector.last_snapshot.completed_tasks}",
            "",
        ]

    def render_commands(self) -> List[str]:
        return [
            click.style("Interactive Commands:", fg="blue"),
            "  s <num>  - Change number of servers",
            "  r <rate> - Adjust task arrival rate",
            "  p <time> - Modify processing time",
            "  stats    - Print summary report",
            "  reset    - Restart with empty servers",
            "  q        - Quit simulation",
            "",
        ]

    def render(self, engine, collector: MetricsCollector) -> str:
        """Build the full screen for the current state."""
        generator = engine.task_generator
        lines = []
        lines.extend(self.render_header(
            len(engine.servers),
            generator.arrival_rate,
            generator.processing_time,
            generator.processing_variance,
        ))
        lines.extend(self.render_server_queues(engine.server_snapshots()))
        lines.extend(self.render_statistics(collector))
        lines.extend(self.render_commands())
        return "\n".join(lines)

    def draw(self, engine, collector: MetricsCollector) -> None:
        click.clear()
        click.echo(self.render(engine, collector))
        click.echo("> ", nl=False)
