"""queuesim: multi-server queueing facility simulator."""

__version__ = "0.1.0"
