"""Interactive terminal session module."""

from .commands import Command, apply_command, parse_command
from .dashboard import Dashboard
from .session import InteractiveSession

__all__ = ["Command", "Dashboard", "InteractiveSession", "apply_command", "parse_command"]
