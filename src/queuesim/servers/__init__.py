"""Server state machine and dispatch module."""

from .dispatcher import DISPATCH_STRATEGIES, Dispatcher, select_least_loaded_server
from .server_state import ServerState

__all__ = ["ServerState", "Dispatcher", "DISPATCH_STRATEGIES", "select_least_loaded_server"]
