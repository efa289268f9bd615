"""Parsing and application of interactive text commands."""

import logging
import math
from dataclasses import dataclass
from typing import Optional, Union

from ..utils.config_models import MIN_ARRIVAL_RATE, MIN_PROCESSING_TIME

logger = logging.getLogger(__name__)

SET_SERVERS = "servers"
SET_ARRIVAL_RATE = "arrival_rate"
SET_PROCESSING_TIME = "processing_time"
QUIT = "quit"
SHOW_STATS = "show_stats"
RESET = "reset"

# Commands taking a numeric argument and the type it must parse as
_NUMERIC_COMMANDS = {
    "s": (SET_SERVERS, int),
    "r": (SET_ARRIVAL_RATE, float),
    "p": (SET_PROCESSING_TIME, float),
}

_BARE_COMMANDS = {
    "q": QUIT,
    "stats": SHOW_STATS,
    "reset": RESET,
}


@dataclass(frozen=True)
class Command:
    """A parsed interactive command."""

    type: str
    value: Optional[Union[int, float]] = None


def parse_command(text: Optional[str]) -> Optional[Command]:
    """Parse one line of user input.

    Returns None for empty, unknown or malformed input, which callers ignore.
    """
    if not text:
        return None

    parts = text.strip().split(maxsplit=1)
    if not parts:
        return None

    keyword = parts[0].lower()

    if keyword in _BARE_COMMANDS:
        return Command(_BARE_COMMANDS[keyword])

    if keyword in _NUMERIC_COMMANDS:
        command_type, number_type = _NUMERIC_COMMANDS[keyword]
        if len(parts) < 2:
            return None
        try:
            value = number_type(parts[1].strip())
        except ValueError:
            logger.debug(f"Ignoring malformed number in command: {text!r}")
            return None
        if isinstance(value, float) and not math.isfinite(value):
            return None
        return Command(command_type, value)

    return None


def apply_command(engine, command: Command) -> str:
    """Apply a parsed command to a SimulationEngine.

    Values are floored: at least one server, and at least the minimum rate and
    processing time.

    Returns:
        A short message describing what changed
    """
    if command.type == SET_SERVERS:
        count = max(int(command.value), 1)
        engine.set_server_count(count)
        return f"Updated servers to {count}"

    if command.type == SET_ARRIVAL_RATE:
        rate = max(float(command.value), MIN_ARRIVAL_RATE)
        engine.set_arrival_rate(rate)
        return f"Updated arrival rate to {rate}"

    if command.type == SET_PROCESSING_TIME:
        processing_time = max(float(command.value), MIN_PROCESSING_TIME)
        engine.set_processing_time(processing_time)
        return f"Updated processing time to {processing_time}"

    if command.type == RESET:
        engine.reset()
        return "Simulation reset"

    return ""
