"""
Loguru logging gated by the verbosity of the active export.

Each export connects its ExportState through a ContextVar, so concurrent
exports in separate asyncio tasks log at their own verbosity. Outside an
export or CLI run (no connected state) LOG() is silent.

Levels: 1 normal, 2 verbose (-v), 3 debug (-vv).
"""

from loguru import logger
from typing import Any, Optional
from contextvars import ContextVar
import sys

# Context variable to hold current ExportState
_export_state: ContextVar[Optional[Any]] = ContextVar('export_state', default=None)

# Configure loguru with mdnotes-specific format
logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <5}</level> │ "
    "<cyan>{function: <20}</cyan> @ "
    "<cyan>{line: <4}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()  # Remove default handler
logger.add(sys.stderr, format=logger_format, level="DEBUG")


def state_connectToLogger(state: Any) -> None:
    """Make the state's verbosity govern LOG() in the current context"""
    _export_state.set(state)


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log message if the connected state's verbosity is at least `level`.

    Args:
        message: Log message to display
        level: Minimum verbosity required (1=normal, 2=verbose, 3=debug)
        **kwargs: Additional loguru metadata
    """
    state = _export_state.get()

    if state and hasattr(state, 'verbosity') and state.verbosity >= level:
        logger.opt(depth=1).debug(message, **kwargs)
