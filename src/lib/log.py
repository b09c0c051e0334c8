"""
Centralized logging using Loguru with context-aware verbosity.

LOG() respects the current ProgramState's verbosity without explicit state
passing, and every record carries the name of the kit file being expanded
when it was emitted.

Verbosity levels map onto loguru levels:
    1 -> INFO     progress (pages compiled, site summary)
    2 -> DEBUG    imports, includes and resolved paths
    3 -> TRACE    every directive and variable assignment

Setting KITBUILD_DEBUG_MODE=true logs everything regardless of verbosity.

Usage:
    from kitbuild.lib.log import LOG, state_connectToLogger, kitfile_context

    state_connectToLogger(state)

    with kitfile_context(path):
        LOG("importing footer.kit", level=2)
"""

import sys
from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path
from typing import Any, Iterator, Optional, Union

from loguru import logger

from ..config import appsettings

# Context variable to hold current ProgramState
_program_state: ContextVar[Optional[Any]] = ContextVar('program_state', default=None)

LEVELS = {1: "INFO", 2: "DEBUG", 3: "TRACE"}

logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <5}</level> │ "
    "<magenta>{extra[kitfile]: <16}</magenta> ║ "
    "<level>{message}</level>"
)

logger.remove()
logger.configure(extra={"kitfile": "-"})
logger.add(sys.stderr, format=logger_format, level="TRACE")


def state_connectToLogger(state: Any) -> None:
    """
    Connect a ProgramState to the logging context.

    Args:
        state: ProgramState instance with verbosity attribute
    """
    _program_state.set(state)


@contextmanager
def kitfile_context(path: Union[str, Path]) -> Iterator[None]:
    """Tag records logged inside the block with the kit file name"""
    with logger.contextualize(kitfile=Path(path).name):
        yield


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log message if current state's verbosity allows.

    Args:
        message: Log message to display
        level: Minimum verbosity level required (1=normal, 2=verbose, 3=debug)
        **kwargs: Additional loguru metadata
    """
    state = _program_state.get()
    verbosity = getattr(state, 'verbosity', 0) if state else 0

    if verbosity >= level or appsettings.debug_mode:
        logger.opt(depth=1).log(LEVELS.get(level, "TRACE"), message, **kwargs)
