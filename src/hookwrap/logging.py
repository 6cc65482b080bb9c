# ===== MODULE DOCSTRING ===== #
"""
The ``hookwrap`` logger.

hookwrap says little at the default WARNING level: only a result whose
shape contradicts its return annotation is reported. At DEBUG it traces
signature cache misses and hits, every wrap, and the stage (pre_hook,
call or post_hook) at which each short-circuited call failed.

Records go to stderr as "LEVEL:hookwrap: message". Hosts with their own
logging setup can remove the handler or rely on propagation to the root
logger.

Usage:
    import logging
    from hookwrap.logging import set_verbosity

    set_verbosity(logging.DEBUG)   # watch hook failures while debugging
"""

# ===== IMPORTS ===== #

## ===== STANDARD LIBRARY ===== ##
from typing import Final, List
import logging
import sys

## ===== LOCAL ===== ##
from .config import LOG_FORMAT, DEFAULT_LOG_LEVEL

# ===== GLOBALS ===== #

## ===== CONSTANTS ===== ##
VALID_LEVELS: Final[List[int]] = [
    logging.DEBUG,
    logging.INFO,
    logging.WARNING,
    logging.ERROR,
    logging.CRITICAL
]

## ===== LOGGER SETUP ===== ##
_log: Final[logging.Logger] = logging.getLogger('hookwrap')

handler: Final[logging.StreamHandler] = logging.StreamHandler(sys.stderr)
handler.setFormatter(logging.Formatter(LOG_FORMAT))

# Only configure once, even if the module is reloaded
if not _log.handlers:
    _log.addHandler(handler)
    _log.setLevel(DEFAULT_LOG_LEVEL)

## ===== PUBLIC API ALIAS ===== ##
logger = _log

## ===== EXPORTS ===== ##
__all__: Final[List[str]] = [
    'logger',
    'set_verbosity',
]

# ===== FUNCTIONS ===== #

def set_verbosity(level: int) -> None:
    """Set the logging verbosity level for the hookwrap logger.

    Args:
        level: A logging level constant from the logging module
              (e.g., logging.DEBUG, logging.INFO, logging.WARNING)

    Raises:
        ValueError: If an invalid logging level is provided

    Example:
        >>> import logging
        >>> from hookwrap.logging import set_verbosity
        >>> set_verbosity(logging.DEBUG)
    """
    if level not in VALID_LEVELS:
        raise ValueError(
            f"Invalid logging level: {level}. "
            f"Use logging module constants (e.g., logging.DEBUG). "
            f"Valid levels: {[logging.getLevelName(l) for l in VALID_LEVELS]}"
        )

    _log.setLevel(level)
    if _log.isEnabledFor(logging.DEBUG):
        _log.debug(f"TRACE logging.set_verbosity: hookwrap verbosity set to {logging.getLevelName(level)}")
