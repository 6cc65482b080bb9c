# ===== MODULE DOCSTRING ===== #
"""Error utilities for hookwrap: the exception hierarchy and message formatting."""

# ===== IMPORTS ===== #

## ===== STANDARD LIBRARY ===== ##
from typing import Any, Final, List, Optional

## ===== LOCAL ===== ##
from .config import MAX_VALUE_REPR_LENGTH

# ===== GLOBALS ===== #

## ===== EXPORTS ===== ##
__all__: Final[List[str]] = [
    'HookWrapError',
    'InvalidArgumentError',
    '_format_value',
    '_format_invalid_argument',
]

# ===== CLASSES ===== #

class HookWrapError(Exception):
    """Base class for all exceptions raised by hookwrap."""

class InvalidArgumentError(HookWrapError, TypeError):
    """Raised when wrap() or an option function receives an unusable value.

    Attributes:
        argument (str): Name of the offending argument.
        value (Any): The value that was rejected.
    """
    def __init__(self, argument: str, value: Any, reason: Optional[str] = None):
        super().__init__(_format_invalid_argument(argument, value, reason))
        self.argument = argument
        self.value = value

# ===== FUNCTIONS ===== #

def _format_value(value: Any) -> str:
    """Return repr(value), truncated to MAX_VALUE_REPR_LENGTH characters."""
    try:
        value_repr = repr(value)
    except Exception as e:
        value_repr = f"<unrepresentable {type(value).__name__}: {e!r}>"
    if len(value_repr) > MAX_VALUE_REPR_LENGTH:
        value_repr = value_repr[:MAX_VALUE_REPR_LENGTH] + "..."
    return value_repr

def _format_invalid_argument(argument: str, value: Any, reason: Optional[str] = None) -> str:
    """Build the message for an InvalidArgumentError."""
    reason = reason or "expected a callable"
    return (
        f"Invalid value for '{argument}': {reason}, "
        f"got {type(value).__name__} {_format_value(value)}"
    )
