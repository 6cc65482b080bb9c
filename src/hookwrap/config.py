# ===== MODULE DOCSTRING ===== #
"""
Configuration constants for hookwrap.

hookwrap is configured per wrap through the option functions in
``hookwrap.wrapper``. The values here are package-wide and are not meant
to be changed at runtime.
"""

# ===== IMPORTS ===== #

## ===== STANDARD LIBRARY ===== ##
from typing import Any, Callable, Dict, Final, List
import logging

# ===== GLOBALS ===== #

## ===== ANNOTATIONS ===== ##
# Key of the return annotation in __annotations__ / get_type_hints()
_RETURN_ANNOTATION: Final[str] = 'return'

# Attribute set on every wrapped callable; holds its FunctionSignature
_HOOKWRAP_MARKER: Final[str] = '_hookwrap_signature'

## ===== DISPLAY ===== ##
MAX_VALUE_REPR_LENGTH: Final[int] = 200

## ===== LOGGING ===== ##
LOG_FORMAT: Final[str] = '%(levelname)s:%(name)s: %(message)s'
DEFAULT_LOG_LEVEL: Final[int] = logging.WARNING

## ===== DEFAULT VALUES ===== ##
# Default ("zero") value factories for result slots, keyed by the exact
# builtin type or typing origin. Anything not listed defaults to None.
ZERO_VALUE_FACTORIES: Final[Dict[type, Callable[[], Any]]] = {
    int: int,
    float: float,
    complex: complex,
    bool: bool,
    str: str,
    bytes: bytes,
    bytearray: bytearray,
    list: list,
    dict: dict,
    set: set,
    frozenset: frozenset,
    tuple: tuple,
}

## ===== EXPORTS ===== ##
__all__: Final[List[str]] = [
    '_RETURN_ANNOTATION',
    '_HOOKWRAP_MARKER',
    'MAX_VALUE_REPR_LENGTH',
    'LOG_FORMAT',
    'DEFAULT_LOG_LEVEL',
    'ZERO_VALUE_FACTORIES',
]
