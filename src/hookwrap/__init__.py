# ===== MODULE DOCSTRING ===== #
"""
hookwrap: wrap any function with pre-call, post-call and error hooks
without touching its call sites.

    from hookwrap import wrap, with_pre_hook, with_post_hook, with_error_hook

    wrapped = wrap(func, with_pre_hook(validate), with_error_hook(report))
"""

# ===== IMPORTS ===== #

## ===== LOCAL ===== ##
from .error_utils import HookWrapError, InvalidArgumentError
from .logging import logger, set_verbosity
from .signature_utils import (
    FunctionSignature, clear_signature_cache,
    get_function_signature, signature_cache_size
)
from .wrapper import (
    WrapOption, is_wrapped, wrap,
    with_error_hook, with_post_hook, with_pre_hook
)

# ===== GLOBALS ===== #

__version__ = '0.1.0'

## ===== EXPORTS ===== ##
__all__ = [
    'FunctionSignature',
    'HookWrapError',
    'InvalidArgumentError',
    'WrapOption',
    'clear_signature_cache',
    'get_function_signature',
    'is_wrapped',
    'logger',
    'set_verbosity',
    'signature_cache_size',
    'with_error_hook',
    'with_post_hook',
    'with_pre_hook',
    'wrap',
]
