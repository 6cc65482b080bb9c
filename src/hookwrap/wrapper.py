# ===== MODULE DOCSTRING ===== #
"""
Main wrapping module for hookwrap.

`wrap` takes any callable plus optional hooks and returns a callable with
the same signature. Every call of the returned callable goes through:

1. the pre-hook, with the call's arguments as a list,
2. the original function,
3. an error check of the function's trailing error slot,
4. the post-hook, with the function's results as a list,

and returns the original results, or, as soon as any step reports an
error, a result of the same shape holding default values and the error
(see FunctionSignature.error_results). The error hook is told about that
error exactly once.

Hooks report failure by returning an exception instead of raising it;
anything a hook or the function raises propagates to the caller.

Usage:
    from hookwrap import wrap, with_pre_hook, with_error_hook

    def add(a: int, b: int) -> Tuple[int, Optional[Exception]]:
        if a < 0 or b < 0:
            return 0, ValueError("inputs must be non-negative")
        return a + b, None

    def no_big_numbers(args):
        if any(arg > 1000 for arg in args):
            return ValueError("too big")
        return None

    checked_add = wrap(add, with_pre_hook(no_big_numbers), with_error_hook(print))
    checked_add(5, 6)      # (11, None)
    checked_add(5, 6000)   # (0, ValueError('too big')), prints the error
"""

# ===== IMPORTS ===== #

## ===== STANDARD LIBRARY ===== ##
from typing import (
    Any, Callable, Dict, Final, List,
    Optional, Tuple, TypeVar, cast
)
import dataclasses
import functools
import inspect
import logging

## ===== LOCAL ===== ##
from .config import _HOOKWRAP_MARKER
from .error_utils import InvalidArgumentError
from .signature_utils import FunctionSignature, get_function_signature
from .logging import _log

# ===== GLOBALS ===== #

## ===== TYPE ALIASES ===== ##
F = TypeVar('F', bound=Callable[..., Any])
PreHook = Callable[[List[Any]], Optional[BaseException]]
PostHook = Callable[[List[Any]], Optional[BaseException]]
ErrorHook = Callable[[BaseException], None]

## ===== EXPORTS ===== ##
__all__: Final[List[str]] = [
    'ErrorHook',
    'PostHook',
    'PreHook',
    'WrapOption',
    'WrapOptions',
    'is_wrapped',
    'with_error_hook',
    'with_post_hook',
    'with_pre_hook',
    'wrap',
]

# ===== CLASSES ===== #

@dataclasses.dataclass
class WrapOptions:
    """The hooks configured for one wrapped callable."""
    pre_hook: Optional[PreHook] = None
    post_hook: Optional[PostHook] = None
    error_hook: Optional[ErrorHook] = None

class WrapOption:
    """One configuration step for `wrap`, created by the with_* functions."""
    __slots__ = ('field', 'hook')

    def __init__(self, field: str, hook: Callable):
        self.field = field
        self.hook = hook

    def apply(self, options: WrapOptions) -> None:
        setattr(options, self.field, self.hook)

    def __repr__(self) -> str:
        return f"WrapOption({self.field}={self.hook!r})"

# ===== FUNCTIONS ===== #

## ===== OPTIONS ===== ##
def _make_option(field: str, hook: Any) -> WrapOption:
    if not callable(hook):
        raise InvalidArgumentError('hook', hook)
    # Hooks run inline in both wrappers and are never awaited
    if _is_async_callable(hook):
        raise InvalidArgumentError('hook', hook, "expected a synchronous callable, not a coroutine function")
    return WrapOption(field, hook)

def with_pre_hook(hook: PreHook) -> WrapOption:
    """Run `hook(args)` before every call; a returned exception cancels the call."""
    return _make_option('pre_hook', hook)

def with_post_hook(hook: PostHook) -> WrapOption:
    """Run `hook(results)` after every successful call; a returned exception replaces the results."""
    return _make_option('post_hook', hook)

def with_error_hook(hook: ErrorHook) -> WrapOption:
    """Call `hook(error)` once for every failed call."""
    return _make_option('error_hook', hook)

def _collect_options(options: Tuple[Any, ...]) -> WrapOptions:
    collected = WrapOptions()
    for option in options:
        if not isinstance(option, WrapOption):
            raise InvalidArgumentError(
                'options', option,
                "expected an option from with_pre_hook, with_post_hook or with_error_hook"
            )
        option.apply(collected)
    return collected

## ===== CALL STAGES ===== ##
def _fail(options: WrapOptions, signature: FunctionSignature, stage: str, error: Any) -> Any:
    """Notify the error hook and build the failure result."""
    if _log.isEnabledFor(logging.DEBUG):
        _log.debug(f"TRACE wrapper._fail: {signature.qualname} failed at {stage}: {error!r}")
    if options.error_hook is not None:
        options.error_hook(error)
    return signature.error_results(error)

def _run_pre_hook(options: WrapOptions, args: Tuple[Any, ...], kwargs: Dict[str, Any]) -> Optional[BaseException]:
    if options.pre_hook is None:
        return None
    return options.pre_hook([*args, *kwargs.values()])

def _finish_call(options: WrapOptions, signature: FunctionSignature, result: Any) -> Any:
    """Error-check the function's result and run the post-hook."""
    values = signature.split_results(result)
    if values is None:
        _log.warning(
            f"{signature.qualname} is annotated with {signature.result_count} results "
            f"but returned {type(result).__name__}; skipping the error check"
        )
        values = [result]
    elif signature.error_index is not None:
        error = values[signature.error_index]
        if error is not None:
            return _fail(options, signature, 'call', error)

    if options.post_hook is not None:
        error = options.post_hook(values)
        if error is not None:
            return _fail(options, signature, 'post_hook', error)
    return result

## ===== WRAPPER FACTORIES ===== ##
def _is_async_callable(func: Callable) -> bool:
    if inspect.iscoroutinefunction(func):
        return True
    if inspect.isroutine(func) or isinstance(func, (type, functools.partial)):
        return False
    return inspect.iscoroutinefunction(getattr(type(func), '__call__', None))

def _build_sync_wrapper(func: Callable, signature: FunctionSignature, options: WrapOptions) -> Callable:
    @functools.wraps(func)
    def _sync_wrapper(*args, **kwargs):
        error = _run_pre_hook(options, args, kwargs)
        if error is not None:
            return _fail(options, signature, 'pre_hook', error)
        result = func(*args, **kwargs)
        return _finish_call(options, signature, result)
    return _sync_wrapper

def _build_async_wrapper(func: Callable, signature: FunctionSignature, options: WrapOptions) -> Callable:
    @functools.wraps(func)
    async def _async_wrapper(*args, **kwargs):
        error = _run_pre_hook(options, args, kwargs)
        if error is not None:
            return _fail(options, signature, 'pre_hook', error)
        result = await func(*args, **kwargs)
        return _finish_call(options, signature, result)
    return _async_wrapper

## ===== PUBLIC API ===== ##
def wrap(func: F, *options: WrapOption) -> F:
    """Wrap `func` with pre-, post- and error hooks.

    Args:
        func: Any callable. Its return annotation decides how many results
            it has and whether the last one is an error slot.
        *options: Options from with_pre_hook, with_post_hook and
            with_error_hook. A later option overrides an earlier one for
            the same hook.

    Returns:
        A callable with the same signature, name and docstring as `func`.
        Coroutine functions are wrapped by a coroutine function.

    Hooks are always synchronous, also for coroutine functions. A hook
    error fills the error slot whatever its class: a PermissionError
    returned by a pre-hook lands in a slot annotated ValueError.

    Raises:
        InvalidArgumentError: If `func` is not callable or an option is
            not a WrapOption. The with_* functions raise it for
            non-callable or coroutine-function hooks.
    """
    if not callable(func):
        raise InvalidArgumentError('func', func)

    collected = _collect_options(options)
    signature = get_function_signature(func)

    if _is_async_callable(func):
        wrapped = _build_async_wrapper(func, signature, collected)
    else:
        wrapped = _build_sync_wrapper(func, signature, collected)
    setattr(wrapped, _HOOKWRAP_MARKER, signature)

    if _log.isEnabledFor(logging.DEBUG):
        _log.debug(f"TRACE wrapper.wrap: Wrapped {signature.qualname} with {collected!r}")
    return cast(F, wrapped)

def is_wrapped(func: Any) -> bool:
    """Check whether `func` was returned by `wrap`."""
    return isinstance(getattr(func, _HOOKWRAP_MARKER, None), FunctionSignature)
