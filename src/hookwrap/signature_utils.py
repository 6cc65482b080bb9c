# ===== MODULE DOCSTRING ===== #
"""
Signature metadata utilities for hookwrap.

A wrapped function reports failure the way Go-style code does: through a
trailing error slot in its result. To hand back a correctly shaped result
when a hook or the function fails, the wrapper needs to know, per
function:

- how many result slots the function has (from its return annotation),
- which slot, if any, holds the error,
- what the default ("zero") value of every other slot is.

Working that out means resolving type hints, which is slow, so the result
is stored as a FunctionSignature in a process-wide cache keyed by a stable
identity of the function (its code object and return annotation object for
plain functions). Closures created from one ``def`` share a single entry
unless their return annotations differ.

Return annotation to result shape:

    -> None                       0 slots
    -> Tuple[()]                  0 slots
    -> Tuple[int, str, Exc]       3 slots, error slot 2 if Exc is error-typed
    -> Tuple[int, ...]            1 slot (the tuple itself)
    -> X / no annotation          1 slot, error slot 0 if X is error-typed

A type is error-typed when it is a BaseException subclass, or an
Optional/Union whose non-None members all are.
"""

# ===== IMPORTS ===== #

## ===== STANDARD LIBRARY ===== ##
from typing import (
    Any, Callable, Dict, Final, List,
    Optional, Tuple, Union, get_args, get_origin, get_type_hints
)
import dataclasses
import functools
import threading
import inspect
import logging
import typing
import types

## ===== LOCAL ===== ##
from .config import _RETURN_ANNOTATION, ZERO_VALUE_FACTORIES
from .logging import _log

# ===== GLOBALS ===== #

## ===== TYPE ALIASES ===== ##
NoneType: Final[type] = type(None)
ZeroFactory = Callable[[], Any]

## ===== SIGNATURE CACHE ===== ##
# Maps signature_key(func) -> FunctionSignature. Never evicted.
_signature_cache: Dict['SignatureKey', 'FunctionSignature'] = {}
_signature_cache_lock = threading.Lock()

## ===== EXPORTS ===== ##
__all__: Final[List[str]] = [
    'FunctionSignature',
    'NoneType',
    'SignatureKey',
    'clear_signature_cache',
    'get_function_signature',
    'inspect_function_signature',
    'is_error_type',
    'signature_cache_size',
    'signature_key',
    'zero_value_factory',
]

# ===== FUNCTIONS ===== #

## ===== DEFAULT VALUES ===== ##
def _zero_none() -> None:
    return None

def zero_value_factory(tp: Any) -> ZeroFactory:
    """Return a zero-argument factory producing the default value for `tp`.

    Builtin scalars and containers (and their typing aliases, e.g.
    ``List[int]``) map to their empty value. Everything else maps to None.
    """
    origin = get_origin(tp) or tp
    try:
        factory = ZERO_VALUE_FACTORIES.get(origin)
    except TypeError:
        # Unhashable annotation object
        factory = None
    return factory if factory is not None else _zero_none

## ===== ERROR SLOT DETECTION ===== ##
def _is_union(tp: Any) -> bool:
    if get_origin(tp) is Union:
        return True
    return hasattr(types, 'UnionType') and isinstance(tp, types.UnionType)

def is_error_type(tp: Any) -> bool:
    """Check whether a result slot annotated with `tp` carries an error.

    Args:
        tp: A resolved type annotation.

    Returns:
        True for BaseException subclasses and for unions (including
        Optional) whose non-None members are all BaseException subclasses.
    """
    if isinstance(tp, type):
        return issubclass(tp, BaseException)
    if _is_union(tp):
        members = [arg for arg in get_args(tp) if arg is not NoneType]
        return bool(members) and all(is_error_type(member) for member in members)
    return False

## ===== IDENTITY ===== ##
# Stands in for a missing or unreadable return annotation in keys
_NO_ANNOTATION: Final[object] = object()

class SignatureKey:
    """Hashable wrapper comparing by identity of the objects it holds.

    Code objects compare equal by value, and two functions in different
    modules can have equal code but different annotations, so keys must
    never use ==. The key holds strong references, which keeps id() stable.
    """
    __slots__ = ('targets',)

    def __init__(self, *targets: Any):
        self.targets = targets

    def __hash__(self) -> int:
        return hash(tuple(id(target) for target in self.targets))

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, SignatureKey)
            and len(other.targets) == len(self.targets)
            and all(a is b for a, b in zip(self.targets, other.targets))
        )

    def __repr__(self) -> str:
        return f"SignatureKey{self.targets!r}"

def _raw_return_annotation(func: Any) -> Any:
    """The unresolved return annotation object of `func`, without evaluating strings."""
    try:
        annotations = getattr(func, '__annotations__', None)
    except NameError:
        # Deferred annotations that cannot be evaluated at all
        return _NO_ANNOTATION
    if not isinstance(annotations, dict):
        return _NO_ANNOTATION
    return annotations.get(_RETURN_ANNOTATION, _NO_ANNOTATION)

def signature_key(func: Callable) -> SignatureKey:
    """Derive the cache key identifying `func`'s underlying code.

    - Decorated functions are unwrapped through ``__wrapped__`` first.
    - Bound methods resolve to their function.
    - Python functions resolve to their code object together with their
      return annotation object. Closures made from one ``def`` share a key
      as long as their return annotations are the same object, which
      typing's subscription cache makes the usual case.
    - Callable instances resolve to their class's ``__call__`` code and
      annotation.
    - Builtins, classes and partials are keyed by the object itself.
    """
    target = func
    if inspect.ismethod(target):
        target = target.__func__
    target = inspect.unwrap(target)
    if inspect.ismethod(target):
        target = target.__func__

    code = getattr(target, '__code__', None)
    if isinstance(code, types.CodeType):
        return SignatureKey(code, _raw_return_annotation(target))

    if not isinstance(target, (type, functools.partial)) and not inspect.isroutine(target):
        call = getattr(type(target), '__call__', None)
        call_code = getattr(call, '__code__', None)
        if isinstance(call_code, types.CodeType):
            return SignatureKey(call_code, _raw_return_annotation(call))

    return SignatureKey(target)

## ===== TYPE HINT RESOLUTION ===== ##
def _hint_source(func: Callable) -> Optional[Callable]:
    """Find the object whose annotations describe what calling `func` returns."""
    target = func
    while isinstance(target, functools.partial):
        target = target.func
    if inspect.ismethod(target):
        target = target.__func__
    if isinstance(target, type):
        return None
    if inspect.isroutine(target):
        return target
    return getattr(type(target), '__call__', None)

def _resolve_return_hint(func: Callable) -> Any:
    """Resolve the return annotation of `func`, or Any if unknown.

    String annotations are resolved with get_type_hints. If that fails,
    the raw annotation is used unless it is itself a string.
    """
    source = _hint_source(func)
    if source is None:
        return Any

    try:
        hints = get_type_hints(source)
    except Exception as e:
        if _log.isEnabledFor(logging.DEBUG):
            _log.debug(f"TRACE signature_utils._resolve_return_hint: get_type_hints failed for {source!r}: {e!r}. Using raw annotations.")
        try:
            raw = getattr(source, '__annotations__', None)
        except NameError:
            # Deferred annotations that cannot be evaluated at all
            raw = None
        hints = raw if isinstance(raw, dict) else {}

    if _RETURN_ANNOTATION not in hints:
        return Any
    hint = hints[_RETURN_ANNOTATION]
    if isinstance(hint, (str, typing.ForwardRef)):
        if _log.isEnabledFor(logging.DEBUG):
            _log.debug(f"TRACE signature_utils._resolve_return_hint: Unresolved forward reference {hint!r}. Treating as Any.")
        return Any
    return hint

def _result_slots(hint: Any) -> Tuple[Any, ...]:
    """Split a return annotation into one annotation per result slot."""
    if hint is None or hint is NoneType:
        return ()
    if hint is typing.Tuple:
        return (hint,)
    if get_origin(hint) is tuple:
        args = get_args(hint)
        # Tuple[()] is ((),) before 3.11 and () from 3.11 on
        if args == () or args == ((),):
            return ()
        if len(args) == 2 and args[1] is Ellipsis:
            return (hint,)
        return args
    return (hint,)

## ===== FUNCTION SIGNATURE ===== ##
@dataclasses.dataclass(frozen=True)
class FunctionSignature:
    """Result-shape metadata for one wrapped function.

    Attributes:
        result_count (int): Number of result slots.
        error_index (Optional[int]): Index of the trailing error slot, or None.
        defaults (Tuple[Callable[[], Any], ...]): Default value factory per slot.
        qualname (str): Display name of the function.
    """
    result_count: int
    error_index: Optional[int]
    defaults: Tuple[ZeroFactory, ...]
    qualname: str = '<unknown>'

    def split_results(self, result: Any) -> Optional[List[Any]]:
        """Return the per-slot values of `result`, or None if it has the wrong shape."""
        if self.result_count == 0:
            return []
        if self.result_count == 1:
            return [result]
        if isinstance(result, (tuple, list)) and len(result) == self.result_count:
            return list(result)
        return None

    def join_results(self, values: List[Any]) -> Any:
        """Shape per-slot values back into a return value."""
        if self.result_count == 0:
            return None
        if self.result_count == 1:
            return values[0]
        return tuple(values)

    def error_results(self, error: Any) -> Any:
        """Build the result returned in place of the real one after a failure.

        Every slot holds its default, except the error slot which holds `error`.
        """
        values = [factory() for factory in self.defaults]
        if self.error_index is not None:
            values[self.error_index] = error
        return self.join_results(values)

def inspect_function_signature(func: Callable) -> FunctionSignature:
    """Compute the FunctionSignature of `func` without touching the cache."""
    hint = _resolve_return_hint(func)
    slots = _result_slots(hint)
    error_index = None
    if slots and is_error_type(slots[-1]):
        error_index = len(slots) - 1

    signature = FunctionSignature(
        result_count=len(slots),
        error_index=error_index,
        defaults=tuple(zero_value_factory(slot) for slot in slots),
        qualname=getattr(func, '__qualname__', None) or getattr(func, '__name__', None) or type(func).__name__,
    )
    if _log.isEnabledFor(logging.DEBUG):
        _log.debug(f"TRACE signature_utils.inspect_function_signature: {signature.qualname}: return hint {hint!r} -> result_count={signature.result_count}, error_index={signature.error_index}")
    return signature

def get_function_signature(func: Callable) -> FunctionSignature:
    """Return the cached FunctionSignature for `func`, computing it on a miss.

    Reads are lock-free. A miss takes the cache lock and checks again
    before computing, so each key is computed once.

    Args:
        func: Any callable.

    Returns:
        The FunctionSignature shared by every callable with the same key.
    """
    key = signature_key(func)
    cached = _signature_cache.get(key)
    if cached is not None:
        if _log.isEnabledFor(logging.DEBUG):
            _log.debug(f"TRACE signature_utils.get_function_signature: Cache hit for {cached.qualname}")
        return cached

    with _signature_cache_lock:
        cached = _signature_cache.get(key)
        if cached is not None:
            return cached
        signature = inspect_function_signature(func)
        _signature_cache[key] = signature
        if _log.isEnabledFor(logging.DEBUG):
            _log.debug(f"TRACE signature_utils.get_function_signature: Cached signature for {signature.qualname} ({len(_signature_cache)} entries)")
        return signature

def clear_signature_cache() -> None:
    """Drop every cached FunctionSignature."""
    with _signature_cache_lock:
        _signature_cache.clear()

def signature_cache_size() -> int:
    """Number of distinct function identities currently cached."""
    return len(_signature_cache)
