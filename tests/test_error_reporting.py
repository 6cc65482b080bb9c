# ===== IMPORTS ===== #

## ===== STANDARD LIBRARY ===== ##
from typing import Optional, Tuple
import logging
import pytest

## ===== LOCAL ===== ##
from hookwrap import (
    HookWrapError, InvalidArgumentError, wrap,
    with_error_hook, with_post_hook, with_pre_hook
)
from hookwrap.config import MAX_VALUE_REPR_LENGTH
from hookwrap.error_utils import _format_value

# ===== MOCKS ===== #

def _err_add(a: int, b: int) -> Tuple[int, Optional[Exception]]:
    if a < 0 or b < 0:
        return 0, ValueError("inputs must be non-negative")
    return a + b, None

def _err_misannotated(a: int) -> Tuple[int, Optional[Exception]]:
    return a

# ===== INVALID ARGUMENTS ===== #

@pytest.mark.parametrize("value", [None, 42, "add", [_err_add]])
def test_wrap_rejects_non_callable(value):
    with pytest.raises(InvalidArgumentError) as exc_info:
        wrap(value)
    assert exc_info.value.argument == 'func'
    assert exc_info.value.value is value
    assert "expected a callable" in str(exc_info.value)

def test_invalid_argument_is_a_type_error():
    """Existing `except TypeError` handlers keep working."""
    with pytest.raises(TypeError):
        wrap(None)
    assert issubclass(InvalidArgumentError, HookWrapError)

@pytest.mark.parametrize("option_factory", [with_pre_hook, with_post_hook, with_error_hook])
def test_option_rejects_non_callable_hook(option_factory):
    with pytest.raises(InvalidArgumentError) as exc_info:
        option_factory("not a hook")
    assert exc_info.value.argument == 'hook'

@pytest.mark.parametrize("option_factory", [with_pre_hook, with_post_hook, with_error_hook])
def test_option_rejects_coroutine_function_hook(option_factory):
    """Hooks are called inline, so an async def hook would never run."""
    async def hook(value):
        return None

    with pytest.raises(InvalidArgumentError, match="synchronous") as exc_info:
        option_factory(hook)
    assert exc_info.value.argument == 'hook'
    assert exc_info.value.value is hook

def test_wrap_rejects_foreign_option():
    """A bare hook passed where an option is expected is refused."""
    with pytest.raises(InvalidArgumentError, match="with_pre_hook"):
        wrap(_err_add, lambda args: None)

def test_invalid_argument_message_truncates_long_values():
    value = "x" * (MAX_VALUE_REPR_LENGTH * 2)
    formatted = _format_value(value)
    assert formatted.endswith("...")
    assert len(formatted) == MAX_VALUE_REPR_LENGTH + 3

def test_format_value_survives_broken_repr():
    class BadRepr:
        def __repr__(self):
            raise RuntimeError("no repr")
    assert "unrepresentable BadRepr" in _format_value(BadRepr())

# ===== FAILURE LOGGING ===== #

@pytest.mark.parametrize("options, args, stage", [
    ((with_pre_hook(lambda args: KeyError("pre")),), (1, 2), "pre_hook"),
    ((), (1, -2), "call"),
    ((with_post_hook(lambda results: KeyError("post")),), (1, 2), "post_hook"),
])
def test_failure_stage_is_logged(debug_logging, caplog, options, args, stage):
    wrapped = wrap(_err_add, *options)
    with caplog.at_level(logging.DEBUG, logger='hookwrap'):
        wrapped(*args)
    messages = [record.getMessage() for record in caplog.records]
    assert any(f"_err_add failed at {stage}" in message for message in messages)

def test_success_logs_no_failure(debug_logging, caplog):
    wrapped = wrap(_err_add)
    with caplog.at_level(logging.DEBUG, logger='hookwrap'):
        wrapped(1, 2)
    assert not any("failed at" in record.getMessage() for record in caplog.records)

# ===== SHAPE MISMATCH ===== #

def test_shape_mismatch_warns_and_passes_value_through(caplog, error_sink):
    seen = []

    def post(results):
        seen.append(results)
        return None

    wrapped = wrap(_err_misannotated, with_post_hook(post), with_error_hook(error_sink))
    with caplog.at_level(logging.WARNING, logger='hookwrap'):
        assert wrapped(7) == 7
    assert any("skipping the error check" in record.getMessage() for record in caplog.records)
    assert seen == [[7]]
    assert error_sink.errors == []
