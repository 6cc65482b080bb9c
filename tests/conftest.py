import logging
import pytest

from hookwrap import logger as hookwrap_logger
from hookwrap.signature_utils import _signature_cache, _signature_cache_lock


@pytest.fixture(scope="function", autouse=True)
def clear_caches():
    """Clears the signature cache before and after each test function runs."""
    with _signature_cache_lock:
        _signature_cache.clear()
    yield # Test runs here
    with _signature_cache_lock:
        _signature_cache.clear()

@pytest.fixture
def debug_logging():
    """Raise the hookwrap logger to DEBUG for the duration of a test."""
    original_level = hookwrap_logger.level
    hookwrap_logger.setLevel(logging.DEBUG)
    yield hookwrap_logger
    hookwrap_logger.setLevel(original_level)

@pytest.fixture
def error_sink():
    """An error hook that records every error it is given."""
    class _Sink:
        def __init__(self):
            self.errors = []

        def __call__(self, err):
            self.errors.append(err)

    return _Sink()
