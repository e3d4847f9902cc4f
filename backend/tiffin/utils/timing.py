"""Elapsed-time logging for service operations."""

import time
from contextlib import contextmanager

from tiffin.logging import get_logger

logger = get_logger(__name__)

_TIMING_PREFIX = "[TIMING]"


def _format_duration(ms: int) -> str:
    """Return human-readable duration: e.g. 12500 -> '12.5s', 750 -> '750ms'."""
    if ms >= 1000:
        return f"{ms / 1000:.1f}s"
    return f"{ms}ms"


@contextmanager
def time_span(name: str, **extra: object):
    """Log how long the block took, with extra key=value fields appended."""
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed = int((time.perf_counter() - start) * 1000)
        fields = " ".join(f"{k}={v}" for k, v in extra.items())
        logger.info("%s %s elapsed_ms=%s (%s) %s", _TIMING_PREFIX, name, elapsed, _format_duration(elapsed), fields)
