"""Step duration logging."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager

_LOGGER = logging.getLogger("tfc_run_worker.timing")


@contextmanager
def timed(name: str) -> Iterator[None]:
    """Log how long the wrapped block took, whether or not it raised."""
    start = time.monotonic()
    try:
        yield
    finally:
        elapsed_ms = int((time.monotonic() - start) * 1000)
        _LOGGER.info("%s took %d ms", name, elapsed_ms)
