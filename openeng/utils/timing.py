"""
Interactive timing helpers.

Timer here starts on construction, for quick measurements at the prompt;
the solvers use the section-based core Timer it extends.
"""

from contextlib import contextmanager
from typing import Iterator
import logging

from openeng.core.compute.timing import Timer as _SectionTimer

logger = logging.getLogger(__name__)


class Timer(_SectionTimer):
    """
    Wall-clock timer that is already running when created.

    Usage:
        t = Timer()
        ...
        t.elapsed()     # seconds so far
        t.reset()       # restart from zero
    """

    def __init__(self, sync_cuda: bool = False):
        super().__init__(sync_cuda=sync_cuda)
        self.start()


def timer() -> Timer:
    """Create and start a Timer."""
    return Timer()


@contextmanager
def timed_section(name: str) -> Iterator[Timer]:
    """
    Time a block and log its duration at INFO.

    Usage:
        with timed_section("Matrix multiplication"):
            C = A @ B
    """
    t = Timer()
    try:
        yield t
    finally:
        t.stop()
        logger.info("%s completed in %.3f seconds", name, t.result()['total_seconds'])
