"""
Wall-clock timing for solver results.

Every Result carries a timing dict built here: 'total_seconds' plus one
entry per named section. With sync_cuda=True each clock read first waits
for queued CUDA kernels, so GPU work is charged to the section that
launched it rather than to whichever section happens to block next.
"""

import time
from contextlib import contextmanager
from typing import Iterator


class Timer:
    """
    Section timer.

    Usage:
        timer = Timer()
        timer.start()
        with timer.section('integration'):
            sol = solve_ivp(f, tspan, u0)
        timer.stop()
        timer.result()   # {'total_seconds': 0.05, 'integration': 0.05}

    A section entered more than once accumulates. Sections may overlap.
    """

    def __init__(self, sync_cuda: bool = False):
        self._sync_cuda = sync_cuda
        self._sections: dict[str, float] = {}
        self._start_time: float | None = None
        self._total: float | None = None

    def _now(self) -> float:
        if self._sync_cuda:
            try:
                import torch
            except ImportError:
                pass
            else:
                if torch.cuda.is_available():
                    torch.cuda.synchronize()
        return time.perf_counter()

    def start(self) -> None:
        self._start_time = self._now()

    def stop(self) -> None:
        self._total = self.elapsed()

    def elapsed(self) -> float:
        """Seconds since start(); the timer keeps running."""
        if self._start_time is None:
            raise RuntimeError("Timer has not been started")
        return self._now() - self._start_time

    def reset(self) -> None:
        """Forget all sections and the total, then start again."""
        self._sections.clear()
        self._total = None
        self.start()

    @contextmanager
    def section(self, name: str) -> Iterator[None]:
        """Charge the time spent in the block to `name`."""
        t0 = self._now()
        try:
            yield
        finally:
            self._sections[name] = self._sections.get(name, 0.0) + (self._now() - t0)

    def result(self) -> dict[str, float]:
        """
        Timing dict for a Result.

        Raises:
            RuntimeError: If the timer has not been stopped
        """
        if self._total is None:
            raise RuntimeError("Timer.result() called before stop()")
        return {'total_seconds': self._total, **self._sections}
