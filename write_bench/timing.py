r"""
Timing utilities for strategy invocations and sweep phases.

    from write_bench.timing import Timer, timed_section

    with Timer() as t:
        strategy_body()
    t.elapsed_ns
"""

import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

__all__ = ["Timer", "timed_section"]


class Timer:
    """Context manager for timing code blocks.

    The end time is taken on exit whether or not the block raised.

        with Timer() as t:
            do_something()
        print(f"Elapsed: {t.elapsed_ms}ms")
    """

    def __init__(self) -> None:
        self._start: int = 0
        self._end: int | None = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter_ns()
        self._end = None
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self._end = time.perf_counter_ns()

    @property
    def elapsed_ns(self) -> int:
        """Elapsed time in nanoseconds (up to now while still running)."""
        end = self._end if self._end is not None else time.perf_counter_ns()
        return end - self._start

    @property
    def elapsed_ms(self) -> float:
        """Elapsed time in milliseconds."""
        return self.elapsed_ns / 1_000_000

    @property
    def elapsed_seconds(self) -> float:
        """Elapsed time in seconds."""
        return self.elapsed_ns / 1_000_000_000


@contextmanager
def timed_section(name: str, *, callback: Callable[[str, int], None] | None = None) -> Iterator[Timer]:
    """Context manager for timing named code sections.

    Args:
        name: Name of the section being timed.
        callback: Optional callback(name, elapsed_ns) called on exit.

    Yields:
        Timer instance.
    """
    timer = Timer()
    timer.__enter__()
    try:
        yield timer
    finally:
        timer.__exit__(None, None, None)
        if callback:
            callback(name, timer.elapsed_ns)
