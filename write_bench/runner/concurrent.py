r"""
Cancellation-aware concurrent join.

Tasks share one ``threading.Event``. The first task to fail sets it, so
siblings stop before their next batch; the join still waits for every task
and then re-raises the original failure. Work a sibling already committed
stays in the store.

    from write_bench.runner.concurrent import run_concurrently

    results = run_concurrently({
        "bindings": lambda cancel: strategy.execute(store, bindings, ..., cancel=cancel),
        "user_updates": lambda cancel: strategy.execute(store, updates, ..., cancel=cancel),
    })
"""

import threading
from collections.abc import Callable, Mapping
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from typing import TypeVar

from write_bench.errors import StrategyCancelled
from write_bench.log import get_logger

__all__ = ["run_concurrently"]

logger = get_logger(__name__)

T = TypeVar("T")


def run_concurrently(
    tasks: Mapping[str, Callable[[threading.Event], T]],
    *,
    cancel: threading.Event | None = None,
) -> dict[str, T]:
    """Run tasks on a thread pool and join them.

    Args:
        tasks: Task name to callable receiving the shared cancel event.
        cancel: Event to share (a fresh one by default).

    Returns:
        Task name to result, in the order of ``tasks``.

    Raises:
        Exception: The first failure other than a sibling's cancellation,
            once every task has finished.
    """
    if not tasks:
        return {}
    cancel = cancel or threading.Event()

    def guarded(task: Callable[[threading.Event], T]) -> T:
        try:
            return task(cancel)
        except BaseException:
            cancel.set()
            raise

    results: dict[str, T] = {}
    failures: list[tuple[str, BaseException]] = []
    with ThreadPoolExecutor(max_workers=len(tasks), thread_name_prefix="write-bench") as executor:
        futures: dict[Future[T], str] = {executor.submit(guarded, task): name for name, task in tasks.items()}
        for future in as_completed(futures):
            name = futures[future]
            error = future.exception()
            if error is None:
                results[name] = future.result()
                continue
            failures.append((name, error))
            if not isinstance(error, StrategyCancelled):
                logger.error("concurrent_task_failed", task=name, error=str(error))

    if failures:
        original = [f for f in failures if not isinstance(f[1], StrategyCancelled)]
        name, error = (original or failures)[0]
        logger.warning("concurrent_join_failed", task=name, failed=len(original), cancelled=len(failures) - len(original))
        raise error

    return {name: results[name] for name in tasks}
