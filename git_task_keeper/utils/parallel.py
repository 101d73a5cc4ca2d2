"""Worker pool helpers for per-repository fan-out."""

import os
import sys
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Sequence, TypeVar

T = TypeVar("T")
R = TypeVar("R")


def is_free_threading_enabled() -> bool:
    """True on Python 3.13+ builds running with the GIL disabled."""
    return hasattr(sys, "_is_gil_enabled") and not sys._is_gil_enabled()


def get_optimal_worker_count(user_specified: Optional[int] = None, job_count: Optional[int] = None) -> int:
    """Pick a worker count for I/O-bound git subprocesses.

    Args:
        user_specified: Explicit worker count, used as-is when positive
        job_count: Number of jobs; the pool never exceeds it

    Returns:
        Number of workers, at least 1
    """
    if user_specified is not None and user_specified > 0:
        workers = user_specified
    else:
        cpu_count = os.cpu_count() or 1
        if is_free_threading_enabled():
            workers = min(64, cpu_count * 2)
        else:
            workers = min(32, cpu_count + 4)

    if job_count is not None:
        workers = min(workers, job_count)
    return max(1, workers)


def map_in_order(
    func: Callable[[T], R],
    items: Sequence[T],
    workers: Optional[int] = None,
    sequential: bool = False,
) -> List[R]:
    """Apply ``func`` to every item, returning results in input order.

    Runs in a thread pool unless ``sequential`` is set or only one worker
    would be used. ``func`` must not raise for an item it can report on;
    any exception propagates.
    """
    if not items:
        return []

    max_workers = get_optimal_worker_count(workers, len(items))
    if sequential or max_workers == 1:
        return [func(item) for item in items]

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        return list(executor.map(func, items))
