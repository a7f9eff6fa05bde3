"""Job queue for deferred effect re-runs.

Effects created with a scheduler can enqueue their re-run here instead of
recomputing inside the write that triggered them:

    runner = effect(update, scheduler=lambda: queue_job(runner.run))

Jobs wait until flush_jobs() is called, or until the outermost batch() scope
exits. A job queued several times before a flush runs once.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Callable, Iterator

from reactix._errors import reraise

logger = logging.getLogger("reactix.scheduler")

Job = Callable[[], object]

# Batch depth counter. When it drops back to 0, the queue is flushed.
_batch_depth: int = 0

# Jobs awaiting flush, in queue order.
_queue: list[Job] = []


def queue_job(job: Job) -> None:
    """Enqueue job unless it is already pending."""
    if job not in _queue:
        _queue.append(job)


def flush_jobs() -> None:
    """Run pending jobs until none are left, including jobs queued meanwhile.

    Every job in a round runs even if an earlier one raised; failures are
    re-raised after the queue drains.
    """
    errors: list[Exception] = []
    ran = 0
    while _queue:
        # Snapshot and clear — jobs may queue new ones while running.
        round_ = list(_queue)
        _queue.clear()
        for job in round_:
            ran += 1
            try:
                job()
            except Exception as exc:
                errors.append(exc)
    if ran:
        logger.debug("Flushed %d jobs (%d failed)", ran, len(errors))
    reraise(errors, "jobs failed during flush")


@contextmanager
def batch() -> Iterator[None]:
    """Defer flushing until the outermost batch exits.

    Usage:
        with batch():
            state["a"] = 1
            state["b"] = 2
            # queued jobs run here, once
    """
    global _batch_depth
    _batch_depth += 1
    try:
        yield
    finally:
        _batch_depth -= 1
        if _batch_depth == 0:
            flush_jobs()


def get_pending_count() -> int:
    """Number of jobs waiting to run. Useful for testing."""
    return len(_queue)
