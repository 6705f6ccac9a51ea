"""Tiered batch scheduler for per-file uploads.

Candidates are split into sequential batches whose size shrinks as the total
grows. Each batch runs concurrently on its own thread pool and must fully
settle before the next starts; a fixed pause separates batches.

Only the coordinating thread touches the ``BatchRun`` counters. Workers write
to their own ``UploadTask`` and nothing else.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from typing import TypeVar

from wallsync.models.progress import BatchRun, OperationPhase, UploadProgress
from wallsync.models.upload import UploadCandidate, UploadTask

from .constants import (
    BATCH_DELAY_TIERS,
    BATCH_SIZE_TIERS,
    FALLBACK_BATCH_DELAY,
    FALLBACK_BATCH_SIZE,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

UploadFn = Callable[[UploadCandidate, UploadTask], object]
ProgressFn = Callable[[UploadProgress], None]


# =============================================================================
# Tiers
# =============================================================================


def batch_size_for(total: int) -> int:
    """Files per batch for a run of ``total`` files.

    >100 -> 1, 81-100 -> 2, 51-80 -> 3, 31-50 -> 4, otherwise 8.
    """
    for threshold, size in BATCH_SIZE_TIERS:
        if total > threshold:
            return size
    return FALLBACK_BATCH_SIZE


def batch_delay_for(total: int) -> float:
    """Seconds to pause between batches for a run of ``total`` files."""
    for threshold, delay in BATCH_DELAY_TIERS:
        if total > threshold:
            return delay
    return FALLBACK_BATCH_DELAY


def split_into_batches(items: Sequence[T], batch_size: int) -> list[list[T]]:
    """Split items into consecutive batches of at most ``batch_size``.

    Args:
        items: Items to split, order preserved.
        batch_size: Maximum items per batch; non-positive means one batch.

    Returns:
        List of batches.
    """
    if not items:
        return []

    if batch_size <= 0:
        return [list(items)]

    return [list(items[i : i + batch_size]) for i in range(0, len(items), batch_size)]


# =============================================================================
# Execution
# =============================================================================


def _run_one(upload_fn: UploadFn, candidate: UploadCandidate, task: UploadTask) -> UploadTask:
    """Run ``upload_fn`` and guarantee the task ends terminal."""
    try:
        upload_fn(candidate, task)
    except Exception as e:
        logger.warning("Upload of %s raised: %s", candidate.name, e)
        if not task.status.is_terminal:
            task.fail(str(e) or type(e).__name__)
        return task

    if not task.status.is_terminal:
        task.fail("Upload did not finish")
    return task


def run_batches(
    candidates: Sequence[UploadCandidate],
    upload_fn: UploadFn,
    *,
    tasks: Sequence[UploadTask] | None = None,
    on_processed: ProgressFn | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> BatchRun:
    """Drive every candidate to a terminal task state.

    A failure in one file never aborts its siblings or later batches.

    Args:
        candidates: Accepted candidates in upload order.
        upload_fn: Called as ``upload_fn(candidate, task)`` on a worker thread;
            it must move ``task`` to a terminal status.
        tasks: Pre-created tasks, one per candidate. Created when omitted.
        on_processed: Called on the coordinating thread after each outcome.
        sleep: Pause function used between batches.

    Returns:
        BatchRun with counters, URLs and the tasks.
    """
    total = len(candidates)
    if tasks is None:
        tasks = [UploadTask(file_name=c.name) for c in candidates]
    if len(tasks) != total:
        raise ValueError("tasks must match candidates one to one")

    batch_size = batch_size_for(total)
    delay = batch_delay_for(total)
    indexes = split_into_batches(list(range(total)), batch_size)

    run = BatchRun(total=total, batch_size=batch_size, batches=len(indexes), tasks=list(tasks))
    start = time.time()

    def report(progress: UploadProgress) -> None:
        if on_processed:
            on_processed(progress)

    logger.info(
        "Uploading %d files in %d batches of %d (%.1fs apart)",
        total,
        len(indexes),
        batch_size,
        delay,
    )

    for batch_no, batch in enumerate(indexes, start=1):
        with ThreadPoolExecutor(max_workers=len(batch)) as executor:
            futures: dict[Future[UploadTask], int] = {
                executor.submit(_run_one, upload_fn, candidates[i], run.tasks[i]): i
                for i in batch
            }
            for future in as_completed(futures):
                task = run.tasks[futures[future]]
                future.result()
                run.record(task)
                report(
                    UploadProgress(
                        phase=OperationPhase.UPLOADING,
                        current=run.processed,
                        total=total,
                        batch_id=batch_no,
                        file_name=task.file_name,
                        success=task.succeeded,
                        message=f"Processed {run.processed}/{total} ({run.succeeded} succeeded)",
                    )
                )

        if batch_no < len(indexes):
            report(
                UploadProgress(
                    phase=OperationPhase.WAITING,
                    current=run.processed,
                    total=total,
                    batch_id=batch_no,
                    message=f"Waiting {delay:.1f}s before batch {batch_no + 1}",
                )
            )
            sleep(delay)

    run.duration = time.time() - start
    report(
        UploadProgress(
            phase=OperationPhase.COMPLETE if run.failed == 0 else OperationPhase.ERROR,
            current=run.processed,
            total=total,
            success=run.failed == 0,
            message=f"{run.succeeded} of {total} files uploaded",
        )
    )
    return run
