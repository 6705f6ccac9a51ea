"""Batch upload pipeline.

Ties the scheduler to the per-file state machine and reports one summary
notification per run.

Example:
    >>> pipeline = BatchUploadPipeline(presign, store, ConsoleNotifier())
    >>> run = pipeline.run(selection.candidates, "wallpapers/amoled-and-dark")
    >>> run.succeeded, run.failed
    (3, 0)
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence

from wallsync.core.logging import get_audit_logger, log_context
from wallsync.core.output import NotificationLevel, NotificationSink
from wallsync.models.progress import BatchRun, RunOutcome, UploadProgress
from wallsync.models.upload import UploadCandidate, UploadTask

from .scheduler import run_batches
from .transfer import FileUploader, ObjectStore, Presigner, TaskCallback

logger = logging.getLogger(__name__)


def summary_for(run: BatchRun) -> tuple[NotificationLevel, str] | None:
    """Pick the single summary notification for a finished run."""
    outcome = run.outcome
    if outcome is RunOutcome.EMPTY:
        return None
    if outcome is RunOutcome.ALL_SUCCEEDED:
        message = f"Uploaded {run.succeeded} of {run.total} files"
        if run.skipped:
            message += f" ({run.skipped} already existed)"
        return NotificationLevel.SUCCESS, message
    if outcome is RunOutcome.ALL_FAILED:
        return NotificationLevel.ERROR, f"All {run.total} uploads failed"
    return (
        NotificationLevel.WARNING,
        f"{run.succeeded} of {run.total} files uploaded, {run.failed} failed",
    )


class BatchUploadPipeline:
    """Uploads accepted candidates to one destination directory.

    Each ``run`` owns a fresh ``BatchRun``; nothing carries over between runs.
    """

    def __init__(
        self,
        presign: Presigner,
        store: ObjectStore,
        notifier: NotificationSink,
        *,
        on_task_update: TaskCallback | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.uploader = FileUploader(presign, store, on_task_update)
        self.notifier = notifier
        self.sleep = sleep

    def run(
        self,
        candidates: Sequence[UploadCandidate],
        directory: str | None,
        on_progress: Callable[[UploadProgress], None] | None = None,
    ) -> BatchRun:
        """Upload every candidate and return the run record."""
        tasks = [UploadTask(file_name=c.name) for c in candidates]

        with log_context("batch upload", logger, files=len(candidates), directory=directory) as ctx:
            run = run_batches(
                candidates,
                lambda candidate, task: self.uploader.upload(candidate, directory, task),
                tasks=tasks,
                on_processed=on_progress,
                sleep=self.sleep,
            )
            ctx.info("%d succeeded, %d skipped, %d failed", run.succeeded, run.skipped, run.failed)

        summary = summary_for(run)
        if summary is not None:
            self.notifier.notify(*summary)

        get_audit_logger().log_operation(
            "upload",
            directory=directory,
            success=run.failed == 0,
            details={
                "total": run.total,
                "succeeded": run.succeeded,
                "skipped": run.skipped,
                "failed": run.failed,
                "batches": run.batches,
            },
        )
        return run
