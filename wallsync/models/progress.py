"""Run-level bookkeeping for batch uploads.

``UploadProgress`` is what the scheduler hands to progress callbacks;
``BatchRun`` accumulates the outcome of every task in one run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .upload import TaskStatus, UploadTask


class OperationPhase(Enum):
    UPLOADING = "uploading"
    WAITING = "waiting"
    COMPLETE = "complete"
    ERROR = "error"


class RunOutcome(Enum):
    """Which summary notification a finished run deserves."""

    ALL_SUCCEEDED = "all_succeeded"
    PARTIAL = "partial"
    ALL_FAILED = "all_failed"
    EMPTY = "empty"


@dataclass
class UploadProgress:
    """One progress event.

    ``current`` counts finished files out of ``total``; ``batch_id`` is the
    1-based batch that produced the event.
    """

    phase: OperationPhase
    current: int = 0
    total: int = 0
    message: str = ""
    batch_id: int = 0
    file_name: str = ""
    success: bool = True

    @property
    def percent(self) -> float:
        return self.current * 100 / self.total if self.total else 0.0


@dataclass
class BatchRun:
    """Counters and per-file tasks of one pipeline run.

    A skipped file (already in the bucket) counts as succeeded. ``processed``
    is every finished file whatever its outcome.
    """

    total: int
    processed: int = 0
    succeeded: int = 0
    skipped: int = 0
    failed: int = 0
    batch_size: int = 0
    batches: int = 0
    duration: float = 0.0
    urls: List[str] = field(default_factory=list)
    tasks: List[UploadTask] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    def record(self, task: UploadTask) -> None:
        """Count a task that reached a terminal status."""
        self.processed += 1

        if task.status is TaskStatus.ERROR:
            self.failed += 1
            self.errors.append(f"{task.file_name}: {task.error_detail}")
            return

        self.succeeded += 1
        self.skipped += task.status is TaskStatus.SKIPPED
        if task.public_url:
            self.urls.append(task.public_url)

    @property
    def outcome(self) -> RunOutcome:
        if not self.total:
            return RunOutcome.EMPTY
        if not self.failed:
            return RunOutcome.ALL_SUCCEEDED
        return RunOutcome.PARTIAL if self.succeeded else RunOutcome.ALL_FAILED

    @property
    def success_rate(self) -> float:
        """Succeeded files as a percentage; an empty run counts as 100."""
        return self.succeeded * 100 / self.total if self.total else 100.0

    def task_for(self, file_name: str) -> Optional[UploadTask]:
        return next((t for t in self.tasks if t.file_name == file_name), None)
