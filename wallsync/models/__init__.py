"""Data models for wallsync.

Provides Pydantic models for upload records and dataclasses for progress tracking.
"""

from __future__ import annotations

from .base import WallsyncModel
from .progress import BatchRun, OperationPhase, RunOutcome, UploadProgress
from .upload import PresignResult, TaskStatus, UploadCandidate, UploadTask

__all__ = [
    # Base
    "WallsyncModel",
    # Upload records
    "UploadCandidate",
    "UploadTask",
    "TaskStatus",
    "PresignResult",
    # Progress
    "OperationPhase",
    "RunOutcome",
    "UploadProgress",
    "BatchRun",
]
