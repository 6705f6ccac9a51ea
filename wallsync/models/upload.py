"""Upload candidate, task and presign records."""

from __future__ import annotations

import mimetypes
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import Field

from .base import WallsyncModel

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class UploadCandidate(WallsyncModel):
    """A user-selected file not yet admitted into an upload batch.

    Identity for de-duplication is the ``(name, size)`` pair, not the content.
    """

    path: Path
    name: str
    size: int = Field(..., ge=0)
    mime_type: str = DEFAULT_CONTENT_TYPE

    @classmethod
    def from_path(cls, path: str | Path) -> "UploadCandidate":
        """Build a candidate from a local file, guessing the MIME type."""
        p = Path(path)
        mime_type, _ = mimetypes.guess_type(p.name)
        return cls(
            path=p,
            name=p.name,
            size=p.stat().st_size,
            mime_type=mime_type or DEFAULT_CONTENT_TYPE,
        )

    @property
    def identity(self) -> tuple[str, int]:
        return (self.name, self.size)

    @property
    def content_type(self) -> str:
        return self.mime_type or DEFAULT_CONTENT_TYPE


class TaskStatus(str, Enum):
    """Per-file upload status."""

    UPLOADING = "uploading"
    COMPLETED = "completed"
    SKIPPED = "skipped"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self is not TaskStatus.UPLOADING


class UploadTask(WallsyncModel):
    """Tracked state of one candidate once its upload has started.

    Status only moves forward: ``uploading`` to exactly one of ``completed``,
    ``skipped`` or ``error``. ``progress_percent`` never decreases.
    """

    file_name: str
    status: TaskStatus = TaskStatus.UPLOADING
    progress_percent: int = Field(0, ge=0, le=100)
    public_url: Optional[str] = None
    key: Optional[str] = None
    error_detail: Optional[str] = None

    def _finish(self, status: TaskStatus) -> None:
        if self.status.is_terminal:
            raise ValueError(
                f"Task {self.file_name} already {self.status.value}, cannot become {status.value}"
            )
        self.status = status

    def update_progress(self, percent: float) -> int:
        """Record transfer progress; clamps to [0, 100] and ignores regressions."""
        if self.status is not TaskStatus.UPLOADING:
            return self.progress_percent
        value = max(0, min(100, int(round(percent))))
        if value > self.progress_percent:
            self.progress_percent = value
        return self.progress_percent

    def complete(self, public_url: str, key: str | None = None) -> None:
        self._finish(TaskStatus.COMPLETED)
        self.progress_percent = 100
        self.public_url = public_url
        self.key = key

    def skip(self, public_url: str, key: str | None = None) -> None:
        self._finish(TaskStatus.SKIPPED)
        self.public_url = public_url
        self.key = key

    def fail(self, detail: str) -> None:
        self._finish(TaskStatus.ERROR)
        self.error_detail = detail

    @property
    def succeeded(self) -> bool:
        """True for completed or skipped (an existing object counts as success)."""
        return self.status in (TaskStatus.COMPLETED, TaskStatus.SKIPPED)


class PresignResult(WallsyncModel):
    """Response of the presign relay.

    Either ``file_exists`` is true and only ``public_url`` matters, or
    ``upload_url`` holds a single-use write URL.
    """

    file_exists: bool = Field(False, alias="fileExists")
    public_url: str = Field(..., alias="publicUrl")
    upload_url: Optional[str] = Field(None, alias="uploadUrl")
    key: Optional[str] = None
    thumbnail_template: Optional[str] = Field(None, alias="thumbnailTemplate")
    message: Optional[str] = None
