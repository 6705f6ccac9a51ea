"""Per-file upload: presign, then skip or PUT.

One ``FileUploader.upload`` call moves one task from ``uploading`` to exactly
one of ``completed``, ``skipped`` or ``error``. There is no retry here; a
failed file is retried by selecting it again.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol

from wallsync.core.exceptions import WallsyncError
from wallsync.models.upload import PresignResult, UploadCandidate, UploadTask

from .destinations import require_directory

logger = logging.getLogger(__name__)

TaskCallback = Callable[[UploadTask], None]


class Presigner(Protocol):
    def presign(self, directory: str, filename: str, content_type: str) -> PresignResult: ...


class ObjectStore(Protocol):
    def put(
        self,
        upload_url: str,
        candidate: UploadCandidate,
        on_bytes: Callable[[int, int], None] | None = None,
    ) -> object: ...


def percent_of(sent: int, total: int) -> int:
    """Map a byte count to a whole percent clamped to [0, 100]."""
    if total <= 0:
        return 100
    return max(0, min(100, round(sent / total * 100)))


class FileUploader:
    """Runs the upload state machine for single files.

    Args:
        presign: Issues write URLs (see ``PresignClient``).
        store: PUTs bytes to a write URL (see ``ObjectStoreClient``).
        on_task_update: Optional callback after each progress change.
    """

    def __init__(
        self,
        presign: Presigner,
        store: ObjectStore,
        on_task_update: TaskCallback | None = None,
    ):
        self.presign = presign
        self.store = store
        self.on_task_update = on_task_update

    def _changed(self, task: UploadTask) -> None:
        if self.on_task_update:
            self.on_task_update(task)

    def upload(self, candidate: UploadCandidate, directory: str | None, task: UploadTask) -> UploadTask:
        """Upload one candidate into ``directory``, writing only ``task``.

        Returns:
            The same task, now terminal.
        """
        try:
            target = require_directory(directory)
            result = self.presign.presign(target, candidate.name, candidate.content_type)

            if result.file_exists:
                logger.info("%s already exists at %s, skipping", candidate.name, result.public_url)
                task.skip(result.public_url, result.key)
                self._changed(task)
                return task

            def on_bytes(sent: int, total: int) -> None:
                before = task.progress_percent
                if task.update_progress(percent_of(sent, total)) != before:
                    self._changed(task)

            # Presign guarantees upload_url when the object is new
            self.store.put(result.upload_url or "", candidate, on_bytes)

        except WallsyncError as e:
            logger.warning("Upload of %s failed: %s", candidate.name, e.message)
            task.fail(e.message)
            self._changed(task)
            return task

        task.complete(result.public_url, result.key)
        logger.debug("Uploaded %s -> %s", candidate.name, result.public_url)
        self._changed(task)
        return task
