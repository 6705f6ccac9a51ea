"""Accepted-file set for one upload session."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from pathlib import Path

from wallsync.core.exceptions import PathValidationError
from wallsync.core.output import NotificationLevel, NotificationSink
from wallsync.core.validation import validate_path_exists
from wallsync.models.upload import UploadCandidate

from .constants import (
    ADMISSION_INFO_THRESHOLD,
    ADMISSION_WARNING_THRESHOLD,
    LARGE_SELECTION_THRESHOLD,
    VALIDATION_CHUNK_SIZE,
)
from .dedup import deduplicate, find_content_lookalikes
from .validation import ValidationRules, check_selection, validate_candidate

logger = logging.getLogger(__name__)


class FileSelection:
    """Validates, de-duplicates and holds candidates until they are uploaded.

    Files already uploaded in this session stay remembered, so re-selecting
    them is caught as a duplicate.

    Example:
        >>> selection = FileSelection(ValidationRules(), notifier)
        >>> selection.add(["a.jpg", "b.png"])
        >>> pipeline.run(selection.candidates, "wallpapers")
    """

    def __init__(self, rules: ValidationRules, notifier: NotificationSink):
        self.rules = rules
        self.notifier = notifier
        self._pending: list[UploadCandidate] = []
        self._completed: list[UploadCandidate] = []

    @property
    def candidates(self) -> list[UploadCandidate]:
        return list(self._pending)

    def __len__(self) -> int:
        return len(self._pending)

    def add(self, items: Sequence[str | Path | UploadCandidate]) -> list[UploadCandidate]:
        """Admit one selection event.

        Args:
            items: Paths or ready-made candidates.

        Returns:
            The candidates actually admitted.
        """
        count = len(items)
        if count == 0:
            return []
        if not check_selection(count, self.rules, self.notifier):
            return []

        large = count > LARGE_SELECTION_THRESHOLD
        if large:
            self.notifier.notify(NotificationLevel.INFO, f"Processing {count} files...")

        valid: list[UploadCandidate] = []
        for start in range(0, count, VALIDATION_CHUNK_SIZE):
            chunk = items[start : start + VALIDATION_CHUNK_SIZE]
            for item in chunk:
                candidate = self._to_candidate(item)
                if candidate is not None and validate_candidate(
                    candidate, self.rules, self.notifier
                ):
                    valid.append(candidate)
            logger.debug(
                "Validated %d/%d files", min(start + VALIDATION_CHUNK_SIZE, count), count
            )

        if not valid:
            if large:
                self.notifier.notify(NotificationLevel.ERROR, "No valid files found")
            return []

        admitted = deduplicate(valid, [*self._pending, *self._completed], self.notifier)
        if not admitted:
            return []

        new_ids = {c.identity for c in admitted}
        for first, second in find_content_lookalikes([*self._pending, *admitted]):
            if second.identity in new_ids:
                self.notifier.notify(
                    NotificationLevel.WARNING,
                    f'"{second.name}" looks identical to "{first.name}"',
                )
        self._pending.extend(admitted)
        self._announce(len(admitted))
        return admitted

    def _to_candidate(self, item: str | Path | UploadCandidate) -> UploadCandidate | None:
        if isinstance(item, UploadCandidate):
            return item
        try:
            return UploadCandidate.from_path(validate_path_exists(item))
        except PathValidationError as e:
            self.notifier.notify(NotificationLevel.ERROR, e.message)
            return None
        except OSError as e:
            self.notifier.notify(NotificationLevel.ERROR, f'Cannot read "{item}": {e.strerror}')
            return None

    def _announce(self, added: int) -> None:
        total = len(self._pending)
        if total > ADMISSION_WARNING_THRESHOLD:
            self.notifier.notify(
                NotificationLevel.WARNING,
                f"{total} files selected. Large uploads are sent in small, spaced batches",
            )
        elif total > ADMISSION_INFO_THRESHOLD:
            self.notifier.notify(
                NotificationLevel.INFO,
                f"{total} files selected. Uploads will be batched",
            )
        else:
            self.notifier.notify(NotificationLevel.SUCCESS, f"Added {added} file(s) for upload")

    def remove(self, name: str) -> bool:
        """Drop a pending candidate by file name."""
        for i, candidate in enumerate(self._pending):
            if candidate.name == name:
                del self._pending[i]
                return True
        return False

    def clear(self) -> None:
        """Discard every pending candidate. Completed history is kept."""
        self._pending.clear()

    def mark_completed(self, candidates: Iterable[UploadCandidate]) -> None:
        """Move uploaded candidates out of the pending set into session history."""
        known = {c.identity for c in self._completed}
        done = set()
        for candidate in candidates:
            done.add(candidate.identity)
            if candidate.identity not in known:
                known.add(candidate.identity)
                self._completed.append(candidate)
        self._pending = [c for c in self._pending if c.identity not in done]
