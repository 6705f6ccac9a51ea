"""Per-file and per-selection admission rules.

Nothing here touches the filesystem or the network; candidates arrive with
their size and MIME type already known.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from wallsync.core.exceptions import (
    FileTooLargeError,
    SelectionRejectedError,
    UnsupportedTypeError,
    ValidationError,
)
from wallsync.core.output import NotificationLevel, NotificationSink
from wallsync.models.upload import UploadCandidate

from .constants import ACCEPTED_TYPES, DEFAULT_MAX_SIZE_BYTES, MAX_FILES

logger = logging.getLogger(__name__)


def parse_accept(accept: str) -> frozenset[str]:
    """Split a comma-separated accept string (``"image/png, image/*"``)."""
    return frozenset(p.strip().lower() for p in accept.split(",") if p.strip())


@dataclass(frozen=True)
class ValidationRules:
    """Admission configuration for one selection."""

    accepted_types: frozenset[str] = field(default_factory=lambda: parse_accept(ACCEPTED_TYPES))
    max_size_bytes: int = DEFAULT_MAX_SIZE_BYTES
    allow_multiple: bool = True
    max_files: int = MAX_FILES

    @classmethod
    def from_accept(
        cls,
        accept: str,
        *,
        max_size_bytes: int = DEFAULT_MAX_SIZE_BYTES,
        allow_multiple: bool = True,
        max_files: int = MAX_FILES,
    ) -> ValidationRules:
        return cls(
            accepted_types=parse_accept(accept),
            max_size_bytes=max_size_bytes,
            allow_multiple=allow_multiple,
            max_files=max_files,
        )


def matches_accept(mime_type: str, patterns: frozenset[str] | set[str]) -> bool:
    """Check a MIME type against exact and ``type/*`` patterns.

    ``*`` and ``*/*`` accept everything.
    """
    mime = (mime_type or "").lower()
    for pattern in patterns:
        if pattern in ("*", "*/*"):
            return True
        if pattern.endswith("/*"):
            if mime.split("/", 1)[0] == pattern[:-2]:
                return True
        elif mime == pattern:
            return True
    return False


def check_candidate(candidate: UploadCandidate, rules: ValidationRules) -> None:
    """Raise for the first failing rule; size is checked before type.

    Raises:
        FileTooLargeError: If the file exceeds ``max_size_bytes``.
        UnsupportedTypeError: If no accepted pattern matches.
    """
    if candidate.size > rules.max_size_bytes:
        raise FileTooLargeError(candidate.name, candidate.size, rules.max_size_bytes)
    if not matches_accept(candidate.mime_type, rules.accepted_types):
        raise UnsupportedTypeError(candidate.name, candidate.mime_type)


def validate_candidate(
    candidate: UploadCandidate,
    rules: ValidationRules,
    notifier: NotificationSink,
) -> bool:
    """Accept or reject one candidate, notifying once per rejection."""
    try:
        check_candidate(candidate, rules)
    except ValidationError as e:
        logger.debug("Rejected %s: %s", candidate.name, e.message)
        notifier.notify(NotificationLevel.ERROR, e.message)
        return False
    return True


def check_selection(count: int, rules: ValidationRules, notifier: NotificationSink) -> bool:
    """Apply the count rules to a whole selection event.

    A rejected selection is never partially admitted.
    """
    try:
        if not rules.allow_multiple and count > 1:
            raise SelectionRejectedError("Only one file can be selected", count)
        if count > rules.max_files:
            raise SelectionRejectedError(f"Maximum {rules.max_files} files allowed", count)
    except SelectionRejectedError as e:
        notifier.notify(NotificationLevel.ERROR, e.message)
        return False
    return True
