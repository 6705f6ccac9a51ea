"""De-duplication of upload candidates.

Identity is the ``(name, size)`` pair. Two different files sharing both are
treated as duplicates.

A weak content fingerprint (Adler-32 over the first 8 KiB) is available for a
secondary warning only. It never drops a candidate.
"""

from __future__ import annotations

import logging
import zlib
from collections.abc import Iterable, Sequence
from pathlib import Path

from wallsync.core.output import NotificationLevel, NotificationSink
from wallsync.models.upload import UploadCandidate

logger = logging.getLogger(__name__)

FINGERPRINT_BYTES = 8 * 1024


def deduplicate(
    new: Sequence[UploadCandidate],
    existing: Iterable[UploadCandidate],
    notifier: NotificationSink | None = None,
) -> list[UploadCandidate]:
    """Drop candidates whose identity is already known.

    Earlier candidates in ``new`` win over later ones with the same identity.

    Args:
        new: Newly validated candidates, in selection order.
        existing: Candidates already accepted (or completed) this session.
        notifier: Receives one summary notice when anything was dropped.

    Returns:
        The surviving candidates, order preserved.
    """
    seen = {c.identity for c in existing}
    kept: list[UploadCandidate] = []
    for candidate in new:
        if candidate.identity in seen:
            logger.debug("Duplicate dropped: %s (%d bytes)", candidate.name, candidate.size)
            continue
        seen.add(candidate.identity)
        kept.append(candidate)

    removed = len(new) - len(kept)
    if removed and notifier is not None:
        notifier.notify(NotificationLevel.INFO, f"Removed {removed} duplicate files")
    return kept


def quick_fingerprint(path: Path, length: int = FINGERPRINT_BYTES) -> int:
    """Adler-32 of the first ``length`` bytes. Not a content hash."""
    with path.open("rb") as fh:
        return zlib.adler32(fh.read(length))


def find_content_lookalikes(
    candidates: Sequence[UploadCandidate],
    notifier: NotificationSink | None = None,
) -> list[tuple[UploadCandidate, UploadCandidate]]:
    """Find pairs that differ in identity but look alike by size and prefix.

    Unreadable files are skipped. One warning per pair; nothing is dropped.
    """
    by_signature: dict[tuple[int, int], UploadCandidate] = {}
    pairs: list[tuple[UploadCandidate, UploadCandidate]] = []

    for candidate in candidates:
        try:
            signature = (candidate.size, quick_fingerprint(candidate.path))
        except OSError as e:
            logger.debug("Cannot fingerprint %s: %s", candidate.path, e)
            continue

        first = by_signature.get(signature)
        if first is None:
            by_signature[signature] = candidate
            continue
        if first.identity == candidate.identity:
            continue

        pairs.append((first, candidate))
        if notifier is not None:
            notifier.notify(
                NotificationLevel.WARNING,
                f'"{candidate.name}" looks identical to "{first.name}"',
            )

    return pairs
