"""Batch upload pipeline for wallsync.

This package provides:
- Admission rules and de-duplication for selected files
- Destination directory derivation from the category table
- The tiered batch scheduler and the per-file upload state machine
- Preview fetch checks with a fallback ladder
"""

from wallsync.uploaders.constants import (
    DEFAULT_MAX_SIZE_BYTES,
    FAILED_PLACEHOLDER,
    MAX_FILES,
    VALIDATION_CHUNK_SIZE,
)
from wallsync.uploaders.dedup import deduplicate, find_content_lookalikes, quick_fingerprint
from wallsync.uploaders.destinations import (
    ROOT_DIRECTORY,
    clean_object_name,
    list_destinations,
    normalize_segment,
    object_key,
    resolve_destination,
)
from wallsync.uploaders.pipeline import BatchUploadPipeline, summary_for
from wallsync.uploaders.scheduler import (
    batch_delay_for,
    batch_size_for,
    run_batches,
    split_into_batches,
)
from wallsync.uploaders.selection import FileSelection
from wallsync.uploaders.thumbnails import (
    ThumbnailChecker,
    ThumbnailResult,
    ThumbnailStatus,
    cache_busted,
    origin_url,
    reduced_variant,
    thumbnail_url,
)
from wallsync.uploaders.transfer import FileUploader
from wallsync.uploaders.validation import (
    ValidationRules,
    check_selection,
    matches_accept,
    validate_candidate,
)

__all__ = [
    # Constants
    "DEFAULT_MAX_SIZE_BYTES",
    "FAILED_PLACEHOLDER",
    "MAX_FILES",
    "ROOT_DIRECTORY",
    "VALIDATION_CHUNK_SIZE",
    # Admission
    "ValidationRules",
    "check_selection",
    "matches_accept",
    "validate_candidate",
    "deduplicate",
    "find_content_lookalikes",
    "quick_fingerprint",
    "FileSelection",
    # Destinations
    "clean_object_name",
    "list_destinations",
    "normalize_segment",
    "object_key",
    "resolve_destination",
    # Upload
    "batch_delay_for",
    "batch_size_for",
    "run_batches",
    "split_into_batches",
    "FileUploader",
    "BatchUploadPipeline",
    "summary_for",
    # Previews
    "ThumbnailChecker",
    "ThumbnailResult",
    "ThumbnailStatus",
    "cache_busted",
    "origin_url",
    "reduced_variant",
    "thumbnail_url",
]
