"""Shared constants for uploader modules.

Tier tables are ordered from the largest threshold down; the first row whose
threshold is exceeded wins.
"""

from wallsync.core.config import (
    DEFAULT_ACCEPT,
    DEFAULT_MAX_FILES,
    DEFAULT_MAX_SIZE_MB,
    DEFAULT_THUMBNAIL_PATTERN,
)

# =============================================================================
# Selection Defaults
# =============================================================================

DEFAULT_MAX_SIZE_BYTES = DEFAULT_MAX_SIZE_MB * 1024 * 1024

MAX_FILES = DEFAULT_MAX_FILES

ACCEPTED_TYPES = DEFAULT_ACCEPT

# Candidates validated per chunk before yielding
VALIDATION_CHUNK_SIZE = 10

# Selections larger than this get a "Processing N files..." notice
LARGE_SELECTION_THRESHOLD = 20

# Accepted-set sizes that trigger a heavier admission notice
ADMISSION_WARNING_THRESHOLD = 80
ADMISSION_INFO_THRESHOLD = 50

# =============================================================================
# Batch Scheduling
# =============================================================================

# (files greater than, batch size); anything not matched gets the fallback
BATCH_SIZE_TIERS = [
    (100, 1),
    (80, 2),
    (50, 3),
    (30, 4),
]
FALLBACK_BATCH_SIZE = 8

# (files greater than, seconds between batches)
BATCH_DELAY_TIERS = [
    (100, 1.2),
    (80, 0.9),
    (50, 0.6),
    (30, 0.4),
]
FALLBACK_BATCH_DELAY = 0.3

# =============================================================================
# Thumbnail Checks
# =============================================================================

THUMBNAIL_WIDTH = 360
THUMBNAIL_HEIGHT = 640

# Retries after the first failed fetch, origin fallback included
THUMBNAIL_MAX_RETRIES = 3

THUMBNAIL_PATTERN = DEFAULT_THUMBNAIL_PATTERN

THUMBNAIL_GROUP_SIZE = 3
THUMBNAIL_GROUP_DELAY = 0.8

FAILED_PLACEHOLDER = "placeholder://failed-to-load"

CACHE_BUST_PARAM = "_cb"
