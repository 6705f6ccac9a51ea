"""wallsync - batch image uploads for a wallpaper admin backend.

This package provides a command-line interface that:
- Validates and de-duplicates local image selections
- Uploads them in tiered, spaced batches through a presign relay
- Checks CDN previews and suggests catalog names from file names
"""

__version__ = "0.1.0"

from wallsync.core.config import Config, Profile
from wallsync.core.exceptions import (
    ConfigurationError,
    DeleteError,
    NetworkError,
    PresignError,
    UploadTransportError,
    ValidationError,
    WallsyncError,
)
from wallsync.uploaders.pipeline import BatchUploadPipeline

__all__ = [
    "__version__",
    "BatchUploadPipeline",
    "Config",
    "Profile",
    "WallsyncError",
    "ConfigurationError",
    "DeleteError",
    "NetworkError",
    "PresignError",
    "UploadTransportError",
    "ValidationError",
]
