"""Input validation helpers for wallsync."""

from __future__ import annotations

from pathlib import Path
from urllib.parse import urlparse

from wallsync.core.exceptions import InvalidURLError, PathValidationError, ValidationError


def validate_url(url: str) -> str:
    """Validate and normalize an http(s) endpoint URL.

    Returns:
        URL without a trailing slash.

    Raises:
        InvalidURLError: If the URL is empty or not http(s).
    """
    url = (url or "").strip()
    if not url:
        raise InvalidURLError(url, "URL is required")

    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https"):
        raise InvalidURLError(url, "scheme must be http or https")
    if not parsed.netloc:
        raise InvalidURLError(url, "missing host")

    return url.rstrip("/")


def validate_path_exists(path: str | Path) -> Path:
    """Ensure a local path exists and is a regular file."""
    p = Path(path).expanduser()
    if not p.exists():
        raise PathValidationError(str(path), "does not exist")
    if not p.is_file():
        raise PathValidationError(str(path), "not a file")
    return p


def validate_positive_int(value: int, field: str) -> int:
    """Ensure an integer option is >= 1."""
    if value < 1:
        raise ValidationError(f"{field} must be at least 1", field=field, value=value)
    return value


def validate_object_key(key: str) -> str:
    """Validate an object key for the delete relay."""
    key = (key or "").strip().lstrip("/")
    if not key:
        raise ValidationError("Object key is required", field="key", value=key)
    if ".." in key.split("/"):
        raise ValidationError("Object key must not contain '..'", field="key", value=key)
    return key
