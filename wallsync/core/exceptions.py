"""Errors raised by wallsync.

Every error carries a human-readable ``message``; that text is what ends up
in a task's error detail or in a notification, so it is kept short.
Structured context goes in ``details`` and only shows in ``str()``.
"""

from __future__ import annotations

from typing import Any


class WallsyncError(Exception):
    """Root of the wallsync error hierarchy."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = {k: v for k, v in (details or {}).items() if v is not None}

    def __str__(self) -> str:
        if not self.details:
            return self.message
        context = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"{self.message} ({context})"


def _field_details(field: str | None, value: Any) -> dict[str, Any]:
    return {"field": field, "value": None if value is None else repr(value)}


# =============================================================================
# Configuration
# =============================================================================


class ConfigurationError(WallsyncError):
    """Config file or environment is missing, unreadable or inconsistent."""

    def __init__(self, message: str, field: str | None = None, value: Any = None):
        super().__init__(message, _field_details(field, value))
        self.field = field
        self.value = value


class ProfileNotFoundError(ConfigurationError):
    def __init__(self, profile: str):
        super().__init__(f"Profile not found: {profile}", field="profile", value=profile)
        self.profile = profile


# =============================================================================
# Input Validation
# =============================================================================


class ValidationError(WallsyncError):
    """User input or a selected file was rejected."""

    def __init__(self, message: str, field: str | None = None, value: Any = None):
        super().__init__(message, _field_details(field, value))
        self.field = field
        self.value = value


class FileTooLargeError(ValidationError):
    def __init__(self, name: str, size: int, max_size_bytes: int):
        limit_mb = round(max_size_bytes / 1024 / 1024)
        super().__init__(f'File "{name}" is too large. Maximum size is {limit_mb}MB')
        self.name = name
        self.size = size
        self.max_size_bytes = max_size_bytes


class UnsupportedTypeError(ValidationError):
    def __init__(self, name: str, mime_type: str):
        super().__init__(f'File "{name}" is not an accepted file type')
        self.name = name
        self.mime_type = mime_type


class SelectionRejectedError(ValidationError):
    """The selection as a whole broke a count rule; nothing was admitted."""

    def __init__(self, message: str, count: int):
        super().__init__(message)
        self.count = count


class InvalidURLError(ValidationError):
    def __init__(self, url: str, reason: str = ""):
        text = f"Invalid URL: {url} - {reason}" if reason else f"Invalid URL: {url}"
        super().__init__(text, field="url", value=url)
        self.url = url
        self.reason = reason


class PathValidationError(ValidationError):
    def __init__(self, path: str, reason: str):
        super().__init__(f"Invalid path: {path} - {reason}", field="path", value=path)
        self.path = path
        self.reason = reason


# =============================================================================
# Network
# =============================================================================


class NetworkError(WallsyncError):
    """A relay could not be reached (DNS, connect, TLS or timeout)."""

    def __init__(self, url: str, cause: str | None = None):
        text = f"Network error connecting to {url}"
        super().__init__(f"{text}: {cause}" if cause else text, {"url": url})
        self.url = url
        self.cause = cause


class RetryExhaustedError(WallsyncError):
    """A relay call kept failing until its retry budget ran out."""

    def __init__(self, operation: str, attempts: int, last_error: Exception | None = None):
        text = f"Operation '{operation}' failed after {attempts} attempts"
        super().__init__(f"{text}: {last_error}" if last_error else text)
        self.operation = operation
        self.attempts = attempts
        self.last_error = last_error


# =============================================================================
# Upload Operations
# =============================================================================


class OperationError(WallsyncError):
    """One step of an upload, preview or delete failed."""

    operation = "operation"

    def __init__(self, message: str, **details: Any):
        super().__init__(message, {"operation": self.operation, **details})


class PresignError(OperationError):
    """The presign relay was unreachable, refused, or answered nonsense."""

    operation = "presign"

    def __init__(self, message: str, status_code: int | None = None, filename: str | None = None):
        super().__init__(message, status=status_code, file=filename)
        self.status_code = status_code
        self.filename = filename


class UploadTransportError(OperationError):
    """The PUT of file bytes to the presigned URL failed."""

    operation = "upload"

    def __init__(self, message: str, status_code: int | None = None, file_path: str | None = None):
        super().__init__(message, status=status_code, file=file_path)
        self.status_code = status_code
        self.file_path = file_path


class DestinationError(OperationError):
    operation = "destination"

    def __init__(self, message: str = "No destination directory selected"):
        super().__init__(message)


class DisplayFetchError(OperationError):
    """A preview stayed unloadable after the whole fallback ladder."""

    operation = "thumbnail"

    def __init__(self, url: str, attempts: int, reason: str = ""):
        text = f"Failed to load preview after {attempts} attempts: {url}"
        super().__init__(f"{text} - {reason}" if reason else text, url=url)
        self.url = url
        self.attempts = attempts
        self.reason = reason


class DeleteError(OperationError):
    operation = "delete"

    def __init__(self, key: str, reason: str = ""):
        text = f"Failed to delete {key}"
        super().__init__(f"{text}: {reason}" if reason else text, key=key)
        self.key = key
        self.reason = reason


class BatchOperationError(OperationError):
    """Some files in a run failed while others went through."""

    def __init__(self, operation: str, succeeded: int, failed: int, errors: list[str]):
        self.operation = operation
        super().__init__(
            f"Batch {operation} partially failed: {succeeded} succeeded, {failed} failed",
            succeeded=succeeded,
            failed=failed,
        )
        self.succeeded = succeeded
        self.failed = failed
        self.errors = errors
