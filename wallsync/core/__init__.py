"""Core modules for wallsync."""

from wallsync.core.config import CONFIG_DIR, CONFIG_FILE, Config, Profile
from wallsync.core.exceptions import (
    ConfigurationError,
    DeleteError,
    DestinationError,
    DisplayFetchError,
    NetworkError,
    OperationError,
    PresignError,
    RetryExhaustedError,
    UploadTransportError,
    ValidationError,
    WallsyncError,
)
from wallsync.core.logging import LogContext, get_audit_logger, log_context, setup_logging
from wallsync.core.output import (
    ConsoleNotifier,
    NotificationLevel,
    NotificationSink,
    OutputFormat,
    RecordingNotifier,
    console,
    print_error,
    print_json,
    print_output,
    print_success,
    print_table,
    print_warning,
)
from wallsync.core.validation import (
    validate_object_key,
    validate_path_exists,
    validate_positive_int,
    validate_url,
)

__all__ = [
    # Exceptions
    "WallsyncError",
    "ConfigurationError",
    "NetworkError",
    "ValidationError",
    "OperationError",
    "PresignError",
    "UploadTransportError",
    "DestinationError",
    "DisplayFetchError",
    "DeleteError",
    "RetryExhaustedError",
    # Validation
    "validate_url",
    "validate_path_exists",
    "validate_positive_int",
    "validate_object_key",
    # Config
    "Config",
    "Profile",
    "CONFIG_DIR",
    "CONFIG_FILE",
    # Output
    "OutputFormat",
    "NotificationLevel",
    "NotificationSink",
    "ConsoleNotifier",
    "RecordingNotifier",
    "print_output",
    "print_table",
    "print_json",
    "print_error",
    "print_warning",
    "print_success",
    "console",
    # Logging
    "log_context",
    "get_audit_logger",
    "setup_logging",
    "LogContext",
]
