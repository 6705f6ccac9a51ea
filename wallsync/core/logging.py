"""Logging for wallsync.

Command output goes through Rich (see ``output``). This module covers
diagnostics on stderr, operation timing and the audit trail of bucket
writes and deletes.
"""

from __future__ import annotations

import json
import logging
import sys
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Generator, Optional

# =============================================================================
# Constants
# =============================================================================

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
AUDIT_LOGGER_NAME = "wallsync.audit"

# Log every request at INFO otherwise
QUIET_LIBRARIES = ("httpx", "httpcore")


# =============================================================================
# Setup
# =============================================================================


def setup_logging(
    level: int = logging.WARNING,
    *,
    quiet: bool = False,
    verbose: bool = False,
) -> None:
    """Configure the root logger once per process. ``quiet`` wins over ``verbose``."""
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG

    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT, stream=sys.stderr)

    for name in QUIET_LIBRARIES:
        logging.getLogger(name).setLevel(logging.WARNING)


# =============================================================================
# Operation Timing
# =============================================================================


def _fields(context: dict[str, Any]) -> str:
    return ", ".join(f"{k}={v}" for k, v in context.items())


class LogContext:
    """Logs the start, end and duration of one operation.

    Messages sent through ``info`` carry the operation's fields, e.g.
    ``[batch upload] 3 succeeded (files=3, directory=wallpapers)``.
    """

    def __init__(
        self,
        operation: str,
        logger: Optional[logging.Logger] = None,
        **context: Any,
    ):
        self.operation = operation
        self.logger = logger or logging.getLogger(__name__)
        self.context = context
        self._started: Optional[float] = None

    @property
    def elapsed(self) -> float:
        if self._started is None:
            return 0.0
        return time.monotonic() - self._started

    def __enter__(self) -> "LogContext":
        self._started = time.monotonic()
        self.logger.info("Starting %s (%s)", self.operation, _fields(self.context))
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if exc_type is not None:
            self.logger.error("%s failed after %.2fs: %s", self.operation, self.elapsed, exc_val)
            return
        self.logger.info("%s completed in %.2fs", self.operation, self.elapsed)

    def info(self, message: str, *args: Any) -> None:
        self.logger.info(f"[{self.operation}] {message} ({_fields(self.context)})", *args)


@contextmanager
def log_context(
    operation: str,
    logger: Optional[logging.Logger] = None,
    **context: Any,
) -> Generator[LogContext, None, None]:
    """Time ``operation`` and log how it ended.

    Example:
        >>> with log_context("batch upload", logger, files=3) as ctx:
        ...     ctx.info("%d succeeded", 3)
    """
    with LogContext(operation, logger, **context) as ctx:
        yield ctx


# =============================================================================
# Audit Trail
# =============================================================================


class AuditLogger:
    """Writes one JSON line per upload run or delete.

    Failed operations go out at WARNING so they show at the default level.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(AUDIT_LOGGER_NAME)

    def log_operation(
        self,
        operation: str,
        *,
        directory: Optional[str] = None,
        key: Optional[str] = None,
        success: bool = True,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        """Record an upload run or a delete.

        Args:
            operation: ``upload`` or ``delete``.
            directory: Destination directory of an upload run.
            key: Object key of a delete.
            success: False when any part of the operation failed.
            details: Counters or error text.
        """
        record: dict[str, Any] = {
            "at": datetime.now(timezone.utc).isoformat(timespec="seconds"),
            "operation": operation,
            "success": success,
        }
        optional = {"directory": directory, "key": key, "details": details}
        record.update({name: value for name, value in optional.items() if value})

        self.logger.log(
            logging.INFO if success else logging.WARNING,
            "AUDIT %s",
            json.dumps(record, sort_keys=True, default=str),
        )


def get_audit_logger() -> AuditLogger:
    return AuditLogger()
