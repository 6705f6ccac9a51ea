"""Tests for wallsync.core.logging."""

from __future__ import annotations

import json
import logging

import pytest

from wallsync.core.logging import AUDIT_LOGGER_NAME, get_audit_logger, log_context


class TestLogContext:
    """Tests for log_context."""

    def test_logs_start_and_finish(self, caplog: pytest.LogCaptureFixture):
        logger = logging.getLogger("wallsync.test")
        with caplog.at_level(logging.INFO, logger="wallsync.test"):
            with log_context("batch upload", logger, files=3) as ctx:
                ctx.info("%d succeeded", 3)

        messages = [r.getMessage() for r in caplog.records]
        assert messages[0] == "Starting batch upload (files=3)"
        assert messages[1] == "[batch upload] 3 succeeded (files=3)"
        assert messages[2].startswith("batch upload completed in")

    def test_logs_failure(self, caplog: pytest.LogCaptureFixture):
        logger = logging.getLogger("wallsync.test")
        with caplog.at_level(logging.INFO, logger="wallsync.test"):
            with pytest.raises(RuntimeError):
                with log_context("delete", logger, key="a.jpg"):
                    raise RuntimeError("relay down")

        assert caplog.records[-1].levelno == logging.ERROR
        assert "relay down" in caplog.records[-1].getMessage()


class TestAuditLogger:
    """Tests for the audit trail."""

    def test_failure_logged_as_warning(self, caplog: pytest.LogCaptureFixture):
        with caplog.at_level(logging.INFO, logger=AUDIT_LOGGER_NAME):
            get_audit_logger().log_operation("delete", key="wallpapers/a.jpg", success=False)

        (record,) = caplog.records
        assert record.levelno == logging.WARNING
        payload = json.loads(record.getMessage().removeprefix("AUDIT "))
        assert payload["key"] == "wallpapers/a.jpg"
        assert payload["success"] is False
        assert "directory" not in payload
