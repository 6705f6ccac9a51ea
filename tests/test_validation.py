"""Tests for wallsync.core.validation module."""

from __future__ import annotations

from pathlib import Path

import pytest

from wallsync.core.exceptions import InvalidURLError, PathValidationError, ValidationError
from wallsync.core.validation import (
    validate_object_key,
    validate_path_exists,
    validate_positive_int,
    validate_url,
)


class TestValidateUrl:
    """Tests for validate_url."""

    def test_strips_trailing_slash(self):
        assert validate_url("https://relay.example.com/presign/") == "https://relay.example.com/presign"

    def test_strips_whitespace(self):
        assert validate_url("  http://localhost:54321  ") == "http://localhost:54321"

    @pytest.mark.parametrize("url", ["", "ftp://example.com", "relay.example.com", "https://"])
    def test_rejects(self, url: str):
        with pytest.raises(InvalidURLError):
            validate_url(url)


class TestValidatePathExists:
    """Tests for validate_path_exists."""

    def test_existing_file(self, temp_dir: Path):
        path = temp_dir / "a.jpg"
        path.write_bytes(b"x")
        assert validate_path_exists(path) == path

    def test_missing(self, temp_dir: Path):
        with pytest.raises(PathValidationError):
            validate_path_exists(temp_dir / "missing.jpg")

    def test_directory(self, temp_dir: Path):
        with pytest.raises(PathValidationError):
            validate_path_exists(temp_dir)


class TestValidatePositiveInt:
    """Tests for validate_positive_int."""

    def test_accepts(self):
        assert validate_positive_int(3, "max_files") == 3

    def test_rejects_zero(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_positive_int(0, "max_files")
        assert exc_info.value.field == "max_files"


class TestValidateObjectKey:
    """Tests for validate_object_key."""

    def test_strips_leading_slash(self):
        assert validate_object_key("/wallpapers/a.jpg") == "wallpapers/a.jpg"

    @pytest.mark.parametrize("key", ["", "   ", "wallpapers/../secret"])
    def test_rejects(self, key: str):
        with pytest.raises(ValidationError):
            validate_object_key(key)
