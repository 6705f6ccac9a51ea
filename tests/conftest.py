"""Pytest configuration and fixtures for wallsync tests."""

from __future__ import annotations

import tempfile
import threading
from pathlib import Path
from typing import Callable, Generator, Optional

import pytest

from wallsync.core.exceptions import PresignError, UploadTransportError
from wallsync.core.output import RecordingNotifier
from wallsync.models.upload import PresignResult, UploadCandidate

CDN = "https://cdn.example.com"


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_config_yaml() -> str:
    """Sample config YAML content."""
    return """
default_profile: test
output_format: table

profiles:
  test:
    presign_url: https://relay-test.example.com/functions/v1/s3-presign-upload
    delete_url: https://relay-test.example.com/functions/v1/s3-delete
    cdn_domain: cdn-test.example.com
    verify_ssl: false
    timeout: 30

  production:
    presign_url: https://relay.example.com/functions/v1/s3-presign-upload
    verify_ssl: true
    timeout: 60
    max_size_mb: 20
    accept: image/png, image/jpeg
    thumbnail_pattern: "/unsafe/{w}x{h}/"
"""


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def make_image(temp_dir: Path) -> Callable[..., Path]:
    """Factory writing an image-named file of a given size."""

    def _make(name: str, size: int = 1024, fill: bytes = b"x") -> Path:
        path = temp_dir / name
        path.write_bytes((fill * size)[:size])
        return path

    return _make


@pytest.fixture
def make_candidate() -> Callable[..., UploadCandidate]:
    """Factory building candidates without touching the filesystem."""

    def _make(name: str, size: int = 1024, mime_type: str = "image/jpeg") -> UploadCandidate:
        return UploadCandidate(path=Path(name), name=name, size=size, mime_type=mime_type)

    return _make


# =============================================================================
# Fake collaborators
# =============================================================================


class FakePresigner:
    """Presign relay stand-in.

    Names in ``existing`` answer ``fileExists``; names in ``failing`` raise.
    """

    def __init__(self, existing: Optional[set[str]] = None, failing: Optional[set[str]] = None):
        self.existing = existing or set()
        self.failing = failing or set()
        self.calls: list[tuple[str, str, str]] = []
        self._lock = threading.Lock()

    def presign(self, directory: str, filename: str, content_type: str) -> PresignResult:
        with self._lock:
            self.calls.append((directory, filename, content_type))
        if filename in self.failing:
            raise PresignError("Relay refused", status_code=500, filename=filename)
        public_url = f"{CDN}/{directory}/{filename}"
        if filename in self.existing:
            return PresignResult(file_exists=True, public_url=public_url, message="exists")
        return PresignResult(
            public_url=public_url,
            upload_url=f"https://bucket.example.com/{directory}/{filename}?sig=1",
            key=f"{directory}/{filename}",
            thumbnail_template=f"{CDN}/fit-in/{{w}}x{{h}}/{directory}/{filename}",
        )


class FakeStore:
    """Object store stand-in reporting progress in two steps."""

    def __init__(self, failing: Optional[dict[str, str]] = None):
        self.failing = failing or {}
        self.puts: list[str] = []
        self._lock = threading.Lock()

    def put(self, upload_url, candidate, on_bytes=None):
        with self._lock:
            self.puts.append(candidate.name)
        if candidate.name in self.failing:
            raise UploadTransportError(
                self.failing[candidate.name], status_code=403, file_path=candidate.name
            )
        if on_bytes:
            on_bytes(candidate.size // 2, candidate.size)
            on_bytes(candidate.size, candidate.size)
        return None


@pytest.fixture
def presigner() -> FakePresigner:
    return FakePresigner()


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


# =============================================================================
# CLI
# =============================================================================


@pytest.fixture
def config_file(
    temp_dir: Path, sample_config_yaml: str, monkeypatch: pytest.MonkeyPatch
) -> Path:
    """Write the sample config and point every loader at it."""
    path = temp_dir / "config.yaml"
    path.write_text(sample_config_yaml)
    for var in ("WALLSYNC_PRESIGN_URL", "WALLSYNC_PROFILE", "WALLSYNC_API_KEY"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setattr("wallsync.core.config.CONFIG_FILE", path)
    monkeypatch.setattr("wallsync.cli.config_cmd.CONFIG_FILE", path)
    return path
