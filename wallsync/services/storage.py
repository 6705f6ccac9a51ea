"""Direct PUT of file bytes to a presigned object-storage URL."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any

import httpx

from wallsync.core.exceptions import UploadTransportError
from wallsync.models.upload import UploadCandidate

from .base import DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


def iter_file_chunks(
    candidate: UploadCandidate,
    on_bytes: Callable[[int, int], None] | None = None,
    chunk_size: int = CHUNK_SIZE,
) -> Iterator[bytes]:
    """Yield a file's bytes, reporting ``(bytes_sent, bytes_total)`` per chunk."""
    total = candidate.size
    sent = 0
    with candidate.path.open("rb") as fh:
        while True:
            chunk = fh.read(chunk_size)
            if not chunk:
                break
            sent += len(chunk)
            if on_bytes:
                on_bytes(sent, total)
            yield chunk


@dataclass
class ObjectStoreClient:
    """Uploads raw bytes to presigned URLs. No retries at this layer."""

    timeout: int = DEFAULT_TIMEOUT
    verify_ssl: bool = True
    transport: httpx.BaseTransport | None = field(default=None, repr=False)
    _client: httpx.Client | None = field(init=False, default=None, repr=False)

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(
                timeout=self.timeout, verify=self.verify_ssl, transport=self.transport
            )
        return self._client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> ObjectStoreClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def put(
        self,
        upload_url: str,
        candidate: UploadCandidate,
        on_bytes: Callable[[int, int], None] | None = None,
    ) -> httpx.Response:
        """PUT the candidate's bytes with its content type.

        Raises:
            UploadTransportError: On a non-2xx answer or a network failure.
        """
        headers = {
            "Content-Type": candidate.content_type,
            "Content-Length": str(candidate.size),
        }
        try:
            resp = self.client.put(
                upload_url,
                content=iter_file_chunks(candidate, on_bytes),
                headers=headers,
            )
        except httpx.TimeoutException as e:
            raise UploadTransportError(
                f"Upload timed out after {self.timeout}s", file_path=candidate.name
            ) from e
        except httpx.TransportError as e:
            raise UploadTransportError(
                f"Network error: {e}", file_path=candidate.name
            ) from e
        except OSError as e:
            raise UploadTransportError(
                f"Cannot read file: {e}", file_path=candidate.name
            ) from e

        if not resp.is_success:
            body = resp.text.strip()[:200]
            message = f"HTTP {resp.status_code}: {body}" if body else f"HTTP {resp.status_code}"
            raise UploadTransportError(
                message, status_code=resp.status_code, file_path=candidate.name
            )

        logger.debug("Uploaded %s (%d bytes)", candidate.name, candidate.size)
        return resp
