"""Preview (thumbnail) fetch checks with a fallback ladder.

CDN previews may be rate limited right after an upload. A failed fetch is
retried at most three times, each with a different URL:

1. the same URL
2. a reduced-dimension variant (the size segment halved)
3. a direct fetch from the origin (non-CDN) when one can be derived,
   otherwise a cache-busted URL

If everything fails the preview is replaced by a placeholder and a single
error notification is sent.

The size segment of a preview URL follows the profile's
``thumbnail_pattern``, ``/fit-in/{w}x{h}/`` by default.
"""

from __future__ import annotations

import logging
import re
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from typing import Any

import httpx

from wallsync.core.exceptions import ConfigurationError, DisplayFetchError
from wallsync.core.output import NotificationLevel, NotificationSink

from .constants import (
    CACHE_BUST_PARAM,
    FAILED_PLACEHOLDER,
    THUMBNAIL_GROUP_DELAY,
    THUMBNAIL_GROUP_SIZE,
    THUMBNAIL_HEIGHT,
    THUMBNAIL_MAX_RETRIES,
    THUMBNAIL_PATTERN,
    THUMBNAIL_WIDTH,
)

logger = logging.getLogger(__name__)

# Pause before each retry
DEFAULT_RETRY_DELAY = 0.5


# =============================================================================
# URL Helpers
# =============================================================================


@lru_cache(maxsize=None)
def size_segment_re(pattern: str = THUMBNAIL_PATTERN) -> re.Pattern[str]:
    """Regex matching the size segment described by ``pattern``.

    Raises:
        ConfigurationError: If ``pattern`` is not a ``/.../`` path segment
            containing both ``{w}`` and ``{h}``.
    """
    if not (
        pattern.startswith("/")
        and pattern.endswith("/")
        and "{w}" in pattern
        and "{h}" in pattern
    ):
        raise ConfigurationError(
            "Thumbnail pattern must be a path segment like /fit-in/{w}x{h}/",
            field="thumbnail_pattern",
            value=pattern,
        )
    escaped = re.escape(pattern)
    escaped = escaped.replace(re.escape("{w}"), r"(?P<w>\d+)", 1)
    escaped = escaped.replace(re.escape("{h}"), r"(?P<h>\d+)", 1)
    return re.compile(escaped)


def thumbnail_url(template: str, width: int = THUMBNAIL_WIDTH, height: int = THUMBNAIL_HEIGHT) -> str:
    """Fill a ``thumbnailTemplate`` such as ``https://cdn/fit-in/{w}x{h}/key``."""
    return template.replace("{w}", str(width)).replace("{h}", str(height))


def strip_fit_in(url: str, pattern: str = THUMBNAIL_PATTERN) -> str:
    """Remove the size segment from a URL."""
    return size_segment_re(pattern).sub("/", url, count=1)


def with_fit_in(url: str, width: int, height: int, pattern: str = THUMBNAIL_PATTERN) -> str:
    """Rewrite (or add) the size segment right after the host."""
    parsed = httpx.URL(strip_fit_in(url, pattern))
    path = thumbnail_url(pattern, width, height) + parsed.path.lstrip("/")
    return str(parsed.copy_with(path=path))


def reduced_variant(url: str, pattern: str = THUMBNAIL_PATTERN) -> str:
    """Same image at half the transformed size.

    A URL without a size segment gets the half-size default.
    """
    match = size_segment_re(pattern).search(url)
    if match:
        width = max(1, int(match.group("w")) // 2)
        height = max(1, int(match.group("h")) // 2)
    else:
        width, height = THUMBNAIL_WIDTH // 2, THUMBNAIL_HEIGHT // 2
    return with_fit_in(url, width, height, pattern)


def cache_busted(url: str, token: str | None = None) -> str:
    """Append a cache-busting query parameter."""
    token = token or str(int(time.time() * 1000))
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{CACHE_BUST_PARAM}={token}"


def origin_url(
    url: str,
    cdn_domain: str | None = None,
    origin_base_url: str | None = None,
    pattern: str = THUMBNAIL_PATTERN,
) -> str | None:
    """The same object fetched straight from the origin, if one is configured.

    Returns None when there is no origin or the URL is not on the CDN.
    """
    if not origin_base_url:
        return None
    parsed = httpx.URL(strip_fit_in(url, pattern))
    if cdn_domain and parsed.host != cdn_domain:
        return None
    key = parsed.path.lstrip("/")
    if not key:
        return None
    return f"{origin_base_url.rstrip('/')}/{key}"


# =============================================================================
# Checker
# =============================================================================


class ThumbnailStatus(str, Enum):
    LOADED = "loaded"
    FAILED = "failed"


@dataclass
class ThumbnailResult:
    """Outcome of one preview check."""

    url: str
    status: ThumbnailStatus
    display_url: str
    attempts: int
    strategy: str = "initial"
    error: str | None = None
    tried: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "status": self.status.value,
            "display_url": self.display_url,
            "attempts": self.attempts,
            "strategy": self.strategy,
            "error": self.error,
        }


class ThumbnailChecker:
    """Fetches preview URLs, walking the fallback ladder on failure.

    Args:
        notifier: Receives one error notice per preview that never loads.
        cdn_domain: CDN host; only URLs on it get an origin fallback.
        origin_base_url: Base URL of the origin bucket.
        thumbnail_pattern: Size segment of preview URLs, e.g. ``/fit-in/{w}x{h}/``.
        timeout: Per-request timeout in seconds.
        verify_ssl: Verify TLS certificates.
        transport: Optional httpx transport (tests).
        sleep: Pause function for retry and stagger delays.
    """

    def __init__(
        self,
        notifier: NotificationSink,
        *,
        cdn_domain: str | None = None,
        origin_base_url: str | None = None,
        thumbnail_pattern: str = THUMBNAIL_PATTERN,
        timeout: float = 10,
        verify_ssl: bool = True,
        retry_delay: float = DEFAULT_RETRY_DELAY,
        transport: httpx.BaseTransport | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.notifier = notifier
        self.cdn_domain = cdn_domain
        self.origin_base_url = origin_base_url
        # Rejects a malformed pattern before any request is made
        size_segment_re(thumbnail_pattern)
        self.thumbnail_pattern = thumbnail_pattern
        self.retry_delay = retry_delay
        self.sleep = sleep
        self._client = httpx.Client(
            timeout=timeout,
            verify=verify_ssl,
            follow_redirects=True,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> ThumbnailChecker:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def _fetch(self, url: str) -> str | None:
        """GET a URL; return None on success or a reason on failure."""
        try:
            resp = self._client.get(url)
        except httpx.HTTPError as e:
            return f"{type(e).__name__}: {e}"
        if resp.is_success:
            return None
        return f"HTTP {resp.status_code}"

    def ladder(self, url: str) -> list[tuple[str, str]]:
        """Retry URLs in order as ``(strategy, url)`` pairs.

        The origin, when derivable, takes the last slot instead of the
        cache-busted URL.
        """
        origin = origin_url(url, self.cdn_domain, self.origin_base_url, self.thumbnail_pattern)
        steps = [
            ("retry", url),
            ("reduced", reduced_variant(url, self.thumbnail_pattern)),
            ("origin", origin) if origin else ("cache-bust", cache_busted(url)),
        ]
        return steps[:THUMBNAIL_MAX_RETRIES]

    def check(self, url: str) -> ThumbnailResult:
        """Fetch one preview, falling back as needed."""
        tried = [url]
        reason = self._fetch(url)
        if reason is None:
            return ThumbnailResult(url, ThumbnailStatus.LOADED, url, attempts=1, tried=tried)

        logger.debug("Preview %s failed (%s), starting fallback", url, reason)
        for strategy, candidate in self.ladder(url):
            self.sleep(self.retry_delay)
            tried.append(candidate)
            reason = self._fetch(candidate)
            if reason is None:
                logger.info("Preview %s loaded via %s", url, strategy)
                return ThumbnailResult(
                    url,
                    ThumbnailStatus.LOADED,
                    candidate,
                    attempts=len(tried),
                    strategy=strategy,
                    tried=tried,
                )

        error = DisplayFetchError(url, len(tried), reason or "")
        logger.warning("%s", error.message)
        self.notifier.notify(NotificationLevel.ERROR, error.message)
        return ThumbnailResult(
            url,
            ThumbnailStatus.FAILED,
            FAILED_PLACEHOLDER,
            attempts=len(tried),
            strategy="placeholder",
            error=reason,
            tried=tried,
        )

    def check_all(
        self,
        urls: Sequence[str],
        group_size: int = THUMBNAIL_GROUP_SIZE,
        group_delay: float = THUMBNAIL_GROUP_DELAY,
    ) -> list[ThumbnailResult]:
        """Check previews in groups spaced by ``group_delay`` seconds."""
        results: list[ThumbnailResult] = []
        size = max(1, group_size)
        for start in range(0, len(urls), size):
            if start:
                self.sleep(group_delay)
            results.extend(self.check(url) for url in urls[start : start + size])
        return results
