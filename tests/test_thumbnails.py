"""Tests for wallsync.uploaders.thumbnails."""

from __future__ import annotations

from collections.abc import Callable

import httpx
import pytest

from wallsync.core.exceptions import ConfigurationError
from wallsync.core.output import NotificationLevel, RecordingNotifier
from wallsync.uploaders.thumbnails import (
    ThumbnailChecker,
    ThumbnailStatus,
    cache_busted,
    origin_url,
    reduced_variant,
    strip_fit_in,
    thumbnail_url,
    with_fit_in,
)

PREVIEW = "https://cdn.example.com/fit-in/360x640/wallpapers/a.jpg"
UNSAFE = "/unsafe/{w}x{h}/"
UNSAFE_PREVIEW = "https://cdn.example.com/unsafe/360x640/wallpapers/a.jpg"


# =============================================================================
# URL helpers
# =============================================================================


class TestUrlHelpers:
    """Tests for the URL rewriting helpers."""

    def test_thumbnail_url(self):
        template = "https://cdn.example.com/fit-in/{w}x{h}/wallpapers/a.jpg"
        assert thumbnail_url(template) == PREVIEW

    def test_strip_fit_in(self):
        assert strip_fit_in(PREVIEW) == "https://cdn.example.com/wallpapers/a.jpg"

    def test_reduced_halves_dimensions(self):
        assert reduced_variant(PREVIEW) == "https://cdn.example.com/fit-in/180x320/wallpapers/a.jpg"

    def test_reduced_adds_default_segment(self):
        assert (
            reduced_variant("https://cdn.example.com/wallpapers/a.jpg")
            == "https://cdn.example.com/fit-in/180x320/wallpapers/a.jpg"
        )

    def test_cache_busted(self):
        assert cache_busted(PREVIEW, "42") == f"{PREVIEW}?_cb=42"
        assert cache_busted(f"{PREVIEW}?v=1", "42") == f"{PREVIEW}?v=1&_cb=42"

    def test_cache_bust_token_defaults_to_clock(self):
        assert "?_cb=" in cache_busted(PREVIEW)

    def test_origin_url(self):
        assert (
            origin_url(PREVIEW, "cdn.example.com", "https://bucket.example.com/")
            == "https://bucket.example.com/wallpapers/a.jpg"
        )

    def test_origin_requires_base(self):
        assert origin_url(PREVIEW, "cdn.example.com", None) is None

    def test_origin_only_for_cdn_urls(self):
        assert origin_url("https://other.example.com/a.jpg", "cdn.example.com", "https://b") is None

    def test_custom_pattern_reduced(self):
        assert (
            reduced_variant(UNSAFE_PREVIEW, UNSAFE)
            == "https://cdn.example.com/unsafe/180x320/wallpapers/a.jpg"
        )

    def test_custom_pattern_strip_and_origin(self):
        assert strip_fit_in(UNSAFE_PREVIEW, UNSAFE) == "https://cdn.example.com/wallpapers/a.jpg"
        assert (
            origin_url(UNSAFE_PREVIEW, "cdn.example.com", "https://bucket.example.com", UNSAFE)
            == "https://bucket.example.com/wallpapers/a.jpg"
        )

    def test_custom_pattern_ignores_default_segment(self):
        assert strip_fit_in(PREVIEW, UNSAFE) == PREVIEW
        assert (
            with_fit_in("https://cdn.example.com/a.jpg", 90, 160, UNSAFE)
            == "https://cdn.example.com/unsafe/90x160/a.jpg"
        )

    @pytest.mark.parametrize("pattern", ["fit-in/{w}x{h}/", "/fit-in/{w}/", "/fit-in/{w}x{h}"])
    def test_malformed_pattern(self, pattern: str):
        with pytest.raises(ConfigurationError):
            strip_fit_in(PREVIEW, pattern)


# =============================================================================
# Checker
# =============================================================================


def _checker(
    notifier: RecordingNotifier,
    ok: Callable[[httpx.Request], bool],
    seen: list[str],
    sleeps: list[float],
    **kwargs,
) -> ThumbnailChecker:
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200 if ok(request) else 429)

    return ThumbnailChecker(
        notifier,
        transport=httpx.MockTransport(handler),
        sleep=sleeps.append,
        **kwargs,
    )


class TestThumbnailChecker:
    """Tests for the fallback ladder."""

    def test_loads_first_time(self, notifier: RecordingNotifier):
        seen: list[str] = []
        sleeps: list[float] = []
        with _checker(notifier, lambda r: True, seen, sleeps) as checker:
            result = checker.check(PREVIEW)

        assert result.status is ThumbnailStatus.LOADED
        assert result.display_url == PREVIEW
        assert result.attempts == 1
        assert sleeps == []

    def test_recovers_on_reduced_variant(self, notifier: RecordingNotifier):
        seen: list[str] = []
        sleeps: list[float] = []
        with _checker(notifier, lambda r: "180x320" in str(r.url), seen, sleeps) as checker:
            result = checker.check(PREVIEW)

        assert result.status is ThumbnailStatus.LOADED
        assert result.strategy == "reduced"
        assert result.attempts == 3
        assert seen == [PREVIEW, PREVIEW, "https://cdn.example.com/fit-in/180x320/wallpapers/a.jpg"]
        assert sleeps == [0.5, 0.5]
        assert notifier.notifications == []

    def test_origin_fallback(self, notifier: RecordingNotifier):
        seen: list[str] = []
        sleeps: list[float] = []
        checker = _checker(
            notifier,
            lambda r: r.url.host == "bucket.example.com",
            seen,
            sleeps,
            cdn_domain="cdn.example.com",
            origin_base_url="https://bucket.example.com",
        )

        result = checker.check(PREVIEW)

        assert result.status is ThumbnailStatus.LOADED
        assert result.strategy == "origin"
        assert result.display_url == "https://bucket.example.com/wallpapers/a.jpg"
        assert result.attempts == 4
        assert seen[3] == "https://bucket.example.com/wallpapers/a.jpg"
        assert not any("_cb=" in url for url in seen)

    def test_origin_counts_toward_retry_cap(self, notifier: RecordingNotifier):
        seen: list[str] = []
        sleeps: list[float] = []
        checker = _checker(
            notifier,
            lambda r: False,
            seen,
            sleeps,
            cdn_domain="cdn.example.com",
            origin_base_url="https://bucket.example.com",
        )

        result = checker.check(PREVIEW)

        assert result.status is ThumbnailStatus.FAILED
        assert len(seen) == 4
        assert sleeps == [0.5, 0.5, 0.5]
        assert len(notifier.messages(NotificationLevel.ERROR)) == 1

    def test_placeholder_after_exhaustion(self, notifier: RecordingNotifier):
        seen: list[str] = []
        sleeps: list[float] = []
        checker = _checker(notifier, lambda r: False, seen, sleeps)

        result = checker.check(PREVIEW)

        assert result.status is ThumbnailStatus.FAILED
        assert result.display_url == "placeholder://failed-to-load"
        assert result.attempts == 4
        assert result.error == "HTTP 429"
        assert len(notifier.messages(NotificationLevel.ERROR)) == 1
        assert PREVIEW in notifier.messages()[0]

    def test_network_errors_follow_ladder(self, notifier: RecordingNotifier):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused")

        checker = ThumbnailChecker(
            notifier, transport=httpx.MockTransport(handler), sleep=lambda _: None
        )
        result = checker.check(PREVIEW)

        assert result.status is ThumbnailStatus.FAILED
        assert result.error.startswith("ConnectError")

    def test_ladder_order(self, notifier: RecordingNotifier):
        checker = ThumbnailChecker(
            notifier,
            cdn_domain="cdn.example.com",
            origin_base_url="https://bucket.example.com",
        )
        assert [s for s, _ in checker.ladder(PREVIEW)] == ["retry", "reduced", "origin"]
        checker.close()

    def test_ladder_without_origin(self, notifier: RecordingNotifier):
        with ThumbnailChecker(notifier, cdn_domain="cdn.example.com") as checker:
            assert [s for s, _ in checker.ladder(PREVIEW)] == ["retry", "reduced", "cache-bust"]

    def test_custom_pattern_recovers_on_reduced(self, notifier: RecordingNotifier):
        seen: list[str] = []
        sleeps: list[float] = []
        checker = _checker(
            notifier, lambda r: "/unsafe/180x320/" in str(r.url), seen, sleeps, thumbnail_pattern=UNSAFE
        )

        result = checker.check(UNSAFE_PREVIEW)

        assert result.strategy == "reduced"
        assert result.display_url == "https://cdn.example.com/unsafe/180x320/wallpapers/a.jpg"

    def test_checker_rejects_malformed_pattern(self, notifier: RecordingNotifier):
        with pytest.raises(ConfigurationError):
            ThumbnailChecker(notifier, thumbnail_pattern="/fit-in/")

    def test_check_all_staggers_groups(self, notifier: RecordingNotifier):
        seen: list[str] = []
        sleeps: list[float] = []
        checker = _checker(notifier, lambda r: True, seen, sleeps)
        urls = [f"https://cdn.example.com/fit-in/360x640/w/{i}.jpg" for i in range(7)]

        results = checker.check_all(urls)

        assert len(results) == 7
        assert sleeps == [0.8, 0.8]
        assert seen == urls

    @pytest.mark.parametrize("group_size", [0, 1])
    def test_check_all_group_size_floor(self, notifier: RecordingNotifier, group_size: int):
        sleeps: list[float] = []
        checker = _checker(notifier, lambda r: True, [], sleeps)
        checker.check_all(["https://cdn.example.com/a.jpg", "https://cdn.example.com/b.jpg"], group_size, 0.1)
        assert sleeps == [0.1]
