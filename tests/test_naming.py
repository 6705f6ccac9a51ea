"""Tests for wallsync.services.naming."""

from __future__ import annotations

import pytest

from wallsync.services.naming import extract_themes, extract_wallpaper_name, suggest_name


class TestSuggestName:
    """Tests for suggest_name."""

    @pytest.mark.parametrize(
        "filename,expected,confidence",
        [
            ("iphone_15_pro_max_amoled.jpg", "iPhone 15 Pro Max AMOLED", 0.85),
            ("iPhone-14.png", "iPhone 14", 0.8),
            ("galaxy-s24-ultra-4k.png", "Samsung Galaxy S24 Ultra 4K", 0.85),
            ("samsung_galaxy_s23.jpg", "Samsung Galaxy S23", 0.8),
            ("pixel_9_pro.webp", "Google Pixel 9 Pro", 0.85),
        ],
    )
    def test_device_patterns(self, filename: str, expected: str, confidence: float):
        suggestion = suggest_name(filename)
        assert suggestion.suggested_name == expected
        assert suggestion.confidence == confidence
        assert suggestion.category == "device"

    def test_device_themes(self):
        assert suggest_name("iphone_15_pro_max_amoled.jpg").themes == ["dark", "device"]

    def test_theme_pattern(self):
        suggestion = suggest_name("mountain_lake_sunrise.jpg")
        assert suggestion.suggested_name == "Nature Landscape"
        assert suggestion.category == "theme"
        assert suggestion.themes == ["nature_landscape"]

    def test_accepts_urls(self):
        suggestion = suggest_name("https://cdn.example.com/wallpapers/pixel-8.jpg?v=2")
        assert suggestion.suggested_name == "Google Pixel 8"

    def test_generic_cleaning(self):
        suggestion = suggest_name("IMG_2024_0001.jpg")
        assert suggestion.suggested_name == "Img 2024 0001"
        assert suggestion.confidence == 0.4
        assert suggestion.category == "generic"

    def test_generic_fallback(self):
        assert suggest_name("4k_hd.jpg").suggested_name == "Custom Wallpaper"

    def test_to_dict(self):
        data = suggest_name("pixel_9.jpg").to_dict()
        assert data["suggested_name"] == "Google Pixel 9"
        assert set(data) == {"suggested_name", "confidence", "reasoning", "category", "themes"}


class TestExtractWallpaperName:
    """Tests for extract_wallpaper_name."""

    def test_strips_resolution_and_id(self):
        url = "https://cdn.example.com/x/mountain-lake-2160x3840-140741.jpg"
        assert extract_wallpaper_name(url) == "Mountain Lake"

    def test_strips_quality_and_suffix(self):
        assert extract_wallpaper_name("sunset_beach_4k_wallpaper.png") == "Sunset Beach"

    def test_falls_back_to_stem(self):
        assert extract_wallpaper_name("2160x3840.jpg") == "2160x3840"


class TestExtractThemes:
    """Tests for extract_themes."""

    def test_multiple(self):
        assert extract_themes("dark city skyline") == ["dark", "urban"]

    def test_none(self):
        assert extract_themes("untitled") == []
