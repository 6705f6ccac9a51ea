"""Filename-based wallpaper naming.

Derives catalog names and theme tags from file names or object URLs using
device and theme patterns. No network access.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable

GENERIC_NAME = "Custom Wallpaper"


@dataclass
class NameSuggestion:
    """A suggested catalog name for one image."""

    suggested_name: str
    confidence: float
    reasoning: str
    category: str
    themes: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        return {
            "suggested_name": self.suggested_name,
            "confidence": self.confidence,
            "reasoning": self.reasoning,
            "category": self.category,
            "themes": self.themes,
        }


_SEP = r"[_\s-]*"


def _device(pattern: str, template: str, confidence: float) -> tuple[re.Pattern[str], Callable[[re.Match[str]], str], float]:
    regex = re.compile(pattern, re.IGNORECASE)
    return regex, lambda m: m.expand(template), confidence


# Most specific first.
DEVICE_PATTERNS = [
    _device(rf"iphone{_SEP}(\d+){_SEP}pro{_SEP}max", r"iPhone \1 Pro Max", 0.85),
    _device(rf"iphone{_SEP}(\d+){_SEP}pro", r"iPhone \1 Pro", 0.85),
    _device(rf"iphone{_SEP}(\d+){_SEP}mini", r"iPhone \1 Mini", 0.85),
    _device(rf"iphone{_SEP}(\d+)", r"iPhone \1", 0.8),
    _device(rf"samsung{_SEP}galaxy{_SEP}s(\d+){_SEP}ultra", r"Samsung Galaxy S\1 Ultra", 0.9),
    _device(rf"galaxy{_SEP}s(\d+){_SEP}ultra", r"Samsung Galaxy S\1 Ultra", 0.85),
    _device(rf"samsung{_SEP}galaxy{_SEP}s(\d+)", r"Samsung Galaxy S\1", 0.8),
    _device(rf"galaxy{_SEP}s(\d+)", r"Samsung Galaxy S\1", 0.75),
    _device(rf"(?:google{_SEP})?pixel{_SEP}(\d+){_SEP}pro", r"Google Pixel \1 Pro", 0.85),
    _device(rf"(?:google{_SEP})?pixel{_SEP}(\d+)", r"Google Pixel \1", 0.8),
]

CONTEXT_SUFFIXES = [
    (("amoled", "dark", "black"), "AMOLED"),
    (("4k", "ultra", "hd"), "4K"),
    (("minimal", "clean", "simple"), "Minimal"),
    (("abstract", "art"), "Abstract"),
    (("nature", "landscape"), "Nature"),
    (("neon", "cyber"), "Neon"),
    (("space", "cosmic"), "Space"),
]

THEME_PATTERNS = [
    (re.compile(r"abstract", re.I), "Abstract Art", 0.7),
    (re.compile(r"nature|landscape|mountain|forest|ocean|lake|river", re.I), "Nature Landscape", 0.8),
    (re.compile(r"minimal|clean|simple", re.I), "Minimal Design", 0.7),
    (re.compile(r"dark|black|amoled", re.I), "Dark Theme", 0.8),
    (re.compile(r"neon|cyber|tech|digital", re.I), "Neon Tech", 0.7),
    (re.compile(r"space|galaxy|cosmic|nebula|star", re.I), "Space Theme", 0.8),
    (re.compile(r"city|urban|building|skyline", re.I), "Urban Cityscape", 0.7),
    (re.compile(r"flower|floral|plant|botanical", re.I), "Floral Design", 0.7),
    (re.compile(r"geometric|pattern|shapes", re.I), "Geometric Pattern", 0.7),
    (re.compile(r"anime|manga|cartoon", re.I), "Anime Style", 0.7),
    (re.compile(r"gradient|colorful|rainbow", re.I), "Gradient Colors", 0.6),
    (re.compile(r"texture|material|fabric", re.I), "Textured Surface", 0.6),
]

THEME_KEYWORDS = {
    "dark": ("dark", "black", "amoled"),
    "minimal": ("minimal", "clean", "simple"),
    "nature": ("nature", "landscape", "mountain", "forest", "ocean"),
    "abstract": ("abstract", "art"),
    "tech": ("neon", "cyber", "tech", "digital"),
    "space": ("space", "galaxy", "cosmic", "star"),
    "urban": ("city", "urban", "building"),
    "device": ("iphone", "samsung", "pixel", "galaxy"),
}

_EXTENSION = re.compile(r"\.[^/.]+$")
_COMMON_SUFFIXES = re.compile(
    r"[_-]?(wallpaper|bg|background|img|image|pic|picture|art|design|hd|ultra|"
    r"wv|uw|wide|ultrawide|vertical|portrait|landscape)",
    re.IGNORECASE,
)


def _basename(url_or_filename: str) -> str:
    return url_or_filename.rstrip("/").rsplit("/", 1)[-1].split("?", 1)[0]


def extract_themes(name: str) -> list[str]:
    """Return theme tags whose keywords occur in ``name``."""
    lower = name.lower()
    return [
        theme
        for theme, keywords in THEME_KEYWORDS.items()
        if any(keyword in lower for keyword in keywords)
    ]


def extract_wallpaper_name(url_or_filename: str) -> str:
    """Turn an object URL or file name into a display name.

    ``https://cdn/x/mountain-lake-2160x3840-140741.jpg`` -> ``Mountain Lake``.
    """
    filename = _basename(url_or_filename)
    stem = _EXTENSION.sub("", filename)

    name = re.sub(r"\d{3,4}x\d{3,4}", "", stem)
    name = re.sub(r"[_-]?\d{1,4}[kK]", "", name)
    name = re.sub(r"[_-]?\d{1,4}[pP]", "", name)
    name = re.sub(r"[_-]?\d{6,}$", "", name)
    name = re.sub(r"[_-]?\d{1,2}$", "", name)
    name = _COMMON_SUFFIXES.sub("", name)
    name = re.sub(r"[_-]+", "-", name).strip("-")

    name = " ".join(word[:1].upper() + word[1:].lower() for word in name.split("-"))
    if not name.strip():
        return stem
    return name.strip()


def _clean_generic(filename: str) -> str:
    name = _EXTENSION.sub("", filename)
    name = re.sub(r"[_-]+", " ", name)
    name = re.sub(r"\b\d{3,4}x\d{3,4}\b", "", name)
    name = re.sub(r"\b\d+[kK]\b", "", name)
    name = re.sub(r"\b(wallpaper|bg|background|hd|4k|ultra|ytechb|techb)\b", "", name, flags=re.I)
    name = re.sub(r"\s+", " ", name).strip()
    return " ".join(word[:1].upper() + word[1:].lower() for word in name.split(" ") if word)


def suggest_name(url_or_filename: str) -> NameSuggestion:
    """Suggest a catalog name from device patterns, then themes, then cleaning."""
    filename = _basename(url_or_filename)
    lower = filename.lower()

    for regex, render, confidence in DEVICE_PATTERNS:
        match = regex.search(filename)
        if not match:
            continue
        device_name = render(match)
        for keywords, suffix in CONTEXT_SUFFIXES:
            if any(keyword in lower for keyword in keywords):
                device_name = f"{device_name} {suffix}"
                break
        return NameSuggestion(
            suggested_name=device_name,
            confidence=confidence,
            reasoning=f"Device pattern detected: {match.group(0)}",
            category="device",
            themes=extract_themes(device_name),
        )

    for regex, name, confidence in THEME_PATTERNS:
        if regex.search(filename):
            return NameSuggestion(
                suggested_name=name,
                confidence=confidence,
                reasoning="Theme pattern detected in filename",
                category="theme",
                themes=[name.lower().replace(" ", "_", 1)],
            )

    name = _clean_generic(filename)
    if len(name) < 3:
        name = GENERIC_NAME

    return NameSuggestion(
        suggested_name=name,
        confidence=0.4,
        reasoning="Generated from filename cleaning",
        category="generic",
        themes=extract_themes(name),
    )
