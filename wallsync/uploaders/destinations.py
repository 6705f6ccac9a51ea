"""Destination directory derivation from a category selection.

The bucket layout is::

    wallpapers/<main-category>[/<subcategory>]
    wallpapers/devices/<brand>[/<series>]

Anything not in the table lands in the ``wallpapers`` root.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from wallsync.core.exceptions import DestinationError

ROOT_DIRECTORY = "wallpapers"
DEVICES_DIRECTORY = f"{ROOT_DIRECTORY}/devices"

MAIN_CATEGORIES: dict[str, list[str]] = {
    "AMOLED & Dark": [],
    "4K & Ultra HD": [],
    "Minimal & Aesthetic": ["Abstract", "Gradient", "Typography"],
    "Nature & Landscapes": ["Mountains", "Beaches", "Forests", "Sky & Clouds"],
    "Anime & Gaming": ["Anime Characters", "Gaming Characters", "Fantasy Worlds"],
}

BRAND_CATEGORIES = ["Samsung", "Apple", "OnePlus", "Xiaomi", "Google"]

DEFAULT_CONTENT_EXTENSION = ".jpg"
CONTENT_TYPE_EXTENSIONS = {
    "png": ".png",
    "webp": ".webp",
    "jpeg": ".jpg",
    "jpg": ".jpg",
}


def normalize_segment(name: str) -> str:
    """Turn a display name into a path segment.

    ``"Sky & Clouds"`` -> ``"sky-and-clouds"``.
    """
    segment = name.lower().replace("&", "and")
    segment = re.sub(r"[^a-z0-9]+", "-", segment)
    return segment.strip("-")


@dataclass(frozen=True)
class Destination:
    """One row of the destination table."""

    category: str
    kind: str
    directory: str
    subcategories: tuple[str, ...] = ()


def _build_table() -> dict[str, Destination]:
    table: dict[str, Destination] = {}
    for name, subs in MAIN_CATEGORIES.items():
        table[name] = Destination(
            category=name,
            kind="main",
            directory=f"{ROOT_DIRECTORY}/{normalize_segment(name)}",
            subcategories=tuple(subs),
        )
    for brand in BRAND_CATEGORIES:
        table[brand] = Destination(
            category=brand,
            kind="brand",
            directory=f"{DEVICES_DIRECTORY}/{normalize_segment(brand)}",
        )
    return table


DESTINATIONS = _build_table()


def list_destinations() -> list[Destination]:
    return list(DESTINATIONS.values())


def resolve_destination(category: str | None = None, subcategory: str | None = None) -> str:
    """Derive the bucket directory for a category selection.

    Unknown or empty categories fall back to the root. A subcategory (or a
    device series for brand categories) is appended normalised.
    """
    entry = DESTINATIONS.get((category or "").strip())
    if entry is None:
        return ROOT_DIRECTORY

    directory = entry.directory
    if subcategory:
        segment = normalize_segment(subcategory)
        if segment:
            directory = f"{directory}/{segment}"
    return directory


def require_directory(directory: str | None) -> str:
    """Return a usable directory or raise ``DestinationError``."""
    cleaned = (directory or "").strip().strip("/")
    if not cleaned:
        raise DestinationError()
    return cleaned


def extension_for(content_type: str) -> str:
    subtype = (content_type or "").lower().split("/")[-1]
    return CONTENT_TYPE_EXTENSIONS.get(subtype, DEFAULT_CONTENT_EXTENSION)


def clean_object_name(filename: str, content_type: str) -> str:
    """Predict the file name the presign relay will store.

    Special characters become ``_``, runs collapse, edges are trimmed and the
    result is lowercased. An extension derived from the content type is added
    when the name has none.
    """
    cleaned = re.sub(r"[^a-zA-Z0-9.-]", "_", filename)
    cleaned = re.sub(r"_{2,}", "_", cleaned).strip("_").lower() or "wallpaper"
    if "." not in cleaned:
        cleaned = f"{cleaned}{extension_for(content_type)}"
    return cleaned


def object_key(directory: str, filename: str, content_type: str) -> str:
    """Predict the object key ``<dir>/<cleaned name>``."""
    clean_dir = directory.strip("/") or ROOT_DIRECTORY
    return f"{clean_dir}/{clean_object_name(filename, content_type)}"
