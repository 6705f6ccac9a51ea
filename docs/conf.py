"""Sphinx build settings for the wallsync docs (Markdown pages via MyST)."""

import importlib.metadata

project = "wallsync"
author = "wallsync contributors"
copyright = "2026, wallsync contributors"
release = importlib.metadata.version("wallsync")
version = release.rsplit(".", 1)[0]

extensions = [
    "myst_parser",
    "sphinx.ext.autodoc",
    "sphinx.ext.napoleon",
    "sphinx.ext.intersphinx",
]
source_suffix = {".md": "markdown", ".rst": "restructuredtext"}
exclude_patterns = ["_build"]

# Docstrings are Google style; show annotations next to documented params only
napoleon_numpy_docstring = False
autodoc_member_order = "bysource"
autodoc_typehints = "description"
autodoc_typehints_description_target = "documented"

intersphinx_mapping = {
    "python": ("https://docs.python.org/3", None),
    "pydantic": ("https://docs.pydantic.dev/latest/", None),
}

html_theme = "furo"
html_title = f"wallsync {release}"
