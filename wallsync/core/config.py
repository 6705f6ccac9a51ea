"""Configuration for wallsync.

Profiles live in ``~/.config/wallsync/config.yaml``; each one points at one
admin backend (presign relay, optional delete relay, CDN). A profile can
also be built entirely from ``WALLSYNC_*`` environment variables. The relay
API key is only ever read from the environment.
"""

from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Optional

import yaml

from wallsync.core.exceptions import ConfigurationError, ProfileNotFoundError

logger = logging.getLogger(__name__)

# =============================================================================
# Locations and Defaults
# =============================================================================

CONFIG_DIR = Path.home() / ".config" / "wallsync"
CONFIG_FILE = CONFIG_DIR / "config.yaml"

ENV_PRESIGN_URL = "WALLSYNC_PRESIGN_URL"
ENV_DELETE_URL = "WALLSYNC_DELETE_URL"
ENV_CDN_DOMAIN = "WALLSYNC_CDN_DOMAIN"
ENV_API_KEY = "WALLSYNC_API_KEY"
ENV_PROFILE = "WALLSYNC_PROFILE"
ENV_VERIFY_SSL = "WALLSYNC_VERIFY_SSL"
ENV_TIMEOUT = "WALLSYNC_TIMEOUT"

DEFAULT_TIMEOUT = 30
DEFAULT_MAX_SIZE_MB = 15
DEFAULT_MAX_FILES = 100
DEFAULT_ACCEPT = "image/*"
DEFAULT_THUMBNAIL_PATTERN = "/fit-in/{w}x{h}/"

ENV_PROFILE_NAME = "default"
OUTPUT_FORMATS = ("table", "json")
TRUTHY = ("true", "1", "yes")


# =============================================================================
# Profile
# =============================================================================


@dataclass
class Profile:
    """Endpoints and upload limits for one admin backend."""

    presign_url: str
    delete_url: Optional[str] = None
    cdn_domain: Optional[str] = None
    origin_base_url: Optional[str] = None
    thumbnail_pattern: str = DEFAULT_THUMBNAIL_PATTERN
    verify_ssl: bool = True
    timeout: int = DEFAULT_TIMEOUT
    max_size_mb: int = DEFAULT_MAX_SIZE_MB
    max_files: int = DEFAULT_MAX_FILES
    accept: str = DEFAULT_ACCEPT

    @property
    def max_size_bytes(self) -> int:
        return self.max_size_mb * 1024 * 1024

    def to_dict(self) -> dict[str, Any]:
        """YAML form of the profile. Unset optional endpoints are left out."""
        return {k: v for k, v in asdict(self).items() if v is not None}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Profile":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning("Ignoring unknown profile keys: %s", ", ".join(unknown))
        values = {k: v for k, v in data.items() if k in known}
        values.setdefault("presign_url", "")
        return cls(**values)


def _profile_from_env() -> Optional[Profile]:
    presign_url = os.getenv(ENV_PRESIGN_URL)
    if not presign_url:
        return None

    raw_timeout = os.getenv(ENV_TIMEOUT)
    try:
        timeout = int(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT
    except ValueError as e:
        raise ConfigurationError(
            "Timeout must be an integer", field=ENV_TIMEOUT, value=raw_timeout
        ) from e

    return Profile(
        presign_url=presign_url,
        delete_url=os.getenv(ENV_DELETE_URL),
        cdn_domain=os.getenv(ENV_CDN_DOMAIN),
        verify_ssl=os.getenv(ENV_VERIFY_SSL, "true").lower() in TRUTHY,
        timeout=timeout,
    )


def get_api_key() -> Optional[str]:
    """Relay API key from ``WALLSYNC_API_KEY``, if set."""
    return os.getenv(ENV_API_KEY)


# =============================================================================
# Config
# =============================================================================


@dataclass
class Config:
    """All profiles plus the name of the one used by default."""

    default_profile: str = "default"
    output_format: str = "table"
    profiles: dict[str, Profile] = field(default_factory=dict)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Config":
        """Read the config file, then apply environment overrides.

        ``WALLSYNC_PRESIGN_URL`` replaces the ``default`` profile and
        ``WALLSYNC_PROFILE`` picks the default profile by name.

        Raises:
            ConfigurationError: If the file cannot be read or parsed.
        """
        path = config_path or CONFIG_FILE
        config = cls()

        if path.exists():
            try:
                data = yaml.safe_load(path.read_text()) or {}
            except (OSError, yaml.YAMLError) as e:
                raise ConfigurationError(f"Failed to load config {path}: {e}") from e
            if not isinstance(data, dict):
                raise ConfigurationError(f"Failed to load config {path}: expected a mapping")

            config.default_profile = data.get("default_profile", config.default_profile)
            config.output_format = data.get("output_format", config.output_format)
            if config.output_format not in OUTPUT_FORMATS:
                raise ConfigurationError(
                    f"output_format must be one of: {', '.join(OUTPUT_FORMATS)}",
                    field="output_format",
                    value=config.output_format,
                )
            for name, pdata in (data.get("profiles") or {}).items():
                config.profiles[name] = Profile.from_dict(pdata or {})

        env_profile = _profile_from_env()
        if env_profile is not None:
            config.profiles[ENV_PROFILE_NAME] = env_profile

        config.default_profile = os.getenv(ENV_PROFILE) or config.default_profile
        return config

    def save(self, config_path: Optional[Path] = None) -> None:
        path = config_path or CONFIG_FILE
        path.parent.mkdir(parents=True, exist_ok=True)

        document = {
            "default_profile": self.default_profile,
            "output_format": self.output_format,
            "profiles": {name: profile.to_dict() for name, profile in self.profiles.items()},
        }
        path.write_text(yaml.safe_dump(document, default_flow_style=False, sort_keys=False))

    def has_profile(self, name: str) -> bool:
        return name in self.profiles

    def get_profile(self, name: Optional[str] = None) -> Profile:
        """Named profile, or the default one when ``name`` is empty.

        Raises:
            ProfileNotFoundError: If no such profile is configured.
        """
        name = name or self.default_profile
        try:
            return self.profiles[name]
        except KeyError:
            raise ProfileNotFoundError(name) from None

    def add_profile(self, name: str, presign_url: str, **options: Any) -> Profile:
        """Create or replace profile ``name``. ``options`` are Profile fields."""
        self.profiles[name] = Profile(presign_url=presign_url, **options)
        return self.profiles[name]

    def remove_profile(self, name: str) -> bool:
        return self.profiles.pop(name, None) is not None

    def set_default_profile(self, name: str) -> None:
        if not self.has_profile(name):
            raise ProfileNotFoundError(name)
        self.default_profile = name
