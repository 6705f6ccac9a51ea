"""``wallsync config``: create, inspect and switch backend profiles."""

from __future__ import annotations

from typing import Any, NoReturn, Optional

import click

from wallsync.core.config import (
    CONFIG_FILE,
    DEFAULT_ACCEPT,
    DEFAULT_MAX_FILES,
    DEFAULT_MAX_SIZE_MB,
    DEFAULT_TIMEOUT,
    Config,
    Profile,
)
from wallsync.core.exceptions import WallsyncError
from wallsync.core.output import OutputFormat, print_error, print_key_value, print_output, print_success
from wallsync.core.validation import validate_url


def _fail(message: str) -> NoReturn:
    print_error(message)
    raise SystemExit(1)


def _load() -> Config:
    try:
        return Config.load(CONFIG_FILE)
    except WallsyncError as e:
        _fail(f"Failed to load config: {e}")


def _load_existing() -> Config:
    cfg = _load()
    if not cfg.profiles:
        _fail("No configuration found. Run 'wallsync config init' first.")
    return cfg


def _url_or_none(url: Optional[str]) -> Optional[str]:
    if url is None:
        return None
    try:
        return validate_url(url)
    except WallsyncError as e:
        _fail(str(e))


def _profile_summary(profile: Profile) -> dict[str, Any]:
    return {
        "presign_url": profile.presign_url,
        "delete_url": profile.delete_url or "-",
        "cdn_domain": profile.cdn_domain or "-",
        "verify_ssl": profile.verify_ssl,
        "timeout": f"{profile.timeout}s",
        "max_size": f"{profile.max_size_mb}MB",
        "max_files": profile.max_files,
        "accept": profile.accept,
    }


@click.group()
def config() -> None:
    """Manage backend profiles in ~/.config/wallsync/config.yaml."""


@config.command("init")
@click.option("--presign-url", prompt="Presign relay URL", help="Presign relay endpoint")
@click.option("--delete-url", default=None, help="Delete relay endpoint")
@click.option("--cdn-domain", default=None, help="CDN host serving public URLs")
@click.option("--origin-base-url", default=None, help="Direct (non-CDN) bucket URL")
@click.option("--profile", default="default", help="Profile name")
@click.option("--force", is_flag=True, help="Replace the profile if it exists")
def config_init(
    presign_url: str,
    delete_url: Optional[str],
    cdn_domain: Optional[str],
    origin_base_url: Optional[str],
    profile: str,
    force: bool,
) -> None:
    """Write a profile, creating the config file if needed.

    The relay API key is read from WALLSYNC_API_KEY and never saved.

    Example:
        wallsync config init --presign-url https://relay.example.com/functions/v1/s3-presign-upload
    """
    endpoints = {
        "presign_url": _url_or_none(presign_url),
        "delete_url": _url_or_none(delete_url),
        "origin_base_url": _url_or_none(origin_base_url),
    }

    cfg = _load() if CONFIG_FILE.exists() else Config()
    if cfg.has_profile(profile) and not force:
        _fail(f"Profile '{profile}' already exists. Use --force to overwrite.")

    cfg.add_profile(profile, cdn_domain=cdn_domain, **endpoints)
    if len(cfg.profiles) == 1:
        cfg.default_profile = profile
    cfg.save(CONFIG_FILE)

    print_success(f"Configuration saved to {CONFIG_FILE}")
    print_key_value(
        {
            "profile": profile,
            "presign_url": endpoints["presign_url"],
            "delete_url": delete_url or "-",
            "cdn_domain": cdn_domain or "-",
        }
    )


@config.command("show")
@click.option("--output", "-o", type=click.Choice(["json", "table"]), default="table")
def config_show(output: str) -> None:
    """Print every profile and which one is the default."""
    cfg = _load_existing()

    overview: dict[str, Any] = {
        "config_file": str(CONFIG_FILE),
        "default_profile": cfg.default_profile,
        "output_format": cfg.output_format,
        "profiles": list(cfg.profiles),
    }

    if output == "json":
        overview["profile_details"] = {n: p.to_dict() for n, p in cfg.profiles.items()}
        print_output(overview, format=OutputFormat.JSON)
        return

    print_key_value(overview, title="Configuration")
    for name, profile in cfg.profiles.items():
        click.echo()
        default = " (default)" if name == cfg.default_profile else ""
        click.echo(f"Profile: {name}{default}")
        print_key_value(_profile_summary(profile))


@config.command("use-context")
@click.argument("profile")
def config_use_context(profile: str) -> None:
    """Make PROFILE the default.

    Example:
        wallsync config use-context staging
    """
    cfg = _load()
    if not cfg.has_profile(profile):
        print_error(f"Profile '{profile}' not found.")
        click.echo(f"Available profiles: {', '.join(cfg.profiles)}")
        raise SystemExit(1)

    cfg.set_default_profile(profile)
    cfg.save(CONFIG_FILE)
    print_success(f"Switched to profile '{profile}'")


@config.command("current-context")
def config_current_context() -> None:
    """Print the default profile name."""
    click.echo(_load_existing().default_profile)


@config.command("add-profile")
@click.argument("name")
@click.option("--presign-url", required=True, help="Presign relay endpoint")
@click.option("--delete-url", default=None, help="Delete relay endpoint")
@click.option("--cdn-domain", default=None, help="CDN host serving public URLs")
@click.option("--origin-base-url", default=None, help="Direct (non-CDN) bucket URL")
@click.option("--timeout", type=int, default=DEFAULT_TIMEOUT, help="Request timeout in seconds")
@click.option("--max-size-mb", type=int, default=DEFAULT_MAX_SIZE_MB, help="Per-file size limit")
@click.option("--max-files", type=int, default=DEFAULT_MAX_FILES, help="Files per selection")
@click.option("--accept", default=DEFAULT_ACCEPT, help="Accepted MIME patterns")
@click.option("--no-verify-ssl", is_flag=True, help="Disable SSL verification")
def config_add_profile(name: str, no_verify_ssl: bool, **options: Any) -> None:
    """Add profile NAME next to the existing ones.

    Example:
        wallsync config add-profile staging --presign-url https://staging.example.com/presign
    """
    for key in ("presign_url", "delete_url", "origin_base_url"):
        options[key] = _url_or_none(options[key])

    cfg = _load()
    if cfg.has_profile(name):
        _fail(f"Profile '{name}' already exists.")

    cfg.add_profile(name, verify_ssl=not no_verify_ssl, **options)
    cfg.save(CONFIG_FILE)
    print_success(f"Profile '{name}' added")


@config.command("remove-profile")
@click.argument("name")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
def config_remove_profile(name: str, yes: bool) -> None:
    """Delete profile NAME. The default profile cannot be removed.

    Example:
        wallsync config remove-profile staging
    """
    cfg = _load()
    if not cfg.has_profile(name):
        _fail(f"Profile '{name}' not found.")
    if name == cfg.default_profile:
        _fail("Cannot remove the default profile. Switch to another profile first.")

    if not yes:
        click.confirm(f"Remove profile '{name}'?", abort=True)

    cfg.remove_profile(name)
    cfg.save(CONFIG_FILE)
    print_success(f"Profile '{name}' removed")
