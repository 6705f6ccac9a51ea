"""Preview check command for wallsync."""

from __future__ import annotations

from typing import Optional

import click

from wallsync.cli.common import Context, global_options, handle_errors
from wallsync.core.config import Config
from wallsync.core.output import print_output
from wallsync.uploaders.constants import (
    THUMBNAIL_GROUP_DELAY,
    THUMBNAIL_GROUP_SIZE,
    THUMBNAIL_PATTERN,
)
from wallsync.uploaders.thumbnails import ThumbnailChecker, ThumbnailStatus, thumbnail_url


def _size(value: Optional[str]) -> Optional[tuple[int, int]]:
    if not value:
        return None
    try:
        width, height = (int(part) for part in value.lower().split("x", 1))
    except ValueError:
        raise click.BadParameter(f"Expected WIDTHxHEIGHT, got {value!r}", param_hint="--size")
    return width, height


@click.command("thumbs")
@click.argument("urls", nargs=-1, required=True)
@click.option("--size", help="Fill {w}x{h} templates with this size, e.g. 360x640")
@click.option("--group-size", type=int, default=THUMBNAIL_GROUP_SIZE, show_default=True)
@click.option("--group-delay", type=float, default=THUMBNAIL_GROUP_DELAY, show_default=True)
@global_options
@handle_errors
def thumbs(
    ctx: Context,
    urls: tuple[str, ...],
    size: Optional[str],
    group_size: int,
    group_delay: float,
) -> None:
    """Check that CDN previews load, with fallbacks.

    URLs may be thumbnail templates containing {w} and {h}.

    Example:
        wallsync thumbs "https://cdn.example.com/fit-in/{w}x{h}/wallpapers/a.jpg"
    """
    dims = _size(size)
    resolved = [
        thumbnail_url(u, *dims) if dims else thumbnail_url(u) for u in urls
    ]

    config = ctx.config or Config.load()
    profile = config.profiles.get(ctx.profile_name or config.default_profile)

    with ThumbnailChecker(
        ctx.get_notifier(),
        cdn_domain=profile.cdn_domain if profile else None,
        origin_base_url=profile.origin_base_url if profile else None,
        thumbnail_pattern=profile.thumbnail_pattern if profile else THUMBNAIL_PATTERN,
        timeout=profile.timeout if profile else 10,
        verify_ssl=profile.verify_ssl if profile else True,
    ) as checker:
        results = checker.check_all(resolved, group_size=group_size, group_delay=group_delay)

    print_output(
        [r.to_dict() for r in results],
        format=ctx.output_format,
        columns=["url", "status", "strategy", "attempts", "display_url"],
        title="Previews",
        quiet=ctx.quiet,
        id_field="display_url",
    )

    if any(r.status is ThumbnailStatus.FAILED for r in results):
        raise SystemExit(1)
