"""Shared plumbing for wallsync commands.

Every command takes the same ``--profile/--output/--quiet/--verbose``
options, gets a ``Context`` that builds relay clients from the active
profile, and reports ``WallsyncError`` as a one-line error with exit 1.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from functools import wraps
from typing import Any, Callable, Optional, TypeVar

import click

from wallsync.core.config import Config, Profile, get_api_key
from wallsync.core.exceptions import ConfigurationError, ProfileNotFoundError, WallsyncError
from wallsync.core.logging import setup_logging
from wallsync.core.output import (
    ConsoleNotifier,
    NotificationSink,
    OutputFormat,
    RecordingNotifier,
    print_error,
)
from wallsync.services.delete import DeleteClient
from wallsync.services.presign import PresignClient
from wallsync.services.storage import ObjectStoreClient

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

EXIT_FAILURE = 1


# =============================================================================
# Context Object
# =============================================================================


@dataclass
class Context:
    """Per-invocation state: loaded config, chosen profile and output mode."""

    config: Optional[Config] = None
    profile_name: Optional[str] = None
    output_format: OutputFormat = OutputFormat.TABLE
    quiet: bool = False
    verbose: bool = False
    notifier: Optional[NotificationSink] = field(default=None, repr=False)

    def get_profile(self) -> Profile:
        """The profile named by ``--profile``, or the configured default.

        Raises:
            ConfigurationError: If that profile does not exist.
        """
        if self.config is None:
            self.config = Config.load()

        try:
            return self.config.get_profile(self.profile_name)
        except ProfileNotFoundError as e:
            raise ConfigurationError(
                f"Profile '{e.profile}' not found. "
                "Run 'wallsync config init' or set WALLSYNC_PRESIGN_URL."
            ) from e

    def get_notifier(self) -> NotificationSink:
        # JSON mode collects notices into the result document
        if self.notifier is None:
            json_mode = self.output_format is OutputFormat.JSON
            self.notifier = RecordingNotifier() if json_mode else ConsoleNotifier()
        return self.notifier

    def _relay_options(self, profile: Profile) -> dict[str, Any]:
        return {
            "api_key": get_api_key(),
            "timeout": profile.timeout,
            "verify_ssl": profile.verify_ssl,
        }

    def get_presign_client(self) -> PresignClient:
        profile = self.get_profile()
        return PresignClient(endpoint=profile.presign_url, **self._relay_options(profile))

    def get_store(self) -> ObjectStoreClient:
        profile = self.get_profile()
        return ObjectStoreClient(timeout=profile.timeout, verify_ssl=profile.verify_ssl)

    def get_delete_client(self) -> DeleteClient:
        """Client for the profile's delete relay.

        Raises:
            ConfigurationError: If the profile has no ``delete_url``.
        """
        profile = self.get_profile()
        if not profile.delete_url:
            raise ConfigurationError(
                "No delete relay configured for this profile", field="delete_url"
            )
        return DeleteClient(endpoint=profile.delete_url, **self._relay_options(profile))


pass_context = click.make_pass_decorator(Context, ensure=True)


# =============================================================================
# Decorators
# =============================================================================


def global_options(f: F) -> F:
    """Attach the options every command shares and pass ``Context`` first."""

    @click.option("--profile", "-p", envvar="WALLSYNC_PROFILE", help="Config profile to use")
    @click.option(
        "--output",
        "-o",
        "output_format",
        type=click.Choice(["json", "table"]),
        default=None,
        help="Output format [default: output_format from config, else table]",
    )
    @click.option("--quiet", "-q", is_flag=True, help="Print only keys or URLs")
    @click.option("--verbose", "-v", is_flag=True, help="Debug logging on stderr")
    @pass_context
    @wraps(f)
    def wrapper(
        ctx: Context,
        profile: Optional[str],
        output_format: Optional[str],
        quiet: bool,
        verbose: bool,
        *args: Any,
        **kwargs: Any,
    ) -> Any:
        setup_logging(quiet=quiet, verbose=verbose)

        ctx.profile_name = profile
        ctx.quiet = quiet
        ctx.verbose = verbose
        try:
            ctx.config = Config.load()
        except ConfigurationError as e:
            raise click.ClickException(str(e)) from e
        ctx.output_format = OutputFormat.from_string(output_format or ctx.config.output_format)

        return f(ctx, *args, **kwargs)

    return wrapper  # type: ignore


def handle_errors(f: F) -> F:
    """Report wallsync errors on stderr and exit 1; let click handle its own."""

    @wraps(f)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return f(*args, **kwargs)
        except (click.ClickException, click.Abort):
            raise
        except WallsyncError as e:
            print_error(str(e))
        except Exception as e:
            logger.debug("Unhandled error in %s", f.__name__, exc_info=True)
            print_error(f"Unexpected error: {e}")
        sys.exit(EXIT_FAILURE)

    return wrapper  # type: ignore
