"""Process-wide command-line options."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class GlobalOptions:
    """Flags set once at start-up and handed to every REST call.

    ``dry_run`` short-circuits every PUT, POST and DELETE before any network
    I/O. ``using_api_key`` marks credentials that must not be prefixed with
    an org.
    """

    verbose: bool = False
    dry_run: bool = False
    using_api_key: bool = False


DEFAULT_OPTIONS = GlobalOptions()
