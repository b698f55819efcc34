"""Signing key file locations."""

from __future__ import annotations

from pathlib import Path

from hzn_sdk.errors import GeneralError

# Relative to the user's home directory.
DEFAULT_PRIVATE_KEY_FILE = ".hzn/keys/service.private.key"
DEFAULT_PUBLIC_KEY_FILE = ".hzn/keys/service.public.pem"


def get_default_signing_key_file(is_public: bool) -> Path:
    try:
        home = Path.home()
    except RuntimeError as exc:
        raise GeneralError(f"Failed to get current os user. {exc}") from exc
    if is_public:
        return home / DEFAULT_PUBLIC_KEY_FILE
    return home / DEFAULT_PRIVATE_KEY_FILE


def verify_signing_key_input(key_file: str | Path | None, is_public: bool) -> Path:
    """Resolve the key file (default location when empty) and check that it exists."""
    path = Path(key_file) if key_file else get_default_signing_key_file(is_public)
    path = path.absolute()
    if not path.exists():
        raise GeneralError(f"{path} does not exist. Please create the signing key.")
    return path
