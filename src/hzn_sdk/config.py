"""Endpoint and environment configuration for the local agent and the exchange."""

from __future__ import annotations

import os
import platform
import re
import sys
from pathlib import Path
from typing import TextIO

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from hzn_sdk.errors import FileIOError, InputError, ParseError
from hzn_sdk.options import GlobalOptions
from hzn_sdk.output import verbose

HZN_API = "http://localhost"
HZN_API_MAC = "http://localhost:8081"
AGBOT_HZN_API = "http://localhost:8046"

ANAX_OVERWRITE_FILE = "/etc/default/horizon"
ANAX_CONFIG_FILE = "/etc/horizon/anax.json"
DEFAULT_EXCHANGE_URL = "https://alpha.edge-fabric.com/v1/"

HORIZON_URL_ENV_VAR = "HORIZON_URL"
EXCHANGE_URL_ENV_VAR = "HZN_EXCHANGE_URL"
USING_API_KEY_ENV_VAR = "USING_API_KEY"

_GO_ARCH_NAMES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv7l": "arm",
    "armv6l": "arm",
    "ppc64le": "ppc64le",
    "s390x": "s390x",
    "i386": "386",
    "i686": "386",
}


class EdgeConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    exchange_url: str = Field(default="", alias="ExchangeURL")


class AnaxConfig(BaseModel):
    """The part of the agent's anax.json this tool reads."""

    model_config = ConfigDict(populate_by_name=True)

    edge: EdgeConfig = Field(default_factory=EdgeConfig, alias="Edge")


def with_default_env_var(value: str | None, env_var: str) -> str:
    """Return ``value`` if it is non-blank, else the env var's value (possibly empty)."""
    if value:
        return value
    return os.getenv(env_var) or ""


def required_with_default_env_var(value: str | None, env_var: str, err_msg: str) -> str:
    resolved = with_default_env_var(value, env_var)
    if not resolved:
        raise InputError(err_msg)
    return resolved


def api_key_in_use(options: GlobalOptions) -> bool:
    return options.using_api_key or os.getenv(USING_API_KEY_ENV_VAR) == "1"


def get_horizon_url_base() -> str:
    override = os.getenv(HORIZON_URL_ENV_VAR)
    if override:
        return override
    if sys.platform == "darwin":
        return HZN_API_MAC
    return HZN_API


def get_env_var_from_file(filename: str | Path, key: str) -> str:
    """Look up ``key`` in a file of ``key=value`` lines.

    A missing file yields an empty string. Commented lines are skipped and
    surrounding whitespace and quotes are stripped from the value.
    """
    path = Path(filename)
    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except FileNotFoundError:
        return ""
    except OSError as exc:
        raise FileIOError(f"reading {path} failed: {exc}") from exc

    for line in lines:
        if key not in line:
            continue
        key_value = line.split("=")
        if "#" in key_value[0]:
            continue
        if len(key_value) > 1:
            return key_value[1].strip().strip("'").strip('"')
        return ""
    return ""


def get_anax_config(config_file: str | Path) -> AnaxConfig | None:
    path = Path(config_file)
    if not path.exists():
        return None
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise FileIOError(f"reading {path} failed: {exc}") from exc
    try:
        return AnaxConfig.model_validate_json(raw)
    except ValidationError as exc:
        raise ParseError(f"failed to unmarshal bytes from {path}: {exc}") from exc


def get_exchange_url_from_anax(
    options: GlobalOptions,
    *,
    overwrite_file: str | Path = ANAX_OVERWRITE_FILE,
    config_file: str | Path = ANAX_CONFIG_FILE,
    stderr: TextIO | None = None,
) -> str:
    """Read the exchange URL the agent on this node is configured with."""
    try:
        value = get_env_var_from_file(overwrite_file, EXCHANGE_URL_ENV_VAR)
    except FileIOError as exc:
        verbose(
            options,
            "Error getting %s from %s. %s",
            EXCHANGE_URL_ENV_VAR,
            overwrite_file,
            exc,
            stderr=stderr,
        )
    else:
        if value:
            return value

    try:
        anax_config = get_anax_config(config_file)
    except (FileIOError, ParseError) as exc:
        verbose(options, "Error getting ExchangeUrl from %s. %s", config_file, exc, stderr=stderr)
    else:
        if anax_config is not None:
            return anax_config.edge.exchange_url

    return ""


def get_exchange_url(
    options: GlobalOptions,
    *,
    overwrite_file: str | Path = ANAX_OVERWRITE_FILE,
    config_file: str | Path = ANAX_CONFIG_FILE,
    stderr: TextIO | None = None,
) -> str:
    exchange_url = os.getenv(EXCHANGE_URL_ENV_VAR, "")
    if not exchange_url:
        verbose(
            options,
            "%s is not set, get it from horizon agent configuration on the node.",
            EXCHANGE_URL_ENV_VAR,
            stderr=stderr,
        )
        exchange_url = get_exchange_url_from_anax(
            options,
            overwrite_file=overwrite_file,
            config_file=config_file,
            stderr=stderr,
        )
        if not exchange_url:
            verbose(
                options,
                "Could not get the exchange url from the horizon agent, using default value: %s",
                DEFAULT_EXCHANGE_URL,
                stderr=stderr,
            )
            exchange_url = DEFAULT_EXCHANGE_URL

    # The agent writes it with a trailing slash.
    exchange_url = exchange_url.rstrip("/")
    if api_key_in_use(options):
        exchange_url = re.sub(r"edgenode$", "edge", exchange_url)

    verbose(options, "The exchange url: %s", exchange_url, stderr=stderr)
    return exchange_url


def go_arch() -> str:
    machine = platform.machine().lower()
    return _GO_ARCH_NAMES.get(machine, machine)


def set_default_arch() -> str:
    arch = os.getenv("ARCH")
    if not arch:
        arch = go_arch()
        os.environ["ARCH"] = arch
    return arch
