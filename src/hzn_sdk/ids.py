"""Helpers for building exchange resource ids and routes."""

from __future__ import annotations

import re
from datetime import datetime

from hzn_sdk.errors import InputError

_SCHEME_PREFIX = re.compile(r"^[A-Za-z0-9+.-]*?://")
_TROUBLESOME_CHARS = re.compile(r"[$!*,;/?@&~=%]")


def add_slash(resource_id: str) -> str:
    """Prefix a non-empty id with ``/`` for use as the last element of a route."""
    if not resource_id:
        return resource_id
    return "/" + resource_id


def trim_org(org: str, resource_id: str) -> tuple[str, str]:
    """Split a leading ``<org>/`` off ``resource_id``.

    List output shows ids with the org prepended, but routes already carry the
    org earlier in the path. An org on the id wins over ``org``.
    """
    parts = resource_id.split("/")
    if len(parts) <= 1:
        return org, resource_id
    if len(parts) == 2:
        return parts[0], parts[1]
    raise InputError("the resource id can not contain more than 1 '/'")


def form_exchange_id(resource_id: str) -> str:
    return _TROUBLESOME_CHARS.sub("-", resource_id)


def form_exchange_id_with_spec_ref(spec_ref: str) -> str:
    return form_exchange_id(_SCHEME_PREFIX.sub("", spec_ref, count=1))


def form_exchange_id_for_service(url: str, version: str, arch: str) -> str:
    """Combine url, version and arch the same way the exchange forms service ids."""
    return f"{form_exchange_id_with_spec_ref(url)}_{version}_{arch}"


def convert_time(unix_seconds: int) -> str:
    if unix_seconds == 0:
        return ""
    return datetime.fromtimestamp(unix_seconds).astimezone().strftime("%Y-%m-%d %H:%M:%S %z %Z")
