"""Process-terminating entry points for command implementations.

Each function wraps one client verb: on any SDK error it prints
``Error: <message>`` to stderr and exits with that error's exit code. The
only exception is :func:`horizon_get` with ``quiet=True``, which hands the
error back in the result so callers can probe whether the agent is up.
"""

from __future__ import annotations

from typing import Any, Sequence, TextIO

from hzn_sdk.client import APIResult, LocalAgentClient, RegistryClient
from hzn_sdk.decode import ResponseTarget
from hzn_sdk.errors import HznSDKError, StatusError
from hzn_sdk.options import DEFAULT_OPTIONS, GlobalOptions
from hzn_sdk.output import fatal


def horizon_get(
    url_suffix: str,
    good_codes: Sequence[int],
    target: ResponseTarget | None = None,
    quiet: bool = False,
    *,
    options: GlobalOptions = DEFAULT_OPTIONS,
    stderr: TextIO | None = None,
) -> APIResult:
    client = LocalAgentClient(options=options, stderr=stderr)
    try:
        return client.get(url_suffix, good_codes, target)
    except HznSDKError as exc:
        if quiet:
            code = exc.status_code if isinstance(exc, StatusError) else 0
            return APIResult(code=code, error=exc)
        fatal(exc, stderr=stderr)


def horizon_put_post(
    method: str,
    url_suffix: str,
    good_codes: Sequence[int],
    body: Any,
    *,
    options: GlobalOptions = DEFAULT_OPTIONS,
    stderr: TextIO | None = None,
) -> APIResult:
    client = LocalAgentClient(options=options, stderr=stderr)
    try:
        return client.put_post(method, url_suffix, good_codes, body)
    except HznSDKError as exc:
        fatal(exc, stderr=stderr)


def horizon_delete(
    url_suffix: str,
    good_codes: Sequence[int],
    *,
    options: GlobalOptions = DEFAULT_OPTIONS,
    stderr: TextIO | None = None,
) -> int:
    client = LocalAgentClient(options=options, stderr=stderr)
    try:
        return client.delete(url_suffix, good_codes).code
    except HznSDKError as exc:
        fatal(exc, stderr=stderr)


def exchange_get(
    url_base: str,
    url_suffix: str,
    credentials: str,
    good_codes: Sequence[int],
    target: ResponseTarget | None = None,
    *,
    options: GlobalOptions = DEFAULT_OPTIONS,
    stderr: TextIO | None = None,
) -> APIResult:
    client = RegistryClient(base_url=url_base, options=options, stderr=stderr)
    try:
        return client.get(url_suffix, credentials, good_codes, target)
    except HznSDKError as exc:
        fatal(exc, stderr=stderr)


def exchange_put_post(
    method: str,
    url_base: str,
    url_suffix: str,
    credentials: str,
    good_codes: Sequence[int],
    body: Any,
    *,
    options: GlobalOptions = DEFAULT_OPTIONS,
    stderr: TextIO | None = None,
) -> int:
    client = RegistryClient(base_url=url_base, options=options, stderr=stderr)
    try:
        return client.put_post(method, url_suffix, credentials, good_codes, body).code
    except HznSDKError as exc:
        fatal(exc, stderr=stderr)


def exchange_delete(
    url_base: str,
    url_suffix: str,
    credentials: str,
    good_codes: Sequence[int],
    *,
    options: GlobalOptions = DEFAULT_OPTIONS,
    stderr: TextIO | None = None,
) -> int:
    client = RegistryClient(base_url=url_base, options=options, stderr=stderr)
    try:
        return client.delete(url_suffix, credentials, good_codes).code
    except HznSDKError as exc:
        fatal(exc, stderr=stderr)
