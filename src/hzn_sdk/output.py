"""Diagnostic output: verbose tracing, warnings and fatal exits.

Everything goes to stderr so stdout stays clean for piping into jq.
"""

from __future__ import annotations

import re
import sys
from typing import NoReturn, TextIO

from hzn_sdk.errors import HznSDKError
from hzn_sdk.options import GlobalOptions

_SENSITIVE_FIELDS = (
    "password",
    "token",
    "secret",
    "authorization",
    "api_key",
    "auth",
)


def _line(msg: str, args: tuple) -> str:
    if args:
        msg = msg % args
    return msg.rstrip("\n")


def sanitize_error_text(value: str) -> str:
    redacted = value
    for field in _SENSITIVE_FIELDS:
        redacted = re.sub(
            rf"(?i)({field}\s*[=:]\s*)([^,\s]+)",
            r"\1[REDACTED]",
            redacted,
        )
    redacted = re.sub(r"(?i)([?&](?:secret|token|api_key)=)([^&\s]+)", r"\1[REDACTED]", redacted)
    redacted = re.sub(r"(?i)(Basic\s+)[A-Za-z0-9+/=]+", r"\1[REDACTED]", redacted)
    return redacted


def verbose(options: GlobalOptions, msg: str, *args, stderr: TextIO | None = None) -> None:
    if not options.verbose:
        return
    print(f"[verbose] {_line(msg, args)}", file=stderr or sys.stderr)


def warning(msg: str, *args, stderr: TextIO | None = None) -> None:
    print(f"Warning: {_line(msg, args)}", file=stderr or sys.stderr)


def fatal(exc: HznSDKError, *, stderr: TextIO | None = None) -> NoReturn:
    print(f"Error: {sanitize_error_text(str(exc))}", file=stderr or sys.stderr)
    raise SystemExit(exc.exit_code)
