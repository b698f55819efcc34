"""Reading input files and prompting the operator."""

from __future__ import annotations

import os
import re
import sys
from pathlib import Path
from typing import TextIO

from hzn_sdk.errors import FileIOError
from hzn_sdk.output import warning

DONT_SUBST_ENV_VARS_ENV_VAR = "HZN_DONT_SUBST_ENV_VARS"

_BLOCK_COMMENT = re.compile(rb"/\*.*?\*/", re.DOTALL)
_ENV_REFERENCE = re.compile(r"\$(?:\{([^}]*)\}|([A-Za-z0-9_]+))")


def read_stdin(stdin: TextIO | None = None) -> bytes:
    stream = stdin or sys.stdin
    try:
        data = stream.buffer.read() if hasattr(stream, "buffer") else stream.read()
    except OSError as exc:
        raise FileIOError(f"reading stdin failed: {exc}") from exc
    return data.encode("utf-8") if isinstance(data, str) else data


def read_file(file_path: str | Path, *, stdin: TextIO | None = None) -> bytes:
    """Read a file, or stdin when ``file_path`` is ``-``."""
    if str(file_path) == "-":
        return read_stdin(stdin)
    try:
        return Path(file_path).read_bytes()
    except OSError as exc:
        raise FileIOError(f"reading {file_path} failed: {exc}") from exc


def expand_env(text: str, *, stderr: TextIO | None = None) -> str:
    """Substitute ``$VAR`` and ``${VAR}``, warning about undefined variables."""

    def _lookup(match: re.Match) -> str:
        name = match.group(1) if match.group(1) is not None else match.group(2)
        value = os.getenv(name, "")
        if not value:
            warning(
                "environment variable '%s' is referenced in input file, "
                "but not defined in the environment.",
                name,
                stderr=stderr,
            )
        return value

    return _ENV_REFERENCE.sub(_lookup, text)


def read_json_file(
    file_path: str | Path,
    *,
    stdin: TextIO | None = None,
    stderr: TextIO | None = None,
) -> bytes:
    """Read JSON input with ``/* */`` comments removed and env vars substituted."""
    raw = _BLOCK_COMMENT.sub(b"", read_file(file_path, stdin=stdin))
    if os.getenv(DONT_SUBST_ENV_VARS_ENV_VAR) == "1":
        return raw
    return expand_env(raw.decode("utf-8"), stderr=stderr).encode("utf-8")


def confirm_remove(
    question: str,
    *,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> bool:
    out = stdout or sys.stdout
    print(f"{question} [y/N]: ", end="", file=out, flush=True)
    response = (stdin or sys.stdin).readline()
    if response.strip() != "y":
        print("Exiting.", file=out)
        return False
    return True
