"""HTTP status acceptance check shared by both REST clients."""

from __future__ import annotations

from typing import Sequence


def is_good_code(code: int, good_codes: Sequence[int]) -> bool:
    # An empty list of good codes means anything is ok.
    if not good_codes:
        return True
    return code in good_codes


def is_success_code(code: int, good_codes: Sequence[int]) -> bool:
    """Only the first good code marks a response whose body should be decoded."""
    if not good_codes:
        return True
    return code == good_codes[0]
