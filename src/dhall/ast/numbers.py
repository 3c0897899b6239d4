"""Conversions between unbounded ``int`` values and digit strings.

``int(str)`` and ``str(int)`` refuse values beyond the interpreter's
integer string conversion limit (4300 digits by default), but Dhall
naturals and integers have no size bound.  These helpers work in slices
that each stay well under that limit.
"""
from __future__ import annotations

from typing import Final

_INT_SLICE: Final[int] = 1000
_SLICE_BASE: Final[int] = 10**_INT_SLICE


def digits_to_int(digits: str, base: int = 10) -> int:
    """Convert a digit string of any length to an ``int``."""
    value = 0
    for start in range(0, len(digits), _INT_SLICE):
        piece = digits[start : start + _INT_SLICE]
        value = value * base ** len(piece) + int(piece, base)
    return value


def int_to_digits(value: int) -> str:
    """Render an ``int`` of any size as a decimal string with optional ``-``."""
    if value < 0:
        return "-" + int_to_digits(-value)
    pieces: list[str] = []
    while value >= _SLICE_BASE:
        value, low = divmod(value, _SLICE_BASE)
        pieces.append(f"{low:0{_INT_SLICE}d}")
    pieces.append(str(value))
    return "".join(reversed(pieces))


def parse_signed(text: str) -> int:
    """Inverse of ``int_to_digits``; a leading ``+`` is accepted too."""
    if text[:1] in ("+", "-"):
        magnitude = digits_to_int(text[1:])
        return -magnitude if text[0] == "-" else magnitude
    return digits_to_int(text)
