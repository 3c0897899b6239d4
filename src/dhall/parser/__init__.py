"""Dhall Parser module.

Exports the ``Parser`` class, the ``parse`` and ``parse_prefix``
convenience functions, and the parse error types.
"""
from __future__ import annotations

from dhall.parser.errors import (
    DhallSyntaxError,
    EscapeError,
    IntegrityFormatError,
    NestingDepthError,
    TrailingInputError,
)
from dhall.parser.parser import DEFAULT_MAX_DEPTH, ParseResult, Parser, parse, parse_prefix

__all__ = [
    "DEFAULT_MAX_DEPTH",
    "Parser",
    "ParseResult",
    "parse",
    "parse_prefix",
    "DhallSyntaxError",
    "EscapeError",
    "IntegrityFormatError",
    "NestingDepthError",
    "TrailingInputError",
]
