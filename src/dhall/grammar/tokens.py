"""Reserved words, operator spellings and character classes for Dhall.

The Dhall grammar is scannerless: there is no token stream.  This module
collects the fixed vocabulary the parser matches against, so that the
parser itself only encodes rule structure.
"""
from __future__ import annotations

from enum import Enum
from typing import Final

from dhall.ast.nodes import OperatorKind


class Keyword(Enum):
    """Words that can never be used as simple (unquoted) labels."""

    IF = "if"
    THEN = "then"
    ELSE = "else"
    LET = "let"
    IN = "in"
    AS = "as"
    USING = "using"
    MERGE = "merge"
    MISSING = "missing"
    INFINITY = "Infinity"
    NAN = "NaN"
    SOME = "Some"
    TO_MAP = "toMap"
    FORALL = "forall"


# Mapping from literal keyword text to its Keyword.
KEYWORDS: Final[dict[str, Keyword]] = {kw.value: kw for kw in Keyword}

# Identifiers resolved to ``Builtin`` nodes.  None of them may be used as a
# variable name unless quoted with backticks.
BUILTINS: Final[frozenset[str]] = frozenset({
    # Functions
    "Natural/fold",
    "Natural/build",
    "Natural/isZero",
    "Natural/even",
    "Natural/odd",
    "Natural/toInteger",
    "Natural/show",
    "Natural/subtract",
    "Integer/toDouble",
    "Integer/show",
    "Integer/negate",
    "Integer/clamp",
    "Double/show",
    "List/build",
    "List/fold",
    "List/length",
    "List/head",
    "List/last",
    "List/indexed",
    "List/reverse",
    "Optional/fold",
    "Optional/build",
    "Text/show",
    "Text/replace",
    # Types and constructors
    "Bool",
    "True",
    "False",
    "Optional",
    "None",
    "Natural",
    "Integer",
    "Double",
    "Text",
    "List",
    # Sorts
    "Type",
    "Kind",
    "Sort",
})

RESERVED: Final[frozenset[str]] = frozenset(KEYWORDS) | BUILTINS

# Operator spellings, longest first so that ``//\\`` wins over ``//`` and
# ``++`` over ``+``.  The boolean marks operators that must be followed by
# at least one whitespace chunk (``+1`` and ``?x`` are not operators).
OPERATOR_SPELLINGS: Final[tuple[tuple[str, OperatorKind, bool], ...]] = (
    ("//\\\\", OperatorKind.COMBINE_TYPES, False),
    ("//", OperatorKind.PREFER, False),
    ("/\\", OperatorKind.COMBINE, False),
    ("++", OperatorKind.TEXT_APPEND, False),
    ("||", OperatorKind.BOOL_OR, False),
    ("&&", OperatorKind.BOOL_AND, False),
    ("==", OperatorKind.BOOL_EQ, False),
    ("!=", OperatorKind.BOOL_NE, False),
    ("⩓", OperatorKind.COMBINE_TYPES, False),
    ("⫽", OperatorKind.PREFER, False),
    ("∧", OperatorKind.COMBINE, False),
    ("+", OperatorKind.NATURAL_PLUS, True),
    ("?", OperatorKind.IMPORT_ALT, True),
    ("#", OperatorKind.LIST_APPEND, False),
    ("*", OperatorKind.NATURAL_TIMES, False),
)

LAMBDA_SPELLINGS: Final[tuple[str, ...]] = ("λ", "\\")
FORALL_SPELLINGS: Final[tuple[str, ...]] = ("∀", "forall")
ARROW_SPELLINGS: Final[tuple[str, ...]] = ("→", "->")

# ---------------------------------------------------------------------------
# Character classes
# ---------------------------------------------------------------------------

ALPHA: Final[frozenset[str]] = frozenset(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"
)
DIGITS: Final[frozenset[str]] = frozenset("0123456789")
HEXDIGITS: Final[frozenset[str]] = frozenset("0123456789abcdefABCDEF")
ALPHANUM: Final[frozenset[str]] = ALPHA | DIGITS

LABEL_START: Final[frozenset[str]] = ALPHA | {"_"}
LABEL_CONTINUE: Final[frozenset[str]] = ALPHANUM | {"-", "/", "_"}

# Path characters: printable ASCII minus the delimiters
# space " # ( ) , / < > ? [ \ ] { }
PATH_CHARS: Final[frozenset[str]] = frozenset(
    chr(c) for c in range(0x21, 0x7F)
) - frozenset('"#(),/<>?[\\]{}')

# Escape table for double-quoted text literals.
TEXT_ESCAPES: Final[dict[str, str]] = {
    '"': '"',
    "$": "$",
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}

# Escape table for quoted POSIX environment variable names.
POSIX_ENV_ESCAPES: Final[dict[str, str]] = {
    '"': '"',
    "\\": "\\",
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
}


def is_valid_non_ascii(ch: str) -> bool:
    """Return True for non-ASCII characters allowed in source text."""
    code = ord(ch)
    return code >= 0x80 and not 0xD800 <= code <= 0xDFFF


def is_printable(ch: str) -> bool:
    """Return True for printable ASCII or allowed non-ASCII characters."""
    return "\x20" <= ch <= "\x7e" or is_valid_non_ascii(ch)
