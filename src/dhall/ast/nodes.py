"""AST node definitions for the Dhall configuration language.

Every node produced by the Dhall parser is a frozen dataclass so that
AST trees are immutable and hashable.  The ``Expression`` union type
covers all expression variants; downstream code should use
``isinstance`` checks (or ``match`` statements) to dispatch.

Nodes are purely syntactic: variable indices are recorded verbatim,
imports are described but never resolved, and record or union labels
are not checked for uniqueness.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Union


# ---------------------------------------------------------------------------
# Source location
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Location:
    """A position within the source text.

    Parameters
    ----------
    offset:
        0-based codepoint offset.
    line:
        1-based line number.
    column:
        1-based column number.
    """

    offset: int
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


# ---------------------------------------------------------------------------
# Enums shared across node types
# ---------------------------------------------------------------------------


class OperatorKind(Enum):
    """Binary operators, listed from loosest to tightest binding.

    The value of each member is its canonical (Unicode) spelling.  All
    operators are left-associative.
    """

    IMPORT_ALT = "?"
    BOOL_OR = "||"
    NATURAL_PLUS = "+"
    TEXT_APPEND = "++"
    LIST_APPEND = "#"
    BOOL_AND = "&&"
    COMBINE = "∧"
    PREFER = "⫽"
    COMBINE_TYPES = "⩓"
    NATURAL_TIMES = "*"
    BOOL_EQ = "=="
    BOOL_NE = "!="

    @property
    def precedence(self) -> int:
        """Binding strength; larger numbers bind tighter."""
        return _PRECEDENCE[self]


_PRECEDENCE: dict[OperatorKind, int] = {kind: rank for rank, kind in enumerate(OperatorKind)}


class ImportMode(Enum):
    """How the contents of an import are to be interpreted."""

    CODE = "code"
    RAW_TEXT = "Text"
    LOCATION = "Location"


class LocalAnchor(Enum):
    """The prefix a local import path is resolved against."""

    PARENT = ".."
    HERE = "."
    HOME = "~"
    ABSOLUTE = "/"


class Scheme(Enum):
    """URL scheme of a remote import."""

    HTTP = "http"
    HTTPS = "https"


# ---------------------------------------------------------------------------
# Import kinds
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Missing:
    """The ``missing`` import, which never resolves."""


@dataclass(frozen=True, slots=True)
class Local:
    """A filesystem path, e.g. ``./foo/bar`` or ``~/.config/x.dhall``.

    ``components`` holds the path components without separators; quoted
    components are stored without their quotes.
    """

    anchor: LocalAnchor
    components: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class Remote:
    """An ``http``/``https`` URL import.

    ``path`` holds the URL path components without separators, in source
    spelling (percent-escapes are not decoded).  ``headers`` is the import
    supplied by a trailing ``using`` clause.
    """

    scheme: Scheme
    host: str
    path: tuple[str, ...] = ()
    userinfo: str | None = None
    port: str | None = None
    query: str | None = None
    headers: "Import | None" = None

    @property
    def authority(self) -> str:
        """Return the authority section as it appears in the URL."""
        text = self.host
        if self.userinfo is not None:
            text = f"{self.userinfo}@{text}"
        if self.port is not None:
            text = f"{text}:{self.port}"
        return text

    @property
    def url(self) -> str:
        """Return the URL without the ``using`` clause."""
        text = f"{self.scheme.value}://{self.authority}"
        text += "".join(f"/{component}" for component in self.path)
        if self.query is not None:
            text += f"?{self.query}"
        return text


@dataclass(frozen=True, slots=True)
class EnvVar:
    """An ``env:NAME`` import; ``name`` is the unescaped variable name."""

    name: str


ImportKind = Union[Missing, Local, Remote, EnvVar]


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------


Expression = Union[
    "Variable",
    "Builtin",
    "Lambda",
    "Pi",
    "App",
    "Let",
    "If",
    "Annotated",
    "Operator",
    "Merge",
    "ToMap",
    "EmptyList",
    "NonEmptyList",
    "Some",
    "RecordType",
    "RecordLiteral",
    "UnionType",
    "Field",
    "Projection",
    "ProjectionByType",
    "TextLiteral",
    "DoubleLiteral",
    "NaturalLiteral",
    "IntegerLiteral",
    "Import",
]


@dataclass(frozen=True, slots=True)
class Variable:
    """A bound variable reference such as ``x`` or ``x@1``."""

    name: str
    index: int = 0


@dataclass(frozen=True, slots=True)
class Builtin:
    """A reserved identifier such as ``Natural`` or ``List/fold``."""

    name: str


@dataclass(frozen=True, slots=True)
class Lambda:
    """``λ(param : param_type) → body``"""

    param: str
    param_type: "Expression"
    body: "Expression"


@dataclass(frozen=True, slots=True)
class Pi:
    """``∀(param : param_type) → body``; a bare arrow ``A → B`` uses ``_``."""

    param: str
    param_type: "Expression"
    body: "Expression"


@dataclass(frozen=True, slots=True)
class App:
    """Function application; chains nest to the left."""

    fn: "Expression"
    arg: "Expression"


@dataclass(frozen=True, slots=True)
class Binding:
    """A single ``let name [: annotation] = value`` binding."""

    name: str
    annotation: "Expression | None"
    value: "Expression"


@dataclass(frozen=True, slots=True)
class Let:
    """One or more ``let`` bindings followed by ``in body``."""

    bindings: tuple[Binding, ...]
    body: "Expression"


@dataclass(frozen=True, slots=True)
class If:
    """``if condition then true_branch else false_branch``"""

    condition: "Expression"
    true_branch: "Expression"
    false_branch: "Expression"


@dataclass(frozen=True, slots=True)
class Annotated:
    """``expression : annotation``"""

    expression: "Expression"
    annotation: "Expression"


@dataclass(frozen=True, slots=True)
class Operator:
    """A binary operator application, e.g. ``a + b``."""

    kind: OperatorKind
    lhs: "Expression"
    rhs: "Expression"


@dataclass(frozen=True, slots=True)
class Merge:
    """``merge handler union [: annotation]``"""

    handler: "Expression"
    union: "Expression"
    annotation: "Expression | None" = None


@dataclass(frozen=True, slots=True)
class ToMap:
    """``toMap expression [: annotation]``"""

    expression: "Expression"
    annotation: "Expression | None" = None


@dataclass(frozen=True, slots=True)
class EmptyList:
    """``[] : List element_type``"""

    element_type: "Expression"


@dataclass(frozen=True, slots=True)
class NonEmptyList:
    """``[a, b, c]``; ``elements`` is never empty."""

    elements: tuple["Expression", ...]


@dataclass(frozen=True, slots=True)
class Some:
    """``Some expression``"""

    expression: "Expression"


@dataclass(frozen=True, slots=True)
class RecordType:
    """``{ a : T, b : U }``; field order is preserved as written."""

    fields: tuple[tuple[str, "Expression"], ...] = ()

    def as_dict(self) -> dict[str, "Expression"]:
        """Return the fields as an insertion-ordered dict."""
        return dict(self.fields)


@dataclass(frozen=True, slots=True)
class RecordLiteral:
    """``{ a = x, b = y }``; field order is preserved as written."""

    fields: tuple[tuple[str, "Expression"], ...] = ()

    def as_dict(self) -> dict[str, "Expression"]:
        """Return the fields as an insertion-ordered dict."""
        return dict(self.fields)


@dataclass(frozen=True, slots=True)
class UnionType:
    """``< A : T | B >``; alternatives without a type map to ``None``."""

    alternatives: tuple[tuple[str, "Expression | None"], ...] = ()

    def as_dict(self) -> dict[str, "Expression | None"]:
        """Return the alternatives as an insertion-ordered dict."""
        return dict(self.alternatives)


@dataclass(frozen=True, slots=True)
class Field:
    """``record.label``"""

    record: "Expression"
    label: str


@dataclass(frozen=True, slots=True)
class Projection:
    """``record.{ a, b }``"""

    record: "Expression"
    labels: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class ProjectionByType:
    """``record.(Type)``"""

    record: "Expression"
    selector: "Expression"


@dataclass(frozen=True, slots=True)
class TextLiteral:
    """A text literal with optional interpolations.

    ``chunks`` holds ``(text, expression)`` pairs, each literal text run
    followed by the interpolated expression after it; ``suffix`` is the
    literal text after the last interpolation.  A literal without
    interpolations has no chunks and its whole content in ``suffix``.
    """

    chunks: tuple[tuple[str, "Expression"], ...] = ()
    suffix: str = ""

    @property
    def is_plain(self) -> bool:
        """Return True if the literal contains no interpolations."""
        return not self.chunks


@dataclass(frozen=True, slots=True, eq=False)
class DoubleLiteral:
    """A ``Double`` literal kept as an exact decimal.

    ``Infinity``, ``-Infinity`` and ``NaN`` are represented by the
    corresponding special ``Decimal`` values.

    Two literals are equal when they were written with the same sign,
    digits and exponent, so ``NaN == NaN`` holds while ``-0.0`` and
    ``0.0`` stay distinct.  ``Decimal`` comparison would say the opposite
    in both cases.
    """

    value: Decimal

    def __float__(self) -> float:
        return float(self.value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DoubleLiteral):
            return NotImplemented
        return self.value.as_tuple() == other.value.as_tuple()

    def __hash__(self) -> int:
        return hash(self.value.as_tuple())


@dataclass(frozen=True, slots=True)
class NaturalLiteral:
    """An unsigned ``Natural`` literal of unbounded size."""

    value: int


@dataclass(frozen=True, slots=True)
class IntegerLiteral:
    """A signed ``Integer`` literal (``+1``, ``-42``) of unbounded size."""

    value: int


@dataclass(frozen=True, slots=True)
class Import:
    """An import expression.

    ``hash`` is the 32-byte SHA-256 digest from a ``sha256:`` suffix, if
    present.  Imports are never resolved by the parser.
    """

    kind: ImportKind
    hash: bytes | None = None
    mode: ImportMode = ImportMode.CODE
