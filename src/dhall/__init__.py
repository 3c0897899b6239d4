"""dhall-lang — parser and AST builder for the Dhall configuration language.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
::

    import dhall

    # Parse a Dhall source string into an AST
    expr = dhall.parse('''
        let greeting = "Hello"
        in  { message = "${greeting}, world", count = 3 }
    ''')

    # Parse the leading expression and report how much input it used
    result = dhall.parse_prefix("./config.dhall ? { port = 8080 } -- rest")

    # Dump the AST for other tools
    dhall.to_json(expr)
    dhall.to_yaml(expr)

    dhall.__version__
    '0.1.0'
"""
from __future__ import annotations

from typing import TYPE_CHECKING

__version__: str = "0.1.0"

if TYPE_CHECKING:
    from dhall.ast.nodes import Expression
    from dhall.parser.parser import ParseResult


def parse(source: str, max_depth: int | None = None, memoize: bool = True) -> "Expression":
    """Parse a Dhall source string into an ``Expression`` AST.

    Parameters
    ----------
    source:
        Complete Dhall source text.
    max_depth:
        Maximum expression nesting.  ``None`` uses the parser default.
    memoize:
        Enable packrat caching of rule outcomes.

    Returns
    -------
    Expression
        The root node of the parsed expression.

    Raises
    ------
    dhall.parser.DhallSyntaxError
        If the source is not a well-formed Dhall expression, or trailing
        input follows it.
    """
    from dhall.parser.parser import DEFAULT_MAX_DEPTH
    from dhall.parser.parser import parse as _parse

    return _parse(source, max_depth=max_depth or DEFAULT_MAX_DEPTH, memoize=memoize)


def parse_prefix(source: str, max_depth: int | None = None, memoize: bool = True) -> "ParseResult":
    """Parse the longest expression at the start of ``source``.

    Parameters
    ----------
    source:
        Dhall source text; anything after the first expression is ignored.
    max_depth:
        Maximum expression nesting.  ``None`` uses the parser default.
    memoize:
        Enable packrat caching of rule outcomes.

    Returns
    -------
    ParseResult
        The expression and the number of characters it consumed.
    """
    from dhall.parser.parser import DEFAULT_MAX_DEPTH
    from dhall.parser.parser import parse_prefix as _parse_prefix

    return _parse_prefix(source, max_depth=max_depth or DEFAULT_MAX_DEPTH, memoize=memoize)


def to_json(expr: "Expression", indent: int = 2) -> str:
    """Serialize an ``Expression`` AST to a JSON string."""
    from dhall.ast.serializer import AstSerializer

    return AstSerializer().to_json(expr, indent=indent)


def to_yaml(expr: "Expression") -> str:
    """Serialize an ``Expression`` AST to a YAML string."""
    from dhall.ast.serializer import AstSerializer

    return AstSerializer().to_yaml(expr)


__all__ = [
    "__version__",
    "parse",
    "parse_prefix",
    "to_json",
    "to_yaml",
]
