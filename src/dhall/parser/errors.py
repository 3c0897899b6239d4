"""Parse error types for the Dhall parser.

All parse errors carry source-location information so that the CLI and
editor integrations can display precise, actionable error messages.
Parsing is all-or-nothing: when any of these is raised no partial AST is
produced.
"""
from __future__ import annotations

from dhall.ast.nodes import Location


class DhallSyntaxError(Exception):
    """Raised when the source text is not a well-formed Dhall expression.

    Parameters
    ----------
    message:
        Human-readable description of the problem.
    location:
        Position of the furthest point any grammar alternative reached.
    expected:
        Descriptions of what would have been accepted at ``location``.
    rule_stack:
        Grammar rules that were active when the furthest failure occurred,
        outermost first.
    source:
        The complete source text, used to render excerpts.
    """

    def __init__(
        self,
        message: str,
        location: Location,
        expected: tuple[str, ...] = (),
        rule_stack: tuple[str, ...] = (),
        source: str = "",
    ) -> None:
        super().__init__(message, location)
        self.message = message
        self.location = location
        self.expected = expected
        self.rule_stack = rule_stack
        self.source = source

    @property
    def offset(self) -> int:
        return self.location.offset

    @property
    def line(self) -> int:
        return self.location.line

    @property
    def column(self) -> int:
        return self.location.column

    def excerpt(self) -> str:
        """Return the offending source line with a caret under the error."""
        if not self.source:
            return ""
        start = self.source.rfind("\n", 0, self.offset) + 1
        end = self.source.find("\n", self.offset)
        if end == -1:
            end = len(self.source)
        line_text = self.source[start:end].rstrip("\r")
        caret = " " * (self.offset - start) + "^"
        return f"{line_text}\n{caret}"

    def __str__(self) -> str:
        text = f"{type(self).__name__} at {self.location}: {self.message}"
        if self.expected:
            text += f" (expected {_join_alternatives(self.expected)})"
        return text


class IntegrityFormatError(DhallSyntaxError):
    """A ``sha256:`` integrity check that is not exactly 64 hex digits."""


class EscapeError(DhallSyntaxError):
    """An invalid ``\\u`` escape in a double-quoted text literal."""


class TrailingInputError(DhallSyntaxError):
    """A complete expression was parsed but unparsed input remains."""


class NestingDepthError(DhallSyntaxError):
    """The expression is nested more deeply than the parser allows."""


def _join_alternatives(items: tuple[str, ...]) -> str:
    if len(items) == 1:
        return items[0]
    return ", ".join(items[:-1]) + f" or {items[-1]}"
