"""Literal recognizers: numbers, labels, identifiers and text.

``LiteralParser`` extends the ``Scanner`` with the grammar rules for the
leaves of the expression tree.  Text literals may contain interpolated
sub-expressions, so this layer calls back into the full expression
grammar through ``_complete_expression``, which ``Parser`` provides.

Numeric literals keep full precision: naturals and integers become
Python ``int`` values of any size and doubles become exact ``Decimal``
values.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Final

from dhall.ast.nodes import (
    Builtin,
    DoubleLiteral,
    Expression,
    IntegerLiteral,
    NaturalLiteral,
    TextLiteral,
    Variable,
)
from dhall.ast.numbers import digits_to_int
from dhall.grammar.tokens import (
    BUILTINS,
    DIGITS,
    HEXDIGITS,
    KEYWORDS,
    LABEL_CONTINUE,
    LABEL_START,
    RESERVED,
    TEXT_ESCAPES,
    is_printable,
)
from dhall.parser.errors import EscapeError
from dhall.parser.scanner import Backtrack, Scanner, rule

# Quoted labels: printable ASCII except the backtick.
_QUOTED_LABEL_CHARS: Final[frozenset[str]] = frozenset(
    chr(c) for c in range(0x20, 0x7F)
) - {"`"}

_MAX_CODEPOINT: Final[int] = 0x10FFFF


class _TextBuilder:
    """Accumulates literal text and interpolations into a ``TextLiteral``."""

    def __init__(self) -> None:
        self._chunks: list[tuple[str, Expression]] = []
        self._buffer: list[str] = []

    def add(self, text: str) -> None:
        self._buffer.append(text)

    def interpolate(self, expr: Expression) -> None:
        self._chunks.append(("".join(self._buffer), expr))
        self._buffer = []

    def build(self) -> TextLiteral:
        return TextLiteral(chunks=tuple(self._chunks), suffix="".join(self._buffer))


class LiteralParser(Scanner):
    """Grammar rules for numeric, label, identifier and text literals."""

    def _complete_expression(self) -> Expression:
        """Parse ``whsp expression whsp``; provided by ``Parser``."""
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Numbers
    # ------------------------------------------------------------------

    @rule
    def _double_literal(self) -> DoubleLiteral:
        """Parse a ``Double``: ``1.5``, ``-2e10``, ``Infinity``, ``NaN``."""
        for special in ("-Infinity", "Infinity", "NaN"):
            if self.startswith(special):
                self.expect_keyword(special)
                return DoubleLiteral(Decimal(special))
        start = self.checkpoint()
        if self.peek() in ("+", "-"):
            self.advance()
        self.take_while1(DIGITS, "a digit")
        if self.match("."):
            self.take_while1(DIGITS, "a digit")
            checkpoint = self.checkpoint()
            try:
                self._exponent()
            except Backtrack:
                self.restore(checkpoint)
        else:
            self._exponent()
        return DoubleLiteral(Decimal(self._source[start : self._pos]))

    def _exponent(self) -> None:
        self.expect("e", "E")
        if self.peek() in ("+", "-"):
            self.advance()
        self.take_while1(DIGITS, "a digit")

    @rule
    def _natural_literal(self) -> NaturalLiteral:
        return NaturalLiteral(digits_to_int(self.take_while1(DIGITS, "a digit")))

    @rule
    def _integer_literal(self) -> IntegerLiteral:
        sign = self.expect("+", "-")
        magnitude = digits_to_int(self.take_while1(DIGITS, "a digit"))
        return IntegerLiteral(-magnitude if sign == "-" else magnitude)

    # ------------------------------------------------------------------
    # Labels and identifiers
    # ------------------------------------------------------------------

    def _simple_label_text(self) -> str:
        """Consume the longest run matching the simple-label character class."""
        if self.peek() not in LABEL_START:
            self.fail("a label")
        return self.take_while(LABEL_CONTINUE)

    def _quoted_label(self) -> str:
        self.expect("`")
        text = self.take_while(_QUOTED_LABEL_CHARS)
        self.expect("`")
        return text

    @rule
    def _label(self) -> str:
        """Parse any label: quoted, or a simple label that is not a keyword."""
        if self.peek() == "`":
            return self._quoted_label()
        start = self.checkpoint()
        text = self._simple_label_text()
        if text in KEYWORDS:
            self.restore(start)
            self.fail("a label")
        return text

    @rule
    def _nonreserved_label(self) -> str:
        """Parse a label usable as a variable name (no keywords or builtins)."""
        if self.peek() == "`":
            return self._quoted_label()
        start = self.checkpoint()
        text = self._simple_label_text()
        if text in RESERVED:
            self.restore(start)
            self.fail("a variable name")
        return text

    @rule
    def _identifier(self) -> Expression:
        """Parse a variable (``x``, ``x@1``) or a builtin (``Natural/fold``)."""
        try:
            name = self._nonreserved_label()
        except Backtrack:
            start = self.checkpoint()
            text = self._simple_label_text()
            if text not in BUILTINS:
                self.restore(start)
                self.fail("an identifier")
            return Builtin(text)
        checkpoint = self.checkpoint()
        try:
            self.whitespace()
            self.expect("@")
            self.whitespace()
            index = digits_to_int(self.take_while1(DIGITS, "a variable index"))
        except Backtrack:
            self.restore(checkpoint)
            index = 0
        return Variable(name, index)

    # ------------------------------------------------------------------
    # Text
    # ------------------------------------------------------------------

    @rule
    def _text_literal(self) -> TextLiteral:
        return self.choice(self._double_quote_literal, self._single_quote_literal)

    def _interpolation(self, builder: _TextBuilder) -> None:
        """Parse ``${ expression }`` after the ``${`` has been matched."""
        expr = self._complete_expression()
        self.expect("}")
        builder.interpolate(expr)

    @rule
    def _double_quote_literal(self) -> TextLiteral:
        self.expect('"')
        builder = _TextBuilder()
        while True:
            ch = self.peek()
            if ch == '"':
                self.advance()
                return builder.build()
            if self.match("${"):
                self._interpolation(builder)
            elif ch == "\\":
                self.advance()
                builder.add(self._escape_sequence())
            elif ch and is_printable(ch):
                builder.add(self.advance())
            else:
                self.fail("a text character or '\"'")

    def _escape_sequence(self) -> str:
        """Decode the escape after a backslash in a double-quoted literal."""
        ch = self.peek()
        if ch in TEXT_ESCAPES:
            self.advance()
            return TEXT_ESCAPES[ch]
        if ch == "u":
            self.advance()
            return self._unicode_escape(self._pos - 2)
        self.fail("an escape sequence")

    def _unicode_escape(self, start: int) -> str:
        """Decode ``XXXX`` or ``{X...}`` following ``\\u``."""
        if self.match("{"):
            digits = self.take_while(HEXDIGITS)
            if not digits:
                raise self._escape_error("empty unicode escape", start)
            if not self.match("}"):
                raise self._escape_error("unterminated unicode escape", start)
            if len(digits.lstrip("0")) > 6:
                raise self._escape_error("unicode escape has too many digits", start)
        else:
            digits = self._source[self._pos : self._pos + 4]
            if len(digits) != 4 or any(d not in HEXDIGITS for d in digits):
                raise self._escape_error("expected four hexadecimal digits after \\u", start)
            self.advance(4)
        code = int(digits, 16)
        if code > _MAX_CODEPOINT or 0xD800 <= code <= 0xDFFF:
            raise self._escape_error(f"U+{code:04X} is not a Unicode scalar value", start)
        return chr(code)

    def _escape_error(self, message: str, offset: int) -> EscapeError:
        return EscapeError(
            message,
            self.location(offset),
            rule_stack=tuple(self._rule_stack),
            source=self._source,
        )

    @rule
    def _single_quote_literal(self) -> TextLiteral:
        self.expect("''")
        self.expect("\n", "\r\n")
        builder = _TextBuilder()
        while True:
            if self.match("${"):
                self._interpolation(builder)
            elif self.match("'''"):
                builder.add("''")
            elif self.match("''${"):
                builder.add("${")
            elif self.match("''"):
                return builder.build()
            elif self.match("\r\n"):
                builder.add("\r\n")
            else:
                ch = self.peek()
                if ch in ("\t", "\n") or (ch and is_printable(ch)):
                    builder.add(self.advance())
                else:
                    self.fail("a text character or \"''\"")
