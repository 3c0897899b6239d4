"""Unit tests for dhall.parser.errors — error locations, excerpts and the
messages the parser builds for failed parses.
"""
from __future__ import annotations

import pytest

from dhall.ast.nodes import Location
from dhall.parser import parse
from dhall.parser.errors import (
    DhallSyntaxError,
    EscapeError,
    IntegrityFormatError,
    NestingDepthError,
    TrailingInputError,
)


def _error(source: str) -> DhallSyntaxError:
    with pytest.raises(DhallSyntaxError) as exc_info:
        parse(source)
    return exc_info.value


class TestHierarchy:
    @pytest.mark.parametrize(
        "error_type",
        [EscapeError, IntegrityFormatError, TrailingInputError, NestingDepthError],
    )
    def test_subclasses_syntax_error(self, error_type: type[DhallSyntaxError]) -> None:
        assert issubclass(error_type, DhallSyntaxError)

    def test_is_an_exception(self) -> None:
        assert issubclass(DhallSyntaxError, Exception)

    def test_escape_error(self) -> None:
        assert isinstance(_error('"\\uD800"'), EscapeError)

    def test_integrity_format_error(self) -> None:
        assert isinstance(_error("./a.dhall sha256:abc"), IntegrityFormatError)

    def test_nesting_depth_error(self) -> None:
        with pytest.raises(NestingDepthError):
            parse("((((x))))", max_depth=2)


class TestAttributes:
    def test_location_properties(self) -> None:
        exc = DhallSyntaxError("boom", Location(offset=7, line=2, column=3))
        assert (exc.offset, exc.line, exc.column) == (7, 2, 3)
        assert exc.message == "boom"
        assert exc.expected == ()
        assert exc.rule_stack == ()

    def test_str_without_expectations(self) -> None:
        exc = DhallSyntaxError("boom", Location(0, 1, 1))
        assert str(exc) == "DhallSyntaxError at 1:1: boom"

    def test_str_with_one_expectation(self) -> None:
        exc = DhallSyntaxError("boom", Location(0, 1, 1), expected=("'a'",))
        assert str(exc) == "DhallSyntaxError at 1:1: boom (expected 'a')"

    def test_str_joins_alternatives(self) -> None:
        exc = TrailingInputError("boom", Location(0, 1, 1), expected=("'a'", "'b'", "'c'"))
        assert str(exc).endswith("(expected 'a', 'b' or 'c')")
        assert str(exc).startswith("TrailingInputError")


class TestExcerpt:
    def test_caret_under_offset(self) -> None:
        exc = DhallSyntaxError("boom", Location(4, 1, 5), source="let = 1")
        assert exc.excerpt() == "let = 1\n    ^"

    def test_only_the_offending_line(self) -> None:
        source = "first\r\nsecond line\nthird"
        exc = DhallSyntaxError("boom", Location(10, 2, 4), source=source)
        assert exc.excerpt() == "second line\n   ^"

    def test_offset_at_end_of_input(self) -> None:
        exc = DhallSyntaxError("boom", Location(3, 1, 4), source="abc")
        assert exc.excerpt() == "abc\n   ^"

    def test_no_source(self) -> None:
        assert DhallSyntaxError("boom", Location(0, 1, 1)).excerpt() == ""


class TestParseErrors:
    def test_furthest_failure_position(self) -> None:
        exc = _error("{ port = 8080, host = }")
        assert exc.offset == 22
        assert exc.message == "unexpected '}' while parsing an expression"
        assert exc.expected

    def test_multi_line_position(self) -> None:
        exc = _error("{ a = 1,\n  b = }")
        assert (exc.line, exc.column) == (2, 7)
        assert exc.excerpt() == "  b = }\n      ^"

    def test_end_of_input(self) -> None:
        exc = _error("let x = 1 in")
        assert exc.offset == 12
        assert "end of input" in exc.message

    def test_empty_source(self) -> None:
        exc = _error("")
        assert exc.offset == 0
        assert exc.message.startswith("unexpected end of input")

    def test_rule_stack_names_the_enclosing_rules(self) -> None:
        exc = _error("{ port = 8080, host = }")
        assert "record_expression" in exc.rule_stack
        assert exc.rule_stack[-1] == "expression"

    def test_error_is_raised_without_context(self) -> None:
        exc = _error("(")
        assert exc.__cause__ is None
        assert exc.__suppress_context__

    def test_unterminated_block_comment(self) -> None:
        exc = _error("1 {- oops")
        assert exc.offset == 2
        assert exc.message == "unterminated block comment"

    def test_unicode_escape_position(self) -> None:
        exc = _error('"ab\\u{110000}"')
        assert isinstance(exc, EscapeError)
        assert exc.offset == 3

    def test_hash_position(self) -> None:
        exc = _error("./a.dhall sha256:00")
        assert isinstance(exc, IntegrityFormatError)
        assert exc.offset == 10


class TestTrailingInput:
    def test_position_and_message(self) -> None:
        exc = _error("1 )")
        assert isinstance(exc, TrailingInputError)
        assert exc.offset == 2
        assert exc.message == "unexpected ')' after a complete expression"

    def test_points_at_a_longer_failed_attempt(self) -> None:
        exc = _error("f x.")
        assert isinstance(exc, TrailingInputError)
        assert exc.offset == 4
        assert exc.message.startswith("unexpected end of input while parsing")
