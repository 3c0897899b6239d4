"""Dhall Packrat Parser.

Turns Dhall source text directly into an ``Expression`` AST.  There is no
token stream: each grammar rule is a method that reads characters at the
scanner's cursor, and ordered choice is implemented by trying the
alternatives in turn and restoring the cursor whenever one backtracks.

Alternative ordering
--------------------
The grammar is a PEG, so the *first* alternative that matches wins even
when a later one would also match.  Top-level expressions are tried in
this order:

    lambda > if > let > forall > arrow > merge > empty list > toMap
    > operator expression with an optional annotation

Operators are folded left-associatively, loosest to tightest:

    ?  ||  +  ++  #  &&  ∧  ⫽  ⩓  *  ==  !=  > application > selector

Error reporting
---------------
Every alternative that fails records what it expected at the offset where
it gave up.  When the whole parse fails, the error points at the furthest
offset any alternative reached; that is almost always closer to the real
mistake than the offset of the first alternative tried.

Malformed escapes, malformed hashes, unterminated block comments and
excessive nesting are hard errors: they abort the parse immediately
instead of letting another alternative try.
"""
from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import Callable, Final

from dhall.ast.nodes import (
    Annotated,
    App,
    Binding,
    EmptyList,
    Expression,
    Field,
    If,
    Lambda,
    Let,
    Merge,
    NonEmptyList,
    Operator,
    OperatorKind,
    Pi,
    Projection,
    ProjectionByType,
    RecordLiteral,
    RecordType,
    Some,
    ToMap,
    UnionType,
)
from dhall.grammar.grammar import RULE_DESCRIPTIONS
from dhall.grammar.tokens import (
    ARROW_SPELLINGS,
    FORALL_SPELLINGS,
    LAMBDA_SPELLINGS,
    OPERATOR_SPELLINGS,
)
from dhall.parser.errors import DhallSyntaxError, NestingDepthError, TrailingInputError
from dhall.parser.imports import ImportParser
from dhall.parser.scanner import Backtrack, rule

logger = logging.getLogger(__name__)

# Upper bound on the Python frames one level of expression nesting uses
# (expression -> operator -> application -> selector -> primitive -> ...).
_FRAMES_PER_LEVEL: Final[int] = 30

# Frames left for the caller and for the deepest leaf rules.
_RESERVED_FRAMES: Final[int] = 200

# The recursion limit is read once and never changed; a larger default
# follows when the application raises the limit before importing dhall.
DEFAULT_MAX_DEPTH: Final[int] = max(
    16, (sys.getrecursionlimit() - _RESERVED_FRAMES) // _FRAMES_PER_LEVEL
)


@dataclass(frozen=True, slots=True)
class ParseResult:
    """Outcome of ``parse_prefix``.

    Parameters
    ----------
    expression:
        The longest expression parsed from the start of the source.
    consumed:
        Number of characters the expression (and any leading whitespace)
        occupies.
    """

    expression: Expression
    consumed: int


class Parser(ImportParser):
    """Packrat parser that produces an ``Expression`` from Dhall source.

    Parameters
    ----------
    source:
        Complete Dhall source text.
    max_depth:
        Maximum expression nesting (parentheses, interpolations, function
        bodies and so on) before ``NestingDepthError`` is raised.  The
        default fits the interpreter recursion limit at import time; a
        larger value only helps if the caller has raised that limit, and
        running out of stack is reported as ``NestingDepthError`` too.
    memoize:
        Cache the outcome of every grammar rule per offset.  Disabling the
        cache never changes the result, only how long backtracking takes.
    """

    def __init__(
        self,
        source: str,
        *,
        max_depth: int = DEFAULT_MAX_DEPTH,
        memoize: bool = True,
    ) -> None:
        if max_depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {max_depth}")
        super().__init__(source, memoize=memoize)
        self._max_depth: int = max_depth
        self._depth: int = 0

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    def parse(self) -> Expression:
        """Parse the whole source as a single expression.

        Leading and trailing whitespace and comments are allowed.

        Raises
        ------
        TrailingInputError
            If an expression parsed but characters remain after it.
        DhallSyntaxError
            If the source is not a Dhall expression.
        """
        expression = self._run(self._complete_expression)
        if not self.at_end():
            raise self._trailing_error()
        return expression

    def parse_prefix(self) -> ParseResult:
        """Parse the longest expression at the start of the source.

        Unlike ``parse`` the remainder of the source is ignored, and the
        returned ``ParseResult`` tells the caller where it begins.
        """
        expression = self._run(self._prefix_expression)
        return ParseResult(expression=expression, consumed=self._pos)

    # ------------------------------------------------------------------
    # Driver
    # ------------------------------------------------------------------

    def _run(self, entry: Callable[[], Expression]) -> Expression:
        self._reset()
        try:
            expression = entry()
        except Backtrack:
            raise self._syntax_error() from None
        except RecursionError:
            raise self._depth_error("expression is nested too deeply") from None
        logger.debug(
            "Parsed %d characters: %d memo entries, %d memo hits",
            self._length,
            len(self._memo),
            self._memo_hits,
        )
        return expression

    def _reset(self) -> None:
        self._pos = 0
        self._depth = 0
        self._memo.clear()
        self._memo_hits = 0
        self._rule_stack.clear()
        self._furthest = -1
        self._expected = []
        self._furthest_rules = ()

    def _prefix_expression(self) -> Expression:
        self.whitespace()
        return self._expression()

    def _complete_expression(self) -> Expression:
        self.whitespace()
        expression = self._expression()
        self.whitespace()
        return expression

    # ------------------------------------------------------------------
    # Error construction
    # ------------------------------------------------------------------

    def _describe(self, offset: int) -> str:
        if offset >= self._length:
            return "end of input"
        return repr(self._source[offset])

    def _context(self, rules: tuple[str, ...]) -> str:
        """Describe the innermost rule of ``rules`` that has a description."""
        for name in reversed(rules):
            if name in RULE_DESCRIPTIONS:
                return RULE_DESCRIPTIONS[name]
        return "an expression"

    def _syntax_error(self) -> DhallSyntaxError:
        offset = max(self._furthest, 0)
        return DhallSyntaxError(
            f"unexpected {self._describe(offset)} while parsing {self._context(self._furthest_rules)}",
            self.location(offset),
            expected=tuple(self._expected),
            rule_stack=self._furthest_rules,
            source=self._source,
        )

    def _trailing_error(self) -> TrailingInputError:
        offset = self._pos
        expected: tuple[str, ...] = ()
        rules: tuple[str, ...] = ()
        message = f"unexpected {self._describe(offset)} after a complete expression"
        if self._furthest >= offset:
            expected = tuple(self._expected)
            rules = self._furthest_rules
        if self._furthest > offset:
            # A longer expression got further before failing; point there.
            offset = self._furthest
            message = f"unexpected {self._describe(offset)} while parsing {self._context(rules)}"
        return TrailingInputError(
            message,
            self.location(offset),
            expected=expected,
            rule_stack=rules,
            source=self._source,
        )

    def _depth_error(self, message: str) -> NestingDepthError:
        return NestingDepthError(
            message,
            self.location(),
            rule_stack=tuple(self._rule_stack),
            source=self._source,
        )

    # ------------------------------------------------------------------
    # Top-level expressions
    # ------------------------------------------------------------------

    @rule
    def _expression(self) -> Expression:
        self._depth += 1
        try:
            if self._depth > self._max_depth:
                raise self._depth_error(
                    f"expression nesting exceeds the maximum depth of {self._max_depth}"
                )
            return self.choice(
                self._lambda_expression,
                self._if_expression,
                self._let_expression,
                self._forall_expression,
                self._arrow_expression,
                self._merge_expression,
                self._empty_list_expression,
                self._to_map_expression,
                self._annotated_expression,
            )
        finally:
            self._depth -= 1

    def _binder(self) -> tuple[str, Expression]:
        """Parse ``whsp ( whsp label whsp : whsp1 expression whsp )``."""
        self.whitespace()
        self.expect("(")
        self.whitespace()
        name = self._nonreserved_label()
        self.whitespace()
        self.expect(":")
        self.whitespace1()
        annotation = self._expression()
        self.whitespace()
        self.expect(")")
        return name, annotation

    def _arrow(self) -> None:
        self.whitespace()
        self.expect(*ARROW_SPELLINGS)
        self.whitespace()

    @rule
    def _lambda_expression(self) -> Lambda:
        self.expect(*LAMBDA_SPELLINGS)
        param, param_type = self._binder()
        self._arrow()
        return Lambda(param=param, param_type=param_type, body=self._expression())

    @rule
    def _if_expression(self) -> If:
        self.expect_keyword("if")
        self.whitespace1()
        condition = self._expression()
        self.whitespace()
        self.expect_keyword("then")
        self.whitespace1()
        true_branch = self._expression()
        self.whitespace()
        self.expect_keyword("else")
        self.whitespace1()
        return If(condition=condition, true_branch=true_branch, false_branch=self._expression())

    @rule
    def _let_expression(self) -> Let:
        bindings = [self._let_binding()]
        while True:
            checkpoint = self.checkpoint()
            try:
                bindings.append(self._let_binding())
            except Backtrack:
                self.restore(checkpoint)
                break
        self.expect_keyword("in")
        self.whitespace1()
        return Let(bindings=tuple(bindings), body=self._expression())

    @rule
    def _let_binding(self) -> Binding:
        """Parse ``let name [: type] = value`` and the whitespace after it."""
        self.expect_keyword("let")
        self.whitespace1()
        name = self._nonreserved_label()
        self.whitespace()
        annotation = None
        if self.match(":"):
            self.whitespace1()
            annotation = self._expression()
            self.whitespace()
        self.expect("=")
        self.whitespace()
        value = self._expression()
        self.whitespace()
        return Binding(name=name, annotation=annotation, value=value)

    @rule
    def _forall_expression(self) -> Pi:
        if not self.match(FORALL_SPELLINGS[0]):
            self.expect_keyword(FORALL_SPELLINGS[1])
        param, param_type = self._binder()
        self._arrow()
        return Pi(param=param, param_type=param_type, body=self._expression())

    @rule
    def _arrow_expression(self) -> Pi:
        domain = self._operator_expression()
        self._arrow()
        return Pi(param="_", param_type=domain, body=self._expression())

    @rule
    def _merge_expression(self) -> Merge:
        self.expect_keyword("merge")
        self.whitespace1()
        handler = self._import_expression()
        self.whitespace1()
        union = self._import_expression()
        self._colon()
        return Merge(handler=handler, union=union, annotation=self._application_expression())

    @rule
    def _empty_list_expression(self) -> EmptyList:
        self.expect("[")
        self.whitespace()
        self.expect("]")
        self._colon()
        self.expect_keyword("List")
        self.whitespace1()
        return EmptyList(element_type=self._import_expression())

    @rule
    def _to_map_expression(self) -> ToMap:
        self.expect_keyword("toMap")
        self.whitespace1()
        expression = self._import_expression()
        self._colon()
        return ToMap(expression=expression, annotation=self._application_expression())

    @rule
    def _annotated_expression(self) -> Expression:
        expression = self._operator_expression()
        checkpoint = self.checkpoint()
        try:
            self._colon()
            annotation = self._expression()
        except Backtrack:
            self.restore(checkpoint)
            return expression
        return Annotated(expression=expression, annotation=annotation)

    def _colon(self) -> None:
        """Parse the ``whsp : whsp1`` that introduces a type annotation."""
        self.whitespace()
        self.expect(":")
        self.whitespace1()

    # ------------------------------------------------------------------
    # Operators
    # ------------------------------------------------------------------

    @rule
    def _operator_expression(self) -> Expression:
        """Parse application expressions separated by binary operators.

        Operands and operators are folded with an operator stack: before
        an operator is pushed, every stacked operator that binds at least
        as tightly is reduced, which makes every operator left-associative.
        """
        operands = [self._application_expression()]
        operators: list[OperatorKind] = []
        while True:
            checkpoint = self.checkpoint()
            try:
                kind = self._binary_operator()
                rhs = self._application_expression()
            except Backtrack:
                self.restore(checkpoint)
                break
            while operators and operators[-1].precedence >= kind.precedence:
                _reduce(operands, operators)
            operators.append(kind)
            operands.append(rhs)
        while operators:
            _reduce(operands, operators)
        return operands[0]

    def _binary_operator(self) -> OperatorKind:
        self.whitespace()
        for spelling, kind, needs_whitespace in OPERATOR_SPELLINGS:
            if self.match(spelling):
                if needs_whitespace:
                    self.whitespace1()
                else:
                    self.whitespace()
                return kind
        self.fail("an operator")

    # ------------------------------------------------------------------
    # Application and selection
    # ------------------------------------------------------------------

    @rule
    def _application_expression(self) -> Expression:
        expression = self._first_application_expression()
        while True:
            checkpoint = self.checkpoint()
            try:
                self.whitespace1()
                argument = self._import_expression()
            except Backtrack:
                self.restore(checkpoint)
                return expression
            expression = App(fn=expression, arg=argument)

    @rule
    def _first_application_expression(self) -> Expression:
        return self.choice(
            self._merge_application,
            self._some_application,
            self._to_map_application,
            self._import_expression,
        )

    def _merge_application(self) -> Merge:
        self.expect_keyword("merge")
        self.whitespace1()
        handler = self._import_expression()
        self.whitespace1()
        return Merge(handler=handler, union=self._import_expression())

    def _some_application(self) -> Some:
        self.expect_keyword("Some")
        self.whitespace1()
        return Some(expression=self._import_expression())

    def _to_map_application(self) -> ToMap:
        self.expect_keyword("toMap")
        self.whitespace1()
        return ToMap(expression=self._import_expression())

    @rule
    def _import_expression(self) -> Expression:
        return self.choice(self._import_, self._selector_expression)

    @rule
    def _selector_expression(self) -> Expression:
        expression = self._primitive_expression()
        while True:
            checkpoint = self.checkpoint()
            try:
                self.whitespace()
                self.expect(".")
                self.whitespace()
                expression = self._selector(expression)
            except Backtrack:
                self.restore(checkpoint)
                return expression

    def _selector(self, record: Expression) -> Expression:
        if self.match("{"):
            return Projection(record=record, labels=self._projection_labels())
        if self.match("("):
            selector = self._complete_expression()
            self.expect(")")
            return ProjectionByType(record=record, selector=selector)
        return Field(record=record, label=self._label())

    def _projection_labels(self) -> tuple[str, ...]:
        """Parse the labels of ``{ a, b, c }`` after the opening brace."""
        self.whitespace()
        if self.match(","):
            self.whitespace()
        labels: list[str] = []
        while self.peek() != "}":
            labels.append(self._label())
            self.whitespace()
            if not self.match(","):
                break
            self.whitespace()
        self.expect("}")
        return tuple(labels)

    # ------------------------------------------------------------------
    # Primitives
    # ------------------------------------------------------------------

    @rule
    def _primitive_expression(self) -> Expression:
        return self.choice(
            self._double_literal,
            self._natural_literal,
            self._integer_literal,
            self._text_literal,
            self._record_expression,
            self._union_type,
            self._list_literal,
            self._identifier,
            self._parenthesized,
        )

    def _parenthesized(self) -> Expression:
        self.expect("(")
        expression = self._complete_expression()
        self.expect(")")
        return expression

    @rule
    def _record_expression(self) -> RecordType | RecordLiteral:
        """Parse a record type ``{ a : T }`` or a record literal ``{ a = v }``.

        The first entry decides which one: every later entry must use the
        same separator.  ``{}`` and ``{=}`` are both the empty record
        literal.
        """
        self.expect("{")
        self.whitespace()
        if self.match(","):
            self.whitespace()
        if self.match("="):
            self.whitespace()
            if self.match(","):
                self.whitespace()
            self.expect("}")
            return RecordLiteral()
        if self.match("}"):
            return RecordLiteral()
        label, separator, value = self._record_entry(":", "=")
        fields = [(label, value)]
        while True:
            self.whitespace()
            if not self.match(","):
                break
            self.whitespace()
            if self.peek() == "}":
                break
            label, _, value = self._record_entry(separator)
            fields.append((label, value))
        self.expect("}")
        if separator == ":":
            return RecordType(fields=tuple(fields))
        return RecordLiteral(fields=tuple(fields))

    def _record_entry(self, *separators: str) -> tuple[str, str, Expression]:
        label = self._label()
        self.whitespace()
        separator = self.expect(*separators)
        if separator == ":":
            self.whitespace1()
        else:
            self.whitespace()
        return label, separator, self._expression()

    @rule
    def _union_type(self) -> UnionType:
        self.expect("<")
        self.whitespace()
        if self.match("|"):
            self.whitespace()
        alternatives: list[tuple[str, Expression | None]] = []
        if self.peek() != ">":
            alternatives.append(self._union_alternative())
            while True:
                self.whitespace()
                if not self.match("|"):
                    break
                self.whitespace()
                if self.peek() == ">":
                    break
                alternatives.append(self._union_alternative())
        self.expect(">")
        return UnionType(alternatives=tuple(alternatives))

    def _union_alternative(self) -> tuple[str, Expression | None]:
        label = self._label()
        checkpoint = self.checkpoint()
        try:
            self._colon()
            return label, self._expression()
        except Backtrack:
            self.restore(checkpoint)
            return label, None

    @rule
    def _list_literal(self) -> NonEmptyList:
        self.expect("[")
        self.whitespace()
        if self.match(","):
            self.whitespace()
        elements = [self._expression()]
        while True:
            self.whitespace()
            if not self.match(","):
                break
            self.whitespace()
            if self.peek() == "]":
                break
            elements.append(self._expression())
        self.expect("]")
        return NonEmptyList(elements=tuple(elements))


def _reduce(operands: list[Expression], operators: list[OperatorKind]) -> None:
    rhs = operands.pop()
    lhs = operands.pop()
    operands.append(Operator(kind=operators.pop(), lhs=lhs, rhs=rhs))


# ---------------------------------------------------------------------------
# Module-level convenience functions
# ---------------------------------------------------------------------------


def parse(source: str, *, max_depth: int = DEFAULT_MAX_DEPTH, memoize: bool = True) -> Expression:
    """Parse Dhall source text and return its ``Expression`` AST.

    Parameters
    ----------
    source:
        Complete Dhall source text.
    max_depth:
        Maximum expression nesting, see ``Parser``.
    memoize:
        Enable packrat caching, see ``Parser``.

    Returns
    -------
    Expression
        The root node of the parsed expression.

    Raises
    ------
    DhallSyntaxError
        If the source is not a well-formed Dhall expression.  The
        subclasses ``EscapeError``, ``IntegrityFormatError``,
        ``TrailingInputError`` and ``NestingDepthError`` identify the
        specific problems.

    Example
    -------
    ::

        from dhall.parser import parse
        expr = parse("λ(x : Natural) → x + 1")
    """
    return Parser(source, max_depth=max_depth, memoize=memoize).parse()


def parse_prefix(
    source: str, *, max_depth: int = DEFAULT_MAX_DEPTH, memoize: bool = True
) -> ParseResult:
    """Parse the longest expression at the start of ``source``.

    Returns
    -------
    ParseResult
        The expression together with the number of characters it used.
    """
    return Parser(source, max_depth=max_depth, memoize=memoize).parse_prefix()
