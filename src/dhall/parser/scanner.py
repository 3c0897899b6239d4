"""Dhall Scanner: a backtracking cursor over the source codepoints.

Dhall is parsed without a separate tokenizing pass.  The ``Scanner``
gives the grammar rules a positional view over the immutable source
string: every rule reads characters at the current offset, and an
alternative that does not match restores the offset it started from.
Because the position is a plain ``int``, a checkpoint is just that
integer and restoring it is O(1).

The scanner also owns the insignificant-text rules shared by every part
of the grammar:

    - spaces, tabs and line endings (``\\n`` and ``\\r\\n``)
    - ``--`` line comments (run to end of line)
    - ``{- ... -}`` block comments, which nest

and the bookkeeping for error reporting: the furthest offset any
alternative reached, what was expected there, and which rules were
active at the time.
"""
from __future__ import annotations

import functools
from bisect import bisect_right
from typing import Callable, NoReturn, TypeVar

from dhall.ast.nodes import Location
from dhall.grammar.tokens import LABEL_CONTINUE
from dhall.parser.errors import DhallSyntaxError


class Backtrack(Exception):
    """Signal that the current grammar alternative did not match.

    Never escapes the parser: ordered choice catches it and tries the
    next alternative, and the entry points convert a top-level failure
    into a ``DhallSyntaxError``.
    """


_FAILED = -1

T = TypeVar("T")


def rule(func: Callable[..., T]) -> Callable[..., T]:
    """Mark a zero-argument method as a named, memoized grammar rule.

    The rule name is pushed on the rule stack while the method runs, the
    start offset is restored when it backtracks, and when the scanner
    memoizes, the outcome (result and end offset, or failure) is cached
    per start offset so re-trying the rule after backtracking is O(1).
    """
    name = func.__name__.lstrip("_")

    @functools.wraps(func)
    def wrapper(self: "Scanner") -> T:
        start = self._pos
        key = (name, start)
        if self._memoize:
            cached = self._memo.get(key)
            if cached is not None:
                self._memo_hits += 1
                result, end = cached
                if end == _FAILED:
                    raise Backtrack
                self._pos = end
                return result  # type: ignore[return-value]
        self._rule_stack.append(name)
        try:
            result = func(self)
        except Backtrack:
            self._pos = start
            if self._memoize:
                self._memo[key] = (None, _FAILED)
            raise
        finally:
            self._rule_stack.pop()
        if self._memoize:
            self._memo[key] = (result, self._pos)
        return result

    return wrapper


class Scanner:
    """Cursor over a decoded source string with checkpoint/restore.

    Parameters
    ----------
    source:
        The complete source text.  Decoding from bytes happens before the
        scanner is constructed.
    memoize:
        Cache the outcome of every @rule method per offset (packrat
        parsing), bounding the cost of backtracking.
    """

    def __init__(self, source: str, memoize: bool = True) -> None:
        self._memoize: bool = memoize
        self._memo: dict[tuple[str, int], tuple[object, int]] = {}
        self._memo_hits: int = 0
        self._source: str = source
        self._length: int = len(source)
        self._pos: int = 0
        self._line_starts: list[int] | None = None
        self._rule_stack: list[str] = []
        self._furthest: int = -1
        self._expected: list[str] = []
        self._furthest_rules: tuple[str, ...] = ()

    # ------------------------------------------------------------------
    # Cursor
    # ------------------------------------------------------------------

    @property
    def position(self) -> int:
        """Current codepoint offset."""
        return self._pos

    def at_end(self) -> bool:
        return self._pos >= self._length

    def peek(self, offset: int = 0) -> str:
        """Return the character at ``pos + offset`` without advancing."""
        idx = self._pos + offset
        return self._source[idx] if idx < self._length else ""

    def advance(self, count: int = 1) -> str:
        """Consume ``count`` characters and return them."""
        text = self._source[self._pos : self._pos + count]
        self._pos += len(text)
        return text

    def checkpoint(self) -> int:
        return self._pos

    def restore(self, checkpoint: int) -> None:
        self._pos = checkpoint

    def startswith(self, literal: str) -> bool:
        return self._source.startswith(literal, self._pos)

    def location(self, offset: int | None = None) -> Location:
        """Return the line/column ``Location`` of ``offset`` (default: current)."""
        if offset is None:
            offset = self._pos
        if self._line_starts is None:
            starts = [0]
            idx = self._source.find("\n")
            while idx != -1:
                starts.append(idx + 1)
                idx = self._source.find("\n", idx + 1)
            self._line_starts = starts
        line = bisect_right(self._line_starts, offset)
        return Location(offset=offset, line=line, column=offset - self._line_starts[line - 1] + 1)

    # ------------------------------------------------------------------
    # Matching helpers
    # ------------------------------------------------------------------

    def fail(self, expected: str) -> NoReturn:
        """Record an expectation at the current offset and backtrack."""
        pos = self._pos
        if pos > self._furthest:
            self._furthest = pos
            self._expected = [expected]
            self._furthest_rules = tuple(self._rule_stack)
        elif pos == self._furthest:
            if expected not in self._expected:
                self._expected.append(expected)
            self._furthest_rules = _common_prefix(self._furthest_rules, self._rule_stack)
        raise Backtrack

    def choice(self, *alternatives: Callable[[], T]) -> T:
        """Ordered choice: return the first alternative that matches."""
        start = self._pos
        for alternative in alternatives:
            try:
                return alternative()
            except Backtrack:
                self._pos = start
        raise Backtrack

    def match(self, literal: str) -> bool:
        """Consume ``literal`` if it is next; report whether it was."""
        if self._source.startswith(literal, self._pos):
            self._pos += len(literal)
            return True
        return False

    def expect(self, *literals: str) -> str:
        """Consume the first of ``literals`` that is next, else backtrack."""
        for literal in literals:
            if self._source.startswith(literal, self._pos):
                self._pos += len(literal)
                return literal
        self.fail(" or ".join(repr(lit) for lit in literals))

    def expect_keyword(self, word: str) -> None:
        """Consume ``word`` when it is not the prefix of a longer label."""
        end = self._pos + len(word)
        if (
            self._source.startswith(word, self._pos)
            and (end >= self._length or self._source[end] not in LABEL_CONTINUE)
        ):
            self._pos = end
            return
        self.fail(repr(word))

    def take_while(self, chars: frozenset[str]) -> str:
        """Consume the longest run of characters drawn from ``chars``."""
        start = self._pos
        while self._pos < self._length and self._source[self._pos] in chars:
            self._pos += 1
        return self._source[start : self._pos]

    def take_while1(self, chars: frozenset[str], expected: str) -> str:
        """Like ``take_while`` but at least one character must match."""
        text = self.take_while(chars)
        if not text:
            self.fail(expected)
        return text

    # ------------------------------------------------------------------
    # Whitespace and comments
    # ------------------------------------------------------------------

    def whitespace(self) -> None:
        """Consume zero or more whitespace chunks."""
        while self._whitespace_chunk():
            pass

    def whitespace1(self) -> None:
        """Consume one or more whitespace chunks, else backtrack."""
        if not self._whitespace_chunk():
            self.fail("whitespace")
        self.whitespace()

    def _whitespace_chunk(self) -> bool:
        ch = self.peek()
        if ch in (" ", "\t", "\n"):
            self._pos += 1
            return True
        if ch == "\r" and self.peek(1) == "\n":
            self._pos += 2
            return True
        if ch == "-" and self.peek(1) == "-":
            self._skip_line_comment()
            return True
        if ch == "{" and self.peek(1) == "-":
            self._skip_block_comment()
            return True
        return False

    def _skip_line_comment(self) -> None:
        """Consume a ``--`` comment and its line ending, if any."""
        end = self._source.find("\n", self._pos)
        self._pos = self._length if end == -1 else end + 1

    def _skip_block_comment(self) -> None:
        """Consume a ``{- ... -}`` comment, including nested comments."""
        start = self._pos
        self._pos += 2
        depth = 1
        while depth:
            if self._pos >= self._length:
                raise DhallSyntaxError(
                    "unterminated block comment",
                    self.location(start),
                    expected=("'-}'",),
                    rule_stack=tuple(self._rule_stack),
                    source=self._source,
                )
            if self.match("{-"):
                depth += 1
            elif self.match("-}"):
                depth -= 1
            else:
                self._pos += 1


def _common_prefix(rules: tuple[str, ...], stack: list[str]) -> tuple[str, ...]:
    """Return the rules ``rules`` and ``stack`` share from the outermost one."""
    size = 0
    for ours, theirs in zip(rules, stack):
        if ours != theirs:
            break
        size += 1
    return rules[:size]
