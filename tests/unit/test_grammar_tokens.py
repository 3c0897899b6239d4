"""Unit tests for dhall.grammar.tokens — reserved words, operator spellings
and character classes.
"""
from __future__ import annotations

import pytest

from dhall.ast.nodes import OperatorKind
from dhall.grammar.tokens import (
    BUILTINS,
    KEYWORDS,
    LABEL_CONTINUE,
    LABEL_START,
    OPERATOR_SPELLINGS,
    PATH_CHARS,
    RESERVED,
    Keyword,
    is_printable,
    is_valid_non_ascii,
)


class TestKeywords:
    def test_lookup_by_text(self) -> None:
        assert KEYWORDS["toMap"] is Keyword.TO_MAP
        assert KEYWORDS["forall"] is Keyword.FORALL

    @pytest.mark.parametrize("word", ["if", "then", "else", "let", "in", "as", "using", "merge", "missing"])
    def test_reserved(self, word: str) -> None:
        assert word in RESERVED

    def test_builtins_are_reserved(self) -> None:
        assert BUILTINS <= RESERVED

    def test_keywords_are_not_builtins(self) -> None:
        assert not set(KEYWORDS) & BUILTINS

    @pytest.mark.parametrize("name", ["Natural/fold", "List", "Type", "Kind", "Sort", "None", "Text/replace"])
    def test_builtin_names(self, name: str) -> None:
        assert name in BUILTINS


class TestOperatorSpellings:
    def test_every_operator_has_a_spelling(self) -> None:
        assert {kind for _, kind, _ in OPERATOR_SPELLINGS} == set(OperatorKind)

    def test_longer_spellings_come_first(self) -> None:
        spellings = [spelling for spelling, _, _ in OPERATOR_SPELLINGS]
        for index, spelling in enumerate(spellings):
            for later in spellings[index + 1 :]:
                assert not later.startswith(spelling), (spelling, later)

    def test_plus_and_import_alt_need_whitespace(self) -> None:
        needs = {spelling for spelling, _, needs_whitespace in OPERATOR_SPELLINGS if needs_whitespace}
        assert needs == {"+", "?"}

    def test_ascii_and_unicode_spellings_agree(self) -> None:
        kinds = {spelling: kind for spelling, kind, _ in OPERATOR_SPELLINGS}
        assert kinds["/\\"] is kinds["∧"] is OperatorKind.COMBINE
        assert kinds["//"] is kinds["⫽"] is OperatorKind.PREFER
        assert kinds["//\\\\"] is kinds["⩓"] is OperatorKind.COMBINE_TYPES


class TestCharacterClasses:
    def test_labels(self) -> None:
        assert "_" in LABEL_START
        assert "1" not in LABEL_START
        assert {"-", "/", "1"} <= LABEL_CONTINUE

    @pytest.mark.parametrize("ch", ['"', "#", "(", ")", ",", "/", "<", ">", "?", "[", "\\", "]", "{", "}", " "])
    def test_path_delimiters_excluded(self, ch: str) -> None:
        assert ch not in PATH_CHARS

    @pytest.mark.parametrize("ch", ["a", "~", "`", "@", ".", "-", "$"])
    def test_path_chars(self, ch: str) -> None:
        assert ch in PATH_CHARS

    @pytest.mark.parametrize("ch, expected", [(" ", True), ("~", True), ("\x7f", False), ("\t", False), ("λ", True)])
    def test_is_printable(self, ch: str, expected: bool) -> None:
        assert is_printable(ch) is expected

    def test_surrogates_are_not_valid(self) -> None:
        assert not is_valid_non_ascii("\ud800")
        assert is_valid_non_ascii("é")
