"""Unit tests for dhall.grammar.grammar — reference grammar constants and
the rule descriptions used in error messages.
"""
from __future__ import annotations

import pytest

from dhall.grammar.grammar import (
    FULL_GRAMMAR,
    GRAMMAR_EXPRESSION,
    GRAMMAR_IMPORTS,
    GRAMMAR_LABELS,
    GRAMMAR_LITERALS,
    GRAMMAR_WHITESPACE,
    RULE_DESCRIPTIONS,
)
from dhall.parser.parser import Parser
from dhall.parser.scanner import rule


class TestGrammarConstants:
    @pytest.mark.parametrize(
        "section",
        [GRAMMAR_WHITESPACE, GRAMMAR_LABELS, GRAMMAR_LITERALS, GRAMMAR_IMPORTS, GRAMMAR_EXPRESSION],
    )
    def test_sections_are_part_of_full_grammar(self, section: str) -> None:
        assert section in FULL_GRAMMAR

    def test_expression_alternatives_in_order(self) -> None:
        order = ['lambda whsp', '"if"', "let-binding+", "forall whsp", "operator-expression whsp arrow",
                 '"merge"', '"["', '"toMap"', "operator-expression ["]
        positions = [GRAMMAR_EXPRESSION.index(marker) for marker in order]
        assert positions == sorted(positions)

    def test_operator_cascade_is_documented(self) -> None:
        for name in ("import-alt-expression", "times-expression", "not-equal-expression"):
            assert name in GRAMMAR_EXPRESSION

    def test_block_comments_nest(self) -> None:
        assert "block-comment block-comment-continue" in GRAMMAR_WHITESPACE


class TestRuleDescriptions:
    def test_descriptions_name_parser_rules(self) -> None:
        rule_names = {
            attr.lstrip("_")
            for attr in dir(Parser)
            if attr.startswith("_") and hasattr(getattr(Parser, attr), "__wrapped__")
        }
        assert set(RULE_DESCRIPTIONS) <= rule_names

    def test_expression_has_a_description(self) -> None:
        assert RULE_DESCRIPTIONS["expression"] == "an expression"

    def test_rule_decorator_preserves_name(self) -> None:
        assert rule(lambda self: None).__name__ == "<lambda>"
