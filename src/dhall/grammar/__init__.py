"""Dhall grammar module.

Exports the reserved-word tables, operator spellings and formal grammar
constants.
"""
from __future__ import annotations

from dhall.grammar.grammar import (
    FULL_GRAMMAR,
    GRAMMAR_EXPRESSION,
    GRAMMAR_IMPORTS,
    GRAMMAR_LABELS,
    GRAMMAR_LITERALS,
    GRAMMAR_WHITESPACE,
    RULE_DESCRIPTIONS,
)
from dhall.grammar.tokens import BUILTINS, KEYWORDS, OPERATOR_SPELLINGS, RESERVED, Keyword

__all__ = [
    # Vocabulary
    "Keyword",
    "KEYWORDS",
    "BUILTINS",
    "RESERVED",
    "OPERATOR_SPELLINGS",
    # Grammar constants
    "FULL_GRAMMAR",
    "GRAMMAR_WHITESPACE",
    "GRAMMAR_LABELS",
    "GRAMMAR_LITERALS",
    "GRAMMAR_IMPORTS",
    "GRAMMAR_EXPRESSION",
    "RULE_DESCRIPTIONS",
]
