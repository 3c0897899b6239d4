"""Dhall AST module.

Exports all AST node types and the serializer for converting AST trees
to and from JSON/YAML.
"""
from __future__ import annotations

from dhall.ast.nodes import (
    Annotated,
    App,
    Binding,
    Builtin,
    DoubleLiteral,
    EmptyList,
    EnvVar,
    Expression,
    Field,
    If,
    Import,
    ImportKind,
    ImportMode,
    IntegerLiteral,
    Lambda,
    Let,
    Local,
    LocalAnchor,
    Location,
    Merge,
    Missing,
    NaturalLiteral,
    NonEmptyList,
    Operator,
    OperatorKind,
    Pi,
    Projection,
    ProjectionByType,
    RecordLiteral,
    RecordType,
    Remote,
    Scheme,
    Some,
    TextLiteral,
    ToMap,
    UnionType,
    Variable,
)
from dhall.ast.serializer import AstSerializer

__all__ = [
    "Location",
    # Enums
    "OperatorKind",
    "ImportMode",
    "LocalAnchor",
    "Scheme",
    # Import kinds
    "ImportKind",
    "Missing",
    "Local",
    "Remote",
    "EnvVar",
    # Expression types
    "Expression",
    "Variable",
    "Builtin",
    "Lambda",
    "Pi",
    "App",
    "Binding",
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
    # Serializer
    "AstSerializer",
]
