"""Unit tests for dhall.ast.nodes — immutability, equality and helpers."""
from __future__ import annotations

import dataclasses
from decimal import Decimal

import pytest

from dhall.ast.nodes import (
    DoubleLiteral,
    EnvVar,
    Import,
    ImportMode,
    Local,
    LocalAnchor,
    Location,
    NaturalLiteral,
    OperatorKind,
    RecordLiteral,
    RecordType,
    Remote,
    Scheme,
    TextLiteral,
    UnionType,
    Variable,
)


class TestLocation:
    def test_str_is_line_and_column(self) -> None:
        assert str(Location(offset=10, line=3, column=4)) == "3:4"

    def test_frozen(self) -> None:
        loc = Location(0, 1, 1)
        with pytest.raises(dataclasses.FrozenInstanceError):
            loc.line = 2  # type: ignore[misc]


class TestOperatorKind:
    def test_precedence_increases_through_the_table(self) -> None:
        precedences = [kind.precedence for kind in OperatorKind]
        assert precedences == sorted(precedences)
        assert len(set(precedences)) == len(precedences) == 12

    def test_loosest_and_tightest(self) -> None:
        assert min(OperatorKind, key=lambda k: k.precedence) is OperatorKind.IMPORT_ALT
        assert max(OperatorKind, key=lambda k: k.precedence) is OperatorKind.BOOL_NE

    def test_times_binds_tighter_than_plus(self) -> None:
        assert OperatorKind.NATURAL_TIMES.precedence > OperatorKind.NATURAL_PLUS.precedence

    def test_canonical_spelling(self) -> None:
        assert OperatorKind.COMBINE.value == "∧"
        assert OperatorKind.PREFER.value == "⫽"


class TestNodes:
    def test_structural_equality(self) -> None:
        assert Variable("x") == Variable("x", 0)
        assert Variable("x") != Variable("x", 1)

    def test_hashable(self) -> None:
        nodes = {NaturalLiteral(1), NaturalLiteral(1), Variable("x")}
        assert len(nodes) == 2

    def test_frozen(self) -> None:
        node = Variable("x")
        with pytest.raises(dataclasses.FrozenInstanceError):
            node.name = "y"  # type: ignore[misc]

    def test_record_as_dict_keeps_order(self) -> None:
        record = RecordLiteral(fields=(("b", NaturalLiteral(1)), ("a", NaturalLiteral(2))))
        assert list(record.as_dict()) == ["b", "a"]

    def test_record_type_as_dict(self) -> None:
        assert RecordType().as_dict() == {}

    def test_union_as_dict(self) -> None:
        union = UnionType(alternatives=(("A", None), ("B", Variable("T"))))
        assert union.as_dict() == {"A": None, "B": Variable("T")}

    def test_text_is_plain(self) -> None:
        assert TextLiteral(suffix="hi").is_plain
        assert not TextLiteral(chunks=(("a", Variable("x")),)).is_plain

    def test_double_keeps_exact_value(self) -> None:
        literal = DoubleLiteral(Decimal("0.1"))
        assert literal.value == Decimal("0.1")
        assert float(literal) == 0.1

    def test_double_nan_equals_itself(self) -> None:
        assert DoubleLiteral(Decimal("NaN")) == DoubleLiteral(Decimal("NaN"))
        assert hash(DoubleLiteral(Decimal("NaN"))) == hash(DoubleLiteral(Decimal("NaN")))

    def test_double_signed_zeros_differ(self) -> None:
        assert DoubleLiteral(Decimal("-0.0")) != DoubleLiteral(Decimal("0.0"))

    def test_double_is_not_equal_to_other_nodes(self) -> None:
        assert DoubleLiteral(Decimal("1")) != NaturalLiteral(1)


class TestImports:
    def test_defaults(self) -> None:
        node = Import(EnvVar("HOME"))
        assert node.hash is None
        assert node.mode is ImportMode.CODE

    def test_local(self) -> None:
        local = Local(LocalAnchor.PARENT, ("a", "b.dhall"))
        assert local.anchor.value == ".."

    def test_remote_url(self) -> None:
        remote = Remote(
            scheme=Scheme.HTTPS,
            host="example.com",
            path=("a", "b.dhall"),
            userinfo="me",
            port="8443",
            query="v=1",
        )
        assert remote.authority == "me@example.com:8443"
        assert remote.url == "https://me@example.com:8443/a/b.dhall?v=1"

    def test_remote_url_minimal(self) -> None:
        assert Remote(scheme=Scheme.HTTP, host="localhost").url == "http://localhost"
