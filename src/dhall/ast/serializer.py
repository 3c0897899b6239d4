"""AST serialization and deserialization for Dhall.

Provides round-trip serialization of ``Expression`` trees to and from
JSON and YAML.  The serialized form is a plain dict/list structure that
maps naturally to both formats; it is meant for tools that consume the
parse result, not for rendering Dhall source text.

Usage
-----
::

    from dhall.ast.serializer import AstSerializer

    serializer = AstSerializer()
    data = serializer.to_dict(expression)
    json_text = serializer.to_json(expression)
    expression2 = serializer.from_json(json_text)
    assert expression == expression2
"""
from __future__ import annotations

import json
from decimal import Decimal
from typing import Final

import yaml

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
from dhall.ast.numbers import int_to_digits, parse_signed

_TOO_DEEP: Final[str] = "expression is nested too deeply to serialize"


def _int_from_data(value: object) -> int:
    # Older documents and hand-written input may carry plain JSON numbers.
    if isinstance(value, int):
        return value
    return parse_signed(str(value))


class AstSerializer:
    """Converts between ``Expression`` trees and plain Python dicts.

    The serialized representation uses ``"kind"`` discriminator fields on
    every node so that deserialization is unambiguous.  Natural, integer
    and double literals are stored as decimal strings, so values of any
    size survive JSON and YAML unchanged, and import digests are stored
    as lowercase hex.

    Trees deeper than the interpreter recursion limit (a long operator
    chain is one such tree) cannot be serialized and raise ``ValueError``.
    """

    # ------------------------------------------------------------------
    # Serialization (AST → dict)
    # ------------------------------------------------------------------

    def to_dict(self, expr: Expression) -> dict[str, object]:
        """Serialize an ``Expression`` to a JSON-compatible dict."""
        try:
            return self._expr_to_dict(expr)
        except RecursionError:
            raise ValueError(_TOO_DEEP) from None

    def _opt_to_dict(self, expr: Expression | None) -> dict[str, object] | None:
        return self._expr_to_dict(expr) if expr is not None else None

    def _fields_to_list(
        self, fields: tuple[tuple[str, Expression | None], ...]
    ) -> list[dict[str, object]]:
        return [{"label": label, "value": self._opt_to_dict(value)} for label, value in fields]

    def _expr_to_dict(self, expr: Expression) -> dict[str, object]:
        if isinstance(expr, Variable):
            return {"kind": "Variable", "name": expr.name, "index": expr.index}
        if isinstance(expr, Builtin):
            return {"kind": "Builtin", "name": expr.name}
        if isinstance(expr, (Lambda, Pi)):
            return {
                "kind": type(expr).__name__,
                "param": expr.param,
                "param_type": self._expr_to_dict(expr.param_type),
                "body": self._expr_to_dict(expr.body),
            }
        if isinstance(expr, App):
            return {
                "kind": "App",
                "fn": self._expr_to_dict(expr.fn),
                "arg": self._expr_to_dict(expr.arg),
            }
        if isinstance(expr, Let):
            return {
                "kind": "Let",
                "bindings": [
                    {
                        "name": b.name,
                        "annotation": self._opt_to_dict(b.annotation),
                        "value": self._expr_to_dict(b.value),
                    }
                    for b in expr.bindings
                ],
                "body": self._expr_to_dict(expr.body),
            }
        if isinstance(expr, If):
            return {
                "kind": "If",
                "condition": self._expr_to_dict(expr.condition),
                "true_branch": self._expr_to_dict(expr.true_branch),
                "false_branch": self._expr_to_dict(expr.false_branch),
            }
        if isinstance(expr, Annotated):
            return {
                "kind": "Annotated",
                "expression": self._expr_to_dict(expr.expression),
                "annotation": self._expr_to_dict(expr.annotation),
            }
        if isinstance(expr, Operator):
            return {
                "kind": "Operator",
                "op": expr.kind.name,
                "lhs": self._expr_to_dict(expr.lhs),
                "rhs": self._expr_to_dict(expr.rhs),
            }
        if isinstance(expr, Merge):
            return {
                "kind": "Merge",
                "handler": self._expr_to_dict(expr.handler),
                "union": self._expr_to_dict(expr.union),
                "annotation": self._opt_to_dict(expr.annotation),
            }
        if isinstance(expr, ToMap):
            return {
                "kind": "ToMap",
                "expression": self._expr_to_dict(expr.expression),
                "annotation": self._opt_to_dict(expr.annotation),
            }
        if isinstance(expr, EmptyList):
            return {"kind": "EmptyList", "element_type": self._expr_to_dict(expr.element_type)}
        if isinstance(expr, NonEmptyList):
            return {"kind": "NonEmptyList", "elements": [self._expr_to_dict(e) for e in expr.elements]}
        if isinstance(expr, Some):
            return {"kind": "Some", "expression": self._expr_to_dict(expr.expression)}
        if isinstance(expr, RecordType):
            return {"kind": "RecordType", "fields": self._fields_to_list(expr.fields)}
        if isinstance(expr, RecordLiteral):
            return {"kind": "RecordLiteral", "fields": self._fields_to_list(expr.fields)}
        if isinstance(expr, UnionType):
            return {"kind": "UnionType", "alternatives": self._fields_to_list(expr.alternatives)}
        if isinstance(expr, Field):
            return {"kind": "Field", "record": self._expr_to_dict(expr.record), "label": expr.label}
        if isinstance(expr, Projection):
            return {
                "kind": "Projection",
                "record": self._expr_to_dict(expr.record),
                "labels": list(expr.labels),
            }
        if isinstance(expr, ProjectionByType):
            return {
                "kind": "ProjectionByType",
                "record": self._expr_to_dict(expr.record),
                "selector": self._expr_to_dict(expr.selector),
            }
        if isinstance(expr, TextLiteral):
            return {
                "kind": "TextLiteral",
                "chunks": [
                    {"text": text, "expression": self._expr_to_dict(e)} for text, e in expr.chunks
                ],
                "suffix": expr.suffix,
            }
        if isinstance(expr, DoubleLiteral):
            return {"kind": "DoubleLiteral", "value": str(expr.value)}
        if isinstance(expr, NaturalLiteral):
            return {"kind": "NaturalLiteral", "value": int_to_digits(expr.value)}
        if isinstance(expr, IntegerLiteral):
            return {"kind": "IntegerLiteral", "value": int_to_digits(expr.value)}
        if isinstance(expr, Import):
            return {
                "kind": "Import",
                "import_kind": self._import_kind_to_dict(expr.kind),
                "hash": expr.hash.hex() if expr.hash is not None else None,
                "mode": expr.mode.name,
            }
        raise TypeError(f"Unknown expression type: {type(expr)}")

    def _import_kind_to_dict(self, kind: ImportKind) -> dict[str, object]:
        if isinstance(kind, Missing):
            return {"kind": "Missing"}
        if isinstance(kind, Local):
            return {"kind": "Local", "anchor": kind.anchor.name, "components": list(kind.components)}
        if isinstance(kind, Remote):
            return {
                "kind": "Remote",
                "scheme": kind.scheme.name,
                "userinfo": kind.userinfo,
                "host": kind.host,
                "port": kind.port,
                "path": list(kind.path),
                "query": kind.query,
                "headers": self._opt_to_dict(kind.headers),
            }
        if isinstance(kind, EnvVar):
            return {"kind": "EnvVar", "name": kind.name}
        raise TypeError(f"Unknown import kind: {type(kind)}")

    # ------------------------------------------------------------------
    # Deserialization (dict → AST)
    # ------------------------------------------------------------------

    def from_dict(self, data: dict[str, object]) -> Expression:
        """Deserialize an ``Expression`` from a plain dict."""
        try:
            return self._expr_from_dict(data)
        except RecursionError:
            raise ValueError(_TOO_DEEP) from None

    def _opt_from_dict(self, d: dict[str, object] | None) -> Expression | None:
        return self._expr_from_dict(d) if d is not None else None

    def _fields_from_list(
        self, entries: list[dict[str, object]]
    ) -> tuple[tuple[str, Expression | None], ...]:
        return tuple((e["label"], self._opt_from_dict(e.get("value"))) for e in entries)

    def _expr_from_dict(self, d: dict[str, object]) -> Expression:
        kind = d["kind"]
        if kind == "Variable":
            return Variable(name=d["name"], index=int(d.get("index", 0)))
        if kind == "Builtin":
            return Builtin(name=d["name"])
        if kind in ("Lambda", "Pi"):
            node_type = Lambda if kind == "Lambda" else Pi
            return node_type(
                param=d["param"],
                param_type=self._expr_from_dict(d["param_type"]),
                body=self._expr_from_dict(d["body"]),
            )
        if kind == "App":
            return App(fn=self._expr_from_dict(d["fn"]), arg=self._expr_from_dict(d["arg"]))
        if kind == "Let":
            return Let(
                bindings=tuple(
                    Binding(
                        name=b["name"],
                        annotation=self._opt_from_dict(b.get("annotation")),
                        value=self._expr_from_dict(b["value"]),
                    )
                    for b in d["bindings"]
                ),
                body=self._expr_from_dict(d["body"]),
            )
        if kind == "If":
            return If(
                condition=self._expr_from_dict(d["condition"]),
                true_branch=self._expr_from_dict(d["true_branch"]),
                false_branch=self._expr_from_dict(d["false_branch"]),
            )
        if kind == "Annotated":
            return Annotated(
                expression=self._expr_from_dict(d["expression"]),
                annotation=self._expr_from_dict(d["annotation"]),
            )
        if kind == "Operator":
            return Operator(
                kind=OperatorKind[d["op"]],
                lhs=self._expr_from_dict(d["lhs"]),
                rhs=self._expr_from_dict(d["rhs"]),
            )
        if kind == "Merge":
            return Merge(
                handler=self._expr_from_dict(d["handler"]),
                union=self._expr_from_dict(d["union"]),
                annotation=self._opt_from_dict(d.get("annotation")),
            )
        if kind == "ToMap":
            return ToMap(
                expression=self._expr_from_dict(d["expression"]),
                annotation=self._opt_from_dict(d.get("annotation")),
            )
        if kind == "EmptyList":
            return EmptyList(element_type=self._expr_from_dict(d["element_type"]))
        if kind == "NonEmptyList":
            return NonEmptyList(elements=tuple(self._expr_from_dict(e) for e in d["elements"]))
        if kind == "Some":
            return Some(expression=self._expr_from_dict(d["expression"]))
        if kind == "RecordType":
            return RecordType(fields=self._fields_from_list(d.get("fields", [])))
        if kind == "RecordLiteral":
            return RecordLiteral(fields=self._fields_from_list(d.get("fields", [])))
        if kind == "UnionType":
            return UnionType(alternatives=self._fields_from_list(d.get("alternatives", [])))
        if kind == "Field":
            return Field(record=self._expr_from_dict(d["record"]), label=d["label"])
        if kind == "Projection":
            return Projection(record=self._expr_from_dict(d["record"]), labels=tuple(d["labels"]))
        if kind == "ProjectionByType":
            return ProjectionByType(
                record=self._expr_from_dict(d["record"]),
                selector=self._expr_from_dict(d["selector"]),
            )
        if kind == "TextLiteral":
            return TextLiteral(
                chunks=tuple(
                    (c["text"], self._expr_from_dict(c["expression"])) for c in d.get("chunks", [])
                ),
                suffix=d.get("suffix", ""),
            )
        if kind == "DoubleLiteral":
            return DoubleLiteral(value=Decimal(str(d["value"])))
        if kind == "NaturalLiteral":
            return NaturalLiteral(value=_int_from_data(d["value"]))
        if kind == "IntegerLiteral":
            return IntegerLiteral(value=_int_from_data(d["value"]))
        if kind == "Import":
            digest = d.get("hash")
            return Import(
                kind=self._import_kind_from_dict(d["import_kind"]),
                hash=bytes.fromhex(digest) if digest is not None else None,
                mode=ImportMode[d.get("mode", "CODE")],
            )
        raise ValueError(f"Unknown expression kind: {kind!r}")

    def _import_kind_from_dict(self, d: dict[str, object]) -> ImportKind:
        kind = d["kind"]
        if kind == "Missing":
            return Missing()
        if kind == "Local":
            return Local(anchor=LocalAnchor[d["anchor"]], components=tuple(d["components"]))
        if kind == "Remote":
            headers = self._opt_from_dict(d.get("headers"))
            if headers is not None and not isinstance(headers, Import):
                raise ValueError(f"Remote headers must be an import, got {type(headers).__name__}")
            return Remote(
                scheme=Scheme[d["scheme"]],
                host=d["host"],
                path=tuple(d.get("path", [])),
                userinfo=d.get("userinfo"),
                port=d.get("port"),
                query=d.get("query"),
                headers=headers,
            )
        if kind == "EnvVar":
            return EnvVar(name=d["name"])
        raise ValueError(f"Unknown import kind: {kind!r}")

    # ------------------------------------------------------------------
    # JSON helpers
    # ------------------------------------------------------------------

    def to_json(self, expr: Expression, indent: int = 2) -> str:
        """Serialize an ``Expression`` to a JSON string."""
        data = self.to_dict(expr)
        try:
            return json.dumps(data, indent=indent, ensure_ascii=False)
        except RecursionError:
            raise ValueError(_TOO_DEEP) from None

    def from_json(self, text: str) -> Expression:
        """Deserialize an ``Expression`` from a JSON string."""
        try:
            data: dict[str, object] = json.loads(text)
        except RecursionError:
            raise ValueError(_TOO_DEEP) from None
        return self.from_dict(data)

    # ------------------------------------------------------------------
    # YAML helpers
    # ------------------------------------------------------------------

    def to_yaml(self, expr: Expression) -> str:
        """Serialize an ``Expression`` to a YAML string."""
        data = self.to_dict(expr)
        try:
            return yaml.dump(data, default_flow_style=False, allow_unicode=True, sort_keys=False)
        except RecursionError:
            raise ValueError(_TOO_DEEP) from None

    def from_yaml(self, text: str) -> Expression:
        """Deserialize an ``Expression`` from a YAML string."""
        try:
            data: dict[str, object] = yaml.safe_load(text)
        except RecursionError:
            raise ValueError(_TOO_DEEP) from None
        return self.from_dict(data)
