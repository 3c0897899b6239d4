#!/usr/bin/env python3
"""Example: Quickstart — dhall-lang

Minimal working example: parse a Dhall expression, walk the AST,
dump it to JSON and handle a syntax error.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install dhall-lang
"""
from __future__ import annotations

import dhall
from dhall.ast import Let, RecordLiteral
from dhall.parser import DhallSyntaxError

DHALL_SOURCE = '''
let greeting = "Hello"

let Person = { name : Text, age : Natural }

in  { message = "${greeting}, world"
    , owner = { name = "Ada", age = 36 } : Person
    , ports = [ 8080, 8443 ]
    }
'''


def main() -> None:
    print(f"dhall-lang version: {dhall.__version__}")

    # Step 1: Parse Dhall source into an AST
    expr = dhall.parse(DHALL_SOURCE)
    assert isinstance(expr, Let)
    print(f"Parsed {len(expr.bindings)} let bindings: "
          f"{', '.join(b.name for b in expr.bindings)}")

    # Step 2: Inspect the body
    body = expr.body
    assert isinstance(body, RecordLiteral)
    print(f"Record fields: {', '.join(body.as_dict())}")

    # Step 3: Dump the AST for other tools
    text = dhall.to_json(expr)
    print(f"\nJSON AST ({len(text)} chars):")
    print(text[:200])

    # Step 4: Syntax errors point at the furthest position reached
    try:
        dhall.parse("{ port = 8080, host = }")
    except DhallSyntaxError as exc:
        print(f"\n{exc}")
        print(exc.excerpt())


if __name__ == "__main__":
    main()
