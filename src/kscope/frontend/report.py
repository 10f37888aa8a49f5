"""
Structured AST Report
=====================

ReportBuilder is a UnitHandler that turns every top-level unit into a
JSON-compatible dictionary, for tools that consume the parse result
outside Python.

Report Format
-------------
Definitions, externs and bare expressions:

    {"type": "tok_def",    "prototype": P, "body": E}
    {"type": "tok_extern", "prototype": P}
    {"type": "expression", "prototype": P, "body": E}

Prototypes carry the token kind each name would lex to:

    P = {"name": {"type": "tok_identifier", "value": "foo"},
         "args": [{"type": "tok_identifier", "value": "x"}, ...]}

Expressions, one shape per node kind:

    {"kind": "number",   "value": 1.0}
    {"kind": "variable", "name": "x"}
    {"kind": "binary",   "op": "+", "lhs": E, "rhs": E}
    {"kind": "call",     "callee": "f", "args": [E, ...]}

Syntax errors:

    {"type": "error", "message": "expected ')'", "location": "a.ks:1:7"}
"""

import json
from typing import Any

from kscope.frontend.ast import (
    BinaryExpr,
    CallExpr,
    Expr,
    Function,
    NumberExpr,
    Prototype,
    VariableExpr,
)
from kscope.frontend.errors import FrontendError
from kscope.frontend.lexer import TOKEN_NAMES, TokenKind, classify_text, token_name


def name_to_dict(name: str) -> dict[str, str]:
    """Report entry for a name: its reclassified token kind and its text."""
    return {"type": token_name(classify_text(name)), "value": name}


def prototype_to_dict(proto: Prototype) -> dict[str, Any]:
    """Report entry for a prototype."""
    return {
        "name": name_to_dict(proto.name),
        "args": [name_to_dict(param) for param in proto.params],
    }


def expr_to_dict(expr: Expr) -> dict[str, Any]:
    """Report entry for an expression tree."""
    match expr:
        case NumberExpr(value=value):
            return {"kind": "number", "value": value}
        case VariableExpr(name=name):
            return {"kind": "variable", "name": name}
        case BinaryExpr(op=op, lhs=lhs, rhs=rhs):
            return {
                "kind": "binary",
                "op": op,
                "lhs": expr_to_dict(lhs),
                "rhs": expr_to_dict(rhs),
            }
        case CallExpr(callee=callee, args=args):
            return {
                "kind": "call",
                "callee": callee,
                "args": [expr_to_dict(arg) for arg in args],
            }
    raise TypeError(f"not an expression node: {expr!r}")


class ReportBuilder:
    """
    Collects one report entry per top-level unit.

    Usage:
        report = ReportBuilder()
        TopLevelDriver(parser).run(report)
        print(report.dumps())

    Attributes:
        entries: Report entries in input order
    """

    def __init__(self) -> None:
        self.entries: list[dict[str, Any]] = []

    def handle_definition(self, function: Function) -> None:
        self.entries.append({
            "type": TOKEN_NAMES[TokenKind.DEF],
            "prototype": prototype_to_dict(function.prototype),
            "body": expr_to_dict(function.body),
        })

    def handle_extern(self, prototype: Prototype) -> None:
        self.entries.append({
            "type": TOKEN_NAMES[TokenKind.EXTERN],
            "prototype": prototype_to_dict(prototype),
        })

    def handle_top_level_expression(self, function: Function) -> None:
        self.entries.append({
            "type": "expression",
            "prototype": prototype_to_dict(function.prototype),
            "body": expr_to_dict(function.body),
        })

    def handle_error(self, error: FrontendError) -> None:
        self.entries.append({
            "type": "error",
            "message": error.message,
            "location": str(error.location) if error.location else None,
        })

    def dumps(self, indent: int = 4) -> str:
        """Render all entries as a JSON array."""
        return json.dumps(self.entries, indent=indent)
