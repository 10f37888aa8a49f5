# =============================================================================
# test_report.py - JSON Report Tests
# =============================================================================
# Tests for ReportBuilder and the dictionary serializers.
# =============================================================================

import json

from kscope.frontend.ast import BinaryExpr, CallExpr, NumberExpr, Prototype, VariableExpr
from kscope.frontend.driver import TopLevelDriver
from kscope.frontend.lexer import Lexer
from kscope.frontend.parser import Parser
from kscope.frontend.report import ReportBuilder, expr_to_dict, name_to_dict, prototype_to_dict


def build_report(source: str) -> ReportBuilder:
    report = ReportBuilder()
    TopLevelDriver(Parser(Lexer(source))).run(report)
    return report


class TestSerializers:
    """Test the per-node dictionary shapes."""

    def test_number(self):
        assert expr_to_dict(NumberExpr(1.5)) == {"kind": "number", "value": 1.5}

    def test_variable(self):
        assert expr_to_dict(VariableExpr("x")) == {"kind": "variable", "name": "x"}

    def test_binary(self):
        node = BinaryExpr("*", VariableExpr("a"), NumberExpr(2.0))
        assert expr_to_dict(node) == {
            "kind": "binary",
            "op": "*",
            "lhs": {"kind": "variable", "name": "a"},
            "rhs": {"kind": "number", "value": 2.0},
        }

    def test_call(self):
        node = CallExpr("f", (NumberExpr(1.0),))
        assert expr_to_dict(node) == {
            "kind": "call",
            "callee": "f",
            "args": [{"kind": "number", "value": 1.0}],
        }

    def test_names_are_reclassified(self):
        assert name_to_dict("foo") == {"type": "tok_identifier", "value": "foo"}
        assert name_to_dict("def") == {"type": "tok_def", "value": "def"}
        assert name_to_dict("__anon_expr") == {"type": "none", "value": "__anon_expr"}

    def test_prototype(self):
        assert prototype_to_dict(Prototype("sin", ("x",))) == {
            "name": {"type": "tok_identifier", "value": "sin"},
            "args": [{"type": "tok_identifier", "value": "x"}],
        }


class TestReportBuilder:
    """Test report entries produced through the driver."""

    def test_definition_entry(self):
        report = build_report("def foo(x y) x+y")
        assert report.entries == [{
            "type": "tok_def",
            "prototype": {
                "name": {"type": "tok_identifier", "value": "foo"},
                "args": [
                    {"type": "tok_identifier", "value": "x"},
                    {"type": "tok_identifier", "value": "y"},
                ],
            },
            "body": {
                "kind": "binary",
                "op": "+",
                "lhs": {"kind": "variable", "name": "x"},
                "rhs": {"kind": "variable", "name": "y"},
            },
        }]

    def test_extern_entry(self):
        report = build_report("extern cos(x)")
        assert report.entries[0]["type"] == "tok_extern"
        assert "body" not in report.entries[0]

    def test_expression_entry(self):
        report = build_report("foo(1)")
        entry = report.entries[0]
        assert entry["type"] == "expression"
        assert entry["prototype"]["name"]["value"] == "__anon_expr"
        assert entry["prototype"]["args"] == []
        assert entry["body"]["kind"] == "call"

    def test_error_entry(self):
        report = build_report(")")
        assert report.entries == [{
            "type": "error",
            "message": "unknown token when expecting an expression",
            "location": "<input>:1:1",
        }]

    def test_dumps_is_indented_json(self):
        report = build_report("1; extern f()")
        text = report.dumps()
        assert json.loads(text) == report.entries
        assert '\n    {' in text
