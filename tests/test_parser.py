# =============================================================================
# test_parser.py - Parser Unit Tests
# =============================================================================
# Tests for the kscope precedence-climbing parser.
#
# Test coverage includes:
#   - Primary expressions: numbers, variables, calls, parentheses
#   - Operator precedence and left associativity
#   - Live lookups in the caller's precedence table
#   - Prototypes, definitions, externs and wrapped top-level expressions
#   - Error reporting (one error per failure, None returned)
# =============================================================================

from kscope.frontend.ast import (
    BinaryExpr,
    CallExpr,
    Function,
    NumberExpr,
    Prototype,
    VariableExpr,
    expr_to_string,
)
from kscope.frontend.errors import MissingTokenError, UnexpectedTokenError
from kscope.frontend.lexer import Lexer, TokenKind
from kscope.frontend.parser import ANON_FUNCTION_NAME, Parser
from kscope.frontend.precedence import BinopPrecedence


# =============================================================================
# Helper Functions
# =============================================================================

def make_parser(source: str, precedence: BinopPrecedence = None) -> Parser:
    """Create a parser over source with its first token loaded."""
    parser = Parser(Lexer(source, "<test>"), precedence)
    parser.advance()
    return parser


def parse_expr(source: str, precedence: BinopPrecedence = None):
    """Parse a single expression and return it."""
    return make_parser(source, precedence).parse_expression()


def num(value: float) -> NumberExpr:
    return NumberExpr(float(value))


def var(name: str) -> VariableExpr:
    return VariableExpr(name)


# =============================================================================
# Primary Expressions
# =============================================================================

class TestPrimaryExpressions:
    """Test numbers, variables, calls and parenthesized expressions."""

    def test_number(self):
        assert parse_expr("42") == num(42)

    def test_variable(self):
        assert parse_expr("x") == var("x")

    def test_call_with_arguments(self):
        """foo(1, 2+3) is a call with two arguments."""
        assert parse_expr("foo(1, 2+3)") == CallExpr(
            "foo",
            (num(1), BinaryExpr("+", num(2), num(3))),
        )

    def test_call_without_arguments(self):
        assert parse_expr("foo()") == CallExpr("foo", ())

    def test_nested_call(self):
        assert parse_expr("f(g(x))") == CallExpr("f", (CallExpr("g", (var("x"),)),))

    def test_parentheses_override_precedence(self):
        assert parse_expr("(1+2)*3") == BinaryExpr(
            "*",
            BinaryExpr("+", num(1), num(2)),
            num(3),
        )

    def test_parentheses_leave_no_node(self):
        """Parentheses only group; the inner expression is returned as is."""
        assert parse_expr("((x))") == var("x")

    def test_number_records_location(self):
        expr = parse_expr("  7")
        assert (expr.location.line, expr.location.column) == (1, 3)


# =============================================================================
# Binary Operators
# =============================================================================

class TestBinaryOperators:
    """Test precedence climbing with the default operator table."""

    def test_higher_precedence_binds_tighter(self):
        """1+2*3 parses as 1+(2*3)."""
        assert parse_expr("1+2*3") == BinaryExpr(
            "+",
            num(1),
            BinaryExpr("*", num(2), num(3)),
        )

    def test_equal_precedence_is_left_associative(self):
        """1-2-3 parses as (1-2)-3."""
        assert parse_expr("1-2-3") == BinaryExpr(
            "-",
            BinaryExpr("-", num(1), num(2)),
            num(3),
        )

    def test_lower_precedence_after_higher(self):
        assert expr_to_string(parse_expr("1*2+3")) == "((1 * 2) + 3)"

    def test_mixed_chain(self):
        assert expr_to_string(parse_expr("1+2*3-4")) == "((1 + (2 * 3)) - 4)"

    def test_comparison_binds_loosest(self):
        assert expr_to_string(parse_expr("a<b+c")) == "(a < (b + c))"

    def test_operands_may_be_calls(self):
        assert expr_to_string(parse_expr("f(x)*2")) == "(f(x) * 2)"

    def test_unknown_operator_ends_expression(self):
        """A character with no precedence stops the chain without error."""
        parser = make_parser("1 ? 2")
        assert parser.parse_expression() == num(1)
        assert parser.current.is_char("?")
        assert not parser.errors.has_errors()

    def test_installed_operator_is_seen_live(self):
        """Operators added to the table after construction take effect."""
        table = BinopPrecedence.default()
        parser = make_parser("2^3*4", table)
        table["^"] = 50
        assert expr_to_string(parser.parse_expression()) == "((2 ^ 3) * 4)"

    def test_custom_table_changes_grouping(self):
        table = BinopPrecedence({"+": 50, "*": 10})
        assert expr_to_string(parse_expr("1+2*3", table)) == "((1 + 2) * 3)"

    def test_non_positive_precedence_disables_operator(self):
        table = BinopPrecedence.default()
        table["+"] = 0
        parser = make_parser("1+2", table)
        assert parser.parse_expression() == num(1)
        assert parser.current.is_char("+")


# =============================================================================
# Declarations
# =============================================================================

class TestDeclarations:
    """Test prototypes, definitions, externs and top-level expressions."""

    def test_definition(self):
        """def foo(x y) x+y"""
        parser = make_parser("def foo(x y) x+y")
        assert parser.parse_definition() == Function(
            Prototype("foo", ("x", "y")),
            BinaryExpr("+", var("x"), var("y")),
        )
        assert parser.current.kind is TokenKind.EOF

    def test_definition_without_parameters(self):
        parser = make_parser("def one() 1")
        assert parser.parse_definition() == Function(Prototype("one", ()), num(1))

    def test_duplicate_parameters_accepted(self):
        parser = make_parser("def f(x x) x")
        assert parser.parse_definition().prototype.params == ("x", "x")

    def test_extern(self):
        parser = make_parser("extern sin(x)")
        assert parser.parse_extern() == Prototype("sin", ("x",))

    def test_top_level_expression_is_wrapped(self):
        parser = make_parser("1+2")
        function = parser.parse_top_level_expression()
        assert function.prototype == Prototype(ANON_FUNCTION_NAME, ())
        assert function.body == BinaryExpr("+", num(1), num(2))

    def test_anonymous_name_is_configurable(self):
        parser = Parser(Lexer("x"), anon_name="main")
        parser.advance()
        assert parser.parse_top_level_expression().prototype.name == "main"

    def test_anonymous_name(self):
        assert ANON_FUNCTION_NAME == "__anon_expr"


# =============================================================================
# Error Reporting
# =============================================================================

class TestParseErrors:
    """Test that failures return None and report exactly one error."""

    def assert_single_error(self, parser, error_type, message):
        errors = parser.errors.errors
        assert len(errors) == 1
        assert isinstance(errors[0], error_type)
        assert errors[0].message == message

    def test_unexpected_token(self):
        parser = make_parser(")")
        assert parser.parse_expression() is None
        self.assert_single_error(
            parser, UnexpectedTokenError, "unknown token when expecting an expression"
        )

    def test_missing_operand(self):
        parser = make_parser("1+")
        assert parser.parse_expression() is None
        self.assert_single_error(
            parser, UnexpectedTokenError, "unknown token when expecting an expression"
        )

    def test_unclosed_parenthesis(self):
        parser = make_parser("(1+2")
        assert parser.parse_expression() is None
        self.assert_single_error(parser, MissingTokenError, "expected ')'")

    def test_error_location(self):
        parser = make_parser("(1+2")
        parser.parse_expression()
        error = parser.errors.errors[0]
        assert str(error.location) == "<test>:1:5"
        assert "error: expected ')'" in str(error)

    def test_bad_argument_separator(self):
        parser = make_parser("foo(1 2)")
        assert parser.parse_expression() is None
        self.assert_single_error(
            parser, MissingTokenError, "Expected ')' or ',' in argument list"
        )

    def test_error_inside_argument(self):
        parser = make_parser("foo(1, )")
        assert parser.parse_expression() is None
        self.assert_single_error(
            parser, UnexpectedTokenError, "unknown token when expecting an expression"
        )

    def test_missing_function_name(self):
        parser = make_parser("def 1(x) x")
        assert parser.parse_definition() is None
        self.assert_single_error(
            parser, MissingTokenError, "Expected function name in prototype"
        )

    def test_missing_open_paren(self):
        parser = make_parser("extern foo x")
        assert parser.parse_extern() is None
        self.assert_single_error(parser, MissingTokenError, "Expected '(' in prototype")

    def test_unterminated_parameter_list(self):
        parser = make_parser("def foo(x y")
        assert parser.parse_definition() is None
        self.assert_single_error(parser, MissingTokenError, "Expected ')' in prototype")

    def test_comma_in_parameter_list(self):
        """Parameters are separated by whitespace, not commas."""
        parser = make_parser("def foo(x, y) x")
        assert parser.parse_definition() is None
        self.assert_single_error(parser, MissingTokenError, "Expected ')' in prototype")

    def test_bad_body_discards_definition(self):
        parser = make_parser("def foo(x) )")
        assert parser.parse_definition() is None
        assert parser.errors.error_count() == 1
