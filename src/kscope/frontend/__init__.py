"""
Kscope Front End
================

This package implements the front end of the kscope expression language,
a small Kaleidoscope-style language with floating-point numbers, function
definitions, extern declarations and infix operators.

Components
----------
- A lexer turning a character stream into tokens
- An immutable AST for expressions, prototypes and functions
- A precedence-climbing parser driven by a caller-owned operator table
- A top-level driver that dispatches units and recovers from errors
- A JSON report builder for the parsed units

Pipeline
--------
    Source → Lexer → Parser → TopLevelDriver → handler / FrontendResult

Usage
-----
>>> from kscope.frontend import parse_program, expr_to_string
>>> result = parse_program("1+2*3")
>>> expr_to_string(result.expressions[0].body)
'(1 + (2 * 3))'

Language
--------
- Everything is a double; there are no statements, only expressions
- ``def name(a b) body`` defines a function (parameters are not
  comma-separated)
- ``extern name(a b)`` declares one
- Any other top-level expression is wrapped in an anonymous function
- ``#`` starts a comment running to the end of the line
"""

from kscope.frontend.ast import (
    ASTPrinter,
    BinaryExpr,
    CallExpr,
    Expr,
    Function,
    NumberExpr,
    Prototype,
    VariableExpr,
    expr_to_string,
    walk,
)
from kscope.frontend.driver import TopLevelDriver, TopLevelUnit, UnitHandler, UnitKind
from kscope.frontend.errors import (
    ErrorCollector,
    FrontendAbortedError,
    FrontendError,
    KSyntaxError,
    MissingTokenError,
    UnexpectedTokenError,
)
from kscope.frontend.frontend import Frontend, FrontendOptions, FrontendResult, parse_program
from kscope.frontend.lexer import Lexer, Token, TokenKind, classify_text, token_name
from kscope.frontend.parser import ANON_FUNCTION_NAME, Parser
from kscope.frontend.precedence import DEFAULT_PRECEDENCE, BinopPrecedence
from kscope.frontend.report import ReportBuilder

__all__ = [
    # Main API
    "Frontend",
    "FrontendOptions",
    "FrontendResult",
    "parse_program",
    # Errors
    "FrontendError",
    "FrontendAbortedError",
    "KSyntaxError",
    "UnexpectedTokenError",
    "MissingTokenError",
    "ErrorCollector",
    # Lexer
    "Lexer",
    "Token",
    "TokenKind",
    "classify_text",
    "token_name",
    # Parser
    "Parser",
    "ANON_FUNCTION_NAME",
    "BinopPrecedence",
    "DEFAULT_PRECEDENCE",
    # Driver
    "TopLevelDriver",
    "TopLevelUnit",
    "UnitHandler",
    "UnitKind",
    "ReportBuilder",
    # AST Nodes
    "Expr",
    "NumberExpr",
    "VariableExpr",
    "BinaryExpr",
    "CallExpr",
    "Prototype",
    "Function",
    "ASTPrinter",
    "expr_to_string",
    "walk",
]
