"""
Kscope Abstract Syntax Tree (AST) Definitions
=============================================

This module defines the AST produced by the kscope parser.

Node Hierarchy
--------------
Expr (closed union)
├── NumberExpr - numeric literal
├── VariableExpr - variable reference
├── BinaryExpr - infix operator applied to two operands
└── CallExpr - function call with argument expressions

Declarations
├── Prototype - function name and parameter names
└── Function - prototype plus body expression

Design Notes
------------
- Expr is a plain Union of four frozen dataclasses; consumers inspect it
  with ``match`` and there is no common base class.
- Nodes are immutable and form strict trees: every child is owned by
  exactly one parent, and call arguments / parameters are tuples.
- Each node records where it came from (``location``), but locations are
  excluded from equality so that trees can be compared structurally.
- The parser only ever hands out fully built trees.
"""

from dataclasses import dataclass, field
from typing import Iterator, Optional, Union

from kscope.errors import SourceLocation


# =============================================================================
# Expression Nodes
# =============================================================================

@dataclass(frozen=True)
class NumberExpr:
    """
    Numeric literal such as ``1.0``.

    Attributes:
        value: The literal's value
    """
    value: float
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class VariableExpr:
    """
    Reference to a variable, e.g. ``x``.

    Attributes:
        name: The variable name
    """
    name: str
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class BinaryExpr:
    """
    Binary operation ``lhs op rhs``.

    Attributes:
        op: The operator character
        lhs: Left operand
        rhs: Right operand
    """
    op: str
    lhs: "Expr"
    rhs: "Expr"
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class CallExpr:
    """
    Function call ``callee(arg, ...)``.

    Attributes:
        callee: Name of the called function
        args: Argument expressions, in order
    """
    callee: str
    args: tuple["Expr", ...] = ()
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)


Expr = Union[NumberExpr, VariableExpr, BinaryExpr, CallExpr]


# =============================================================================
# Declarations
# =============================================================================

@dataclass(frozen=True)
class Prototype:
    """
    Function signature: name and parameter names.

    Parameter order is significant. Duplicate names are accepted.

    Attributes:
        name: Function name
        params: Parameter names, in order
    """
    name: str
    params: tuple[str, ...] = ()
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class Function:
    """
    Function definition: a prototype plus its body expression.

    Bare top-level expressions are wrapped in a Function whose prototype
    has a reserved name and no parameters.

    Attributes:
        prototype: The function signature
        body: The body expression
    """
    prototype: Prototype
    body: Expr


# =============================================================================
# Traversal Helpers
# =============================================================================

def children(expr: Expr) -> tuple[Expr, ...]:
    """Return the direct sub-expressions of an expression node."""
    match expr:
        case NumberExpr() | VariableExpr():
            return ()
        case BinaryExpr(lhs=lhs, rhs=rhs):
            return (lhs, rhs)
        case CallExpr(args=args):
            return args
    raise TypeError(f"not an expression node: {expr!r}")


def walk(expr: Expr) -> Iterator[Expr]:
    """Yield an expression and all of its descendants, pre-order."""
    stack = [expr]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(children(node)))


def expr_to_string(expr: Expr) -> str:
    """
    Render an expression on one line, fully parenthesized.

    Example:
        1+2*3  ->  (1 + (2 * 3))
    """
    match expr:
        case NumberExpr(value=value):
            return f"{value:g}"
        case VariableExpr(name=name):
            return name
        case BinaryExpr(op=op, lhs=lhs, rhs=rhs):
            return f"({expr_to_string(lhs)} {op} {expr_to_string(rhs)})"
        case CallExpr(callee=callee, args=args):
            return f"{callee}({', '.join(expr_to_string(a) for a in args)})"
    raise TypeError(f"not an expression node: {expr!r}")


# =============================================================================
# AST Pretty Printer
# =============================================================================

class ASTPrinter:
    """
    Pretty printer for AST debugging.

    Produces an indented, human-readable tree.

    Usage:
        printer = ASTPrinter()
        print(printer.print(function))

    Output for ``def foo(x y) x+y``:
        Function: foo(x, y)
          Binary '+'
            Variable: x
            Variable: y
    """

    def __init__(self) -> None:
        self.output: list[str] = []
        self.indent_level = 0

    def print(self, node: Union[Function, Prototype, Expr]) -> str:
        """Print a function, prototype or expression and return the text."""
        self.output = []
        self.indent_level = 0
        self._visit(node)
        return "\n".join(self.output)

    def _emit(self, text: str) -> None:
        indent = "  " * self.indent_level
        self.output.append(f"{indent}{text}")

    def _visit(self, node: Union[Function, Prototype, Expr]) -> None:
        match node:
            case Function(prototype=proto, body=body):
                self._emit(f"Function: {proto.name}({', '.join(proto.params)})")
                self._nested(body)
            case Prototype(name=name, params=params):
                self._emit(f"Extern: {name}({', '.join(params)})")
            case NumberExpr(value=value):
                self._emit(f"Number: {value:g}")
            case VariableExpr(name=name):
                self._emit(f"Variable: {name}")
            case BinaryExpr(op=op, lhs=lhs, rhs=rhs):
                self._emit(f"Binary {op!r}")
                self._nested(lhs, rhs)
            case CallExpr(callee=callee, args=args):
                self._emit(f"Call: {callee}")
                self._nested(*args)
            case _:
                raise TypeError(f"cannot print {type(node).__name__}")

    def _nested(self, *nodes: Expr) -> None:
        self.indent_level += 1
        for node in nodes:
            self._visit(node)
        self.indent_level -= 1
