"""
Kscope - Front End for a Kaleidoscope-Style Expression Language
===============================================================

This package turns kscope source text into abstract syntax trees.

Main Components
---------------
- **frontend**: lexer, parser, top-level driver and AST
    Converts source text into Function / Prototype trees

- **cli**: command-line tools
    ``ksparse`` prints the parsed units (tree or JSON), ``kslex`` the tokens

Quick Start
-----------
Parse a program:
    >>> from kscope import parse_program
    >>> result = parse_program("def add(x y) x+y; add(1, 2)")
    >>> result.definitions[0].prototype.params
    ('x', 'y')

Install an operator:
    >>> from kscope import BinopPrecedence
    >>> table = BinopPrecedence.default()
    >>> table["^"] = 50
    >>> result = parse_program("2^3*4", precedence=table)

Or use the command-line tools:
    $ ksparse program.ks
    $ ksparse --json -b '^=50' program.ks
    $ kslex program.ks

Version History
---------------
1.0.0 - Initial release with lexer, parser, driver and CLI
"""

__version__ = "1.0.0"
__author__ = "Kscope Contributors"

from kscope.errors import KscopeError, SourceLocation
from kscope.frontend import (
    BinopPrecedence,
    Frontend,
    FrontendOptions,
    FrontendResult,
    parse_program,
)

__all__ = [
    "__version__",
    "KscopeError",
    "SourceLocation",
    "BinopPrecedence",
    "Frontend",
    "FrontendOptions",
    "FrontendResult",
    "parse_program",
]
