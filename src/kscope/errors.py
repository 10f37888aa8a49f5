"""
Kscope Error Hierarchy
======================

This module defines the root of the exception hierarchy for the kscope
toolchain. All exceptions inherit from KscopeError, allowing callers to
catch every kscope-related error with a single except clause if desired.

Exception Hierarchy
-------------------
KscopeError (base)
└── FrontendError (see kscope.frontend.errors)
    ├── KSyntaxError - syntax errors detected by the parser
    │   ├── UnexpectedTokenError - token cannot start an expression
    │   └── MissingTokenError - required ')' / ',' / '(' / name absent
    └── FrontendAbortedError - too many errors, processing stopped

Design Philosophy
-----------------
Each exception captures source location information (filename, line, column)
when applicable, so that messages point the user at the offending input:

    filename:line:column: error: description
        source_line_text
            ^
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass


# =============================================================================
# Base Exception Class
# =============================================================================

class KscopeError(Exception):
    """
    Base exception for all kscope errors.

    All exceptions in the package inherit from this class, allowing callers
    to catch every kscope-related error with a single except clause:

        try:
            result = parse_program(source)
        except KscopeError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source text for error reporting.

    The lexer stamps every token with one of these, and the parser copies
    the location of the offending token into each syntax error. The frozen
    design keeps locations from being modified after creation.

    Attributes:
        filename: Name of the source (or "<stdin>" / "<input>")
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"
