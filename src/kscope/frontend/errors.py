"""
Front-End Error Hierarchy
=========================

This module defines the exceptions used by the kscope front end (lexer,
parser and top-level driver). All of them inherit from FrontendError, which
itself inherits from KscopeError.

Exception Hierarchy
-------------------
FrontendError (base for all front-end errors)
├── KSyntaxError - syntax errors found while parsing
│   ├── UnexpectedTokenError - token where an expression was required
│   └── MissingTokenError - missing ')', ',', '(' or function name
└── FrontendAbortedError - the error limit was reached

Reporting Model
---------------
The parser does not raise these exceptions to unwind. It builds the error
object at the point of detection, hands it to an ErrorCollector and returns
None; callers forward the None without further parsing. The exception
classes still exist so that the errors carry a uniform, formatted message
and so that embedding code may raise them (see ErrorCollector.raise_if_errors).

Error Message Format
--------------------
    calc.ks:3:9: error: expected ')'
        def f(x) (x+1
                    ^
    hint: close the parenthesized expression
"""

from typing import Optional, List

from kscope.errors import KscopeError, SourceLocation


# =============================================================================
# Base Front-End Exception
# =============================================================================

class FrontendError(KscopeError):
    """
    Base exception for all front-end errors.

    Provides message formatting with source location, an optional source
    line with a caret under the offending column, and an optional hint.

    Attributes:
        message: The error description
        location: Where in the source the error occurred
        hint: A suggestion for fixing the error
        source_line: The actual source text at the error location
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

            calc.ks:1:5: error: Expected '(' in prototype
                def foo x
                        ^
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class FrontendAbortedError(FrontendError):
    """
    Aggregate error raised when processing stops because of errors.

    The message is a pre-formatted report from ErrorCollector and is passed
    through untouched.
    """

    def _format_message(self) -> str:
        return self.message


# =============================================================================
# Syntax Errors (Parser)
# =============================================================================

class KSyntaxError(FrontendError):
    """
    Syntax error in kscope source.

    Every error the front end can detect is a syntax error: the language
    has no semantic checks, and the lexer accepts any input.
    """
    pass


class UnexpectedTokenError(KSyntaxError):
    """
    Unexpected token where an expression was required.

    Raised (reported) by parse_primary when the lookahead token is neither
    a number, an identifier nor '('.
    """

    def __init__(
        self,
        found: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.found = found
        super().__init__(
            "unknown token when expecting an expression",
            location=location,
            hint=f"found {found}",
            source_line=source_line,
        )


class MissingTokenError(KSyntaxError):
    """
    A required token is missing.

    Covers the closing ')' of a parenthesized expression, the ')' or ','
    of a call argument list, and the name, '(' and ')' of a prototype.
    The message text is passed in verbatim by the parser.

    Attributes:
        expected: Short description of the token that was required
    """

    def __init__(
        self,
        message: str,
        expected: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.expected = expected
        super().__init__(
            message,
            location=location,
            source_line=source_line,
        )


# =============================================================================
# Error Collection (for multi-error reporting)
# =============================================================================

class ErrorCollector:
    """
    Collects syntax errors for batch reporting.

    The parser reports each error exactly once, into the collector it was
    given. The driver keeps going after an error (skipping one token), so a
    single run can report many errors.

    Example:
        collector = ErrorCollector(max_errors=20)
        parser = Parser(lexer, precedence, errors=collector)
        TopLevelDriver(parser).run(handler)

        if collector.has_errors():
            print(collector.report())
    """

    def __init__(self, max_errors: Optional[int] = None):
        """
        Initialize the error collector.

        Args:
            max_errors: Maximum errors to collect before should_stop() is True;
                        None or 0 means no limit
        """
        self.errors: List[FrontendError] = []
        self.max_errors = max_errors

    def add(self, error: FrontendError) -> None:
        """Add an error to the collection."""
        self.errors.append(error)

    def has_errors(self) -> bool:
        """Return True if any errors have been collected."""
        return len(self.errors) > 0

    def should_stop(self) -> bool:
        """Return True if a limit is set and has been reached."""
        if not self.max_errors:
            return False
        return len(self.errors) >= self.max_errors

    def error_count(self) -> int:
        """Return the number of collected errors."""
        return len(self.errors)

    def report(self) -> str:
        """Format all errors for display, followed by a summary line."""
        lines = []

        for error in self.errors:
            lines.append(str(error))
            lines.append("")

        error_word = "error" if len(self.errors) == 1 else "errors"
        lines.append(f"{len(self.errors)} {error_word}")

        return "\n".join(lines)

    def clear(self) -> None:
        """Clear all collected errors."""
        self.errors.clear()

    def raise_if_errors(self) -> None:
        """Raise a FrontendAbortedError if any errors were collected."""
        if self.has_errors():
            raise FrontendAbortedError(self.report())
