"""
Kscope Front-End Main Module
============================

This module provides the one-call interface to the front end. It wires
the pipeline together and collects the results:

    Source → Lexer → Parser → TopLevelDriver → FrontendResult

Usage
-----
Programmatic:
    >>> from kscope.frontend import parse_program
    >>> result = parse_program("def double(x) x*2; double(21)")
    >>> [unit.kind.name for unit in result.units]
    ['DEFINITION', 'EXPRESSION']

With options:
    >>> options = FrontendOptions.from_env()
    >>> options.precedence["^"] = 50
    >>> result = Frontend(options).parse_source("2^8", "pow.ks")

Configuration
-------------
FrontendOptions holds everything the pipeline needs from the embedding
application. FrontendOptions.from_env() reads overrides from:

    KSCOPE_BINOPS      extra operators, e.g. "^=50,/=40" (merged over the
                       default table)
    KSCOPE_ANON_NAME   name for wrapped top-level expressions
    KSCOPE_MAX_ERRORS  stop after this many syntax errors (unset or 0: parse
                       to end of input)
"""

import io
import logging
import os
from dataclasses import dataclass, field
from typing import Callable, Optional, TextIO

from kscope.frontend.ast import Function, Prototype
from kscope.frontend.driver import TopLevelDriver, TopLevelUnit, UnitKind
from kscope.frontend.errors import ErrorCollector, FrontendError
from kscope.frontend.lexer import Lexer
from kscope.frontend.parser import ANON_FUNCTION_NAME, Parser
from kscope.frontend.precedence import BinopPrecedence

logger = logging.getLogger(__name__)


@dataclass
class FrontendOptions:
    """
    Front-end configuration options.

    Attributes:
        precedence: Binary operator table, shared with the parser
        anon_name: Prototype name for wrapped top-level expressions
        filename: Default source name used in error locations
        max_errors: Stop parsing after this many syntax errors (None: never)
    """
    precedence: BinopPrecedence = field(default_factory=BinopPrecedence.default)
    anon_name: str = ANON_FUNCTION_NAME
    filename: str = "<stdin>"
    max_errors: Optional[int] = None

    @classmethod
    def from_env(cls) -> "FrontendOptions":
        """
        Create FrontendOptions from environment variables.

        Invalid values are ignored and the default is kept.
        """
        options = cls()

        if binops := os.environ.get("KSCOPE_BINOPS"):
            for spec in binops.split(","):
                if not spec.strip():
                    continue
                try:
                    op, prec = BinopPrecedence.parse_spec(spec)
                except ValueError as e:
                    logger.warning(f"ignoring KSCOPE_BINOPS entry: {e}")
                    continue
                options.precedence[op] = prec

        if anon_name := os.environ.get("KSCOPE_ANON_NAME"):
            options.anon_name = anon_name

        if max_errors := os.environ.get("KSCOPE_MAX_ERRORS"):
            try:
                options.max_errors = max(0, int(max_errors)) or None
            except ValueError:
                pass  # Ignore invalid values

        return options


@dataclass
class FrontendResult:
    """
    Result of running the front end over one source.

    Attributes:
        filename: Source name
        units: Every dispatched top-level unit, in input order
        errors: Every reported syntax error
        token_count: Number of tokens the lexer produced
        aborted: True if parsing stopped at the error limit
    """
    filename: str
    units: list[TopLevelUnit] = field(default_factory=list)
    errors: list[FrontendError] = field(default_factory=list)
    token_count: int = 0
    aborted: bool = False

    @property
    def success(self) -> bool:
        """True if no syntax errors were reported."""
        return not self.errors

    @property
    def definitions(self) -> list[Function]:
        return [u.node for u in self.units if u.kind is UnitKind.DEFINITION]

    @property
    def externs(self) -> list[Prototype]:
        return [u.node for u in self.units if u.kind is UnitKind.EXTERN]

    @property
    def expressions(self) -> list[Function]:
        return [u.node for u in self.units if u.kind is UnitKind.EXPRESSION]


class Frontend:
    """
    Runs lexer, parser and driver over a whole source.

    Example:
        frontend = Frontend()
        result = frontend.parse_source("extern sin(x); sin(1)")
        print(result.externs)

    Attributes:
        options: Front-end configuration
    """

    def __init__(self, options: Optional[FrontendOptions] = None):
        self.options = options or FrontendOptions()

    def make_parser(self, stream: TextIO, filename: Optional[str] = None) -> Parser:
        """Build a parser (with its own lexer and error collector) over a stream."""
        lexer = Lexer(stream, filename or self.options.filename)
        return Parser(
            lexer,
            self.options.precedence,
            errors=ErrorCollector(max_errors=self.options.max_errors),
            anon_name=self.options.anon_name,
        )

    def parse_stream(
        self,
        stream: TextIO,
        filename: Optional[str] = None,
        on_unit: Optional[Callable[[TopLevelUnit], None]] = None,
        prompt: Optional[Callable[[], None]] = None,
    ) -> FrontendResult:
        """
        Parse every top-level unit in a stream.

        Args:
            stream: Text stream to read from
            filename: Source name for error locations
            on_unit: Called with each unit as soon as it is parsed
            prompt: Called before waiting on each new unit

        Returns:
            FrontendResult with all units and errors
        """
        parser = self.make_parser(stream, filename)
        driver = TopLevelDriver(parser, prompt=prompt)
        result = FrontendResult(filename=parser.lexer.filename)

        for unit in driver.units():
            result.units.append(unit)
            if on_unit is not None:
                on_unit(unit)

        result.errors = list(parser.errors.errors)
        result.token_count = parser.lexer.token_count
        result.aborted = driver.aborted

        logger.info(
            f"{result.filename}: {len(result.units)} units, "
            f"{len(result.errors)} errors, {result.token_count} tokens"
        )
        return result

    def parse_source(self, source: str, filename: Optional[str] = None) -> FrontendResult:
        """Parse every top-level unit in a string."""
        return self.parse_stream(io.StringIO(source), filename or self.options.filename)


def parse_program(
    source: str,
    precedence: Optional[BinopPrecedence] = None,
    filename: str = "<input>",
) -> FrontendResult:
    """
    Parse kscope source in one call.

    Args:
        source: The program text
        precedence: Operator table (default table if None)
        filename: Source name for error messages

    Returns:
        FrontendResult with all units and errors
    """
    options = FrontendOptions(filename=filename)
    if precedence is not None:
        options.precedence = precedence
    return Frontend(options).parse_source(source, filename)
