"""
Top-Level Driver
================

The driver repeatedly looks at the parser's lookahead token and dispatches
to the matching parse entry point until the input is exhausted:

| Lookahead      | Action                                             |
|----------------|----------------------------------------------------|
| end of input   | stop                                               |
| ``;``          | skip it (statement separator, produces nothing)    |
| ``def``        | parse a definition                                 |
| ``extern``     | parse an extern declaration                        |
| anything else  | parse a bare expression (wrapped in a function)    |

Each completed top-level unit is handed to the caller before the next one
is parsed. When a unit fails to parse, the error has already been reported
by the parser; the driver then skips exactly one token and resumes.

Error Recovery
--------------
Skipping a single token is a coarse recovery. A malformed construct that
spans several tokens can produce several errors in a row before the driver
is back on a construct boundary. Error sequences match the classic
Kaleidoscope REPL.

Usage
-----
Push style, with a handler object:

    driver = TopLevelDriver(parser)
    driver.run(handler)

Pull style, one unit at a time:

    for unit in TopLevelDriver(parser).units():
        if unit.kind is UnitKind.DEFINITION:
            ...
"""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Iterator, Optional, Protocol, Union

from kscope.frontend.ast import Function, Prototype
from kscope.frontend.errors import FrontendError
from kscope.frontend.lexer import TokenKind
from kscope.frontend.parser import Parser

logger = logging.getLogger(__name__)


# =============================================================================
# Top-Level Units
# =============================================================================

class UnitKind(Enum):
    """What a top-level unit turned out to be."""
    DEFINITION = auto()     # def name(params) body
    EXTERN = auto()         # extern name(params)
    EXPRESSION = auto()     # bare expression, wrapped in an anonymous function
    ERROR = auto()          # a unit that failed to parse


@dataclass(frozen=True)
class TopLevelUnit:
    """
    One dispatched top-level unit.

    Attributes:
        kind: The unit kind
        node: Function for definitions and expressions, Prototype for
              externs, None for errors
        error: The reported error for ERROR units
    """
    kind: UnitKind
    node: Union[Function, Prototype, None] = None
    error: Optional[FrontendError] = None


class UnitHandler(Protocol):
    """Receiver for completed top-level units (the reporting collaborator)."""

    def handle_definition(self, function: Function) -> None: ...

    def handle_extern(self, prototype: Prototype) -> None: ...

    def handle_top_level_expression(self, function: Function) -> None: ...

    def handle_error(self, error: FrontendError) -> None: ...


# =============================================================================
# Driver
# =============================================================================

class TopLevelDriver:
    """
    Dispatch loop over top-level units.

    Attributes:
        parser: The parser to drive
        prompt: Optional callback invoked before waiting on each new unit
                (e.g. to print "ready> " in an interactive session)
        aborted: True if the loop stopped early because the parser's error
                 collector reached its limit
    """

    def __init__(
        self,
        parser: Parser,
        prompt: Optional[Callable[[], None]] = None,
    ):
        self.parser = parser
        self.prompt = prompt
        self.aborted = False

    def units(self) -> Iterator[TopLevelUnit]:
        """
        Parse and yield top-level units until end of input.

        The parser is primed with its first token if it has none yet.
        """
        parser = self.parser

        if self.prompt:
            self.prompt()
        if parser.current is None:
            parser.advance()

        first = True
        while True:
            if self.prompt and not first:
                self.prompt()
            first = False

            token = parser.current

            if token.kind is TokenKind.EOF:
                return

            if token.is_char(";"):
                parser.advance()  # ignore top-level semicolons
                continue

            if token.kind is TokenKind.DEF:
                unit = self._dispatch(UnitKind.DEFINITION, parser.parse_definition)
            elif token.kind is TokenKind.EXTERN:
                unit = self._dispatch(UnitKind.EXTERN, parser.parse_extern)
            else:
                unit = self._dispatch(UnitKind.EXPRESSION, parser.parse_top_level_expression)

            yield unit

            if unit.kind is UnitKind.ERROR and parser.errors.should_stop():
                logger.info(f"stopping after {parser.errors.error_count()} errors")
                self.aborted = True
                return

    def _dispatch(
        self,
        kind: UnitKind,
        parse: Callable[[], Union[Function, Prototype, None]],
    ) -> TopLevelUnit:
        errors = self.parser.errors
        reported = errors.error_count()

        node = parse()
        if node is not None:
            logger.debug(f"parsed {kind.name.lower()} unit")
            return TopLevelUnit(kind, node)

        # Skip token for error recovery
        skipped = self.parser.advance()
        logger.debug(f"{kind.name.lower()} failed, skipped to {skipped!r}")

        error = errors.errors[-1] if errors.error_count() > reported else None
        return TopLevelUnit(UnitKind.ERROR, error=error)

    def run(self, handler: UnitHandler) -> int:
        """
        Run the loop to completion, passing each unit to handler.

        Returns:
            The number of units dispatched (including failed ones)
        """
        count = 0
        for unit in self.units():
            count += 1
            deliver(unit, handler)
        return count


def deliver(unit: TopLevelUnit, handler: UnitHandler) -> None:
    """Pass one unit to the matching handler method."""
    if unit.kind is UnitKind.DEFINITION:
        handler.handle_definition(unit.node)
    elif unit.kind is UnitKind.EXTERN:
        handler.handle_extern(unit.node)
    elif unit.kind is UnitKind.EXPRESSION:
        handler.handle_top_level_expression(unit.node)
    elif unit.error is not None:
        handler.handle_error(unit.error)
