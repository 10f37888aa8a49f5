"""
Kscope Recursive Descent Parser
===============================

This module implements the parser for the kscope expression language.
It pulls tokens from a Lexer one at a time through a single-token
lookahead buffer and builds the AST defined in kscope.frontend.ast.

Grammar (EBNF)
--------------
top             ::= definition | external | expression | ';'
definition      ::= 'def' prototype expression
external        ::= 'extern' prototype
prototype       ::= IDENTIFIER '(' IDENTIFIER* ')'
expression      ::= primary binoprhs
binoprhs        ::= (BINOP primary)*
primary         ::= identifierexpr | numberexpr | parenexpr
identifierexpr  ::= IDENTIFIER | IDENTIFIER '(' (expression (',' expression)*)? ')'
numberexpr      ::= NUMBER
parenexpr       ::= '(' expression ')'

Binary Operators
----------------
BINOP is any CHAR token with a positive precedence in the BinopPrecedence
table supplied by the caller. Chains are parsed by precedence climbing:
operators of equal precedence associate to the left, and an operator that
binds tighter than the one to its left takes the right operand first.
With the default table:

    1+2*3   ->  (1 + (2 * 3))
    1-2-3   ->  ((1 - 2) - 3)

There are no unary and no right-associative operators.

Error Reporting
---------------
Parse methods return None on failure instead of raising. The failure is
reported once, where it is detected, by adding a KSyntaxError to the
parser's ErrorCollector. Callers forward the None without parsing further,
so an error anywhere inside a definition discards the whole definition.

Example Usage
-------------
>>> from kscope.frontend.lexer import Lexer
>>> from kscope.frontend.parser import Parser
>>> from kscope.frontend.precedence import BinopPrecedence
>>> parser = Parser(Lexer("1+2*3"), BinopPrecedence.default())
>>> parser.advance()
Token(NUMBER, 1:1)
>>> parser.parse_expression()
BinaryExpr(op='+', lhs=NumberExpr(value=1.0), rhs=BinaryExpr(op='*', lhs=NumberExpr(value=2.0), rhs=NumberExpr(value=3.0)))
"""

import logging
from typing import Optional

from kscope.frontend.ast import (
    BinaryExpr,
    CallExpr,
    Expr,
    Function,
    NumberExpr,
    Prototype,
    VariableExpr,
)
from kscope.frontend.errors import (
    ErrorCollector,
    KSyntaxError,
    MissingTokenError,
    UnexpectedTokenError,
)
from kscope.frontend.lexer import Lexer, Token, TokenKind
from kscope.frontend.precedence import NOT_AN_OPERATOR, BinopPrecedence

logger = logging.getLogger(__name__)

# Name of the function synthesized around a bare top-level expression
ANON_FUNCTION_NAME = "__anon_expr"


class Parser:
    """
    Recursive descent / precedence climbing parser for kscope.

    The parser owns its lookahead state (the current token and a copy of
    its payload) and borrows two collaborators: the lexer it pulls tokens
    from, and the caller's precedence table.

    Call advance() once to load the first token before parsing; the
    TopLevelDriver does this for you.

    Attributes:
        lexer: Token source
        precedence: Operator precedence table (owned by the caller)
        errors: Collector receiving every reported syntax error
        anon_name: Name given to wrapped top-level expressions
        current: The current lookahead token (None before the first advance)
        identifier: Identifier text of the current token
        number: Numeric value of the current token
    """

    def __init__(
        self,
        lexer: Lexer,
        precedence: Optional[BinopPrecedence] = None,
        errors: Optional[ErrorCollector] = None,
        anon_name: str = ANON_FUNCTION_NAME,
    ):
        """
        Initialize the parser.

        Args:
            lexer: The lexer to pull tokens from
            precedence: Operator table; the default table if None
            errors: Error collector; a fresh one if None
            anon_name: Prototype name for wrapped top-level expressions
        """
        self.lexer = lexer
        self.precedence = precedence if precedence is not None else BinopPrecedence.default()
        self.errors = errors if errors is not None else ErrorCollector()
        self.anon_name = anon_name

        self.current: Optional[Token] = None
        self.identifier = ""
        self.number = 0.0

    # =========================================================================
    # Token Buffer
    # =========================================================================

    def advance(self) -> Token:
        """Read the next token from the lexer into the lookahead buffer."""
        token = self.lexer.next_token()
        self.current = token
        self.identifier = self.lexer.identifier
        self.number = self.lexer.number
        return token

    def _is_char(self, char: str) -> bool:
        return self.current is not None and self.current.is_char(char)

    def _token_precedence(self) -> int:
        """Precedence of the pending token, or -1 if it is not a binary operator."""
        if self.current is None or self.current.kind is not TokenKind.CHAR:
            return NOT_AN_OPERATOR
        return self.precedence.precedence_of(self.current.char)

    def _report(self, error: KSyntaxError) -> None:
        """Record a syntax error. Always returns None so callers can return it."""
        self.errors.add(error)
        logger.debug(f"syntax error reported: {error.message} at {error.location}")

    def _source_line(self, token: Token) -> Optional[str]:
        """Source text for an error at token, when it is still on the lexer's line."""
        if token.line == self.lexer.line:
            return self.lexer.current_line_text()
        return None

    def _missing(self, message: str, expected: str) -> None:
        token = self.current
        self._report(MissingTokenError(
            message,
            expected,
            location=token.location,
            source_line=self._source_line(token),
        ))

    # =========================================================================
    # Primary Expressions
    # =========================================================================

    def parse_number_expr(self) -> Expr:
        """numberexpr ::= NUMBER"""
        result = NumberExpr(self.number, location=self.current.location)
        self.advance()  # consume the number
        return result

    def parse_paren_expr(self) -> Optional[Expr]:
        """parenexpr ::= '(' expression ')'"""
        self.advance()  # eat (
        expr = self.parse_expression()
        if expr is None:
            return None

        if not self._is_char(")"):
            return self._missing("expected ')'", "')'")
        self.advance()  # eat )
        return expr

    def parse_identifier_expr(self) -> Optional[Expr]:
        """
        identifierexpr ::= IDENTIFIER
                         | IDENTIFIER '(' (expression (',' expression)*)? ')'
        """
        name = self.identifier
        location = self.current.location

        self.advance()  # eat identifier

        if not self._is_char("("):
            return VariableExpr(name, location=location)

        # Call
        self.advance()  # eat (
        args: list[Expr] = []
        if not self._is_char(")"):
            while True:
                arg = self.parse_expression()
                if arg is None:
                    return None
                args.append(arg)

                if self._is_char(")"):
                    break

                if not self._is_char(","):
                    return self._missing("Expected ')' or ',' in argument list", "')' or ','")
                self.advance()

        self.advance()  # eat )

        return CallExpr(name, tuple(args), location=location)

    def parse_primary(self) -> Optional[Expr]:
        """primary ::= identifierexpr | numberexpr | parenexpr"""
        token = self.current

        if token.kind is TokenKind.IDENTIFIER:
            return self.parse_identifier_expr()
        if token.kind is TokenKind.NUMBER:
            return self.parse_number_expr()
        if token.is_char("("):
            return self.parse_paren_expr()

        return self._report(UnexpectedTokenError(
            token.describe(),
            location=token.location,
            source_line=self._source_line(token),
        ))

    # =========================================================================
    # Binary Operator Chains (Precedence Climbing)
    # =========================================================================

    def parse_bin_op_rhs(self, min_precedence: int, lhs: Expr) -> Optional[Expr]:
        """
        binoprhs ::= (BINOP primary)*

        Folds operators onto lhs while their precedence is at least
        min_precedence.
        """
        while True:
            token_prec = self._token_precedence()

            # Not an operator, or one that binds looser than this level
            if token_prec < min_precedence:
                return lhs

            op_token = self.current
            self.advance()  # eat the operator

            rhs = self.parse_primary()
            if rhs is None:
                return None

            # If the next operator binds tighter, let it take rhs first
            next_prec = self._token_precedence()
            if token_prec < next_prec:
                rhs = self.parse_bin_op_rhs(token_prec + 1, rhs)
                if rhs is None:
                    return None

            lhs = BinaryExpr(op_token.char, lhs, rhs, location=op_token.location)

    def parse_expression(self) -> Optional[Expr]:
        """expression ::= primary binoprhs"""
        lhs = self.parse_primary()
        if lhs is None:
            return None

        return self.parse_bin_op_rhs(0, lhs)

    # =========================================================================
    # Declarations
    # =========================================================================

    def parse_prototype(self) -> Optional[Prototype]:
        """prototype ::= IDENTIFIER '(' IDENTIFIER* ')'"""
        if self.current.kind is not TokenKind.IDENTIFIER:
            return self._missing("Expected function name in prototype", "function name")

        name = self.identifier
        location = self.current.location
        self.advance()

        if not self._is_char("("):
            return self._missing("Expected '(' in prototype", "'('")

        params: list[str] = []
        while self.advance().kind is TokenKind.IDENTIFIER:
            params.append(self.identifier)

        if not self._is_char(")"):
            return self._missing("Expected ')' in prototype", "')'")

        self.advance()  # eat )

        return Prototype(name, tuple(params), location=location)

    def parse_definition(self) -> Optional[Function]:
        """definition ::= 'def' prototype expression"""
        self.advance()  # eat def
        proto = self.parse_prototype()
        if proto is None:
            return None

        body = self.parse_expression()
        if body is None:
            return None
        return Function(proto, body)

    def parse_extern(self) -> Optional[Prototype]:
        """external ::= 'extern' prototype"""
        self.advance()  # eat extern
        return self.parse_prototype()

    def parse_top_level_expression(self) -> Optional[Function]:
        """toplevelexpr ::= expression, wrapped in an anonymous function"""
        body = self.parse_expression()
        if body is None:
            return None

        proto = Prototype(self.anon_name, (), location=body.location)
        return Function(proto, body)
