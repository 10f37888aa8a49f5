"""
Kscope Lexer (Tokenizer)
========================

This module implements the lexer for the kscope expression language.
It converts a character stream into classified tokens, one token per call.

Token Categories
----------------
- EOF: end of input (reported forever once the stream is exhausted)
- Keywords: ``def`` and ``extern`` (exactly these spellings)
- Identifiers: ``[a-zA-Z][a-zA-Z0-9]*``
- Numbers: ``[0-9.]+``, converted permissively to a float
- Any other single character, returned verbatim (operators, parentheses,
  commas, semicolons, ...)

Payloads
--------
Identifier text and numeric values are not stored on the tokens. As in the
classic Kaleidoscope design, the lexer keeps the payload of the most
recently produced token in ``identifier`` and ``number``; the parser copies
what it needs before asking for the next token.

Comments
--------
``#`` up to the end of the line is discarded. A comment never produces a
token of its own.

Error Behaviour
---------------
There is none. Every character sequence lexes to *some* token; unknown
characters simply become CHAR tokens whose meaning is decided by the
parser's precedence table.

Example Usage
-------------
>>> from kscope.frontend.lexer import Lexer
>>> lexer = Lexer("def add(x y) x + y", "demo.ks")
>>> for token in lexer.tokenize():
...     print(token)
Token(DEF, 1:1)
Token(IDENTIFIER, 1:5)
Token(CHAR, '(', 1:8)
Token(IDENTIFIER, 1:9)
Token(IDENTIFIER, 1:11)
Token(CHAR, ')', 1:12)
Token(IDENTIFIER, 1:14)
Token(CHAR, '+', 1:16)
Token(IDENTIFIER, 1:18)
Token(EOF, 1:19)
"""

import io
import logging
import re
import string
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional, TextIO, Union

from kscope.errors import SourceLocation

logger = logging.getLogger(__name__)


# =============================================================================
# Token Kind Enumeration
# =============================================================================

class TokenKind(Enum):
    """
    Token kinds surfaced by the lexer.

    The set is closed; the open-ended part of the language (which characters
    act as operators) lives in the CHAR kind plus the token's ``char``.
    """
    EOF = auto()            # End of input
    DEF = auto()            # def
    EXTERN = auto()         # extern
    IDENTIFIER = auto()     # Names; text in Lexer.identifier
    NUMBER = auto()         # Numeric literal; value in Lexer.number
    CHAR = auto()           # Any other single character


# Map keyword strings to their token kinds
KEYWORDS: dict[str, TokenKind] = {
    "def": TokenKind.DEF,
    "extern": TokenKind.EXTERN,
}

# Report names for token kinds (kinds without an entry report as "none")
TOKEN_NAMES: dict[TokenKind, str] = {
    TokenKind.EOF: "tok_eof",
    TokenKind.DEF: "tok_def",
    TokenKind.EXTERN: "tok_extern",
    TokenKind.IDENTIFIER: "tok_identifier",
    TokenKind.NUMBER: "tok_number",
}

# Characters that can start an identifier
IDENT_START = string.ascii_letters

# Characters that can continue an identifier
IDENT_CHARS = string.ascii_letters + string.digits

# Characters accepted in a numeric literal
NUMBER_CHARS = string.digits + "."

# Line terminators that end a comment
COMMENT_END = "\n\r"

# Longest valid float prefix of the accumulated number text
_NUMBER_PREFIX = re.compile(r"[0-9]+(?:\.[0-9]*)?|\.[0-9]+")


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single classified token.

    Attributes:
        kind: The TokenKind classification
        char: The literal character for CHAR tokens, None otherwise
        line: Line number in source (1-indexed)
        column: Column number in source (1-indexed)
        filename: Name of the source
    """
    kind: TokenKind
    char: Optional[str]
    line: int
    column: int
    filename: str

    def __repr__(self) -> str:
        if self.char is not None:
            return f"Token({self.kind.name}, {self.char!r}, {self.line}:{self.column})"
        return f"Token({self.kind.name}, {self.line}:{self.column})"

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)

    def is_char(self, char: str) -> bool:
        """Return True if this is the CHAR token for the given character."""
        return self.kind is TokenKind.CHAR and self.char == char

    def describe(self) -> str:
        """Short human-readable description used in error hints."""
        if self.kind is TokenKind.CHAR:
            return f"'{self.char}'"
        if self.kind is TokenKind.EOF:
            return "end of input"
        if self.kind in (TokenKind.DEF, TokenKind.EXTERN):
            return f"keyword '{self.kind.name.lower()}'"
        return self.kind.name.lower()


# =============================================================================
# Permissive Number Conversion
# =============================================================================

def parse_number(text: str) -> float:
    """
    Convert number text permissively, like C's strtod.

    The longest leading prefix that is a valid decimal float is converted;
    anything after it is ignored. Text with no such prefix yields 0.0.

    Examples:
        "3.14"  -> 3.14
        "1.2.3" -> 1.2
        "1."    -> 1.0
        "."     -> 0.0
    """
    match = _NUMBER_PREFIX.match(text)
    if match is None:
        return 0.0
    return float(match.group(0))


# =============================================================================
# Token Reclassification (for reports)
# =============================================================================

def classify_text(text: str) -> Optional[TokenKind]:
    """
    Return the token kind a text fragment would lex to.

    Applies the identifier/keyword and number rules to a plain string,
    without any stream state. Used when reporting already-parsed names.

    For identifier-shaped text, characters that cannot appear in an
    identifier are dropped before the keyword check, so ``"ex_tern"``
    classifies as EXTERN.

    Args:
        text: The fragment to classify (e.g. a parameter name)

    Returns:
        DEF, EXTERN, IDENTIFIER or NUMBER, or None when the fragment is
        empty or starts with any other character
    """
    if not text:
        return None

    first = text[0]

    if first in IDENT_START:
        word = "".join(c for c in text if c in IDENT_CHARS)
        return KEYWORDS.get(word, TokenKind.IDENTIFIER)

    if first in NUMBER_CHARS:
        return TokenKind.NUMBER

    return None


def token_name(kind: Optional[TokenKind]) -> str:
    """Return the report name of a token kind ("tok_identifier", ..., or "none")."""
    if kind is None:
        return "none"
    return TOKEN_NAMES.get(kind, "none")


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Pull-based lexer over a character stream.

    Reads one character at a time and keeps exactly one character of
    lookahead between calls. Each call to next_token() produces one token
    and overwrites the payload of the previous one.

    Usage:
        lexer = Lexer(sys.stdin, "<stdin>")
        token = lexer.next_token()
        if token.kind is TokenKind.IDENTIFIER:
            name = lexer.identifier

    Attributes:
        filename: Name of the source (for error reporting)
        identifier: Text of the most recent identifier or keyword token
        number: Value of the most recent number token
        token_count: Number of tokens produced so far
    """

    def __init__(
        self,
        source: Union[TextIO, str],
        filename: str = "<input>",
    ):
        """
        Initialize the lexer.

        Args:
            source: A text stream, or a string (wrapped in a StringIO)
            filename: Name of the source for error messages
        """
        if isinstance(source, str):
            source = io.StringIO(source)
        self._stream = source
        self.filename = filename

        self.identifier = ""
        self.number = 0.0
        self.token_count = 0

        # One character of lookahead; "" means end of input. Starts as a
        # blank so the first call reads through it like any whitespace.
        self._last_char = " "
        self._last_line = 1
        self._last_column = 0

        # Position of the next character to be read
        self._line = 1
        self._column = 1

        # Text read so far on the current line, for error context
        self._line_chars: list[str] = []

    # =========================================================================
    # Character Access
    # =========================================================================

    def _read(self) -> str:
        """Read the next character into the lookahead slot."""
        char = self._stream.read(1)

        self._last_char = char
        self._last_line = self._line
        self._last_column = self._column

        if char == "\n":
            self._line += 1
            self._column = 1
            self._line_chars = []
        elif char:
            self._column += 1
            self._line_chars.append(char)

        return char

    def current_line_text(self) -> str:
        """Return the text read so far on the current line."""
        return "".join(self._line_chars)

    @property
    def line(self) -> int:
        """Line of the pending lookahead character."""
        return self._last_line

    # =========================================================================
    # Token Production
    # =========================================================================

    def _make_token(
        self,
        kind: TokenKind,
        line: int,
        column: int,
        char: Optional[str] = None,
    ) -> Token:
        self.token_count += 1
        return Token(
            kind=kind,
            char=char,
            line=line,
            column=column,
            filename=self.filename,
        )

    def next_token(self) -> Token:
        """
        Return the next token from the stream.

        Blocks only on reading characters from the underlying stream.
        Once the stream is exhausted every call returns an EOF token.
        """
        while True:
            # Skip any whitespace
            while self._last_char and self._last_char in string.whitespace:
                self._read()

            line, column = self._last_line, self._last_column
            char = self._last_char

            # Identifier or keyword: [a-zA-Z][a-zA-Z0-9]*
            if char and char in IDENT_START:
                chars = [char]
                while self._read() and self._last_char in IDENT_CHARS:
                    chars.append(self._last_char)
                self.identifier = "".join(chars)
                kind = KEYWORDS.get(self.identifier, TokenKind.IDENTIFIER)
                logger.debug(f"{self.filename}:{line}:{column}: {kind.name} {self.identifier!r}")
                return self._make_token(kind, line, column)

            # Number: [0-9.]+
            if char and char in NUMBER_CHARS:
                chars = [char]
                while self._read() and self._last_char in NUMBER_CHARS:
                    chars.append(self._last_char)
                self.number = parse_number("".join(chars))
                logger.debug(f"{self.filename}:{line}:{column}: NUMBER {self.number}")
                return self._make_token(TokenKind.NUMBER, line, column)

            # Comment until end of line, then lex the following token
            if char == "#":
                while self._read() and self._last_char not in COMMENT_END:
                    pass
                if self._last_char:
                    continue

            # End of input; the EOF is never consumed
            if not self._last_char:
                return self._make_token(TokenKind.EOF, self._line, self._column)

            # Anything else is returned as the character itself
            self._read()
            return self._make_token(TokenKind.CHAR, line, column, char=char)

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens up to and including the first EOF token.

        Note that the payload attributes only describe the token most
        recently yielded.
        """
        while True:
            token = self.next_token()
            yield token
            if token.kind is TokenKind.EOF:
                return
