"""
Binary Operator Precedence Table
================================

The set of infix operators in kscope is not fixed by the grammar. Any
single character the lexer returns as a CHAR token can act as a binary
operator, provided the embedding application has given it a positive
precedence in a BinopPrecedence table.

The table is configuration owned by the caller. The parser holds a
reference to it and consults it on every lookup, so operators installed
after the parser was built take effect immediately.

Precedence Rules
----------------
- Higher numbers bind tighter.
- A character with no entry, or with a precedence <= 0, is not an operator.
- Non-ASCII characters are never operators.

Default Table
-------------
| Operator | Precedence |
|----------|------------|
| ``<``    | 10         |
| ``+``    | 20         |
| ``-``    | 20         |
| ``*``    | 40         |
"""

from typing import Iterator, Mapping, Optional


# Classic Kaleidoscope operator set
DEFAULT_PRECEDENCE: dict[str, int] = {
    "<": 10,
    "+": 20,
    "-": 20,
    "*": 40,
}

# Returned for anything that cannot be used as an infix operator
NOT_AN_OPERATOR = -1


class BinopPrecedence:
    """
    Mutable mapping from operator character to precedence.

    Example:
        table = BinopPrecedence.default()
        table["^"] = 50                 # install a new operator
        table.precedence_of("^")        # 50
        table.precedence_of("?")        # -1
    """

    def __init__(self, entries: Optional[Mapping[str, int]] = None):
        self._table: dict[str, int] = {}
        if entries:
            for op, prec in entries.items():
                self[op] = prec

    @classmethod
    def default(cls) -> "BinopPrecedence":
        """Create a table holding the default operator set."""
        return cls(DEFAULT_PRECEDENCE)

    @staticmethod
    def parse_spec(spec: str) -> tuple[str, int]:
        """
        Parse an ``OP=PREC`` string such as ``"^=50"``.

        The operator is everything before the last '=', so ``"==5"``
        installs '=' with precedence 5.

        Raises:
            ValueError: If the spec is malformed
        """
        op, sep, prec = spec.strip().rpartition("=")
        if not sep or len(op) != 1:
            raise ValueError(f"invalid operator spec {spec!r} (expected OP=PREC, e.g. '^=50')")
        try:
            value = int(prec)
        except ValueError:
            raise ValueError(f"invalid precedence {prec!r} in operator spec {spec!r}") from None
        return op, value

    def __setitem__(self, op: str, precedence: int) -> None:
        if len(op) != 1:
            raise ValueError(f"operators are single characters, got {op!r}")
        self._table[op] = int(precedence)

    def __getitem__(self, op: str) -> int:
        return self._table[op]

    def __delitem__(self, op: str) -> None:
        del self._table[op]

    def __contains__(self, op: object) -> bool:
        return op in self._table

    def __iter__(self) -> Iterator[str]:
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)

    def __repr__(self) -> str:
        return f"BinopPrecedence({self._table!r})"

    def update(self, entries: Mapping[str, int]) -> None:
        """Install or overwrite several operators at once."""
        for op, prec in entries.items():
            self[op] = prec

    def as_dict(self) -> dict[str, int]:
        """Return a copy of the table."""
        return dict(self._table)

    def precedence_of(self, char: Optional[str]) -> int:
        """
        Return the precedence of an operator character.

        Returns NOT_AN_OPERATOR (-1) for None, non-ASCII characters,
        characters with no entry, and entries <= 0.
        """
        if char is None or not char.isascii():
            return NOT_AN_OPERATOR
        precedence = self._table.get(char, 0)
        if precedence <= 0:
            return NOT_AN_OPERATOR
        return precedence
