"""
kslex - Kscope Token Dump
=========================

Prints the token stream of a kscope source, one token per line, up to
and including the end-of-input token. Useful when a parse goes wrong and
you need to see what the lexer actually produced.

Output Format
-------------
    tok_def 'def' 1:1
    tok_identifier 'foo' 1:5
    '(' 1:8
    tok_number 4.0 1:9
    tok_eof 1:12
"""

from typing import TextIO

import click

from kscope import __version__
from kscope.cli.errors import handle_cli_exception, setup_logging
from kscope.frontend.lexer import Lexer, Token, TokenKind, token_name


def format_token(token: Token, lexer: Lexer) -> str:
    """Render a token with its payload (read from the lexer right after it was produced)."""
    position = f"{token.line}:{token.column}"

    if token.kind is TokenKind.CHAR:
        return f"{token.char!r} {position}"
    if token.kind is TokenKind.NUMBER:
        return f"{token_name(token.kind)} {lexer.number} {position}"
    if token.kind is TokenKind.EOF:
        return f"{token_name(token.kind)} {position}"
    return f"{token_name(token.kind)} {lexer.identifier!r} {position}"


@click.command()
@click.argument(
    "input_file",
    type=click.File("r"),
    default="-",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output (debug logging)",
)
@click.version_option(version=__version__, prog_name="kslex")
def main(input_file: TextIO, verbose: bool) -> None:
    """
    Print the tokens of kscope source.

    INPUT_FILE is the source to tokenize (default: standard input).
    """
    setup_logging(verbose)

    lexer = Lexer(input_file, getattr(input_file, "name", "<stdin>"))

    try:
        for token in lexer.tokenize():
            click.echo(format_token(token, lexer))
    except Exception as e:
        handle_cli_exception(e, verbose)

    if verbose:
        click.echo(f"{lexer.token_count} tokens", err=True)


if __name__ == "__main__":
    main()
