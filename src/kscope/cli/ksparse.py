"""
ksparse - Kscope Parser Command-Line Interface
==============================================

This module implements the command-line interface for the kscope front end.
It parses every top-level unit of a source file (or standard input) and
prints the resulting syntax trees.

Usage Examples
--------------
Print the AST of a file:
    $ ksparse program.ks

JSON report written to a file:
    $ ksparse --json program.ks -o program.json

Install extra operators:
    $ ksparse -b '^=50' -b '/=40' program.ks

Interactive session (prompts with "ready> " on a terminal):
    $ ksparse
"""

import sys
from typing import TextIO

import click

from kscope import __version__
from kscope.cli.errors import ExitCode, handle_cli_exception, setup_logging
from kscope.frontend import ASTPrinter, BinopPrecedence, Frontend, FrontendOptions, ReportBuilder
from kscope.frontend.driver import TopLevelUnit, UnitKind, deliver


PROMPT = "ready> "


def _parse_binops(
    ctx: click.Context,
    param: click.Parameter,
    value: tuple[str, ...],
) -> list[tuple[str, int]]:
    """Click callback converting OP=PREC options."""
    entries = []
    for spec in value:
        try:
            entries.append(BinopPrecedence.parse_spec(spec))
        except ValueError as e:
            raise click.BadParameter(str(e), ctx=ctx, param=param)
    return entries


def _show_prompt() -> None:
    click.echo(PROMPT, nl=False, err=True)


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.File("r"),
    default="-",
)
@click.option(
    "-o", "--output",
    type=click.File("w"),
    default="-",
    help="Output file (default: stdout)",
)
@click.option(
    "--json", "as_json",
    is_flag=True,
    help="Print a JSON report instead of the AST tree",
)
@click.option(
    "-b", "--binop",
    multiple=True,
    callback=_parse_binops,
    metavar="OP=PREC",
    help="Install a binary operator (can be repeated)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output (debug logging)",
)
@click.version_option(version=__version__, prog_name="ksparse")
def main(
    input_file: TextIO,
    output: TextIO,
    as_json: bool,
    binop: list[tuple[str, int]],
    verbose: bool,
) -> None:
    """
    Parse kscope source and print its syntax trees.

    INPUT_FILE is the source to parse (default: standard input).

    Syntax errors are printed to stderr as they are found; parsing then
    resumes after skipping one token. The exit status is 1 if any syntax
    error occurred.

    \b
    Examples:
        ksparse program.ks              # Print AST trees
        ksparse --json program.ks       # JSON report
        ksparse -b '^=50' program.ks    # Add an operator
        echo '1+2*3' | ksparse          # Read from stdin
    """
    setup_logging(verbose)

    options = FrontendOptions.from_env()
    for op, prec in binop:
        options.precedence[op] = prec

    prompt = None
    if input_file.isatty():
        prompt = _show_prompt

    report = ReportBuilder()
    printer = ASTPrinter()

    def on_unit(unit: TopLevelUnit) -> None:
        if unit.kind is UnitKind.ERROR:
            if unit.error is not None:
                click.echo(str(unit.error), err=True)
        elif not as_json:
            click.echo(printer.print(unit.node), file=output)
        deliver(unit, report)

    try:
        result = Frontend(options).parse_stream(
            input_file,
            getattr(input_file, "name", "<stdin>"),
            on_unit=on_unit,
            prompt=prompt,
        )
    except Exception as e:
        handle_cli_exception(e, verbose)

    if as_json:
        click.echo(report.dumps(), file=output)

    if verbose:
        click.echo(
            f"Parsed {len(result.units)} units ({result.token_count} tokens)",
            err=True,
        )
    if result.aborted:
        click.echo(f"Stopped after {len(result.errors)} errors", err=True)

    if not result.success:
        sys.exit(ExitCode.SYNTAX_ERROR)


if __name__ == "__main__":
    main()
