"""
kparse - Kaleidoscope Parser Command-Line Interface
===================================================

This module implements the command-line front end of the Kaleidoscope
parser. It reads a program from a file or from standard input, parses it
one top-level construct at a time, and reports each result on stderr.

Usage Examples
--------------
Interactive session:
    $ kparse
    ready> def add(a b) a + b
    Parsed a function definition.
    ready> ^D

Parse a file:
    $ kparse program.ks

Show the parsed trees:
    $ kparse --ast program.ks

Fail the build on syntax errors:
    $ kparse --strict program.ks
"""

import logging
from pathlib import Path
from typing import Optional

import click

from kaleidoscope import __version__
from kaleidoscope.cli.errors import handle_cli_exception
from kaleidoscope.frontend.ast import ASTPrinter
from kaleidoscope.frontend.driver import DriverOptions, TopLevelDriver
from kaleidoscope.frontend.lexer import Lexer
from kaleidoscope.frontend.parser import Parser

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    required=False,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--ast",
    is_flag=True,
    help="Print the tree of every parsed construct to stdout",
)
@click.option(
    "--prompt/--no-prompt",
    default=None,
    help="Show the 'ready>' prompt (default: only for interactive stdin)",
)
@click.option(
    "--strict",
    is_flag=True,
    help="Exit with status 1 if any syntax error was reported",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output (debug logging)",
)
@click.version_option(version=__version__, prog_name="kparse")
def main(
    input_file: Optional[Path],
    ast: bool,
    prompt: Optional[bool],
    strict: bool,
    verbose: bool,
) -> None:
    """
    Parse a Kaleidoscope program.

    INPUT_FILE is the source file to parse; standard input is read when
    it is omitted.

    \b
    Status lines go to stderr:
        Parsed a function definition.
        Parsed an extern
        Parsed a top-level expr
        LogError: <message>

    \b
    Examples:
        kparse                      # Interactive session
        kparse program.ks           # Parse a file
        kparse --ast program.ks     # Also print the trees
        kparse --strict program.ks  # Non-zero exit on syntax errors
    """
    setup_logging(verbose)

    try:
        if input_file is None:
            stdin = click.get_text_stream("stdin")
            lexer = Lexer(stdin, "<stdin>")
            if prompt is None:
                prompt = stdin.isatty()
        else:
            logger.debug(f"Reading {input_file}")
            lexer = Lexer.from_file(input_file)

        parser = Parser(lexer)
        driver = TopLevelDriver(
            parser,
            DriverOptions(show_prompt=bool(prompt)),
        )

        printer = ASTPrinter()
        for item in driver.iter_items():
            if ast:
                click.echo(printer.print(item.node))

        summary = driver.summary
        if prompt:
            click.echo(err=True)

        logger.debug(
            f"{summary.parsed} parsed, {summary.failed} failed, {summary.errors} errors"
        )

        if strict:
            parser.diagnostics.raise_if_errors()

    except Exception as e:
        handle_cli_exception(e, verbose)


if __name__ == "__main__":
    main()
