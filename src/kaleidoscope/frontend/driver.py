"""
Kaleidoscope Top-Level Driver
=============================

This module runs the parser over a whole input, one top-level construct
at a time:

    top ::= definition | external | expression | ';'

For every construct the driver writes a status line to its output stream
(normally stderr):

    Parsed a function definition.
    Parsed an extern
    Parsed a top-level expr
    LogError: <message>

Error Recovery
--------------
When a construct fails to parse, the driver skips exactly one token and
resumes at top level. This is crude but predictable: `def f( 1` reports
one error, skips the `1`, and parsing continues with whatever follows.

Usage
-----
Command line:
    $ kparse script.ks

Programmatic:
    >>> from kaleidoscope.frontend.driver import parse_source
    >>> result = parse_source("extern sin(x); sin(1)")
    >>> [item.kind for item in result.items]
    [<ItemKind.EXTERN: 2>, <ItemKind.EXPRESSION: 3>]
"""

import logging
import sys
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterator, Optional, TextIO

import click

from kaleidoscope.frontend.lexer import Lexer, TokenType
from kaleidoscope.frontend.parser import Parser, ParserOptions
from kaleidoscope.frontend.ast import FunctionNode, PrototypeNode
from kaleidoscope.frontend.errors import DiagnosticCollector, ParseError

logger = logging.getLogger(__name__)


class ItemKind(Enum):
    """Kind of a successfully parsed top-level construct."""
    DEFINITION = auto()     # def name(params) body
    EXTERN = auto()         # extern name(params)
    EXPRESSION = auto()     # bare expression, wrapped anonymously


STATUS_MESSAGES = {
    ItemKind.DEFINITION: "Parsed a function definition.",
    ItemKind.EXTERN: "Parsed an extern",
    ItemKind.EXPRESSION: "Parsed a top-level expr",
}


@dataclass
class TopLevelItem:
    """
    One parsed top-level construct.

    Attributes:
        kind: What was parsed
        node: FunctionNode for definitions and expressions,
              PrototypeNode for externs
    """
    kind: ItemKind
    node: FunctionNode | PrototypeNode


@dataclass
class DriverOptions:
    """
    Driver configuration options.

    Attributes:
        prompt: Text written before each top-level construct
        show_prompt: Write the prompt (for interactive sessions)
        quiet: Suppress status and LogError lines entirely
    """
    prompt: str = "ready> "
    show_prompt: bool = False
    quiet: bool = False


@dataclass
class DriverSummary:
    """
    Outcome counts of a driver run.

    Attributes:
        parsed: Number of constructs parsed successfully
        failed: Number of constructs that failed to parse
        errors: Number of syntax errors reported
    """
    parsed: int = 0
    failed: int = 0
    errors: int = 0

    @property
    def success(self) -> bool:
        """True if no syntax error was reported."""
        return self.errors == 0


class TopLevelDriver:
    """
    Repeatedly parses the next top-level construct until end of input.

    The driver does not keep parsed nodes: iter_items() hands each one to
    the caller as soon as it is complete.

    Example:
        parser = Parser(Lexer(sys.stdin))
        driver = TopLevelDriver(parser, DriverOptions(show_prompt=True))
        summary = driver.run()

    Attributes:
        parser: The parser to drive
        options: Driver configuration
        out: Stream for prompts, status lines and LogError lines
    """

    def __init__(
        self,
        parser: Parser,
        options: Optional[DriverOptions] = None,
        out: Optional[TextIO] = None,
    ):
        self.parser = parser
        self.options = options or DriverOptions()
        self.out = out if out is not None else sys.stderr
        self.summary = DriverSummary()

        # Errors are printed the moment the parser reports them. A callback
        # already installed on the parser still receives every error.
        self._chained_on_error = parser.on_error
        self.parser.on_error = self._log_error

    def _write(self, text: str, nl: bool = True) -> None:
        if not self.options.quiet:
            click.echo(text, file=self.out, nl=nl)

    def _log_error(self, error: ParseError) -> None:
        self.summary.errors += 1
        self._write(f"LogError: {error.message}")
        if self._chained_on_error is not None:
            self._chained_on_error(error)

    def _prompt(self) -> None:
        if self.options.show_prompt:
            self._write(self.options.prompt, nl=False)

    def iter_items(self) -> Iterator[TopLevelItem]:
        """
        Parse top-level constructs until end of input.

        Yields:
            A TopLevelItem for every construct that parsed successfully
        """
        self._prompt()
        self.parser.advance()

        while True:
            token = self.parser.current_token

            if token.type == TokenType.EOF:
                return

            # Ignore top-level semicolons
            if token.is_char(";"):
                self.parser.advance()
                self._prompt()
                continue

            if token.type == TokenType.DEF:
                kind = ItemKind.DEFINITION
                node = self.parser.parse_definition()
            elif token.type == TokenType.EXTERN:
                kind = ItemKind.EXTERN
                node = self.parser.parse_extern()
            else:
                kind = ItemKind.EXPRESSION
                node = self.parser.parse_top_level_expression()

            logger.debug(f"top-level {kind.name.lower()} at {token.location}: "
                         f"{'ok' if node is not None else 'failed'}")

            if node is None:
                self.summary.failed += 1
                # Skip token for error recovery
                self.parser.advance()
            else:
                self.summary.parsed += 1
                self._write(STATUS_MESSAGES[kind])
                yield TopLevelItem(kind, node)

            self._prompt()

    def run(self) -> DriverSummary:
        """Parse the whole input, discarding results, and return the counts."""
        for _ in self.iter_items():
            pass
        return self.summary


# =============================================================================
# Convenience Functions
# =============================================================================

@dataclass
class ParseResult:
    """
    Everything parse_source() found in a piece of source text.

    Attributes:
        items: Successfully parsed constructs, in source order
        errors: Reported syntax errors, in report order
    """
    items: list[TopLevelItem] = field(default_factory=list)
    errors: list[ParseError] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors

    def raise_if_errors(self) -> None:
        """Raise ParseFailedError if any syntax error was reported."""
        collector = DiagnosticCollector()
        for error in self.errors:
            collector.add(error)
        collector.raise_if_errors()


def parse_source(
    source: str,
    filename: str = "<input>",
    options: Optional[ParserOptions] = None,
) -> ParseResult:
    """
    Parse Kaleidoscope source text into top-level items.

    This is a convenience function that combines lexing, parsing and the
    top-level loop, without printing anything.

    Args:
        source: The Kaleidoscope source text
        filename: Source name for locations in diagnostics
        options: Parser configuration

    Returns:
        ParseResult with the parsed items and the reported errors
    """
    parser = Parser(Lexer.from_string(source, filename), options)
    driver = TopLevelDriver(parser, DriverOptions(quiet=True))
    items = list(driver.iter_items())
    return ParseResult(items=items, errors=list(parser.diagnostics.errors))
