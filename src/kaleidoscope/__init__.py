"""
Kaleidoscope - Front End for a Small Expression Language
========================================================

Kaleidoscope is a toy language with a single numeric type, function
definitions, external declarations and infix arithmetic. This package
reads Kaleidoscope programs and produces syntax trees for other tools
(code generators, interpreters) to consume.

Main Components
---------------
- **frontend**: lexer, parser, AST model and top-level driver
- **cli**: the `kparse` command-line tool

Quick Start
-----------
Parse a program:
    >>> from kaleidoscope import parse_source
    >>> result = parse_source("extern sin(x); sin(1.5) * 2")
    >>> len(result.items)
    2

Or use the command-line tool:
    $ kparse program.ks
    $ kparse --ast program.ks
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from kaleidoscope.errors import KaleidoscopeError, SourceLocation
from kaleidoscope.frontend import (
    Lexer,
    Parser,
    ParserOptions,
    TopLevelDriver,
    DriverOptions,
    ParseResult,
    parse_source,
    FrontendError,
    ParseError,
    ParseFailedError,
)

__all__ = [
    "__version__",
    "KaleidoscopeError",
    "SourceLocation",
    "Lexer",
    "Parser",
    "ParserOptions",
    "TopLevelDriver",
    "DriverOptions",
    "ParseResult",
    "parse_source",
    "FrontendError",
    "ParseError",
    "ParseFailedError",
]
