"""
Kaleidoscope Error Hierarchy
============================

This module defines the root of the exception hierarchy for the
Kaleidoscope toolkit. All exceptions inherit from KaleidoscopeError,
allowing callers to catch every toolkit error with a single except
clause if desired.

Exception Hierarchy
-------------------
KaleidoscopeError (base)
└── FrontendError (lexer, parser and driver; see kaleidoscope.frontend.errors)
    ├── ParseError - a single syntax error
    │   ├── UnexpectedTokenError - token does not start the expected construct
    │   └── MissingTokenError - required token is absent
    └── ParseFailedError - aggregate report of several syntax errors

Design Philosophy
-----------------
Each error captures source location information (filename, line, column)
when available, so messages point at the offending text:

    filename:line:column: error: description
        source_line_text
            ^ (pointer to error location)
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass


# =============================================================================
# Base Exception Class
# =============================================================================

class KaleidoscopeError(Exception):
    """
    Base exception for all Kaleidoscope toolkit errors.

        try:
            parse_source(text).raise_if_errors()
        except KaleidoscopeError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source text for error reporting.

    Tokens and AST nodes carry one of these so diagnostics can name the
    exact position of a problem.

    Attributes:
        filename: Name of the source (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"
