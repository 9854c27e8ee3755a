"""
Kaleidoscope Front-End Error Hierarchy
======================================

This module defines the errors reported by the lexer, parser and
top-level driver. All of them inherit from FrontendError, which itself
inherits from KaleidoscopeError.

Exception Hierarchy
-------------------
FrontendError (base for all front-end errors)
├── ParseError - syntax errors found by the parser
│   ├── UnexpectedTokenError - token cannot start the expected construct
│   └── MissingTokenError - a required token such as ')' is absent
└── ParseFailedError - aggregate report of collected syntax errors

Reporting Model
---------------
Syntax errors are expected outcomes of parsing user input, so the parser
does not raise them. It builds a ParseError as a diagnostic record, hands
it to a DiagnosticCollector, and returns None from the failing
production. Only ParseFailedError is ever raised, and only when a caller
asks for it (ParseResult.raise_if_errors, or `kparse --strict`).

Error Message Format
--------------------
    script.ks:3:8: error: Expected ')' in prototype
        def f( 1
               ^
    hint: parameter names are identifiers separated by spaces
"""

from typing import List, Optional

from kaleidoscope.errors import KaleidoscopeError, SourceLocation


# =============================================================================
# Base Front-End Exception
# =============================================================================

class FrontendError(KaleidoscopeError):
    """
    Base exception for all front-end errors.

    Attributes:
        message: The error description
        location: Where in the source the error occurred
        hint: A suggestion for fixing the error
        source_line: The source text of the line holding the error
        span: Width of the offending token, underlined in the caret line
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
        span: int = 1,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        self.span = span
        super().__init__(self._format_message())

    def _caret_line(self) -> Optional[str]:
        """
        Underline the offending token: '^' at its first column, then '~'
        for the rest of it. The span is clipped to the end of source_line.
        """
        column = self.location.column
        if column <= 0:
            return None
        width = min(self.span, len(self.source_line) - column + 1)
        marker = "^" + "~" * (width - 1)
        return " " * (4 + column - 1) + marker

    def _format_message(self) -> str:
        """
        Build the diagnostic text:

            script.ks:1:5: error: unknown token when expecting an expression
                1 + then
                    ^~~~
            hint: expected a number, an identifier or '(', found keyword 'then'
        """
        if self.location is None:
            lines = [f"error: {self.message}"]
        else:
            lines = [f"{self.location}: error: {self.message}"]
            if self.source_line is not None:
                lines.append(f"    {self.source_line}")
                caret = self._caret_line()
                if caret is not None:
                    lines.append(caret)

        if self.hint:
            lines.append(f"hint: {self.hint}")
        return "\n".join(lines)


class ParseFailedError(FrontendError):
    """
    Raised on request when a parse reported syntax errors.

    Carries the individual ParseError records in `errors`; the message is
    the collector's report, printed verbatim.
    """

    def __init__(self, report: str, errors: Optional[List["ParseError"]] = None):
        self.errors = list(errors or [])
        super().__init__(report)

    def _format_message(self) -> str:
        return self.message


# =============================================================================
# Syntax Errors (Parser)
# =============================================================================

class ParseError(FrontendError):
    """
    Syntax error in Kaleidoscope source.

    Examples:
        - Digit where a parameter name is expected
        - Missing ')' after a parenthesized expression
        - Operator with no right-hand operand
    """
    pass


class UnexpectedTokenError(ParseError):
    """
    Token that cannot start or continue the construct being parsed.

    Used for "unknown token when expecting an expression" and for the
    argument-list error where only ')' or ',' may follow an argument.
    """

    def __init__(
        self,
        message: str,
        found: str,
        expected: Optional[str] = None,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        span: int = 1,
    ):
        self.found = found
        self.expected = expected

        hint = None
        if expected:
            hint = f"expected {expected}, found {found}"

        super().__init__(
            message,
            location=location,
            hint=hint,
            source_line=source_line,
            span=span,
        )


class MissingTokenError(ParseError):
    """
    Required token is missing.

    Used when a prototype lacks its name, '(' or ')', and when a
    parenthesized expression is not closed.
    """

    def __init__(
        self,
        message: str,
        expected: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
        span: int = 1,
    ):
        self.expected = expected
        super().__init__(
            message,
            location=location,
            hint=hint,
            source_line=source_line,
            span=span,
        )


# =============================================================================
# Diagnostic Collection
# =============================================================================

class DiagnosticCollector:
    """
    Collects syntax errors for batch reporting.

    The parser adds one ParseError per grammar violation; the driver
    keeps going after each failed construct, so a single run can gather
    many errors.

    Example:
        collector = DiagnosticCollector()
        collector.add(MissingTokenError("expected ')'", "')'"))
        if collector.has_errors():
            print(collector.report())
    """

    def __init__(self):
        self.errors: List[ParseError] = []

    def add(self, error: ParseError) -> None:
        """Add an error to the collection."""
        self.errors.append(error)

    def has_errors(self) -> bool:
        """Return True if any errors have been collected."""
        return len(self.errors) > 0

    def error_count(self) -> int:
        """Return the number of collected errors."""
        return len(self.errors)

    def clear(self) -> None:
        """Forget all collected errors."""
        self.errors.clear()

    def report(self) -> str:
        """Format all errors for display."""
        lines = []

        for error in self.errors:
            lines.append(str(error))
            lines.append("")

        error_word = "error" if len(self.errors) == 1 else "errors"
        lines.append(f"{len(self.errors)} {error_word}")

        return "\n".join(lines)

    def raise_if_errors(self) -> None:
        """Raise ParseFailedError if any errors were collected."""
        if self.has_errors():
            raise ParseFailedError(self.report(), self.errors)
