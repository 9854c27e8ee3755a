"""
Kaleidoscope Lexer (Tokenizer)
==============================

This module implements the lexer for the Kaleidoscope language. It pulls
characters from a text stream one at a time and turns them into tokens
for the parser, on demand.

Token Categories
----------------
- Keywords: def, extern, if, then, else, for, in, binary, unary, var
- Identifiers: an ASCII letter followed by ASCII letters and digits
- Numbers: a run of digits and '.', read as a double
- Characters: every other character is its own token ('+', '(', ';', ...)

Comments
--------
- Line comments start with '#' and run to the end of the line

Number Literals
---------------
The lexer accepts any run of digits and dots and never rejects one. The
value is the longest leading part of the run that reads as a decimal
number, so "1.2.3" gives 1.2 and a lone "." gives 0.0.

Example Usage
-------------
>>> from kaleidoscope.frontend.lexer import Lexer
>>> lexer = Lexer.from_string("def f(x) x + 1")
>>> for token in lexer.tokenize():
...     print(token)
Token(DEF, 'def', 1:1)
Token(IDENTIFIER, 'f', 1:5)
Token(CHAR, '(', 1:6)
Token(IDENTIFIER, 'x', 1:7)
Token(CHAR, ')', 1:8)
Token(IDENTIFIER, 'x', 1:10)
Token(CHAR, '+', 1:12)
Token(NUMBER, 1.0, 1:14)
Token(EOF, 1:15)
"""

import io
import logging
import re
import string
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import Iterator, TextIO

from kaleidoscope.errors import SourceLocation

logger = logging.getLogger(__name__)


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """
    Token types for the Kaleidoscope language.

    Keywords get their own members so the parser can dispatch on them
    directly. Operators and punctuation are not enumerated: they all share
    CHAR and carry the character itself as their value.
    """

    # === Structural Tokens ===
    EOF = auto()            # End of input

    # === Commands ===
    DEF = auto()            # def
    EXTERN = auto()         # extern

    # === Primary ===
    IDENTIFIER = auto()     # Variable/function names
    NUMBER = auto()         # Numeric literals

    # === Control ===
    IF = auto()             # if
    THEN = auto()           # then
    ELSE = auto()           # else
    FOR = auto()            # for
    IN = auto()             # in

    # === Operator Definitions ===
    BINARY = auto()         # binary
    UNARY = auto()          # unary

    # === Variable Definition ===
    VAR = auto()            # var

    # === Everything Else ===
    CHAR = auto()           # Any single character: + - * / < > ( ) , ; ...


# =============================================================================
# Keyword Mapping
# =============================================================================

KEYWORDS: dict[str, TokenType] = {
    "def": TokenType.DEF,
    "extern": TokenType.EXTERN,
    "if": TokenType.IF,
    "then": TokenType.THEN,
    "else": TokenType.ELSE,
    "for": TokenType.FOR,
    "in": TokenType.IN,
    "binary": TokenType.BINARY,
    "unary": TokenType.UNARY,
    "var": TokenType.VAR,
}


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    Represents a single token read from the input.

    Attributes:
        type: The TokenType classification
        value: Identifier/keyword text, the character of a CHAR token,
               the float of a NUMBER token, or None for EOF
        line: Line number in source (1-indexed)
        column: Column number in source (1-indexed)
        filename: Name of the source
        length: Number of source characters the token spans
    """
    type: TokenType
    value: str | float | None
    line: int
    column: int
    filename: str
    length: int = 1

    def __repr__(self) -> str:
        """Format token for debugging output."""
        if self.value is not None:
            return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"
        return f"Token({self.type.name}, {self.line}:{self.column})"

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)

    def is_char(self, char: str) -> bool:
        """Return True if this is the single-character token `char`."""
        return self.type == TokenType.CHAR and self.value == char

    def describe(self) -> str:
        """Short human-readable form used in diagnostics."""
        if self.type == TokenType.EOF:
            return "end of input"
        if self.type == TokenType.CHAR:
            return f"'{self.value}'"
        if self.type == TokenType.NUMBER:
            return f"number {self.value:g}"
        if self.type == TokenType.IDENTIFIER:
            return f"identifier '{self.value}'"
        return f"keyword '{self.value}'"


# =============================================================================
# Number Conversion
# =============================================================================

# Longest leading decimal number of a digit/dot run: "12.5.1" -> "12.5"
_NUMBER_PREFIX = re.compile(r"\d*\.?\d*")


def parse_number(text: str) -> float:
    """
    Convert a run of digits and dots to a float.

    Uses the longest leading part of `text` that is a valid decimal
    number. A run without any digit in that part (".", "..5") gives 0.0.

    Args:
        text: The raw literal text, made of digits and '.' only

    Returns:
        The numeric value
    """
    prefix = _NUMBER_PREFIX.match(text).group(0)
    if not any(c.isdigit() for c in prefix):
        return 0.0
    return float(prefix)


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Pull-based tokenizer for Kaleidoscope.

    The lexer keeps exactly one character of lookahead, read from its
    stream only when needed. Each call to next_token() reads one character
    past the end of the token it returns and keeps that character for the
    next call.

    Usage:
        lexer = Lexer.from_string("extern sin(x)")
        token = lexer.next_token()

    Attributes:
        stream: The text stream characters are read from
        filename: Name of the source (for error reporting)
    """

    # Characters that can start an identifier
    IDENT_START = string.ascii_letters

    # Characters that can continue an identifier
    IDENT_CHARS = string.ascii_letters + string.digits

    # Characters that can appear in a numeric literal
    NUMBER_CHARS = string.digits + "."

    WHITESPACE = " \t\n\r\v\f"

    def __init__(self, stream: TextIO, filename: str = "<stdin>"):
        """
        Initialize the lexer over a text stream.

        Args:
            stream: Source of characters, read one at a time
            filename: Name of the source (for error messages)
        """
        self.stream = stream
        self.filename = filename

        # One character of lookahead; "" once the stream is exhausted.
        # Starts as a blank so the first call reads from the stream.
        self._last_char = " "
        self._at_eof = False

        # Position of _last_char
        self._line = 1
        self._column = 0

        # Text of the current line read so far, for error context
        self._line_text = ""

    @classmethod
    def from_string(cls, source: str, filename: str = "<input>") -> "Lexer":
        """Create a lexer over an in-memory string."""
        return cls(io.StringIO(source), filename)

    @classmethod
    def from_file(cls, path: str | Path) -> "Lexer":
        """Create a lexer over the contents of a file."""
        path = Path(path)
        return cls.from_string(path.read_text(encoding="utf-8"), str(path))

    @property
    def line(self) -> int:
        """Line number of the lookahead character."""
        return self._line

    @property
    def line_text(self) -> str:
        """Text of the current line read so far."""
        return self._line_text

    # =========================================================================
    # Public Interface
    # =========================================================================

    def next_token(self) -> Token:
        """
        Read and return the next token.

        Once the input is exhausted every further call returns EOF.
        """
        while True:
            # Skip whitespace
            while self._last_char in self.WHITESPACE and not self._at_eof:
                self._read_char()

            start_line, start_column = self._line, self._column

            # identifier: [a-zA-Z][a-zA-Z0-9]*
            if self._last_char and self._last_char in self.IDENT_START:
                return self._scan_identifier(start_line, start_column)

            # number: [0-9.]+
            if self._last_char and self._last_char in self.NUMBER_CHARS:
                return self._scan_number(start_line, start_column)

            # Comment until end of line, then start over
            if self._last_char == "#":
                self._skip_comment()
                continue

            if self._at_eof:
                return self._make_token(TokenType.EOF, None, start_line, start_column)

            this_char = self._last_char
            self._read_char()
            return self._make_token(TokenType.CHAR, this_char, start_line, start_column)

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens until end of input.

        Yields:
            Every token in order, ending with a single EOF token
        """
        while True:
            token = self.next_token()
            yield token
            if token.type == TokenType.EOF:
                return

    # =========================================================================
    # Character Access
    # =========================================================================

    def _read_char(self) -> str:
        """
        Replace the lookahead character with the next one from the stream.

        Updates line and column tracking. Returns "" at end of input and
        stops reading from the stream from then on.
        """
        if self._at_eof:
            return ""

        char = self.stream.read(1)

        if self._last_char == "\n":
            self._line += 1
            self._column = 1
            self._line_text = ""
        else:
            self._column += 1

        if char == "":
            self._at_eof = True
        elif char != "\n":
            self._line_text += char

        self._last_char = char
        return char

    # =========================================================================
    # Token Scanners
    # =========================================================================

    def _make_token(
        self,
        token_type: TokenType,
        value: str | float | None,
        line: int,
        column: int,
        length: int = 1,
    ) -> Token:
        """Create a token at the given position."""
        return Token(
            type=token_type,
            value=value,
            line=line,
            column=column,
            filename=self.filename,
            length=length,
        )

    def _scan_identifier(self, line: int, column: int) -> Token:
        """Scan an identifier or keyword starting at the lookahead."""
        text = self._last_char
        while self._read_char() and self._last_char in self.IDENT_CHARS:
            text += self._last_char

        keyword = KEYWORDS.get(text)
        if keyword is not None:
            logger.debug(f"{self.filename}:{line}:{column}: keyword '{text}'")
            return self._make_token(keyword, text, line, column, len(text))

        return self._make_token(TokenType.IDENTIFIER, text, line, column, len(text))

    def _scan_number(self, line: int, column: int) -> Token:
        """Scan a numeric literal starting at the lookahead."""
        text = self._last_char
        while self._read_char() and self._last_char in self.NUMBER_CHARS:
            text += self._last_char

        value = parse_number(text)
        if text.count(".") > 1:
            logger.debug(
                f"{self.filename}:{line}:{column}: malformed number '{text}' read as {value}"
            )
        return self._make_token(TokenType.NUMBER, value, line, column, len(text))

    def _skip_comment(self) -> None:
        """Skip a '#' comment up to (not including) the line terminator."""
        while True:
            char = self._read_char()
            if char in ("", "\n", "\r"):
                return


# =============================================================================
# Convenience Functions
# =============================================================================

def tokenize_source(source: str, filename: str = "<input>") -> list[Token]:
    """
    Tokenize a whole string.

    Args:
        source: Kaleidoscope source text
        filename: Source name for token locations

    Returns:
        All tokens, ending with EOF
    """
    return list(Lexer.from_string(source, filename).tokenize())
