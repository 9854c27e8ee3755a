"""
Kaleidoscope Recursive Descent Parser
=====================================

This module implements the parser for the Kaleidoscope language. It pulls
tokens from a Lexer one at a time, keeping a single token of lookahead,
and builds AST nodes.

Grammar (EBNF)
--------------
top             ::= definition | external | expression | ';'
definition      ::= 'def' prototype expression
external        ::= 'extern' prototype
prototype       ::= IDENTIFIER '(' IDENTIFIER* ')'

expression      ::= primary binoprhs
binoprhs        ::= (BINOP primary)*
primary         ::= identifierexpr | numberexpr | parenexpr
identifierexpr  ::= IDENTIFIER | IDENTIFIER '(' (expression (',' expression)*)? ')'
numberexpr      ::= NUMBER
parenexpr       ::= '(' expression ')'

Binary Operator Precedence (lowest to highest)
----------------------------------------------
| operator | precedence |
|----------|------------|
| < >      | 10         |
| + -      | 20         |
| * /      | 40         |

All binary operators are left-associative. Binary expressions are parsed
by precedence climbing rather than one grammar rule per level, so adding
an operator only takes a new entry in the precedence table.

Error Handling
--------------
A grammar violation is reported once, through the parser's diagnostic
collector, and the failing production returns None. Every caller passes
that None straight up without building a partial node. The parser never
skips tokens on its own; recovering is left to the top-level driver.

Nesting is bounded by ParserOptions.max_depth. Input nested deeper than
that fails with "expression nested too deeply" like any other syntax
error.

Example Usage
-------------
>>> from kaleidoscope.frontend.lexer import Lexer
>>> from kaleidoscope.frontend.parser import Parser
>>> parser = Parser(Lexer.from_string("1 + 2 * 3"))
>>> parser.advance()
Token(NUMBER, 1.0, 1:1)
>>> parser.parse_expression()
BinaryExpression(op='+', left=NumberExpression(value=1.0), right=BinaryExpression(...))
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from kaleidoscope.frontend.lexer import Lexer, Token, TokenType
from kaleidoscope.frontend.ast import (
    Expression,
    NumberExpression,
    VariableExpression,
    BinaryExpression,
    CallExpression,
    PrototypeNode,
    FunctionNode,
)
from kaleidoscope.frontend.errors import (
    DiagnosticCollector,
    MissingTokenError,
    ParseError,
    UnexpectedTokenError,
)

logger = logging.getLogger(__name__)


# Default precedence of the built-in binary operators
DEFAULT_BINOP_PRECEDENCE: dict[str, int] = {
    "<": 10,
    ">": 10,
    "+": 20,
    "-": 20,
    "*": 40,
    "/": 40,
}


@dataclass
class ParserOptions:
    """
    Parser configuration options.

    Attributes:
        binop_precedence: Operator character -> precedence. Every entry
                          must be positive. None means a copy of
                          DEFAULT_BINOP_PRECEDENCE; pass a table with
                          extra entries to enable user-defined operators.
        max_depth: Deepest expression nesting accepted (parentheses and
                   call arguments). Deeper input is reported as a syntax
                   error instead of exhausting the interpreter stack.
    """
    binop_precedence: dict[str, int] = None
    max_depth: int = 64

    def __post_init__(self):
        if self.binop_precedence is None:
            self.binop_precedence = dict(DEFAULT_BINOP_PRECEDENCE)
        for op, prec in self.binop_precedence.items():
            if len(op) != 1 or prec <= 0:
                raise ValueError(f"invalid binary operator entry {op!r}: {prec}")
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {self.max_depth}")


class Parser:
    """
    Recursive descent parser for Kaleidoscope.

    The parser holds one token of lookahead in `current_token`. Nothing
    is read at construction time: call advance() once to load the first
    token before calling any parse_* method.

    Every parse_* method returns the node it built, or None after
    reporting a syntax error.

    Attributes:
        lexer: Token source
        options: Parser configuration
        diagnostics: Collector receiving every reported syntax error
        on_error: Optional callback invoked once per reported error
    """

    def __init__(
        self,
        lexer: Lexer,
        options: Optional[ParserOptions] = None,
        on_error: Optional[Callable[[ParseError], None]] = None,
    ):
        """
        Initialize the parser.

        Args:
            lexer: The lexer supplying tokens
            options: Parser configuration (uses defaults if None)
            on_error: Called with each ParseError as it is reported
        """
        self.lexer = lexer
        self.options = options or ParserOptions()
        self.diagnostics = DiagnosticCollector()
        self.on_error = on_error

        self.current_token: Optional[Token] = None

        # Number of parse_expression calls currently active
        self._depth = 0

    # =========================================================================
    # Token Access Methods
    # =========================================================================

    def advance(self) -> Token:
        """Read the next token from the lexer into current_token."""
        self.current_token = self.lexer.next_token()
        return self.current_token

    def _check_char(self, char: str) -> bool:
        """Check if the current token is the single character `char`."""
        return self.current_token.is_char(char)

    def get_token_precedence(self) -> int:
        """
        Return the precedence of the current token as a binary operator.

        Returns:
            The table precedence, or -1 if the token is not a binary
            operator (which ends precedence climbing)
        """
        token = self.current_token
        if token.type != TokenType.CHAR:
            return -1
        return self.options.binop_precedence.get(token.value, -1)

    # =========================================================================
    # Error Reporting
    # =========================================================================

    def _report(self, error: ParseError) -> None:
        """Record a syntax error and notify the error callback."""
        self.diagnostics.add(error)
        logger.debug(f"syntax error: {error.message} at {error.location}")
        if self.on_error is not None:
            self.on_error(error)

    def _source_line(self, token: Token) -> Optional[str]:
        """Return the text of the token's line if the lexer is still on it."""
        if token.line == self.lexer.line:
            return self.lexer.line_text
        return None

    def _missing(self, message: str, expected: str, hint: Optional[str] = None) -> None:
        """Report that `expected` was required at the current token."""
        token = self.current_token
        self._report(MissingTokenError(
            message,
            expected,
            location=token.location,
            hint=hint,
            source_line=self._source_line(token),
            span=token.length,
        ))

    def _unexpected(self, message: str, expected: Optional[str] = None) -> None:
        """Report that the current token does not fit the grammar here."""
        token = self.current_token
        self._report(UnexpectedTokenError(
            message,
            token.describe(),
            expected=expected,
            location=token.location,
            source_line=self._source_line(token),
            span=token.length,
        ))

    # =========================================================================
    # Primary Expressions
    # =========================================================================

    def parse_number_expr(self) -> NumberExpression:
        """numberexpr ::= NUMBER"""
        token = self.current_token
        self.advance()  # consume the number
        return NumberExpression(token.value, location=token.location)

    def parse_paren_expr(self) -> Optional[Expression]:
        """parenexpr ::= '(' expression ')'"""
        self.advance()  # eat '('
        expr = self.parse_expression()
        if expr is None:
            return None

        if not self._check_char(")"):
            self._missing("expected ')'", "')'", hint="close the parenthesized expression")
            return None
        self.advance()  # eat ')'
        return expr

    def parse_identifier_expr(self) -> Optional[Expression]:
        """
        identifierexpr
            ::= IDENTIFIER
            ::= IDENTIFIER '(' (expression (',' expression)*)? ')'
        """
        token = self.current_token
        name = token.value
        self.advance()  # eat identifier

        # Simple variable reference
        if not self._check_char("("):
            return VariableExpression(name, location=token.location)

        # Call
        self.advance()  # eat '('
        args: list[Expression] = []
        if not self._check_char(")"):
            while True:
                arg = self.parse_expression()
                if arg is None:
                    return None
                args.append(arg)

                if self._check_char(")"):
                    break

                if not self._check_char(","):
                    self._unexpected(
                        "Expected ')' or ',' in argument list",
                        expected="')' or ','",
                    )
                    return None
                self.advance()  # eat ','

        self.advance()  # eat ')'
        return CallExpression(name, args, location=token.location)

    def parse_primary(self) -> Optional[Expression]:
        """
        primary
            ::= identifierexpr
            ::= numberexpr
            ::= parenexpr
        """
        token = self.current_token
        if token.type == TokenType.IDENTIFIER:
            return self.parse_identifier_expr()
        if token.type == TokenType.NUMBER:
            return self.parse_number_expr()
        if token.is_char("("):
            return self.parse_paren_expr()

        self._unexpected(
            "unknown token when expecting an expression",
            expected="a number, an identifier or '('",
        )
        return None

    # =========================================================================
    # Binary Expressions
    # =========================================================================

    def parse_expression(self) -> Optional[Expression]:
        """expression ::= primary binoprhs"""
        if self._depth >= self.options.max_depth:
            token = self.current_token
            self._report(ParseError(
                "expression nested too deeply",
                location=token.location,
                hint=f"at most {self.options.max_depth} levels of parentheses "
                     f"and call arguments are allowed",
                source_line=self._source_line(token),
                span=token.length,
            ))
            return None

        self._depth += 1
        try:
            lhs = self.parse_primary()
            if lhs is None:
                return None
            return self.parse_bin_op_rhs(0, lhs)
        finally:
            self._depth -= 1

    def parse_bin_op_rhs(self, min_prec: int, lhs: Expression) -> Optional[Expression]:
        """
        binoprhs ::= (BINOP primary)*

        Absorb binary operators binding at least as tightly as `min_prec`
        into `lhs`.

        Args:
            min_prec: Minimal operator precedence this call may consume
            lhs: Expression parsed so far

        Returns:
            The combined expression, or None if an operand failed to parse
        """
        while True:
            tok_prec = self.get_token_precedence()

            # Not an operator, or one that binds too loosely for this level
            if tok_prec < min_prec:
                return lhs

            op_token = self.current_token
            self.advance()  # eat binop

            rhs = self.parse_primary()
            if rhs is None:
                return None

            # If the next operator binds tighter, it takes rhs as its lhs
            next_prec = self.get_token_precedence()
            if tok_prec < next_prec:
                rhs = self.parse_bin_op_rhs(tok_prec + 1, rhs)
                if rhs is None:
                    return None

            lhs = BinaryExpression(op_token.value, lhs, rhs, location=op_token.location)

    # =========================================================================
    # Top-Level Constructs
    # =========================================================================

    def parse_prototype(self) -> Optional[PrototypeNode]:
        """prototype ::= IDENTIFIER '(' IDENTIFIER* ')'"""
        name_token = self.current_token
        if name_token.type != TokenType.IDENTIFIER:
            self._missing("Expected function name in prototype", "function name")
            return None
        self.advance()

        if not self._check_char("("):
            self._missing("Expected '(' in prototype", "'('")
            return None

        params: list[str] = []
        while self.advance().type == TokenType.IDENTIFIER:
            params.append(self.current_token.value)

        if not self._check_char(")"):
            self._missing(
                "Expected ')' in prototype",
                "')'",
                hint="parameter names are identifiers separated by spaces",
            )
            return None
        self.advance()  # eat ')'

        return PrototypeNode(name_token.value, params, location=name_token.location)

    def parse_definition(self) -> Optional[FunctionNode]:
        """definition ::= 'def' prototype expression"""
        def_token = self.current_token
        self.advance()  # eat def
        proto = self.parse_prototype()
        if proto is None:
            return None

        body = self.parse_expression()
        if body is None:
            return None
        return FunctionNode(proto, body, location=def_token.location)

    def parse_extern(self) -> Optional[PrototypeNode]:
        """external ::= 'extern' prototype"""
        self.advance()  # eat extern
        return self.parse_prototype()

    def parse_top_level_expression(self) -> Optional[FunctionNode]:
        """toplevelexpr ::= expression"""
        start = self.current_token
        body = self.parse_expression()
        if body is None:
            return None

        # Wrap in an anonymous zero-argument function
        proto = PrototypeNode("", [], location=start.location)
        return FunctionNode(proto, body, location=start.location)
