"""
Kaleidoscope Front End
======================

This package reads Kaleidoscope source text and turns it into syntax
trees. It provides:

- A pull-based lexer reading one character at a time from a text stream
- A recursive descent parser with precedence climbing for binary operators
- AST node types, a visitor base class and a pretty printer
- A top-level driver that parses construct after construct with simple
  error recovery

Pipeline
--------
    Characters → Lexer → Tokens → Parser → AST → (consumer)

Usage
-----
>>> from kaleidoscope.frontend import parse_source
>>> result = parse_source("def add(a b) a + b")
>>> result.items[0].node.prototype
PrototypeNode(name='add', params=['a', 'b'])

Language
--------
- One numeric type (double)
- Function definitions: def name(params) expression
- External declarations: extern name(params)
- Binary operators: < > + - * / with the usual precedence
- Calls: name(expression, ...)
- Comments: # to end of line
"""

from kaleidoscope.frontend.errors import (
    FrontendError,
    ParseError,
    UnexpectedTokenError,
    MissingTokenError,
    ParseFailedError,
    DiagnosticCollector,
)
from kaleidoscope.frontend.lexer import Lexer, Token, TokenType, KEYWORDS, tokenize_source
from kaleidoscope.frontend.parser import Parser, ParserOptions, DEFAULT_BINOP_PRECEDENCE
from kaleidoscope.frontend.driver import (
    TopLevelDriver,
    DriverOptions,
    DriverSummary,
    TopLevelItem,
    ItemKind,
    ParseResult,
    parse_source,
)
from kaleidoscope.frontend.ast import (
    ASTNode,
    Expression,
    NumberExpression,
    VariableExpression,
    BinaryExpression,
    CallExpression,
    PrototypeNode,
    FunctionNode,
    ASTVisitor,
    ASTPrinter,
)

__all__ = [
    # Errors
    "FrontendError",
    "ParseError",
    "UnexpectedTokenError",
    "MissingTokenError",
    "ParseFailedError",
    "DiagnosticCollector",
    # Lexer
    "Lexer",
    "Token",
    "TokenType",
    "KEYWORDS",
    "tokenize_source",
    # Parser
    "Parser",
    "ParserOptions",
    "DEFAULT_BINOP_PRECEDENCE",
    # Driver
    "TopLevelDriver",
    "DriverOptions",
    "DriverSummary",
    "TopLevelItem",
    "ItemKind",
    "ParseResult",
    "parse_source",
    # AST Nodes
    "ASTNode",
    "Expression",
    "NumberExpression",
    "VariableExpression",
    "BinaryExpression",
    "CallExpression",
    "PrototypeNode",
    "FunctionNode",
    "ASTVisitor",
    "ASTPrinter",
]
