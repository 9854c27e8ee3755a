"""
Kaleidoscope Abstract Syntax Tree (AST) Definitions
===================================================

This module defines the AST node types built by the Kaleidoscope parser.

Node Hierarchy
--------------
ASTNode (base)
├── Expression
│   ├── NumberExpression - numeric literal
│   ├── VariableExpression - reference to a named value
│   ├── BinaryExpression - binary operator applied to two operands
│   └── CallExpression - function call with argument expressions
├── PrototypeNode - function name and parameter names
└── FunctionNode - prototype plus a single body expression

Design Notes
------------
- All nodes are dataclasses; the set of expression kinds is closed
- Each node owns its children; the tree has no back-references
- Source locations are keyword-only and excluded from equality, so two
  parses of the same text compare equal regardless of filename
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from kaleidoscope.errors import SourceLocation


# =============================================================================
# AST Node Base Classes
# =============================================================================

@dataclass
class ASTNode:
    """
    Base class for all AST nodes.

    Attributes:
        location: Source location where this node starts, if known
    """
    location: Optional[SourceLocation] = field(
        default=None, compare=False, repr=False, kw_only=True
    )


@dataclass
class Expression(ASTNode):
    """Base class for all expression nodes."""
    pass


# =============================================================================
# Expression Nodes
# =============================================================================

@dataclass
class NumberExpression(Expression):
    """
    Numeric literal such as `1.0`.

    Attributes:
        value: The literal's value (the language has one numeric type)
    """
    value: float


@dataclass
class VariableExpression(Expression):
    """
    Reference to a variable, e.g. `x`.

    Attributes:
        name: Variable name
    """
    name: str


@dataclass
class BinaryExpression(Expression):
    """
    Binary operation.

    Represents expressions like:
        a + b
        x < 3
        (1 + 2) * 3

    Attributes:
        op: Operator character, a key of the parser's precedence table
        left: Left operand
        right: Right operand
    """
    op: str
    left: Expression
    right: Expression


@dataclass
class CallExpression(Expression):
    """
    Function call.

    Attributes:
        callee: Name of the called function
        args: Argument expressions in call order
    """
    callee: str
    args: list[Expression] = field(default_factory=list)


# =============================================================================
# Declaration Nodes
# =============================================================================

@dataclass
class PrototypeNode(ASTNode):
    """
    Function prototype: the name and parameter names, without a body.

    Used on its own for `extern` declarations and as the header of a
    function definition. An empty name marks the anonymous prototype that
    wraps a top-level expression.

    Attributes:
        name: Function name ("" for anonymous)
        params: Parameter names, in positional order
    """
    name: str
    params: list[str] = field(default_factory=list)

    @property
    def is_anonymous(self) -> bool:
        """Return True for the wrapper of a top-level expression."""
        return self.name == ""


@dataclass
class FunctionNode(ASTNode):
    """
    Function definition.

    Attributes:
        prototype: Name and parameters
        body: The body, which is exactly one expression
    """
    prototype: PrototypeNode
    body: Expression


# =============================================================================
# AST Visitor Pattern
# =============================================================================

class ASTVisitor:
    """
    Base class for AST visitors.

    Subclasses override visit_* methods for the node types they care
    about; the rest fall through to generic_visit, which walks children.

    Usage:
        class CallCounter(ASTVisitor):
            def __init__(self):
                self.calls = 0

            def visit_CallExpression(self, node):
                self.calls += 1
                self.generic_visit(node)
    """

    def visit(self, node: ASTNode) -> Any:
        """Visit a node by dispatching to the appropriate method."""
        method_name = f"visit_{node.__class__.__name__}"
        visitor = getattr(self, method_name, self.generic_visit)
        return visitor(node)

    def generic_visit(self, node: ASTNode) -> None:
        """Visit all child nodes."""
        for field_value in node.__dict__.values():
            if isinstance(field_value, ASTNode):
                self.visit(field_value)
            elif isinstance(field_value, list):
                for item in field_value:
                    if isinstance(item, ASTNode):
                        self.visit(item)


# =============================================================================
# AST Pretty Printer
# =============================================================================

class ASTPrinter(ASTVisitor):
    """
    Pretty printer for AST debugging.

    Functions and prototypes are printed as headed blocks; expressions are
    rendered inline with full parenthesization, so the printed form shows
    exactly how operators were grouped.

    Usage:
        printer = ASTPrinter()
        print(printer.print(function_node))

    Output:
        Function: f(x y)
          Body: ((x + y) * 2)
    """

    def __init__(self):
        self.output: list[str] = []
        self.indent_level = 0

    def print(self, node: ASTNode) -> str:
        """Print the AST and return as string."""
        self.output = []
        self.indent_level = 0
        self.visit(node)
        return "\n".join(self.output)

    def _emit(self, text: str) -> None:
        """Emit a line with current indentation."""
        indent = "  " * self.indent_level
        self.output.append(f"{indent}{text}")

    def visit_PrototypeNode(self, node: PrototypeNode):
        self._emit(f"Extern: {self._proto_str(node)}")

    def visit_FunctionNode(self, node: FunctionNode):
        if node.prototype.is_anonymous:
            self._emit("Top-level expression")
        else:
            self._emit(f"Function: {self._proto_str(node.prototype)}")
        self.indent_level += 1
        self._emit(f"Body: {self.expr_str(node.body)}")
        self.indent_level -= 1

    def generic_visit(self, node: ASTNode) -> None:
        if isinstance(node, Expression):
            self._emit(self.expr_str(node))
        else:
            super().generic_visit(node)

    @staticmethod
    def _proto_str(proto: PrototypeNode) -> str:
        return f"{proto.name}({' '.join(proto.params)})"

    def expr_str(self, expr: Expression) -> str:
        """Convert an expression to a fully parenthesized string."""
        if isinstance(expr, NumberExpression):
            return f"{expr.value:g}"
        if isinstance(expr, VariableExpression):
            return expr.name
        if isinstance(expr, BinaryExpression):
            return f"({self.expr_str(expr.left)} {expr.op} {self.expr_str(expr.right)})"
        if isinstance(expr, CallExpression):
            args = ", ".join(self.expr_str(a) for a in expr.args)
            return f"{expr.callee}({args})"
        return f"<{type(expr).__name__}>"
