# =============================================================================
# test_ast.py - AST Model Tests
# =============================================================================
# Tests for AST node equality, the visitor base class and the printer.
# =============================================================================

from kaleidoscope.errors import SourceLocation
from kaleidoscope.frontend.ast import (
    ASTPrinter,
    ASTVisitor,
    BinaryExpression,
    CallExpression,
    FunctionNode,
    NumberExpression,
    PrototypeNode,
    VariableExpression,
)
from kaleidoscope.frontend.driver import parse_source


class TestNodes:
    """Test node construction and equality."""

    def test_location_ignored_in_equality(self):
        """Nodes from different places compare equal when structure matches."""
        a = NumberExpression(1.0, location=SourceLocation("a.ks", 1, 1))
        b = NumberExpression(1.0, location=SourceLocation("b.ks", 9, 9))
        assert a == b

    def test_structure_compared(self):
        assert BinaryExpression("+", VariableExpression("x"), NumberExpression(1.0)) != \
            BinaryExpression("-", VariableExpression("x"), NumberExpression(1.0))

    def test_call_args_default_empty(self):
        assert CallExpression("f").args == []

    def test_anonymous_prototype(self):
        assert PrototypeNode("").is_anonymous
        assert not PrototypeNode("f", ["x"]).is_anonymous


class TestVisitor:
    """Test the visitor base class."""

    def test_generic_visit_walks_children(self):
        """Overridden methods are reached through generic traversal."""

        class VariableCollector(ASTVisitor):
            def __init__(self):
                self.names = []

            def visit_VariableExpression(self, node):
                self.names.append(node.name)

        func = parse_source("def f(a b) g(a, b * c) + a").items[0].node
        collector = VariableCollector()
        collector.visit(func)
        assert collector.names == ["a", "b", "c", "a"]


class TestPrinter:
    """Test the AST pretty printer."""

    def test_function(self):
        func = FunctionNode(
            PrototypeNode("f", ["x", "y"]),
            BinaryExpression(
                "*",
                BinaryExpression("+", VariableExpression("x"), VariableExpression("y")),
                NumberExpression(2.0),
            ),
        )
        assert ASTPrinter().print(func) == "Function: f(x y)\n  Body: ((x + y) * 2)"

    def test_extern(self):
        assert ASTPrinter().print(PrototypeNode("sin", ["x"])) == "Extern: sin(x)"

    def test_top_level_expression(self):
        func = parse_source("foo(1.5, bar())").items[0].node
        assert ASTPrinter().print(func) == "Top-level expression\n  Body: foo(1.5, bar())"

    def test_bare_expression(self):
        assert ASTPrinter().print(NumberExpression(3.0)) == "3"
