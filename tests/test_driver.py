# =============================================================================
# test_driver.py - Top-Level Driver Tests
# =============================================================================
# Tests for the top-level parse loop and the parse_source() helper.
#
# Test coverage includes:
#   - Dispatch on def / extern / expression / ';'
#   - Status lines, LogError lines and prompts
#   - One-token error recovery
#   - Aggregate error reporting
# =============================================================================

import io

import pytest
from kaleidoscope.frontend.driver import (
    DriverOptions,
    ItemKind,
    TopLevelDriver,
    parse_source,
)
from kaleidoscope.frontend.lexer import Lexer
from kaleidoscope.frontend.parser import Parser
from kaleidoscope.frontend.ast import (
    BinaryExpression,
    CallExpression,
    FunctionNode,
    NumberExpression,
    PrototypeNode,
    VariableExpression,
)
from kaleidoscope.frontend.errors import ParseFailedError
from kaleidoscope.errors import KaleidoscopeError


# =============================================================================
# Helper Function
# =============================================================================

def run_driver(source: str, **options) -> tuple:
    """
    Run the driver over `source`.

    Returns:
        (items, summary, output lines)
    """
    out = io.StringIO()
    parser = Parser(Lexer.from_string(source, "<test>"))
    driver = TopLevelDriver(parser, DriverOptions(**options), out=out)
    items = list(driver.iter_items())
    return items, driver.summary, out.getvalue().splitlines()


# =============================================================================
# Dispatch Tests
# =============================================================================

class TestDispatch:
    """Test top-level construct dispatch."""

    def test_empty_input(self):
        """Nothing to parse."""
        items, summary, lines = run_driver("")
        assert items == []
        assert summary.parsed == 0
        assert lines == []

    def test_definition(self):
        """def dispatches to the definition parser."""
        items, _, lines = run_driver("def id(x) x")
        assert [item.kind for item in items] == [ItemKind.DEFINITION]
        assert items[0].node == FunctionNode(PrototypeNode("id", ["x"]), VariableExpression("x"))
        assert lines == ["Parsed a function definition."]

    def test_extern(self):
        """extern dispatches to the extern parser."""
        items, _, lines = run_driver("extern sin(x)")
        assert items[0].kind == ItemKind.EXTERN
        assert items[0].node == PrototypeNode("sin", ["x"])
        assert lines == ["Parsed an extern"]

    def test_expression(self):
        """Anything else is a top-level expression."""
        items, _, lines = run_driver("sin(1)")
        assert items[0].kind == ItemKind.EXPRESSION
        assert items[0].node.prototype.is_anonymous
        assert items[0].node.body == CallExpression("sin", [NumberExpression(1.0)])
        assert lines == ["Parsed a top-level expr"]

    def test_semicolons_are_separators(self):
        """Top-level ';' tokens are skipped silently."""
        items, summary, lines = run_driver(";;; 1 ;; 2 ;")
        assert len(items) == 2
        assert summary.failed == 0
        assert lines == ["Parsed a top-level expr"] * 2

    def test_mixed_program(self):
        """A realistic program with comments."""
        source = """
        # Compute the x'th fibonacci-ish value
        extern sin(a);
        def square(x) x * x;
        def hyp(a b) square(a) + square(b);
        hyp(3, 4) < 10;
        """
        items, summary, lines = run_driver(source)
        assert [item.kind for item in items] == [
            ItemKind.EXTERN,
            ItemKind.DEFINITION,
            ItemKind.DEFINITION,
            ItemKind.EXPRESSION,
        ]
        assert summary.parsed == 4
        assert summary.success
        assert items[3].node.body == BinaryExpression(
            "<",
            CallExpression("hyp", [NumberExpression(3.0), NumberExpression(4.0)]),
            NumberExpression(10.0),
        )

    def test_run_returns_summary(self):
        """run() drains the input and reports counts."""
        out = io.StringIO()
        parser = Parser(Lexer.from_string("1; )"))
        summary = TopLevelDriver(parser, out=out).run()
        assert (summary.parsed, summary.failed, summary.errors) == (1, 1, 1)
        assert not summary.success


# =============================================================================
# Error Recovery Tests
# =============================================================================

class TestRecovery:
    """Test one-token error recovery."""

    def test_bad_definition_then_good_expression(self):
        """def f( 1 fails, and parsing resumes afterwards."""
        items, summary, lines = run_driver("def f( 1 ; 2 + 3")
        assert summary.failed == 1
        assert summary.errors == 1
        assert [item.kind for item in items] == [ItemKind.EXPRESSION]
        assert items[0].node.body == BinaryExpression(
            "+", NumberExpression(2.0), NumberExpression(3.0)
        )
        assert lines == [
            "LogError: Expected ')' in prototype",
            "Parsed a top-level expr",
        ]

    def test_bad_definition_at_end(self):
        """A failing last construct still ends cleanly at EOF."""
        items, summary, lines = run_driver("def f( 1")
        assert items == []
        assert summary.failed == 1
        assert lines == ["LogError: Expected ')' in prototype"]

    def test_recovery_skips_one_token(self):
        """After ')' fails as an expression, the next token starts a new construct."""
        items, summary, lines = run_driver(") 4")
        assert summary.failed == 1
        assert [item.node.body for item in items] == [NumberExpression(4.0)]

    def test_each_error_reported_once(self):
        """Every failure prints exactly one LogError line."""
        _, summary, lines = run_driver("def (x) x; extern f(a, b); foo(1 2)")
        log_errors = [line for line in lines if line.startswith("LogError:")]
        assert len(log_errors) == summary.errors
        assert "LogError: Expected function name in prototype" in log_errors
        assert "LogError: Expected ')' in prototype" in log_errors
        assert "LogError: Expected ')' or ',' in argument list" in log_errors

    def test_deep_parentheses_recover(self):
        """Over-deep nesting is a syntax error and parsing continues."""
        result = parse_source("(" * 500 + "1" + ")" * 500 + "; 2")
        assert result.errors[0].message == "expression nested too deeply"
        assert result.items[-1].node == FunctionNode(PrototypeNode("", []), NumberExpression(2.0))

    def test_deep_calls_recover(self):
        """Over-deep call nesting is a syntax error, not a crash."""
        result = parse_source("f(" * 400 + "1" + ")" * 400 + "; 3")
        assert result.errors[0].message == "expression nested too deeply"
        assert result.items[-1].node == FunctionNode(PrototypeNode("", []), NumberExpression(3.0))

    def test_dangling_operator_at_end(self):
        """'1 +' at end of input terminates."""
        items, summary, _ = run_driver("1 +")
        assert items == []
        assert summary.failed == 1


# =============================================================================
# Output Tests
# =============================================================================

class TestOutput:
    """Test prompts and quiet mode."""

    def test_prompt(self):
        """The prompt is written before each construct and at the end."""
        _, _, lines = run_driver("1", show_prompt=True)
        assert lines == ["ready> Parsed a top-level expr", "ready> "]

    def test_prompt_after_separator(self):
        """A top-level ';' gets its own prompt."""
        _, _, lines = run_driver("1;2", show_prompt=True)
        assert lines == [
            "ready> Parsed a top-level expr",
            "ready> ready> Parsed a top-level expr",
            "ready> ",
        ]

    def test_existing_error_callback_kept(self):
        """A callback installed on the parser still sees every error."""
        seen = []
        parser = Parser(Lexer.from_string("); 1", "<test>"), on_error=seen.append)
        driver = TopLevelDriver(parser, out=io.StringIO())
        summary = driver.run()
        assert summary.errors == 1
        assert summary.parsed == 1
        assert seen == parser.diagnostics.errors

    def test_custom_prompt(self):
        """The prompt text is configurable."""
        _, _, lines = run_driver("", show_prompt=True, prompt="> ")
        assert lines == ["> "]

    def test_quiet(self):
        """Quiet mode writes nothing but still counts errors."""
        items, summary, lines = run_driver("1; )", quiet=True)
        assert len(items) == 1
        assert summary.errors == 1
        assert lines == []


# =============================================================================
# parse_source Tests
# =============================================================================

class TestParseSource:
    """Test the parse_source() convenience function."""

    def test_items_and_errors(self):
        """Results and errors are both returned."""
        result = parse_source("extern cos(x); def f( 1; cos(2)")
        assert [item.kind for item in result.items] == [ItemKind.EXTERN, ItemKind.EXPRESSION]
        assert len(result.errors) == 1
        assert not result.success

    def test_success(self):
        """Clean input has no errors."""
        result = parse_source("def f(x) x")
        assert result.success
        result.raise_if_errors()

    def test_raise_if_errors(self):
        """raise_if_errors raises the aggregate error with a report."""
        result = parse_source("def f( 1\n)", "prog.ks")
        with pytest.raises(ParseFailedError) as exc_info:
            result.raise_if_errors()
        error = exc_info.value
        assert isinstance(error, KaleidoscopeError)
        assert len(error.errors) == 2
        report = str(error)
        assert "prog.ks:1:8: error: Expected ')' in prototype" in report
        assert "prog.ks:2:1: error: unknown token when expecting an expression" in report
        assert report.endswith("2 errors")

    def test_idempotent(self):
        """Parsing the same text twice gives equal trees."""
        source = "def f(a b) a*b - (a+b)/2; f(1, 2)"
        first = parse_source(source)
        second = parse_source(source, "other.ks")
        assert [i.node for i in first.items] == [i.node for i in second.items]
