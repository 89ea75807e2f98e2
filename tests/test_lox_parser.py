"""
Unit tests for the Lox parser and AST printer.
"""

import pytest
from lox import (
    tokenize, parse, parse_program, Parser, ParseError, print_ast,
    Literal, Grouping, Unary, Binary, Variable, Assign, Logical,
    ExprVisitor, TokenType,
)


def parse_expr(source):
    """Helper to parse a single expression."""
    return Parser(tokenize(source)).parse_expression()


def show(source):
    """Helper to parse an expression and render it."""
    return print_ast(parse_expr(source))


def show_program(source):
    """Helper to parse statements and render each one."""
    return [print_ast(s) for s in Parser(tokenize(source)).parse_program()]


class TestPrimaryExpressions:
    """Test literals and groupings."""

    def test_number(self):
        """Number literal holds a float."""
        expr = parse_expr("42")
        assert isinstance(expr, Literal)
        assert expr.value == 42.0

    def test_string(self):
        """String literal holds the unquoted text."""
        assert parse_expr('"hi"') == Literal("hi")

    def test_keywords(self):
        """true, false and nil become literals."""
        assert parse_expr("true") == Literal(True)
        assert parse_expr("false") == Literal(False)
        assert parse_expr("nil") == Literal(None)

    def test_grouping(self):
        """Parentheses produce a Grouping node."""
        expr = parse_expr("(1)")
        assert isinstance(expr, Grouping)
        assert expr.expression == Literal(1.0)

    def test_identifier(self):
        """A bare name is a variable reference."""
        expr = parse_expr("answer")
        assert isinstance(expr, Variable)
        assert expr.name.lexeme == "answer"


class TestPrecedence:
    """Test operator precedence and associativity."""

    def test_multiplication_before_addition(self):
        """2 + 3 * 4 groups the product."""
        assert show("2 + 3 * 4") == "(+ 2 (* 3 4))"

    def test_grouping_overrides(self):
        """Parentheses force the sum first."""
        assert show("(2 + 3) * 4") == "(* (group (+ 2 3)) 4)"

    def test_comparison_before_equality(self):
        """1 < 2 == true compares first."""
        assert show("1 < 2 == true") == "(== (< 1 2) true)"

    def test_left_associative(self):
        """Binary operators of one level associate to the left."""
        assert show("1 - 2 - 3") == "(- (- 1 2) 3)"
        assert show("8 / 4 / 2") == "(/ (/ 8 4) 2)"

    def test_unary_nesting(self):
        """Unary operators are right-recursive."""
        assert show("--1") == "(- (- 1))"
        assert show("!!true") == "(! (! true))"

    def test_unary_binds_tighter_than_factor(self):
        """-a * b negates before multiplying."""
        expr = parse_expr("-2 * 3")
        assert isinstance(expr, Binary)
        assert isinstance(expr.left, Unary)

    def test_classic_example(self):
        """Prefix rendering of a mixed expression."""
        assert show("-123 * (45.67)") == "(* (- 123) (group 45.67))"

    def test_all_comparisons(self):
        """Each comparison operator keeps its lexeme."""
        for op in (">", ">=", "<", "<=", "==", "!="):
            assert show(f"1 {op} 2") == f"({op} 1 2)"

    def test_operator_token_kept(self):
        """Binary nodes keep their operator token and its line."""
        expr = parse_expr("1\n+ 2")
        assert expr.operator.type == TokenType.PLUS
        assert expr.operator.line == 2


class TestLogicalAndAssignment:
    """Test the levels above equality."""

    def test_and_binds_tighter_than_or(self):
        """a or b and c groups the 'and'."""
        expr = parse_expr("a or b and c")
        assert isinstance(expr, Logical)
        assert show("a or b and c") == "(or a (and b c))"

    def test_assignment_right_associative(self):
        """a = b = 1 assigns right to left."""
        expr = parse_expr("a = b = 1")
        assert isinstance(expr, Assign)
        assert show("a = b = 1") == "(= a (= b 1))"

    def test_invalid_assignment_target(self):
        """Only names and properties can be assigned."""
        with pytest.raises(ParseError) as exc_info:
            parse_expr("1 = 2")
        assert exc_info.value.message == "invalid assignment target."


class TestCallsAndProperties:
    """Test postfix call and property syntax."""

    def test_call(self):
        """Call with arguments."""
        assert show("f(1, 2)") == "(call f 1 2)"

    def test_chained_calls(self):
        """Calls chain left to right."""
        assert show("f()(x)") == "(call (call f) x)"

    def test_get_and_set(self):
        """Property access and assignment."""
        assert show("a.b") == "(. a b)"
        assert show("a.b.c = 1") == "(= (. a b) c 1)"

    def test_this_and_super(self):
        """'this' and 'super.method' expressions."""
        assert show("this") == "this"
        assert show("super.m") == "(super m)"

    def test_missing_close_paren_in_call(self):
        """Unclosed argument list."""
        with pytest.raises(ParseError) as exc_info:
            parse_expr("f(1, 2")
        assert exc_info.value.message == "expect ')' after arguments."

    def test_too_many_arguments(self):
        """More than 255 arguments are rejected."""
        args = ", ".join("1" for _ in range(256))
        with pytest.raises(ParseError) as exc_info:
            parse_expr(f"f({args})")
        assert "255 arguments" in exc_info.value.message


class TestParseErrors:
    """Test parse failures."""

    def test_missing_close_paren(self):
        """(1 + 2 reports the missing parenthesis."""
        with pytest.raises(ParseError) as exc_info:
            parse_expr("(1 + 2")
        err = exc_info.value
        assert err.message == "expect ')' after expression."
        assert err.line == 1
        assert str(err) == "[line 1] ParseError expect ')' after expression."

    def test_error_line_is_current_token(self):
        """The error is reported at the offending token's line."""
        with pytest.raises(ParseError) as exc_info:
            parse_expr("(1 +\n2")
        assert exc_info.value.line == 2
        assert exc_info.value.token.type == TokenType.EOF

    def test_missing_operand(self):
        """A dangling operator needs an expression."""
        with pytest.raises(ParseError) as exc_info:
            parse_expr("1 +")
        assert exc_info.value.message == "expect expression."

    def test_unexpected_token(self):
        """A closing paren cannot start an expression."""
        with pytest.raises(ParseError, match="expect expression."):
            parse_expr(")")

    def test_empty_input(self):
        """Empty input has no expression."""
        with pytest.raises(ParseError):
            parse_expr("")

    def test_trailing_tokens(self):
        """The whole input must be one expression."""
        with pytest.raises(ParseError) as exc_info:
            parse_expr("1 2")
        assert exc_info.value.message == "expect end of expression."

    def test_parse_result(self):
        """parse() returns a Result instead of raising."""
        ok = parse(tokenize("1 + 2"))
        assert ok.ok
        assert isinstance(ok.value, Binary)

        failed = parse(tokenize("(1"))
        assert not failed.ok
        assert isinstance(failed.error, ParseError)


class TestStatements:
    """Test statement and declaration parsing."""

    def test_print_and_var(self):
        """Simple statements."""
        assert show_program("var a = 1; print a;") == ["(var a = 1)", "(print a)"]

    def test_var_without_initializer(self):
        """Declaration without a value."""
        assert show_program("var a;") == ["(var a)"]

    def test_expression_statement(self):
        """Expression followed by a semicolon."""
        assert show_program("1 + 2;") == ["(; (+ 1 2))"]

    def test_block(self):
        """Braces group statements."""
        assert show_program("{ var a; print a; }") == ["(block (var a) (print a))"]

    def test_if_else(self):
        """if with and without else."""
        assert show_program("if (a) print 1;") == ["(if a (print 1))"]
        assert show_program("if (a) print 1; else print 2;") == [
            "(if-else a (print 1) (print 2))"
        ]

    def test_while(self):
        """while loop."""
        assert show_program("while (x) x = x - 1;") == ["(while x (; (= x (- x 1))))"]

    def test_for_desugars_to_while(self):
        """for loops become a block holding a while loop."""
        assert show_program("for (var i = 0; i < 3; i = i + 1) print i;") == [
            "(block (var i = 0) (while (< i 3) (block (print i) (; (= i (+ i 1))))))"
        ]

    def test_for_without_clauses(self):
        """for (;;) loops forever."""
        assert show_program("for (;;) print 1;") == ["(while true (print 1))"]

    def test_function(self):
        """Function declaration with parameters."""
        assert show_program("fun f(a, b) { return a; }") == ["(fun f (a b) (return a))"]

    def test_bare_return(self):
        """return without a value."""
        assert show_program("fun f() { return; }") == ["(fun f () (return))"]

    def test_class(self):
        """Class declaration with a superclass and a method."""
        assert show_program("class B < A { m() {} }") == ["(class B < A (fun m ()))"]

    def test_empty_program(self):
        """No tokens, no statements."""
        assert show_program("") == []

    def test_missing_semicolon(self):
        """print requires a terminating semicolon."""
        with pytest.raises(ParseError) as exc_info:
            show_program("print 1")
        assert exc_info.value.message == "expect ';' after value."

    def test_unclosed_block(self):
        """Block requires a closing brace."""
        with pytest.raises(ParseError, match="expect '}' after block."):
            show_program("{ print 1;")

    def test_recovery_collects_errors(self):
        """The parser resynchronizes and reports the first error."""
        parser = Parser(tokenize("var = 1; print 2; var;"))
        with pytest.raises(ParseError) as exc_info:
            parser.parse_program()
        assert exc_info.value.message == "expect variable name."
        assert parser.diagnostics.error_count == 2

    def test_parse_program_result(self):
        """parse_program() returns a Result."""
        result = parse_program(tokenize("print 1; print 2;"))
        assert result.ok
        assert len(result.value) == 2
        assert not parse_program(tokenize("print;")).ok


class TestAstPrinter:
    """Test the prefix-notation printer."""

    def test_literals(self):
        """Literals render as the interpreter prints them, strings quoted."""
        assert show("nil") == "nil"
        assert show("true") == "true"
        assert show("2.5") == "2.5"
        assert show("10") == "10"
        assert show('"text"') == '"text"'

    def test_statement_nodes(self):
        """Statements render with their keyword."""
        assert show_program('print "hi";') == ['(print "hi")']


class TestVisitorExhaustiveness:
    """Test that visitors must handle every node variant."""

    def test_incomplete_visitor_cannot_be_instantiated(self):
        """Missing visit methods make the visitor abstract."""

        class LiteralsOnly(ExprVisitor):
            def visit_literal(self, expr):
                return expr.value

        with pytest.raises(TypeError):
            LiteralsOnly()


class TestNestingLimits:
    """Test that deeply nested input fails with a ParseError."""

    def test_moderate_nesting(self):
        """Fifty nested groupings parse."""
        expr = parse_expr("(" * 50 + "1" + ")" * 50)
        assert isinstance(expr, Grouping)

    def test_deep_grouping(self):
        """Hundreds of nested parentheses are rejected, not a crash."""
        with pytest.raises(ParseError) as exc_info:
            parse_expr("(" * 200 + "1" + ")" * 200)
        assert exc_info.value.message == "expression nested too deeply."
        assert exc_info.value.token.type == TokenType.LPAREN

    def test_deep_unary(self):
        """A long run of prefix operators is rejected."""
        with pytest.raises(ParseError, match="expression nested too deeply."):
            parse_expr("-" * 400 + "1")

    def test_deep_assignment(self):
        """Long right-associative assignment chains are rejected."""
        with pytest.raises(ParseError, match="expression nested too deeply."):
            parse_expr("a = " * 300 + "1")

    def test_deep_statements(self):
        """Deeply nested statements are rejected."""
        with pytest.raises(ParseError, match="statement nested too deeply."):
            show_program("{" * 200 + "}" * 200)

    def test_depth_resets_after_error(self):
        """Recovery continues with a fresh depth count."""
        parser = Parser(tokenize("(" * 200 + "1" + ")" * 200 + ";\n" + "print (((1)));"))
        with pytest.raises(ParseError):
            parser.parse_program()
        assert parser.diagnostics.error_count == 1
        assert parser.depth == 0

    def test_parse_result(self):
        """parse() returns the nesting error as a Result."""
        result = parse(tokenize("(" * 300 + "1" + ")" * 300))
        assert not result.ok
        assert isinstance(result.error, ParseError)
