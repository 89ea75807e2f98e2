"""
Unit tests for Lox expression evaluation.
"""

import math

import pytest
from lox import scan, parse, evaluate, Interpreter, tokenize, Parser, RuntimeError
from lox.runtime.values import ValueType, TRUE, FALSE, NIL, stringify


def eval_source(source):
    """Helper to scan, parse and evaluate an expression, raising on failure."""
    expr = parse(scan(source).unwrap()).unwrap()
    return evaluate(expr).unwrap()


def eval_error(source):
    """Helper returning the RuntimeError produced by an expression."""
    expr = parse(scan(source).unwrap()).unwrap()
    result = evaluate(expr)
    assert not result.ok
    return result.error


class TestArithmetic:
    """Test numeric operators."""

    def test_precedence(self):
        """2 + 3 * 4 is 14."""
        value = eval_source("2 + 3 * 4")
        assert value.type == ValueType.NUMBER
        assert value.data == 14.0
        assert stringify(value) == "14"

    def test_grouping(self):
        """(2 + 3) * 4 is 20."""
        value = eval_source("(2 + 3) * 4")
        assert value.data == 20.0
        assert stringify(value) == "20"

    def test_subtraction_and_division(self):
        """Left-associative arithmetic."""
        assert eval_source("10 - 4 - 3").data == 3.0
        assert eval_source("7 / 2").data == 3.5

    def test_negation(self):
        """Unary minus on a number."""
        assert eval_source("-(1 + 2)").data == -3.0

    def test_divide_by_zero(self):
        """Division by zero follows float semantics."""
        assert eval_source("1 / 0").data == math.inf
        assert eval_source("-1 / 0").data == -math.inf
        assert eval_source("1 / -0").data == -math.inf
        assert math.isnan(eval_source("0 / 0").data)

    def test_literal_roundtrip(self):
        """Number literals evaluate to the parsed double."""
        for text in ("0", "12", "3.25", "100.5"):
            assert eval_source(text).data == float(text)

    def test_negative_zero_renders(self):
        """-0 keeps its sign when rendered."""
        assert stringify(eval_source("-0")) == "-0"


class TestStringConcatenation:
    """Test '+' on strings."""

    def test_concatenate(self):
        """Two strings concatenate."""
        value = eval_source('"a" + "b"')
        assert value.type == ValueType.STRING
        assert value.data == "ab"

    @pytest.mark.parametrize("source", ['1 + "a"', '"a" + 1', 'nil + "a"', "true + 1"])
    def test_mixed_operands(self, source):
        """Mixed operands fail instead of coercing."""
        err = eval_error(source)
        assert err.message == "operands must be two numbers or two strings."

    def test_error_line_is_operator_line(self):
        """The error is reported at the '+' token's line."""
        assert eval_error('1\n+ "a"').line == 2
        assert str(eval_error('1 + "a"')) == (
            "[line 1] RuntimeError operands must be two numbers or two strings."
        )


class TestComparisonAndEquality:
    """Test comparison and equality operators."""

    def test_comparison_then_equality(self):
        """1 < 2 == true is true."""
        assert eval_source("1 < 2 == true") is TRUE

    def test_comparisons(self):
        """Each comparison operator."""
        assert eval_source("2 > 1") is TRUE
        assert eval_source("1 >= 1") is TRUE
        assert eval_source("2 < 1") is FALSE
        assert eval_source("2 <= 1") is FALSE

    def test_comparison_requires_numbers(self):
        """Strings cannot be ordered."""
        assert eval_error('"a" < "b"').message == "operands must be numbers."

    @pytest.mark.parametrize("source", ["true * 2", "nil - 1", '"a" / 2', "1 > nil"])
    def test_arithmetic_requires_numbers(self, source):
        """Non-number operands fail."""
        assert eval_error(source).message == "operands must be numbers."

    def test_equality(self):
        """Equality by variant and data."""
        assert eval_source("nil == nil") is TRUE
        assert eval_source('"a" == "a"') is TRUE
        assert eval_source("1 == 1") is TRUE
        assert eval_source("true != false") is TRUE

    def test_equality_never_coerces(self):
        """Different variants compare unequal without an error."""
        assert eval_source('1 == "1"') is FALSE
        assert eval_source("nil == false") is FALSE
        assert eval_source("0 == false") is FALSE
        assert eval_source('1 != "1"') is TRUE


class TestUnary:
    """Test unary operators."""

    def test_negate_non_number(self):
        """-true fails."""
        err = eval_error("-true")
        assert err.message == "operand must be a number."
        assert str(err) == "[line 1] RuntimeError operand must be a number."

    def test_negate_string(self):
        """-"x" fails."""
        assert eval_error('-"x"').message == "operand must be a number."

    def test_not(self):
        """! uses truthiness."""
        assert eval_source("!0") is FALSE
        assert eval_source('!""') is FALSE
        assert eval_source("!nil") is TRUE
        assert eval_source("!false") is TRUE
        assert eval_source("!!1") is TRUE


class TestEvaluationOrder:
    """Test operand evaluation order."""

    def test_left_operand_first(self):
        """The left operand's error wins."""
        err = eval_error("-true\n+ -nil")
        assert err.line == 1


class TestLogical:
    """Test short-circuit operators."""

    def test_or(self):
        """or returns the first truthy operand."""
        assert eval_source("nil or 2").data == 2.0
        assert eval_source("1 or 2").data == 1.0
        assert eval_source("nil or false") is FALSE

    def test_and(self):
        """and returns the first falsy operand."""
        assert eval_source("1 and 2").data == 2.0
        assert eval_source("nil and 2") is NIL

    def test_short_circuit(self):
        """The right operand is skipped when the left decides."""
        assert eval_source("false and -true") is FALSE
        assert eval_source("1 or -true").data == 1.0


class TestUnsupported:
    """Test features that parse but do not evaluate."""

    def test_undefined_variable(self):
        """A fresh interpreter has no variables."""
        err = eval_error("x")
        assert err.message == "undefined variable 'x'."

    def test_call(self):
        """Calls are not evaluated."""
        assert eval_error("f()").message == "function calls not supported."

    def test_property_access(self):
        """Property access is not evaluated."""
        assert eval_error("a.b").message == "property access not supported."

    def test_this(self):
        """'this' is not evaluated."""
        assert eval_error("this").message == "'this' not supported."


class TestEvaluateResult:
    """Test the evaluate() boundary."""

    def test_success(self):
        """Successful evaluation carries the value."""
        expr = Parser(tokenize("1 + 1")).parse_expression()
        result = evaluate(expr)
        assert result.ok
        assert result.value.data == 2.0
        assert result.error is None

    def test_failure_does_not_raise(self):
        """A runtime error is returned, not raised."""
        expr = Parser(tokenize("-nil")).parse_expression()
        result = evaluate(expr)
        assert isinstance(result.error, RuntimeError)
        with pytest.raises(RuntimeError):
            result.unwrap()

    def test_interpreter_evaluate_raises(self):
        """The interpreter itself raises."""
        expr = Parser(tokenize("-nil")).parse_expression()
        with pytest.raises(RuntimeError):
            Interpreter().evaluate(expr)


class TestNestingLimits:
    """Test deep expressions at run time."""

    def test_long_sum(self):
        """A hundred-term sum evaluates."""
        assert eval_source(" + ".join(["1"] * 100)).data == 100.0

    def test_too_long_sum(self):
        """A left-nested chain past the evaluation limit is a RuntimeError."""
        err = eval_error(" + ".join(["1"] * 400))
        assert err.message == "expression nested too deeply."
        assert err.line == 1

    def test_interpreter_recovers(self):
        """The interpreter is reusable after hitting the limit."""
        interpreter = Interpreter()
        deep = Parser(tokenize(" + ".join(["1"] * 400))).parse_expression()
        with pytest.raises(RuntimeError):
            interpreter.evaluate(deep)
        assert interpreter.depth == 0
        assert interpreter.evaluate(Parser(tokenize("1 + 1")).parse_expression()).data == 2.0

    def test_large_and_small_numbers_render_in_decimal(self):
        """Magnitudes outside the exponent-free range still print plainly."""
        assert stringify(eval_source("10000000000000000 + 0")) == "10000000000000000"
        assert stringify(eval_source("1 / 100000")) == "0.00001"
