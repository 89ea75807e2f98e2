"""
Tree-walking interpreter for Lox.

Evaluates expression nodes to `Value`s and executes statement nodes.
"""

import logging
import math
import sys
from dataclasses import dataclass
from typing import List, Optional, TextIO

from .values import (
    Value, NIL,
    bool_val, number_val, string_val, from_literal, is_equal, stringify,
)
from .environment import Environment

from ..ast import (
    Expr, ExprVisitor, Literal, Grouping, Unary, Binary, Logical, Variable,
    Assign, Call, Get, Set, This, Super,
    Stmt, StmtVisitor, ExpressionStmt, Print, Var, Block, If, While,
    Function, Return, Class,
)
from ..errors import (
    LoxError,
    RuntimeError,
    Result,
    error_operand_number,
    error_operands_numbers,
    error_operands_add,
    error_not_supported,
    error_nested_too_deeply,
)
from ..lexer import tokenize
from ..parser import Parser
from ..tokens import Token, TokenType, STATEMENT_KEYWORDS

logger = logging.getLogger(__name__)

MODES = ("auto", "expression", "program")

# Deepest chain of nested operator evaluations (a long `1 + 1 + ...` sum
# nests one level per operator).
MAX_EVAL_DEPTH = 150


@dataclass
class ExecutionResult:
    """Result of running a piece of source text."""
    success: bool
    value: Optional[Value] = None       # Set for expression runs
    error: Optional[LoxError] = None

    @property
    def error_message(self) -> Optional[str]:
        """The rendered diagnostic, if the run failed."""
        if self.error is None:
            return None
        return self.error.format()


def _divide(left: float, right: float) -> float:
    """IEEE-754 division: x/0 gives a signed infinity, 0/0 gives NaN."""
    if right == 0.0:
        if left == 0.0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


class Interpreter(ExprVisitor, StmtVisitor):
    """
    Tree-walking interpreter for Lox.

    Expressions are side-effect free except for assignment; statements run
    against `self.environment`, which starts as the global scope and is
    swapped for a child scope while a block executes.
    """

    def __init__(self, output: Optional[TextIO] = None):
        self.output = output
        self.globals = Environment()
        self.environment = self.globals
        self.depth = 0

    # =========================================================================
    # Entry Points
    # =========================================================================

    def evaluate(self, expr: Expr) -> Value:
        """Evaluate an expression to produce a Value."""
        self.depth += 1
        try:
            return expr.accept(self)
        finally:
            self.depth -= 1

    def execute(self, stmt: Stmt) -> None:
        stmt.accept(self)

    def interpret(self, statements: List[Stmt]) -> None:
        """Execute statements in order, stopping at the first RuntimeError."""
        logger.debug("executing %d statement(s)", len(statements))
        for stmt in statements:
            self.execute(stmt)

    def execute_block(self, statements: List[Stmt], environment: Environment) -> None:
        """Execute statements in `environment`, restoring the previous scope."""
        previous = self.environment
        try:
            self.environment = environment
            for stmt in statements:
                self.execute(stmt)
        finally:
            self.environment = previous

    # =========================================================================
    # Operand Checks
    # =========================================================================

    def _check_depth(self, token: Token) -> None:
        if self.depth > MAX_EVAL_DEPTH:
            raise error_nested_too_deeply(token.line, token)

    @staticmethod
    def _check_number_operand(operator: Token, operand: Value) -> None:
        if not operand.is_number:
            raise error_operand_number(operator)

    @staticmethod
    def _check_number_operands(operator: Token, left: Value, right: Value) -> None:
        if not (left.is_number and right.is_number):
            raise error_operands_numbers(operator)

    # =========================================================================
    # Expressions
    # =========================================================================

    def visit_literal(self, expr: Literal) -> Value:
        return from_literal(expr.value)

    def visit_grouping(self, expr: Grouping) -> Value:
        return self.evaluate(expr.expression)

    def visit_unary(self, expr: Unary) -> Value:
        self._check_depth(expr.operator)
        operand = self.evaluate(expr.operand)
        operator = expr.operator

        if operator.type == TokenType.BANG:
            return bool_val(not operand.is_truthy())
        if operator.type == TokenType.MINUS:
            self._check_number_operand(operator, operand)
            return number_val(-operand.data)

        raise RuntimeError(f"unknown unary operator '{operator.lexeme}'.", operator.line, operator)

    def visit_binary(self, expr: Binary) -> Value:
        self._check_depth(expr.operator)
        left = self.evaluate(expr.left)
        right = self.evaluate(expr.right)
        operator = expr.operator
        op = operator.type

        # Equality never coerces and never fails
        if op == TokenType.EQ:
            return bool_val(is_equal(left, right))
        if op == TokenType.NE:
            return bool_val(not is_equal(left, right))

        if op == TokenType.PLUS:
            if left.is_number and right.is_number:
                return number_val(left.data + right.data)
            if left.is_string and right.is_string:
                return string_val(left.data + right.data)
            raise error_operands_add(operator)

        # Everything below requires two numbers
        self._check_number_operands(operator, left, right)

        if op == TokenType.MINUS:
            return number_val(left.data - right.data)
        if op == TokenType.STAR:
            return number_val(left.data * right.data)
        if op == TokenType.SLASH:
            return number_val(_divide(left.data, right.data))
        if op == TokenType.GT:
            return bool_val(left.data > right.data)
        if op == TokenType.GE:
            return bool_val(left.data >= right.data)
        if op == TokenType.LT:
            return bool_val(left.data < right.data)
        if op == TokenType.LE:
            return bool_val(left.data <= right.data)

        raise RuntimeError(f"unknown binary operator '{operator.lexeme}'.", operator.line, operator)

    def visit_logical(self, expr: Logical) -> Value:
        self._check_depth(expr.operator)
        left = self.evaluate(expr.left)

        if expr.operator.type == TokenType.OR:
            if left.is_truthy():
                return left
        elif not left.is_truthy():
            return left

        return self.evaluate(expr.right)

    def visit_variable(self, expr: Variable) -> Value:
        return self.environment.get(expr.name)

    def visit_assign(self, expr: Assign) -> Value:
        self._check_depth(expr.name)
        value = self.evaluate(expr.value)
        self.environment.assign(expr.name, value)
        return value

    def visit_call(self, expr: Call) -> Value:
        raise error_not_supported("function calls", expr.paren)

    def visit_get(self, expr: Get) -> Value:
        raise error_not_supported("property access", expr.name)

    def visit_set(self, expr: Set) -> Value:
        raise error_not_supported("property assignment", expr.name)

    def visit_this(self, expr: This) -> Value:
        raise error_not_supported("'this'", expr.keyword)

    def visit_super(self, expr: Super) -> Value:
        raise error_not_supported("'super'", expr.keyword)

    # =========================================================================
    # Statements
    # =========================================================================

    def visit_expression_stmt(self, stmt: ExpressionStmt) -> None:
        self.evaluate(stmt.expression)

    def visit_print(self, stmt: Print) -> None:
        value = self.evaluate(stmt.expression)
        print(stringify(value), file=self.output or sys.stdout)

    def visit_var(self, stmt: Var) -> None:
        value = NIL
        if stmt.initializer is not None:
            value = self.evaluate(stmt.initializer)
        self.environment.define(stmt.name.lexeme, value)

    def visit_block(self, stmt: Block) -> None:
        self.execute_block(stmt.statements, Environment(self.environment))

    def visit_if(self, stmt: If) -> None:
        if self.evaluate(stmt.condition).is_truthy():
            self.execute(stmt.then_branch)
        elif stmt.else_branch is not None:
            self.execute(stmt.else_branch)

    def visit_while(self, stmt: While) -> None:
        while self.evaluate(stmt.condition).is_truthy():
            self.execute(stmt.body)

    def visit_function(self, stmt: Function) -> None:
        raise error_not_supported("function declarations", stmt.name)

    def visit_return(self, stmt: Return) -> None:
        raise error_not_supported("return statements", stmt.keyword)

    def visit_class(self, stmt: Class) -> None:
        raise error_not_supported("class declarations", stmt.name)


def evaluate(expr: Expr) -> Result[Value]:
    """Evaluate an expression with a fresh interpreter."""
    try:
        return Result.success(Interpreter().evaluate(expr))
    except RuntimeError as e:
        return Result.failure(e)


def interpret(statements: List[Stmt], interpreter: Optional[Interpreter] = None) -> Result[None]:
    """Execute statements, returning the RuntimeError that stopped them, if any."""
    interpreter = interpreter or Interpreter()
    try:
        interpreter.interpret(statements)
        return Result.success(None)
    except RuntimeError as e:
        return Result.failure(e)


def looks_like_program(tokens: List[Token]) -> bool:
    """Guess whether a token list holds statements rather than one expression."""
    if tokens and tokens[0].type in STATEMENT_KEYWORDS:
        return True
    return any(
        t.type in (TokenType.SEMICOLON, TokenType.LBRACE, TokenType.RBRACE)
        for t in tokens
    )


def run_source(
    source: str,
    interpreter: Optional[Interpreter] = None,
    mode: str = "auto",
) -> ExecutionResult:
    """
    Scan, parse and run source text.

    Args:
        source: Lox source text
        interpreter: Interpreter to run against (keeps globals between calls)
        mode: "expression" evaluates a single expression, "program" executes
            statements, "auto" picks one from the token stream

    Returns:
        ExecutionResult with the expression value (expression mode) or the
        first error encountered
    """
    if mode not in MODES:
        raise ValueError(f"unknown mode {mode!r}, expected one of {', '.join(MODES)}")
    interpreter = interpreter or Interpreter()

    try:
        tokens = tokenize(source)
        if mode == "auto":
            mode = "program" if looks_like_program(tokens) else "expression"
        parser = Parser(tokens)
        if mode == "expression":
            expr = parser.parse_expression()
            logger.debug("evaluating expression")
            return ExecutionResult(success=True, value=interpreter.evaluate(expr))
        interpreter.interpret(parser.parse_program())
        return ExecutionResult(success=True)
    except LoxError as e:
        logger.debug("run failed: %s", e)
        return ExecutionResult(success=False, error=e)
    except RecursionError:
        # Recursion past the parser and evaluation limits; blamed on the
        # last line of the input.
        error = error_nested_too_deeply(source.count("\n") + 1)
        logger.debug("run failed: %s", error)
        return ExecutionResult(success=False, error=error)
