"""
Abstract Syntax Tree (AST) node definitions for Lox.

The node set is closed. Each node dispatches to the matching `visit_*`
method of a visitor, and every visit method on `ExprVisitor` /
`StmtVisitor` is abstract, so an operation over the tree (evaluation,
printing, ...) cannot be instantiated until it handles every variant.
New operations are new visitor classes; the nodes never change for them.

Nodes are immutable once the parser has built them.
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, List, Optional, Union

from .tokens import Token


# =============================================================================
# Expression Nodes
# =============================================================================

@dataclass(frozen=True)
class Expr(ABC):
    """Base class for all expressions."""

    @abstractmethod
    def accept(self, visitor: "ExprVisitor") -> Any:
        """Dispatch to the visitor method for this variant."""


@dataclass(frozen=True)
class Literal(Expr):
    """A constant: number, string, boolean or nil (None)."""
    value: Union[float, str, bool, None]

    def accept(self, visitor: "ExprVisitor") -> Any:
        return visitor.visit_literal(self)


@dataclass(frozen=True)
class Grouping(Expr):
    """A parenthesized sub-expression."""
    expression: Expr

    def accept(self, visitor: "ExprVisitor") -> Any:
        return visitor.visit_grouping(self)


@dataclass(frozen=True)
class Unary(Expr):
    """Negation (-x) or logical not (!x)."""
    operator: Token
    operand: Expr

    def accept(self, visitor: "ExprVisitor") -> Any:
        return visitor.visit_unary(self)


@dataclass(frozen=True)
class Binary(Expr):
    """Arithmetic, comparison or equality."""
    left: Expr
    operator: Token
    right: Expr

    def accept(self, visitor: "ExprVisitor") -> Any:
        return visitor.visit_binary(self)


@dataclass(frozen=True)
class Logical(Expr):
    """Short-circuit `and` / `or`."""
    left: Expr
    operator: Token
    right: Expr

    def accept(self, visitor: "ExprVisitor") -> Any:
        return visitor.visit_logical(self)


@dataclass(frozen=True)
class Variable(Expr):
    """An identifier reference."""
    name: Token

    def accept(self, visitor: "ExprVisitor") -> Any:
        return visitor.visit_variable(self)


@dataclass(frozen=True)
class Assign(Expr):
    """Assignment to an existing variable (x = value)."""
    name: Token
    value: Expr

    def accept(self, visitor: "ExprVisitor") -> Any:
        return visitor.visit_assign(self)


@dataclass(frozen=True)
class Call(Expr):
    """A call (callee(arg, ...)); `paren` is the closing parenthesis."""
    callee: Expr
    paren: Token
    arguments: List[Expr] = field(default_factory=list)

    def accept(self, visitor: "ExprVisitor") -> Any:
        return visitor.visit_call(self)


@dataclass(frozen=True)
class Get(Expr):
    """Property access (object.name)."""
    object: Expr
    name: Token

    def accept(self, visitor: "ExprVisitor") -> Any:
        return visitor.visit_get(self)


@dataclass(frozen=True)
class Set(Expr):
    """Property assignment (object.name = value)."""
    object: Expr
    name: Token
    value: Expr

    def accept(self, visitor: "ExprVisitor") -> Any:
        return visitor.visit_set(self)


@dataclass(frozen=True)
class This(Expr):
    """The `this` keyword."""
    keyword: Token

    def accept(self, visitor: "ExprVisitor") -> Any:
        return visitor.visit_this(self)


@dataclass(frozen=True)
class Super(Expr):
    """A superclass method reference (super.method)."""
    keyword: Token
    method: Token

    def accept(self, visitor: "ExprVisitor") -> Any:
        return visitor.visit_super(self)


class ExprVisitor(ABC):
    """Operation over every expression variant."""

    @abstractmethod
    def visit_literal(self, expr: Literal) -> Any: ...

    @abstractmethod
    def visit_grouping(self, expr: Grouping) -> Any: ...

    @abstractmethod
    def visit_unary(self, expr: Unary) -> Any: ...

    @abstractmethod
    def visit_binary(self, expr: Binary) -> Any: ...

    @abstractmethod
    def visit_logical(self, expr: Logical) -> Any: ...

    @abstractmethod
    def visit_variable(self, expr: Variable) -> Any: ...

    @abstractmethod
    def visit_assign(self, expr: Assign) -> Any: ...

    @abstractmethod
    def visit_call(self, expr: Call) -> Any: ...

    @abstractmethod
    def visit_get(self, expr: Get) -> Any: ...

    @abstractmethod
    def visit_set(self, expr: Set) -> Any: ...

    @abstractmethod
    def visit_this(self, expr: This) -> Any: ...

    @abstractmethod
    def visit_super(self, expr: Super) -> Any: ...


# =============================================================================
# Statement Nodes
# =============================================================================

@dataclass(frozen=True)
class Stmt(ABC):
    """Base class for all statements."""

    @abstractmethod
    def accept(self, visitor: "StmtVisitor") -> Any:
        """Dispatch to the visitor method for this variant."""


@dataclass(frozen=True)
class ExpressionStmt(Stmt):
    """An expression evaluated for its side effects (expr;)."""
    expression: Expr

    def accept(self, visitor: "StmtVisitor") -> Any:
        return visitor.visit_expression_stmt(self)


@dataclass(frozen=True)
class Print(Stmt):
    """print expr;"""
    expression: Expr

    def accept(self, visitor: "StmtVisitor") -> Any:
        return visitor.visit_print(self)


@dataclass(frozen=True)
class Var(Stmt):
    """A variable declaration.

    Syntax:
        var x;
        var x = 42;
    """
    name: Token
    initializer: Optional[Expr] = None

    def accept(self, visitor: "StmtVisitor") -> Any:
        return visitor.visit_var(self)


@dataclass(frozen=True)
class Block(Stmt):
    """A braced list of statements with its own scope."""
    statements: List[Stmt] = field(default_factory=list)

    def accept(self, visitor: "StmtVisitor") -> Any:
        return visitor.visit_block(self)


@dataclass(frozen=True)
class If(Stmt):
    """if (condition) then_branch else else_branch"""
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt] = None

    def accept(self, visitor: "StmtVisitor") -> Any:
        return visitor.visit_if(self)


@dataclass(frozen=True)
class While(Stmt):
    """while (condition) body; `for` loops are desugared into this."""
    condition: Expr
    body: Stmt

    def accept(self, visitor: "StmtVisitor") -> Any:
        return visitor.visit_while(self)


@dataclass(frozen=True)
class Function(Stmt):
    """A function or method declaration."""
    name: Token
    params: List[Token] = field(default_factory=list)
    body: List[Stmt] = field(default_factory=list)

    def accept(self, visitor: "StmtVisitor") -> Any:
        return visitor.visit_function(self)


@dataclass(frozen=True)
class Return(Stmt):
    """return value;"""
    keyword: Token
    value: Optional[Expr] = None

    def accept(self, visitor: "StmtVisitor") -> Any:
        return visitor.visit_return(self)


@dataclass(frozen=True)
class Class(Stmt):
    """A class declaration.

    Syntax:
        class Name < Superclass {
            method() { ... }
        }
    """
    name: Token
    superclass: Optional[Variable] = None
    methods: List[Function] = field(default_factory=list)

    def accept(self, visitor: "StmtVisitor") -> Any:
        return visitor.visit_class(self)


class StmtVisitor(ABC):
    """Operation over every statement variant."""

    @abstractmethod
    def visit_expression_stmt(self, stmt: ExpressionStmt) -> Any: ...

    @abstractmethod
    def visit_print(self, stmt: Print) -> Any: ...

    @abstractmethod
    def visit_var(self, stmt: Var) -> Any: ...

    @abstractmethod
    def visit_block(self, stmt: Block) -> Any: ...

    @abstractmethod
    def visit_if(self, stmt: If) -> Any: ...

    @abstractmethod
    def visit_while(self, stmt: While) -> Any: ...

    @abstractmethod
    def visit_function(self, stmt: Function) -> Any: ...

    @abstractmethod
    def visit_return(self, stmt: Return) -> Any: ...

    @abstractmethod
    def visit_class(self, stmt: Class) -> Any: ...


# =============================================================================
# Printing
# =============================================================================

def format_literal(value: Union[float, str, bool, None]) -> str:
    """Render a literal the way the interpreter prints values."""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isinf(value) or math.isnan(value):
            return str(value)
        # Shortest round-trip digits, written out without an exponent
        text = format(Decimal(repr(value)), "f")
        return text[:-2] if text.endswith(".0") else text
    return value


class AstPrinter(ExprVisitor, StmtVisitor):
    """Renders a tree as parenthesized prefix notation, e.g. (* (- 1) 2)."""

    def print(self, node: Union[Expr, Stmt]) -> str:
        return node.accept(self)

    def _parenthesize(self, name: str, *parts: Union[Expr, Stmt, str]) -> str:
        pieces = [name]
        for part in parts:
            pieces.append(part if isinstance(part, str) else part.accept(self))
        return "(" + " ".join(pieces) + ")"

    # --- expressions ---

    def visit_literal(self, expr: Literal) -> str:
        if isinstance(expr.value, str):
            return f'"{expr.value}"'
        return format_literal(expr.value)

    def visit_grouping(self, expr: Grouping) -> str:
        return self._parenthesize("group", expr.expression)

    def visit_unary(self, expr: Unary) -> str:
        return self._parenthesize(expr.operator.lexeme, expr.operand)

    def visit_binary(self, expr: Binary) -> str:
        return self._parenthesize(expr.operator.lexeme, expr.left, expr.right)

    def visit_logical(self, expr: Logical) -> str:
        return self._parenthesize(expr.operator.lexeme, expr.left, expr.right)

    def visit_variable(self, expr: Variable) -> str:
        return expr.name.lexeme

    def visit_assign(self, expr: Assign) -> str:
        return self._parenthesize("=", expr.name.lexeme, expr.value)

    def visit_call(self, expr: Call) -> str:
        return self._parenthesize("call", expr.callee, *expr.arguments)

    def visit_get(self, expr: Get) -> str:
        return self._parenthesize(".", expr.object, expr.name.lexeme)

    def visit_set(self, expr: Set) -> str:
        return self._parenthesize("=", expr.object, expr.name.lexeme, expr.value)

    def visit_this(self, expr: This) -> str:
        return "this"

    def visit_super(self, expr: Super) -> str:
        return self._parenthesize("super", expr.method.lexeme)

    # --- statements ---

    def visit_expression_stmt(self, stmt: ExpressionStmt) -> str:
        return self._parenthesize(";", stmt.expression)

    def visit_print(self, stmt: Print) -> str:
        return self._parenthesize("print", stmt.expression)

    def visit_var(self, stmt: Var) -> str:
        if stmt.initializer is None:
            return self._parenthesize("var", stmt.name.lexeme)
        return self._parenthesize("var", stmt.name.lexeme, "=", stmt.initializer)

    def visit_block(self, stmt: Block) -> str:
        return self._parenthesize("block", *stmt.statements)

    def visit_if(self, stmt: If) -> str:
        if stmt.else_branch is None:
            return self._parenthesize("if", stmt.condition, stmt.then_branch)
        return self._parenthesize(
            "if-else", stmt.condition, stmt.then_branch, stmt.else_branch
        )

    def visit_while(self, stmt: While) -> str:
        return self._parenthesize("while", stmt.condition, stmt.body)

    def visit_function(self, stmt: Function) -> str:
        params = "(" + " ".join(p.lexeme for p in stmt.params) + ")"
        return self._parenthesize("fun", stmt.name.lexeme, params, *stmt.body)

    def visit_return(self, stmt: Return) -> str:
        if stmt.value is None:
            return "(return)"
        return self._parenthesize("return", stmt.value)

    def visit_class(self, stmt: Class) -> str:
        parts: List[Union[Stmt, str]] = [stmt.name.lexeme]
        if stmt.superclass is not None:
            parts += ["<", stmt.superclass.name.lexeme]
        parts += stmt.methods
        return self._parenthesize("class", *parts)


def print_ast(node: Union[Expr, Stmt]) -> str:
    """Render an AST node for debugging."""
    return AstPrinter().print(node)
