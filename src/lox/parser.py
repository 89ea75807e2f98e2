"""
Recursive descent parser for Lox.

Converts a token list into an Abstract Syntax Tree (AST).
"""

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

from .tokens import Token, TokenType, STATEMENT_KEYWORDS
from .ast import (
    # Expressions
    Expr, Literal, Grouping, Unary, Binary, Logical, Variable, Assign,
    Call, Get, Set, This, Super,
    # Statements
    Stmt, ExpressionStmt, Print, Var, Block, If, While, Function, Return, Class,
)
from .errors import (
    ParseError,
    Result,
    DiagnosticCollector,
    error_expected,
)

logger = logging.getLogger(__name__)

MAX_ARGUMENTS = 255

# Nested groupings, unary operators, assignments and statements; keeps the
# recursive descent well below the default Python recursion limit.
MAX_NESTING = 64


class Parser:
    """
    Recursive descent parser for Lox.

    Usage:
        expr = Parser(tokens).parse_expression()
        statements = Parser(tokens).parse_program()

    Precedence is encoded by one method per level, each calling the next
    tighter level for its operands:
        Lowest:  =        (right-associative)
                 or
                 and
                 == !=
                 > >= < <=
                 + -
                 * /
                 ! -      (unary, right-recursive)
        Highest: call / property access, primary
    """

    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0
        self.depth = 0
        self.diagnostics = DiagnosticCollector()

    # =========================================================================
    # Token Navigation
    # =========================================================================

    def _current(self) -> Token:
        """Get current token."""
        if self.pos >= len(self.tokens):
            return self.tokens[-1]  # EOF
        return self.tokens[self.pos]

    def _previous(self) -> Token:
        """Get the most recently consumed token."""
        return self.tokens[self.pos - 1]

    def _is_at_end(self) -> bool:
        """Check if at end of tokens."""
        return self._current().type == TokenType.EOF

    def _check(self, token_type: TokenType) -> bool:
        """Check if current token is of given type."""
        return self._current().type == token_type

    def _advance(self) -> Token:
        """Consume and return current token."""
        token = self._current()
        if not self._is_at_end():
            self.pos += 1
        return token

    def _match(self, *token_types: TokenType) -> Optional[Token]:
        """Consume token if it matches any of the given types."""
        if self._current().type in token_types:
            return self._advance()
        return None

    def _consume(self, token_type: TokenType, message: str) -> Token:
        """Consume token of expected type, or raise error."""
        if self._check(token_type):
            return self._advance()
        raise error_expected(message, self._current())

    def _synchronize(self) -> None:
        """Skip tokens until the start of the next statement."""
        self._advance()
        while not self._is_at_end():
            if self._previous().type == TokenType.SEMICOLON:
                return
            if self._current().type in STATEMENT_KEYWORDS:
                return
            self._advance()

    @contextmanager
    def _nested(self, kind: str) -> Iterator[None]:
        """Track one level of recursion, failing once MAX_NESTING is reached."""
        if self.depth >= MAX_NESTING:
            raise error_expected(f"{kind} nested too deeply.", self._current())
        self.depth += 1
        try:
            yield
        finally:
            self.depth -= 1

    # =========================================================================
    # Expression Parsing
    # =========================================================================

    def _parse_expression(self) -> Expr:
        return self._parse_assignment()

    def _parse_assignment(self) -> Expr:
        with self._nested("expression"):
            expr = self._parse_or()

            equals = self._match(TokenType.ASSIGN)
            if equals:
                value = self._parse_assignment()
                if isinstance(expr, Variable):
                    return Assign(name=expr.name, value=value)
                if isinstance(expr, Get):
                    return Set(object=expr.object, name=expr.name, value=value)
                raise error_expected("invalid assignment target.", equals)

            return expr

    def _parse_or(self) -> Expr:
        expr = self._parse_and()
        while True:
            operator = self._match(TokenType.OR)
            if operator is None:
                return expr
            right = self._parse_and()
            expr = Logical(left=expr, operator=operator, right=right)

    def _parse_and(self) -> Expr:
        expr = self._parse_equality()
        while True:
            operator = self._match(TokenType.AND)
            if operator is None:
                return expr
            right = self._parse_equality()
            expr = Logical(left=expr, operator=operator, right=right)

    def _parse_equality(self) -> Expr:
        expr = self._parse_comparison()
        while True:
            operator = self._match(TokenType.NE, TokenType.EQ)
            if operator is None:
                return expr
            right = self._parse_comparison()
            expr = Binary(left=expr, operator=operator, right=right)

    def _parse_comparison(self) -> Expr:
        expr = self._parse_term()
        while True:
            operator = self._match(TokenType.GT, TokenType.GE, TokenType.LT, TokenType.LE)
            if operator is None:
                return expr
            right = self._parse_term()
            expr = Binary(left=expr, operator=operator, right=right)

    def _parse_term(self) -> Expr:
        expr = self._parse_factor()
        while True:
            operator = self._match(TokenType.MINUS, TokenType.PLUS)
            if operator is None:
                return expr
            right = self._parse_factor()
            expr = Binary(left=expr, operator=operator, right=right)

    def _parse_factor(self) -> Expr:
        expr = self._parse_unary()
        while True:
            operator = self._match(TokenType.SLASH, TokenType.STAR)
            if operator is None:
                return expr
            right = self._parse_unary()
            expr = Binary(left=expr, operator=operator, right=right)

    def _parse_unary(self) -> Expr:
        operator = self._match(TokenType.BANG, TokenType.MINUS)
        if operator:
            with self._nested("expression"):
                operand = self._parse_unary()
            return Unary(operator=operator, operand=operand)
        return self._parse_call()

    def _parse_call(self) -> Expr:
        """Parse call and property-access postfix chains."""
        expr = self._parse_primary()
        while True:
            if self._match(TokenType.LPAREN):
                expr = self._finish_call(expr)
            elif self._match(TokenType.DOT):
                name = self._consume(TokenType.IDENTIFIER, "expect property name after '.'.")
                expr = Get(object=expr, name=name)
            else:
                return expr

    def _finish_call(self, callee: Expr) -> Call:
        arguments: List[Expr] = []
        if not self._check(TokenType.RPAREN):
            arguments.append(self._parse_expression())
            while self._match(TokenType.COMMA):
                if len(arguments) >= MAX_ARGUMENTS:
                    raise error_expected(
                        f"can't have more than {MAX_ARGUMENTS} arguments.", self._current()
                    )
                arguments.append(self._parse_expression())
        paren = self._consume(TokenType.RPAREN, "expect ')' after arguments.")
        return Call(callee=callee, paren=paren, arguments=arguments)

    def _parse_primary(self) -> Expr:
        """Parse a literal, grouping or name."""
        if self._match(TokenType.FALSE):
            return Literal(False)
        if self._match(TokenType.TRUE):
            return Literal(True)
        if self._match(TokenType.NIL):
            return Literal(None)

        token = self._match(TokenType.NUMBER_LITERAL, TokenType.STRING_LITERAL)
        if token:
            return Literal(token.literal)

        token = self._match(TokenType.THIS)
        if token:
            return This(keyword=token)

        token = self._match(TokenType.SUPER)
        if token:
            self._consume(TokenType.DOT, "expect '.' after 'super'.")
            method = self._consume(TokenType.IDENTIFIER, "expect superclass method name.")
            return Super(keyword=token, method=method)

        token = self._match(TokenType.IDENTIFIER)
        if token:
            return Variable(name=token)

        if self._match(TokenType.LPAREN):
            expr = self._parse_expression()
            self._consume(TokenType.RPAREN, "expect ')' after expression.")
            return Grouping(expr)

        raise error_expected("expect expression.", self._current())

    # =========================================================================
    # Statement Parsing
    # =========================================================================

    def _parse_declaration(self) -> Stmt:
        if self._match(TokenType.CLASS):
            return self._parse_class_declaration()
        if self._match(TokenType.FUN):
            return self._parse_function("function")
        if self._match(TokenType.VAR):
            return self._parse_var_declaration()
        return self._parse_statement()

    def _parse_class_declaration(self) -> Class:
        name = self._consume(TokenType.IDENTIFIER, "expect class name.")

        superclass = None
        if self._match(TokenType.LT):
            superclass = Variable(
                name=self._consume(TokenType.IDENTIFIER, "expect superclass name.")
            )

        self._consume(TokenType.LBRACE, "expect '{' before class body.")
        methods = []
        while not self._check(TokenType.RBRACE) and not self._is_at_end():
            methods.append(self._parse_function("method"))
        self._consume(TokenType.RBRACE, "expect '}' after class body.")

        return Class(name=name, superclass=superclass, methods=methods)

    def _parse_function(self, kind: str) -> Function:
        """Parse a function or method; `kind` only shapes the messages."""
        name = self._consume(TokenType.IDENTIFIER, f"expect {kind} name.")
        self._consume(TokenType.LPAREN, f"expect '(' after {kind} name.")

        params: List[Token] = []
        if not self._check(TokenType.RPAREN):
            params.append(self._consume(TokenType.IDENTIFIER, "expect parameter name."))
            while self._match(TokenType.COMMA):
                if len(params) >= MAX_ARGUMENTS:
                    raise error_expected(
                        f"can't have more than {MAX_ARGUMENTS} parameters.", self._current()
                    )
                params.append(self._consume(TokenType.IDENTIFIER, "expect parameter name."))
        self._consume(TokenType.RPAREN, "expect ')' after parameters.")

        self._consume(TokenType.LBRACE, f"expect '{{' before {kind} body.")
        body = self._parse_block()
        return Function(name=name, params=params, body=body)

    def _parse_var_declaration(self) -> Var:
        name = self._consume(TokenType.IDENTIFIER, "expect variable name.")

        initializer = None
        if self._match(TokenType.ASSIGN):
            initializer = self._parse_expression()

        self._consume(TokenType.SEMICOLON, "expect ';' after variable declaration.")
        return Var(name=name, initializer=initializer)

    def _parse_statement(self) -> Stmt:
        with self._nested("statement"):
            if self._match(TokenType.FOR):
                return self._parse_for_statement()
            if self._match(TokenType.IF):
                return self._parse_if_statement()
            if self._match(TokenType.PRINT):
                return self._parse_print_statement()
            keyword = self._match(TokenType.RETURN)
            if keyword:
                return self._parse_return_statement(keyword)
            if self._match(TokenType.WHILE):
                return self._parse_while_statement()
            if self._match(TokenType.LBRACE):
                return Block(statements=self._parse_block())
            return self._parse_expression_statement()

    def _parse_for_statement(self) -> Stmt:
        """Parse a for loop, desugared into a while loop inside blocks."""
        self._consume(TokenType.LPAREN, "expect '(' after 'for'.")

        if self._match(TokenType.SEMICOLON):
            initializer = None
        elif self._match(TokenType.VAR):
            initializer = self._parse_var_declaration()
        else:
            initializer = self._parse_expression_statement()

        condition = None
        if not self._check(TokenType.SEMICOLON):
            condition = self._parse_expression()
        self._consume(TokenType.SEMICOLON, "expect ';' after loop condition.")

        increment = None
        if not self._check(TokenType.RPAREN):
            increment = self._parse_expression()
        self._consume(TokenType.RPAREN, "expect ')' after for clauses.")

        body = self._parse_statement()

        if increment is not None:
            body = Block(statements=[body, ExpressionStmt(increment)])
        if condition is None:
            condition = Literal(True)
        body = While(condition=condition, body=body)
        if initializer is not None:
            body = Block(statements=[initializer, body])
        return body

    def _parse_if_statement(self) -> If:
        self._consume(TokenType.LPAREN, "expect '(' after 'if'.")
        condition = self._parse_expression()
        self._consume(TokenType.RPAREN, "expect ')' after if condition.")

        then_branch = self._parse_statement()
        else_branch = None
        if self._match(TokenType.ELSE):
            else_branch = self._parse_statement()

        return If(condition=condition, then_branch=then_branch, else_branch=else_branch)

    def _parse_print_statement(self) -> Print:
        value = self._parse_expression()
        self._consume(TokenType.SEMICOLON, "expect ';' after value.")
        return Print(value)

    def _parse_return_statement(self, keyword: Token) -> Return:
        value = None
        if not self._check(TokenType.SEMICOLON):
            value = self._parse_expression()
        self._consume(TokenType.SEMICOLON, "expect ';' after return value.")
        return Return(keyword=keyword, value=value)

    def _parse_while_statement(self) -> While:
        self._consume(TokenType.LPAREN, "expect '(' after 'while'.")
        condition = self._parse_expression()
        self._consume(TokenType.RPAREN, "expect ')' after condition.")
        body = self._parse_statement()
        return While(condition=condition, body=body)

    def _parse_block(self) -> List[Stmt]:
        """Parse statements up to the closing brace; '{' is already consumed."""
        statements = []
        while not self._check(TokenType.RBRACE) and not self._is_at_end():
            statements.append(self._parse_declaration())
        self._consume(TokenType.RBRACE, "expect '}' after block.")
        return statements

    def _parse_expression_statement(self) -> ExpressionStmt:
        expr = self._parse_expression()
        self._consume(TokenType.SEMICOLON, "expect ';' after expression.")
        return ExpressionStmt(expr)

    # =========================================================================
    # Entry Points
    # =========================================================================

    def parse_expression(self) -> Expr:
        """Parse a single expression that must span the whole token list."""
        expr = self._parse_expression()
        if not self._is_at_end():
            raise error_expected("expect end of expression.", self._current())
        return expr

    def parse_program(self) -> List[Stmt]:
        """
        Parse a sequence of declarations up to EOF.

        A bad declaration is recorded in `self.diagnostics` and parsing
        resumes at the next statement boundary; once the input is exhausted
        the first recorded error is raised.
        """
        statements = []
        while not self._is_at_end():
            try:
                statements.append(self._parse_declaration())
            except ParseError as e:
                self.diagnostics.add(e)
                if self.diagnostics.should_stop:
                    break
                self._synchronize()

        if self.diagnostics.has_errors:
            logger.debug("parse failed with %d error(s)", self.diagnostics.error_count)
            raise self.diagnostics.first
        logger.debug("parsed %d statement(s)", len(statements))
        return statements


def parse(tokens: List[Token]) -> Result[Expr]:
    """
    Parse tokens into a single expression.

    Args:
        tokens: List of tokens from the lexer

    Returns:
        Result holding the expression, or the ParseError
    """
    try:
        return Result.success(Parser(tokens).parse_expression())
    except ParseError as e:
        return Result.failure(e)


def parse_program(tokens: List[Token]) -> Result[List[Stmt]]:
    """Parse tokens into a list of statements (the first error is reported)."""
    try:
        return Result.success(Parser(tokens).parse_program())
    except ParseError as e:
        return Result.failure(e)
