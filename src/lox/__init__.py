"""
Lox - a small dynamically-typed scripting language.

This package provides:
- Lexer: Tokenizes Lox source code
- Parser: Builds an AST from tokens
- Interpreter: Evaluates expressions and executes statements
- AstPrinter: Renders trees for debugging

Usage:
    from lox import scan, parse, evaluate

    tokens = scan('2 + 3 * 4').unwrap()
    expr = parse(tokens).unwrap()
    result = evaluate(expr)
    if result.ok:
        print(result.value)        # 14
    else:
        print(result.error)        # [line 1] RuntimeError ...

    # Or run whole programs
    from lox import Interpreter, run_source
    result = run_source('var a = 1; print a + 2;', Interpreter())
"""

__version__ = "0.1.0"

from .tokens import (
    Token,
    TokenType,
    KEYWORDS,
    is_keyword,
)

from .lexer import (
    Lexer,
    tokenize,
    scan,
)

from .parser import (
    Parser,
    parse,
    parse_program,
)

from .ast import (
    # Expressions
    Expr,
    ExprVisitor,
    Literal,
    Grouping,
    Unary,
    Binary,
    Logical,
    Variable,
    Assign,
    Call,
    Get,
    Set,
    This,
    Super,
    # Statements
    Stmt,
    StmtVisitor,
    ExpressionStmt,
    Print,
    Var,
    Block,
    If,
    While,
    Function,
    Return,
    Class,
    # Helpers
    AstPrinter,
    print_ast,
)

from .errors import (
    LoxError,
    LexError,
    ParseError,
    RuntimeError,
    Result,
    DiagnosticCollector,
)

from .runtime import (
    Interpreter,
    ExecutionResult,
    Environment,
    Value,
    ValueType,
    evaluate,
    interpret,
    run_source,
    stringify,
)

from .config import (
    LoxConfig,
    load_config,
)

__all__ = [
    # Tokens
    'Token',
    'TokenType',
    'KEYWORDS',
    'is_keyword',

    # Lexer
    'Lexer',
    'tokenize',
    'scan',

    # Parser
    'Parser',
    'parse',
    'parse_program',

    # AST nodes
    'Expr',
    'ExprVisitor',
    'Literal',
    'Grouping',
    'Unary',
    'Binary',
    'Logical',
    'Variable',
    'Assign',
    'Call',
    'Get',
    'Set',
    'This',
    'Super',
    'Stmt',
    'StmtVisitor',
    'ExpressionStmt',
    'Print',
    'Var',
    'Block',
    'If',
    'While',
    'Function',
    'Return',
    'Class',
    'AstPrinter',
    'print_ast',

    # Errors
    'LoxError',
    'LexError',
    'ParseError',
    'RuntimeError',
    'Result',
    'DiagnosticCollector',

    # Runtime
    'Interpreter',
    'ExecutionResult',
    'Environment',
    'Value',
    'ValueType',
    'evaluate',
    'interpret',
    'run_source',
    'stringify',

    # Configuration
    'LoxConfig',
    'load_config',
]
