"""
Lox runtime - tree-walking interpreter.

This module provides:
- Interpreter: Evaluates expressions and executes statements
- Value: Runtime values tagged with their variant
- Environment: Variable scope chain
"""

from .values import (
    Value,
    ValueType,
    NIL,
    TRUE,
    FALSE,
    nil_val,
    bool_val,
    number_val,
    string_val,
    from_literal,
    is_equal,
    stringify,
)

from .environment import (
    Environment,
)

from .interpreter import (
    Interpreter,
    ExecutionResult,
    evaluate,
    interpret,
    looks_like_program,
    run_source,
)

__all__ = [
    # Values
    'Value',
    'ValueType',
    'NIL',
    'TRUE',
    'FALSE',
    'nil_val',
    'bool_val',
    'number_val',
    'string_val',
    'from_literal',
    'is_equal',
    'stringify',

    # Environment
    'Environment',

    # Interpreter
    'Interpreter',
    'ExecutionResult',
    'evaluate',
    'interpret',
    'looks_like_program',
    'run_source',
]
