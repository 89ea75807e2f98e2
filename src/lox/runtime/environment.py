"""
Variable environments for the Lox interpreter.

Environments form a chain via `enclosing` for lexical block scoping.
"""

from typing import Dict, Optional

from .values import Value
from ..tokens import Token
from ..errors import error_undefined_variable


class Environment:
    """A single scope containing variable bindings."""

    def __init__(self, enclosing: Optional["Environment"] = None):
        self.values: Dict[str, Value] = {}
        self.enclosing = enclosing

    def define(self, name: str, value: Value) -> None:
        """Bind a name in this scope (redefinition is allowed)."""
        self.values[name] = value

    def get(self, name: Token) -> Value:
        """Look up a variable in this scope or enclosing scopes."""
        if name.lexeme in self.values:
            return self.values[name.lexeme]
        if self.enclosing is not None:
            return self.enclosing.get(name)
        raise error_undefined_variable(name)

    def assign(self, name: Token, value: Value) -> None:
        """
        Update an existing variable.

        Searches up the scope chain to find where the variable is defined.
        """
        if name.lexeme in self.values:
            self.values[name.lexeme] = value
            return
        if self.enclosing is not None:
            self.enclosing.assign(name, value)
            return
        raise error_undefined_variable(name)

    def contains(self, name: str) -> bool:
        """Check if a variable exists in this scope or enclosing ones."""
        if name in self.values:
            return True
        return self.enclosing is not None and self.enclosing.contains(name)

    @property
    def depth(self) -> int:
        """Number of enclosing scopes (0 for the global scope)."""
        return 0 if self.enclosing is None else self.enclosing.depth + 1
