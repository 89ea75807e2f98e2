"""
Lox exceptions and error handling.

One exception class per phase, each carrying a 1-based source line and a
human-readable message:
- LexError: unknown character or unterminated string
- ParseError: malformed token sequence
- RuntimeError: type mismatch (or unsupported feature) during evaluation

Rendering is fixed:
    [line N] LexError `c` message
    [line N] ParseError message
    [line N] RuntimeError message
"""

from dataclasses import dataclass
from typing import Generic, List, Optional, TypeVar

from .tokens import Token


class LoxError(Exception):
    """Base exception for Lox errors."""

    kind = "Error"

    def __init__(self, message: str, line: int):
        self.message = message
        self.line = line
        super().__init__(message)

    def format(self) -> str:
        """Format the diagnostic for display."""
        return f"[line {self.line}] {self.kind} {self.message}"

    def __str__(self) -> str:
        return self.format()


class LexError(LoxError):
    """Error during lexical analysis."""

    kind = "LexError"

    def __init__(self, message: str, line: int, char: Optional[str] = None):
        self.char = char
        super().__init__(message, line)

    def format(self) -> str:
        if self.char is None:
            return super().format()
        return f"[line {self.line}] {self.kind} `{self.char}` {self.message}"


class ParseError(LoxError):
    """Error during parsing."""

    kind = "ParseError"

    def __init__(self, message: str, line: int, token: Optional[Token] = None):
        self.token = token
        super().__init__(message, line)


class RuntimeError(LoxError):
    """Error during evaluation."""

    kind = "RuntimeError"

    def __init__(self, message: str, line: int, token: Optional[Token] = None):
        self.token = token
        super().__init__(message, line)


# --- Lexer errors ---

def error_unexpected_character(char: str, line: int) -> LexError:
    """Unknown character in source."""
    return LexError("unexpected character.", line, char)


def error_unterminated_string(line: int) -> LexError:
    """End of input reached inside a string literal."""
    return LexError("unterminated string.", line)


# --- Parser errors ---

def error_expected(message: str, token: Token) -> ParseError:
    """The current token is not what the grammar requires."""
    return ParseError(message, token.line, token)


# --- Runtime errors ---

def error_operand_number(operator: Token) -> RuntimeError:
    return RuntimeError("operand must be a number.", operator.line, operator)


def error_operands_numbers(operator: Token) -> RuntimeError:
    return RuntimeError("operands must be numbers.", operator.line, operator)


def error_operands_add(operator: Token) -> RuntimeError:
    return RuntimeError(
        "operands must be two numbers or two strings.", operator.line, operator
    )


def error_undefined_variable(name: Token) -> RuntimeError:
    return RuntimeError(f"undefined variable '{name.lexeme}'.", name.line, name)


def error_not_supported(feature: str, token: Token) -> RuntimeError:
    """Language feature whose evaluation is not available."""
    return RuntimeError(f"{feature} not supported.", token.line, token)


def error_nested_too_deeply(line: int, token: Optional[Token] = None) -> RuntimeError:
    """Evaluation recursed past the supported depth."""
    return RuntimeError("expression nested too deeply.", line, token)


T = TypeVar("T")


@dataclass
class Result(Generic[T]):
    """
    Outcome of one phase: either a value or the error that stopped it.

    Callers check `ok` (or call `unwrap()`, which re-raises the error).
    """
    value: Optional[T] = None
    error: Optional[LoxError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, raising the stored error if there is one."""
        if self.error is not None:
            raise self.error
        return self.value

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: LoxError) -> "Result[T]":
        return cls(error=error)


class DiagnosticCollector:
    """Collects errors found while the parser recovers from bad input."""

    def __init__(self, max_errors: int = 20):
        self.errors: List[LoxError] = []
        self.max_errors = max_errors

    def add(self, error: LoxError) -> None:
        """Add an error."""
        self.errors.append(error)

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def has_errors(self) -> bool:
        return len(self.errors) > 0

    @property
    def first(self) -> Optional[LoxError]:
        return self.errors[0] if self.errors else None

    @property
    def should_stop(self) -> bool:
        """Check if we've hit the max error limit."""
        return len(self.errors) >= self.max_errors

    def format_all(self) -> str:
        """Format all diagnostics for display, one per line."""
        return "\n".join(e.format() for e in self.errors)
