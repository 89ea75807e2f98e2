"""
Runtime values for the Lox interpreter.

Every expression evaluates to exactly one `Value`: nil, a boolean, a
double-precision number or a string. The `type` tag keeps the variants
apart, so `Value(1.0, NUMBER)` never equals `Value(True, BOOLEAN)` even
though Python considers `1.0 == True`.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from ..ast import format_literal


class ValueType(Enum):
    """Runtime value variants."""
    NIL = "nil"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"


@dataclass(frozen=True)
class Value:
    """
    A runtime value with its variant tag.

    The `data` field holds the Python object (None, bool, float or str).
    """
    data: Any
    type: ValueType

    def __repr__(self) -> str:
        return f"Value({self.data!r}, {self.type.name})"

    def __str__(self) -> str:
        return stringify(self)

    def is_truthy(self) -> bool:
        """Nil and false are falsy; everything else (0, "") is truthy."""
        if self.type == ValueType.NIL:
            return False
        if self.type == ValueType.BOOLEAN:
            return self.data
        return True

    @property
    def is_number(self) -> bool:
        return self.type == ValueType.NUMBER

    @property
    def is_string(self) -> bool:
        return self.type == ValueType.STRING


# Convenience constructors

NIL = Value(None, ValueType.NIL)
TRUE = Value(True, ValueType.BOOLEAN)
FALSE = Value(False, ValueType.BOOLEAN)


def nil_val() -> Value:
    """Create the nil value."""
    return NIL


def bool_val(b: bool) -> Value:
    """Create a boolean value."""
    return TRUE if b else FALSE


def number_val(x: float) -> Value:
    """Create a number value."""
    return Value(float(x), ValueType.NUMBER)


def string_val(s: str) -> Value:
    """Create a string value."""
    return Value(str(s), ValueType.STRING)


def from_literal(data: Union[float, str, bool, None]) -> Value:
    """Wrap a literal stored in the AST."""
    if data is None:
        return NIL
    # bool subclasses int
    if isinstance(data, bool):
        return bool_val(data)
    if isinstance(data, (int, float)):
        return number_val(data)
    if isinstance(data, str):
        return string_val(data)
    raise ValueError(f"not a literal value: {data!r}")


def is_equal(left: Value, right: Value) -> bool:
    """Structural equality without coercion between variants."""
    if left.type != right.type:
        return False
    return left.data == right.data


def stringify(value: Value) -> str:
    """
    Render a value for output.

    Numbers use their natural decimal form with a trailing ".0" removed,
    so integral values print without a decimal point.
    """
    return format_literal(value.data)
