"""
Token types for the Lox lexer.

Token type categories:
- Single-character punctuation and operators
- One- or two-character comparison/equality operators
- Literals (identifiers, strings, numbers)
- Keywords
- End of input
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Optional, Union


class TokenType(Enum):
    """All token types recognized by the lexer."""

    # --- Single-character tokens ---
    LPAREN = auto()             # (
    RPAREN = auto()             # )
    LBRACE = auto()             # {
    RBRACE = auto()             # }
    COMMA = auto()              # ,
    DOT = auto()                # .
    MINUS = auto()              # -
    PLUS = auto()               # +
    SEMICOLON = auto()          # ;
    SLASH = auto()              # /
    STAR = auto()               # *

    # --- One or two character tokens ---
    BANG = auto()               # !
    NE = auto()                 # !=
    ASSIGN = auto()             # =
    EQ = auto()                 # ==
    GT = auto()                 # >
    GE = auto()                 # >=
    LT = auto()                 # <
    LE = auto()                 # <=

    # --- Literals ---
    IDENTIFIER = auto()         # user-defined names
    STRING_LITERAL = auto()     # "hello"
    NUMBER_LITERAL = auto()     # 42, 3.14

    # --- Keywords ---
    AND = auto()
    CLASS = auto()
    ELSE = auto()
    FALSE = auto()
    FOR = auto()
    FUN = auto()
    IF = auto()
    NIL = auto()
    OR = auto()
    PRINT = auto()
    RETURN = auto()
    SUPER = auto()
    THIS = auto()
    TRUE = auto()
    VAR = auto()
    WHILE = auto()

    # --- Special ---
    EOF = auto()                # end of input


Literal = Union[float, str, None]


@dataclass(frozen=True)
class Token:
    """A single token from the lexer."""
    type: TokenType
    literal: Literal        # float for numbers, str for strings/identifiers
    line: int               # 1-indexed line of the first character
    lexeme: str = ""        # The original source text

    def __str__(self) -> str:
        if self.literal is None:
            return f"{self.type.name} {self.lexeme}".rstrip()
        return f"{self.type.name} {self.lexeme} {self.literal!r}"


# Keyword mapping - built once, shared by every lexer
KEYWORDS: dict[str, TokenType] = {
    "and": TokenType.AND,
    "class": TokenType.CLASS,
    "else": TokenType.ELSE,
    "false": TokenType.FALSE,
    "for": TokenType.FOR,
    "fun": TokenType.FUN,
    "if": TokenType.IF,
    "nil": TokenType.NIL,
    "or": TokenType.OR,
    "print": TokenType.PRINT,
    "return": TokenType.RETURN,
    "super": TokenType.SUPER,
    "this": TokenType.THIS,
    "true": TokenType.TRUE,
    "var": TokenType.VAR,
    "while": TokenType.WHILE,
}


# Keywords that open a declaration or statement; the parser resynchronizes
# in front of these after an error.
STATEMENT_KEYWORDS: frozenset[TokenType] = frozenset({
    TokenType.CLASS,
    TokenType.FUN,
    TokenType.VAR,
    TokenType.FOR,
    TokenType.IF,
    TokenType.WHILE,
    TokenType.PRINT,
    TokenType.RETURN,
})


def is_keyword(token_type: TokenType) -> bool:
    """Check if a token type represents a keyword."""
    return token_type in KEYWORDS.values()


def keyword_for(text: str) -> Optional[TokenType]:
    """Get the keyword token type for an identifier text, if any."""
    return KEYWORDS.get(text)
