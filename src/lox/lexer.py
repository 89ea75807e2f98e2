"""
Lexer for Lox.

Converts source text into a list of tokens for the parser.
Supports:
- Single- and two-character operators (! != = == > >= < <=)
- Line comments (//)
- String literals (may span lines, no escape sequences)
- Number literals (digits with an optional fractional part)
- Identifiers and the fixed keyword table
"""

import logging
from typing import Iterator, List, Optional

from .tokens import Token, TokenType, Literal, keyword_for
from .errors import (
    LexError,
    Result,
    error_unexpected_character,
    error_unterminated_string,
)

logger = logging.getLogger(__name__)


SINGLE_CHAR_TOKENS = {
    '(': TokenType.LPAREN,
    ')': TokenType.RPAREN,
    '{': TokenType.LBRACE,
    '}': TokenType.RBRACE,
    ',': TokenType.COMMA,
    '.': TokenType.DOT,
    '-': TokenType.MINUS,
    '+': TokenType.PLUS,
    ';': TokenType.SEMICOLON,
    '*': TokenType.STAR,
}

# char -> (token without '=', token with '=')
EQUAL_SUFFIX_TOKENS = {
    '!': (TokenType.BANG, TokenType.NE),
    '=': (TokenType.ASSIGN, TokenType.EQ),
    '>': (TokenType.GT, TokenType.GE),
    '<': (TokenType.LT, TokenType.LE),
}

WHITESPACE = ' \r\t'


def _is_digit(ch: str) -> bool:
    return '0' <= ch <= '9'


def _is_alpha(ch: str) -> bool:
    return 'a' <= ch <= 'z' or 'A' <= ch <= 'Z' or ch == '_'


def _is_alphanumeric(ch: str) -> bool:
    return _is_alpha(ch) or _is_digit(ch)


class Lexer:
    """
    Tokenizer for Lox source text.

    A lexer is single-use: it owns its cursor (start, current, line) for
    one source unit and is discarded afterwards.

    Usage:
        lexer = Lexer(source_code)
        tokens = lexer.scan_tokens()

    Or for streaming:
        for token in Lexer(source_code):
            process(token)
    """

    def __init__(self, source: str):
        self.source = source
        self.start = 0          # Offset of the first character of the lexeme
        self.current = 0        # Offset of the character about to be read
        self.line = 1           # Current line (1-indexed)

    def _is_at_end(self) -> bool:
        """Check if we've reached end of source."""
        return self.current >= len(self.source)

    def _advance(self) -> str:
        """Consume and return current character."""
        ch = self.source[self.current]
        self.current += 1
        return ch

    def _peek(self) -> str:
        """Look at the current character without consuming."""
        if self._is_at_end():
            return '\0'
        return self.source[self.current]

    def _peek_next(self) -> str:
        """Look one character past the current one."""
        if self.current + 1 >= len(self.source):
            return '\0'
        return self.source[self.current + 1]

    def _match(self, expected: str) -> bool:
        """Consume character if it matches expected."""
        if self._is_at_end() or self.source[self.current] != expected:
            return False
        self.current += 1
        return True

    def _make_token(self, token_type: TokenType, literal: Literal = None) -> Token:
        lexeme = self.source[self.start:self.current]
        return Token(token_type, literal, self.line, lexeme)

    def _skip_comment(self) -> None:
        """Skip a line comment, leaving the newline for the main loop."""
        while self._peek() != '\n' and not self._is_at_end():
            self._advance()

    def _scan_string(self) -> Token:
        """Scan a string literal; the opening quote is already consumed."""
        start_line = self.line
        while self._peek() != '"' and not self._is_at_end():
            if self._peek() == '\n':
                self.line += 1
            self._advance()

        if self._is_at_end():
            raise error_unterminated_string(self.line)

        self._advance()  # consume closing quote
        value = self.source[self.start + 1:self.current - 1]
        lexeme = self.source[self.start:self.current]
        return Token(TokenType.STRING_LITERAL, value, start_line, lexeme)

    def _scan_number(self) -> Token:
        """Scan a number literal; the first digit is already consumed."""
        while _is_digit(self._peek()):
            self._advance()

        # A trailing '.' is only part of the number if a digit follows it
        if self._peek() == '.' and _is_digit(self._peek_next()):
            self._advance()  # consume '.'
            while _is_digit(self._peek()):
                self._advance()

        text = self.source[self.start:self.current]
        return self._make_token(TokenType.NUMBER_LITERAL, float(text))

    def _scan_identifier_or_keyword(self) -> Token:
        """Scan an identifier or keyword; the first letter is already consumed."""
        while _is_alphanumeric(self._peek()):
            self._advance()

        text = self.source[self.start:self.current]
        token_type = keyword_for(text)
        if token_type is not None:
            return self._make_token(token_type)
        return self._make_token(TokenType.IDENTIFIER, text)

    def _scan_token(self) -> Optional[Token]:
        """Scan one lexeme starting at `self.start`; None if it emits nothing."""
        ch = self._advance()

        if ch in SINGLE_CHAR_TOKENS:
            return self._make_token(SINGLE_CHAR_TOKENS[ch])

        if ch in EQUAL_SUFFIX_TOKENS:
            plain, with_equal = EQUAL_SUFFIX_TOKENS[ch]
            return self._make_token(with_equal if self._match('=') else plain)

        if ch == '/':
            if self._match('/'):
                self._skip_comment()
                return None
            return self._make_token(TokenType.SLASH)

        if ch in WHITESPACE:
            return None

        if ch == '\n':
            self.line += 1
            return None

        if ch == '"':
            return self._scan_string()

        if _is_digit(ch):
            return self._scan_number()

        if _is_alpha(ch):
            return self._scan_identifier_or_keyword()

        raise error_unexpected_character(ch, self.line)

    def __iter__(self) -> Iterator[Token]:
        """Iterate over tokens, ending with EOF."""
        while not self._is_at_end():
            self.start = self.current
            token = self._scan_token()
            if token is not None:
                yield token
        yield Token(TokenType.EOF, None, self.line, "")

    def scan_tokens(self) -> List[Token]:
        """Tokenize the entire source, returning a list of tokens."""
        tokens = list(self)
        logger.debug("scanned %d token(s) over %d line(s)", len(tokens), self.line)
        return tokens


def tokenize(source: str) -> List[Token]:
    """
    Convenience function to tokenize source code.

    Args:
        source: The source code to tokenize

    Returns:
        List of tokens, terminated by exactly one EOF token

    Raises:
        LexError: If tokenization fails
    """
    return Lexer(source).scan_tokens()


def scan(source: str) -> Result[List[Token]]:
    """Tokenize source code, returning the tokens or the LexError."""
    try:
        return Result.success(tokenize(source))
    except LexError as e:
        return Result.failure(e)
