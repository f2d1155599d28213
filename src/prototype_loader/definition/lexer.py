"""
Lexer for prototype definition files.

Converts definition text into a list of tokens for the parser.
Supports:
- Identifiers and the keywords ``prototype``, ``true``, ``false``, ``nil``
- Single-line comments (``--``, as in Lua)
- String literals in single or double quotes with escape sequences
- Integer literals (decimal, hex) and float literals (including exponents)
- Punctuation: ``{ } [ ] : = , ; .``

The first malformed token raises DefinitionSyntaxError; there is no recovery.
"""

from __future__ import annotations

import math
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

from prototype_loader.document import INT64_MAX, INT64_MIN
from prototype_loader.errors import DefinitionSyntaxError


class TokenType(Enum):
    NAME = "name"
    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    PROTOTYPE = "prototype"
    TRUE = "true"
    FALSE = "false"
    NIL = "nil"
    LBRACE = "{"
    RBRACE = "}"
    LBRACKET = "["
    RBRACKET = "]"
    COLON = ":"
    EQUALS = "="
    COMMA = ","
    SEMICOLON = ";"
    DOT = "."
    EOF = "end of input"


KEYWORDS = {
    "prototype": TokenType.PROTOTYPE,
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
    "nil": TokenType.NIL,
}

PUNCTUATION = {
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    ":": TokenType.COLON,
    "=": TokenType.EQUALS,
    ",": TokenType.COMMA,
    ";": TokenType.SEMICOLON,
    ".": TokenType.DOT,
}

ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "0": "\0",
    "\\": "\\",
    '"': '"',
    "'": "'",
}



def _is_digit(char: str) -> bool:
    return char != "" and char in "0123456789"


@dataclass(frozen=True)
class Token:
    type: TokenType
    text: str
    line: int
    column: int
    value: object = None


class Lexer:
    """
    Tokenizer for definition text.

    Usage:
        tokens = Lexer(source, filename="goblin.proto").tokenize()

    Or for streaming:
        for token in Lexer(source):
            process(token)
    """

    def __init__(self, source: str, filename: str | None = None):
        self.source = source
        self.filename = filename
        self.pos = 0
        self.line = 1
        self.column = 1
        self._lines: list[str] | None = None

    @property
    def lines(self) -> list[str]:
        if self._lines is None:
            self._lines = self.source.splitlines()
        return self._lines

    def source_line(self, line: int) -> str | None:
        if 1 <= line <= len(self.lines):
            return self.lines[line - 1]
        return None

    def error(self, message: str, line: int | None = None, column: int | None = None):
        line = self.line if line is None else line
        column = self.column if column is None else column
        return DefinitionSyntaxError(
            message,
            line,
            column,
            filename=self.filename,
            source_line=self.source_line(line),
        )

    def _peek(self, offset: int = 0) -> str:
        index = self.pos + offset
        return self.source[index] if index < len(self.source) else ""

    def _advance(self) -> str:
        char = self.source[self.pos]
        self.pos += 1
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return char

    def _skip_trivia(self) -> None:
        while self.pos < len(self.source):
            char = self._peek()
            if char in " \t\r\n":
                self._advance()
            elif char == "-" and self._peek(1) == "-":
                while self.pos < len(self.source) and self._peek() != "\n":
                    self._advance()
            else:
                return

    def __iter__(self) -> Iterator[Token]:
        """Yield tokens lazily, so errors surface in source order."""
        while True:
            self._skip_trivia()
            if self.pos >= len(self.source):
                yield Token(TokenType.EOF, "", self.line, self.column)
                return
            yield self._next_token()

    def tokenize(self) -> list[Token]:
        return list(self)

    def _next_token(self) -> Token:
        line, column = self.line, self.column
        char = self._peek()

        if char.isalpha() or char == "_":
            start = self.pos
            while self._peek().isalnum() or self._peek() == "_":
                self._advance()
            text = self.source[start:self.pos]
            return Token(KEYWORDS.get(text, TokenType.NAME), text, line, column, text)

        if _is_digit(char) or (char == "-" and _is_digit(self._peek(1))):
            return self._number(line, column)

        if char in ('"', "'"):
            return self._string(line, column)

        if char in PUNCTUATION:
            self._advance()
            return Token(PUNCTUATION[char], char, line, column)

        raise self.error(f"unexpected character {char!r}", line, column)

    def _number(self, line: int, column: int) -> Token:
        start = self.pos
        if self._peek() == "-":
            self._advance()

        if self._peek() == "0" and self._peek(1) in ("x", "X"):
            self._advance()
            self._advance()
            digits_start = self.pos
            while self._peek() and self._peek() in "0123456789abcdefABCDEF":
                self._advance()
            if self.pos == digits_start:
                raise self.error("hex literal has no digits", line, column)
            text = self.source[start:self.pos]
            sign = -1 if text.startswith("-") else 1
            return self._integer(text, sign * int(text.lstrip("-")[2:], 16), line, column)

        is_float = False
        while _is_digit(self._peek()):
            self._advance()
        if self._peek() == "." and _is_digit(self._peek(1)):
            is_float = True
            self._advance()
            while _is_digit(self._peek()):
                self._advance()
        if self._peek() in ("e", "E"):
            is_float = True
            self._advance()
            if self._peek() in ("+", "-"):
                self._advance()
            if not _is_digit(self._peek()):
                raise self.error("malformed exponent in number literal", line, column)
            while _is_digit(self._peek()):
                self._advance()
        if self._peek().isalpha() or self._peek() == "_":
            raise self.error(f"malformed number near {self._peek()!r}")

        text = self.source[start:self.pos]
        if is_float:
            return Token(TokenType.FLOAT, text, line, column, float(text))
        if len(text.lstrip("-").lstrip("0")) > len(str(INT64_MAX)):
            return self._wide_integer(text, float(text), line, column)
        return self._integer(text, int(text), line, column)

    def _integer(self, text: str, value: int, line: int, column: int) -> Token:
        if INT64_MIN <= value <= INT64_MAX:
            return Token(TokenType.INTEGER, text, line, column, value)
        try:
            as_float = float(value)
        except OverflowError:
            as_float = math.inf
        return self._wide_integer(text, as_float, line, column)

    def _wide_integer(self, text: str, value: float, line: int, column: int) -> Token:
        """Integers beyond 64 bits become floats, as in Lua."""
        if math.isinf(value):
            raise self.error("number literal out of range", line, column)
        return Token(TokenType.FLOAT, text, line, column, value)

    def _string(self, line: int, column: int) -> Token:
        start = self.pos
        quote = self._advance()
        chars: list[str] = []
        while True:
            if self.pos >= len(self.source) or self._peek() == "\n":
                raise self.error("unterminated string literal", line, column)
            char = self._advance()
            if char == quote:
                break
            if char == "\\":
                if self.pos >= len(self.source):
                    raise self.error("unterminated string literal", line, column)
                escape_column = self.column - 1
                escaped = self._advance()
                if escaped not in ESCAPES:
                    raise self.error(f"invalid escape sequence '\\{escaped}'", self.line, escape_column)
                chars.append(ESCAPES[escaped])
            else:
                chars.append(char)
        text = self.source[start:self.pos]
        return Token(TokenType.STRING, text, line, column, "".join(chars))


def tokenize(source: str, filename: str | None = None) -> list[Token]:
    return Lexer(source, filename).tokenize()
