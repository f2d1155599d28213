"""
Recursive-descent parser for prototype definitions.

Grammar::

    definition := "prototype" NAME ":" qualified object EOF
    qualified  := NAME { "." NAME }
    object     := "{" [ field { sep field } [ sep ] ] "}"
    field      := (NAME | STRING) "=" value
    array      := "[" [ value { sep value } [ sep ] ] "]"
    sep        := "," | ";"
    value      := STRING | INTEGER | FLOAT | "true" | "false" | "nil" | object | array

Parsing bails out on the first error: no recovery, no error list.
"""

from __future__ import annotations

from collections.abc import Iterator

from prototype_loader.definition.lexer import Lexer, Token, TokenType
from prototype_loader.definition.models import PrototypeDefinition
from prototype_loader.document import Document
from prototype_loader.errors import DefinitionSyntaxError

_SEPARATORS = (TokenType.COMMA, TokenType.SEMICOLON)


class Parser:
    """
    Parser producing a PrototypeDefinition from definition text.

    Usage:
        definition = Parser(source).parse()
    """

    def __init__(self, source: str, filename: str | None = None):
        self.lexer = Lexer(source, filename)
        self._tokens: Iterator[Token] = iter(())
        self.current: Token | None = None

    def _check(self, *types: TokenType) -> bool:
        return self.current.type in types

    def _advance(self) -> Token:
        token = self.current
        if token.type is not TokenType.EOF:
            self.current = next(self._tokens)
        return token

    def _error(self, message: str, token: Token | None = None) -> DefinitionSyntaxError:
        token = token or self.current
        return self.lexer.error(message, token.line, token.column)

    def _expect(self, token_type: TokenType, what: str | None = None) -> Token:
        if not self._check(token_type):
            raise self._error(
                f"expected {what or repr(token_type.value)}, found {self._describe(self.current)}"
            )
        return self._advance()

    @staticmethod
    def _describe(token: Token) -> str:
        if token.type is TokenType.EOF:
            return "end of input"
        return repr(token.text)

    def parse(self) -> PrototypeDefinition:
        self._tokens = iter(self.lexer)
        self.current = next(self._tokens)

        self._expect(TokenType.PROTOTYPE, "'prototype'")
        name = self._expect(TokenType.NAME, "prototype name").text
        self._expect(TokenType.COLON)
        class_name = self._qualified_name()
        data = self._object()
        self._expect(TokenType.EOF, "end of input")
        return PrototypeDefinition(name=name, class_name=class_name, data=data)

    def _qualified_name(self) -> str:
        parts = [self._expect(TokenType.NAME, "class name").text]
        while self._check(TokenType.DOT):
            self._advance()
            parts.append(self._expect(TokenType.NAME, "name after '.'").text)
        return ".".join(parts)

    def _object(self) -> Document:
        self._expect(TokenType.LBRACE)
        entries: dict[str, Document] = {}
        while not self._check(TokenType.RBRACE):
            if self._check(TokenType.NAME, TokenType.STRING):
                key = self._advance().value
            else:
                raise self._error(f"expected field name, found {self._describe(self.current)}")
            self._expect(TokenType.EQUALS)
            entries[key] = self._value()
            if not self._separator(TokenType.RBRACE):
                break
        self._expect(TokenType.RBRACE)
        return Document.object(entries)

    def _array(self) -> Document:
        self._expect(TokenType.LBRACKET)
        items: list[Document] = []
        while not self._check(TokenType.RBRACKET):
            items.append(self._value())
            if not self._separator(TokenType.RBRACKET):
                break
        self._expect(TokenType.RBRACKET)
        return Document.array(items)

    def _separator(self, closing: TokenType) -> bool:
        """Consume a separator; return False when the container must close next."""
        if self._check(*_SEPARATORS):
            self._advance()
            return True
        if self._check(closing):
            return False
        raise self._error(
            f"expected ',' or '{closing.value}', found {self._describe(self.current)}"
        )

    def _value(self) -> Document:
        token = self.current
        if token.type is TokenType.STRING:
            self._advance()
            return Document.string(token.value)
        if token.type in (TokenType.INTEGER, TokenType.FLOAT):
            self._advance()
            return Document.number(token.value)
        if token.type is TokenType.TRUE:
            self._advance()
            return Document.boolean(True)
        if token.type is TokenType.FALSE:
            self._advance()
            return Document.boolean(False)
        if token.type is TokenType.NIL:
            self._advance()
            return Document.null()
        if token.type is TokenType.LBRACE:
            return self._object()
        if token.type is TokenType.LBRACKET:
            return self._array()
        raise self._error(f"expected a value, found {self._describe(token)}")


def parse(source: str, filename: str | None = None) -> PrototypeDefinition:
    return Parser(source, filename).parse()
