"""Definition front end: prototypes written in the definition grammar.

Example::

    prototype goblin : com.example.Monster {
        health = 42,
        drops = ["bone", "rag"],
    }
"""

from __future__ import annotations

from prototype_loader.definition.lexer import Lexer, Token, TokenType, tokenize
from prototype_loader.definition.models import PrototypeDefinition
from prototype_loader.definition.parser import Parser, parse


def deserialize_definition(text: str, *, filename: str | None = None) -> PrototypeDefinition:
    """Parse one definition. The first syntax error raises DefinitionSyntaxError."""
    return Parser(text, filename).parse()


__all__ = [
    "Lexer",
    "Parser",
    "PrototypeDefinition",
    "Token",
    "TokenType",
    "deserialize_definition",
    "parse",
    "tokenize",
]
