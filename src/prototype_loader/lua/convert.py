"""Lua table → Document conversion.

A Lua table has no static notion of "array" or "map", so the shape is
decided per table: if ``#t`` is nonzero the table is an Array of the values
at keys ``1..#t``, otherwise it is an Object keyed by the string form of each
key.  An object-shaped table that also holds a run of integer keys starting
at 1 therefore converts as an array and drops its other keys; those keys
and their values must still be convertible.

Scalars are matched in a fixed order: table, boolean, 32-bit integer, 64-bit
integer, other number, nil, string, userdata.  Anything else (functions,
coroutines, tables used as keys) aborts the whole conversion.
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Callable, Hashable, Iterator
from typing import Any

from lupa.lua54 import lua_type

from prototype_loader.document import Document
from prototype_loader.errors import ConversionError

logger = logging.getLogger(__name__)

# Upper bound on nesting when no identity function is available to detect
# cycles exactly.
MAX_DEPTH = 100


def is_table(value: Any) -> bool:
    return lua_type(value) == "table"


def lua_number_to_str(value: int | float) -> str:
    """Format a number the way Lua 5.4's ``tostring`` does."""
    if isinstance(value, int):
        return str(value)
    text = "%.14g" % value
    if text.lstrip("-").isdigit():
        text += ".0"
    return text


def key_to_str(key: Any, path: str = "") -> str:
    """Coerce a table key to the string used in an Object."""
    if isinstance(key, str):
        return key
    if isinstance(key, bool):
        raise ConversionError("boolean table key cannot be used as an object key", path)
    if isinstance(key, (int, float)):
        return lua_number_to_str(key)
    kind = lua_type(key) or type(key).__name__
    raise ConversionError(f"{kind} table key cannot be used as an object key", path)


@contextlib.contextmanager
def utf8_strings(path: str = "") -> Iterator[None]:
    """Report Lua strings lupa cannot decode as a ConversionError at ``path``."""
    try:
        yield
    except UnicodeDecodeError as exc:
        raise ConversionError(f"string is not valid UTF-8 ({exc.reason})", path) from exc


def _in_sequence(key: Any, length: int) -> bool:
    return isinstance(key, int) and not isinstance(key, bool) and 1 <= key <= length


def _join(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


class TableConverter:
    """Stateless-per-call converter from Lua values to Documents.

    ``identity`` maps a Lua table to a hashable identity (its address) so
    cycles can be reported; without it only a nesting limit applies.
    """

    def __init__(
        self,
        *,
        sort_keys: bool = True,
        identity: Callable[[Any], Hashable] | None = None,
    ) -> None:
        self.sort_keys = sort_keys
        self.identity = identity

    def convert(self, value: Any, path: str = "") -> Document:
        return self._value(value, path, [])

    def _table(self, table: Any, path: str, stack: list[Hashable]) -> Document:
        if len(stack) >= MAX_DEPTH:
            raise ConversionError(
                f"tables nested deeper than {MAX_DEPTH} levels (cyclic table?)", path,
            )
        ident = self.identity(table) if self.identity is not None else None
        if ident is not None and ident in stack:
            raise ConversionError("cyclic table reference", path)
        stack.append(ident)
        try:
            with utf8_strings(path):
                length = len(table)
                if length:
                    return self._array(table, length, path, stack)
                return self._object(table, path, stack)
        finally:
            stack.pop()

    def _array(self, table: Any, length: int, path: str, stack: list[Hashable]) -> Document:
        items = [
            self._value(table[index], f"{path}[{index}]", stack)
            for index in range(1, length + 1)
        ]
        # Entries outside 1..#t are dropped, but must still be convertible.
        dropped = 0
        for key, value in table.items():
            if _in_sequence(key, length):
                continue
            self._value(value, _join(path, key_to_str(key, path)), stack)
            dropped += 1
        if dropped:
            logger.debug("Dropped %d non-sequence keys converting %s as an array",
                         dropped, path or "<root>")
        return Document.array(items)

    def _object(self, table: Any, path: str, stack: list[Hashable]) -> Document:
        pairs = [(key_to_str(key, path), value) for key, value in table.items()]
        if self.sort_keys:
            pairs.sort(key=lambda pair: pair[0])
        entries: dict[str, Document] = {}
        for key, value in pairs:
            entries[key] = self._value(value, _join(path, key), stack)
        return Document.object(entries)

    def _value(self, value: Any, path: str, stack: list[Hashable]) -> Document:
        kind = lua_type(value)
        if kind == "table":
            return self._table(value, path, stack)
        if isinstance(value, bool):
            return Document.boolean(value)
        if isinstance(value, (int, float)):
            return Document.number(value)
        if value is None:
            return Document.null()
        if isinstance(value, str):
            return Document.string(value)
        if kind is None or kind == "userdata":
            return Document.opaque(value)
        raise ConversionError(f"cannot convert Lua {kind} value", path)


def table_to_document(
    table: Any,
    *,
    sort_keys: bool = True,
    identity: Callable[[Any], Hashable] | None = None,
) -> Document:
    """Convert a Lua table to an Array or Object Document."""
    if not is_table(table):
        kind = lua_type(table) or type(table).__name__
        raise ConversionError(f"expected a Lua table, got {kind}")
    return TableConverter(sort_keys=sort_keys, identity=identity).convert(table)


def value_to_document(
    value: Any,
    *,
    sort_keys: bool = True,
    identity: Callable[[Any], Hashable] | None = None,
) -> Document:
    """Convert any Lua value, scalar or table."""
    return TableConverter(sort_keys=sort_keys, identity=identity).convert(value)
