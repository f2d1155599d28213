"""Registry extraction from the Lua ``prototypes`` table.

Each entry must look like ``{class = "<class name>", data = {...}}``.  A
malformed entry fails the whole extraction.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Hashable
from typing import Any

from prototype_loader.document import Document
from prototype_loader.errors import MalformedPrototypeError
from prototype_loader.lua.convert import TableConverter, is_table, key_to_str, utf8_strings
from prototype_loader.registry import PrototypeEntry

logger = logging.getLogger(__name__)

CLASS_FIELD = "class"
DATA_FIELD = "data"


def extract_entries(
    prototypes: Any,
    *,
    sort_keys: bool = True,
    identity: Callable[[Any], Hashable] | None = None,
    source: str | None = None,
) -> list[PrototypeEntry]:
    """Validate and convert every entry of the registry table."""
    if not is_table(prototypes):
        raise MalformedPrototypeError("<registry>", "registry is not a table")

    converter = TableConverter(sort_keys=sort_keys, identity=identity)
    with utf8_strings():
        pairs = [(key_to_str(key), value) for key, value in prototypes.items()]
    if sort_keys:
        pairs.sort(key=lambda pair: pair[0])

    entries: dict[str, PrototypeEntry] = {}
    for name, value in pairs:
        if not is_table(value):
            raise MalformedPrototypeError(name, "entry must be a table with 'class' and 'data'")
        with utf8_strings(name):
            class_name = value[CLASS_FIELD]
        if not isinstance(class_name, str):
            raise MalformedPrototypeError(name, f"'{CLASS_FIELD}' must be a string")
        data = value[DATA_FIELD]
        if not is_table(data):
            raise MalformedPrototypeError(name, f"'{DATA_FIELD}' must be a table")
        entries[name] = PrototypeEntry(
            name=name,
            class_name=class_name,
            data=converter.convert(data, path=name),
            source=source,
        )

    logger.debug("Extracted %d prototypes", len(entries))
    return list(entries.values())


def extract_registry(
    prototypes: Any,
    *,
    sort_keys: bool = True,
    identity: Callable[[Any], Hashable] | None = None,
) -> Document:
    """Build ``{name: {class: data}}`` from the registry table."""
    entries = extract_entries(prototypes, sort_keys=sort_keys, identity=identity)
    return Document.object({e.name: e.to_document() for e in entries})
