"""Prototype registry -- in-memory index of loaded prototypes.

The registry maintains two lookup structures:
  - _entries: primary index by prototype name
  - _by_class: secondary index mapping class names to prototype names

Both front ends (Lua scripts and definition files) register into the same
registry.  Registering a name that already exists replaces the earlier entry,
the same way assigning into the Lua ``prototypes`` table does.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from prototype_loader.document import Document

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PrototypeEntry:
    """A named prototype: target class plus its data tree."""

    name: str
    class_name: str
    data: Document
    source: str | None = None

    def to_document(self) -> Document:
        return Document.object({self.class_name: self.data})


class PrototypeRegistry:
    """In-memory registry of prototypes keyed by name."""

    def __init__(self) -> None:
        self._entries: dict[str, PrototypeEntry] = {}
        self._by_class: dict[str, list[str]] = {}

    def register(self, entry: PrototypeEntry) -> None:
        """Add an entry, replacing any entry with the same name."""
        previous = self._entries.get(entry.name)
        if previous is not None:
            logger.debug(
                "Prototype %r from %s replaces the one from %s",
                entry.name, entry.source or "<unknown>", previous.source or "<unknown>",
            )
            self._by_class[previous.class_name].remove(entry.name)
        self._entries[entry.name] = entry
        self._by_class.setdefault(entry.class_name, []).append(entry.name)

    def register_document(self, document: Document, source: str | None = None) -> int:
        """Register every entry of a ``{name: {class: data}}`` document. Returns count."""
        if not document.is_object:
            raise TypeError(f"registry document must be an object, got {document.kind.value}")
        count = 0
        for name, wrapper in document.value.items():
            if not wrapper.is_object or len(wrapper) != 1:
                raise ValueError(f"prototype {name!r} must map exactly one class name to its data")
            ((class_name, data),) = wrapper.value.items()
            self.register(PrototypeEntry(name, class_name, data, source))
            count += 1
        return count

    def get(self, name: str) -> PrototypeEntry | None:
        """Look up a prototype by name. Returns None if not found."""
        return self._entries.get(name)

    def find_by_class(self, class_name: str) -> list[PrototypeEntry]:
        """Find all prototypes targeting a given class."""
        return [self._entries[n] for n in self._by_class.get(class_name, [])]

    def all(self) -> list[PrototypeEntry]:
        return list(self._entries.values())

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def to_document(self, *, sort_keys: bool = True) -> Document:
        """Assemble the ``{name: {class: data}}`` document for deserialization."""
        names = sorted(self._entries) if sort_keys else list(self._entries)
        return Document.object({n: self._entries[n].to_document() for n in names})
