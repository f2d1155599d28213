"""Document: the typed tree both front ends produce.

A Document is a tagged union over object, array and scalar kinds.  Unlike
plain JSON-style Python values it keeps the distinction between 32-bit
integers, 64-bit integers and doubles, which downstream deserializers may
discriminate on.
"""

from __future__ import annotations

import json
import math
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class DocumentKind(str, Enum):
    OBJECT = "object"
    ARRAY = "array"
    NULL = "null"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    LONG = "long"
    DOUBLE = "double"
    STRING = "string"
    OPAQUE = "opaque"


_SCALAR_KINDS = frozenset({
    DocumentKind.NULL,
    DocumentKind.BOOLEAN,
    DocumentKind.INTEGER,
    DocumentKind.LONG,
    DocumentKind.DOUBLE,
    DocumentKind.STRING,
})


def _integral(value: int | float) -> int | None:
    """Return ``value`` as an int if it has no fractional part, else None."""
    if isinstance(value, int):
        return value
    if math.isfinite(value) and value.is_integer():
        return int(value)
    return None


@dataclass(frozen=True)
class Document:
    """One node of a converted tree.

    ``value`` holds a ``dict[str, Document]`` for objects, a
    ``list[Document]`` for arrays, and the raw Python value otherwise.
    Build nodes with the classmethod constructors rather than directly.
    """

    kind: DocumentKind
    value: Any = None

    # -- constructors -----------------------------------------------------

    @classmethod
    def object(cls, entries: Mapping[str, Document] | None = None) -> Document:
        return cls(DocumentKind.OBJECT, dict(entries or {}))

    @classmethod
    def array(cls, items: list[Document] | tuple[Document, ...] | None = None) -> Document:
        return cls(DocumentKind.ARRAY, list(items or ()))

    @classmethod
    def null(cls) -> Document:
        return cls(DocumentKind.NULL, None)

    @classmethod
    def boolean(cls, value: bool) -> Document:
        return cls(DocumentKind.BOOLEAN, bool(value))

    @classmethod
    def integer(cls, value: int) -> Document:
        if not INT32_MIN <= value <= INT32_MAX:
            raise ValueError(f"{value} does not fit in a 32-bit integer")
        return cls(DocumentKind.INTEGER, int(value))

    @classmethod
    def long(cls, value: int) -> Document:
        if not INT64_MIN <= value <= INT64_MAX:
            raise ValueError(f"{value} does not fit in a 64-bit integer")
        return cls(DocumentKind.LONG, int(value))

    @classmethod
    def double(cls, value: float) -> Document:
        return cls(DocumentKind.DOUBLE, float(value))

    @classmethod
    def string(cls, value: str) -> Document:
        return cls(DocumentKind.STRING, value)

    @classmethod
    def opaque(cls, value: Any) -> Document:
        return cls(DocumentKind.OPAQUE, value)

    @classmethod
    def number(cls, value: int | float) -> Document:
        """Pick the narrowest numeric kind: Integer, then Long, then Double.

        A float with a zero fractional part counts as integral, so ``3.0``
        becomes an Integer.
        """
        integral = _integral(value)
        if integral is not None:
            if INT32_MIN <= integral <= INT32_MAX:
                return cls(DocumentKind.INTEGER, integral)
            if INT64_MIN <= integral <= INT64_MAX:
                return cls(DocumentKind.LONG, integral)
        return cls(DocumentKind.DOUBLE, float(value))

    @classmethod
    def from_python(cls, value: Any) -> Document:
        """Map a plain Python tree onto Documents.

        Values with no natural kind are carried through as Opaque.
        """
        if isinstance(value, Document):
            return value
        if isinstance(value, Mapping):
            return cls.object({str(k): cls.from_python(v) for k, v in value.items()})
        if isinstance(value, (list, tuple)):
            return cls.array([cls.from_python(v) for v in value])
        if value is None:
            return cls.null()
        if isinstance(value, bool):
            return cls.boolean(value)
        if isinstance(value, (int, float)):
            return cls.number(value)
        if isinstance(value, str):
            return cls.string(value)
        return cls.opaque(value)

    # -- inspection -------------------------------------------------------

    @property
    def is_object(self) -> bool:
        return self.kind is DocumentKind.OBJECT

    @property
    def is_array(self) -> bool:
        return self.kind is DocumentKind.ARRAY

    @property
    def is_scalar(self) -> bool:
        return self.kind in _SCALAR_KINDS

    def __len__(self) -> int:
        if self.kind in (DocumentKind.OBJECT, DocumentKind.ARRAY):
            return len(self.value)
        raise TypeError(f"{self.kind.value} document has no length")

    def __iter__(self) -> Iterator[Any]:
        if self.kind in (DocumentKind.OBJECT, DocumentKind.ARRAY):
            return iter(self.value)
        raise TypeError(f"{self.kind.value} document is not iterable")

    def __getitem__(self, key: str | int) -> Document:
        if self.kind in (DocumentKind.OBJECT, DocumentKind.ARRAY):
            return self.value[key]
        raise TypeError(f"{self.kind.value} document is not subscriptable")

    def get(self, key: str, default: Document | None = None) -> Document | None:
        if self.kind is not DocumentKind.OBJECT:
            raise TypeError(f"{self.kind.value} document has no keys")
        return self.value.get(key, default)

    # -- export -----------------------------------------------------------

    def to_python(self) -> Any:
        if self.kind is DocumentKind.OBJECT:
            return {k: v.to_python() for k, v in self.value.items()}
        if self.kind is DocumentKind.ARRAY:
            return [v.to_python() for v in self.value]
        return self.value

    def to_json(self, **kwargs: Any) -> str:
        return json.dumps(self.to_python(), **kwargs)
