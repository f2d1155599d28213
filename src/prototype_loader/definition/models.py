"""Pydantic models for parsed prototype definitions."""

from __future__ import annotations

from pydantic import ConfigDict, InstanceOf, field_validator

from prototype_loader.document import Document
from prototype_loader.models import _StrictModel


class PrototypeDefinition(_StrictModel):
    """One prototype read from definition text."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    class_name: str
    data: InstanceOf[Document]

    @field_validator("name", "class_name")
    @classmethod
    def require_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("data")
    @classmethod
    def require_object(cls, value: Document) -> Document:
        if not value.is_object:
            raise ValueError("definition data must be an object")
        return value

    def to_document(self) -> Document:
        return Document.object({self.class_name: self.data})
