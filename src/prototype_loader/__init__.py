"""Prototype loader: named prototype definitions from Lua scripts or definition files.

Both front ends fill one registry keyed by prototype name, which is then
handed to a deserializer as a ``{name: {class: data}}`` document.

Public API::

    from prototype_loader import Document, PrototypeRegistry, load_prototypes
    from prototype_loader.lua import ScriptEnvironment, resolve, table_to_document
    from prototype_loader.definition import deserialize_definition
"""

from prototype_loader.config import LoaderConfig, load_config
from prototype_loader.document import Document, DocumentKind
from prototype_loader.errors import (
    ConfigError,
    ConversionError,
    DefinitionSyntaxError,
    MalformedPrototypeError,
    ModuleResolutionError,
    PrototypeLoaderError,
    ScriptExecutionError,
)
from prototype_loader.loader import load_prototypes
from prototype_loader.registry import PrototypeEntry, PrototypeRegistry

__all__ = [
    "ConfigError",
    "ConversionError",
    "DefinitionSyntaxError",
    "Document",
    "DocumentKind",
    "LoaderConfig",
    "MalformedPrototypeError",
    "ModuleResolutionError",
    "PrototypeEntry",
    "PrototypeLoaderError",
    "PrototypeRegistry",
    "ScriptExecutionError",
    "load_config",
    "load_prototypes",
]
__version__ = "0.1.0"
