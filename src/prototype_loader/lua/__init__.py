"""Lua front end: prototype scripts executed in an embedded Lua 5.4 runtime."""

from prototype_loader.lua.convert import TableConverter, table_to_document, value_to_document
from prototype_loader.lua.environment import REGISTRY_GLOBAL, ScriptEnvironment
from prototype_loader.lua.extract import extract_entries, extract_registry
from prototype_loader.lua.resources import (
    ChainedResourceFinder,
    FileResourceFinder,
    PackageResourceFinder,
    ResourceFinder,
)
from prototype_loader.lua.searchpath import SearchResult, make_searchpath, resolve

__all__ = [
    "REGISTRY_GLOBAL",
    "ChainedResourceFinder",
    "FileResourceFinder",
    "PackageResourceFinder",
    "ResourceFinder",
    "ScriptEnvironment",
    "SearchResult",
    "TableConverter",
    "extract_entries",
    "extract_registry",
    "make_searchpath",
    "resolve",
    "table_to_document",
    "value_to_document",
]
