"""Lua script environment for prototype definitions.

Scripts register prototypes by assigning into the global ``prototypes``
table::

    prototypes["goblin"] = {
        class = "com.example.Monster",
        data = {
            health = 42,
            drops = { "bone", "rag" },
        },
    }

Load them and build the registry document::

    env = ScriptEnvironment({"difficulty": 3}, base_path="prototypes")
    env.run_script("monsters.lua")
    env.run_script("items")
    document = env.compute_data()

Every module lookup, whether from ``run_script`` or from a ``require`` inside
a script, goes through the same search-path resolver and ResourceFinder.
An environment is not thread-safe; use one per thread and merge the
resulting documents.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from lupa.lua54 import LuaError, LuaRuntime

from prototype_loader.document import Document, DocumentKind
from prototype_loader.errors import ScriptExecutionError
from prototype_loader.lua.extract import extract_entries, extract_registry
from prototype_loader.lua.resources import FileResourceFinder, ResourceFinder
from prototype_loader.lua.searchpath import make_searchpath, resolve
from prototype_loader.registry import PrototypeEntry

logger = logging.getLogger(__name__)

REGISTRY_GLOBAL = "prototypes"
SCRIPT_SUFFIX = ".lua"
# package.searchers[2] is the Lua-file searcher in Lua 5.4; [3] and [4] load
# native C libraries from package.cpath.
LUA_SEARCHER_INDEX = 2
C_SEARCHER_INDEXES = (4, 3)

_IDENTITY_FUNCTION = 'function(t) return string.format("%p", t) end'


class ScriptEnvironment:
    """A Lua runtime seeded with host bindings and an empty prototype table."""

    def __init__(
        self,
        context: Mapping[str, Any] | None = None,
        base_path: str | Path | None = None,
        *,
        finder: ResourceFinder | None = None,
        search_path: str | None = None,
        sort_keys: bool = True,
    ) -> None:
        self.finder = finder or FileResourceFinder()
        self.sort_keys = sort_keys
        self._lua = LuaRuntime(
            unpack_returned_tuples=True,
            register_eval=False,
            register_builtins=False,
        )
        lua_globals = self._lua.globals()
        for name, value in (context or {}).items():
            lua_globals[name] = value
        lua_globals[REGISTRY_GLOBAL] = self._lua.table()

        package = lua_globals["package"]
        if search_path is not None:
            package["path"] = search_path
        elif base_path is not None:
            package["path"] = f"{Path(base_path).as_posix()}/?{SCRIPT_SUFFIX}"
        package["searchpath"] = make_searchpath(self.finder)
        searchers = package["searchers"]
        searchers[LUA_SEARCHER_INDEX] = self._search_lua_module
        for index in C_SEARCHER_INDEXES:
            searchers[index] = None

        self._package = package
        self._require = lua_globals["require"]
        self._load = lua_globals["load"]
        self._identity = self._lua.eval(_IDENTITY_FUNCTION)

    @property
    def search_path(self) -> str:
        return self._package["path"]

    @property
    def prototypes(self) -> Any:
        """The Lua table scripts register prototypes into."""
        return self._lua.globals()[REGISTRY_GLOBAL]

    def resolve_module(self, name: str) -> str:
        """Path ``require(name)`` would load. Raises ModuleResolutionError if none."""
        return resolve(name, self._package["path"], self.finder).unwrap()

    def _search_lua_module(self, name: str):
        result = resolve(name, self._package["path"], self.finder)
        if not result.found:
            return "\n\t".join(result.attempted)
        filename = result.path
        stream = self.finder.find_resource(filename)
        if stream is None:
            return f"{filename} disappeared before it could be read"
        with stream:
            source = stream.read()
        chunk = self._load(source, "@" + filename, "t")
        if isinstance(chunk, tuple):
            _, message = chunk
            raise ScriptExecutionError(
                name, f"error loading module '{name}' from file '{filename}':\n\t{message}",
            )
        logger.debug("Loading module %r from %s", name, filename)
        return chunk, filename

    def run_script(self, file: str) -> Any:
        """Load a script as if by ``require(file)``; a ``.lua`` suffix is optional.

        A module already loaded in this environment is not executed again.
        Returns the value the module returned.
        """
        name = file[: -len(SCRIPT_SUFFIX)] if file.endswith(SCRIPT_SUFFIX) else file
        try:
            loaded = self._require(name)
        except LuaError as exc:
            raise ScriptExecutionError(file, str(exc)) from exc
        if isinstance(loaded, tuple):
            return loaded[0]
        return loaded

    def execute(self, code: str) -> Any:
        """Run a chunk of Lua source directly."""
        try:
            return self._lua.execute(code)
        except LuaError as exc:
            raise ScriptExecutionError("<string>", str(exc)) from exc

    def eval(self, expression: str) -> Any:
        """Evaluate a Lua expression and return the raw result."""
        try:
            return self._lua.eval(expression)
        except LuaError as exc:
            raise ScriptExecutionError("<string>", str(exc)) from exc

    def compute_data(self) -> Document:
        """Convert the prototype table into ``{name: {class: data}}``."""
        return extract_registry(
            self.prototypes, sort_keys=self.sort_keys, identity=self._identity,
        )

    def entries(self, source: str | None = None) -> list[PrototypeEntry]:
        return extract_entries(
            self.prototypes, sort_keys=self.sort_keys, identity=self._identity, source=source,
        )

    def to_lua(self, document: Document) -> Any:
        """Build the Lua value a Document was (or could have been) converted from."""
        if document.kind is DocumentKind.OBJECT:
            table = self._lua.table()
            for key, value in document.value.items():
                table[key] = self.to_lua(value)
            return table
        if document.kind is DocumentKind.ARRAY:
            table = self._lua.table()
            for index, value in enumerate(document.value, start=1):
                table[index] = self.to_lua(value)
            return table
        return document.value
