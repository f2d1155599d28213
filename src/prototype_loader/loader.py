"""Prototype loading from directories. Files starting with underscore are skipped.

Lua scripts under a directory run in one shared ScriptEnvironment, so they
can ``require`` each other and a module runs at most once.  Definition files
are parsed one prototype per file.  Both land in the same PrototypeRegistry;
a later registration of a name replaces the earlier one.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from prototype_loader.config import LoaderConfig
from prototype_loader.definition import PrototypeDefinition, deserialize_definition
from prototype_loader.errors import PrototypeLoaderError
from prototype_loader.lua.environment import SCRIPT_SUFFIX, ScriptEnvironment
from prototype_loader.lua.resources import ResourceFinder
from prototype_loader.registry import PrototypeEntry, PrototypeRegistry

logger = logging.getLogger(__name__)


def _discover(directory: Path, pattern: str) -> list[Path]:
    return [p for p in sorted(directory.rglob(pattern)) if not p.name.startswith("_")]


def module_name(path: Path, base: Path) -> str:
    """Dotted module name of a script relative to its base directory."""
    relative = path.relative_to(base).with_suffix("")
    return ".".join(relative.parts)


def load_definition_file(path: str | Path) -> PrototypeDefinition:
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        text = f.read()
    return deserialize_definition(text, filename=str(path))


def load_definition_directory(
    directory: str | Path,
    registry: PrototypeRegistry,
    *,
    pattern: str = "*.proto",
    strict: bool = True,
) -> int:
    """Parse every definition file in a directory recursively. Returns count loaded."""
    directory = Path(directory)
    if not directory.is_dir():
        logger.warning("Definition directory does not exist: %s", directory)
        return 0

    count = 0
    for path in _discover(directory, pattern):
        try:
            definition = load_definition_file(path)
        except (PrototypeLoaderError, OSError, UnicodeDecodeError) as exc:
            if strict:
                raise
            logger.exception("Failed to load definition from %s: %s", path, exc)
            continue
        registry.register(
            PrototypeEntry(definition.name, definition.class_name, definition.data, str(path))
        )
        count += 1
    return count


def load_script_directory(
    directory: str | Path,
    registry: PrototypeRegistry,
    *,
    context: Mapping[str, Any] | None = None,
    scripts: Iterable[str] | None = None,
    pattern: str = "*" + SCRIPT_SUFFIX,
    search_path: str | None = None,
    finder: ResourceFinder | None = None,
    sort_keys: bool = True,
    strict: bool = True,
) -> int:
    """Run Lua prototype scripts from a directory and register what they define.

    ``scripts`` names the modules to run, in order; by default every file
    matching ``pattern`` runs in sorted order.  Returns the number of
    prototypes registered.  Converting the collected prototypes is always
    fail-fast, even when ``strict`` is False.
    """
    directory = Path(directory)
    if not directory.is_dir():
        logger.warning("Script directory does not exist: %s", directory)
        return 0

    env = ScriptEnvironment(
        context, directory, finder=finder, search_path=search_path, sort_keys=sort_keys,
    )
    if scripts is None:
        scripts = [module_name(p, directory) for p in _discover(directory, pattern)]

    for script in scripts:
        try:
            env.run_script(script)
        except PrototypeLoaderError as exc:
            if strict:
                raise
            logger.exception("Failed to run prototype script %s: %s", script, exc)

    entries = env.entries(source=str(directory))
    for entry in entries:
        registry.register(entry)
    return len(entries)


def load_prototypes(
    config: LoaderConfig,
    registry: PrototypeRegistry | None = None,
    *,
    finder: ResourceFinder | None = None,
) -> PrototypeRegistry:
    """Load scripts, then definition files, from ``config.base_path``."""
    registry = registry if registry is not None else PrototypeRegistry()
    if config.base_path is None:
        raise PrototypeLoaderError("Loader config has no base_path")

    script_count = load_script_directory(
        config.base_path,
        registry,
        context=config.context,
        scripts=config.scripts or None,
        pattern=config.script_glob,
        search_path=config.search_path,
        finder=finder,
        sort_keys=config.sort_keys,
        strict=config.strict,
    )
    definition_count = load_definition_directory(
        config.base_path, registry, pattern=config.definition_glob, strict=config.strict,
    )
    logger.info(
        "Loaded %d prototypes from scripts and %d from definitions in %s",
        script_count, definition_count, config.base_path,
    )
    return registry
