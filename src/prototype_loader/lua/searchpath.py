"""Search-path resolution for Lua modules.

Mirrors Lua's ``package.searchpath``: a dotted module name is turned into a
path fragment and substituted into each ``;``-separated template until a
resource opens.  The not-found diagnostic lists every attempted path, each on
its own line prefixed with a tab, matching the format Lua itself uses.
"""

from __future__ import annotations

import contextlib
import logging
from dataclasses import dataclass

from prototype_loader.errors import ModuleResolutionError
from prototype_loader.lua.resources import ResourceFinder

logger = logging.getLogger(__name__)

TEMPLATE_SEPARATOR = ";"
NAME_MARKER = "?"
DEFAULT_NAME_SEPARATOR = "."
DEFAULT_PATH_SEPARATOR = "/"


@dataclass(frozen=True)
class SearchResult:
    """Outcome of one resolution pass."""

    name: str
    path: str | None
    attempted: tuple[str, ...] = ()

    @property
    def found(self) -> bool:
        return self.path is not None

    @property
    def diagnostic(self) -> str:
        return "".join("\n\t" + filename for filename in self.attempted)

    def unwrap(self) -> str:
        """Return the resolved path or raise ModuleResolutionError."""
        if self.path is None:
            raise ModuleResolutionError(self.name, self.attempted)
        return self.path


def expand_template(template: str, name: str) -> str:
    q = template.find(NAME_MARKER)
    if q < 0:
        return template
    return template[:q] + name + template[q + 1:]


def resource_exists(finder: ResourceFinder, filename: str) -> bool:
    stream = finder.find_resource(filename)
    if stream is None:
        return False
    with contextlib.suppress(OSError):
        stream.close()
    return True


def resolve(
    name: str,
    path: str,
    finder: ResourceFinder,
    sep: str = DEFAULT_NAME_SEPARATOR,
    rep: str = DEFAULT_PATH_SEPARATOR,
) -> SearchResult:
    """Find the first template in ``path`` under which ``name`` exists."""
    if sep and rep:
        name_part = name.replace(sep[0], rep[0])
    else:
        name_part = name

    attempted: list[str] = []
    for template in path.split(TEMPLATE_SEPARATOR):
        filename = expand_template(template, name_part)
        if resource_exists(finder, filename):
            logger.debug("Resolved module %r to %s", name, filename)
            return SearchResult(name=name, path=filename, attempted=tuple(attempted))
        attempted.append(filename)

    logger.debug("Module %r not found after %d attempts", name, len(attempted))
    return SearchResult(name=name, path=None, attempted=tuple(attempted))


def make_searchpath(finder: ResourceFinder):
    """Build a replacement for Lua's ``package.searchpath`` bound to ``finder``.

    Returns the resolved path, or ``(None, diagnostic)`` on failure, which
    Lua receives as ``nil, message``.
    """

    def searchpath(name, path, sep=None, rep=None):
        if not isinstance(name, str) or not isinstance(path, str):
            raise TypeError("searchpath expects (name: string, path: string)")
        result = resolve(
            name,
            path,
            finder,
            sep if sep is not None else DEFAULT_NAME_SEPARATOR,
            rep if rep is not None else DEFAULT_PATH_SEPARATOR,
        )
        if result.found:
            return result.path
        return None, result.diagnostic

    return searchpath
