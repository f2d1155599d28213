"""ResourceFinder protocol: how scripts are located below the search path.

The resolver never touches the filesystem itself; it only asks a finder to
open a path.  Two common patterns:

- **File finder**: paths are files, relative to a root directory.
- **Package finder**: paths are resources bundled inside an installed
  Python package, so prototype scripts can ship with the code that uses them.
"""

from __future__ import annotations

import logging
from importlib import resources
from pathlib import Path
from typing import BinaryIO, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class ResourceFinder(Protocol):
    """Interface for opening script resources by path."""

    def find_resource(self, path: str) -> BinaryIO | None:
        """Return an open binary stream for ``path``, or None if it does not exist."""
        ...


class FileResourceFinder:
    """Open resources from the filesystem.

    Relative paths resolve against ``root`` (the working directory when no
    root is given); absolute paths are used as-is.
    """

    def __init__(self, root: str | Path | None = None) -> None:
        self.root = Path(root) if root is not None else None

    def find_resource(self, path: str) -> BinaryIO | None:
        candidate = Path(path)
        if self.root is not None and not candidate.is_absolute():
            candidate = self.root / candidate
        try:
            return open(candidate, "rb")
        except OSError:
            return None


class PackageResourceFinder:
    """Open resources bundled inside an importable Python package."""

    def __init__(self, package: str) -> None:
        self.package = package

    def find_resource(self, path: str) -> BinaryIO | None:
        resource = resources.files(self.package)
        for part in path.split("/"):
            if part in ("", "."):
                continue
            resource = resource.joinpath(part)
        if not resource.is_file():
            return None
        return resource.open("rb")


class ChainedResourceFinder:
    """Ask each finder in turn; the first one that opens the path wins."""

    def __init__(self, *finders: ResourceFinder) -> None:
        self.finders = list(finders)

    def find_resource(self, path: str) -> BinaryIO | None:
        for finder in self.finders:
            stream = finder.find_resource(path)
            if stream is not None:
                return stream
        logger.debug("No finder could open %s", path)
        return None
