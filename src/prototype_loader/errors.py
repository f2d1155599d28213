"""Exception taxonomy for prototype loading.

Every failure is local to one computation (one script run, one registry
extraction, one parse) and is never retried.  Callers can catch
``PrototypeLoaderError`` to handle all of them.
"""

from __future__ import annotations


class PrototypeLoaderError(Exception):
    """Base class for all prototype loader failures."""


class ModuleResolutionError(PrototypeLoaderError):
    """A module name did not resolve against any search-path template."""

    def __init__(self, module: str, attempted: tuple[str, ...]) -> None:
        self.module = module
        self.attempted = attempted
        super().__init__(f"module '{module}' not found:{self.diagnostic}")

    @property
    def diagnostic(self) -> str:
        return "".join("\n\t" + path for path in self.attempted)


class ScriptExecutionError(PrototypeLoaderError):
    """A script failed while loading or running."""

    def __init__(self, script: str, message: str) -> None:
        self.script = script
        super().__init__(f"error running script '{script}': {message}")


class ConversionError(PrototypeLoaderError, TypeError):
    """A value reached during table conversion has no Document form."""

    def __init__(self, message: str, path: str = "") -> None:
        self.path = path
        where = f" at '{path}'" if path else ""
        super().__init__(f"{message}{where}")


class MalformedPrototypeError(PrototypeLoaderError, ValueError):
    """A registry entry is missing its class or data field, or has the wrong type."""

    def __init__(self, name: str, message: str) -> None:
        self.name = name
        super().__init__(f"prototype '{name}': {message}")


class DefinitionSyntaxError(PrototypeLoaderError, ValueError):
    """First lexical or syntax error in a definition; parsing stops here."""

    def __init__(
        self,
        message: str,
        line: int,
        column: int,
        *,
        filename: str | None = None,
        source_line: str | None = None,
    ) -> None:
        self.message = message
        self.line = line
        self.column = column
        self.filename = filename
        self.source_line = source_line
        super().__init__(self.format())

    def format(self) -> str:
        location = f"{self.filename or '<definition>'}:{self.line}:{self.column}"
        parts = [f"{location}: {self.message}"]
        if self.source_line is not None:
            parts.append(f"    {self.source_line}")
            parts.append(f"    {' ' * (self.column - 1)}^")
        return "\n".join(parts)


class ConfigError(PrototypeLoaderError, ValueError):
    """Loader configuration could not be read or validated."""
