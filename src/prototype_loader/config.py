"""Loader configuration: how a prototype directory is turned into a registry.

A LoaderConfig is usually read from a YAML file next to the prototypes::

    base_path: prototypes
    scripts: [monsters, items.weapons]
    context:
      difficulty: 3
    sort_keys: true
    strict: true

Attributes:
    base_path: Directory holding prototype sources.  Lua modules resolve
        against ``<base_path>/?.lua`` unless ``search_path`` is given.
    scripts: Module names to run, in order.  Empty means every ``.lua``
        file matched by ``script_glob``.
    context: Plain bindings copied into Lua globals before any script runs.
    search_path: Explicit ``package.path`` template list.
    script_glob / definition_glob: File patterns for directory loading.
    sort_keys: Emit object keys and prototype names in sorted order.
    strict: Fail on the first broken file instead of logging and skipping it.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, ValidationError, field_validator

from prototype_loader.models import _StrictModel
from prototype_loader.errors import ConfigError

logger = logging.getLogger(__name__)


class LoaderConfig(_StrictModel):
    base_path: Path | None = None
    scripts: list[str] = Field(default_factory=list)
    context: dict[str, Any] = Field(default_factory=dict)
    search_path: str | None = None
    script_glob: str = "*.lua"
    definition_glob: str = "*.proto"
    sort_keys: bool = True
    strict: bool = True

    @field_validator("scripts")
    @classmethod
    def normalize_scripts(cls, values: list[str]) -> list[str]:
        return [v.strip() for v in values if v.strip()]

    @field_validator("search_path")
    @classmethod
    def require_templates(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            raise ValueError("search_path must contain at least one template")
        return value


def load_config(path: str | Path) -> LoaderConfig:
    """Read a LoaderConfig from YAML.

    A relative ``base_path`` is taken relative to the config file.
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            raw_data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Cannot read loader config {path}: {exc}") from exc

    if raw_data is None:
        raw_data = {}
    if not isinstance(raw_data, dict):
        raise ConfigError(f"Loader config root must be a mapping: {path}")

    try:
        config = LoaderConfig.model_validate(raw_data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid loader config {path}: {exc}") from exc

    if config.base_path is not None and not config.base_path.is_absolute():
        config.base_path = path.parent / config.base_path
    logger.debug("Loaded loader config from %s", path)
    return config
