"""Test fixtures for prototype loader tests."""

from __future__ import annotations

import io
import textwrap
from pathlib import Path
from typing import BinaryIO

import pytest

from prototype_loader.lua import ScriptEnvironment

FIXTURES_DIR = Path(__file__).parent / "fixtures"


class DictResourceFinder:
    """In-memory ResourceFinder that records every path it was asked for."""

    def __init__(self, files: dict[str, bytes | str] | None = None) -> None:
        self.files = {
            path: content.encode("utf-8") if isinstance(content, str) else content
            for path, content in (files or {}).items()
        }
        self.requested: list[str] = []

    def find_resource(self, path: str) -> BinaryIO | None:
        self.requested.append(path)
        content = self.files.get(path)
        if content is None:
            return None
        return io.BytesIO(content)


def write_file(directory: Path, filename: str, content: str) -> Path:
    path = directory / filename
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(content), encoding="utf-8")
    return path


@pytest.fixture()
def script_dir(tmp_path: Path) -> Path:
    d = tmp_path / "prototypes"
    d.mkdir()
    return d


@pytest.fixture()
def env() -> ScriptEnvironment:
    """Environment with an in-memory finder and no scripts on its path."""
    return ScriptEnvironment(finder=DictResourceFinder(), search_path="?.lua")
