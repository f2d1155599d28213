#!/usr/bin/env python3
"""CI enforcement: fail on lupa imports outside the prototype_loader.lua package.

The Lua runtime is an implementation detail of the script front end; the
registry, document and definition modules only see Documents and entries.
"""

from __future__ import annotations

import ast
import sys
from pathlib import Path

SRC_DIR = Path(__file__).resolve().parent.parent / "src" / "prototype_loader"
ALLOWED_DIR = SRC_DIR / "lua"


def check() -> list[str]:
    violations: list[str] = []
    for py_file in SRC_DIR.rglob("*.py"):
        if ALLOWED_DIR in py_file.parents:
            continue
        tree = ast.parse(py_file.read_text(encoding="utf-8"))
        for node in ast.walk(tree):
            if isinstance(node, ast.Import):
                for alias in node.names:
                    if alias.name.split(".")[0] == "lupa":
                        rel = py_file.relative_to(SRC_DIR)
                        violations.append(f"{rel}:{node.lineno}: import {alias.name}")
            elif isinstance(node, ast.ImportFrom):
                if node.module and node.module.split(".")[0] == "lupa":
                    rel = py_file.relative_to(SRC_DIR)
                    violations.append(f"{rel}:{node.lineno}: from {node.module}")
    return violations


def main() -> None:
    violations = check()
    if violations:
        print("ERROR: lupa imports found outside prototype_loader/lua:")
        for v in violations:
            print(f"  {v}")
        sys.exit(1)
    print("OK: lupa is only imported inside prototype_loader/lua")


if __name__ == "__main__":
    main()
