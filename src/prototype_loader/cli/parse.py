"""CLI handler for ``prototype-loader parse``."""

from __future__ import annotations

import sys
from argparse import Namespace
from pathlib import Path

from prototype_loader.document import Document
from prototype_loader.errors import PrototypeLoaderError
from prototype_loader.loader import load_definition_file


def run_parse(args: Namespace) -> None:
    path = Path(args.file)
    if not path.is_file():
        print(f"Error: definition file does not exist: {path}", file=sys.stderr)
        sys.exit(1)

    try:
        definition = load_definition_file(path)
    except PrototypeLoaderError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    document = Document.object({definition.name: definition.to_document()})
    print(document.to_json(indent=args.indent))
