"""CLI handler for ``prototype-loader compute``."""

from __future__ import annotations

import logging
import sys
from argparse import Namespace
from pathlib import Path

from prototype_loader.config import LoaderConfig, load_config
from prototype_loader.errors import PrototypeLoaderError
from prototype_loader.loader import load_prototypes

logger = logging.getLogger(__name__)


def _make_config(args: Namespace) -> LoaderConfig:
    config = load_config(args.config) if args.config else LoaderConfig()
    if args.directory:
        config.base_path = Path(args.directory)
    if args.script:
        config.scripts = args.script
    if args.keep_going:
        config.strict = False
    return config


def run_compute(args: Namespace) -> None:
    try:
        config = _make_config(args)
        if config.base_path is None or not config.base_path.is_dir():
            print(f"Error: prototype directory does not exist: {config.base_path}", file=sys.stderr)
            sys.exit(1)
        registry = load_prototypes(config)
    except PrototypeLoaderError as exc:
        logger.debug("compute failed", exc_info=exc)
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    document = registry.to_document(sort_keys=config.sort_keys)
    print(document.to_json(indent=args.indent, default=repr))
