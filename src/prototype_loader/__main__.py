"""CLI entry point: python -m prototype_loader <command>."""

from __future__ import annotations

import argparse
import logging
import sys


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="prototype-loader",
        description="Load prototype definitions and print the registry document",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    sub = parser.add_subparsers(dest="command")

    cp = sub.add_parser("compute", help="Run prototype scripts and definitions, print JSON")
    cp.add_argument("directory", nargs="?", default=None, help="Prototype directory")
    cp.add_argument("--config", default=None, help="Path to a loader config YAML file")
    cp.add_argument(
        "--script", action="append", default=None,
        help="Module to run (repeatable); default: every .lua file",
    )
    cp.add_argument("--keep-going", action="store_true", default=False,
                    help="Log and skip broken files instead of stopping")
    cp.add_argument("--indent", type=int, default=2)

    pp = sub.add_parser("parse", help="Parse one definition file, print JSON")
    pp.add_argument("file", help="Path to a definition file")
    pp.add_argument("--indent", type=int, default=2)

    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")

    if args.command == "compute":
        from prototype_loader.cli.compute import run_compute
        run_compute(args)
    elif args.command == "parse":
        from prototype_loader.cli.parse import run_parse
        run_parse(args)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
