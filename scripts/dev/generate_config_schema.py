"""Write the JSON Schema of ``loader.yaml`` files.

Editors that understand JSON Schema (VS Code's YAML extension, PyCharm) can
point at the output to validate loader configs and complete their keys while
they are written.  The schema is derived from LoaderConfig, so regenerate it
whenever a config field changes.

    python scripts/dev/generate_config_schema.py
    python scripts/dev/generate_config_schema.py --output -   # print only
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from prototype_loader.config import LoaderConfig

# Kept beside the example configs so a `# yaml-language-server: $schema=`
# comment in a loader.yaml can use a short relative path.
DEFAULT_OUTPUT = Path("schemas/loader-config.schema.json")


def build_schema() -> dict:
    schema = LoaderConfig.model_json_schema()
    schema["$schema"] = "https://json-schema.org/draft/2020-12/schema"
    schema["title"] = "prototype-loader config"
    return schema


def main() -> None:
    parser = argparse.ArgumentParser(description="Write the loader config JSON Schema.")
    parser.add_argument(
        "--output",
        default=str(DEFAULT_OUTPUT),
        help=f"Schema file to write, or '-' for stdout (default: {DEFAULT_OUTPUT}).",
    )
    args = parser.parse_args()

    schema = build_schema()
    text = json.dumps(schema, indent=2, sort_keys=True) + "\n"
    if args.output == "-":
        sys.stdout.write(text)
        return

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(text, encoding="utf-8")
    print(f"Wrote {len(schema.get('properties', {}))} top-level config keys to {output_path}")


if __name__ == "__main__":
    main()
