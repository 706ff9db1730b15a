"""
FML CLI

Manifest -> IR compiler interface.

Lowers a YAML feature manifest and writes the resulting IR as JSON,
for consumption by a code generation backend.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from fml.config import settings
from fml.errors import FMLError
from fml.frontend.lowering import Parser

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fml",
        description="FML: feature manifest -> IR compiler",
    )

    parser.add_argument(
        "manifest",
        type=Path,
        help="Path to the feature manifest YAML file",
    )

    parser.add_argument(
        "--output", "-o",
        type=Path,
        default=None,
        help="Write the IR JSON here instead of stdout",
    )

    parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="JSON indentation (default: 2)",
    )

    parser.add_argument(
        "--object-field-fallback",
        action=argparse.BooleanOptionalAction,
        default=settings.object_field_fallback,
        help="Let object fields name declared enums/objects directly",
    )

    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=settings.log_level,
        help="Logging level (default: %(default)s)",
    )

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # ---------------------------------
    # Load + lower manifest
    # ---------------------------------
    try:
        parser = Parser.from_path(
            args.manifest,
            object_field_fallback=args.object_field_fallback,
        )
    except FMLError as e:
        print(str(e), file=sys.stderr)
        return 1

    ir = parser.get_intermediate_representation()
    payload = json.dumps(
        {"ir": ir.to_dict(), "channels": list(parser.channels)},
        indent=args.indent,
        default=str,  # YAML dates/timestamps in defaults
    )

    # ---------------------------------
    # Emit
    # ---------------------------------
    if args.output is None:
        print(payload)
    else:
        args.output.write_text(payload + "\n", encoding="utf-8")

    return 0


if __name__ == "__main__":
    sys.exit(main())
