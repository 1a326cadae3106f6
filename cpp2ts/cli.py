"""Command-line entry point: ``cpp2ts FILE [-o OUT] [--pretty] [--tree] [-v]``."""

from __future__ import annotations

import argparse
import logging
import sys

from .api import convert, dump_tree, pretty
from .errors import ConversionError

logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cpp2ts", description="Convert C++ source to TypeScript"
    )
    parser.add_argument("file", help="C++ source file to convert")
    parser.add_argument("--output", "-o", default=None,
                        help="Write the result here instead of stdout")
    parser.add_argument("--pretty", action="store_true",
                        help="Run the output through prettier")
    parser.add_argument("--tree", action="store_true",
                        help="Print the normalized tree as JSON instead")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Log pipeline progress")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(message)s",
    )

    with open(args.file, encoding="utf-8") as f:
        source = f.read()

    try:
        if args.tree:
            result = dump_tree(source)
        elif args.pretty:
            result = pretty(source)
        else:
            result = convert(source)
    except ConversionError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(result + "\n")
        logger.info("Wrote %s", args.output)
    else:
        print(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
