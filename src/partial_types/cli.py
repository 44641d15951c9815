"""Command line tool generating partial types for Go structs.

Usage:
    partial-types -g 'models/*.go'                     # writes into ./partial/
    partial-types -g '**/*.go' -o out/partial.go       # single output file
    partial-types -g 'models/*.go' --dry-run           # prints to stdout
    partial-types -g 'models/*.go' --dry-run --json    # structured output
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from partial_types.config import DEFAULT_PACKAGE, DEFAULT_STRUCT_TAG, GeneratorOptions, load_options
from partial_types.driver import find_sources, run
from partial_types.log import setup_logging

DEFAULT_OUT = "partial"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="partial-types",
        description="Generate map-backed partial types for Go structs",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the generated code instead of writing it",
    )
    parser.add_argument(
        "-g", "--glob",
        action="append",
        default=[],
        dest="globs",
        help="Glob pattern of source files to match (repeatable)",
    )
    parser.add_argument(
        "-d", "--dir",
        type=Path,
        default=Path("."),
        help="Working directory the glob patterns are relative to",
    )
    parser.add_argument(
        "-o", "--out",
        default=DEFAULT_OUT,
        help="Output .go file or directory",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON file with generator options",
    )
    parser.add_argument(
        "--struct-tag",
        default=None,
        help=f"Struct tag used for the partial map keys (default: {DEFAULT_STRUCT_TAG})",
    )
    parser.add_argument(
        "--type-prefix",
        default=None,
        help="Prefix of the generated partial types",
    )
    parser.add_argument(
        "--package",
        default=None,
        help=f"Package of the generated code (default: {DEFAULT_PACKAGE})",
    )
    parser.add_argument(
        "--prune-imports",
        action="store_true",
        default=None,
        help="Only emit imports used by the generated code",
    )
    parser.add_argument(
        "--keep-going",
        action="store_true",
        help="Continue with the remaining files after a failure",
    )
    parser.add_argument(
        "-j", "--json",
        action="store_true",
        help="Print generated units as JSON (implies --dry-run)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    dry_run = args.dry_run or args.json
    if not args.globs:
        print(
            "Error: no glob patterns given: use --glob <pattern> to specify glob patterns",
            file=sys.stderr,
        )
        return 1
    if not dry_run and not args.out:
        print(
            "Error: no output file or directory given: use --out <path> to specify "
            "an output file or directory",
            file=sys.stderr,
        )
        return 1

    try:
        options = load_options(args.config) if args.config else GeneratorOptions()
        options = options.merged(
            package_name=args.package,
            struct_tag=args.struct_tag,
            type_prefix=args.type_prefix,
            prune_imports=args.prune_imports,
        )
    except (OSError, ValueError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    if not args.dir.is_dir():
        print(f"Error: Directory not found: {args.dir}", file=sys.stderr)
        return 1

    sources = find_sources(args.dir, args.globs)
    if not sources:
        print(f"Error: no files match {args.globs} in {args.dir}", file=sys.stderr)
        return 1

    try:
        result = run(
            sources,
            options,
            out=args.out,
            dry_run=dry_run,
            keep_going=args.keep_going,
            as_json=args.json,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for source, exc in result.failures:
        print(f"Error: could not generate code for {source}: {exc}", file=sys.stderr)
    return 0 if result.ok else 1


if __name__ == "__main__":
    sys.exit(main())
