"""Prowl CLI — prowl build.

Entry point for the ``prowl`` command-line interface.
"""

from __future__ import annotations

import argparse
import sys


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the prowl CLI."""
    parser = argparse.ArgumentParser(
        prog="prowl",
        description="Pre-render engine output into a static site.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # prowl build
    build_parser = subparsers.add_parser(
        "build",
        help="Run the rendering engine and write the static output tree",
    )
    build_parser.add_argument("root", nargs="?", default=".", help="Project root directory")
    build_parser.add_argument(
        "--output", default=None, help="Output directory (default: dist)",
    )
    build_parser.add_argument(
        "--mode", default=None, help="Rendering mode passed to the engine",
    )
    build_parser.add_argument(
        "--clean", action="store_true", default=None,
        help="Remove the output directory before building",
    )

    return parser


def _get_version() -> str:
    """Get the package version."""
    from prowl import __version__

    return __version__


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    from prowl._errors import ProwlError
    from prowl.app import build

    if args.command == "build":
        try:
            result = build(
                root=args.root,
                output=args.output,
                mode=args.mode,
                clean=args.clean,
            )
        except ProwlError as exc:
            print(f"  Build failed: {exc}", file=sys.stderr)
            sys.exit(1)
        if not result.ok:
            sys.exit(1)


if __name__ == "__main__":
    main()
