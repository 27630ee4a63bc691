"""Subcommand dispatcher for framecompose.

Usage:
    framecompose validate --manifest ...
    framecompose render   --manifest ... --output ...
    framecompose query    --manifest ... --frame N
"""

import argparse
import sys


def main(args=None):
    parser = argparse.ArgumentParser(
        prog="framecompose",
        description="Frame-indexed timeline composition from YAML manifests.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # Each subcommand delegates to its own module's main().
    subparsers.add_parser("validate", help="Check a manifest and print the resolved layout")
    subparsers.add_parser("render", help="Render timeline frames to PNG")
    subparsers.add_parser("query", help="Show what is active at a frame")

    # Parse only the subcommand name, pass the rest to the subcommand's parser.
    parsed, remaining = parser.parse_known_args(args)

    if parsed.command is None:
        parser.print_help()
        sys.exit(1)

    if parsed.command == "validate":
        from .cli import main as render_main
        render_main(remaining + ["--validate"])
    elif parsed.command == "render":
        from .cli import main as render_main
        render_main(remaining)
    elif parsed.command == "query":
        from .query_cli import main as query_main
        query_main(remaining)


if __name__ == "__main__":
    main()
