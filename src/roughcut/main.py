"""Subcommand dispatcher for roughcut.

Usage:
    roughcut render    --manifest ... --output demo.mp4
    roughcut still     --manifest ... --at 1.5 --output frame.png
    roughcut validate  --manifest ...
"""

import argparse
import sys


def main(args=None):
    parser = argparse.ArgumentParser(
        prog="roughcut",
        description="Hand-drawn 2D animation timelines: render, preview, validate.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # Register subcommands. Each delegates to its own module's main().
    subparsers.add_parser("render", help="Render a timeline manifest to video")
    subparsers.add_parser("still", help="Render still frames at given timestamps")
    subparsers.add_parser("validate", help="Validate a timeline manifest")

    # Parse only the subcommand name, pass the rest to the subcommand's parser.
    parsed, remaining = parser.parse_known_args(args)

    if parsed.command is None:
        parser.print_help()
        sys.exit(1)

    if parsed.command == "render":
        from .cli import main as render_main
        render_main(remaining)
    elif parsed.command == "still":
        from .still_cli import main as still_main
        still_main(remaining)
    elif parsed.command == "validate":
        from .cli import main as render_main
        render_main(remaining + ["--validate"])


if __name__ == "__main__":
    main()
