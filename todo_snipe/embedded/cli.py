"""
cli.py - The command behind todo-embed.

Scans folders for TODO/FIXME-style markers and prints the embedded block,
or writes it into a file with -o. Progress logging goes to stderr so stdout
stays clean for piping.
"""

import argparse
import json
import logging
import sys

from .config import load_config
from .errors import EmbeddedError
from .file_source import write_block
from .sweep import MarkerSweep


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="todo-embed",
        description="Embedded todos: collect code markers into one block",
        epilog="Examples:\n"
        "  todo-embed                              # Scan the current folder\n"
        "  todo-embed src/ docs/ --group-by-file   # Several roots, grouped by file\n"
        "  todo-embed . -o TODO --config todo.json # Write the block into a file\n"
        "  todo-embed . -r '// (TODO|FIXME):?(.*)' # Custom marker pattern\n",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("roots", nargs="*", default=["."], help="Folders to scan")
    parser.add_argument("-r", "--regex", default=None, help="Marker regex, group 1 is the type")
    parser.add_argument("-i", "--include", action="append", default=None, help="Include glob (repeatable)")
    parser.add_argument("-x", "--exclude", action="append", default=None, help="Exclude glob (repeatable)")
    parser.add_argument("-n", "--limit", type=int, default=None, help="Max files to scan (0 or less = no cap)")
    parser.add_argument("-g", "--group-by-file", action="store_true", default=None, help="One group line per file")
    parser.add_argument("--indent", default=None, help="Indentation string")
    parser.add_argument("--box", default=None, help="Bullet symbol")
    parser.add_argument("-c", "--config", default=None, help="JSON settings file")
    parser.add_argument("-o", "--output", default=None, help="Write the block to this file")
    parser.add_argument("--json", action="store_true", help="JSON output")
    parser.add_argument("--no-rg", action="store_true", help="Don't pre-filter with ripgrep")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress to stderr")
    return parser


def main(argv: list[str] | None = None) -> int:
    """todo-embed entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s - %(levelname)s - %(message)s",
            stream=sys.stderr,
        )

    try:
        config = load_config(args.config)
    except EmbeddedError as e:
        print(f"todo-embed: {e}", file=sys.stderr)
        return 2

    # Flags win over the settings file
    if args.regex is not None:
        config.regex = args.regex
    if args.include is not None:
        config.include = args.include
    if args.exclude is not None:
        config.exclude = args.exclude
    if args.limit is not None:
        config.limit = args.limit
    if args.group_by_file:
        config.group_by_file = True
    if args.indent is not None:
        config.indentation = args.indent
    if args.box is not None:
        config.bullet_symbol = args.box
    if args.no_rg:
        config.use_ripgrep = False

    sweep = MarkerSweep(args.roots, config)

    try:
        result = sweep.scan()
    except EmbeddedError as e:
        print(f"todo-embed: {e}", file=sys.stderr)
        return 2

    if args.json:
        output = json.dumps(result.to_dict(), indent=2, ensure_ascii=False) + "\n"
    else:
        output = result.render(config.render_config)

    if args.output:
        path = write_block(args.output, output)
        if args.verbose:
            print(f"Wrote {result.total_occurrences} markers to {path}", file=sys.stderr)
    else:
        sys.stdout.write(output)

    return 0


if __name__ == "__main__":
    sys.exit(main())
