"""Command-line access to a JSON file: find, add, remove, query, print."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from jsonmapper._value import parse_literal
from jsonmapper.errors import JsonMapError
from jsonmapper.mapper import FormatOptions, JsonMapper

logger = logging.getLogger(__name__)


def set_up_logging(verbose: bool = False) -> None:
    """Send log records to stderr through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jsonmapper",
        description="Read and edit a JSON file with dot/bracket paths",
    )
    parser.add_argument("file", help="JSON file (top-level value must be an object)")
    parser.add_argument(
        "--pretty",
        action="store_true",
        help="Indent printed or written JSON",
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="Indent width used with --pretty (default: 2)",
    )
    parser.add_argument(
        "--sort-keys",
        action="store_true",
        help="Sort object keys in output",
    )
    parser.add_argument(
        "--ascii",
        action="store_true",
        help="Escape non-ASCII characters in output",
    )
    parser.add_argument(
        "-i",
        "--in-place",
        action="store_true",
        help="Write add/remove results back to FILE instead of printing them",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug messages to stderr",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    find_cmd = commands.add_parser("find", help="Print the value at PATH")
    find_cmd.add_argument("path", nargs="?", default="", help="Path (default: root)")

    add_cmd = commands.add_parser("add", help="Set PATH to VALUE ([-1] appends)")
    add_cmd.add_argument("path")
    add_cmd.add_argument("value", help="JSON value; bare text is taken as a string")

    remove_cmd = commands.add_parser("remove", help="Delete the value at PATH")
    remove_cmd.add_argument("path")

    query_cmd = commands.add_parser(
        "query", help="List paths of leaves matching CONDITION"
    )
    query_cmd.add_argument(
        "start", nargs="?", default="", help="Path to search under (default: root)"
    )
    query_cmd.add_argument(
        "condition", help='JSON condition, e.g. \'{"and": [{"gt": 1}, {"lt": 5}]}\''
    )
    query_cmd.add_argument(
        "--ignore-incomparable",
        action="store_true",
        help="Treat non-numeric leaves as non-matching for lt/lte/gt/gte",
    )

    commands.add_parser("print", help="Print the whole document")
    return parser


def _print_value(console: Console, value: object, args: argparse.Namespace) -> None:
    if args.pretty:
        console.print_json(
            data=value,
            indent=args.indent,
            sort_keys=args.sort_keys,
            ensure_ascii=args.ascii,
        )
    else:
        text = json.dumps(
            value,
            separators=(",", ":"),
            sort_keys=args.sort_keys,
            ensure_ascii=args.ascii,
        )
        console.out(text, highlight=False)


def run(args: argparse.Namespace, console: Console) -> None:
    options = FormatOptions(
        indent=args.indent, sort_keys=args.sort_keys, ensure_ascii=args.ascii
    )
    mapper = JsonMapper.from_file(args.file, format_options=options)

    if args.command == "find":
        _print_value(console, mapper.find(args.path), args)
    elif args.command == "print":
        _print_value(console, mapper.data, args)
    elif args.command in ("add", "remove"):
        if args.command == "add":
            mapper.add(args.path, parse_literal(args.value))
        else:
            mapper.remove(args.path)
        if args.in_place:
            mapper.write_file(args.file, pretty=args.pretty)
            logger.info("Updated %s", args.file)
        else:
            _print_value(console, mapper.data, args)
    elif args.command == "query":
        try:
            condition = json.loads(args.condition)
        except json.JSONDecodeError as e:
            raise JsonMapError(f"invalid condition JSON: {e.msg}") from e
        paths = mapper.find_all_with_condition(
            args.start, condition, ignore_incomparable=args.ignore_incomparable
        )
        for path in paths:
            console.out(path, highlight=False)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    set_up_logging(args.verbose)

    if not Path(args.file).exists():
        print(f"jsonmapper: {args.file}: No such file", file=sys.stderr)
        return 1

    try:
        run(args, Console())
    except JsonMapError as e:
        print(f"jsonmapper: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
