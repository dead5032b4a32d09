"""CLI entry point for quickpick."""

import argparse
import asyncio
import logging
import sys
from dataclasses import replace
from pathlib import Path

from .config import Config, load_config
from .session import QuickInputSession

HELP_EPILOG = """\
examples:
  ls | quickpick --filter cfg          print ranked matches for "cfg"
  quickpick names.txt                  pick a line interactively
  quickpick names.txt -f ap --max 0    print every match, no limit
"""


def read_candidates(source: str | None) -> list[str]:
    """Read non-blank lines from a file, or stdin when source is None or '-'."""
    if source is None or source == "-":
        lines = sys.stdin.read().splitlines()
    else:
        lines = Path(source).read_text(encoding="utf-8").splitlines()
    return [line for line in lines if line.strip()]


def apply_overrides(config: Config, args: argparse.Namespace) -> Config:
    """Apply command line flags on top of file configuration."""
    if args.max is not None:
        config.list = replace(config.list, max_items_to_show=args.max)
    if args.shorter_first:
        config.ranking = replace(config.ranking, prioritize_shorter_values=True)
    if args.primary_first:
        config.ranking = replace(config.ranking, prioritize_primary_match=True)
    return config


async def filter_candidates(candidates: list[str], query: str, config: Config) -> list[str]:
    """Rank candidates for query and return the visible lines."""
    session: QuickInputSession[str] = QuickInputSession(config=config)
    await session.set_items(candidates)
    session.change_input(query)
    session.is_open = True
    return [item.display_text(config.list.show_other_matches) for item in session.visible]


def handle_filter(candidates: list[str], query: str, config: Config) -> int:
    matches = asyncio.run(filter_candidates(candidates, query, config))
    if not matches:
        print(f"No matches for '{query}'", file=sys.stderr)
        return 1
    for line in matches:
        print(line)
    return 0


def handle_pick(candidates: list[str], config: Config) -> int:
    from .tui import run_tui

    if not candidates:
        print("No candidates to pick from", file=sys.stderr)
        return 1

    result = run_tui(candidates, config=config)
    if result is None:
        return 1
    print(result)
    return 0


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Fuzzy picker for lines of text",
        prog="quickpick",
        epilog=HELP_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "file",
        nargs="?",
        help="File with one candidate per line (default: stdin)",
    )
    parser.add_argument(
        "--filter", "-f",
        metavar="QUERY",
        help="Print ranked matches for QUERY instead of opening the picker",
    )
    parser.add_argument(
        "--max", "-m",
        type=int,
        metavar="N",
        help="Maximum number of items to show (0 = no limit)",
    )
    parser.add_argument(
        "--shorter-first",
        action="store_true",
        help="Rank shorter values first",
    )
    parser.add_argument(
        "--primary-first",
        action="store_true",
        help="Rank primary text matches above other field matches",
    )
    parser.add_argument(
        "--config", "-c",
        metavar="PATH",
        help="Config file to use instead of the default search path",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log debug output to stderr",
    )

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
            stream=sys.stderr,
        )

    if args.max is not None and args.max < 0:
        print("Error: --max must be 0 or greater", file=sys.stderr)
        return 2

    try:
        config = load_config(path=Path(args.config) if args.config else None)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    config = apply_overrides(config, args)

    reading_stdin = args.file is None or args.file == "-"
    if args.filter is None and reading_stdin and not sys.stdin.isatty():
        print("Error: interactive mode needs a FILE argument when stdin is piped", file=sys.stderr)
        return 2

    try:
        candidates = read_candidates(args.file)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if args.filter is not None:
        return handle_filter(candidates, args.filter, config)

    return handle_pick(candidates, config)


if __name__ == "__main__":
    sys.exit(main())
