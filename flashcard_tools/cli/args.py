"""Argument parsing helpers for the flashcard-tools CLI."""

from __future__ import annotations

import argparse
from typing import Optional, Sequence


def _add_shared_arguments(parser: argparse.ArgumentParser) -> argparse.ArgumentParser:
    parser.add_argument(
        "--config",
        default=None,
        help=(
            "Path to a configuration override JSON file (defaults to conf/config.local.json "
            "if present)."
        ),
    )
    parser.add_argument(
        "--storage",
        dest="storage_path",
        help="Path to the JSON store holding the dictionary, cache and flashcards.",
    )
    parser.add_argument("--jisho-url", dest="jisho_api_base", help="Override the Jisho search endpoint.")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging output.")
    return parser


def build_cli_parser() -> argparse.ArgumentParser:
    """Build the CLI parser with explicit sub-commands."""

    parser = argparse.ArgumentParser(
        prog="flashcard-tools",
        description="Look up Japanese terms and manage flashcards.",
        allow_abbrev=False,
    )
    _add_shared_arguments(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    lookup_parser = subparsers.add_parser(
        "lookup", help="Resolve a term to its reading and definition", allow_abbrev=False
    )
    lookup_parser.add_argument("term", help="Word or phrase to look up.")
    lookup_parser.add_argument(
        "--json", action="store_true", help="Print the resolution as JSON."
    )

    add_parser = subparsers.add_parser(
        "add", help="Resolve a term and save it as a flashcard", allow_abbrev=False
    )
    add_parser.add_argument("term", help="Word or phrase to save.")
    add_parser.add_argument(
        "--example",
        dest="examples",
        action="append",
        default=[],
        help="Example sentence containing the term (repeatable).",
    )

    subparsers.add_parser("list", help="List saved flashcards", allow_abbrev=False)

    delete_parser = subparsers.add_parser(
        "delete", help="Delete a flashcard by its list position", allow_abbrev=False
    )
    delete_parser.add_argument("index", type=int, help="Zero-based flashcard position.")

    example_parser = subparsers.add_parser(
        "add-example", help="Attach an example sentence to a flashcard", allow_abbrev=False
    )
    example_parser.add_argument("index", type=int, help="Zero-based flashcard position.")
    example_parser.add_argument("sentence", help="Example sentence to attach.")

    subparsers.add_parser(
        "inspect-dict", help="Show the local dictionary size and a sample key", allow_abbrev=False
    )
    subparsers.add_parser(
        "cache-clean", help="Remove expired entries from the lookup cache", allow_abbrev=False
    )
    return parser


def parse_cli_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse ``argv`` with :func:`build_cli_parser`."""

    return build_cli_parser().parse_args(list(argv) if argv is not None else None)


__all__ = ["build_cli_parser", "parse_cli_args"]
