"""Dispatch of parsed CLI commands."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Awaitable, Callable, Dict, Optional, Sequence, TextIO

from flashcard_tools import logging_manager as log_mgr
from flashcard_tools.config_manager import (
    ConfigurationError,
    FlashcardToolsSettings,
    load_configuration,
)
from flashcard_tools.flashcards import Flashcard, FlashcardDeck
from flashcard_tools.lookup import (
    TermResolver,
    build_resolver,
    describe_dictionary,
    load_dictionary,
)
from flashcard_tools.storage import JsonFileStore, KeyValueStore, StorageError

from .args import parse_cli_args

logger = log_mgr.get_logger().getChild("cli")

EXIT_OK = 0
EXIT_NOT_FOUND = 1
EXIT_CONFIG_ERROR = 3
EXIT_STORAGE_ERROR = 4


class CommandContext:
    """Objects shared by a single CLI command."""

    def __init__(
        self,
        settings: FlashcardToolsSettings,
        store: KeyValueStore,
        resolver: TermResolver,
        out: TextIO,
    ) -> None:
        self.settings = settings
        self.store = store
        self.resolver = resolver
        self.deck = FlashcardDeck(store, resolver, key=settings.flashcards_key)
        self.out = out

    def echo(self, message: str = "") -> None:
        print(message, file=self.out)


def _format_card(index: int, card: Flashcard) -> str:
    lines = [f"[{index}] {card.term}  (source: {card.source})"]
    if card.reading:
        lines.append(f"    Reading: {card.reading}")
    lines.append(f"    {card.definition or 'No definition'}")
    if card.examples:
        lines.append(f"    Examples: {' / '.join(card.examples)}")
    return "\n".join(lines)


async def _cmd_lookup(ctx: CommandContext, args: argparse.Namespace) -> int:
    result = await ctx.resolver.resolve(args.term)
    if result is None:
        ctx.echo(f"No definition found for {args.term!r}.")
        return EXIT_NOT_FOUND
    if args.json:
        ctx.echo(json.dumps(result.to_dict(), ensure_ascii=False))
        return EXIT_OK
    ctx.echo(f"{result.found_for} [{result.source.value}]")
    if result.reading:
        ctx.echo(f"Reading: {result.reading}")
    ctx.echo(result.definition)
    return EXIT_OK


async def _cmd_add(ctx: CommandContext, args: argparse.Namespace) -> int:
    try:
        card = await ctx.deck.save_flashcard(args.term, args.examples)
    except ValueError as exc:
        ctx.echo(str(exc))
        return EXIT_NOT_FOUND
    ctx.echo(f"Saved flashcard: {card.term} - {card.definition[:120]}")
    return EXIT_OK


async def _cmd_list(ctx: CommandContext, args: argparse.Namespace) -> int:
    cards = await ctx.deck.list_flashcards()
    if not cards:
        ctx.echo("No flashcards yet. Add one with 'flashcard-tools add TERM'.")
        return EXIT_OK
    for index, card in enumerate(cards):
        ctx.echo(_format_card(index, card))
    return EXIT_OK


async def _cmd_delete(ctx: CommandContext, args: argparse.Namespace) -> int:
    removed = await ctx.deck.delete_at(args.index)
    if removed is None:
        ctx.echo(f"No flashcard at position {args.index}.")
        return EXIT_NOT_FOUND
    ctx.echo(f"Deleted flashcard: {removed.term}")
    return EXIT_OK


async def _cmd_add_example(ctx: CommandContext, args: argparse.Namespace) -> int:
    card = await ctx.deck.add_example(args.index, args.sentence)
    if card is None:
        ctx.echo(f"No flashcard at position {args.index}.")
        return EXIT_NOT_FOUND
    ctx.echo(_format_card(args.index, card))
    return EXIT_OK


async def _cmd_inspect_dict(ctx: CommandContext, args: argparse.Namespace) -> int:
    dictionary = await load_dictionary(ctx.store, key=ctx.settings.dictionary_key)
    summary = describe_dictionary(dictionary)
    if not summary.key_count:
        ctx.echo("No dictionary keys present.")
        return EXIT_OK
    ctx.echo(f"Dictionary keys: {summary.key_count}")
    ctx.echo(f"Sample key: {summary.sample_key}")
    return EXIT_OK


async def _cmd_cache_clean(ctx: CommandContext, args: argparse.Namespace) -> int:
    removed = await ctx.resolver.client.cache.cleanup_expired()
    ctx.echo(f"Removed {removed} expired cache entries.")
    return EXIT_OK


_COMMANDS: Dict[str, Callable[[CommandContext, argparse.Namespace], Awaitable[int]]] = {
    "lookup": _cmd_lookup,
    "add": _cmd_add,
    "list": _cmd_list,
    "delete": _cmd_delete,
    "add-example": _cmd_add_example,
    "inspect-dict": _cmd_inspect_dict,
    "cache-clean": _cmd_cache_clean,
}


async def run_command(
    args: argparse.Namespace,
    settings: FlashcardToolsSettings,
    *,
    store: Optional[KeyValueStore] = None,
    resolver: Optional[TermResolver] = None,
    out: Optional[TextIO] = None,
) -> int:
    """Execute the parsed command against ``store``."""

    store = store or JsonFileStore(Path(settings.storage_path).expanduser())
    resolver = resolver or build_resolver(settings, store)
    async with resolver:
        ctx = CommandContext(settings, store, resolver, out or sys.stdout)
        handler = _COMMANDS[args.command]
        return await handler(ctx, args)


def run_cli(argv: Optional[Sequence[str]] = None) -> int:
    """Parse ``argv``, load configuration and run the selected command."""

    args = parse_cli_args(argv)
    try:
        settings = load_configuration(
            args.config,
            overrides={
                "storage_path": args.storage_path,
                "jisho_api_base": args.jisho_api_base,
                "debug": True if args.debug else None,
            },
        )
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    log_mgr.setup_logging(
        logging.DEBUG if settings.debug else logging.WARNING,
        log_file=Path(settings.log_file).expanduser() if settings.log_file else None,
    )

    try:
        return asyncio.run(run_command(args, settings))
    except StorageError as exc:
        logger.error("Storage failure: %s", exc)
        print(f"Storage error: {exc}", file=sys.stderr)
        return EXIT_STORAGE_ERROR


__all__ = ["run_cli", "run_command"]
