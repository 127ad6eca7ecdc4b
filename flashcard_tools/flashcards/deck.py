"""Flashcard deck persisted in the key-value store."""

from __future__ import annotations

from typing import List, Optional, Sequence

from flashcard_tools import logging_manager as log_mgr
from flashcard_tools.config_manager import DEFAULT_FLASHCARDS_KEY
from flashcard_tools.lookup import TermResolver
from flashcard_tools.storage import KeyValueStore

from .models import NO_DEFINITION_FOUND, Flashcard

logger = log_mgr.get_logger().getChild("flashcards")


class FlashcardDeck:
    """Ordered list of flashcards stored under a single store key.

    Cards are addressed by their zero-based position in the list.
    """

    def __init__(
        self,
        store: KeyValueStore,
        resolver: TermResolver,
        *,
        key: str = DEFAULT_FLASHCARDS_KEY,
    ) -> None:
        self._store = store
        self._resolver = resolver
        self._key = key

    async def _load(self) -> List[Flashcard]:
        stored = await self._store.get(self._key)
        raw_cards = stored.get(self._key)
        if not isinstance(raw_cards, list):
            return []
        cards = [Flashcard.from_dict(card) for card in raw_cards if isinstance(card, dict)]
        skipped = len(raw_cards) - len(cards)
        if skipped:
            logger.warning(
                "Skipping %d malformed flashcard entries; they are dropped on the next save",
                skipped,
                extra={"event": "flashcards.malformed", "status": "skipped"},
            )
        return cards

    async def _save(self, cards: Sequence[Flashcard]) -> None:
        await self._store.set({self._key: [card.to_dict() for card in cards]})

    async def list_flashcards(self) -> List[Flashcard]:
        return await self._load()

    async def save_flashcard(
        self,
        term: str,
        examples: Sequence[str] = (),
        *,
        reading: str = "",
    ) -> Flashcard:
        """Resolve ``term`` and append it to the deck.

        Args:
            term: Term to save; surrounding whitespace is trimmed.
            examples: Example sentences to attach.
            reading: Caller-provided reading, kept over the resolved one.

        Returns:
            The saved card.

        Raises:
            ValueError: If ``term`` is empty.
        """
        trimmed = (term or "").strip()
        if not trimmed:
            raise ValueError("Flashcard term must not be empty")

        card = Flashcard(
            term=trimmed,
            reading=reading,
            examples=[example for example in examples if example],
        )
        match = await self._resolver.resolve(trimmed)
        if match is not None:
            card.definition = match.definition
            card.reading = card.reading or match.reading
            card.source = match.source.value
            card.found_for = match.found_for or trimmed
        else:
            card.definition = NO_DEFINITION_FOUND

        cards = await self._load()
        cards.append(card)
        await self._save(cards)
        logger.info(
            "Saved flashcard %s",
            card.term,
            extra={"event": "flashcards.saved", "source": card.source},
        )
        return card

    async def delete_at(self, index: int) -> Optional[Flashcard]:
        """Delete the card at ``index``; returns it, or None when out of range."""
        cards = await self._load()
        if index < 0 or index >= len(cards):
            return None
        removed = cards.pop(index)
        await self._save(cards)
        return removed

    async def add_example(self, index: int, sentence: str) -> Optional[Flashcard]:
        """Append an example sentence to the card at ``index``."""
        text = (sentence or "").strip()
        cards = await self._load()
        if not text or index < 0 or index >= len(cards):
            return None
        cards[index].examples.append(text)
        await self._save(cards)
        return cards[index]

    async def clear(self) -> int:
        """Remove every card and return how many there were."""
        cards = await self._load()
        await self._store.remove(self._key)
        return len(cards)


__all__ = ["FlashcardDeck"]
