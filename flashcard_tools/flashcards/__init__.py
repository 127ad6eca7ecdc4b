"""Flashcards built from resolved terms."""

from .deck import FlashcardDeck
from .models import NO_DEFINITION_FOUND, Flashcard

__all__ = ["Flashcard", "FlashcardDeck", "NO_DEFINITION_FOUND"]
