"""flashcard-tools: Japanese term lookup and flashcards."""

__version__ = "1.0.0"
