"""Flashcard data model."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping

from flashcard_tools.lookup import ResolutionSource

NO_DEFINITION_FOUND = "No definition found"


@dataclass(slots=True)
class Flashcard:
    """A saved term with its resolved definition and example sentences."""

    term: str
    """Term as entered by the user."""

    definition: str = ""
    reading: str = ""

    source: str = ResolutionSource.NONE.value
    """Resolution source: ``local``, ``remote`` or ``none``."""

    found_for: str = ""
    """Dictionary key or remote headword the definition belongs to."""

    examples: List[str] = field(default_factory=list)
    created_at: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return {
            "term": self.term,
            "definition": self.definition,
            "reading": self.reading,
            "source": self.source,
            "found_for": self.found_for,
            "examples": list(self.examples),
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Flashcard":
        """Create from dictionary."""
        examples = data.get("examples") or []
        return cls(
            term=str(data.get("term", "")),
            definition=str(data.get("definition") or ""),
            reading=str(data.get("reading") or ""),
            source=str(data.get("source") or ResolutionSource.NONE.value),
            found_for=str(data.get("found_for") or ""),
            examples=[str(example) for example in examples if example],
            created_at=float(data.get("created_at") or 0.0),
        )


__all__ = ["Flashcard", "NO_DEFINITION_FOUND"]
