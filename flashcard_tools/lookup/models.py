"""Data models for term resolution.

This module defines the values that flow through the resolution pipeline:
local dictionary entries, remote lookup results and their cache form, and
the final resolution handed back to callers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

DEFINITION_DELIMITER = " ; "


class ResolutionSource(str, Enum):
    """Where a resolution came from."""

    LOCAL = "local"
    REMOTE = "remote"
    NONE = "none"


class LookupStatus(str, Enum):
    """Outcome classification for a single remote lookup attempt."""

    OK = "ok"
    NOT_FOUND = "not_found"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class DictionaryEntry:
    """A local dictionary entry: reading plus ordered, unique definitions."""

    reading: str = ""
    """Kana reading of the term, empty when unknown."""

    definitions: Tuple[str, ...] = ()
    """Definitions in insertion order, without duplicates."""

    @property
    def has_definitions(self) -> bool:
        return bool(self.definitions)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted ``{"reading", "defs"}`` shape."""
        return {"reading": self.reading, "defs": list(self.definitions)}


@dataclass(frozen=True, slots=True)
class LocalMatch:
    """A hit from the local dictionary matcher."""

    found_for: str
    """Dictionary key that matched, which may differ from the looked-up term."""

    reading: str
    definitions: Tuple[str, ...]


@dataclass(frozen=True, slots=True)
class RemoteResult:
    """A parsed remote lookup, as stored in the lookup cache."""

    word: str
    """Headword reported by the remote service (empty for kana-only entries)."""

    reading: str
    """Reading reported by the remote service."""

    definition: Optional[str]
    """Glosses joined with ``" ; "``; None when the entry had no glosses."""

    fetched_at_ms: int
    """Epoch milliseconds when the result was fetched."""

    from_cache: bool = field(default=False, compare=False)
    """True when served from the cache rather than a fresh request."""

    stale: bool = field(default=False, compare=False)
    """True when served from an expired cache entry after a failed refresh."""

    def is_fresh(self, now_ms: int, ttl_ms: int) -> bool:
        """Return True while the result is younger than ``ttl_ms``."""
        return now_ms - self.fetched_at_ms < ttl_ms

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON shape persisted in the cache record."""
        return {
            "word": self.word,
            "reading": self.reading,
            "definition": self.definition,
            "fetched_at_ms": self.fetched_at_ms,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RemoteResult":
        """Create from a persisted cache entry."""
        definition = data.get("definition")
        return cls(
            word=str(data.get("word") or ""),
            reading=str(data.get("reading") or ""),
            definition=str(definition) if definition else None,
            fetched_at_ms=int(data.get("fetched_at_ms") or 0),
        )


@dataclass(frozen=True, slots=True)
class LookupOutcome:
    """Typed result of one remote lookup attempt.

    Transport and parsing failures are carried as ``ERROR`` outcomes instead
    of exceptions so that the client boundary decides how they surface.
    """

    status: LookupStatus
    result: Optional[RemoteResult] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, result: RemoteResult) -> "LookupOutcome":
        return cls(LookupStatus.OK, result=result)

    @classmethod
    def not_found(cls) -> "LookupOutcome":
        return cls(LookupStatus.NOT_FOUND)

    @classmethod
    def failed(cls, error: str) -> "LookupOutcome":
        return cls(LookupStatus.ERROR, error=error)


@dataclass(frozen=True, slots=True)
class ResolutionResult:
    """Final answer for a resolved term."""

    source: ResolutionSource
    found_for: str
    reading: str
    definition: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return {
            "source": self.source.value,
            "found_for": self.found_for,
            "reading": self.reading,
            "definition": self.definition,
        }


__all__ = [
    "DEFINITION_DELIMITER",
    "DictionaryEntry",
    "LocalMatch",
    "LookupOutcome",
    "LookupStatus",
    "RemoteResult",
    "ResolutionResult",
    "ResolutionSource",
]
