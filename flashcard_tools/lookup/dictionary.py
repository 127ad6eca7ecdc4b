"""Loading and inspecting the local dictionary held in the key-value store."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional

from flashcard_tools import logging_manager as log_mgr
from flashcard_tools.config_manager import DEFAULT_DICTIONARY_KEY
from flashcard_tools.storage import KeyValueStore, StorageError

from .models import DictionaryEntry

logger = log_mgr.get_logger().getChild("lookup.dictionary")


@dataclass(frozen=True, slots=True)
class DictionarySummary:
    """Key count and a sample key, for quick inspection."""

    key_count: int
    sample_key: Optional[str]


def _unique_definitions(values: Iterable[Any]) -> List[str]:
    seen: set[str] = set()
    unique: List[str] = []
    for value in values:
        if value is None:
            continue
        text = str(value)
        if not text or text in seen:
            continue
        seen.add(text)
        unique.append(text)
    return unique


def parse_entry(data: Any) -> DictionaryEntry:
    """Coerce a stored ``{"reading", "defs"}`` object into a DictionaryEntry.

    A scalar ``defs`` value becomes a one-item list and a missing one becomes
    empty. Duplicate definitions are dropped, keeping first-seen order.
    """
    if not isinstance(data, Mapping):
        return DictionaryEntry()
    raw_defs = data.get("defs")
    if isinstance(raw_defs, (list, tuple)):
        definitions = _unique_definitions(raw_defs)
    elif raw_defs:
        definitions = _unique_definitions([raw_defs])
    else:
        definitions = []
    return DictionaryEntry(
        reading=str(data.get("reading") or ""),
        definitions=tuple(definitions),
    )


def parse_dictionary(raw: Any) -> Dict[str, DictionaryEntry]:
    """Convert the stored dictionary mapping into typed entries."""
    if not isinstance(raw, Mapping):
        return {}
    return {str(term): parse_entry(entry) for term, entry in raw.items() if term}


async def load_dictionary(
    store: KeyValueStore,
    *,
    key: str = DEFAULT_DICTIONARY_KEY,
) -> Dict[str, DictionaryEntry]:
    """Read the local dictionary from ``store``.

    A store failure is logged and yields an empty dictionary, so resolution
    falls through to the remote tier.
    """
    try:
        stored = await store.get(key)
    except StorageError as exc:
        logger.warning("Failed to load local dictionary: %s", exc)
        return {}
    return parse_dictionary(stored.get(key))


def describe_dictionary(dictionary: Mapping[str, Any]) -> DictionarySummary:
    """Summarize a dictionary as its key count and first key."""
    sample = next(iter(dictionary), None)
    return DictionarySummary(key_count=len(dictionary), sample_key=sample)


__all__ = [
    "DictionarySummary",
    "describe_dictionary",
    "load_dictionary",
    "parse_dictionary",
    "parse_entry",
]
