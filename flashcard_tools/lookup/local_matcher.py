"""Tiered matching of a normalized term against the local dictionary."""

from __future__ import annotations

from typing import Mapping, Optional

from .models import DictionaryEntry, LocalMatch

# Conjugation marker of the light verb (e.g. 勉強する -> 勉強).
LIGHT_VERB_SUFFIX = "する"
MIN_PREFIX_LENGTH = 2


def _usable(entry: Optional[DictionaryEntry]) -> bool:
    return entry is not None and entry.has_definitions


def _as_match(key: str, entry: DictionaryEntry) -> LocalMatch:
    return LocalMatch(found_for=key, reading=entry.reading, definitions=entry.definitions)


def match_exact(term: str, dictionary: Mapping[str, DictionaryEntry]) -> Optional[LocalMatch]:
    entry = dictionary.get(term)
    if _usable(entry):
        return _as_match(term, entry)
    return None


def match_light_verb_stem(
    term: str, dictionary: Mapping[str, DictionaryEntry]
) -> Optional[LocalMatch]:
    """Strip the light-verb suffix once and retry an exact match on the stem."""
    if not term.endswith(LIGHT_VERB_SUFFIX):
        return None
    stem = term[: -len(LIGHT_VERB_SUFFIX)]
    if not stem:
        return None
    return match_exact(stem, dictionary)


def match_longest_prefix(
    term: str, dictionary: Mapping[str, DictionaryEntry]
) -> Optional[LocalMatch]:
    """Return the longest usable key of at least two characters prefixing ``term``.

    Equal-length candidates are ordered by the key's natural string order.
    """
    best_key: Optional[str] = None
    for key, entry in dictionary.items():
        if len(key) < MIN_PREFIX_LENGTH or not term.startswith(key) or not _usable(entry):
            continue
        if (
            best_key is None
            or len(key) > len(best_key)
            or (len(key) == len(best_key) and key < best_key)
        ):
            best_key = key
    if best_key is None:
        return None
    return _as_match(best_key, dictionary[best_key])


def match_local(
    term: str, dictionary: Mapping[str, DictionaryEntry]
) -> Optional[LocalMatch]:
    """Match ``term`` against ``dictionary`` using exact, stem and prefix tiers.

    The first tier that produces a usable entry wins. Entries without
    definitions never match. The mapping is only read.

    Args:
        term: Normalized term.
        dictionary: Mapping of normalized term to entry.

    Returns:
        The match, or None when no tier applies.
    """
    if not term or not dictionary:
        return None
    for tier in (match_exact, match_light_verb_stem, match_longest_prefix):
        match = tier(term, dictionary)
        if match is not None:
            return match
    return None


__all__ = [
    "LIGHT_VERB_SUFFIX",
    "MIN_PREFIX_LENGTH",
    "match_exact",
    "match_light_verb_stem",
    "match_local",
    "match_longest_prefix",
]
