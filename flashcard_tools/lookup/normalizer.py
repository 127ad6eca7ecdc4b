"""Canonical key form for lookup terms."""

from __future__ import annotations

import re
import unicodedata
from typing import Any

_WHITESPACE_PATTERN = re.compile(r"[\s\u3000\ufeff]+")


def normalize_term(raw: Any) -> str:
    """Normalize a raw term for dictionary and cache lookup.

    Applies NFKC normalization so full-width and half-width forms collapse
    to one key, then removes every whitespace character, including the
    ideographic space and the byte-order mark. Empty or missing input
    yields ``""``, which callers treat as "no lookup possible". The function
    is idempotent.

    Args:
        raw: User supplied text. Non-string values are coerced with ``str``.

    Returns:
        Normalized term.
    """
    if raw is None:
        return ""
    text = raw if isinstance(raw, str) else str(raw)
    if not text:
        return ""

    normalized = unicodedata.normalize("NFKC", text)
    # Dropping whitespace can join a base character with a combining mark,
    # so repeat until stable.
    while True:
        collapsed = unicodedata.normalize("NFKC", _WHITESPACE_PATTERN.sub("", normalized))
        if collapsed == normalized:
            return collapsed
        normalized = collapsed


__all__ = ["normalize_term"]
