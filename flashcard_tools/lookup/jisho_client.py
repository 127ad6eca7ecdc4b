"""Async client for the Jisho word search API."""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, List, Mapping, Optional

import httpx

from flashcard_tools import logging_manager as log_mgr
from flashcard_tools.config_manager import (
    DEFAULT_JISHO_API_BASE,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
)
from flashcard_tools.storage import StorageError

from .cache import LookupCache
from .inflight import InFlightDeduplicator
from .models import DEFINITION_DELIMITER, LookupOutcome, LookupStatus, RemoteResult
from .normalizer import normalize_term

logger = log_mgr.get_logger().getChild("lookup.jisho")


def _first_form(candidate: Mapping[str, Any]) -> Mapping[str, Any]:
    forms = candidate.get("japanese")
    if isinstance(forms, list) and forms and isinstance(forms[0], Mapping):
        return forms[0]
    return {}


def _collect_glosses(candidate: Mapping[str, Any]) -> List[str]:
    senses = candidate.get("senses")
    if not isinstance(senses, list):
        return []
    seen: set[str] = set()
    glosses: List[str] = []
    for sense in senses:
        if not isinstance(sense, Mapping):
            continue
        definitions = sense.get("english_definitions")
        if not isinstance(definitions, list):
            continue
        for gloss in definitions:
            if not gloss:
                continue
            text = str(gloss)
            if text in seen:
                continue
            seen.add(text)
            glosses.append(text)
    return glosses


def parse_jisho_data(data: Any) -> Optional[Dict[str, Any]]:
    """Parse the ``data`` array of a Jisho search response.

    Only the first candidate is used. Its first orthographic form supplies
    the word and reading; the glosses of all its senses are flattened,
    de-duplicated in first-seen order and joined with ``" ; "``.

    Args:
        data: The ``data`` field of the response body.

    Returns:
        Dict with ``word``, ``reading`` and ``definition`` (None when no gloss
        survived), or None when there is no candidate.
    """
    if not isinstance(data, list) or not data:
        return None
    first = data[0]
    if not isinstance(first, Mapping):
        return None

    form = _first_form(first)
    glosses = _collect_glosses(first)
    return {
        "word": str(form.get("word") or ""),
        "reading": str(form.get("reading") or ""),
        "definition": DEFINITION_DELIMITER.join(glosses) if glosses else None,
    }


class JishoClient:
    """Remote lookup client with a TTL cache and in-flight deduplication.

    A fresh cache entry is returned without touching the network. Otherwise
    exactly one request per term is in flight at a time, and its result is
    written back to the cache. Transport failures never raise; they become
    ``ERROR`` outcomes and :meth:`fetch_remote` returns None for them.
    """

    def __init__(
        self,
        cache: LookupCache,
        *,
        deduplicator: Optional[InFlightDeduplicator] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        api_base: str = DEFAULT_JISHO_API_BASE,
        timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
        user_agent: str = DEFAULT_USER_AGENT,
        serve_stale_on_error: bool = True,
    ) -> None:
        """Initialize the client.

        Args:
            cache: Cache of previous remote results.
            deduplicator: Shared in-flight map; a private one is created if omitted.
            http_client: Optional client for connection pooling or testing.
            api_base: Search endpoint URL.
            timeout_seconds: Request timeout for an owned client.
            user_agent: User-Agent header for an owned client.
            serve_stale_on_error: Return an expired cache entry when a refresh fails.
        """
        self._cache = cache
        self._deduplicator = deduplicator or InFlightDeduplicator()
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=timeout_seconds,
            headers={"Accept": "application/json", "User-Agent": user_agent},
        )
        self._api_base = api_base
        self._serve_stale_on_error = serve_stale_on_error

    @property
    def cache(self) -> LookupCache:
        return self._cache

    @property
    def deduplicator(self) -> InFlightDeduplicator:
        return self._deduplicator

    async def fetch_remote(self, term: str) -> Optional[RemoteResult]:
        """Return the remote result for ``term``, or None on miss or failure."""
        outcome = await self.lookup(term)
        if outcome.status is LookupStatus.OK:
            return outcome.result
        return None

    async def lookup(self, term: str) -> LookupOutcome:
        """Resolve ``term`` remotely, returning a typed outcome."""
        normalized = normalize_term(term)
        if not normalized:
            return LookupOutcome.not_found()

        cached = await self._cache.get_entry(normalized)
        if cached is not None and self._cache.is_fresh(cached):
            logger.debug("Cache hit for %s", normalized)
            return LookupOutcome.ok(replace(cached, from_cache=True))

        outcome = await self._deduplicator.run(
            normalized, lambda: self._fetch_and_store(normalized)
        )

        if (
            outcome.status is LookupStatus.ERROR
            and cached is not None
            and self._serve_stale_on_error
        ):
            logger.warning(
                "Refresh failed for %s (%s); serving stale cache entry",
                normalized,
                outcome.error,
                extra={"event": "lookup.remote.stale", "status": outcome.status.value},
            )
            return LookupOutcome.ok(replace(cached, from_cache=True, stale=True))
        return outcome

    async def _fetch_and_store(self, term: str) -> LookupOutcome:
        outcome = await self._request(term)
        if outcome.status is LookupStatus.OK and outcome.result is not None:
            try:
                await self._cache.put(term, outcome.result)
            except StorageError as exc:
                logger.error("Failed to save lookup cache for %s: %s", term, exc)
        return outcome

    async def _request(self, term: str) -> LookupOutcome:
        try:
            response = await self._http.get(self._api_base, params={"keyword": term})
        except httpx.HTTPError as exc:
            logger.warning("Jisho request error for '%s': %s", term, exc)
            return LookupOutcome.failed(f"transport error: {exc}")

        if not response.is_success:
            logger.warning(
                "Jisho API returned non-ok status for '%s': %s %s",
                term,
                response.status_code,
                response.reason_phrase,
            )
            return LookupOutcome.failed(f"HTTP {response.status_code}")

        try:
            body = response.json()
        except ValueError as exc:
            logger.warning("Jisho API returned invalid JSON for '%s': %s", term, exc)
            return LookupOutcome.failed("invalid JSON body")

        data = body.get("data") if isinstance(body, Mapping) else None
        if not isinstance(data, list):
            logger.warning("Jisho API response for '%s' has no data array", term)
            return LookupOutcome.failed("malformed response body")

        parsed = parse_jisho_data(data)
        if parsed is None:
            logger.debug("Jisho has no entry for %s", term)
            return LookupOutcome.not_found()

        result = RemoteResult(
            word=parsed["word"],
            reading=parsed["reading"],
            definition=parsed["definition"],
            fetched_at_ms=self._cache.now(),
        )
        return LookupOutcome.ok(result)

    async def aclose(self) -> None:
        """Release the HTTP client if this instance created it."""
        if self._owns_client:
            await self._http.aclose()

    async def __aenter__(self) -> "JishoClient":
        return self

    async def __aexit__(self, *args) -> None:
        await self.aclose()


__all__ = ["JishoClient", "parse_jisho_data"]
