"""Term resolution: local dictionary first, then the cached remote lookup."""

from __future__ import annotations

import time
from typing import Optional

import httpx

from flashcard_tools import logging_manager as log_mgr
from flashcard_tools.config_manager import DEFAULT_DICTIONARY_KEY, FlashcardToolsSettings
from flashcard_tools.storage import KeyValueStore

from .cache import Clock, LookupCache, epoch_ms
from .dictionary import load_dictionary
from .inflight import InFlightDeduplicator
from .jisho_client import JishoClient
from .local_matcher import match_local
from .models import DEFINITION_DELIMITER, ResolutionResult, ResolutionSource
from .normalizer import normalize_term

logger = log_mgr.get_logger().getChild("lookup.resolver")


class TermResolver:
    """Resolve raw terms to a reading and definition.

    Owns the remote client, its cache and the in-flight map, so independent
    resolvers never share state. Use as an async context manager, or call
    :meth:`aclose` when done.
    """

    def __init__(
        self,
        store: KeyValueStore,
        client: JishoClient,
        *,
        dictionary_key: str = DEFAULT_DICTIONARY_KEY,
    ) -> None:
        self._store = store
        self._client = client
        self._dictionary_key = dictionary_key

    @property
    def client(self) -> JishoClient:
        return self._client

    async def resolve(self, raw_term: str) -> Optional[ResolutionResult]:
        """Resolve ``raw_term``.

        Tries the local dictionary tiers (exact, light-verb stem, longest
        prefix) and only then the remote lookup. Never raises.

        Returns:
            The resolution, or None when nothing was found.
        """
        term = normalize_term(raw_term)
        if not term:
            return None

        with log_mgr.log_context(term=term):
            started = time.perf_counter()
            result = await self._resolve_normalized(term)
            logger.info(
                "Resolved term",
                extra={
                    "event": "lookup.resolve",
                    "source": result.source.value if result else ResolutionSource.NONE.value,
                    "duration_ms": round((time.perf_counter() - started) * 1000, 2),
                },
            )
            return result

    async def _resolve_normalized(self, term: str) -> Optional[ResolutionResult]:
        dictionary = await load_dictionary(self._store, key=self._dictionary_key)
        match = match_local(term, dictionary)
        if match is not None:
            return ResolutionResult(
                source=ResolutionSource.LOCAL,
                found_for=match.found_for,
                reading=match.reading,
                definition=DEFINITION_DELIMITER.join(match.definitions),
            )

        remote = await self._client.fetch_remote(term)
        if remote is not None and remote.definition:
            return ResolutionResult(
                source=ResolutionSource.REMOTE,
                found_for=remote.word or term,
                reading=remote.reading,
                definition=remote.definition,
            )
        return None

    async def aclose(self) -> None:
        """Close the remote client and forget pending lookups."""
        self._client.deduplicator.clear()
        await self._client.aclose()

    async def __aenter__(self) -> "TermResolver":
        return self

    async def __aexit__(self, *args) -> None:
        await self.aclose()


def build_resolver(
    settings: FlashcardToolsSettings,
    store: KeyValueStore,
    *,
    http_client: Optional[httpx.AsyncClient] = None,
    clock: Clock = epoch_ms,
) -> TermResolver:
    """Wire a resolver from settings with a fresh cache and in-flight map."""
    cache = LookupCache(
        store,
        ttl_ms=settings.cache_ttl_ms,
        key=settings.cache_key,
        clock=clock,
    )
    client = JishoClient(
        cache,
        deduplicator=InFlightDeduplicator(),
        http_client=http_client,
        api_base=settings.jisho_api_base,
        timeout_seconds=settings.request_timeout_seconds,
        user_agent=settings.user_agent,
        serve_stale_on_error=settings.serve_stale_on_error,
    )
    return TermResolver(store, client, dictionary_key=settings.dictionary_key)


__all__ = ["TermResolver", "build_resolver"]
