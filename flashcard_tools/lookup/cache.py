"""Store-backed TTL cache for remote lookup results.

The whole cache lives under a single store key as a mapping of normalized
term to result. Writes read the full record, merge one entry and write the
full record back; there is no concurrency control, so concurrent writers for
different terms may drop each other's entries. Entries can always be
re-fetched, so a lost write only costs a cache miss.
"""

from __future__ import annotations

import time
from typing import Callable, Dict, Optional

from flashcard_tools import logging_manager as log_mgr
from flashcard_tools.config_manager import DEFAULT_CACHE_KEY, DEFAULT_CACHE_TTL_MS
from flashcard_tools.storage import KeyValueStore, StorageError

from .models import RemoteResult

logger = log_mgr.get_logger().getChild("lookup.cache")

Clock = Callable[[], int]


def epoch_ms() -> int:
    """Return the current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


class LookupCache:
    """TTL cache of remote lookup results persisted in a key-value store."""

    def __init__(
        self,
        store: KeyValueStore,
        *,
        ttl_ms: int = DEFAULT_CACHE_TTL_MS,
        key: str = DEFAULT_CACHE_KEY,
        clock: Clock = epoch_ms,
    ) -> None:
        """Initialize the cache.

        Args:
            store: Backing key-value store.
            ttl_ms: Maximum age in milliseconds of a usable entry.
            key: Store key holding the cache record.
            clock: Callable returning epoch milliseconds.
        """
        self._store = store
        self._ttl_ms = ttl_ms
        self._key = key
        self._clock = clock

    @property
    def ttl_ms(self) -> int:
        return self._ttl_ms

    def now(self) -> int:
        return self._clock()

    async def _read_record(self) -> Dict[str, dict]:
        stored = await self._store.get(self._key)
        record = stored.get(self._key)
        if not isinstance(record, dict):
            return {}
        return record

    async def get_entry(self, term: str) -> Optional[RemoteResult]:
        """Return the cached entry for ``term`` regardless of age.

        Read failures are logged and reported as a miss.
        """
        try:
            record = await self._read_record()
        except StorageError as exc:
            logger.warning("Failed to read lookup cache: %s", exc)
            return None
        data = record.get(term)
        if not isinstance(data, dict):
            return None
        try:
            return RemoteResult.from_dict(data)
        except (TypeError, ValueError):
            logger.debug("Ignoring malformed cache entry for %s", term)
            return None

    def is_fresh(self, entry: RemoteResult) -> bool:
        """Return True if ``entry`` is younger than the TTL."""
        return entry.is_fresh(self.now(), self._ttl_ms)

    async def get(self, term: str) -> Optional[RemoteResult]:
        """Return a fresh cached entry for ``term``, or None."""
        entry = await self.get_entry(term)
        if entry is None:
            return None
        if not self.is_fresh(entry):
            logger.debug("Cache entry expired for %s", term)
            return None
        return entry

    async def put(self, term: str, result: RemoteResult) -> None:
        """Merge ``result`` into the cache record under ``term``.

        Raises:
            StorageError: If the store cannot be read or written.
        """
        record = await self._read_record()
        record[term] = result.to_dict()
        await self._store.set({self._key: record})
        logger.debug("Cached remote result for %s", term)

    async def delete(self, term: str) -> bool:
        """Remove ``term`` from the cache.

        Returns:
            True if the entry existed.
        """
        record = await self._read_record()
        if term not in record:
            return False
        del record[term]
        await self._store.set({self._key: record})
        return True

    async def clear(self) -> int:
        """Drop the whole cache record and return the number of entries removed."""
        record = await self._read_record()
        await self._store.remove(self._key)
        logger.info("Cleared %d cache entries", len(record))
        return len(record)

    async def cleanup_expired(self) -> int:
        """Remove expired or unreadable entries.

        Returns:
            Number of entries removed.
        """
        record = await self._read_record()
        now = self.now()
        kept: Dict[str, dict] = {}
        for term, data in record.items():
            if not isinstance(data, dict):
                continue
            try:
                entry = RemoteResult.from_dict(data)
            except (TypeError, ValueError):
                continue
            if entry.is_fresh(now, self._ttl_ms):
                kept[term] = data
        removed = len(record) - len(kept)
        if removed:
            await self._store.set({self._key: kept})
            logger.info("Cleaned up %d expired cache entries", removed)
        return removed


__all__ = ["Clock", "LookupCache", "epoch_ms"]
