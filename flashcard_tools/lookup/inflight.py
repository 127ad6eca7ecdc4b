"""Collapse concurrent lookups of the same term into one in-flight task."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Dict, Optional, TypeVar

from flashcard_tools import logging_manager as log_mgr

logger = log_mgr.get_logger().getChild("lookup.inflight")

T = TypeVar("T")


class InFlightDeduplicator:
    """Per-term mutex over pending lookups.

    While a lookup for a term is pending, further callers await the same
    task instead of starting new work. The term is removed from the map as
    soon as the task settles, whether it returned a value, None or raised,
    so the next call always starts a fresh attempt.
    """

    def __init__(self) -> None:
        self._pending: Dict[str, asyncio.Task] = {}

    @property
    def pending(self) -> int:
        """Number of terms with an outstanding task."""
        return len(self._pending)

    def is_pending(self, term: str) -> bool:
        return term in self._pending

    async def run(self, term: str, work: Callable[[], Awaitable[T]]) -> T:
        """Run ``work`` for ``term`` unless a run is already pending, then share it."""
        task: Optional[asyncio.Task] = self._pending.get(term)
        if task is not None:
            logger.debug("Joining in-flight lookup for %s", term)
            return await task

        async def _settle() -> T:
            try:
                return await work()
            finally:
                if self._pending.get(term) is asyncio.current_task():
                    del self._pending[term]

        task = asyncio.ensure_future(_settle())
        self._pending[term] = task
        return await task

    def clear(self) -> None:
        """Forget all pending tasks without cancelling them."""
        self._pending.clear()


__all__ = ["InFlightDeduplicator"]
