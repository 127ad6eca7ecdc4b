from __future__ import annotations

import asyncio

import pytest

from flashcard_tools.lookup import InFlightDeduplicator


def test_concurrent_callers_share_one_invocation() -> None:
    dedup = InFlightDeduplicator()
    calls = []

    async def work():
        calls.append(1)
        await asyncio.sleep(0.01)
        return {"value": len(calls)}

    async def scenario():
        first, second, third = await asyncio.gather(
            dedup.run("食べる", work),
            dedup.run("食べる", work),
            dedup.run("食べる", work),
        )
        return first, second, third

    first, second, third = asyncio.run(scenario())

    assert len(calls) == 1
    assert first is second is third
    assert dedup.pending == 0


def test_different_terms_run_independently() -> None:
    dedup = InFlightDeduplicator()
    seen = []

    async def make_work(term):
        seen.append(term)
        await asyncio.sleep(0)
        return term

    async def scenario():
        return await asyncio.gather(
            dedup.run("a", lambda: make_work("a")),
            dedup.run("b", lambda: make_work("b")),
        )

    assert asyncio.run(scenario()) == ["a", "b"]
    assert sorted(seen) == ["a", "b"]


def test_entry_is_cleared_after_settling_and_work_reruns() -> None:
    dedup = InFlightDeduplicator()
    calls = []

    async def work():
        calls.append(1)
        return None

    async def scenario():
        first = await dedup.run("term", work)
        assert not dedup.is_pending("term")
        second = await dedup.run("term", work)
        return first, second

    assert asyncio.run(scenario()) == (None, None)
    assert len(calls) == 2


def test_failures_are_shared_and_cleared() -> None:
    dedup = InFlightDeduplicator()
    calls = []

    async def work():
        calls.append(1)
        await asyncio.sleep(0.01)
        raise RuntimeError("boom")

    async def scenario():
        results = await asyncio.gather(
            dedup.run("term", work),
            dedup.run("term", work),
            return_exceptions=True,
        )
        return results

    results = asyncio.run(scenario())

    assert len(calls) == 1
    assert all(isinstance(result, RuntimeError) for result in results)
    assert dedup.pending == 0


def test_pending_is_visible_while_running() -> None:
    dedup = InFlightDeduplicator()
    started = []

    async def work():
        started.append(dedup.is_pending("term"))
        await asyncio.sleep(0)
        return "done"

    assert asyncio.run(dedup.run("term", work)) == "done"
    assert started == [True]
    assert dedup.pending == 0


def test_awaiting_after_failure_raises() -> None:
    dedup = InFlightDeduplicator()

    async def work():
        raise ValueError("bad payload")

    with pytest.raises(ValueError):
        asyncio.run(dedup.run("term", work))
    assert dedup.pending == 0
